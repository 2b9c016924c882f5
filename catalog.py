# catalog.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from alphabets import ALPHABETS, Mode, coerce_mode
from debug import Debug
from errors import ConfigurationError
from keyboard_and_plugboard import Keyboard
from rotor_and_reflector import Reflector, Rotor

debug = Debug()
debug.disable("catalog")


class RotorType(str, Enum):
    I = "I"
    II = "II"
    III = "III"
    IV = "IV"
    V = "V"
    VI = "VI"
    VII = "VII"
    K_I = "K-I"
    K_II = "K-II"
    K_III = "K-III"


def coerce_rotor_type(value: RotorType | str) -> RotorType:
    if isinstance(value, RotorType):
        return value
    try:
        return RotorType(str(value).strip().upper().replace("_", "-"))
    except ValueError:
        raise ConfigurationError(f"Unknown rotor type {value!r}") from None


# ────────────────────────────────────────────────────────────────────────
#  1. Wheel database  (wiring, notches) per alphabet mode
# ────────────────────────────────────────────────────────────────────────

_T = RotorType

ROTOR_TABLE: Dict[Mode, Dict[RotorType, Tuple[str, str]]] = {
    Mode.LATIN: {
        _T.I:     ("EKMFLGDQVZNTOWYHXUSPAIBRCJ", "Q"),
        _T.II:    ("AJDKSIRUXBLHWTMCQGZNPYFVOE", "E"),
        _T.III:   ("BDFHJLCPRTXVZNYEIWGAKMUSQO", "V"),
        _T.IV:    ("ESOVPZJAYQUIRHXLNFTGKDCMWB", "J"),
        _T.V:     ("VZBRGITYUPSDNHLXAWMJQOFECK", "Z"),
        _T.VI:    ("JPGVOUMFYQBENHZRDKASXLICTW", "ZM"),   # M3 only
        _T.VII:   ("NZJHGRCXMYSWBOUFAIVLPEKQDT", "ZM"),   # M3 only
        # Swiss Enigma K
        _T.K_I:   ("PEZUOHXSCVFMTBGLRINQJWAYDK", "Y"),
        _T.K_II:  ("ZOUESYDKFWPCIQXHMVBLGNJRAT", "E"),
        _T.K_III: ("EHRVXGAOBQUSIMZFLYNWKTPDJC", "N"),
    },
    Mode.CYRILLIC: {
        _T.I:     ("ФҲГЖДЛОРПАВЫЯЧСМИТЬБЮЭЪЁНКУЦЙЗХЩЎҒҚ.ШЕ", "Р"),
        _T.II:    ("ЯЧСМИТЬБЮФЫВАПРОЛДЖЭЪЁНКУЦЙЗХГШЩ.ЎҚҒҲЕ", "Ж"),
        _T.III:   ("ЙЦУКЕНГШЩЗХЪФЫВАПРОЛДЖЭЯЧСМИТЬБЮ.ЎҚҒҲЁ", "Я"),
        _T.IV:    ("ЭЖДЛОРПАВЫФЯЧСМИТЬБЮ.ҲГНКУЦЙЗХЎҒҚШЩЕЪЁ", "К"),
        _T.V:     ("ПРОЛДЖЭЯЧСМИТЬБЮФЫВА.ЙЦУКЕНГШЩЗХЪЁЎҚҒҲ", "М"),
        _T.VI:    ("БМРЩТЗЭ.ШГЙЁЦОЧВҲЛДҚИЖФЪХСЕЫАЬКНҒПЮЯУЎ", "АП"),
        _T.VII:   ("СЗКР.ЕГҚПНЯЫДФВЮЬЁЩЧҒҲИЭОЦТЖЙАЎШЛЪХБУМ", "АП"),
    },
}

REFLECTOR_TABLE: Dict[Mode, Dict[str, str]] = {
    Mode.LATIN: {
        "B": "YRUHQSLDPXNGOKMIEBFZCWVJAT",
        "C": "FVPJIAOYEDRZXWGCTKUQSBNMHL",
    },
    Mode.CYRILLIC: {
        "B": ".ҲҒҚЎЯЮЭЬЫЪЩШЧЦХФУТСРПОНМЛКЙИЗЖЁЕДГВБА",
        "C": "БАГВЕДЖЁИЗКЙМЛОНРПТСФУЦХШЧЪЩЬЫЮЭЎЯҒҚ.Ҳ",
    },
}


# ────────────────────────────────────────────────────────────────────────
#  2. Machine models
# ────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class MachineSpec:
    id: str
    name: str
    description: str
    mode: Mode
    allowed_rotors: Tuple[RotorType, ...]
    allowed_reflectors: Tuple[str, ...]


_STANDARD = (_T.I, _T.II, _T.III, _T.IV, _T.V)

MACHINE_SPECS: Dict[str, MachineSpec] = {
    spec.id: spec
    for spec in (
        MachineSpec(
            id="enigma-i",
            name="Enigma I (Wehrmacht)",
            description="Standard German Army/Air Force model used during WWII.",
            mode=Mode.LATIN,
            allowed_rotors=_STANDARD,
            allowed_reflectors=("B", "C"),
        ),
        MachineSpec(
            id="enigma-m3",
            name="Enigma M3 (Kriegsmarine)",
            description="Naval model with additional rotors (VI, VII) for higher security.",
            mode=Mode.LATIN,
            allowed_rotors=_STANDARD + (_T.VI, _T.VII),
            allowed_reflectors=("B", "C"),
        ),
        MachineSpec(
            id="enigma-k",
            name="Enigma K (Commercial)",
            description="Commercial variant with distinct internal wiring.",
            mode=Mode.LATIN,
            allowed_rotors=(_T.K_I, _T.K_II, _T.K_III),
            allowed_reflectors=("B", "C"),
        ),
        MachineSpec(
            id="enigma-uz",
            name="Enigma UZ (Maxsus)",
            description="Modern 38-letter variant adapted for Uzbek Cyrillic alphabet.",
            mode=Mode.CYRILLIC,
            allowed_rotors=_STANDARD,
            allowed_reflectors=("B", "C"),
        ),
    )
}

DEFAULT_MODEL = "enigma-i"
DEFAULT_MODEL_FOR_MODE: Dict[Mode, str] = {
    Mode.LATIN: "enigma-i",
    Mode.CYRILLIC: "enigma-uz",
}


# ────────────────────────────────────────────────────────────────────────
#  3. Build & validate the wheel objects once, at import
# ────────────────────────────────────────────────────────────────────────


def _build() -> tuple[
    Dict[Tuple[Mode, RotorType], Rotor],
    Dict[Tuple[Mode, str], Reflector],
    Dict[Mode, Keyboard],
]:
    rotors: Dict[Tuple[Mode, RotorType], Rotor] = {}
    reflectors: Dict[Tuple[Mode, str], Reflector] = {}
    keyboards: Dict[Mode, Keyboard] = {}

    for mode, alphabet in ALPHABETS.items():
        keyboards[mode] = Keyboard(alphabet)
        for rtype, (wiring, notches) in ROTOR_TABLE[mode].items():
            rotors[mode, rtype] = Rotor(wiring, notches, alphabet, name=rtype.value)
        for rid, wiring in REFLECTOR_TABLE[mode].items():
            reflectors[mode, rid] = Reflector(wiring, alphabet, name=rid)

    for spec in MACHINE_SPECS.values():
        if not spec.allowed_rotors or not spec.allowed_reflectors:
            raise ConfigurationError(f"Model {spec.id}: empty rotor or reflector set")
        for rtype in spec.allowed_rotors:
            if (spec.mode, rtype) not in rotors:
                raise ConfigurationError(f"Model {spec.id}: no {spec.mode.value} wiring for rotor {rtype.value}")
        for rid in spec.allowed_reflectors:
            if (spec.mode, rid) not in reflectors:
                raise ConfigurationError(f"Model {spec.id}: no {spec.mode.value} reflector {rid}")

    debug.log("catalog", f"{len(rotors)} rotors, {len(reflectors)} reflectors, {len(MACHINE_SPECS)} models")
    return rotors, reflectors, keyboards


_ROTORS, _REFLECTORS, _KEYBOARDS = _build()


# ────────────────────────────────────────────────────────────────────────
#  4. Lookups
# ────────────────────────────────────────────────────────────────────────


def rotor(mode: Mode | str, rotor_type: RotorType | str) -> Rotor:
    key = (coerce_mode(mode), coerce_rotor_type(rotor_type))
    try:
        return _ROTORS[key]
    except KeyError:
        raise ConfigurationError(f"Rotor {key[1].value} does not exist in {key[0].value} mode") from None


def reflector_wheel(mode: Mode | str, reflector_id: str) -> Reflector:
    key = (coerce_mode(mode), str(reflector_id).upper())
    try:
        return _REFLECTORS[key]
    except KeyError:
        raise ConfigurationError(f"Reflector {reflector_id!r} does not exist in {key[0].value} mode") from None


def keyboard(mode: Mode | str) -> Keyboard:
    return _KEYBOARDS[coerce_mode(mode)]


def wiring(mode: Mode | str, rotor_type: RotorType | str) -> str:
    return rotor(mode, rotor_type).wiring


def notch(mode: Mode | str, rotor_type: RotorType | str) -> frozenset[str]:
    return rotor(mode, rotor_type).notches


def reflector(mode: Mode | str, reflector_id: str) -> str:
    return reflector_wheel(mode, reflector_id).wiring


def spec(model: str) -> MachineSpec:
    try:
        return MACHINE_SPECS[str(model).lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown model {model!r}. Expected one of {list(MACHINE_SPECS)}"
        ) from None


def list_models() -> list[MachineSpec]:
    return list(MACHINE_SPECS.values())


__all__ = [
    "RotorType",
    "MachineSpec",
    "MACHINE_SPECS",
    "DEFAULT_MODEL",
    "DEFAULT_MODEL_FOR_MODE",
    "coerce_rotor_type",
    "rotor",
    "reflector_wheel",
    "keyboard",
    "wiring",
    "notch",
    "reflector",
    "spec",
    "list_models",
]
