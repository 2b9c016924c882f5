# machine_config.py
from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Tuple

import catalog
from alphabets import Mode, coerce_mode, resolve
from catalog import RotorType, coerce_rotor_type
from debug import Debug
from errors import ConfigurationError, InvalidPairError
from keyboard_and_plugboard import Plugboard

debug = Debug()
debug.disable("config")


# ────────────────────────────────────────────────────────────────────────
#  0. Value types
# ────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class RotorSettings:
    type: RotorType
    position: int = 0
    ring_setting: int = 0

    def offset(self, size: int) -> int:
        """Distance between the window letter and the wiring core."""
        return (self.position - self.ring_setting) % size

    def advanced(self, size: int) -> "RotorSettings":
        return replace(self, position=(self.position + 1) % size)


@dataclass(frozen=True, slots=True)
class MachineConfig:
    """Full machine state. Each keypress yields a new one."""

    model: str
    mode: Mode
    rotors: Tuple[RotorSettings, RotorSettings, RotorSettings]   # left, middle, right
    reflector: str
    plugboard: Plugboard = field(default_factory=Plugboard)

    @property
    def positions(self) -> Tuple[int, int, int]:
        return tuple(r.position for r in self.rotors)  # type: ignore[return-value]

    def window(self) -> str:
        """The three letters visible through the rotor windows."""
        alphabet, _ = resolve(self.mode)
        return "".join(alphabet[r.position] for r in self.rotors)


# ────────────────────────────────────────────────────────────────────────
#  1. Defaults & validation
# ────────────────────────────────────────────────────────────────────────


def default_config(model: str = catalog.DEFAULT_MODEL) -> MachineConfig:
    """Slot i gets the i-th allowed rotor; everything else at zero."""
    spec = catalog.spec(model)
    allowed = spec.allowed_rotors
    rotors = tuple(RotorSettings(allowed[i % len(allowed)]) for i in range(3))
    return MachineConfig(
        model=spec.id,
        mode=spec.mode,
        rotors=rotors,  # type: ignore[arg-type]
        reflector=spec.allowed_reflectors[0],
        plugboard=Plugboard(),
    )


def validate(config: MachineConfig) -> MachineConfig:
    """Raise ConfigurationError unless *config* fits its model; return it."""
    spec = catalog.spec(config.model)
    if config.mode is not spec.mode:
        raise ConfigurationError(f"Model {spec.id} runs in {spec.mode.value} mode, not {config.mode.value}")

    alphabet, size = resolve(config.mode)
    if len(config.rotors) != 3:
        raise ConfigurationError(f"Expected 3 rotors, got {len(config.rotors)}")
    for slot, r in zip(("left", "middle", "right"), config.rotors):
        if r.type not in spec.allowed_rotors:
            raise ConfigurationError(f"Rotor {r.type.value} ({slot}) is not fitted to {spec.name}")
        for label, value in (("position", r.position), ("ring setting", r.ring_setting)):
            if not isinstance(value, int) or not 0 <= value < size:
                raise ConfigurationError(f"Rotor {slot} {label} {value!r} out of range 0–{size - 1}")

    if config.reflector not in spec.allowed_reflectors:
        raise ConfigurationError(f"Reflector {config.reflector!r} is not fitted to {spec.name}")

    stray = set(config.plugboard) - set(alphabet)
    if stray:
        raise ConfigurationError(f"Plugboard symbols {sorted(stray)} are not in the {config.mode.value} alphabet")
    return config


# ────────────────────────────────────────────────────────────────────────
#  2. Editing helpers (every one returns a new config)
# ────────────────────────────────────────────────────────────────────────


def _plug_symbol(config: MachineConfig, symbol: str) -> str:
    alphabet, _ = resolve(config.mode)
    upper = symbol.upper()
    if len(upper) != 1 or upper not in alphabet:
        raise InvalidPairError(f"Symbol {symbol!r} not in alphabet")
    return upper


def set_plugboard_pair(config: MachineConfig, a: str, b: str) -> MachineConfig:
    a, b = _plug_symbol(config, a), _plug_symbol(config, b)
    if a == b:
        raise InvalidPairError(f"Plugboard cannot map a symbol to itself: {a}", pair=(a, b))
    return replace(config, plugboard=config.plugboard.connect(a, b))


def clear_plugboard_pair(config: MachineConfig, symbol: str) -> MachineConfig:
    board = config.plugboard.disconnect(symbol.upper())
    if board is config.plugboard:
        return config
    return replace(config, plugboard=board)


def set_rotor(
    config: MachineConfig,
    slot: int,
    rotor_type: RotorType | str | None = None,
    *,
    position: int | None = None,
    ring_setting: int | None = None,
) -> MachineConfig:
    """Swap the wheel in *slot* (0 = left) and/or turn it; validated."""
    if not 0 <= slot < len(config.rotors):
        raise ConfigurationError(f"No rotor slot {slot}; slots run 0 (left) to 2 (right)")
    current = config.rotors[slot]
    changed = RotorSettings(
        type=current.type if rotor_type is None else coerce_rotor_type(rotor_type),
        position=current.position if position is None else position,
        ring_setting=current.ring_setting if ring_setting is None else ring_setting,
    )
    rotors = list(config.rotors)
    rotors[slot] = changed
    return validate(replace(config, rotors=tuple(rotors)))


def set_reflector(config: MachineConfig, reflector_id: str) -> MachineConfig:
    return validate(replace(config, reflector=str(reflector_id).upper()))


def switch_model(config: MachineConfig, model: str) -> MachineConfig:
    """Move to another model, keeping whatever wheels it also accepts.

    A wheel the new model lacks gives way to that slot's default wheel.
    Positions and rings only survive within the same alphabet.  The
    plugboard is always emptied.
    """
    spec = catalog.spec(model)
    same_alphabet = spec.mode is config.mode
    allowed = spec.allowed_rotors
    rotors = tuple(
        (r if same_alphabet else RotorSettings(r.type))
        if r.type in allowed
        else RotorSettings(allowed[slot % len(allowed)])
        for slot, r in enumerate(config.rotors)
    )
    reflector = config.reflector if config.reflector in spec.allowed_reflectors else spec.allowed_reflectors[0]
    debug.log("config", f"model {config.model} -> {spec.id}")
    return MachineConfig(
        model=spec.id,
        mode=spec.mode,
        rotors=rotors,  # type: ignore[arg-type]
        reflector=reflector,
        plugboard=Plugboard(),
    )


# ────────────────────────────────────────────────────────────────────────
#  3. Records & JSON files
# ────────────────────────────────────────────────────────────────────────


def to_record(config: MachineConfig) -> dict[str, Any]:
    return {
        "model": config.model,
        "mode": config.mode.value,
        "rotors": [
            {"type": r.type.value, "position": r.position, "ring_setting": r.ring_setting}
            for r in config.rotors
        ],
        "reflector": config.reflector,
        "plugboard": dict(config.plugboard),
    }


def parse_record(record: Mapping[str, Any]) -> MachineConfig:
    """Strict inverse of `to_record`; any defect raises ConfigurationError."""
    if not isinstance(record, Mapping):
        raise ConfigurationError(f"Config record must be an object, got {type(record).__name__}")

    required = {"model", "rotors", "reflector"}
    missing = required - record.keys()
    if missing:
        raise ConfigurationError(f"Missing keys in config: {', '.join(sorted(missing))}")

    spec = catalog.spec(record["model"])
    mode = coerce_mode(record.get("mode", spec.mode))

    raw_rotors = record["rotors"]
    if not isinstance(raw_rotors, list) or len(raw_rotors) != 3:
        raise ConfigurationError("Config needs exactly 3 rotors")
    try:
        rotors = tuple(
            RotorSettings(
                type=coerce_rotor_type(r["type"]),
                position=int(r.get("position", 0)),
                ring_setting=int(r.get("ring_setting", 0)),
            )
            for r in raw_rotors
        )
        plugboard = Plugboard(
            {str(k).upper(): str(v).upper() for k, v in (record.get("plugboard") or {}).items()}
        )
    except (KeyError, TypeError, AttributeError, ValueError) as exc:
        # InvalidPairError is a ValueError too
        raise ConfigurationError(f"Malformed config record: {exc}") from exc

    return validate(
        MachineConfig(
            model=spec.id,
            mode=mode,
            rotors=rotors,  # type: ignore[arg-type]
            reflector=str(record["reflector"]).upper(),
            plugboard=plugboard,
        )
    )


def from_record(record: Any, fallback_model: str = catalog.DEFAULT_MODEL) -> MachineConfig:
    """Like `parse_record`, but corrupt data yields the model default."""
    try:
        return parse_record(record)
    except ConfigurationError as exc:
        debug.warn("config", f"Ignoring stored config ({exc}); using {fallback_model} defaults")
        return default_config(fallback_model)


def save_config(config: MachineConfig, path: str | Path) -> Path:
    path = Path(path)
    path.write_text(json.dumps(to_record(config), indent=2, ensure_ascii=False), encoding="utf-8")
    debug.log("config", f"saved to {path}")
    return path


def load_config(path: str | Path, fallback_model: str = catalog.DEFAULT_MODEL) -> MachineConfig:
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        debug.log("config", f"{path} not found; using {fallback_model} defaults")
        return default_config(fallback_model)
    except (OSError, ValueError) as exc:
        debug.warn("config", f"Cannot read {path} ({exc}); using {fallback_model} defaults")
        return default_config(fallback_model)
    return from_record(data, fallback_model)


__all__ = [
    "RotorSettings",
    "MachineConfig",
    "default_config",
    "validate",
    "set_plugboard_pair",
    "clear_plugboard_pair",
    "set_rotor",
    "set_reflector",
    "switch_model",
    "to_record",
    "parse_record",
    "from_record",
    "save_config",
    "load_config",
]
