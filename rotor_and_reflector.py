# rotor_and_reflector.py
from __future__ import annotations

from collections.abc import Iterable

from debug import Debug
from errors import ConfigurationError

debug = Debug()
debug.disable("rotor", "reflector")


class Rotor:
    """One wheel's fixed wiring and turnover notches.

    Positions and ring settings are not stored here: they live in the
    per-session `RotorSettings` value and are handed in as an *offset*.
    A single `Rotor` is therefore shared by every machine that mounts it.
    """

    __slots__ = ("name", "alphabet", "size", "wiring", "notches", "_fwd", "_rev")

    def __init__(
        self,
        wiring: str,
        notches: Iterable[str],
        alphabet: str,
        *,
        name: str = "?",
    ) -> None:
        if len(wiring) != len(alphabet) or sorted(wiring) != sorted(alphabet):
            raise ConfigurationError(f"Rotor {name}: wiring must be a permutation of alphabet")

        notch_set = frozenset(notches)
        if not 1 <= len(notch_set) <= 2:
            raise ConfigurationError(f"Rotor {name}: expected one or two notches, got {len(notch_set)}")
        if not notch_set <= set(alphabet):
            raise ConfigurationError(f"Rotor {name}: notch characters must be in the alphabet")

        self.name = name
        self.alphabet = alphabet
        self.size = len(alphabet)
        self.wiring = wiring
        self.notches = notch_set

        # integer lookup tables
        self._fwd = [alphabet.index(c) for c in wiring]
        self._rev = [wiring.index(c) for c in alphabet]

    # ── notch helper -------------------------------------------------
    def at_notch(self, position: int) -> bool:
        """True when the window shows a turnover symbol."""
        return self.alphabet[position] in self.notches

    # ── signal paths ---------------------------------------------------
    def forward(self, sig: int, offset: int) -> int:
        """Right-to-left pass, towards the reflector."""
        shift = (sig + offset) % self.size
        mapped = self._fwd[shift]
        out = (mapped - offset) % self.size
        debug.log("rotor", f"{self.name} fwd {sig}->{out} (offset {offset})")
        return out

    def backward(self, sig: int, offset: int) -> int:
        """Left-to-right pass, coming back from the reflector."""
        shift = (sig + offset) % self.size
        mapped = self._rev[shift]
        out = (mapped - offset) % self.size
        debug.log("rotor", f"{self.name} bwd {sig}->{out} (offset {offset})")
        return out

    # ── niceties ------------------------------------------------------
    def __repr__(self) -> str:
        return f"<Rotor {self.name} notches={''.join(sorted(self.notches))}>"


class Reflector:
    def __init__(
        self,
        wiring: str,
        alphabet: str,
        *,
        name: str = "?",
        allow_fixed_points: bool = False,
    ) -> None:
        if len(wiring) != len(alphabet):
            raise ConfigurationError(f"Reflector {name}: wiring length must match alphabet length")
        if sorted(wiring) != sorted(alphabet):
            raise ConfigurationError(f"Reflector {name}: wiring must be a permutation of alphabet")

        # ensure involution property (w[i] = j ⇒ w[j] = i)
        for i, c in enumerate(wiring):
            j = alphabet.index(c)
            if wiring[j] != alphabet[i]:
                raise ConfigurationError(f"Reflector {name}: wiring must be an involution")
            if i == j and not allow_fixed_points:
                raise ConfigurationError(f"Reflector {name}: {c!r} is wired to itself")

        self.name = name
        self.alphabet = alphabet
        self.size = len(alphabet)
        self.wiring = wiring
        self._map = [alphabet.index(c) for c in wiring]

    def reflect(self, sig: int) -> int:
        mapped = self._map[sig]
        debug.log("reflector", f"{self.name} {sig}->{mapped}")
        return mapped

    def __repr__(self) -> str:
        return f"<Reflector {self.name}>"
