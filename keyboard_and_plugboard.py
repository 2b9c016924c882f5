# keyboard_and_plugboard.py
from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from debug import Debug
from errors import InvalidPairError

debug = Debug()
debug.disable("keyboard", "plugboard")


# ── Keyboard ──────────────────────────────────────────────────────
class Keyboard:
    def __init__(self, alphabet: str) -> None:
        self.alphabet: str = alphabet
        self.alpha_to_index: dict[str, int] = {
            ch: i for i, ch in enumerate(alphabet)
        }

    def __contains__(self, symbol: object) -> bool:
        return symbol in self.alpha_to_index

    def normalize(self, symbol: str) -> str | None:
        """Canonical key for *symbol*, or None when no such key exists."""
        upper = symbol.upper()
        if len(upper) == 1 and upper in self.alpha_to_index:
            return upper
        return None

    # letter → integer signal
    def forward(self, letter: str) -> int:
        try:
            return self.alpha_to_index[letter]
        except KeyError:
            raise ValueError(
                f"Invalid character {letter!r} for current alphabet."
            ) from None

    # integer signal → letter
    def backward(self, signal: int) -> str:
        if not (0 <= signal < len(self.alphabet)):
            hi = len(self.alphabet) - 1
            raise ValueError(f"Signal {signal} out of range 0–{hi}")
        return self.alphabet[signal]


# ── Plugboard ─────────────────────────────────────────────────────
class Plugboard(Mapping[str, str]):
    """Immutable set of cables. Only wired symbols appear as keys.

    Editing returns a new board; the old one is never touched, so a
    `MachineConfig` holding it can be shared freely.
    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: Mapping[str, str] | None = None) -> None:
        wired: dict[str, str] = dict(mapping or {})
        for a, b in wired.items():
            if a == b:
                raise InvalidPairError(f"Plugboard cannot map a symbol to itself: {a}", pair=(a, b))
            if wired.get(b) != a:
                raise InvalidPairError(f"Plugboard entry {a}->{b} has no matching {b}->{a}", pair=(a, b))
        self._mapping = wired

    @classmethod
    def from_pairs(cls, pairs: Iterable[str | tuple[str, str]]) -> "Plugboard":
        """Build a board from `["AB", "CD"]` or `[("A", "B"), ...]`."""
        mapping: dict[str, str] = {}
        for raw in pairs:
            # normalise to (a, b)
            if isinstance(raw, str):
                if len(raw) != 2:
                    raise InvalidPairError(f"Pair {raw!r} must be exactly 2 symbols")
                a, b = raw
            else:
                a, b = raw

            if a == b:
                raise InvalidPairError(f"Plugboard cannot map a symbol to itself: {a}", pair=(a, b))
            if a in mapping or b in mapping:
                dup = a if a in mapping else b
                raise InvalidPairError(f"Character {dup!r} already used in plugboard", pair=(a, b))

            mapping[a], mapping[b] = b, a
        return cls(mapping)

    # ── editing ─────────────────────────────────────────────────
    def connect(self, a: str, b: str) -> "Plugboard":
        if a == b:
            raise InvalidPairError(f"Plugboard cannot map a symbol to itself: {a}", pair=(a, b))
        mapping = dict(self._mapping)
        # unplug whatever a or b were wired to before
        for ch in (a, b):
            partner = mapping.pop(ch, None)
            if partner is not None:
                mapping.pop(partner, None)
        mapping[a], mapping[b] = b, a
        debug.log("plugboard", f"connect {a}{b}")
        return Plugboard(mapping)

    def disconnect(self, symbol: str) -> "Plugboard":
        partner = self._mapping.get(symbol)
        if partner is None:
            return self
        mapping = dict(self._mapping)
        del mapping[symbol], mapping[partner]
        debug.log("plugboard", f"disconnect {symbol}{partner}")
        return Plugboard(mapping)

    # ── signal path ─────────────────────────────────────────────
    def swap(self, letter: str) -> str:
        """Same call on the way in and on the way out."""
        mapped = self._mapping.get(letter, letter)
        debug.log("plugboard", f"{letter}->{mapped}")
        return mapped

    def pairs(self) -> list[str]:
        return sorted(a + b for a, b in self._mapping.items() if a < b)

    # ── Mapping protocol ────────────────────────────────────────
    def __getitem__(self, key: str) -> str:
        return self._mapping[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def __hash__(self) -> int:
        return hash(frozenset(self._mapping.items()))

    # nicety for debugging
    def __repr__(self) -> str:
        return f"<Plugboard {' '.join(self.pairs())}>"
