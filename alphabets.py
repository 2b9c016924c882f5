# alphabets.py
from __future__ import annotations

import string
from enum import Enum
from typing import Dict, Tuple

from errors import ConfigurationError


class Mode(str, Enum):
    LATIN = "latin"
    CYRILLIC = "cyrillic"


ALPHA_LATIN = string.ascii_uppercase
# Uzbek Cyrillic, expanded to 38 symbols (the full stop doubles as a key)
ALPHA_CYRILLIC = "АБВГДЕЁЖЗИЙКЛМНОПРСТУФХЦЧШЩЪЫЬЭЮЯЎҚҒҲ."

ALPHABETS: Dict[Mode, str] = {
    Mode.LATIN: ALPHA_LATIN,
    Mode.CYRILLIC: ALPHA_CYRILLIC,
}

# symbols that have a key but no plug socket on the front panel
_UNPLUGGABLE = "."

for _mode, _alpha in ALPHABETS.items():
    if len(set(_alpha)) != len(_alpha):
        raise ConfigurationError(f"Alphabet for {_mode.value!r} repeats a symbol")


def coerce_mode(mode: Mode | str) -> Mode:
    """Accept either a Mode or its string value ('latin', 'cyrillic')."""
    if isinstance(mode, Mode):
        return mode
    try:
        return Mode(str(mode).lower())
    except ValueError:
        raise ConfigurationError(
            f"Unknown alphabet mode {mode!r}. Expected one of {[m.value for m in Mode]}"
        ) from None


def resolve(mode: Mode | str) -> Tuple[str, int]:
    """Return `(alphabet, modulus)` for *mode*; the modulus is the alphabet size."""
    alphabet = ALPHABETS[coerce_mode(mode)]
    return alphabet, len(alphabet)


def plug_symbols(mode: Mode | str) -> str:
    alphabet, _ = resolve(mode)
    return "".join(ch for ch in alphabet if ch not in _UNPLUGGABLE)


__all__ = [
    "Mode",
    "ALPHA_LATIN",
    "ALPHA_CYRILLIC",
    "coerce_mode",
    "resolve",
    "plug_symbols",
]
