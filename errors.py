# errors.py
from __future__ import annotations


class EnigmaError(ValueError):
    """Base class for every error raised by the simulator."""


class ConfigurationError(EnigmaError):
    """Unknown identifiers or broken wheel data. Not user-recoverable."""


class InvalidPairError(EnigmaError):
    """A plugboard edit the operator asked for cannot be applied."""

    def __init__(self, message: str, *, pair: tuple[str, str] | None = None) -> None:
        super().__init__(message)
        self.pair = pair
