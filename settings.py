# settings.py
from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from debug import Debug

debug = Debug()


@dataclass(slots=True)
class Config:
    """Runtime switches around the cipher core (never the cipher itself)."""

    api_key: str | None = None                  # oracle disabled when None
    oracle_model: str = "gemini-2.5-flash"
    oracle_timeout: float = 15.0                # seconds, per request
    storage_path: Path = Path("enigma_config.json")
    max_plug_pairs: int = 10                    # front-panel cable count
    block: int = 5                              # display group size

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Config":
        """Read overrides from the environment; bad numbers keep the default."""
        env = os.environ if environ is None else environ
        cfg = cls()

        for var in ("ENIGMA_API_KEY", "GEMINI_API_KEY", "API_KEY"):
            if env.get(var):
                cfg.api_key = env[var]
                break

        if env.get("ENIGMA_ORACLE_MODEL"):
            cfg.oracle_model = env["ENIGMA_ORACLE_MODEL"]
        if env.get("ENIGMA_ORACLE_TIMEOUT"):
            cfg.oracle_timeout = _number(env, "ENIGMA_ORACLE_TIMEOUT", float, cfg.oracle_timeout)
        if env.get("ENIGMA_CONFIG_PATH"):
            cfg.storage_path = Path(env["ENIGMA_CONFIG_PATH"])
        if env.get("ENIGMA_MAX_PLUGS"):
            cfg.max_plug_pairs = _number(env, "ENIGMA_MAX_PLUGS", int, cfg.max_plug_pairs)
        return cfg


def _number(env: Mapping[str, str], var: str, kind, default):
    try:
        value = kind(env[var])
    except ValueError:
        debug.warn("config", f"{var}={env[var]!r} is not a valid {kind.__name__}; using {default}")
        return default
    if value < 0:
        debug.warn("config", f"{var} must not be negative; using {default}")
        return default
    return value
