# key_oracle.py
"""Optional AI helpers backed by the Gemini REST API.

Every call here is best effort: no API key, a network error, a timeout
or a reply we cannot parse all end in ``None`` and a warning in the log.
Callers must always have a local answer ready.
"""
from __future__ import annotations

import json
from typing import Any

import requests

import catalog
from alphabets import Mode, coerce_mode, resolve
from debug import Debug
from errors import ConfigurationError
from machine_config import MachineConfig, parse_record
from settings import Config

debug = Debug()
debug.disable("oracle")

BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

_ROTOR_NAMES = [t.value for t in catalog.MACHINE_SPECS["enigma-i"].allowed_rotors]

CONFIG_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "rotors": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "type": {"type": "STRING", "enum": _ROTOR_NAMES},
                    "position": {"type": "INTEGER"},
                    "ringSetting": {"type": "INTEGER"},
                },
                "required": ["type", "position", "ringSetting"],
            },
        },
        "reflector": {"type": "STRING", "enum": ["B", "C"]},
        "plugboardPairs": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
}


# ── transport ─────────────────────────────────────────────────────


def _generate(prompt: str, settings: Config, *, schema: dict[str, Any] | None = None) -> str | None:
    """POST one prompt, return the first candidate's text or None."""
    if not settings.api_key:
        debug.warn("oracle", "API key not found. AI features disabled.")
        return None

    body: dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
    if schema is not None:
        body["generationConfig"] = {
            "responseMimeType": "application/json",
            "responseSchema": schema,
        }

    url = f"{BASE_URL}/{settings.oracle_model}:generateContent"
    try:
        resp = requests.post(
            url,
            params={"key": settings.api_key},
            json=body,
            timeout=settings.oracle_timeout,
        )
        resp.raise_for_status()
        data = resp.json()
        text = data["candidates"][0]["content"]["parts"][0]["text"]
        if not isinstance(text, str):
            raise TypeError(f"candidate text is {type(text).__name__}")
    except requests.RequestException as exc:
        debug.warn("oracle", f"Request failed: {exc}")
        return None
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        debug.warn("oracle", f"Unexpected response shape: {exc!r}")
        return None

    debug.log("oracle", f"{len(text)} chars from {settings.oracle_model}")
    return text or None


# ── public helpers ────────────────────────────────────────────────


def _config_prompt(mode: Mode) -> str:
    _, size = resolve(mode)
    if mode is Mode.CYRILLIC:
        machine = f"{size}-letter Uzbek Cyrillic Enigma"
    else:
        machine = "Enigma I"
    return (
        f"Generate a random, valid {machine} machine configuration JSON. "
        f"Include 3 distinct rotors (I-V), positions (0-{size - 1}), "
        f"ring settings (0-{size - 1}), a reflector (B or C), and 10 plugboard pairs. "
        "The output must be strictly JSON."
    )


def request_generated_config(mode: Mode | str, settings: Config) -> MachineConfig | None:
    """Ask the oracle for a daily key in *mode*; None when unavailable."""
    mode = coerce_mode(mode)
    text = _generate(_config_prompt(mode), settings, schema=CONFIG_SCHEMA)
    if text is None:
        return None

    try:
        data = json.loads(text)
        record = {
            "model": catalog.DEFAULT_MODEL_FOR_MODE[mode],
            "mode": mode.value,
            "rotors": [
                {
                    "type": r["type"],
                    "position": r["position"],
                    "ring_setting": r["ringSetting"],
                }
                for r in data["rotors"]
            ],
            "reflector": data["reflector"],
            "plugboard": _pairs_to_mapping(data.get("plugboardPairs") or []),
        }
        return parse_record(record)
    except (ValueError, KeyError, TypeError, AttributeError) as exc:
        # ConfigurationError is a ValueError as well
        debug.warn("oracle", f"Discarding generated config: {exc}")
        return None


def _pairs_to_mapping(pairs: list[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for pair in pairs:
        if not isinstance(pair, str):
            raise ConfigurationError(f"Generated plug pair {pair!r} is not a string")
        if len(pair) != 2:
            continue
        a, b = pair.upper()
        if a == b or a in mapping or b in mapping:
            raise ConfigurationError(f"Generated plug pair {pair!r} clashes")
        mapping[a], mapping[b] = b, a
    return mapping


def request_text_analysis(text: str, settings: Config) -> str | None:
    prompt = (
        f'Analyze this Uzbek text (which might be decrypted): "{text}".\n'
        "1. Summarize the content briefly in Uzbek.\n"
        "2. Detect the sentiment/tone.\n"
        '3. Give a fun "Security Clearance Level" assessment '
        "(e.g. TOP SECRET, PUBLIC, CLASSIFIED).\n"
        "Keep it short and professional."
    )
    return _generate(prompt, settings)


def request_explanation(settings: Config) -> str | None:
    prompt = (
        "Explain briefly in Uzbek how the Enigma machine works and why it was "
        "hard to crack. Use simple analogies. Max 100 words."
    )
    return _generate(prompt, settings)


__all__ = [
    "request_generated_config",
    "request_text_analysis",
    "request_explanation",
]
