# enigma.py  ───────────────────────────────────────────────────────
"""Stepping and signal path of a three-rotor Enigma.

Everything here is a pure function of a `MachineConfig`: nothing is
mutated, a keypress hands back the next configuration.  Decryption is
the same call made from the same starting configuration.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Tuple

import catalog
from debug import Debug
from machine_config import MachineConfig

debug = Debug()
debug.disable("stepping", "encipher")


# ── stepping logic  ─────────────────────────────────────────────

def step_rotors(config: MachineConfig) -> MachineConfig:
    """Advance the rotors for one keypress (historic double-step)."""
    left, middle, right = config.rotors
    middle_wheel = catalog.rotor(config.mode, middle.type)
    right_wheel = catalog.rotor(config.mode, right.type)
    size = middle_wheel.size

    # both checks read the positions *before* anything moves
    step_L = middle_wheel.at_notch(middle.position)
    step_M = step_L or right_wheel.at_notch(right.position)

    if step_L:
        left = left.advanced(size)
    if step_M:
        middle = middle.advanced(size)
    right = right.advanced(size)

    debug.log("stepping", f"{config.window()} -> L{left.position} M{middle.position} R{right.position}")
    return replace(config, rotors=(left, middle, right))


# ── signal path ─────────────────────────────────────────────────

def scramble(letter: str, config: MachineConfig) -> str:
    """Route *letter* through plugboard, rotors and reflector and back.

    The rotors are held still, so for any fixed configuration this is
    an involution: ``scramble(scramble(x, c), c) == x``.
    """
    kb = catalog.keyboard(config.mode)
    wheels = [catalog.rotor(config.mode, r.type) for r in config.rotors]
    size = len(kb.alphabet)
    offsets = [r.offset(size) for r in config.rotors]
    reflector = catalog.reflector_wheel(config.mode, config.reflector)

    signal = kb.forward(config.plugboard.swap(letter))

    for wheel, offset in zip(reversed(wheels), reversed(offsets)):
        signal = wheel.forward(signal, offset)

    signal = reflector.reflect(signal)

    for wheel, offset in zip(wheels, offsets):
        signal = wheel.backward(signal, offset)

    out_ch = config.plugboard.swap(kb.backward(signal))
    debug.log("encipher", f"{letter}->{out_ch} at {config.window()}")
    return out_ch


# ── keypresses ──────────────────────────────────────────────────

def encrypt_symbol(symbol: str, config: MachineConfig) -> Tuple[str, MachineConfig]:
    """Press one key: step first, then route the signal.

    Symbols without a key (spaces, punctuation) come back untouched,
    together with the very same configuration.
    """
    letter = catalog.keyboard(config.mode).normalize(symbol)
    if letter is None:
        return symbol, config

    stepped = step_rotors(config)
    return scramble(letter, stepped), stepped


def run_message(text: str, config: MachineConfig) -> Tuple[str, MachineConfig]:
    """Encrypt *text* and also return the configuration after its last key."""
    out: list[str] = []
    for ch in text:
        cipher_ch, config = encrypt_symbol(ch, config)
        out.append(cipher_ch)
    return "".join(out), config


def encrypt_message(text: str, config: MachineConfig) -> str:
    return run_message(text, config)[0]


# decryption is the same operation from the same start
decrypt_message = encrypt_message


__all__ = [
    "step_rotors",
    "scramble",
    "encrypt_symbol",
    "run_message",
    "encrypt_message",
    "decrypt_message",
]
