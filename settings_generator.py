# settings_generator.py
"""Local key generator: the fallback whenever the oracle is silent.

Also usable on its own to write a random daily configuration:

    python settings_generator.py --model enigma-uz --seed 7
"""
from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from random import Random, SystemRandom
from typing import List

import catalog
from alphabets import plug_symbols, resolve
from debug import Debug
from keyboard_and_plugboard import Plugboard
from machine_config import MachineConfig, RotorSettings, save_config, validate

debug = Debug()

DEFAULT_PAIRS = 10

# ── helpers ───────────────────────────────────────────────────────


def build_rng(seed: int | None) -> Random | SystemRandom:
    """Deterministic RNG when *seed* given; CSPRNG otherwise."""
    return Random(seed) if seed is not None else SystemRandom()


def choose_pairs(alpha: str, k: int, rng: Random | SystemRandom) -> List[str]:
    """Return *k* disjoint plug pairs."""
    max_possible = len(alpha) // 2
    k = min(k, max_possible)
    pool = list(alpha)
    rng.shuffle(pool)
    return [a + b for a, b in zip(pool[::2], pool[1::2])][:k]


def randomize_positions(config: MachineConfig, rng: Random | SystemRandom | None = None) -> MachineConfig:
    """Uniform start position and ring setting for every rotor, wheels kept."""
    rng = rng or build_rng(None)
    _, size = resolve(config.mode)
    rotors = tuple(
        replace(r, position=rng.randrange(size), ring_setting=rng.randrange(size))
        for r in config.rotors
    )
    debug.log("config", f"random start {[r.position for r in rotors]} rings {[r.ring_setting for r in rotors]}")
    return replace(config, rotors=rotors)


def random_config(
    model: str = catalog.DEFAULT_MODEL,
    rng: Random | SystemRandom | None = None,
    *,
    pairs: int = DEFAULT_PAIRS,
) -> MachineConfig:
    """A complete random key: wheel order, reflector, rings, start, plugs."""
    rng = rng or build_rng(None)
    spec = catalog.spec(model)
    _, size = resolve(spec.mode)

    # no wheel twice, unless the model owns fewer than three
    if len(spec.allowed_rotors) >= 3:
        types = rng.sample(list(spec.allowed_rotors), 3)
    else:
        types = [rng.choice(spec.allowed_rotors) for _ in range(3)]

    rotors = tuple(
        RotorSettings(t, position=rng.randrange(size), ring_setting=rng.randrange(size))
        for t in types
    )
    plugs = choose_pairs(plug_symbols(spec.mode), pairs, rng)
    config = MachineConfig(
        model=spec.id,
        mode=spec.mode,
        rotors=rotors,  # type: ignore[arg-type]
        reflector=rng.choice(spec.allowed_reflectors),
        plugboard=Plugboard.from_pairs(plugs),
    )
    return validate(config)


def parse_cli(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate a random Enigma daily key")
    p.add_argument(
        "--model",
        default=catalog.DEFAULT_MODEL,
        choices=sorted(catalog.MACHINE_SPECS),
        help=f"Machine model (default: {catalog.DEFAULT_MODEL})",
    )
    p.add_argument("--seed", type=int, help="Deterministic seed (omit for random)")
    p.add_argument("--pairs", type=int, default=DEFAULT_PAIRS, help="Plugboard cables (default: 10)")
    p.add_argument(
        "--outfile",
        type=Path,
        default=Path("enigma_config.json"),
        help="Destination JSON file (default: enigma_config.json)",
    )
    return p.parse_args(argv)


# ── main ─────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> None:
    args = parse_cli(argv)
    cfg = random_config(args.model, build_rng(args.seed), pairs=args.pairs)
    save_config(cfg, args.outfile)

    print(f"✅  Wrote {args.outfile}\n"
        f"   model       : {cfg.model}\n"
        f"   rotors      : {[r.type.value for r in cfg.rotors]}\n"
        f"   reflector   : {cfg.reflector}\n"
        f"   start       : {cfg.window()}\n"
        f"   plug pairs  : {len(cfg.plugboard) // 2}")


if __name__ == "__main__":
    main()
