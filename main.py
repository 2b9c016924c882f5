# main.py
from __future__ import annotations

import argparse
import sys

import catalog
import enigma
import machine_config as mc
from enigma import decrypt_message
from errors import EnigmaError
from machine_config import MachineConfig
from session import Session
from settings import Config
from settings_generator import build_rng

# ────────────────────────────────────────────────────────────────────────
#  0. Building the machine from the command line
# ────────────────────────────────────────────────────────────────────────


def build_config(args: argparse.Namespace, settings: Config) -> MachineConfig:
    """Stored file (if any) first, then every explicit flag on top of it."""
    if args.config:
        cfg = mc.load_config(args.config, args.model or catalog.DEFAULT_MODEL)
        if args.model and args.model != cfg.model:
            cfg = mc.switch_model(cfg, args.model)
    else:
        cfg = mc.default_config(args.model or catalog.DEFAULT_MODEL)

    alphabet = catalog.keyboard(cfg.mode).alphabet

    if args.rotors:
        if len(args.rotors) != 3:
            raise EnigmaError("Need exactly 3 rotor names (left middle right)")
        for slot, name in enumerate(args.rotors):
            cfg = mc.set_rotor(cfg, slot, name)

    if args.rings:
        if len(args.rings) != 3:
            raise EnigmaError("Need exactly 3 ring settings")
        for slot, ring in enumerate(args.rings):
            if not 1 <= ring <= len(alphabet):
                raise EnigmaError(f"Ring settings run 1–{len(alphabet)}")
            cfg = mc.set_rotor(cfg, slot, ring_setting=ring - 1)

    if args.positions:
        key = args.positions.upper()
        if len(key) != 3 or not set(key) <= set(alphabet):
            raise EnigmaError("Start positions must be 3 symbols from the alphabet")
        for slot, letter in enumerate(key):
            cfg = mc.set_rotor(cfg, slot, position=alphabet.index(letter))

    if args.reflector:
        cfg = mc.set_reflector(cfg, args.reflector)

    for pair in args.plugs or []:
        if len(pair) != 2:
            raise EnigmaError(f"Pair {pair!r} must be exactly 2 symbols")
        cfg = mc.set_plugboard_pair(cfg, pair[0], pair[1])
    if len(cfg.plugboard) // 2 > settings.max_plug_pairs:
        raise EnigmaError(f"Too many pairs (max {settings.max_plug_pairs}).")

    return cfg


def group(text: str, block: int) -> str:
    """Classic five-letter groups; spaces in *text* are dropped."""
    if block <= 0:
        return text
    packed = text.replace(" ", "")
    return " ".join(packed[i : i + block] for i in range(0, len(packed), block))


def describe(cfg: MachineConfig) -> str:
    spec = catalog.spec(cfg.model)
    rotors = " ".join(r.type.value for r in cfg.rotors)
    rings = " ".join(str(r.ring_setting + 1) for r in cfg.rotors)
    plugs = " ".join(cfg.plugboard.pairs()) or "-"
    return (f"{spec.name} | rotors {rotors} | rings {rings} | "
            f"start {cfg.window()} | reflector {cfg.reflector} | plugs {plugs}")


# ────────────────────────────────────────────────────────────────────────
#  1. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Encrypt or decrypt with an Enigma machine")
    p.add_argument("-m", "--message", metavar="TEXT", help="Text to encrypt (or decrypt). If omitted, an interactive REPL starts.")
    p.add_argument("--model", choices=sorted(catalog.MACHINE_SPECS), help=f"Machine model. Default: {catalog.DEFAULT_MODEL}")
    p.add_argument("--rotors", nargs="+", metavar="NAME", help="Rotor order, left to right, e.g. I II III")
    p.add_argument("--rings", nargs="+", type=int, metavar="N", help="Ring settings, 1-based, e.g. 1 1 1")
    p.add_argument("--positions", metavar="KEY", help="Start positions as window letters, e.g. AAA")
    p.add_argument("--reflector", help="Reflector id (B or C)")
    p.add_argument("--plugs", nargs="*", metavar="PAIR", help="Plugboard pairs, e.g. AB CD EF")
    p.add_argument("--config", metavar="FILE", help="Load machine settings from JSON.")
    p.add_argument("--save", metavar="FILE", help="Write the resulting settings to JSON.")
    p.add_argument("--auto-key", dest="auto_key", action="store_true", help="Ask the AI oracle for a daily key (random positions if it is unavailable).")
    p.add_argument("--seed", type=int, help="Seed for the local random fallback")
    p.add_argument("--analyze", action="store_true", help="Ask the AI oracle to analyse the output")
    p.add_argument("--explain", action="store_true", help="Ask the AI oracle how the machine works, then exit")
    p.add_argument("--list-models", dest="list_models", action="store_true", help="List the machine models and exit")
    p.add_argument("--block", type=int, help="Group output in blocks of N symbols (0 = keep spacing). Default: 5")
    p.add_argument("--verbose", action="store_true", help="Trace stepping and the signal path")
    return p.parse_args(argv)


# ────────────────────────────────────────────────────────────────────────
#  2. Main entry point
# ────────────────────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = Config.from_env()
    block = settings.block if args.block is None else args.block

    if args.verbose:
        enigma.debug.enable("stepping", "encipher")

    if args.list_models:
        for spec in catalog.list_models():
            rotors = " ".join(r.value for r in spec.allowed_rotors)
            print(f"{spec.id:<10} {spec.name:<26} {spec.mode.value:<8} "
                  f"rotors: {rotors}  reflectors: {' '.join(spec.allowed_reflectors)}")
        return 0

    try:
        cfg = build_config(args, settings)
    except EnigmaError as exc:
        print(f"❌  {exc}", file=sys.stderr)
        return 2

    session = Session(cfg, settings)

    if args.explain:
        print(session.explain())
        return 0

    if args.auto_key:
        from_oracle = session.generate_daily_key(build_rng(args.seed))
        print("Daily key from oracle." if from_oracle else "Oracle unavailable, random start positions.")

    print(describe(session.config))

    if args.save:
        path = session.save(args.save)
        print(f"✅  Settings written to {path}")

    # one‑shot mode ------------------------------------------------------
    if args.message is not None:
        cipher = session.type_text(args.message)
        print("Output:   ", group(cipher, block))
        print("Check:    ", decrypt_message(cipher, session.start_config))
        if args.analyze:
            print("Analysis: ", session.analyze())
        return 0

    # interactive REPL ---------------------------------------------------
    print("Type blank line to quit.\n")
    while True:
        try:
            txt = input("\nMessage: ")
        except EOFError:
            break
        if not txt.strip():
            break
        session.rewind()
        cipher = session.type_text(txt)
        print("\nOutput:", group(cipher, block))
        if args.analyze:
            print("\nAnalysis:", session.analyze())
    return 0


if __name__ == "__main__":
    sys.exit(main())
