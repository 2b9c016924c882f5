# session.py
from __future__ import annotations

from pathlib import Path
from random import Random, SystemRandom

import catalog
import key_oracle
import machine_config as mc
from debug import Debug
from enigma import encrypt_message, encrypt_symbol
from errors import ConfigurationError, InvalidPairError
from machine_config import MachineConfig
from settings import Config
from settings_generator import randomize_positions

debug = Debug()
debug.disable("session")

ANALYSIS_UNAVAILABLE = "Analysis unavailable: the AI oracle is not configured or did not answer."
EXPLANATION_UNAVAILABLE = "Explanation unavailable: the AI oracle is not configured or did not answer."


class Session:
    """One operator at one machine.

    Holds the live configuration plus what has been typed so far, so the
    caller does not pass six objects around.  Operator mistakes on the
    plugboard come back as `InvalidPairError` values, never as raises.
    """

    def __init__(self, config: MachineConfig | None = None, settings: Config | None = None) -> None:
        self.settings = settings or Config()
        self.config = mc.validate(config) if config is not None else mc.default_config()
        self.start_config = self.config
        self.input_text = ""
        self.output_text = ""
        self.analysis = ""

    @classmethod
    def load(cls, path: str | Path | None = None, settings: Config | None = None) -> "Session":
        settings = settings or Config()
        return cls(mc.load_config(path or settings.storage_path), settings)

    def save(self, path: str | Path | None = None) -> Path:
        return mc.save_config(self.config, path or self.settings.storage_path)

    # ––– typing ––––––––––––––––––––––––––––––––––––––––––––––––

    def press(self, symbol: str) -> str:
        """Press one key; the lamp that lights is returned."""
        lamp, self.config = encrypt_symbol(symbol, self.config)
        self.input_text += catalog.keyboard(self.config.mode).normalize(symbol) or symbol
        self.output_text += lamp
        return lamp

    def type_text(self, text: str) -> str:
        return "".join(self.press(ch) for ch in text)

    def backspace(self) -> None:
        """Drop the last typed symbol. The rotors stay where they are."""
        self.input_text = self.input_text[:-1]
        self.output_text = self.output_text[:-1]

    def paste(self, text: str) -> str:
        """Encrypt a whole text from the live settings without moving them."""
        self.input_text = text.upper()
        self.output_text = encrypt_message(self.input_text, self.config)
        return self.output_text

    # ––– resets ––––––––––––––––––––––––––––––––––––––––––––––––

    def _clear_text(self) -> None:
        self.input_text = self.output_text = self.analysis = ""

    def _install(self, config: MachineConfig) -> None:
        self.config = self.start_config = config
        self._clear_text()

    def rewind(self) -> None:
        """Back to the settings in force when typing started."""
        self.config = self.start_config
        self._clear_text()

    def reset(self) -> None:
        """Factory settings for the current model."""
        self._install(mc.default_config(self.config.model))

    def switch_model(self, model: str) -> None:
        self._install(mc.switch_model(self.config, model))

    # ––– settings ––––––––––––––––––––––––––––––––––––––––––––––

    def set_rotor(self, slot: int, rotor_type: str | None = None, *, position: int | None = None,
                  ring_setting: int | None = None) -> ConfigurationError | None:
        try:
            updated = mc.set_rotor(self.config, slot, rotor_type, position=position, ring_setting=ring_setting)
        except ConfigurationError as exc:
            return exc
        self._install(updated)
        return None

    def set_reflector(self, reflector_id: str) -> ConfigurationError | None:
        try:
            updated = mc.set_reflector(self.config, reflector_id)
        except ConfigurationError as exc:
            return exc
        self._install(updated)
        return None

    def connect(self, a: str, b: str) -> InvalidPairError | None:
        """Plug a cable between *a* and *b*; returns the error, if any."""
        try:
            updated = mc.set_plugboard_pair(self.config, a, b)
        except InvalidPairError as exc:
            debug.log("session", f"rejected {a}{b}: {exc}")
            return exc

        if len(updated.plugboard) // 2 > self.settings.max_plug_pairs:
            return InvalidPairError(
                f"Only {self.settings.max_plug_pairs} cables available", pair=(a, b)
            )
        self._install(updated)
        return None

    def disconnect(self, symbol: str) -> None:
        self._install(mc.clear_plugboard_pair(self.config, symbol))

    # ––– oracle with local fallback ––––––––––––––––––––––––––––

    def generate_daily_key(self, rng: Random | SystemRandom | None = None) -> bool:
        """New daily key; True when it came from the oracle.

        The oracle's wheels, reflector and plugs are fitted to the current
        model.  If it is silent, or proposes something this model cannot
        take, only the start positions and rings are randomised locally.
        """
        generated = key_oracle.request_generated_config(self.config.mode, self.settings)
        if generated is not None:
            try:
                merged = mc.validate(
                    MachineConfig(
                        model=self.config.model,
                        mode=self.config.mode,
                        rotors=generated.rotors,
                        reflector=generated.reflector,
                        plugboard=generated.plugboard,
                    )
                )
            except ConfigurationError as exc:
                debug.warn("session", f"Generated key does not fit {self.config.model}: {exc}")
            else:
                if len(merged.plugboard) // 2 <= self.settings.max_plug_pairs:
                    self._install(merged)
                    return True
                debug.warn("session", f"Generated key uses more than {self.settings.max_plug_pairs} cables")

        debug.log("session", "falling back to local random key")
        self._install(randomize_positions(self.config, rng))
        return False

    def analyze(self) -> str:
        text = self.output_text or self.input_text
        self.analysis = key_oracle.request_text_analysis(text, self.settings) or ANALYSIS_UNAVAILABLE
        return self.analysis

    def explain(self) -> str:
        return key_oracle.request_explanation(self.settings) or EXPLANATION_UNAVAILABLE

    def __repr__(self) -> str:
        return f"<Session {self.config.model} window={self.config.window()} plugs={self.config.plugboard.pairs()}>"
