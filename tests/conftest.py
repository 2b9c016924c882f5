import pytest

import catalog
import machine_config as mc
from settings import Config


@pytest.fixture(autouse=True)
def no_oracle_env(monkeypatch):
    """Never reach the real oracle or a stray config file from a test."""
    for var in ("ENIGMA_API_KEY", "GEMINI_API_KEY", "API_KEY",
                "ENIGMA_CONFIG_PATH", "ENIGMA_ORACLE_MODEL",
                "ENIGMA_ORACLE_TIMEOUT", "ENIGMA_MAX_PLUGS"):
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def enigma_i():
    return mc.default_config("enigma-i")


@pytest.fixture
def enigma_uz():
    return mc.default_config("enigma-uz")


@pytest.fixture
def offline():
    return Config(api_key=None)


@pytest.fixture
def turn():
    """turn(config, "ADU") sets the three window letters."""
    def _turn(config, window: str):
        alphabet = catalog.keyboard(config.mode).alphabet
        for slot, letter in enumerate(window):
            config = mc.set_rotor(config, slot, position=alphabet.index(letter))
        return config
    return _turn
