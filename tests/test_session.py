from random import Random

import pytest

import key_oracle
import machine_config as mc
from errors import ConfigurationError, InvalidPairError
from session import ANALYSIS_UNAVAILABLE, Session
from settings import Config


@pytest.fixture
def silent_oracle(monkeypatch):
    monkeypatch.setattr(key_oracle, "request_generated_config", lambda mode, settings: None)
    monkeypatch.setattr(key_oracle, "request_text_analysis", lambda text, settings: None)


def test_typing_lights_lamps_and_steps(offline):
    s = Session(settings=offline)
    assert s.type_text("aa aaa") == "BD ZGO"
    assert s.input_text == "AA AAA"
    assert s.output_text == "BD ZGO"
    assert s.config.positions == (0, 0, 5)
    assert s.start_config.positions == (0, 0, 0)


def test_backspace_keeps_rotors(offline):
    s = Session(settings=offline)
    s.type_text("AAA")
    s.backspace()
    assert s.output_text == "BD"
    assert s.config.positions == (0, 0, 3)


def test_paste_does_not_move_the_rotors(offline):
    s = Session(settings=offline)
    assert s.paste("aaaaa") == "BDZGO"
    assert s.config.positions == (0, 0, 0)


def test_rewind_and_reset(offline):
    s = Session(mc.set_rotor(mc.default_config(), 2, position=7), settings=offline)
    first = s.type_text("HELLO")
    s.rewind()
    assert s.type_text("HELLO") == first
    s.reset()
    assert s.config == mc.default_config()
    assert s.input_text == s.output_text == ""


def test_connect_returns_errors_instead_of_raising(offline):
    s = Session(settings=offline)
    assert s.connect("A", "B") is None
    err = s.connect("C", "C")
    assert isinstance(err, InvalidPairError)
    assert s.config.plugboard.pairs() == ["AB"]
    s.disconnect("B")
    assert len(s.config.plugboard) == 0


def test_session_caps_the_cable_count():
    s = Session(settings=Config(max_plug_pairs=2))
    assert s.connect("A", "B") is None
    assert s.connect("C", "D") is None
    assert isinstance(s.connect("E", "F"), InvalidPairError)
    # re-plugging an existing cable does not need a new one
    assert s.connect("A", "C") is None
    assert s.config.plugboard.pairs() == ["AC"]


def test_settings_errors_are_returned(offline):
    s = Session(settings=offline)
    assert isinstance(s.set_rotor(0, "VI"), ConfigurationError)
    assert isinstance(s.set_reflector("Z"), ConfigurationError)
    assert s.set_rotor(0, "V", position=3) is None
    assert s.config.rotors[0].position == 3


def test_switch_model_clears_text_and_plugs(offline):
    s = Session(settings=offline)
    s.connect("A", "B")
    s.type_text("ABC")
    s.switch_model("enigma-uz")
    assert s.config.model == "enigma-uz"
    assert s.output_text == ""
    assert len(s.config.plugboard) == 0


def test_daily_key_falls_back_to_local_random(offline, silent_oracle):
    s = Session(settings=offline)
    assert s.generate_daily_key(Random(5)) is False
    assert [r.type for r in s.config.rotors] == [r.type for r in mc.default_config().rotors]
    assert all(0 <= r.position < 26 and 0 <= r.ring_setting < 26 for r in s.config.rotors)

    again = Session(settings=offline)
    again.generate_daily_key(Random(5))
    assert again.config == s.config


def test_daily_key_from_oracle_is_fitted_to_model(offline, monkeypatch):
    proposal = mc.set_plugboard_pair(
        mc.set_rotor(mc.default_config("enigma-i"), 0, "V", position=4), "Q", "W"
    )
    monkeypatch.setattr(key_oracle, "request_generated_config", lambda mode, settings: proposal)

    s = Session(mc.default_config("enigma-m3"), settings=offline)
    assert s.generate_daily_key() is True
    assert s.config.model == "enigma-m3"
    assert s.config.rotors == proposal.rotors
    assert s.config.plugboard.pairs() == ["QW"]


def test_daily_key_unfit_for_model_falls_back(offline, monkeypatch):
    proposal = mc.default_config("enigma-i")      # rotors I-III
    monkeypatch.setattr(key_oracle, "request_generated_config", lambda mode, settings: proposal)

    s = Session(mc.default_config("enigma-k"), settings=offline)
    assert s.generate_daily_key(Random(1)) is False
    assert s.config.rotors[0].type.value == "K-I"


def test_analysis_without_oracle(offline, silent_oracle):
    s = Session(settings=offline)
    s.type_text("HELLO")
    assert s.analyze() == ANALYSIS_UNAVAILABLE


def test_save_and_load_session(tmp_path, offline):
    s = Session(mc.default_config("enigma-uz"), settings=offline)
    s.connect("А", "Б")
    path = s.save(tmp_path / "uz.json")
    restored = Session.load(path, settings=offline)
    assert restored.config == s.config


def test_daily_key_over_the_cable_cap_falls_back(monkeypatch):
    proposal = mc.default_config("enigma-i")
    for a, b in ("AB", "CD", "EF"):
        proposal = mc.set_plugboard_pair(proposal, a, b)
    monkeypatch.setattr(key_oracle, "request_generated_config", lambda mode, settings: proposal)

    s = Session(settings=Config(max_plug_pairs=2))
    assert s.generate_daily_key(Random(3)) is False
    assert len(s.config.plugboard) == 0


class _Reply:
    def __init__(self, text):
        self._text = text

    def raise_for_status(self):
        pass

    def json(self):
        return {"candidates": [{"content": {"parts": [{"text": self._text}]}}]}


@pytest.mark.parametrize(
    "text",
    [
        5,
        '{"rotors": [{"type": "I", "position": 0, "ringSetting": 0},'
        ' {"type": "II", "position": 0, "ringSetting": 0},'
        ' {"type": "III", "position": 0, "ringSetting": 0}],'
        ' "reflector": "B", "plugboardPairs": [["A", "B"]]}',
    ],
)
def test_malformed_oracle_reply_falls_back(monkeypatch, text):
    monkeypatch.setattr(key_oracle.requests, "post", lambda url, **kwargs: _Reply(text))
    s = Session(settings=Config(api_key="k"))
    assert s.generate_daily_key(Random(2)) is False
