from random import Random

import pytest

import machine_config as mc
from alphabets import resolve
from errors import InvalidPairError
from keyboard_and_plugboard import Keyboard, Plugboard


def assert_symmetric(board):
    for k in board:
        assert board[k] != k
        assert board[board[k]] == k


def test_set_pair_is_symmetric(enigma_i):
    cfg = mc.set_plugboard_pair(enigma_i, "A", "B")
    assert cfg.plugboard == {"A": "B", "B": "A"}
    assert enigma_i.plugboard == {}


def test_new_pair_unplugs_old_partners(enigma_i):
    cfg = mc.set_plugboard_pair(enigma_i, "A", "B")
    cfg = mc.set_plugboard_pair(cfg, "C", "D")
    cfg = mc.set_plugboard_pair(cfg, "A", "C")
    assert dict(cfg.plugboard) == {"A": "C", "C": "A"}


def test_self_pair_is_rejected(enigma_i):
    cfg = mc.set_plugboard_pair(enigma_i, "E", "F")
    with pytest.raises(InvalidPairError):
        mc.set_plugboard_pair(cfg, "G", "G")
    assert cfg.plugboard.pairs() == ["EF"]


def test_symbols_outside_alphabet_are_rejected(enigma_i, enigma_uz):
    with pytest.raises(InvalidPairError):
        mc.set_plugboard_pair(enigma_i, "A", "1")
    with pytest.raises(InvalidPairError):
        mc.set_plugboard_pair(enigma_uz, "A", "Б")      # Latin A


def test_lowercase_symbols_are_folded(enigma_uz):
    cfg = mc.set_plugboard_pair(enigma_uz, "ў", "қ")
    assert cfg.plugboard == {"Ў": "Қ", "Қ": "Ў"}


def test_clear_pair(enigma_i):
    cfg = mc.set_plugboard_pair(enigma_i, "X", "Y")
    cleared = mc.clear_plugboard_pair(cfg, "Y")
    assert len(cleared.plugboard) == 0
    assert mc.clear_plugboard_pair(cleared, "Q") is cleared


def test_engine_has_no_cable_limit(enigma_i):
    cfg = enigma_i
    alphabet, _ = resolve("latin")
    for a, b in zip(alphabet[::2], alphabet[1::2]):
        cfg = mc.set_plugboard_pair(cfg, a, b)
    assert len(cfg.plugboard.pairs()) == 13


def test_symmetry_survives_random_edits(enigma_uz):
    alphabet, _ = resolve("cyrillic")
    rng = Random(2024)
    cfg = enigma_uz
    for _ in range(300):
        if rng.random() < 0.7:
            a, b = rng.sample(alphabet, 2)
            cfg = mc.set_plugboard_pair(cfg, a, b)
        else:
            cfg = mc.clear_plugboard_pair(cfg, rng.choice(alphabet))
        assert_symmetric(cfg.plugboard)


def test_from_pairs():
    board = Plugboard.from_pairs(["AB", ("C", "D")])
    assert board.pairs() == ["AB", "CD"]
    assert board.swap("D") == "C"
    assert board.swap("Z") == "Z"


@pytest.mark.parametrize("pairs", [["AA"], ["ABC"], ["AB", "BC"]])
def test_from_pairs_rejects_bad_cables(pairs):
    with pytest.raises(InvalidPairError):
        Plugboard.from_pairs(pairs)


def test_one_sided_mapping_is_rejected():
    with pytest.raises(InvalidPairError):
        Plugboard({"A": "B"})


def test_boards_compare_and_hash_by_content():
    assert Plugboard.from_pairs(["AB"]) == Plugboard.from_pairs(["BA"])
    assert hash(Plugboard.from_pairs(["AB"])) == hash(Plugboard({"B": "A", "A": "B"}))


def test_keyboard():
    kb = Keyboard("ABC")
    assert kb.forward("C") == 2
    assert kb.backward(1) == "B"
    assert kb.normalize("b") == "B"
    assert kb.normalize("ß") is None
    with pytest.raises(ValueError):
        kb.forward("D")
    with pytest.raises(ValueError):
        kb.backward(3)
