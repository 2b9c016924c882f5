import pytest

import catalog
from alphabets import Mode, coerce_mode, plug_symbols, resolve
from catalog import RotorType
from errors import ConfigurationError
from rotor_and_reflector import Reflector, Rotor


def test_alphabet_sizes_and_modulus():
    latin, n_latin = resolve("latin")
    cyr, n_cyr = resolve(Mode.CYRILLIC)
    assert (len(latin), n_latin) == (26, 26)
    assert (len(cyr), n_cyr) == (38, 38)
    assert cyr.endswith(".")


def test_unknown_mode_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        coerce_mode("klingon")


def test_plug_symbols_skip_the_full_stop():
    assert "." not in plug_symbols("cyrillic")
    assert len(plug_symbols("cyrillic")) == 37
    assert plug_symbols("latin") == resolve("latin")[0]


@pytest.mark.parametrize("mode", list(Mode))
def test_rotor_wirings_are_distinct_permutations(mode):
    alphabet, size = resolve(mode)
    wirings = [catalog.wiring(mode, rtype) for rtype in catalog.ROTOR_TABLE[mode]]
    for w in wirings:
        assert len(w) == size
        assert sorted(w) == sorted(alphabet)
    # no placeholder copies of another wheel
    assert len(set(wirings)) == len(wirings)


@pytest.mark.parametrize("mode", list(Mode))
@pytest.mark.parametrize("rid", ["B", "C"])
def test_reflectors_are_fixed_point_free_involutions(mode, rid):
    alphabet, _ = resolve(mode)
    wiring = catalog.reflector(mode, rid)
    for i, ch in enumerate(wiring):
        j = alphabet.index(ch)
        assert i != j
        assert wiring[j] == alphabet[i]


def test_notches():
    assert catalog.notch("latin", "III") == {"V"}
    assert catalog.notch("latin", RotorType.VI) == {"Z", "M"}
    assert catalog.notch("cyrillic", "I") == {"Р"}
    assert len(catalog.notch("cyrillic", "VII")) == 2


def test_every_model_references_existing_wheels():
    for spec in catalog.list_models():
        for rtype in spec.allowed_rotors:
            assert catalog.rotor(spec.mode, rtype).size == resolve(spec.mode)[1]
        for rid in spec.allowed_reflectors:
            assert catalog.reflector_wheel(spec.mode, rid)


def test_model_list():
    ids = [spec.id for spec in catalog.list_models()]
    assert ids == ["enigma-i", "enigma-m3", "enigma-k", "enigma-uz"]
    assert catalog.spec("enigma-uz").mode is Mode.CYRILLIC
    assert RotorType.VII in catalog.spec("enigma-m3").allowed_rotors
    assert RotorType.VI not in catalog.spec("enigma-i").allowed_rotors


def test_rotor_type_coercion():
    assert catalog.coerce_rotor_type("iii") is RotorType.III
    assert catalog.coerce_rotor_type("K_I") is RotorType.K_I
    with pytest.raises(ConfigurationError):
        catalog.coerce_rotor_type("IX")


@pytest.mark.parametrize(
    "lookup",
    [
        lambda: catalog.spec("enigma-z"),
        lambda: catalog.rotor("cyrillic", "K-I"),
        lambda: catalog.reflector("latin", "A"),
        lambda: catalog.wiring("latin", "VIII"),
    ],
)
def test_unknown_keys_fail_loudly(lookup):
    with pytest.raises(ConfigurationError):
        lookup()


def test_rotor_rejects_non_permutation():
    with pytest.raises(ConfigurationError):
        Rotor("AACD", "A", "ABCD", name="bad")


def test_rotor_rejects_foreign_notch():
    with pytest.raises(ConfigurationError):
        Rotor("BCDA", "Z", "ABCD")


def test_reflector_rejects_non_involution():
    with pytest.raises(ConfigurationError):
        Reflector("BCDA", "ABCD")


def test_reflector_fixed_points_only_on_request():
    with pytest.raises(ConfigurationError):
        Reflector("BACD", "ABCD")
    tolerant = Reflector("BACD", "ABCD", allow_fixed_points=True)
    assert tolerant.reflect(2) == 2
    assert tolerant.reflect(0) == 1
