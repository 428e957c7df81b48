from fractions import Fraction

import pytest

from unitlib.core.dimensions import DIM_0, Dimension


# --- Construction --------------------------------------------------------------

def test_zero_exponents_are_never_stored():
    d = Dimension({"m": 1, "s": 0, "g": Fraction(0)})
    assert dict(d) == {"m": Fraction(1)}
    assert "s" not in d
    assert len(d) == 1


def test_equal_regardless_of_construction_path():
    a = Dimension({"m": 1, "s": -1})
    b = Dimension([("s", -1), ("m", 1)])
    c = Dimension({"m": 1, "s": -1, "g": 0})
    d = Dimension({"m": 2}) * Dimension({"m": -1, "s": -1})
    assert a == b == c == d
    assert len({a, b, c, d}) == 1


def test_repeated_pairs_are_summed():
    d = Dimension([("m", 1), ("m", 2), ("s", 1), ("s", -1)])
    assert dict(d) == {"m": Fraction(3)}


def test_exponents_are_fractions():
    d = Dimension({"m": 0.5, "s": "3/2", "g": 2})
    assert d["m"] == Fraction(1, 2)
    assert d["s"] == Fraction(3, 2)
    assert all(isinstance(e, Fraction) for e in d.values())


@pytest.mark.parametrize("key", ["", 3, None])
def test_invalid_keys_raise(key):
    with pytest.raises(TypeError):
        Dimension({key: 1})


def test_compares_with_plain_mappings():
    assert Dimension({"m": 1}) == {"m": 1}
    assert Dimension() == {}
    assert Dimension({"m": 1}) != {"m": 2}
    assert Dimension({"m": 1}) != {1: 1}
    assert Dimension({"m": 1}) != {"m": "x"}


# --- Algebra -------------------------------------------------------------------

def test_mul_adds_exponents_and_keeps_first_appearance_order():
    d = Dimension({"m": 1, "s": -2}) * Dimension({"g": 1, "m": 2})
    assert list(d) == ["m", "s", "g"]
    assert d == {"m": 3, "s": -2, "g": 1}


def test_div_and_neg():
    speed = Dimension({"m": 1}) / Dimension({"s": 1})
    assert speed == {"m": 1, "s": -1}
    assert -speed == {"m": -1, "s": 1}
    assert speed / speed == DIM_0


@pytest.mark.parametrize("n, expected", [
    (2, {"m": 2, "s": -2}),
    (0, {}),
    (Fraction(1, 2), {"m": Fraction(1, 2), "s": Fraction(-1, 2)}),
    (-1, {"m": -1, "s": 1}),
])
def test_pow(n, expected):
    assert Dimension({"m": 1, "s": -1}) ** n == expected


def test_pow_rejects_modulo():
    with pytest.raises(TypeError):
        pow(Dimension({"m": 1}), 2, 3)


# --- Helpers -------------------------------------------------------------------

def test_exponent_of_absent_symbol_is_zero():
    d = Dimension({"m": 2})
    assert d.exponent_of("m") == 2
    assert d.exponent_of("s") == 0
    assert isinstance(d.exponent_of("s"), Fraction)


def test_is_dimensionless():
    assert DIM_0.is_dimensionless
    assert Dimension({"m": 0}).is_dimensionless
    assert not Dimension({"m": 1}).is_dimensionless


def test_repr():
    assert repr(DIM_0) == "Dimension()"
    assert repr(Dimension({"m": 3, "s": Fraction(-1, 2)})) == "Dimension([m^3][s^(-1/2)])"
