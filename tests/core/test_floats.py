import math
import sys

import pytest

from unitlib.core.floats import (
    DEFAULT_THRESHOLDS,
    MAX_VALUE,
    MIN_VALUE,
    ROUNDING_STRATEGIES,
    ApproxThresholds,
    NumberFormatOptions,
    abs_distance,
    are_approximately_equal,
    as_thresholds,
    format_float,
    rel_distance,
    round_float,
    ulp_distance,
)

EPS = sys.float_info.epsilon

VALUES = [
    0.0,
    1.0,
    1 + EPS,
    1 - EPS,
    -2.0357544944603468e228,
    -2.476071836022912e-116,
    5.2721852488424196e137,
    6.48978778417756e-197,
    MAX_VALUE,
    MIN_VALUE,
    math.inf,
    -math.inf,
]

DISTANCES = [abs_distance, rel_distance, ulp_distance]


# --- Common distance properties ------------------------------------------------

@pytest.mark.parametrize("dist", DISTANCES)
def test_nan_is_infinitely_far(dist):
    for x in VALUES:
        assert dist(x, math.nan) == math.inf
    assert dist(math.nan, math.nan) == math.inf


@pytest.mark.parametrize("dist", DISTANCES)
def test_signed_zeros_are_equal(dist):
    assert dist(0.0, -0.0) == 0
    assert dist(-0.0, 0.0) == 0


@pytest.mark.parametrize("dist", DISTANCES)
def test_reflexive(dist):
    for x in VALUES:
        assert dist(x, x) == 0


@pytest.mark.parametrize("dist", DISTANCES)
def test_positive_and_symmetric(dist):
    for x in VALUES:
        for y in VALUES:
            assert dist(x, y) >= 0
            if x != y:
                assert dist(x, y) > 0
            assert dist(x, y) == dist(y, x)


@pytest.mark.parametrize("dist", DISTANCES)
def test_symmetric_around_zero(dist):
    for x in VALUES:
        assert dist(0.0, x) == dist(0.0, -x)


# --- Specific distances --------------------------------------------------------

def test_abs_distance():
    assert abs_distance(1, 1 + EPS) == EPS
    assert abs_distance(1, 1 - EPS) == EPS
    assert abs_distance(1e20, 2e20) == 1e20
    assert abs_distance(100, 200) == 100
    assert abs_distance(0.001, 0.002) == 0.001
    for x in VALUES:
        assert abs_distance(-x, x) == 2 * abs_distance(0, x)


def test_rel_distance():
    assert rel_distance(1e20, 2e20) == 1
    assert rel_distance(100, 200) == 1
    assert rel_distance(0.001, 0.002) == 1


def test_ulp_distance():
    assert ulp_distance(1, 1 + EPS) == 1
    assert ulp_distance(1, 1 + 5 * EPS) == 5
    assert ulp_distance(1, 1 - EPS) == 2

    assert ulp_distance(MAX_VALUE, math.inf) == 1
    assert ulp_distance(-MAX_VALUE, -math.inf) == 1
    assert ulp_distance(MIN_VALUE, 0) == 1
    assert ulp_distance(-MIN_VALUE, 0) == 1
    assert ulp_distance(MIN_VALUE, -MIN_VALUE) == 2

    for x in VALUES:
        assert ulp_distance(-x, x) == 2 * ulp_distance(0, x)


# --- Approximate equality ------------------------------------------------------

def test_default_thresholds():
    assert as_thresholds(None) is DEFAULT_THRESHOLDS
    assert as_thresholds({}) is DEFAULT_THRESHOLDS
    assert DEFAULT_THRESHOLDS.ulps == 1024
    assert DEFAULT_THRESHOLDS.rel == 2 ** -43


def test_unknown_threshold_key_raises():
    with pytest.raises(ValueError):
        as_thresholds({"ulp": 3})


def test_approx_equal_is_or_of_thresholds():
    assert are_approximately_equal(1.0, 1.0 + 3 * EPS)
    assert not are_approximately_equal(1.0, 1.001)
    assert are_approximately_equal(1.0, 1.001, {"rel": 0.01})
    assert are_approximately_equal(1.0, 1.001, ApproxThresholds(abs=0.01))
    # any satisfied threshold is enough
    assert are_approximately_equal(100.0, 101.0, {"ulps": 1, "abs": 2})
    assert not are_approximately_equal(100.0, 101.0, {"ulps": 1, "abs": 0.5})


def test_approx_equal_thresholds_are_strict():
    assert not are_approximately_equal(1.0, 2.0, {"abs": 1.0})
    assert are_approximately_equal(1.0, 2.0, {"abs": 1.0000001})


def test_approx_equal_nan_never_matches():
    assert not are_approximately_equal(math.nan, math.nan, {"abs": math.inf})


# --- Formatting ----------------------------------------------------------------

def test_does_not_round_095_wrongly():
    assert format_float(0.95, decimal_places=2) == "0.95"
    assert format_float(0.95, decimal_places=1) == "1.0"
    assert format_float(0.95, decimal_places=0) == "1"


def test_chooses_correct_minus_sign():
    assert format_float(-1, fancy_unicode=False) == "-1"
    assert format_float(-1, fancy_unicode=True) == "−1"


@pytest.mark.parametrize("places, expected", [(2, "1234.57"), (1, "1234.6"), (0, "1235")])
def test_decimal_places(places, expected):
    assert format_float(1234.5678, decimal_places=places) == expected


@pytest.mark.parametrize("strategy, expected", [
    ("up", "1234.57"),
    ("down", "1234.56"),
    ("half-up", "1234.57"),
    ("half-down", "1234.57"),
    ("half-to-even", "1234.57"),
    ("half-to-odd", "1234.57"),
])
def test_rounding_strategies(strategy, expected):
    assert format_float(1234.5678, decimal_places=2, rounding_strategy=strategy) == expected


@pytest.mark.parametrize("strategy, pos, neg", [
    ("down", "2", "-3"),
    ("up", "3", "-2"),
    ("toward-zero", "2", "-2"),
    ("away-from-zero", "3", "-3"),
    ("half-down", "2", "-3"),
    ("half-up", "3", "-2"),
    ("half-toward-zero", "2", "-2"),
    ("half-away-from-zero", "3", "-3"),
    ("half-to-even", "2", "-2"),
    ("half-to-odd", "3", "-3"),
])
def test_rounding_strategies_on_ties(strategy, pos, neg):
    assert format_float(2.5, decimal_places=0, rounding_strategy=strategy) == pos
    assert format_float(-2.5, decimal_places=0, rounding_strategy=strategy) == neg


@pytest.mark.parametrize("strategy", ["to-even", "to-odd"])
def test_directed_parity_strategies(strategy):
    expected = "4" if strategy == "to-even" else "3"
    assert format_float(3.2, decimal_places=0, rounding_strategy=strategy) == expected


@pytest.mark.parametrize("strategy", ["stochastic", "half-random"])
def test_random_strategies_pick_a_neighbour(strategy):
    for _ in range(20):
        assert format_float(2.5, decimal_places=0, rounding_strategy=strategy) in {"2", "3"}


def test_random_strategies_are_exact_on_representable_values(monkeypatch):
    import unitlib.core.floats as floats

    monkeypatch.setattr(floats.random, "random", lambda: 0.0)
    assert format_float(2.0, decimal_places=0, rounding_strategy="stochastic") == "2"
    assert format_float(2.25, decimal_places=0, rounding_strategy="stochastic") == "3"


def test_all_strategies_are_accepted():
    for strategy in ROUNDING_STRATEGIES:
        format_float(1.25, decimal_places=1, rounding_strategy=strategy)


def test_unknown_strategy_raises():
    with pytest.raises(ValueError):
        format_float(1.0, rounding_strategy="banker")


def test_fancy_negative():
    assert format_float(-1234.5678, decimal_places=2, fancy_unicode=False) == "-1234.57"
    assert format_float(-1234.5678, decimal_places=2, fancy_unicode=True) == "−1234.57"


def test_digit_grouping():
    assert format_float(1234567.89, decimal_places=2, digit_group_length=3, digit_group_separator=",") == "1,234,567.89"
    assert format_float(1234567.89, decimal_places=2, digit_group_length=2, digit_group_separator=" ") == "1 23 45 67.89"


def test_fractional_digit_grouping():
    out = format_float(
        0.123456789,
        digit_group_length=3,
        digit_group_separator=",",
        fractional_digit_group_separator=" ",
    )
    assert out == "0.123 456 789"


def test_fractional_part_separator():
    assert format_float(1234.5678, decimal_places=2, fractional_part_separator=",") == "1234,57"


def test_negative_numbers():
    assert format_float(-1234.5678, decimal_places=2) == "-1234.57"
    assert format_float(-1234.5678, decimal_places=1) == "-1234.6"
    assert format_float(-1234.5678, decimal_places=0) == "-1235"


def test_zero():
    assert format_float(0, decimal_places=2) == "0.00"
    assert format_float(0, decimal_places=0) == "0"
    assert format_float(-0.0) == "0"
    assert format_float(-0.0, allow_negative_zero=True) == "-0"


def test_large_numbers():
    assert format_float(1e20, decimal_places=2) == "100000000000000000000.00"
    assert format_float(-1e20, decimal_places=2) == "-100000000000000000000.00"


def test_small_numbers():
    assert format_float(1e-20, decimal_places=22) == "0.0000000000000000000100"
    assert format_float(-1e-20, decimal_places=22) == "-0.0000000000000000000100"
    assert format_float(1e-20, decimal_places=19) == "0.0000000000000000000"
    assert format_float(-1e-20, decimal_places=19) == "0.0000000000000000000"
    assert format_float(-1e-20, decimal_places=19, allow_negative_zero=True) == "-0.0000000000000000000"


def test_natural_decimal_places_follow_shortest_repr():
    assert format_float(0.1) == "0.1"
    assert format_float(1.5) == "1.5"
    assert format_float(3.0) == "3"
    assert format_float(1e-7) == "0.0000001"


@pytest.mark.parametrize("value, fancy, expected", [
    (math.nan, False, "nan"),
    (math.inf, False, "inf"),
    (-math.inf, False, "-inf"),
    (math.inf, True, "∞"),
    (-math.inf, True, "−∞"),
])
def test_non_finite(value, fancy, expected):
    assert format_float(value, fancy_unicode=fancy) == expected


def test_options_object_and_mapping_are_equivalent():
    opts = NumberFormatOptions(decimal_places=1, fractional_part_separator=",")
    assert format_float(2.25, opts) == format_float(2.25, {"decimal_places": 1, "fractional_part_separator": ","})
    assert format_float(2.25, opts) == "2,3"
    # keyword overrides win
    assert format_float(2.25, opts, decimal_places=2) == "2,25"


@pytest.mark.parametrize("kwargs", [
    {"decimal_places": -1},
    {"digit_group_length": 0},
    {"fractional_digit_group_length": 0},
    {"rounding_strategy": "nope"},
])
def test_invalid_options_raise(kwargs):
    with pytest.raises(ValueError):
        NumberFormatOptions(**kwargs)


# --- round_float ---------------------------------------------------------------

def test_round_float():
    assert round_float(0.95, 1) == 1.0
    assert round_float(2.5) == 3.0
    assert round_float(-2.5) == -3.0
    assert round_float(2.5, 0, "half-to-even") == 2.0
    assert round_float(1234.5678, 2) == 1234.57
    assert round_float(1250, -2) == 1300.0
    assert math.isinf(round_float(math.inf, 2))
