"""
unitlib.core.floats
===================

Approximate comparison and exact decimal formatting of IEEE-754 doubles.

Distances
---------
``ulp_distance`` counts representable doubles between two values,
``abs_distance`` and ``rel_distance`` are the usual absolute and relative
differences. ``are_approximately_equal`` accepts a value pair when *any*
of the supplied thresholds is met.

Formatting
----------
``format_float`` never prints more precision than the number carries: the
digits come from the shortest repr that round-trips, and rounding to
``decimal_places`` is done on exact rationals, so ``0.95`` rounds to ``1.0``
even though the nearest double is slightly below 0.95.
"""

from __future__ import annotations

import math
import random
import struct
import sys
from dataclasses import dataclass, fields, replace
from fractions import Fraction
from typing import Any, Literal, Mapping, Optional, Tuple, Union, get_args

MIN_NORMAL_NUMBER = 2.0 ** -1022
MAX_VALUE = sys.float_info.max
MIN_VALUE = 5e-324

FANCY_MINUS = "−"


# ---------------------------------------------------------------------------
# Distances
# ---------------------------------------------------------------------------
def _bits(x: float) -> int:
    return struct.unpack("<q", struct.pack("<d", x))[0]


def ulp_distance(a: float, b: float) -> float:
    """Number of representable doubles between ``a`` and ``b``."""
    if math.isnan(a) or math.isnan(b):
        return math.inf
    if a == b:
        return 0.0

    if (a < 0) != (b < 0):
        return ulp_distance(abs(a), 0.0) + ulp_distance(abs(b), 0.0)

    # same sign: compare magnitudes; -0.0 has been handled by a == b or the sign test
    return float(abs(_bits(abs(a)) - _bits(abs(b))))


def abs_distance(a: float, b: float) -> float:
    if a == b:
        return 0.0
    if not math.isfinite(a) or not math.isfinite(b):
        return math.inf
    return abs(a - b)


def rel_distance(a: float, b: float) -> float:
    """
    Difference relative to the smaller magnitude; subnormals are measured
    against the smallest normal number.
    """
    if a == b:
        return 0.0
    if not math.isfinite(a) or not math.isfinite(b):
        return math.inf

    scale = max(min(abs(a), abs(b)), MIN_NORMAL_NUMBER)
    return abs(a - b) / scale


@dataclass(frozen=True, slots=True)
class ApproxThresholds:
    """
    Tolerances for `are_approximately_equal`. Fields left as ``None`` are
    not checked.

    Attributes
    ----------
    ulps : float, optional
        Units in the last place. After N well-behaved operations the
        expected error is roughly sqrt(N) ULPs.
    rel : float, optional
        Relative difference, see `rel_distance`.
    abs : float, optional
        Absolute difference.
    """

    ulps: Optional[float] = None
    rel: Optional[float] = None
    abs: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return self.ulps is None and self.rel is None and self.abs is None


DEFAULT_THRESHOLDS = ApproxThresholds(ulps=1024, rel=2.0 ** -43)

ThresholdsLike = Union[ApproxThresholds, Mapping[str, Optional[float]], None]


def as_thresholds(thresholds: ThresholdsLike) -> ApproxThresholds:
    if thresholds is None:
        return DEFAULT_THRESHOLDS
    if isinstance(thresholds, Mapping):
        unknown = set(thresholds) - {"ulps", "rel", "abs"}
        if unknown:
            raise ValueError(f"Unknown threshold(s): {', '.join(sorted(unknown))}")
        thresholds = ApproxThresholds(**thresholds)
    if thresholds.is_empty:
        return DEFAULT_THRESHOLDS
    return thresholds


def are_approximately_equal(a: float, b: float, thresholds: ThresholdsLike = None) -> bool:
    thr = as_thresholds(thresholds)
    if thr.ulps is not None and ulp_distance(a, b) < thr.ulps:
        return True
    if thr.rel is not None and rel_distance(a, b) < thr.rel:
        return True
    if thr.abs is not None and abs_distance(a, b) < thr.abs:
        return True
    return False


# ---------------------------------------------------------------------------
# Rounding
# ---------------------------------------------------------------------------
RoundingStrategy = Literal[
    "down",
    "up",
    "toward-zero",
    "away-from-zero",
    "to-even",
    "to-odd",
    "stochastic",
    "half-down",
    "half-up",
    "half-toward-zero",
    "half-away-from-zero",
    "half-to-even",
    "half-to-odd",
    "half-random",
]

ROUNDING_STRATEGIES: Tuple[str, ...] = get_args(RoundingStrategy)


def _directed(strategy: str, q: int, negative: bool) -> int:
    """Pick ``q`` or ``q + 1`` (magnitudes) for a non-tie decision."""
    if strategy in ("up", "half-up"):
        return q if negative else q + 1
    if strategy in ("down", "half-down"):
        return q + 1 if negative else q
    if strategy in ("toward-zero", "half-toward-zero"):
        return q
    if strategy in ("away-from-zero", "half-away-from-zero"):
        return q + 1
    if strategy in ("to-even", "half-to-even"):
        return q if q % 2 == 0 else q + 1
    if strategy in ("to-odd", "half-to-odd"):
        return q if q % 2 == 1 else q + 1
    if strategy == "half-random":
        return q + 1 if random.random() < 0.5 else q
    raise ValueError(f"Unknown rounding strategy {strategy!r}")


def _round_magnitude(mag: Fraction, decimal_places: int, strategy: str, negative: bool) -> int:
    """Round ``mag * 10**decimal_places`` to an integer using integer arithmetic only."""
    if strategy not in ROUNDING_STRATEGIES:
        raise ValueError(f"Unknown rounding strategy {strategy!r}")

    scaled = mag * Fraction(10) ** decimal_places
    q, r = divmod(scaled.numerator, scaled.denominator)
    den = scaled.denominator
    if r == 0:
        return q

    if strategy == "stochastic":
        return q + 1 if random.random() < r / den else q

    if not strategy.startswith("half-"):
        return _directed(strategy, q, negative)

    twice = 2 * r
    if twice > den:
        return q + 1
    if twice < den:
        return q
    return _directed(strategy, q, negative)


def _decimal_digits(x: float) -> Fraction:
    """Exact value of the shortest round-trip decimal representation of ``x``."""
    return Fraction(repr(abs(x)))


def _natural_decimal_places(mag: Fraction) -> int:
    """Fractional digits of a terminating decimal fraction."""
    places = 0
    while (mag * 10 ** places).denominator != 1:
        places += 1
    return places


def round_float(
    n: float,
    decimal_places: int = 0,
    rounding_strategy: RoundingStrategy = "half-away-from-zero",
) -> float:
    """Round ``n`` to ``decimal_places`` using the shortest-repr digits of ``n``."""
    if not math.isfinite(n):
        return n
    negative = n < 0
    q = _round_magnitude(_decimal_digits(n), decimal_places, rounding_strategy, negative)
    value = float(Fraction(q, 10 ** decimal_places)) if decimal_places >= 0 else float(q * 10 ** -decimal_places)
    return -value if negative else value


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class NumberFormatOptions:
    """
    Options for `format_float`.

    ``decimal_places=None`` keeps exactly the fractional digits of the
    number's shortest representation. Digit grouping is off unless
    ``digit_group_length`` is set; the fractional part follows the integer
    part settings unless its own fields are given.
    """

    fancy_unicode: bool = False
    fractional_part_separator: str = "."
    decimal_places: Optional[int] = None
    rounding_strategy: RoundingStrategy = "half-away-from-zero"
    digit_group_separator: str = ","
    digit_group_length: Optional[int] = None
    fractional_digit_group_separator: Optional[str] = None
    fractional_digit_group_length: Optional[int] = None
    allow_negative_zero: bool = False

    def __post_init__(self) -> None:
        if self.decimal_places is not None and self.decimal_places < 0:
            raise ValueError("decimal_places must be >= 0")
        for name in ("digit_group_length", "fractional_digit_group_length"):
            value = getattr(self, name)
            if value is not None and value < 1:
                raise ValueError(f"{name} must be >= 1")
        if self.rounding_strategy not in ROUNDING_STRATEGIES:
            raise ValueError(f"Unknown rounding strategy {self.rounding_strategy!r}")


_NUMBER_OPTION_NAMES = frozenset(f.name for f in fields(NumberFormatOptions))


def resolve_options(options: Any, cls: type, overrides: Mapping[str, Any]) -> Any:
    """Build an options dataclass from an instance, a mapping, or ``None`` plus overrides."""
    if options is None:
        base = cls()
    elif isinstance(options, cls):
        base = options
    elif isinstance(options, Mapping):
        base = cls(**options)
    else:
        # a richer options object (e.g. unit FormatOptions) handed to the number formatter
        names = {f.name for f in fields(cls)}
        base = cls(**{n: getattr(options, n) for n in names if hasattr(options, n)})
    return replace(base, **overrides) if overrides else base


def _group(digits: str, length: Optional[int], separator: str, from_left: bool) -> str:
    if not length or len(digits) <= length:
        return digits
    if from_left:
        chunks = [digits[i:i + length] for i in range(0, len(digits), length)]
    else:
        head = len(digits) % length
        chunks = ([digits[:head]] if head else []) + [
            digits[i:i + length] for i in range(head, len(digits), length)
        ]
    return separator.join(chunks)


def format_float(
    n: float,
    options: Union[NumberFormatOptions, Mapping[str, Any], None] = None,
    **overrides: Any,
) -> str:
    """
    Render ``n`` as an exact decimal string.

    Examples
    --------
    >>> format_float(0.95, decimal_places=1)
    '1.0'
    >>> format_float(1234567.89, digit_group_length=3)
    '1,234,567.89'
    >>> format_float(-1, fancy_unicode=True)
    '−1'
    """
    opts: NumberFormatOptions = resolve_options(options, NumberFormatOptions, overrides)
    minus = FANCY_MINUS if opts.fancy_unicode else "-"

    if math.isnan(n):
        return "nan"
    if math.isinf(n):
        body = "∞" if opts.fancy_unicode else "inf"
        return f"{minus}{body}" if n < 0 else body

    negative = math.copysign(1.0, n) < 0
    mag = _decimal_digits(n)
    places = opts.decimal_places if opts.decimal_places is not None else _natural_decimal_places(mag)

    q = _round_magnitude(mag, places, opts.rounding_strategy, negative)
    digits = str(q).rjust(places + 1, "0")
    int_part, frac_part = digits[: len(digits) - places], digits[len(digits) - places:]

    int_part = _group(int_part, opts.digit_group_length, opts.digit_group_separator, from_left=False)
    frac_len = opts.fractional_digit_group_length or opts.digit_group_length
    frac_sep = (
        opts.fractional_digit_group_separator
        if opts.fractional_digit_group_separator is not None
        else opts.digit_group_separator
    )
    frac_part = _group(frac_part, frac_len, frac_sep, from_left=True)

    text = int_part + (opts.fractional_part_separator + frac_part if places > 0 else "")
    if negative and (q != 0 or opts.allow_negative_zero):
        text = minus + text
    return text


__all__ = [
    "MIN_NORMAL_NUMBER",
    "MAX_VALUE",
    "MIN_VALUE",
    "ulp_distance",
    "abs_distance",
    "rel_distance",
    "ApproxThresholds",
    "DEFAULT_THRESHOLDS",
    "as_thresholds",
    "are_approximately_equal",
    "RoundingStrategy",
    "ROUNDING_STRATEGIES",
    "round_float",
    "NumberFormatOptions",
    "resolve_options",
    "format_float",
]
