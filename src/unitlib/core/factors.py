"""
unitlib.core.factors
====================

Scale factors of the form ``multiplier * base ** exponent``.

Keeping the base and the (rational) exponent separate lets prefixes stay
symbolic: ``k`` is ``1 * 10^3`` and ``Ki`` is ``1 * 2^10``. Factors with the
same base compose exactly; factors with different bases (``km/s`` times
``MiB``) are folded into a single base, which goes through logarithms and is
therefore only approximate.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from fractions import Fraction
from typing import Iterable, Mapping, Optional, Tuple, Union

from unitlib.core.errors import InvalidExponentError
from unitlib.core.utils import ExponentLike, to_fraction

logger = logging.getLogger(__name__)

Number = Union[int, float]


def saturating_pow(x: float, n: Number) -> float:
    """``x ** n`` that overflows to a signed infinity instead of raising."""
    if x == 0 and n < 0:
        return math.inf
    try:
        return x ** n
    except OverflowError:
        odd = isinstance(n, int) and n % 2 == 1
        return -math.inf if x < 0 and odd else math.inf


def _exp_log(base: int, exponent: Fraction) -> float:
    try:
        return math.exp(float(exponent) * math.log(base))
    except OverflowError:
        return math.inf


def _saturating_float(x: Fraction) -> float:
    try:
        return float(x)
    except OverflowError:
        return math.inf if x > 0 else -math.inf


@dataclass(frozen=True, slots=True, eq=False)
class Factor:
    """Representation of the scale ``multiplier * base ** exponent``."""

    multiplier: float = 1.0
    base: int = 1
    exponent: Fraction = Fraction(0)

    def __post_init__(self) -> None:
        if isinstance(self.base, bool) or not isinstance(self.base, int) or self.base < 1:
            raise ValueError(f"Factor base must be an integer >= 1, got {self.base!r}")
        object.__setattr__(self, "multiplier", float(self.multiplier))
        object.__setattr__(self, "exponent", to_fraction(self.exponent))

    # base^0 == 1 for every base, so the base only matters for a non-zero exponent
    def _key(self) -> Tuple[float, Optional[int], Fraction]:
        return (self.multiplier, self.base if self.exponent != 0 else None, self.exponent)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Factor):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return f"Factor({self.multiplier!r}, {self.base}, {self.exponent})"

    @property
    def is_unity(self) -> bool:
        return self.multiplier == 1 and self.exponent == 0

    @property
    def value(self) -> float:
        """The numeric value of the factor as a float."""
        if self.exponent == 0 or self.base == 1:
            return self.multiplier
        if self.multiplier == 0:
            return 0.0
        if self.exponent.denominator == 1:
            return self.multiplier * saturating_pow(float(self.base), self.exponent.numerator)
        return self.multiplier * _exp_log(self.base, self.exponent)


UNITY = Factor(1.0, 1, Fraction(0))
"""The identity scale (no prefix)."""

FactorLike = Union[Factor, Tuple[Number, int, ExponentLike]]


def as_factor(value: FactorLike) -> Factor:
    if isinstance(value, Factor):
        return value
    if isinstance(value, tuple) and len(value) == 3:
        return Factor(*value)
    raise TypeError(f"Expected Factor or (multiplier, base, exponent), got {value!r}")


# ---------------------------------------------------------------------------
# Algebra
# ---------------------------------------------------------------------------
def combine(a: Factor, b: Factor) -> Factor:
    """Product of two factors (not normalized)."""
    # a zero exponent makes the base irrelevant, so borrow the other one
    if a.exponent == 0:
        a = replace(a, base=b.base)
    if b.exponent == 0:
        b = replace(b, base=a.base)

    if a.base == b.base:
        return Factor(a.multiplier * b.multiplier, a.base, a.exponent + b.exponent)

    major, minor = (a, b) if a.base > b.base else (b, a)
    folded = minor.multiplier * _exp_log(minor.base, minor.exponent)
    logger.debug("Folding %r into base %d (approximate)", minor, major.base)
    return Factor(major.multiplier * folded, major.base, major.exponent)


def order_of_magnitude(x: float, base: int) -> int:
    """Exact ``floor(log_base(|x|))`` for finite, non-zero ``x`` and ``base > 1``."""
    mag = Fraction(abs(x))
    order = math.floor(math.log(abs(x)) / math.log(base))
    # the float estimate can be off by one at exact powers (log(1000)/log(10) < 3)
    while Fraction(base) ** (order + 1) <= mag:
        order += 1
    while Fraction(base) ** order > mag:
        order -= 1
    return order


def normalize(factor: Factor) -> Factor:
    """Move whole powers of ``base`` out of the multiplier into the exponent."""
    if factor.base == 1:
        return Factor(factor.multiplier, 1, Fraction(0))

    mul = factor.multiplier
    if mul == 0 or not math.isfinite(mul):
        return factor

    order = order_of_magnitude(mul, factor.base)
    if order == 0:
        return factor

    mul = float(Fraction(mul) / Fraction(factor.base) ** order)
    return Factor(mul, factor.base, factor.exponent + order)


def factor_pow(factor: Factor, n: ExponentLike) -> Factor:
    n = to_fraction(n)
    if n == 0:
        return Factor(1.0, factor.base, Fraction(0))
    if factor.multiplier < 0 and n.denominator != 1:
        raise InvalidExponentError(
            f"Cannot raise negative multiplier {factor.multiplier!r} to the non-integer power {n}"
        )
    if n.denominator == 1:
        mul = saturating_pow(factor.multiplier, n.numerator)
    else:
        mul = saturating_pow(factor.multiplier, float(n))
    return Factor(mul, factor.base, factor.exponent * n)


def invert(factor: Factor) -> Factor:
    mul = math.inf if factor.multiplier == 0 else 1 / factor.multiplier
    return Factor(mul, factor.base, -factor.exponent)


def divide_factors(a: Factor, b: Factor) -> float:
    """Numeric ratio ``a / b`` (approximate when the bases differ)."""
    return normalize(combine(a, invert(b))).value


def scale_value(value: float, factor: Factor, *, inverse: bool = False) -> float:
    """
    Multiply (or divide, with ``inverse=True``) ``value`` by ``factor``.

    Integer exponents go through `Fraction`, so ``0.3 * 10^-3`` and
    ``0.3 / 10^3`` give the correctly rounded result instead of accumulating
    two float roundings.
    """
    if factor.is_unity:
        return value

    if not math.isfinite(value) or factor.exponent.denominator != 1 or factor.multiplier == 0:
        scale = factor.value
        return value / scale if inverse else value * scale

    if not math.isfinite(factor.multiplier):
        return value / factor.multiplier if inverse else value * factor.multiplier

    scale = Fraction(factor.multiplier) * Fraction(factor.base) ** factor.exponent.numerator
    if inverse:
        return _saturating_float(Fraction(value) / scale)
    return _saturating_float(Fraction(value) * scale)


def get_factor_symbol(table: Mapping[str, Factor], factor: Factor) -> Optional[str]:
    """Reverse lookup of a registered factor; only exact triples match."""
    for symbol, candidate in table.items():
        if (
            candidate.multiplier == factor.multiplier
            and candidate.base == factor.base
            and candidate.exponent == factor.exponent
        ):
            return symbol
    return None


def iter_candidates(table: Mapping[str, Factor]) -> Iterable[Tuple[Optional[str], Factor]]:
    """Best-factor candidates: the unity factor (measured in base 10) first, then the table."""
    yield None, Factor(1.0, 10, Fraction(0))
    yield from table.items()


__all__ = [
    "Factor",
    "FactorLike",
    "UNITY",
    "as_factor",
    "combine",
    "normalize",
    "factor_pow",
    "invert",
    "divide_factors",
    "scale_value",
    "order_of_magnitude",
    "get_factor_symbol",
    "iter_candidates",
]
