"""
unitlib.core.utils
==================

Small helpers shared by the dimension algebra, the parser and the display
code: exact conversion of exponents to `Fraction`, and translation between
ASCII exponents and Unicode superscripts (e.g. 'm^-2' <-> 'm⁻²').
"""

from __future__ import annotations

import math
from fractions import Fraction
from typing import Union

Rational = Union[int, Fraction]
ExponentLike = Union[int, float, Fraction, str]

# '/' maps to U+2E0D so rational exponents survive the round trip (m¹⸍²)
_SUPERSCRIPTS = str.maketrans("0123456789-/", "⁰¹²³⁴⁵⁶⁷⁸⁹⁻⸍")
_FROM_SUPERSCRIPTS = str.maketrans("⁰¹²³⁴⁵⁶⁷⁸⁹⁻⸍", "0123456789-/")

SUPERSCRIPT_CHARS = frozenset("⁰¹²³⁴⁵⁶⁷⁸⁹⁻⸍")


def _sup(n: Rational) -> str:
    """Superscript for an exponent; empty for 1."""
    return "" if n == 1 else to_unicode_superscript(format_exponent(n))


def to_unicode_superscript(text: str) -> str:
    """Translate digits, '-' and '/' to superscripts, dropping anything else."""
    return "".join(ch.translate(_SUPERSCRIPTS) for ch in text if ch in "0123456789-/")


def from_unicode_superscript(text: str) -> str:
    return text.translate(_FROM_SUPERSCRIPTS)


def format_exponent(n: Rational) -> str:
    """'3', '-2' or '1/2' (no parentheses)."""
    n = Fraction(n)
    if n.denominator == 1:
        return str(n.numerator)
    return f"{n.numerator}/{n.denominator}"


def simplify_fraction(x: Union[int, float, Fraction]) -> Union[int, float, Fraction]:
    """Reduce a `Fraction` with denominator 1 to `int`; ints and floats pass through."""
    if isinstance(x, Fraction):
        return x.numerator if x.denominator == 1 else x
    return x


def rationalize(
    value: Union[int, float],
    *,
    as_fraction: bool = False,
    max_denominator: int = 1000,
) -> Union[int, Fraction]:
    """
    Convert a number to an exact rational.

    Floats are accepted only when a fraction with a small denominator
    reproduces them *exactly* (0.5 -> 1/2, 1.25 -> 5/4). Anything else
    (pi, 0.142857, ...) raises ``ValueError`` instead of silently turning
    into an approximation.

    Parameters
    ----------
    value : int or float
        The number to convert. ``bool``, ``str`` and ``Fraction`` are rejected.
    as_fraction : bool, optional
        Always return a `Fraction`, even when the denominator is 1.
    max_denominator : int, optional
        Largest denominator tried for floats, by default 1000.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Expected int or float, got {type(value).__name__}")

    if isinstance(value, int):
        return Fraction(value) if as_fraction else value

    if not math.isfinite(value):
        raise ValueError(f"Cannot rationalize non-finite value {value!r}")

    frac = Fraction(value).limit_denominator(max_denominator)
    if float(frac) != value:
        raise ValueError(f"{value!r} is not an exact rational with denominator <= {max_denominator}")

    if as_fraction:
        return frac
    return simplify_fraction(frac)


def to_fraction(value: ExponentLike) -> Fraction:
    """Coerce an exponent-like value to `Fraction` ('3/2' strings included)."""
    if isinstance(value, Fraction):
        return value
    if isinstance(value, bool):
        raise TypeError("Exponent must be a number, not bool")
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, float):
        return Fraction(rationalize(value, as_fraction=True))
    if isinstance(value, str):
        return Fraction(value.strip())
    raise TypeError(f"Exponent must be int, float, Fraction or str, got {type(value).__name__}")
