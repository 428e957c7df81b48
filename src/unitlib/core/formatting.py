"""
unitlib.core.formatting
=======================

Rendering of `Unit` values as token lists (`unit_to_parts`) and strings
(`unit_to_string`).

The plain ASCII form is meant to be parsed back by `UnitSystem.parse_unit`:

    >>> str(SI.parse_unit("m^3 / (kg s^2)"))
    'm^3 / (kg s^2)'

A registered prefix is written in front of a unit with exponent 1 (``km``),
or in inverted form in front of a denominator unit with exponent 1 (the
``k`` of ``kg`` above). Any other factor is written out numerically
(``10^-3 m^2``).
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import TYPE_CHECKING, Any, List, Literal, Mapping, Optional, Tuple, Union

from unitlib.core import factors as _factors
from unitlib.core.floats import NumberFormatOptions, format_float, resolve_options
from unitlib.core.utils import _sup, format_exponent, to_unicode_superscript

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from unitlib.core.unit import Unit

PartKind = Literal["multiplier", "prefix", "unit", "exponent", "multiply", "divide", "paren", "space"]


@dataclass(frozen=True, slots=True)
class UnitPart:
    kind: PartKind
    text: str


@dataclass(frozen=True, slots=True)
class Compactness:
    """Which padding spaces to keep. ``True`` keeps the space."""

    space_after_numeric_part: bool = True
    spaces_around_division: bool = True
    spaces_around_multiplication: bool = True


@dataclass(frozen=True, slots=True)
class FormatOptions(NumberFormatOptions):
    """
    Display options for units (and quantities).

    Attributes
    ----------
    compact : bool or Compactness
        ``True`` drops every padding space; a `Compactness` picks them one by one.
    force_exponential : bool
        Always write the factor as ``multiplier * base^exponent``, never as a prefix.
    use_negative_exponents : bool
        Write ``m s^-1`` instead of ``m / s``.
    """

    compact: Union[bool, Compactness] = False
    force_exponential: bool = False
    use_negative_exponents: bool = False


def parse_compact_config(compact: Union[bool, Compactness, Mapping[str, bool], None]) -> Compactness:
    if isinstance(compact, Compactness):
        return compact
    if isinstance(compact, Mapping):
        return Compactness(**compact)
    keep = not compact
    return Compactness(keep, keep, keep)


def _exponent_part(exp: Fraction, fancy: bool, *, keep_one: bool = False) -> UnitPart:
    if fancy:
        text = to_unicode_superscript(format_exponent(exp)) if keep_one else _sup(exp)
        return UnitPart("exponent", text)
    text = format_exponent(exp)
    if exp.denominator != 1:
        text = f"({text})"
    return UnitPart("exponent", f"^{text}")


def _find_exact_one(terms: List[Tuple[str, Fraction]]) -> Optional[int]:
    for idx, (_, exp) in enumerate(terms):
        if exp == 1:
            return idx
    return None


def unit_to_parts(
    unit: "Unit",
    options: Union[FormatOptions, Mapping[str, Any], None] = None,
    **overrides: Any,
) -> List[UnitPart]:
    opts: FormatOptions = resolve_options(options, FormatOptions, overrides)
    spacing = parse_compact_config(opts.compact)
    fancy = opts.fancy_unicode
    mul_sign = "·" if fancy else "*"

    numerator: List[Tuple[str, Fraction]] = []
    denominator: List[Tuple[str, Fraction]] = []
    for symbol, exp in unit.dims.items():
        if exp > 0 or opts.use_negative_exponents:
            numerator.append((symbol, exp))
        else:
            denominator.append((symbol, -exp))

    factor = unit.factor
    prefix_num: Optional[Tuple[int, str]] = None
    prefix_den: Optional[Tuple[int, str]] = None

    if not factor.is_unity and not opts.force_exponential and (numerator or denominator):
        symbol = unit.system.get_factor_symbol(factor)
        idx = _find_exact_one(numerator)
        if symbol is not None and idx is not None:
            prefix_num = (idx, symbol)
        elif denominator and factor.multiplier != 0:
            inv_symbol = unit.system.get_factor_symbol(_factors.invert(factor))
            idx = _find_exact_one(denominator)
            if inv_symbol is not None and idx is not None:
                prefix_den = (idx, inv_symbol)

    numeric = not factor.is_unity and prefix_num is None and prefix_den is None

    parts: List[UnitPart] = []

    def pad(kind: str, sign: str, spaced: bool) -> None:
        if spaced:
            parts.append(UnitPart("space", " "))
        parts.append(UnitPart(kind, sign))  # type: ignore[arg-type]
        if spaced:
            parts.append(UnitPart("space", " "))

    if numeric:
        show_mul = factor.multiplier != 1 or factor.exponent == 0 or factor.base == 1
        if show_mul:
            parts.append(UnitPart("multiplier", format_float(factor.multiplier, opts)))
        if factor.exponent != 0 and factor.base != 1:
            if show_mul:
                pad("multiply", mul_sign, spacing.spaces_around_multiplication)
            parts.append(UnitPart("multiplier", str(factor.base)))
            # a bare "10" would read back as a multiplier, so "^1" is kept
            parts.append(_exponent_part(factor.exponent, fancy, keep_one=True))
        if numerator and spacing.space_after_numeric_part:
            parts.append(UnitPart("space", " "))
    elif not numerator and denominator:
        parts.append(UnitPart("multiplier", "1"))

    def emit_terms(terms: List[Tuple[str, Fraction]], prefix: Optional[Tuple[int, str]]) -> None:
        for idx, (symbol, exp) in enumerate(terms):
            if idx > 0:
                if spacing.spaces_around_multiplication:
                    parts.append(UnitPart("space", " "))
                else:
                    parts.append(UnitPart("multiply", mul_sign))
            if prefix is not None and prefix[0] == idx:
                parts.append(UnitPart("prefix", prefix[1]))
            parts.append(UnitPart("unit", symbol))
            if exp != 1:
                parts.append(_exponent_part(exp, fancy))

    emit_terms(numerator, prefix_num)

    if denominator:
        pad("divide", "/", spacing.spaces_around_division)
        grouped = len(denominator) > 1
        if grouped:
            parts.append(UnitPart("paren", "("))
        emit_terms(denominator, prefix_den)
        if grouped:
            parts.append(UnitPart("paren", ")"))

    return parts


def unit_to_string(
    unit: "Unit",
    options: Union[FormatOptions, Mapping[str, Any], None] = None,
    **overrides: Any,
) -> str:
    return "".join(part.text for part in unit_to_parts(unit, options, **overrides))


__all__ = [
    "UnitPart",
    "PartKind",
    "Compactness",
    "FormatOptions",
    "parse_compact_config",
    "unit_to_parts",
    "unit_to_string",
]
