"""
unitlib.units.system
====================

`UnitSystem` is an immutable registry of base-unit symbols, named factors
(prefixes) and optional derived units. It is the only place `Unit` values
come from: `create_unit` builds one from a dimension mapping, `parse_unit`
from text.

Two units can only be compared or combined when they reference the *same*
system object.

Examples
--------
>>> from unitlib.units.systems import SI
>>> SI.parse_unit("km / s")
Unit('km / s')
>>> SI.create_unit({"m": 1}, "k") == SI.parse_unit("km")
True
"""

from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass
from fractions import Fraction
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, NamedTuple, Optional, Tuple, Union

from unitlib.core.dimensions import DimLike, Dimension
from unitlib.core.errors import UnknownFactorError, UnknownUnitError
from unitlib.core.factors import UNITY, Factor, FactorLike, as_factor, get_factor_symbol
from unitlib.core.unit import Unit
from unitlib.units.parser import is_symbol_char, parse_unit_expr

logger = logging.getLogger(__name__)

_PARSE_CACHE_SIZE = 1024


@dataclass(frozen=True, slots=True)
class DerivedUnit:
    """A named unit defined in terms of the system's base units (``N`` = ``k g m s^-2``)."""

    dims: Dimension
    factor: Factor = UNITY

    def __post_init__(self) -> None:
        if not isinstance(self.dims, Dimension):
            object.__setattr__(self, "dims", Dimension(self.dims))
        if not isinstance(self.factor, Factor):
            object.__setattr__(self, "factor", as_factor(self.factor))


DerivedLike = Union[DerivedUnit, Tuple[DimLike, FactorLike], DimLike]


class _Match(NamedTuple):
    prefix: str
    symbol: str


def _longest_first(symbols: Iterable[str]) -> Tuple[str, ...]:
    # sorted() is stable, so equal lengths keep their registration order
    return tuple(sorted(symbols, key=len, reverse=True))


def _check_symbol(symbol: object, what: str) -> str:
    if not isinstance(symbol, str) or not symbol:
        raise ValueError(f"{what} symbol must be a non-empty string, got {symbol!r}")
    symbol = unicodedata.normalize("NFC", symbol)
    if not all(is_symbol_char(ch) for ch in symbol):
        raise ValueError(f"{what} symbol {symbol!r} may only contain letters, '%' or '_'")
    return symbol


def _as_derived(value: DerivedLike) -> DerivedUnit:
    if isinstance(value, DerivedUnit):
        return value
    if isinstance(value, tuple) and len(value) == 2 and isinstance(value[0], Mapping):
        dims, factor = value
        return DerivedUnit(Dimension(dims), as_factor(factor))
    return DerivedUnit(Dimension(value))


class UnitSystem:
    """
    Immutable registry of base units, factors and derived units.

    Parameters
    ----------
    base_units : iterable of str
        Base-unit symbols (a mapping is accepted too; only its keys are used).
    factors : mapping of str to Factor
        Named factors in registration order. Values may also be
        ``(multiplier, base, exponent)`` tuples.
    derived_units : mapping of str to DerivedUnit, optional
        Named units expressed in the base units, e.g. ``{"Hz": {"s": -1}}``.
    name : str, optional
        Only used by ``repr``.
    """

    def __init__(
        self,
        base_units: Union[Iterable[str], Mapping[str, object]],
        factors: Mapping[str, FactorLike],
        derived_units: Optional[Mapping[str, DerivedLike]] = None,
        name: Optional[str] = None,
    ) -> None:
        seen: Dict[str, str] = {}

        def claim(symbol: object, what: str) -> str:
            sym = _check_symbol(symbol, what)
            if sym in seen:
                raise ValueError(f"Duplicate symbol {sym!r} ({what} clashes with {seen[sym]})")
            seen[sym] = what
            return sym

        bases = [claim(s, "base unit") for s in base_units]
        if not bases:
            raise ValueError("A unit system needs at least one base unit")
        self._base_units: Tuple[str, ...] = _longest_first(bases)

        # factors live in their own namespace: 'm' is both milli and metre
        table: Dict[str, Factor] = {}
        for symbol, factor in factors.items():
            sym = _check_symbol(symbol, "factor")
            if sym in table:
                raise ValueError(f"Duplicate factor symbol {sym!r}")
            table[sym] = as_factor(factor)
        self._factors: Mapping[str, Factor] = MappingProxyType(table)

        derived: Dict[str, DerivedUnit] = {}
        for symbol, definition in (derived_units or {}).items():
            sym = claim(symbol, "derived unit")
            d = _as_derived(definition)
            unknown = [s for s in d.dims if s not in bases]
            if unknown:
                raise ValueError(f"Derived unit {sym!r} uses unknown base unit(s): {', '.join(unknown)}")
            derived[sym] = d
        self._derived: Mapping[str, DerivedUnit] = MappingProxyType(
            {sym: derived[sym] for sym in _longest_first(derived)}
        )

        self.name = name
        self._parse_cached = lru_cache(maxsize=_PARSE_CACHE_SIZE)(self._parse_uncached)

        logger.debug(
            "Created unit system %s: %d base units, %d factors, %d derived units",
            name or "<anonymous>",
            len(self._base_units),
            len(self._factors),
            len(self._derived),
        )

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------
    @property
    def base_units(self) -> Tuple[str, ...]:
        """Base-unit symbols, longest first."""
        return self._base_units

    @property
    def factors(self) -> Mapping[str, Factor]:
        """Read-only factor table in registration order."""
        return self._factors

    @property
    def derived_units(self) -> Mapping[str, DerivedUnit]:
        return self._derived

    def has_base_unit(self, symbol: str) -> bool:
        return symbol in self._base_units

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and (symbol in self._base_units or symbol in self._derived)

    def get_factor_symbol(self, factor: Factor) -> Optional[str]:
        """Symbol of a registered factor with exactly this multiplier, base and exponent."""
        return get_factor_symbol(self._factors, factor)

    known_factor = get_factor_symbol

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def _resolve_factor(self, factor: Union[FactorLike, str, None]) -> Factor:
        if factor is None:
            return UNITY
        if isinstance(factor, str):
            try:
                return self._factors[factor]
            except KeyError:
                raise UnknownFactorError(factor) from None
        return as_factor(factor)

    def create_unit(self, dims: Optional[DimLike] = None, factor: Union[FactorLike, str, None] = None) -> Unit:
        """
        Build a unit from base-unit exponents and an optional factor.

        ``factor`` may be a `Factor`, the symbol of a registered factor
        (``"k"``), a ``(multiplier, base, exponent)`` tuple or ``None``.

        Raises
        ------
        UnknownUnitError
            If ``dims`` mentions a symbol that is not a base unit.
        UnknownFactorError
            If ``factor`` is a string that is not registered.
        """
        dimension = Dimension(dims or ())
        for symbol in dimension:
            if symbol not in self._base_units:
                raise UnknownUnitError(symbol)
        return Unit(self, self._resolve_factor(factor), dimension)

    def derived_unit(self, symbol: str) -> Unit:
        try:
            d = self._derived[symbol]
        except KeyError:
            raise UnknownUnitError(symbol) from None
        return Unit(self, d.factor, d.dims)

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------
    def _split(self, run: str, symbols: Iterable[str]) -> Optional[_Match]:
        for symbol in symbols:
            if run.endswith(symbol):
                return _Match(run[: len(run) - len(symbol)], symbol)
        return None

    def _prefix_factor(self, prefix: str) -> Factor:
        if not prefix:
            return UNITY
        try:
            return self._factors[prefix]
        except KeyError:
            raise UnknownFactorError(prefix) from None

    def parse_singular(self, run: str) -> Unit:
        """
        Resolve one symbol run such as ``km``, ``MiB`` or ``kPa``.

        The longest base unit that ends the run wins and anything in front
        of it must be a registered factor. Derived units are tried next, and
        finally the run may be a bare factor (``k`` alone is ×1000).
        """
        match = self._split(run, self._base_units)
        if match is not None:
            factor = self._prefix_factor(match.prefix)
            return Unit(self, factor, Dimension({match.symbol: Fraction(1)}))

        match = self._split(run, self._derived)
        if match is not None:
            unit = self.derived_unit(match.symbol)
            if not match.prefix:
                return unit
            return unit.multiply(Unit(self, self._prefix_factor(match.prefix), Dimension()))

        if run in self._factors:
            return Unit(self, self._factors[run], Dimension())

        raise UnknownUnitError(run)

    def _parse_uncached(self, text: str) -> Unit:
        return parse_unit_expr(text, self)

    def parse_unit(self, text: str) -> Unit:
        """
        Parse a unit expression such as ``"m^3 / (kg s^2)"``.

        ``""`` and ``"1"`` give the dimensionless identity unit. Results are
        cached per system.

        Raises
        ------
        ParseError
            One of its subclasses when the text is not a valid expression.
        """
        if not isinstance(text, str):
            raise TypeError(f"Unit expression must be a string, got {type(text).__name__}")
        return self._parse_cached(unicodedata.normalize("NFC", text))

    def __call__(self, text: str) -> Unit:
        return self.parse_unit(text)

    def __repr__(self) -> str:
        label = f" {self.name}" if self.name else ""
        return f"<UnitSystem{label}: {', '.join(self._base_units)}>"


__all__ = ["UnitSystem", "DerivedUnit"]
