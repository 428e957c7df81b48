"""
unitlib.core.unit
=================

The immutable `Unit` value: a reference to the `UnitSystem` it belongs to,
a scale `Factor` and a sparse `Dimension` of base-unit exponents.

Every operation returns a new `Unit`. Units are only ever equal or
compatible when they come from the *same* system object.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from fractions import Fraction
from numbers import Real
from typing import TYPE_CHECKING, Any, List, Optional, Union

from unitlib.core import factors as _factors
from unitlib.core.dimensions import Dimension
from unitlib.core.errors import IncompatibleUnitsError, InvalidExponentError
from unitlib.core.factors import UNITY, Factor
from unitlib.core.floats import ThresholdsLike, are_approximately_equal
from unitlib.core.utils import ExponentLike, to_fraction

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from unitlib.core.formatting import FormatOptions, UnitPart
    from unitlib.core.quantity import Quantity
    from unitlib.units.system import UnitSystem

logger = logging.getLogger(__name__)

Number = Union[int, float]


@dataclass(frozen=True, slots=True, eq=False)
class Unit:
    """Representation of a (possibly prefixed) product of base units."""

    system: "UnitSystem"
    factor: Factor
    dims: Dimension

    def __post_init__(self) -> None:
        if not isinstance(self.dims, Dimension):
            object.__setattr__(self, "dims", Dimension(self.dims))
        if not isinstance(self.factor, Factor):
            object.__setattr__(self, "factor", _factors.as_factor(self.factor))

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------
    def exponent_of(self, symbol: str) -> Fraction:
        return self.dims.exponent_of(symbol)

    @property
    def is_unitless(self) -> bool:
        return self.factor.multiplier == 0 or self.dims.is_dimensionless

    # ------------------------------------------------------------------
    # Algebra
    # ------------------------------------------------------------------
    def _check_system(self, other: "Unit", operation: str) -> None:
        if other.system is not self.system:
            raise IncompatibleUnitsError(self, other, f"{operation} (different unit systems)")

    def inverse(self) -> "Unit":
        return Unit(self.system, _factors.invert(self.factor), -self.dims)

    def multiply(self, rhs: Union["Unit", Real]) -> "Unit":
        if isinstance(rhs, Unit):
            self._check_system(rhs, "multiply")
            factor = _factors.normalize(_factors.combine(self.factor, rhs.factor))
            return Unit(self.system, factor, self.dims * rhs.dims)

        if isinstance(rhs, Real) and not isinstance(rhs, bool):
            factor = Factor(self.factor.multiplier * float(rhs), self.factor.base, self.factor.exponent)
            return Unit(self.system, factor, self.dims)

        raise TypeError(f"Cannot multiply a Unit by {type(rhs).__name__}")

    def divide(self, rhs: Union["Unit", Real]) -> "Unit":
        if isinstance(rhs, Unit):
            return self.multiply(rhs.inverse())
        if isinstance(rhs, Real) and not isinstance(rhs, bool):
            factor = Factor(self.factor.multiplier / float(rhs), self.factor.base, self.factor.exponent)
            return Unit(self.system, factor, self.dims)
        raise TypeError(f"Cannot divide a Unit by {type(rhs).__name__}")

    def pow(self, n: ExponentLike) -> "Unit":
        try:
            exp = to_fraction(n)
        except (ValueError, ZeroDivisionError) as e:
            raise InvalidExponentError(f"Invalid unit exponent {n!r}: {e}") from e
        return Unit(self.system, _factors.factor_pow(self.factor, exp), self.dims ** exp)

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------
    def is_compatible(self, rhs: object) -> bool:
        if not isinstance(rhs, Unit) or rhs.system is not self.system:
            return False
        return self.dims == rhs.dims

    def is_equal(self, rhs: object) -> bool:
        if not isinstance(rhs, Unit) or rhs.system is not self.system:
            return False
        for symbol in self.system.base_units:
            if self.exponent_of(symbol) != rhs.exponent_of(symbol):
                return False
        # symbols outside the system can only come from hand-built Dimensions
        if self.dims != rhs.dims:
            return False
        return self.factor == rhs.factor

    def is_approx_equal(self, rhs: "Unit", thresholds: ThresholdsLike = None) -> bool:
        if not self.is_compatible(rhs):
            return False
        return are_approximately_equal(self.factor.value, rhs.factor.value, thresholds)

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------
    def multiply_value_by_factor(self, value: float) -> float:
        """Express ``value`` (given in this unit) in the unprefixed base units."""
        return _factors.scale_value(value, self.factor)

    def divide_value_by_factor(self, value: float) -> float:
        """Express ``value`` (given in the unprefixed base units) in this unit."""
        return _factors.scale_value(value, self.factor, inverse=True)

    def conversion_factor_to(self, target: "Unit") -> float:
        """How many ``target`` make one of ``self`` (km -> m gives 1000)."""
        if not self.is_compatible(target):
            raise IncompatibleUnitsError(self, target, "convert")
        return target.divide_value_by_factor(self.multiply_value_by_factor(1.0))

    def conversion_factor_from(self, source: "Unit") -> float:
        if not self.is_compatible(source):
            raise IncompatibleUnitsError(source, self, "convert")
        return self.divide_value_by_factor(source.multiply_value_by_factor(1.0))

    def with_best_factor_for(self, value: float) -> "Unit":
        """
        The same dimensions with the prefix that displays ``value`` best.

        ``value`` is a magnitude in *this* unit. The chosen factor is the
        registered prefix (or no prefix) for which the value's order of
        magnitude in that prefix's base is smallest but still non-negative,
        e.g. 6 900 000 ks -> Gs.
        """
        if value == 0:
            return Unit(self.system, UNITY, self.dims)
        if not math.isfinite(value):
            return self

        base_value = self.multiply_value_by_factor(value)
        if base_value == 0 or not math.isfinite(base_value):
            return Unit(self.system, UNITY, self.dims)

        best: Optional[Factor] = None
        best_dist: Optional[Fraction] = None
        for symbol, candidate in _factors.iter_candidates(self.system.factors):
            if candidate.base == 1 or candidate.multiplier == 0:
                continue
            dist = _factors.order_of_magnitude(base_value / candidate.multiplier, candidate.base) - candidate.exponent
            if dist >= 0 and (best_dist is None or dist < best_dist):
                best, best_dist = (UNITY if symbol is None else candidate), dist

        logger.debug("Best factor for %r %s: %r", value, self, best)
        return Unit(self.system, best if best is not None else UNITY, self.dims)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------
    def to_parts(self, options: Optional["FormatOptions"] = None, **overrides: Any) -> List["UnitPart"]:
        from unitlib.core.formatting import unit_to_parts

        return unit_to_parts(self, options, **overrides)

    def to_string(self, options: Optional["FormatOptions"] = None, **overrides: Any) -> str:
        from unitlib.core.formatting import unit_to_string

        return unit_to_string(self, options, **overrides)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Unit({self.to_string()!r})"

    def __format__(self, spec: str) -> str:
        """
        ``""`` gives the plain form, ``"fancy"`` superscripts, ``"compact"``
        removes padding spaces; both may be combined ("compact,fancy").
        """
        flags = {s.strip().lower() for s in spec.split(",") if s.strip()}
        unknown = flags - {"fancy", "compact"}
        if unknown:
            raise ValueError("Unknown format spec; use '', 'fancy', 'compact' or 'compact,fancy'")
        return self.to_string(fancy_unicode="fancy" in flags, compact="compact" in flags)

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Unit):
            return NotImplemented
        return self.is_equal(other)

    def __hash__(self) -> int:
        return hash((id(self.system), self.dims, self.factor))

    def __mul__(self, other: Union["Unit", Real]) -> "Unit":
        if isinstance(other, (Unit, Real)):
            return self.multiply(other)
        return NotImplemented

    def __rmul__(self, value: Real) -> "Quantity":
        # 3 * unit -> Quantity, as with the reference project's LinearUnit
        from unitlib.core.quantity import Quantity

        if isinstance(value, Real) and not isinstance(value, bool):
            return Quantity(float(value), self)
        return NotImplemented

    def __truediv__(self, other: Union["Unit", Real]) -> "Unit":
        if isinstance(other, (Unit, Real)):
            return self.divide(other)
        return NotImplemented

    def __rtruediv__(self, n: Real) -> "Unit":
        if n != 1:
            raise TypeError(
                f"Invalid operation: cannot divide {n} by a Unit ({self}). "
                "Only 1/unit (reciprocal) is supported."
            )
        return self.inverse()

    def __pow__(self, n: ExponentLike) -> "Unit":
        return self.pow(n)


__all__ = ["Unit"]
