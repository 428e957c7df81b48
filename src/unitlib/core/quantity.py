"""
unitlib.core.quantity
=====================

`Quantity` pairs a float magnitude with a `Unit`. All dimensional work is
delegated to the unit; the quantity only keeps track of the number.

>>> from unitlib import SI, Quantity
>>> q = Quantity(1500, SI.parse_unit("m"))
>>> str(q.with_best_factor())
'1.5 km'
>>> str(Quantity(2, "km / s") * 3)
'6 km / s'
"""

from __future__ import annotations

import math
from numbers import Real
from typing import Any, List, Mapping, Union

from unitlib.core.errors import IncompatibleUnitsError, InvalidExponentError
from unitlib.core.factors import saturating_pow
from unitlib.core.floats import ThresholdsLike, format_float, resolve_options
from unitlib.core.formatting import FormatOptions, UnitPart, parse_compact_config
from unitlib.core.unit import Unit
from unitlib.core.utils import ExponentLike, to_fraction

Number = Union[int, float]


def _as_unit(unit: Union[Unit, str]) -> Unit:
    if isinstance(unit, Unit):
        return unit
    if isinstance(unit, str):
        # Local import avoids a cycle: the systems module imports Unit.
        from unitlib.units.systems import DEFAULT_SYSTEM

        return DEFAULT_SYSTEM.parse_unit(unit)
    raise TypeError(f"Expected a Unit or a unit expression, got {type(unit).__name__}")


def _is_scalar(x: object) -> bool:
    return isinstance(x, Real) and not isinstance(x, bool)


class Quantity:
    """
    A magnitude expressed in a unit.

    Attributes
    ----------
    value : float
        The magnitude, in ``unit``.
    unit : Unit
        The unit the magnitude is expressed in. Text is parsed with the
        default computing system.
    """

    __slots__ = ("_value", "_unit")

    def __init__(self, value: Number, unit: Union[Unit, str]) -> None:
        if not _is_scalar(value):
            raise TypeError(f"Quantity value must be a real number, got {type(value).__name__}")
        object.__setattr__(self, "_value", float(value))
        object.__setattr__(self, "_unit", _as_unit(unit))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Quantity is immutable")

    @property
    def value(self) -> float:
        return self._value

    @property
    def unit(self) -> Unit:
        return self._unit

    @property
    def is_unitless(self) -> bool:
        return self._unit.is_unitless

    # ------------------------------------------------------------------
    # Algebra
    # ------------------------------------------------------------------
    def negative(self) -> "Quantity":
        return Quantity(-self._value, self._unit)

    def inverse(self) -> "Quantity":
        value = math.inf if self._value == 0 else 1 / self._value
        return Quantity(value, self._unit.inverse())

    def multiply(self, rhs: Union["Quantity", Unit, Number]) -> "Quantity":
        if isinstance(rhs, Quantity):
            return Quantity(self._value * rhs._value, self._unit.multiply(rhs._unit))
        if isinstance(rhs, Unit):
            return Quantity(self._value, self._unit.multiply(rhs))
        if _is_scalar(rhs):
            return Quantity(self._value * float(rhs), self._unit)
        raise TypeError(f"Cannot multiply a Quantity by {type(rhs).__name__}")

    def divide(self, rhs: Union["Quantity", Unit, Number]) -> "Quantity":
        if isinstance(rhs, Quantity):
            return self.multiply(rhs.inverse())
        if isinstance(rhs, Unit):
            return Quantity(self._value, self._unit.divide(rhs))
        if _is_scalar(rhs):
            return Quantity(self._value / float(rhs), self._unit)
        raise TypeError(f"Cannot divide a Quantity by {type(rhs).__name__}")

    def pow(self, n: ExponentLike) -> "Quantity":
        exp = to_fraction(n)
        if exp.denominator == 1:
            value = saturating_pow(self._value, exp.numerator)
        elif self._value < 0:
            raise InvalidExponentError(f"Cannot raise {self._value!r} to the non-integer power {exp}")
        else:
            value = saturating_pow(self._value, float(exp))
        return Quantity(value, self._unit.pow(exp))

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------
    def in_units(self, unit: Union[Unit, str]) -> "Quantity":
        """The same quantity expressed in ``unit``, which must be compatible."""
        target = _as_unit(unit)
        if not self._unit.is_compatible(target):
            raise IncompatibleUnitsError(self._unit, target, "convert")
        if target.factor == self._unit.factor:
            return Quantity(self._value, target)
        base_value = self._unit.multiply_value_by_factor(self._value)
        return Quantity(target.divide_value_by_factor(base_value), target)

    def with_best_factor(self) -> "Quantity":
        """Rescale to the prefix that displays the magnitude best (1500 m -> 1.5 km)."""
        return self.in_units(self._unit.with_best_factor_for(self._value))

    def _value_in(self, other: "Quantity", operation: str) -> float:
        if not isinstance(other, Quantity):
            raise TypeError(f"Cannot {operation} Quantity and {type(other).__name__}")
        if not self._unit.is_compatible(other._unit):
            raise IncompatibleUnitsError(self._unit, other._unit, operation)
        return other.in_units(self._unit)._value

    def add(self, rhs: "Quantity") -> "Quantity":
        """Sum expressed in the left operand's unit."""
        return Quantity(self._value + self._value_in(rhs, "add"), self._unit)

    def subtract(self, rhs: "Quantity") -> "Quantity":
        return Quantity(self._value - self._value_in(rhs, "subtract"), self._unit)

    def compare(self, rhs: "Quantity") -> int:
        """-1, 0 or 1, like the sign of ``self - rhs``."""
        other = self._value_in(rhs, "compare")
        if self._value < other:
            return -1
        if self._value > other:
            return 1
        return 0

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------
    def is_equal(self, rhs: object) -> bool:
        """Exact equality of both the value and the unit (``1 km`` is not ``1000 m``)."""
        if not isinstance(rhs, Quantity):
            return False
        return self._value == rhs._value and self._unit.is_equal(rhs._unit)

    def is_approx_equal(self, rhs: "Quantity", thresholds: ThresholdsLike = None) -> bool:
        """Compare the magnitudes folded into the units, so ``1 km`` matches ``1000 m``."""
        if not isinstance(rhs, Quantity):
            return False
        return self._unit.multiply(self._value).is_approx_equal(rhs._unit.multiply(rhs._value), thresholds)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------
    def to_parts(
        self,
        options: Union[FormatOptions, Mapping[str, Any], None] = None,
        **overrides: Any,
    ) -> List[UnitPart]:
        opts: FormatOptions = resolve_options(options, FormatOptions, overrides)
        parts = [UnitPart("multiplier", format_float(self._value, opts))]
        unit_parts = self._unit.to_parts(opts)
        if not unit_parts:
            return parts
        if unit_parts[0] == UnitPart("multiplier", "1") and len(unit_parts) > 1:
            # '2 / s' rather than '2 1 / s'
            return parts + unit_parts[1:]

        spaced = parse_compact_config(opts.compact).space_after_numeric_part
        if unit_parts[0].kind == "multiplier":
            # '5 * 10^3 m' rather than '5 10^3 m'
            mul_sign = "·" if opts.fancy_unicode else "*"
            if spaced:
                parts.append(UnitPart("space", " "))
            parts.append(UnitPart("multiply", mul_sign))
        if spaced:
            parts.append(UnitPart("space", " "))
        parts.extend(unit_parts)
        return parts

    def to_string(
        self,
        options: Union[FormatOptions, Mapping[str, Any], None] = None,
        **overrides: Any,
    ) -> str:
        return "".join(part.text for part in self.to_parts(options, **overrides))

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Quantity({self._value!r}, {self._unit.to_string()!r})"

    def __format__(self, spec: str) -> str:
        """Same flags as `Unit.__format__`: ``"fancy"``, ``"compact"`` or both."""
        flags = {s.strip().lower() for s in spec.split(",") if s.strip()}
        if flags - {"fancy", "compact"}:
            raise ValueError("Unknown format spec; use '', 'fancy', 'compact' or 'compact,fancy'")
        return self.to_string(fancy_unicode="fancy" in flags, compact="compact" in flags)

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        if not self._unit.is_compatible(other._unit):
            return False
        return self.is_approx_equal(other)

    __hash__ = None  # type: ignore[assignment]

    def __lt__(self, other: "Quantity") -> bool:
        return self.compare(other) < 0

    def __le__(self, other: "Quantity") -> bool:
        return self.compare(other) <= 0

    def __gt__(self, other: "Quantity") -> bool:
        return self.compare(other) > 0

    def __ge__(self, other: "Quantity") -> bool:
        return self.compare(other) >= 0

    def __neg__(self) -> "Quantity":
        return self.negative()

    def __add__(self, other: "Quantity") -> "Quantity":
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: "Quantity") -> "Quantity":
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, other: Union["Quantity", Unit, Number]) -> "Quantity":
        if isinstance(other, (Quantity, Unit)) or _is_scalar(other):
            return self.multiply(other)
        return NotImplemented

    def __rmul__(self, other: Number) -> "Quantity":
        # 3 * (2 m) -> 6 m
        if _is_scalar(other):
            return self.multiply(other)
        return NotImplemented

    def __truediv__(self, other: Union["Quantity", Unit, Number]) -> "Quantity":
        if isinstance(other, (Quantity, Unit)) or _is_scalar(other):
            return self.divide(other)
        return NotImplemented

    def __rtruediv__(self, other: Number) -> "Quantity":
        # scalar / quantity -> inverse dimension
        if not _is_scalar(other):
            return NotImplemented
        return self.inverse().multiply(other)

    def __pow__(self, n: ExponentLike) -> "Quantity":
        return self.pow(n)


__all__ = ["Quantity"]
