# unitlib.core.dimensions

from __future__ import annotations

from fractions import Fraction
from typing import Any, Iterable, Iterator, Mapping, Tuple, Union

from unitlib.core.utils import ExponentLike, format_exponent, to_fraction

DimLike = Union["Dimension", Mapping[str, ExponentLike], Iterable[Tuple[str, ExponentLike]]]


class Dimension(Mapping[str, Fraction]):
    """
    Immutable sparse vector of rational exponents keyed by base-unit symbol.

    Zero exponents are never stored, so two dimensions are equal exactly
    when they have the same items, however they were built. Key order is
    kept (first appearance wins) and is what the display code follows.
    """

    __slots__ = ("_exps", "_hash")

    def __init__(self, data: DimLike = ()) -> None:
        if isinstance(data, Dimension):
            exps = dict(data._exps)
        else:
            items = data.items() if isinstance(data, Mapping) else data
            exps = {}
            for sym, exp in items:
                if not isinstance(sym, str) or not sym:
                    raise TypeError(f"Dimension keys must be non-empty strings, got {sym!r}")
                e = exps.get(sym, Fraction(0)) + to_fraction(exp)
                exps[sym] = e
            exps = {s: e for s, e in exps.items() if e != 0}
        self._exps: dict[str, Fraction] = exps
        self._hash: int | None = None

    # --- Mapping protocol ---
    def __getitem__(self, symbol: str) -> Fraction:
        return self._exps[symbol]

    def __iter__(self) -> Iterator[str]:
        return iter(self._exps)

    def __len__(self) -> int:
        return len(self._exps)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Dimension):
            return self._exps == other._exps
        if isinstance(other, Mapping):
            try:
                coerced = Dimension(other)
            except (TypeError, ValueError, ArithmeticError):
                return False
            return self._exps == coerced._exps
        return NotImplemented

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(frozenset(self._exps.items()))
        return self._hash

    # --- Algebra (operator overloads) ---
    def __mul__(self, other: DimLike) -> "Dimension":
        o = other if isinstance(other, Dimension) else Dimension(other)
        merged = dict(self._exps)
        for sym, exp in o.items():
            merged[sym] = merged.get(sym, Fraction(0)) + exp
        return Dimension(merged)

    def __truediv__(self, other: DimLike) -> "Dimension":
        o = other if isinstance(other, Dimension) else Dimension(other)
        return self * (-o)

    def __neg__(self) -> "Dimension":
        return Dimension({sym: -exp for sym, exp in self._exps.items()})

    def __pow__(self, n: ExponentLike, modulo: Any | None = None) -> "Dimension":
        # Python may call __pow__ with a third arg (modulo); reject it explicitly
        if modulo is not None:
            raise TypeError("Modulo exponentiation is not supported for Dimension.")
        n = to_fraction(n)
        return Dimension({sym: exp * n for sym, exp in self._exps.items()})

    # --- Helpers ---
    def exponent_of(self, symbol: str) -> Fraction:
        return self._exps.get(symbol, Fraction(0))

    @property
    def is_dimensionless(self) -> bool:
        return not self._exps

    def __repr__(self) -> str:
        parts = ""
        for sym, exp in self._exps.items():
            e = format_exponent(exp)
            if exp.denominator != 1:
                e = f"({e})"
            parts += f"[{sym}^{e}]"
        return f"Dimension({parts})" if parts else "Dimension()"


DIM_0: Dimension = Dimension()
