"""
unitlib.units.parser
====================

Recursive-descent parser for unit expressions such as ``"km / s"``,
``"m^3 / (kg s^2)"``, ``"3 * 10^5 GiB"`` or ``"m^(1/2)"``.

Grammar::

    expr         := factorPrefix? term (sep term)* ('/' term (sep term)*)?
    sep          := ' ' | '*' | '·'
    term         := '(' expr ')' exponent? | symbol exponent?
    exponent     := '^' ( signed_int | '(' rational ')' ) | superscripts
    factorPrefix := decimal? ('*' | '·')? (integer exponent)?
    symbol       := run of letters, '%' or '_'

Each symbol run is a *singular unit*: an optional registered prefix
followed by a base unit (``km``, ``MiB``). The longest base-unit symbol that
ends the run wins, and whatever precedes it must be a registered prefix.
"""

from __future__ import annotations

import logging
from fractions import Fraction
from typing import TYPE_CHECKING, Optional, Tuple

from unitlib.core.errors import (
    DoubleDenominatorMarkerError,
    InvalidExponentLiteralError,
    UnexpectedCharacterError,
    UnknownFactorError,
    UnknownUnitError,
    UnmatchedParenthesisError,
)
from unitlib.core.factors import UNITY, Factor
from unitlib.core.utils import SUPERSCRIPT_CHARS, from_unicode_superscript

if TYPE_CHECKING:
    from unitlib.core.unit import Unit
    from unitlib.units.system import UnitSystem

logger = logging.getLogger(__name__)

_MINUS_SIGNS = "-−"
_MULTIPLY_SIGNS = "*·"


def is_symbol_char(ch: str) -> bool:
    return ch.isalpha() or ch in "%_"


def parse_rational(text: str) -> Fraction:
    """Parse '3', '-2', '1/2' or '-3/4' (Unicode minus accepted)."""
    literal = text.strip().replace("−", "-")
    num, sep, den = literal.partition("/")
    try:
        if not _is_signed_int(num) or (sep and not _is_signed_int(den)):
            raise ValueError(literal)
        return Fraction(int(num), int(den)) if sep else Fraction(int(num))
    except (ValueError, ZeroDivisionError) as e:
        raise InvalidExponentLiteralError(text) from e


def _is_signed_int(text: str) -> bool:
    text = text.strip()
    if text[:1] in "+-":
        text = text[1:]
    return text.isdigit() and text.isascii()


def find_closing(text: str, start: int) -> int:
    """Index of the ')' matching the '(' at ``start``."""
    depth = 0
    for j in range(start, len(text)):
        ch = text[j]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return j
    raise UnmatchedParenthesisError(text)


def normalize_text(text: str) -> str:
    """Trim and collapse whitespace runs to a single space."""
    return " ".join(text.split())


class _UnitExprParser:
    """
    One parser per nesting level; parenthesized groups are handed to a new
    parser over the inner substring.
    """

    def __init__(self, text: str, system: "UnitSystem"):
        self.s = text
        self.n = len(text)
        self.i = 0
        self.system = system

    # expr := factorPrefix? term (sep term)* ('/' term (sep term)*)?
    def parse(self) -> "Unit":
        result = self.system.create_unit({}, self._parse_factor_prefix())
        denominator = False

        while self.i < self.n:
            ch = self.s[self.i]

            if ch == " " or ch in _MULTIPLY_SIGNS:
                self.i += 1
                continue

            if ch == "/":
                if denominator:
                    raise DoubleDenominatorMarkerError(self.i)
                denominator = True
                self.i += 1
                continue

            if ch == "(":
                close = find_closing(self.s, self.i)
                inner = _UnitExprParser(self.s[self.i + 1:close].strip(), self.system).parse()
                self.i = close + 1
                term = inner.pow(self._parse_exponent())
                result = result.multiply(term.inverse() if denominator else term)
                continue

            if ch == ")":
                raise UnmatchedParenthesisError(self.s)

            if is_symbol_char(ch):
                symbol = self._parse_symbol()
                exp = self._parse_exponent()
                if denominator:
                    exp = -exp
                result = result.multiply(self.system.parse_singular(symbol).pow(exp))
                continue

            raise UnexpectedCharacterError(ch, self.i)

        return result

    # ---- factor prefix ----
    # factorPrefix := decimal? ('*' | '·')? (integer exponent)?
    def _parse_factor_prefix(self) -> Factor:
        number = self._parse_number()
        if number is None:
            return UNITY

        literal, is_integer = number
        if self._at_exponent():
            # '10^3' - the number was the base, not a multiplier
            return self._factor_power(1.0, literal, is_integer)

        multiplier = float(literal.replace(",", ".").replace("−", "-"))
        self._skip_spaces()
        if self.i < self.n and self.s[self.i] in _MULTIPLY_SIGNS:
            self.i += 1
            self._skip_spaces()
        base = self._parse_number()
        if base is None:
            return Factor(multiplier, 1, 0)
        if not self._at_exponent():
            # '3 * 24' - a base needs its exponent
            raise UnexpectedCharacterError(self.s[self.i] if self.i < self.n else "<end>", self.i)
        return self._factor_power(multiplier, base[0], base[1])

    def _factor_power(self, multiplier: float, literal: str, is_integer: bool) -> Factor:
        if not is_integer or literal.startswith(tuple(_MINUS_SIGNS)) or int(literal) < 1:
            raise UnexpectedCharacterError("^", self.i)
        exp = self._parse_exponent()
        return Factor(multiplier, int(literal), exp)

    def _parse_number(self) -> Optional[Tuple[str, bool]]:
        """Read ``-?digits([.,]digits)?(e[+-]?digits)?``; returns (literal, is_integer)."""
        s, n, i0 = self.s, self.n, self.i
        i = i0
        if i < n and s[i] in _MINUS_SIGNS:
            i += 1
        digits_start = i
        while i < n and s[i].isdigit() and s[i].isascii():
            i += 1
        if i == digits_start:
            return None
        is_integer = True
        if i < n and s[i] in ".," and i + 1 < n and s[i + 1].isdigit() and s[i + 1].isascii():
            is_integer = False
            i += 1
            while i < n and s[i].isdigit() and s[i].isascii():
                i += 1
        if i < n and s[i] in "eE":
            j = i + 1
            if j < n and s[j] in "+-":
                j += 1
            if j < n and s[j].isdigit() and s[j].isascii():
                while j < n and s[j].isdigit() and s[j].isascii():
                    j += 1
                is_integer = False
                i = j
        self.i = i
        return s[i0:i], is_integer

    def _skip_spaces(self) -> None:
        while self.i < self.n and self.s[self.i] == " ":
            self.i += 1

    # ---- terms ----
    def _parse_symbol(self) -> str:
        i0 = self.i
        while self.i < self.n and is_symbol_char(self.s[self.i]):
            self.i += 1
        return self.s[i0:self.i]

    def _at_exponent(self) -> bool:
        return self.i < self.n and (self.s[self.i] == "^" or self.s[self.i] in SUPERSCRIPT_CHARS)

    # exponent := '^' ( signed_int | '(' rational ')' ) | superscripts
    def _parse_exponent(self) -> Fraction:
        if self.i >= self.n:
            return Fraction(1)

        ch = self.s[self.i]
        if ch in SUPERSCRIPT_CHARS:
            i0 = self.i
            while self.i < self.n and self.s[self.i] in SUPERSCRIPT_CHARS:
                self.i += 1
            return parse_rational(from_unicode_superscript(self.s[i0:self.i]))

        if ch != "^":
            return Fraction(1)

        self.i += 1
        if self.i < self.n and self.s[self.i] == "(":
            close = find_closing(self.s, self.i)
            literal = self.s[self.i + 1:close]
            self.i = close + 1
            return parse_rational(literal)

        i0 = self.i
        if self.i < self.n and self.s[self.i] in "+" + _MINUS_SIGNS:
            self.i += 1
        while self.i < self.n and self.s[self.i].isdigit():
            self.i += 1
        return parse_rational(self.s[i0:self.i])


def parse_unit_expr(text: str, system: "UnitSystem") -> "Unit":
    """
    Parse ``text`` into a `Unit` of ``system``.

    ``""`` and ``"1"`` both give the dimensionless identity unit.

    Raises
    ------
    ParseError
        One of its subclasses, depending on what went wrong.
    """
    normalized = normalize_text(text)
    unit = _UnitExprParser(normalized, system).parse()
    logger.debug("Parsed %r as %r", text, unit)
    return unit


__all__ = [
    "parse_unit_expr",
    "parse_rational",
    "normalize_text",
    "find_closing",
    "is_symbol_char",
]
