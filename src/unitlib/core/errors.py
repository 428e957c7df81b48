"""
unitlib.core.errors
===================

Exception hierarchy shared by the unit algebra, the parser and the quantity
wrapper. Parse errors are ``ValueError`` subclasses and unit mismatches are
``TypeError`` subclasses, so callers that only catch the builtin types keep
working.
"""

from __future__ import annotations


class UnitError(Exception):
    """Base class for every error raised by unitlib."""


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------
class ParseError(UnitError, ValueError):
    """A unit expression could not be turned into a `Unit`."""


class UnexpectedCharacterError(ParseError):
    def __init__(self, char: str, position: int | None = None) -> None:
        self.char = char
        self.position = position
        where = "" if position is None else f" at {position}"
        super().__init__(f"Unexpected {char!r}{where}")


class UnmatchedParenthesisError(ParseError):
    def __init__(self, text: str = "") -> None:
        self.text = text
        super().__init__(f"Unmatched parenthesis in {text!r}" if text else "Unmatched parenthesis")


class UnknownUnitError(ParseError):
    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"Unknown unit {text!r}")


class UnknownFactorError(ParseError):
    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"Unknown factor {text!r}")


class DoubleDenominatorMarkerError(ParseError):
    def __init__(self, position: int | None = None) -> None:
        self.position = position
        where = "" if position is None else f" at {position}"
        super().__init__(f"Only one '/' is allowed per nesting level (second one{where})")


class InvalidExponentLiteralError(ParseError):
    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"Invalid exponent literal {text!r}")


# ---------------------------------------------------------------------------
# Algebra
# ---------------------------------------------------------------------------
class IncompatibleUnitsError(UnitError, TypeError):
    """Raised when adding, comparing or converting across different dimensions."""

    def __init__(self, lhs: object, rhs: object, operation: str = "combine") -> None:
        self.lhs = lhs
        self.rhs = rhs
        self.operation = operation
        super().__init__(f"Cannot {operation} incompatible units: '{lhs}' and '{rhs}'")


class InvalidExponentError(UnitError, ValueError):
    """Raised for exponents that cannot be represented exactly (or at all)."""


__all__ = [
    "UnitError",
    "ParseError",
    "UnexpectedCharacterError",
    "UnmatchedParenthesisError",
    "UnknownUnitError",
    "UnknownFactorError",
    "DoubleDenominatorMarkerError",
    "InvalidExponentLiteralError",
    "IncompatibleUnitsError",
    "InvalidExponentError",
]
