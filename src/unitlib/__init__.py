"""
unitlib: dimensional analysis with exact rational exponents.

Units are sparse vectors of rational exponents over the base units of a
`UnitSystem`, scaled by a symbolic factor ``multiplier * base^exponent``.
The package exposes a small, stable API; the bundled unit systems are
built lazily on first access to keep imports free of side effects.

>>> import unitlib
>>> unitlib.parse_unit("MiB / s")
Unit('MiB / s')
"""

import logging
from importlib import metadata as _metadata
from typing import Any

from unitlib.core.errors import (
    DoubleDenominatorMarkerError,
    IncompatibleUnitsError,
    InvalidExponentError,
    InvalidExponentLiteralError,
    ParseError,
    UnexpectedCharacterError,
    UnitError,
    UnknownFactorError,
    UnknownUnitError,
    UnmatchedParenthesisError,
)
from unitlib.core.factors import Factor
from unitlib.core.floats import (
    ApproxThresholds,
    NumberFormatOptions,
    abs_distance,
    are_approximately_equal,
    format_float,
    rel_distance,
    round_float,
    ulp_distance,
)
from unitlib.core.formatting import Compactness, FormatOptions
from unitlib.core.quantity import Quantity
from unitlib.core.unit import Unit
from unitlib.units.system import UnitSystem

__author__ = "Parneet Sidhu"
__license__ = "MIT"

# Try to read the installed package version first; fall back to pyproject.toml for source checkouts.
try:
    __version__ = _metadata.version("unitlib")
except _metadata.PackageNotFoundError:
    import tomllib
    from pathlib import Path

    with open(Path(__file__).resolve().parents[2] / "pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

logging.getLogger(__name__).addHandler(logging.NullHandler())

_SYSTEMS = ("SI", "IEC", "COMPUTING")

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "SI",
    "IEC",
    "COMPUTING",
    "parse_unit",
    "Unit",
    "Quantity",
    "Factor",
    "UnitSystem",
    "FormatOptions",
    "NumberFormatOptions",
    "Compactness",
    "ApproxThresholds",
    "format_float",
    "round_float",
    "ulp_distance",
    "abs_distance",
    "rel_distance",
    "are_approximately_equal",
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


# Lazy access helpers -------------------------------------------------------

def _get_system(name: str) -> UnitSystem:
    # Import here to avoid import-time side-effects.
    from unitlib.units import systems  # local import

    return getattr(systems, name)


def parse_unit(text: str) -> Unit:
    """Parse ``text`` with the default (computing) unit system."""
    return _get_system("COMPUTING").parse_unit(text)


def __getattr__(name: str) -> Any:
    """
    Lazy attribute access. Accessing 'SI', 'IEC' or 'COMPUTING' builds the
    bundled unit systems on first use.
    """
    if name in _SYSTEMS:
        return _get_system(name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    # Improve discoverability in REPL / autocomplete.
    return sorted(list(globals().keys()) + list(_SYSTEMS))
