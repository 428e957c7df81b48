"""
unitlib.units.definitions
=========================

Static tables the default unit systems are built from: base-unit symbols,
decimal (SI) and binary (IEC) prefixes, and the named SI derived units.

Mass is based on the gram, so ``kg`` parses as prefix ``k`` plus ``g`` like
every other prefixed unit. Derived units are expressed in these base units,
which is why the newton carries a factor of 10^3.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple

from unitlib.core.factors import Factor

# ---------------------------------------------------------------------------
# Base units
# ---------------------------------------------------------------------------
SI_BASE_UNITS: Tuple[str, ...] = (
    "s",    # time
    "m",    # length
    "g",    # mass
    "A",    # electric current
    "K",    # temperature
    "mol",  # amount of substance
    "cd",   # luminous intensity
)

IEC_BASE_UNITS: Tuple[str, ...] = ("B",)

COMPUTING_BASE_UNITS: Tuple[str, ...] = (
    "IO",   # I/O operations
    "B",    # bytes
)

# ---------------------------------------------------------------------------
# Factors
# ---------------------------------------------------------------------------
def _decimal(exp: int) -> Factor:
    return Factor(1.0, 10, exp)


def _binary(exp: int) -> Factor:
    return Factor(1.0, 2, exp)


SI_FACTORS: Mapping[str, Factor] = MappingProxyType({
    "da": _decimal(1),
    "h": _decimal(2),
    "k": _decimal(3),
    "M": _decimal(6),
    "G": _decimal(9),
    "T": _decimal(12),
    "P": _decimal(15),
    "E": _decimal(18),
    "Z": _decimal(21),
    "Y": _decimal(24),

    "d": _decimal(-1),
    "c": _decimal(-2),
    "m": _decimal(-3),
    "u": _decimal(-6),      # ASCII micro, used for display
    "µ": _decimal(-6),      # micro sign
    "μ": _decimal(-6),      # Greek mu
    "n": _decimal(-9),
    "p": _decimal(-12),
    "f": _decimal(-15),
    "a": _decimal(-18),
    "z": _decimal(-21),
    "y": _decimal(-24),
})

BINARY_FACTORS: Mapping[str, Factor] = MappingProxyType({
    "Ki": _binary(10),
    "Mi": _binary(20),
    "Gi": _binary(30),
    "Ti": _binary(40),
    "Pi": _binary(50),
    "Ei": _binary(60),
    "Zi": _binary(70),
    "Yi": _binary(80),
})

# ---------------------------------------------------------------------------
# Derived units (symbol -> (dims, factor)), in gram-based SI units
# ---------------------------------------------------------------------------
_KILO = _decimal(3)

FREQUENCY = {"s": -1}
FORCE = {"g": 1, "m": 1, "s": -2}
PRESSURE = {"g": 1, "m": -1, "s": -2}
ENERGY = {"g": 1, "m": 2, "s": -2}
POWER = {"g": 1, "m": 2, "s": -3}
CHARGE = {"A": 1, "s": 1}
VOLTAGE = {"g": 1, "m": 2, "s": -3, "A": -1}
RESISTANCE = {"g": 1, "m": 2, "s": -3, "A": -2}
VOLUME = {"m": 3}
TIME = {"s": 1}

SI_DERIVED_UNITS: Mapping[str, Tuple[Mapping[str, int], Factor]] = MappingProxyType({
    "Hz": (FREQUENCY, Factor()),
    "N": (FORCE, _KILO),
    "Pa": (PRESSURE, _KILO),
    "J": (ENERGY, _KILO),
    "W": (POWER, _KILO),
    "C": (CHARGE, Factor()),
    "V": (VOLTAGE, _KILO),
    "Ω": (RESISTANCE, _KILO),
    "L": (VOLUME, _decimal(-3)),
    "min": (TIME, Factor(6.0, 10, 1)),
})

__all__ = [
    "SI_BASE_UNITS",
    "IEC_BASE_UNITS",
    "COMPUTING_BASE_UNITS",
    "SI_FACTORS",
    "BINARY_FACTORS",
    "SI_DERIVED_UNITS",
]
