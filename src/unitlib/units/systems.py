"""
unitlib.units.systems
=====================

The unit systems that ship with unitlib:

- ``SI``: the seven SI base units with decimal prefixes and the common
  derived units (``N``, ``J``, ``Pa``, ...).
- ``IEC``: bytes with binary prefixes (``KiB``, ``MiB``, ...).
- ``COMPUTING``: SI plus ``IO`` and ``B``, with both prefix families. This
  is the default system for `unitlib.parse_unit` and text given to `Quantity`.
"""

from __future__ import annotations

from unitlib.units.definitions import (
    BINARY_FACTORS,
    COMPUTING_BASE_UNITS,
    IEC_BASE_UNITS,
    SI_BASE_UNITS,
    SI_DERIVED_UNITS,
    SI_FACTORS,
)
from unitlib.units.system import UnitSystem


def _bootstrap_si() -> UnitSystem:
    return UnitSystem(SI_BASE_UNITS, SI_FACTORS, SI_DERIVED_UNITS, name="SI")


def _bootstrap_iec() -> UnitSystem:
    return UnitSystem(IEC_BASE_UNITS, BINARY_FACTORS, name="IEC")


def _bootstrap_computing() -> UnitSystem:
    factors = {**SI_FACTORS, **BINARY_FACTORS}
    return UnitSystem(SI_BASE_UNITS + COMPUTING_BASE_UNITS, factors, SI_DERIVED_UNITS, name="COMPUTING")


SI = _bootstrap_si()
IEC = _bootstrap_iec()
COMPUTING = _bootstrap_computing()

DEFAULT_SYSTEM = COMPUTING

__all__ = ["SI", "IEC", "COMPUTING", "DEFAULT_SYSTEM"]
