import logging

import pytest

from unitlib.core.errors import UnknownFactorError, UnknownUnitError
from unitlib.core.factors import UNITY, Factor
from unitlib.units.system import DerivedUnit, UnitSystem


# --------------------------
# Tables
# --------------------------

def test_base_units_are_longest_first(toy_system):
    # equal lengths keep registration order
    assert toy_system.base_units == ("px", "m", "s")


def test_factor_table_keeps_registration_order(toy_system):
    assert list(toy_system.factors) == ["k", "Ki", "c"]
    assert toy_system.factors["Ki"] == Factor(1, 2, 10)


def test_tables_are_read_only(toy_system):
    with pytest.raises(TypeError):
        toy_system.factors["M"] = Factor(1, 10, 6)
    with pytest.raises(TypeError):
        toy_system.derived_units["N"] = DerivedUnit({"m": 1})


def test_derived_unit_table(toy_system):
    hz = toy_system.derived_units["Hz"]
    assert hz.dims == {"s": -1}
    assert hz.factor == UNITY


def test_membership(toy_system):
    assert toy_system.has_base_unit("m")
    assert not toy_system.has_base_unit("Hz")
    assert "Hz" in toy_system
    assert "px" in toy_system
    assert "k" not in toy_system
    assert 3 not in toy_system


def test_known_factor(toy_system, si):
    assert toy_system.known_factor(Factor(1, 10, 3)) == "k"
    assert toy_system.get_factor_symbol(Factor(1, 2, 10)) == "Ki"
    assert toy_system.known_factor(Factor(1, 10, 6)) is None
    # the first registered spelling of micro is used for display
    assert si.get_factor_symbol(Factor(1, 10, -6)) == "u"


def test_derived_unit_coerces_fields():
    d = DerivedUnit({"m": 3}, (1, 10, -3))
    assert d.factor == Factor(1, 10, -3)
    assert d.dims.exponent_of("m") == 3


# --------------------------
# Validation
# --------------------------

@pytest.mark.parametrize("base_units, factors, derived", [
    ([], {}, None),                                   # no base units
    (["m", "m"], {}, None),                           # duplicate base unit
    (["m"], {}, {"m": {"m": 1}}),                     # derived clashes with base
    (["m"], {}, {"Hz": {"s": -1}}),                   # derived uses unknown base
    (["m^2"], {}, None),                              # not a symbol
    ([""], {}, None),
    ([3], {}, None),
    (["m"], {"k": (1, 10, 3), "k ": (1, 10, 3)}, None),
    (["m"], {"\u212b": (1, 10, -10), "\u00c5": (1, 10, -10)}, None),  # same after NFC
    (["m"], {"k": (1, 0, 3)}, None),                  # factor base must be >= 1
])
def test_invalid_definitions_raise(base_units, factors, derived):
    with pytest.raises(ValueError):
        UnitSystem(base_units, factors, derived)


def test_symbols_are_nfc_normalized():
    system = UnitSystem(["\u212b"], {})
    assert system.base_units == ("\u00c5",)


def test_factor_may_share_a_base_unit_symbol():
    system = UnitSystem(["m"], {"m": (1, 10, -3)})
    assert system.parse_unit("mm").factor == Factor(1, 10, -3)
    assert system.parse_unit("m").factor == UNITY


def test_explicit_derived_unit_definition():
    system = UnitSystem(["m"], {}, {"L": DerivedUnit({"m": 3}, Factor(1, 10, -3))})
    assert system.parse_unit("L").is_equal(system.create_unit({"m": 3}, (1, 10, -3)))


# --------------------------
# Building units
# --------------------------

def test_create_unit(toy_system):
    assert toy_system.create_unit({"m": 1}, "k").is_equal(toy_system.parse_unit("km"))
    assert toy_system.create_unit({"m": 1}, (1, 2, 10)).factor == Factor(1, 2, 10)
    assert toy_system.create_unit({"px": 2}).exponent_of("px") == 2


def test_create_unit_defaults_to_identity(toy_system):
    u = toy_system.create_unit()
    assert u.dims == {}
    assert u.factor == UNITY
    assert u.system is toy_system


def test_create_unit_rejects_unknown_symbols(toy_system):
    with pytest.raises(UnknownUnitError):
        toy_system.create_unit({"g": 1})
    with pytest.raises(UnknownUnitError):
        toy_system.create_unit({"Hz": 1})  # only base units are accepted
    with pytest.raises(UnknownFactorError):
        toy_system.create_unit({"m": 1}, "M")


def test_derived_unit_lookup(toy_system):
    assert toy_system.derived_unit("Hz").exponent_of("s") == -1
    with pytest.raises(UnknownUnitError):
        toy_system.derived_unit("N")


# --------------------------
# Singular units
# --------------------------

def test_parse_singular(toy_system):
    assert toy_system.parse_singular("km").factor == Factor(1, 10, 3)
    assert toy_system.parse_singular("Kipx").factor == Factor(1, 2, 10)
    assert toy_system.parse_singular("cpx").exponent_of("px") == 1
    assert toy_system.parse_singular("kHz").factor == Factor(1, 10, 3)
    assert toy_system.parse_singular("Hz").is_equal(toy_system.derived_unit("Hz"))
    assert toy_system.parse_singular("k").dims == {}


@pytest.mark.parametrize("run, error", [
    ("xm", UnknownFactorError),
    ("xHz", UnknownFactorError),
    ("zz", UnknownUnitError),
])
def test_parse_singular_errors(toy_system, run, error):
    with pytest.raises(error):
        toy_system.parse_singular(run)


# --------------------------
# Misc
# --------------------------

def test_call_parses(toy_system):
    assert toy_system("km") is toy_system.parse_unit("km")


def test_repr(toy_system):
    assert repr(toy_system) == "<UnitSystem toy: px, m, s>"
    assert repr(UnitSystem(["m"], {})) == "<UnitSystem: m>"


def test_units_of_twin_systems_do_not_mix(toy_system):
    twin = UnitSystem(["m", "s", "px"], {"k": (1, 10, 3)})
    assert not toy_system.parse_unit("m").is_compatible(twin.parse_unit("m"))


def test_creation_is_logged(caplog):
    caplog.set_level(logging.DEBUG, logger="unitlib")
    UnitSystem(["m"], {}, name="tiny")
    assert any("Created unit system tiny" in r.getMessage() for r in caplog.records)


def test_cross_base_folding_is_logged(computing, caplog):
    caplog.set_level(logging.DEBUG, logger="unitlib")
    computing.parse_unit("km").multiply(computing.parse_unit("KiB"))
    assert any("Folding" in r.getMessage() for r in caplog.records)


# --------------------------
# Bundled systems
# --------------------------

def test_si_contents(si):
    assert set(si.base_units) == {"s", "m", "g", "A", "K", "mol", "cd"}
    assert {"N", "Pa", "J", "W", "Hz", "C", "V", "\u03a9", "L", "min"} <= set(si.derived_units)
    assert "B" not in si
    assert all(f.base == 10 for f in si.factors.values())


def test_iec_contents(iec):
    assert iec.base_units == ("B",)
    assert list(iec.factors) == ["Ki", "Mi", "Gi", "Ti", "Pi", "Ei", "Zi", "Yi"]
    assert all(f.base == 2 for f in iec.factors.values())


def test_computing_contents(computing, si):
    assert set(computing.base_units) == set(si.base_units) | {"IO", "B"}
    # decimal prefixes are registered before the binary ones
    names = list(computing.factors)
    assert names.index("Y") < names.index("Ki")
    assert "N" in computing
