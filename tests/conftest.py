# tests/conftest.py
import pytest

from unitlib.units.system import UnitSystem
from unitlib.units.systems import COMPUTING, IEC, SI


@pytest.fixture(scope="session")
def si():
    return SI


@pytest.fixture(scope="session")
def iec():
    return IEC


@pytest.fixture(scope="session")
def computing():
    return COMPUTING


@pytest.fixture
def toy_system():
    """A small system with one decimal and one binary prefix and a derived unit."""
    return UnitSystem(
        ["m", "s", "px"],
        {"k": (1, 10, 3), "Ki": (1, 2, 10), "c": (1, 10, -2)},
        {"Hz": {"s": -1}},
        name="toy",
    )
