from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - typing aid only
    from unitlib.units.system import UnitSystem

_SYSTEMS = ("SI", "IEC", "COMPUTING", "DEFAULT_SYSTEM")

# Lazy access helpers -------------------------------------------------------

def _get_system(name: str) -> "UnitSystem":
    # Import here to avoid import-time side-effects / circular imports.
    from unitlib.units import systems  # local import
    return getattr(systems, name)

def __getattr__(name: str) -> Any:
    """
    Lazy attribute access. Accessing 'SI', 'IEC', 'COMPUTING' or
    'DEFAULT_SYSTEM' bootstraps the bundled unit systems on first use.
    """
    if name in _SYSTEMS:
        return _get_system(name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

def __dir__() -> list[str]:
    # Improve discoverability in REPL / autocomplete.
    return sorted(list(globals().keys()) + list(_SYSTEMS))
