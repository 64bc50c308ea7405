"""Core enumerations and settings.

The reduced building model lives in ``isomodel.core.user_model`` and is
imported from there (it depends on the hvac and schedules packages).
"""

from .config import Settings, settings
from .end_uses import (
    EndUse,
    FuelType,
    END_USES,
    FUEL_TYPES,
    ALLOWED_FUEL_TYPES,
    default_fuel_types,
    parse_fuel_type,
)

__all__ = [
    "Settings",
    "settings",
    "EndUse",
    "FuelType",
    "END_USES",
    "FUEL_TYPES",
    "ALLOWED_FUEL_TYPES",
    "default_fuel_types",
    "parse_fuel_type",
]
