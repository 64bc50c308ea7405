"""
HVAC system modeling for the monthly engine.

Each heating, cooling and hot water system is collapsed into a seasonal
efficiency chain (generation × distribution × control).

Usage:
    from isomodel.hvac import HeatingSystem, HeatingSystemType

    heating = HeatingSystem(HeatingSystemType.CONDENSING_BOILER)
    heating.chain().overall   # 0.92 * 0.95 * 0.97
"""

from .efficiency import (
    HeatingSystemType,
    CoolingSystemType,
    HotWaterSystemType,
    SystemDefaults,
    HEATING_DEFAULTS,
    COOLING_DEFAULTS,
    HOT_WATER_DEFAULTS,
    EfficiencyChain,
    HeatingSystem,
    CoolingSystem,
    HotWaterSystem,
    default_fuel_for,
    FIXED_CARRIER_TYPES,
    required_fuel_for,
)

__all__ = [
    # Enums
    "HeatingSystemType",
    "CoolingSystemType",
    "HotWaterSystemType",
    # Defaults
    "SystemDefaults",
    "HEATING_DEFAULTS",
    "COOLING_DEFAULTS",
    "HOT_WATER_DEFAULTS",
    # Data classes
    "EfficiencyChain",
    "HeatingSystem",
    "CoolingSystem",
    "HotWaterSystem",
    "default_fuel_for",
    "FIXED_CARRIER_TYPES",
    "required_fuel_for",
]
