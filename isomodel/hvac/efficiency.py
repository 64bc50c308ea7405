"""
HVAC system efficiency chains.

A monthly engine cannot follow part-load curves, so each system is reduced to
a seasonal delivered-to-useful chain:

    delivered = useful / (generation × distribution × control)

where ``generation`` is a seasonal efficiency for combustion and resistance
systems or a seasonal COP for heat pumps and chillers (so it may exceed 1),
and ``distribution`` / ``control`` are loss factors in (0, 1].

Default seasonal values are typical of ASHRAE 90.1 / EN 15316 reference
systems and are only used when a model gives a system type without numbers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, NamedTuple, Optional
import logging

from ..core.end_uses import FuelType

logger = logging.getLogger(__name__)


class HeatingSystemType(Enum):
    """Space heating generators."""
    GAS_BOILER = "gas_boiler"
    CONDENSING_BOILER = "condensing_boiler"
    OIL_BOILER = "oil_boiler"
    DISTRICT_HEATING = "district_heating"
    ELECTRIC_RESISTANCE = "electric_resistance"
    AIR_SOURCE_HP = "air_source_hp"
    GROUND_SOURCE_HP = "ground_source_hp"
    FURNACE = "furnace"


class CoolingSystemType(Enum):
    """Space cooling generators."""
    NONE = "none"
    DX = "dx"                                  # Packaged / split direct expansion
    AIR_COOLED_CHILLER = "air_cooled_chiller"
    WATER_COOLED_CHILLER = "water_cooled_chiller"
    ABSORPTION_CHILLER = "absorption_chiller"
    DISTRICT_COOLING = "district_cooling"


class HotWaterSystemType(Enum):
    """Domestic hot water generators."""
    NONE = "none"
    GAS_WATER_HEATER = "gas_water_heater"
    ELECTRIC_WATER_HEATER = "electric_water_heater"
    HEAT_PUMP_WATER_HEATER = "heat_pump_water_heater"
    DISTRICT_HEATING = "district_heating"


class SystemDefaults(NamedTuple):
    """Seasonal generation efficiency (or COP) and the usual carrier."""
    generation: float
    fuel: FuelType


HEATING_DEFAULTS: Dict[HeatingSystemType, SystemDefaults] = {
    HeatingSystemType.GAS_BOILER: SystemDefaults(0.82, FuelType.NATURAL_GAS),
    HeatingSystemType.CONDENSING_BOILER: SystemDefaults(0.92, FuelType.NATURAL_GAS),
    HeatingSystemType.OIL_BOILER: SystemDefaults(0.84, FuelType.OTHER),
    HeatingSystemType.DISTRICT_HEATING: SystemDefaults(0.97, FuelType.DISTRICT_HEATING),
    HeatingSystemType.ELECTRIC_RESISTANCE: SystemDefaults(1.0, FuelType.ELECTRICITY),
    HeatingSystemType.AIR_SOURCE_HP: SystemDefaults(3.0, FuelType.ELECTRICITY),
    HeatingSystemType.GROUND_SOURCE_HP: SystemDefaults(4.2, FuelType.ELECTRICITY),
    HeatingSystemType.FURNACE: SystemDefaults(0.80, FuelType.NATURAL_GAS),
}

COOLING_DEFAULTS: Dict[CoolingSystemType, SystemDefaults] = {
    CoolingSystemType.DX: SystemDefaults(3.0, FuelType.ELECTRICITY),
    CoolingSystemType.AIR_COOLED_CHILLER: SystemDefaults(3.2, FuelType.ELECTRICITY),
    CoolingSystemType.WATER_COOLED_CHILLER: SystemDefaults(5.5, FuelType.ELECTRICITY),
    CoolingSystemType.ABSORPTION_CHILLER: SystemDefaults(1.0, FuelType.NATURAL_GAS),
    CoolingSystemType.DISTRICT_COOLING: SystemDefaults(1.0, FuelType.DISTRICT_COOLING),
}

HOT_WATER_DEFAULTS: Dict[HotWaterSystemType, SystemDefaults] = {
    HotWaterSystemType.GAS_WATER_HEATER: SystemDefaults(0.80, FuelType.NATURAL_GAS),
    HotWaterSystemType.ELECTRIC_WATER_HEATER: SystemDefaults(0.95, FuelType.ELECTRICITY),
    HotWaterSystemType.HEAT_PUMP_WATER_HEATER: SystemDefaults(2.5, FuelType.ELECTRICITY),
    HotWaterSystemType.DISTRICT_HEATING: SystemDefaults(0.95, FuelType.DISTRICT_HEATING),
}


@dataclass(frozen=True)
class EfficiencyChain:
    """Generation × distribution × control, composed into one ratio."""
    generation: float
    distribution: float = 1.0
    control: float = 1.0

    @property
    def overall(self) -> float:
        return self.generation * self.distribution * self.control


@dataclass
class HeatingSystem:
    """Space heating system of a reduced model."""
    system_type: HeatingSystemType = HeatingSystemType.GAS_BOILER
    generation_efficiency: Optional[float] = None   # None -> type default
    distribution_efficiency: float = 0.95
    control_efficiency: float = 0.97

    def chain(self) -> EfficiencyChain:
        generation = self.generation_efficiency
        if generation is None:
            generation = HEATING_DEFAULTS[self.system_type].generation
        return EfficiencyChain(generation, self.distribution_efficiency, self.control_efficiency)

    @property
    def is_active(self) -> bool:
        return True

    @property
    def is_heat_pump(self) -> bool:
        return self.system_type in (
            HeatingSystemType.AIR_SOURCE_HP,
            HeatingSystemType.GROUND_SOURCE_HP,
        )


@dataclass
class CoolingSystem:
    """Space cooling system of a reduced model (COP-based)."""
    system_type: CoolingSystemType = CoolingSystemType.AIR_COOLED_CHILLER
    cop: Optional[float] = None
    distribution_efficiency: float = 0.95
    control_efficiency: float = 0.97

    def chain(self) -> EfficiencyChain:
        cop = self.cop
        if cop is None:
            cop = COOLING_DEFAULTS.get(self.system_type, SystemDefaults(1.0, FuelType.ELECTRICITY)).generation
        return EfficiencyChain(cop, self.distribution_efficiency, self.control_efficiency)

    @property
    def is_active(self) -> bool:
        return self.system_type is not CoolingSystemType.NONE


@dataclass
class HotWaterSystem:
    """Domestic hot water system of a reduced model."""
    system_type: HotWaterSystemType = HotWaterSystemType.GAS_WATER_HEATER
    generation_efficiency: Optional[float] = None
    distribution_efficiency: float = 0.85    # Circulation and pipe losses

    def chain(self) -> EfficiencyChain:
        generation = self.generation_efficiency
        if generation is None:
            generation = HOT_WATER_DEFAULTS.get(
                self.system_type, SystemDefaults(1.0, FuelType.ELECTRICITY)
            ).generation
        return EfficiencyChain(generation, self.distribution_efficiency)

    @property
    def is_active(self) -> bool:
        return self.system_type is not HotWaterSystemType.NONE


def default_fuel_for(system) -> Optional[FuelType]:
    """Usual carrier for a heating, cooling or hot water system."""
    if isinstance(system, HeatingSystem):
        return HEATING_DEFAULTS[system.system_type].fuel
    if isinstance(system, CoolingSystem):
        defaults = COOLING_DEFAULTS.get(system.system_type)
    elif isinstance(system, HotWaterSystem):
        defaults = HOT_WATER_DEFAULTS.get(system.system_type)
    else:
        raise TypeError(f"Not an HVAC system: {system!r}")
    return defaults.fuel if defaults else None


# Generator types that can only run on their usual carrier
FIXED_CARRIER_TYPES = {
    HeatingSystem: frozenset({
        HeatingSystemType.DISTRICT_HEATING,
        HeatingSystemType.ELECTRIC_RESISTANCE,
        HeatingSystemType.AIR_SOURCE_HP,
        HeatingSystemType.GROUND_SOURCE_HP,
    }),
    CoolingSystem: frozenset({
        CoolingSystemType.DX,
        CoolingSystemType.AIR_COOLED_CHILLER,
        CoolingSystemType.WATER_COOLED_CHILLER,
        CoolingSystemType.DISTRICT_COOLING,
    }),
    HotWaterSystem: frozenset({
        HotWaterSystemType.ELECTRIC_WATER_HEATER,
        HotWaterSystemType.HEAT_PUMP_WATER_HEATER,
        HotWaterSystemType.DISTRICT_HEATING,
    }),
}


def required_fuel_for(system) -> Optional[FuelType]:
    """
    Carrier a system is bound to, or None when its type can burn several.

    Heat pumps, chillers and resistance heaters need electricity and district
    systems need their network; boilers and absorption chillers may run on
    any fuel allowed for the end use.
    """
    fixed = FIXED_CARRIER_TYPES.get(type(system))
    if fixed is not None and system.system_type in fixed:
        return default_fuel_for(system)
    return None
