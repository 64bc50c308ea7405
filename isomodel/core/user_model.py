"""
Reduced building model (UserModel).

The minimal parameter set the monthly engine needs: geometry reduced to gross
areas and window ratios per orientation, one effective U-value per envelope
category, one efficiency chain per system, monthly schedules and a per-building
end-use -> fuel-type table.

A UserModel is a plain mutable record. It is never simulated directly:
``compile_model()`` (or ``UserModel.to_sim_model()``) checks every invariant,
reports all violations together and returns an immutable SimModel.

Usage:
    model = UserModel(floor_area=4800.0, building_height=12.0, storeys=3)
    model.set_facade(Orientation.SOUTH, gross_area=720.0, window_ratio=0.4)
    model.weather_file = "USA_CO_Golden-NREL.724666_TMY3.epw"
    sim_model = model.to_sim_model(library=climates)
    results = sim_model.simulate()
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Dict, FrozenSet, Optional

from .config import settings
from .end_uses import EndUse, FuelType, default_fuel_types
from ..geometry.envelope import EnvelopeArea, Orientation, TerrainClass
from ..hvac.efficiency import CoolingSystem, HeatingSystem, HotWaterSystem
from ..schedules.profiles import Schedules

if TYPE_CHECKING:
    from ..climate import ClimateLibrary, ClimateSummary
    from ..simulation.sim_model import SimModel
    from .config import Settings


def _positive(value) -> bool:
    # Invalid values are reported by compile_model, never raised here
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


@dataclass
class UserModel:
    """Reduced building model. Areas in m², powers in W/m² of floor area."""

    name: str = ""

    # Geometry
    floor_area: Optional[float] = None          # Conditioned floor area (m²)
    building_height: float = 3.0                # m
    storeys: int = 1
    aspect_ratio: float = 1.0                   # Length / depth of footprint
    gross_area: Dict[Orientation, float] = field(default_factory=dict)
    window_to_wall_ratio: Dict[Orientation, float] = field(default_factory=dict)

    # Envelope
    wall_u: float = 0.35                        # W/m²K
    roof_u: float = 0.25
    window_u: float = 2.0
    skylight_u: float = 2.5
    window_shgc: float = 0.40
    skylight_shgc: float = 0.40
    window_shading_factor: float = 1.0          # 1 = unshaded
    infiltration_ach50: float = 5.0             # Air changes at 50 Pa (1/h)
    heat_capacity: float = 165.0                # Internal heat capacity (kJ/m²K floor)

    # Ventilation
    ventilation_rate: float = 1.0               # Outdoor air while HVAC runs (l/s·m²)
    heat_recovery_effectiveness: float = 0.0

    # Internal loads
    lighting_power_density: float = 10.0        # W/m²
    lighting_control_factor: float = 1.0        # Daylight / occupancy sensor multiplier
    equipment_power_density: float = 12.0       # W/m²
    exterior_lighting_power: float = 0.0        # W (absolute)
    people_density: float = 15.0                # m² per person, 0 = unoccupied
    heat_gain_per_person: float = 120.0         # W sensible
    dhw_demand: float = 5.0                     # Useful hot water energy (kWh/m²·yr)
    fan_power_density: float = 1.5              # W/m² while HVAC runs
    pump_power_density: float = 0.3             # W/m² while HVAC runs

    # Systems
    heating: HeatingSystem = field(default_factory=HeatingSystem)
    cooling: CoolingSystem = field(default_factory=CoolingSystem)
    hot_water: HotWaterSystem = field(default_factory=HotWaterSystem)

    # Setpoints (°C)
    heating_setpoint: float = field(default_factory=lambda: settings.default_heating_setpoint)
    heating_setback: float = field(default_factory=lambda: settings.default_heating_setback)
    cooling_setpoint: float = field(default_factory=lambda: settings.default_cooling_setpoint)
    cooling_setback: float = field(default_factory=lambda: settings.default_cooling_setback)

    # Schedules
    schedules: Schedules = field(default_factory=Schedules)

    # End use -> fuel type, per building
    fuel_types: Dict[EndUse, FuelType] = field(default_factory=default_fuel_types)

    # Location
    weather_file: Optional[str] = None
    terrain: TerrainClass = TerrainClass.SUBURBAN

    # =========================================================================
    # Geometry helpers
    # =========================================================================

    def set_facade(self, orientation: Orientation, gross_area: float, window_ratio: float) -> None:
        """Set gross area and window (or skylight) ratio of one orientation."""
        self.gross_area[orientation] = gross_area
        self.window_to_wall_ratio[orientation] = window_ratio

    def envelope_area(self, orientation: Orientation) -> EnvelopeArea:
        return EnvelopeArea(
            gross=self.gross_area.get(orientation, 0.0),
            window_ratio=self.window_to_wall_ratio.get(orientation, 0.0),
        )

    # =========================================================================
    # Systems
    # =========================================================================

    def active_end_uses(self) -> FrozenSet[EndUse]:
        """End uses that can draw energy in this building."""
        active = {EndUse.HEATING}
        if getattr(self.cooling, "is_active", False):
            active.add(EndUse.COOLING)
        if _positive(self.lighting_power_density):
            active.add(EndUse.INTERIOR_LIGHTING)
        if _positive(self.exterior_lighting_power):
            active.add(EndUse.EXTERIOR_LIGHTING)
        if _positive(self.equipment_power_density):
            active.add(EndUse.INTERIOR_EQUIPMENT)
        if _positive(self.fan_power_density):
            active.add(EndUse.FANS)
        if _positive(self.pump_power_density):
            active.add(EndUse.PUMPS)
        if getattr(self.hot_water, "is_active", False) and _positive(self.dhw_demand):
            active.add(EndUse.WATER_SYSTEMS)
        return frozenset(active)

    def set_fuel_type(self, end_use: EndUse, fuel_type: FuelType) -> None:
        self.fuel_types[end_use] = fuel_type

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def copy(self, **changes) -> "UserModel":
        """Deep copy, optionally with some fields replaced."""
        duplicate = copy.deepcopy(self)
        return replace(duplicate, **changes) if changes else duplicate

    def to_sim_model(
        self,
        climate: Optional["ClimateSummary"] = None,
        library: Optional["ClimateLibrary"] = None,
        settings: Optional["Settings"] = None,
    ) -> "SimModel":
        """Validate and compile. See ``isomodel.simulation.compile_model``."""
        from ..simulation.sim_model import compile_model

        return compile_model(self, climate=climate, library=library, settings=settings)
