"""
Compile step: UserModel -> SimModel.

``compile_model()`` is the only place that can reject input. It checks every
invariant of the reduced model, collects all violations and raises one
ValidationError naming every offending field. On success it returns a frozen
SimModel holding the derived quantities the engine needs (conductances,
apertures, volumes, efficiency ratios) and a snapshot of the settings, so a
compiled model never reads mutable or global state again.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, FrozenSet, Mapping, Optional
import logging

from ..climate import ClimateLibrary, ClimateSummary
from ..core.config import Settings, settings as default_settings
from ..core.end_uses import ALLOWED_FUEL_TYPES, END_USES, EndUse, FuelType
from ..geometry.envelope import ORIENTATIONS, Orientation, TerrainClass, natural_air_changes
from ..hvac.efficiency import (
    CoolingSystem,
    HeatingSystem,
    HotWaterSystem,
    HotWaterSystemType,
    required_fuel_for,
)
from ..schedules.profiles import MonthlySchedule
from ..utils.validation import ViolationCollector
from .engine import MonthlyEnergyBalanceEngine, UtilizationParameters

if TYPE_CHECKING:
    from ..core.user_model import UserModel
    from .results import Results

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimModel:
    """
    Compiled, immutable simulation model.

    Built only by ``compile_model()``. Conductances are totals (W/K); the
    engine divides by ``floor_area`` through the ``specific_*`` accessors.
    """
    name: str
    floor_area: float                               # m²
    climate: ClimateSummary
    year: int

    # Envelope
    window_area: Mapping[Orientation, float]        # m²
    opaque_area: Mapping[Orientation, float]        # m²
    solar_aperture: Mapping[Orientation, float]     # m², window × SHGC × shading
    transmission_conductance: float                 # W/K
    envelope_area: float                            # m²

    # Air exchange
    volume: float                                   # m³
    infiltration_ach: float                         # 1/h
    infiltration_conductance: float                 # W/K
    ventilation_conductance: float                  # W/K at full HVAC operation
    heat_capacity_total: float                      # J/K

    # Loads (W/m², exterior lighting in W)
    lighting_power_density: float
    lighting_control_factor: float
    equipment_power_density: float
    occupant_gain_density: float
    exterior_lighting_power: float
    fan_power_density: float
    pump_power_density: float
    dhw_demand: float                               # kWh/m²·yr useful

    # Setpoints (°C)
    heating_setpoint: float
    heating_setback: float
    cooling_setpoint: float
    cooling_setback: float

    schedules: Mapping[str, MonthlySchedule]
    efficiency: Mapping[EndUse, float]              # Delivered -> useful ratio
    fuel_types: Mapping[EndUse, FuelType]
    active_end_uses: FrozenSet[EndUse]
    utilization: UtilizationParameters

    @property
    def internal_gain_density(self) -> float:
        """Peak internal gain of lighting, equipment and people (W/m²)."""
        return (
            self.lighting_power_density * self.lighting_control_factor
            + self.equipment_power_density
            + self.occupant_gain_density
        )

    @property
    def specific_heat_capacity(self) -> float:
        """J/K per m² floor."""
        return self.heat_capacity_total / self.floor_area

    def heat_transfer_coefficient(self, hvac_fraction: float = 1.0) -> float:
        """H = H_tr + H_inf + f × H_ve (W/K)."""
        return (
            self.transmission_conductance
            + self.infiltration_conductance
            + hvac_fraction * self.ventilation_conductance
        )

    def specific_heat_transfer(self, hvac_fraction: float = 1.0) -> float:
        """H per m² floor (W/m²K)."""
        return self.heat_transfer_coefficient(hvac_fraction) / self.floor_area

    def schedule(self, name: str) -> MonthlySchedule:
        return self.schedules[name]

    def simulate(self) -> "Results":
        """Run the twelve monthly balances and aggregate them."""
        from .aggregator import EndUseAggregator

        balances = MonthlyEnergyBalanceEngine(self).run()
        return EndUseAggregator(self.fuel_types).aggregate(
            balances, self.floor_area, name=self.name
        )


# =============================================================================
# VALIDATION
# =============================================================================

def _check_geometry(model: "UserModel", checks: ViolationCollector) -> None:
    checks.positive("floor_area", model.floor_area)
    checks.positive("building_height", model.building_height)
    if not isinstance(model.storeys, int) or isinstance(model.storeys, bool) or model.storeys < 1:
        checks.add("storeys", f"must be a whole number ≥ 1, got {model.storeys!r}")
    checks.positive("aspect_ratio", model.aspect_ratio)

    for mapping_name in ("gross_area", "window_to_wall_ratio"):
        for key in getattr(model, mapping_name):
            if not isinstance(key, Orientation):
                checks.add(mapping_name, f"unknown orientation {key!r}")

    total_gross = 0.0
    for orientation in ORIENTATIONS:
        gross = model.gross_area.get(orientation, 0.0)
        if checks.non_negative(f"gross_area.{orientation.value}", gross):
            total_gross += gross
        checks.fraction(
            f"window_to_wall_ratio.{orientation.value}",
            model.window_to_wall_ratio.get(orientation, 0.0),
        )
    checks.require(total_gross > 0, "gross_area", "envelope has no area")


def _check_envelope(model: "UserModel", checks: ViolationCollector) -> None:
    for name in ("wall_u", "roof_u", "window_u", "skylight_u",
                 "infiltration_ach50", "heat_capacity", "ventilation_rate"):
        checks.non_negative(name, getattr(model, name))
    for name in ("window_shgc", "skylight_shgc", "window_shading_factor",
                 "heat_recovery_effectiveness"):
        checks.fraction(name, getattr(model, name))
    if not isinstance(model.terrain, TerrainClass):
        checks.add("terrain", f"unknown terrain class {model.terrain!r}")


def _check_loads(model: "UserModel", checks: ViolationCollector) -> None:
    for name in ("lighting_power_density", "equipment_power_density",
                 "exterior_lighting_power", "people_density", "heat_gain_per_person",
                 "dhw_demand", "fan_power_density", "pump_power_density"):
        checks.non_negative(name, getattr(model, name))
    checks.fraction("lighting_control_factor", model.lighting_control_factor)


def _check_systems(model: "UserModel", checks: ViolationCollector) -> None:
    heating = model.heating
    if not isinstance(heating, HeatingSystem):
        checks.add("heating", f"must be a HeatingSystem, got {heating!r}")
    else:
        generation = heating.chain().generation
        if heating.is_heat_pump:
            checks.positive("heating.generation_efficiency", generation)
        else:
            checks.efficiency("heating.generation_efficiency", generation)
        checks.efficiency("heating.distribution_efficiency", heating.distribution_efficiency)
        checks.efficiency("heating.control_efficiency", heating.control_efficiency)

    cooling = model.cooling
    if not isinstance(cooling, CoolingSystem):
        checks.add("cooling", f"must be a CoolingSystem, got {cooling!r}")
    elif cooling.is_active:
        checks.positive("cooling.cop", cooling.chain().generation)
        checks.efficiency("cooling.distribution_efficiency", cooling.distribution_efficiency)
        checks.efficiency("cooling.control_efficiency", cooling.control_efficiency)

    hot_water = model.hot_water
    if not isinstance(hot_water, HotWaterSystem):
        checks.add("hot_water", f"must be a HotWaterSystem, got {hot_water!r}")
    elif hot_water.is_active:
        generation = hot_water.chain().generation
        if hot_water.system_type is HotWaterSystemType.HEAT_PUMP_WATER_HEATER:
            checks.positive("hot_water.generation_efficiency", generation)
        else:
            checks.efficiency("hot_water.generation_efficiency", generation)
        checks.efficiency("hot_water.distribution_efficiency", hot_water.distribution_efficiency)


def _check_setpoints(model: "UserModel", checks: ViolationCollector) -> None:
    names = ("heating_setpoint", "heating_setback", "cooling_setpoint", "cooling_setback")
    if not all([checks.finite(name, getattr(model, name)) for name in names]):
        return
    checks.require(
        model.heating_setpoint <= model.cooling_setpoint,
        "heating_setpoint",
        f"heating setpoint {model.heating_setpoint} °C exceeds cooling setpoint "
        f"{model.cooling_setpoint} °C",
    )
    checks.require(
        model.heating_setback <= model.cooling_setback,
        "heating_setback",
        f"heating setback {model.heating_setback} °C exceeds cooling setback "
        f"{model.cooling_setback} °C",
    )


def _check_schedules(model: "UserModel", checks: ViolationCollector) -> None:
    for name, schedule in model.schedules.items():
        if not isinstance(schedule, MonthlySchedule):
            checks.add(f"schedules.{name}", f"must be a MonthlySchedule, got {schedule!r}")
            continue
        checks.fractions(f"schedules.{name}", schedule.fractions, 12)


def _check_fuel_types(
    model: "UserModel",
    active: FrozenSet[EndUse],
    checks: ViolationCollector,
) -> None:
    for end_use, fuel in model.fuel_types.items():
        if not isinstance(end_use, EndUse):
            checks.add("fuel_types", f"unknown end use {end_use!r}")
        elif not isinstance(fuel, FuelType):
            checks.add(f"fuel_types.{end_use.value}", f"unknown fuel type {fuel!r}")

    for end_use in END_USES:
        if end_use not in active:
            continue
        field_name = f"fuel_types.{end_use.value}"
        fuel = model.fuel_types.get(end_use)
        if fuel is None:
            checks.add(field_name, "active end use has no fuel type")
        elif isinstance(fuel, FuelType) and fuel not in ALLOWED_FUEL_TYPES[end_use]:
            checks.add(field_name, f"{fuel.value} cannot serve {end_use.value}")

    systems = (
        (EndUse.HEATING, model.heating),
        (EndUse.COOLING, model.cooling),
        (EndUse.WATER_SYSTEMS, model.hot_water),
    )
    for end_use, system in systems:
        fuel = model.fuel_types.get(end_use)
        if end_use not in active or not isinstance(fuel, FuelType):
            continue
        required = required_fuel_for(system)
        if required is not None and fuel is not required:
            checks.add(
                f"fuel_types.{end_use.value}",
                f"{system.system_type.value} runs on {required.value}, not {fuel.value}",
            )


def _resolve_climate(
    model: "UserModel",
    climate: Optional[ClimateSummary],
    library: Optional[ClimateLibrary],
    checks: ViolationCollector,
) -> Optional[ClimateSummary]:
    if climate is not None:
        return climate
    if library is None:
        checks.add("weather_file", "no climate summary or climate library supplied")
        return None
    if not model.weather_file:
        checks.add("weather_file", "is required to look up the climate")
        return None
    try:
        return library.resolve(model.weather_file)
    except KeyError as e:
        checks.add("weather_file", e.args[0] if e.args else str(e))
        return None


# =============================================================================
# COMPILE
# =============================================================================

def compile_model(
    user_model: "UserModel",
    climate: Optional[ClimateSummary] = None,
    library: Optional[ClimateLibrary] = None,
    settings: Optional[Settings] = None,
) -> SimModel:
    """
    Validate a UserModel and derive the immutable SimModel.

    Args:
        user_model: Reduced building model
        climate: Climate summary to use; wins over ``library``
        library: Resolves ``user_model.weather_file`` when no climate is given
        settings: Engine settings (defaults to the module-level instance)

    Returns:
        SimModel ready for ``simulate()``

    Raises:
        ValidationError: Listing every violated invariant
    """
    settings = settings or default_settings
    label = user_model.name or "UserModel"
    checks = ViolationCollector(context=label)

    _check_geometry(user_model, checks)
    _check_envelope(user_model, checks)
    _check_loads(user_model, checks)
    _check_systems(user_model, checks)
    _check_setpoints(user_model, checks)
    _check_schedules(user_model, checks)

    active = user_model.active_end_uses()
    _check_fuel_types(user_model, active, checks)
    summary = _resolve_climate(user_model, climate, library, checks)

    checks.raise_if_any()

    sim_model = _derive(user_model, summary, active, settings)
    logger.debug(
        f"Compiled '{label}': H_tr={sim_model.transmission_conductance:.0f} W/K, "
        f"infiltration {sim_model.infiltration_ach:.2f} 1/h, "
        f"{len(active)} active end uses",
        extra={"building": user_model.name, "weather_file": user_model.weather_file or ""},
    )
    return sim_model


def _derive(
    model: "UserModel",
    climate: ClimateSummary,
    active: FrozenSet[EndUse],
    settings: Settings,
) -> SimModel:
    floor_area = float(model.floor_area)

    window_area: Dict[Orientation, float] = {}
    opaque_area: Dict[Orientation, float] = {}
    aperture: Dict[Orientation, float] = {}
    h_tr = 0.0
    for orientation in ORIENTATIONS:
        area = model.envelope_area(orientation)
        window_area[orientation] = area.window
        opaque_area[orientation] = area.opaque
        if orientation.is_wall:
            h_tr += area.opaque * model.wall_u + area.window * model.window_u
            shgc = model.window_shgc
        else:
            h_tr += area.opaque * model.roof_u + area.window * model.skylight_u
            shgc = model.skylight_shgc
        aperture[orientation] = area.window * shgc * model.window_shading_factor

    volume = floor_area * model.building_height / model.storeys
    ach = natural_air_changes(model.infiltration_ach50, model.terrain, model.storeys)
    c_air = settings.air_heat_capacity
    h_inf = c_air * ach * volume / 3600.0
    outdoor_air = model.ventilation_rate / 1000.0 * floor_area    # m³/s
    h_ve = c_air * outdoor_air * (1.0 - model.heat_recovery_effectiveness)

    occupant_gain = (
        model.heat_gain_per_person / model.people_density if model.people_density > 0 else 0.0
    )

    efficiency = {end_use: 1.0 for end_use in END_USES}
    efficiency[EndUse.HEATING] = model.heating.chain().overall
    if model.cooling.is_active:
        efficiency[EndUse.COOLING] = model.cooling.chain().overall
    if model.hot_water.is_active:
        efficiency[EndUse.WATER_SYSTEMS] = model.hot_water.chain().overall

    return SimModel(
        name=model.name,
        floor_area=floor_area,
        climate=climate,
        year=settings.reference_year,
        window_area=MappingProxyType(window_area),
        opaque_area=MappingProxyType(opaque_area),
        solar_aperture=MappingProxyType(aperture),
        transmission_conductance=h_tr,
        envelope_area=sum(model.gross_area.get(o, 0.0) for o in ORIENTATIONS),
        volume=volume,
        infiltration_ach=ach,
        infiltration_conductance=h_inf,
        ventilation_conductance=h_ve,
        heat_capacity_total=model.heat_capacity * 1000.0 * floor_area,
        lighting_power_density=model.lighting_power_density,
        lighting_control_factor=model.lighting_control_factor,
        equipment_power_density=model.equipment_power_density,
        occupant_gain_density=occupant_gain,
        exterior_lighting_power=model.exterior_lighting_power,
        fan_power_density=model.fan_power_density,
        pump_power_density=model.pump_power_density,
        dhw_demand=model.dhw_demand,
        heating_setpoint=model.heating_setpoint,
        heating_setback=model.heating_setback,
        cooling_setpoint=model.cooling_setpoint,
        cooling_setback=model.cooling_setback,
        schedules=MappingProxyType(dict(model.schedules.items())),
        efficiency=MappingProxyType(efficiency),
        fuel_types=MappingProxyType(
            {e: model.fuel_types[e] for e in END_USES if e in model.fuel_types}
        ),
        active_end_uses=active,
        utilization=UtilizationParameters(
            a0=settings.utilization_a0,
            tau0_hours=settings.utilization_tau0_hours,
            heating_gain_loss_limit=settings.heating_gain_loss_limit,
            cooling_loss_gain_limit=settings.cooling_loss_gain_limit,
        ),
    )
