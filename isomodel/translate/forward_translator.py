"""
Forward Translator - DetailedBuilding -> UserModel.

Reduces a detailed description to the monthly engine's parameter set:

1. Floor area: conditioned spaces × multipliers
2. Envelope: outdoor surfaces bucketed into N/E/S/W/ROOF, effective U and
   SHGC per category weighted by area, window ratio per orientation
3. Loads: space densities weighted by floor area
4. Systems: efficiencies weighted by served floor area (simple average
   when any served area is unknown), fuel of the largest share
5. Schedules: day-type profiles collapsed into monthly fractions

Translation is deterministic and never mutates the description. Missing
mandatory data raises TranslationError; everything else falls back to the
UserModel defaults with a logged warning.
"""

from typing import List, Optional, Sequence, Tuple, Type, TypeVar
from enum import Enum
import logging

from ..core.config import settings
from ..core.end_uses import EndUse, FuelType, parse_fuel_type
from ..core.user_model import UserModel
from ..geometry.envelope import (
    HEAT_CAPACITY_BY_CLASS,
    ORIENTATIONS,
    WALL_ORIENTATIONS,
    Orientation,
    box_envelope,
    surface_orientation,
)
from ..hvac.efficiency import (
    CoolingSystem,
    CoolingSystemType,
    HeatingSystem,
    HotWaterSystem,
    HotWaterSystemType,
    HeatingSystemType,
    default_fuel_for,
)
from ..schedules.profiles import DailySchedule, HourlyProfile, MonthlySchedule
from .description import (
    BoundaryCondition,
    DailyProfile,
    DetailedBuilding,
    SurfaceType,
    SystemDescription,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


class TranslationError(ValueError):
    """Raised when a detailed description lacks data the reduced model needs."""

    def __init__(self, message: str, field: str = "", suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field = field
        self.suggestions = suggestions or []


class _Weighted:
    """Running area-weighted average."""

    def __init__(self):
        self.total = 0.0
        self.weight = 0.0

    def add(self, value: float, weight: float) -> None:
        if weight > 0:
            self.total += value * weight
            self.weight += weight

    def mean(self, default: float) -> float:
        return self.total / self.weight if self.weight > 0 else default


class ForwardTranslator:
    """
    Translate detailed building descriptions into reduced models.

    Usage:
        translator = ForwardTranslator()
        user_model = translator.translate(building)
        for message in translator.warnings:
            print(message)
    """

    def __init__(self, year: Optional[int] = None):
        self.year = year or settings.reference_year
        self.warnings: List[str] = []

    def translate(self, building: DetailedBuilding) -> UserModel:
        """
        Translate a DetailedBuilding.

        Raises:
            TranslationError: Missing floor area or weather file, sub-surfaces
                larger than their surface, unknown system kinds or fuels
        """
        self.warnings = []
        label = building.name or "building"

        floor_area = self._floor_area(building)
        weather_file = building.location.weather_file
        if not weather_file:
            raise TranslationError(
                f"'{label}' has no weather file",
                field="weather_file",
                suggestions=["Set location.weather_file to an EPW path or station name"],
            )

        storeys = building.storeys
        height = building.building_height or storeys * settings.default_storey_height

        model = UserModel(
            name=building.name,
            floor_area=floor_area,
            building_height=height,
            storeys=storeys,
            aspect_ratio=building.aspect_ratio,
            weather_file=weather_file,
            terrain=building.location.terrain,
            infiltration_ach50=building.infiltration_ach50,
            heat_capacity=_heat_capacity(building),
            ventilation_rate=building.ventilation.outdoor_air_rate,
            heat_recovery_effectiveness=building.ventilation.heat_recovery_effectiveness,
            fan_power_density=building.ventilation.fan_power_density,
            pump_power_density=building.ventilation.pump_power_density,
            lighting_control_factor=building.lighting_control_factor,
            heat_gain_per_person=building.heat_gain_per_person,
            exterior_lighting_power=building.exterior_lighting_power,
            dhw_demand=building.dhw_demand,
            heating_setpoint=building.setpoints.heating,
            heating_setback=building.setpoints.heating_setback,
            cooling_setpoint=building.setpoints.cooling,
            cooling_setback=building.setpoints.cooling_setback,
        )

        if building.surfaces:
            self._translate_surfaces(building, model)
        else:
            self._translate_box(building, model)
        self._translate_loads(building, model)
        self._translate_systems(building, model)
        self._translate_schedules(building, model)

        for message in self.warnings:
            logger.warning(message, extra={"building": building.name})
        logger.info(
            f"Translated '{label}': {floor_area:.0f} m², "
            f"{sum(model.gross_area.values()):.0f} m² envelope",
            extra={"building": building.name, "weather_file": weather_file},
        )
        return model

    # =========================================================================
    # Floor area
    # =========================================================================

    def _floor_area(self, building: DetailedBuilding) -> float:
        floor_area = sum(s.total_floor_area for s in building.conditioned_spaces)
        if floor_area <= 0:
            raise TranslationError(
                f"'{building.name or 'building'}' has no conditioned floor area",
                field="floor_area",
                suggestions=["Add at least one conditioned space with a floor area"],
            )
        return floor_area

    # =========================================================================
    # Envelope
    # =========================================================================

    def _translate_surfaces(self, building: DetailedBuilding, model: UserModel) -> None:
        gross = {o: 0.0 for o in ORIENTATIONS}
        glazed = {o: 0.0 for o in ORIENTATIONS}
        wall_u, roof_u = _Weighted(), _Weighted()
        window_u, skylight_u = _Weighted(), _Weighted()
        window_shgc, skylight_shgc = _Weighted(), _Weighted()
        skipped = 0

        for i, surface in enumerate(building.surfaces):
            if surface.boundary is not BoundaryCondition.OUTDOORS or surface.type is SurfaceType.FLOOR:
                skipped += 1
                continue

            if surface.type is SurfaceType.ROOF:
                orientation = Orientation.ROOF
            else:
                orientation = surface_orientation(surface.azimuth, surface.tilt)
            is_roof = orientation is Orientation.ROOF

            sub_area = sum(sub.area for sub in surface.sub_surfaces)
            if sub_area > surface.gross_area + 1e-6:
                raise TranslationError(
                    f"Surface '{surface.name or i}' has {sub_area:.1f} m² of sub-surfaces "
                    f"on {surface.gross_area:.1f} m² gross area",
                    field=f"surfaces[{i}].sub_surfaces",
                )

            gross[orientation] += surface.gross_area
            opaque = (wall_u, roof_u)[is_roof]
            opaque.add(surface.u_value, surface.gross_area - sub_area)

            for sub in surface.sub_surfaces:
                if not sub.type.is_glazed:
                    # Doors count as opaque envelope
                    opaque.add(sub.u_value, sub.area)
                    continue
                glazed[orientation] += sub.area
                (window_u, skylight_u)[is_roof].add(sub.u_value, sub.area)
                if sub.shgc is not None:
                    (window_shgc, skylight_shgc)[is_roof].add(sub.shgc, sub.area)

        if skipped:
            logger.debug(f"Skipped {skipped} ground, adiabatic or floor surfaces")
        if not any(gross.values()):
            raise TranslationError(
                f"'{building.name or 'building'}' has no outdoor walls or roofs",
                field="surfaces",
            )

        for orientation in ORIENTATIONS:
            if gross[orientation] > 0:
                model.set_facade(orientation, gross[orientation], glazed[orientation] / gross[orientation])
        if gross[Orientation.ROOF] == 0:
            self.warnings.append("No roof surfaces: roof losses are ignored")

        model.wall_u = wall_u.mean(model.wall_u)
        model.roof_u = roof_u.mean(model.roof_u)
        model.window_u = window_u.mean(model.window_u)
        model.skylight_u = skylight_u.mean(model.skylight_u)
        model.window_shgc = window_shgc.mean(model.window_shgc)
        model.skylight_shgc = skylight_shgc.mean(model.skylight_shgc)

    def _translate_box(self, building: DetailedBuilding, model: UserModel) -> None:
        defaults = building.envelope_defaults
        areas = box_envelope(model.floor_area, model.storeys, model.building_height, model.aspect_ratio)
        for orientation, area in areas.items():
            ratio = defaults.window_to_wall_ratio if orientation in WALL_ORIENTATIONS else 0.0
            model.set_facade(orientation, area, ratio)
        model.wall_u = defaults.wall_u
        model.roof_u = defaults.roof_u
        model.window_u = defaults.window_u
        model.window_shgc = defaults.window_shgc
        self.warnings.append("No surfaces described: using a rectangular box envelope")

    # =========================================================================
    # Loads
    # =========================================================================

    def _translate_loads(self, building: DetailedBuilding, model: UserModel) -> None:
        lighting, equipment = _Weighted(), _Weighted()
        people_area = 0.0
        people = 0.0

        for space in building.conditioned_spaces:
            area = space.total_floor_area
            if space.lighting_power_density is not None:
                lighting.add(space.lighting_power_density, area)
            if space.equipment_power_density is not None:
                equipment.add(space.equipment_power_density, area)
            if space.people_density is not None:
                people_area += area
                if space.people_density > 0:
                    people += area / space.people_density

        model.lighting_power_density = lighting.mean(model.lighting_power_density)
        model.equipment_power_density = equipment.mean(model.equipment_power_density)
        if people_area > 0:
            # Occupant count is additive, m² per person is not
            model.people_density = people_area / people if people > 0 else 0.0

    # =========================================================================
    # Systems
    # =========================================================================

    def _translate_systems(self, building: DetailedBuilding, model: UserModel) -> None:
        if building.heating_systems:
            kind, gen, dist, ctrl, fuel = self._combine(
                building.heating_systems, "heating_systems", HeatingSystemType
            )
            model.heating = HeatingSystem(
                system_type=kind,
                generation_efficiency=gen,
                distribution_efficiency=_or(dist, model.heating.distribution_efficiency),
                control_efficiency=_or(ctrl, model.heating.control_efficiency),
            )
            self._assign_fuel(model, EndUse.HEATING, fuel, model.heating)
        else:
            self.warnings.append("No heating system described: assuming a gas boiler")

        if building.cooling_systems:
            kind, gen, dist, ctrl, fuel = self._combine(
                building.cooling_systems, "cooling_systems", CoolingSystemType
            )
            model.cooling = CoolingSystem(
                system_type=kind,
                cop=gen,
                distribution_efficiency=_or(dist, model.cooling.distribution_efficiency),
                control_efficiency=_or(ctrl, model.cooling.control_efficiency),
            )
            self._assign_fuel(model, EndUse.COOLING, fuel, model.cooling)
        else:
            model.cooling = CoolingSystem(system_type=CoolingSystemType.NONE)

        if building.hot_water_systems:
            kind, gen, dist, _, fuel = self._combine(
                building.hot_water_systems, "hot_water_systems", HotWaterSystemType
            )
            model.hot_water = HotWaterSystem(
                system_type=kind,
                generation_efficiency=gen,
                distribution_efficiency=_or(dist, model.hot_water.distribution_efficiency),
            )
            self._assign_fuel(model, EndUse.WATER_SYSTEMS, fuel, model.hot_water)
        elif model.dhw_demand > 0:
            self.warnings.append("No hot water system described: assuming a gas water heater")

    def _combine(
        self,
        systems: Sequence[SystemDescription],
        field: str,
        kinds: Type[E],
    ) -> Tuple[E, Optional[float], Optional[float], Optional[float], Optional[FuelType]]:
        """
        Merge several systems into one.

        Weights are the served floor areas, or equal weights when any system
        does not state its served area.
        """
        parsed_kinds = []
        parsed_fuels = []
        for i, system in enumerate(systems):
            try:
                parsed_kinds.append(kinds(system.kind.strip().lower()))
            except ValueError:
                raise TranslationError(
                    f"Unknown {field} kind '{system.kind}'",
                    field=f"{field}[{i}].kind",
                    suggestions=[k.value for k in kinds],
                )
            fuel = None
            if system.fuel is not None:
                try:
                    fuel = parse_fuel_type(system.fuel)
                except ValueError as e:
                    raise TranslationError(str(e), field=f"{field}[{i}].fuel")
            parsed_fuels.append(fuel)

        areas = [s.served_floor_area for s in systems]
        if any(a is None or a <= 0 for a in areas):
            if len(systems) > 1:
                logger.debug(f"{field}: served areas incomplete, averaging evenly")
            weights = [1.0] * len(systems)
        else:
            weights = list(areas)

        # max() keeps the first of equal shares
        largest = max(range(len(systems)), key=lambda i: weights[i])

        def weighted(attribute: str) -> Optional[float]:
            acc = _Weighted()
            for system, weight in zip(systems, weights):
                value = getattr(system, attribute)
                if value is not None:
                    acc.add(value, weight)
            return acc.mean(None)

        return (
            parsed_kinds[largest],
            weighted("efficiency"),
            weighted("distribution_efficiency"),
            weighted("control_efficiency"),
            parsed_fuels[largest],
        )

    def _assign_fuel(self, model: UserModel, end_use: EndUse, fuel: Optional[FuelType], system) -> None:
        fuel = fuel or default_fuel_for(system)
        if fuel is not None:
            model.set_fuel_type(end_use, fuel)

    # =========================================================================
    # Schedules
    # =========================================================================

    def _translate_schedules(self, building: DetailedBuilding, model: UserModel) -> None:
        for name in ("occupancy", "lighting", "equipment", "hvac", "hot_water", "exterior_lighting"):
            profile: Optional[DailyProfile] = getattr(building.schedules, name)
            if profile is None:
                continue
            daily = DailySchedule(
                weekday=HourlyProfile(list(profile.weekday)),
                saturday=HourlyProfile(list(profile.saturday)),
                sunday=HourlyProfile(list(profile.sunday)) if profile.sunday is not None else None,
            )
            setattr(model.schedules, name, MonthlySchedule.from_daily(daily, year=self.year))


def _or(value: Optional[float], default: float) -> float:
    return default if value is None else value


def _heat_capacity(building: DetailedBuilding) -> float:
    if building.thermal_mass is not None:
        return HEAT_CAPACITY_BY_CLASS[building.thermal_mass]
    return building.heat_capacity


def translate(building: DetailedBuilding) -> UserModel:
    """Translate with a fresh ForwardTranslator."""
    return ForwardTranslator().translate(building)
