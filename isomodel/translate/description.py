"""
Pydantic models for detailed building descriptions.

The detailed description is what a modelling tool (or ``IDFReader``) knows
about a building: spaces, individual surfaces with their sub-surfaces,
system inventories and day-type schedules. ``ForwardTranslator`` reduces it
to a ``UserModel``.

Units: m, m², W/m²K, W/m², l/s·m², °C. Azimuth in degrees clockwise from
north, tilt in degrees from horizontal (90 = vertical wall).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from ..geometry.envelope import TerrainClass, ThermalMassClass


# =============================================================================
# ENUMS
# =============================================================================


class SurfaceType(str, Enum):
    WALL = "wall"
    ROOF = "roof"
    FLOOR = "floor"


class BoundaryCondition(str, Enum):
    OUTDOORS = "outdoors"
    GROUND = "ground"
    ADIABATIC = "adiabatic"


class SubSurfaceType(str, Enum):
    WINDOW = "window"
    SKYLIGHT = "skylight"
    DOOR = "door"
    GLASS_DOOR = "glass_door"

    @property
    def is_glazed(self) -> bool:
        return self is not SubSurfaceType.DOOR


# =============================================================================
# LOCATION & SPACES
# =============================================================================


class Location(BaseModel):
    weather_file: str | None = Field(default=None, description="Weather file reference")
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    terrain: TerrainClass = TerrainClass.SUBURBAN


class Space(BaseModel):
    """A space (or thermal zone). Loads left unset fall back to model defaults."""

    name: str = ""
    floor_area: float = Field(ge=0, description="Floor area of one instance (m²)")
    multiplier: int = Field(default=1, ge=1)
    conditioned: bool = True
    lighting_power_density: float | None = Field(default=None, ge=0)
    equipment_power_density: float | None = Field(default=None, ge=0)
    people_density: float | None = Field(default=None, ge=0, description="m² per person")

    @property
    def total_floor_area(self) -> float:
        return self.floor_area * self.multiplier


# =============================================================================
# ENVELOPE
# =============================================================================


class SubSurface(BaseModel):
    name: str = ""
    type: SubSurfaceType = SubSurfaceType.WINDOW
    area: float = Field(ge=0)
    u_value: float = Field(ge=0)
    shgc: float | None = Field(default=None, ge=0, le=1)


class Surface(BaseModel):
    name: str = ""
    type: SurfaceType = SurfaceType.WALL
    boundary: BoundaryCondition = BoundaryCondition.OUTDOORS
    azimuth: float = 0.0
    tilt: float = 90.0
    gross_area: float = Field(ge=0)
    u_value: float = Field(ge=0, description="Opaque construction U-value (W/m²K)")
    sub_surfaces: list[SubSurface] = Field(default_factory=list)


class EnvelopeDefaults(BaseModel):
    """Envelope used when the description has no surfaces (box geometry)."""

    wall_u: float = Field(default=0.35, ge=0)
    roof_u: float = Field(default=0.25, ge=0)
    window_u: float = Field(default=2.0, ge=0)
    window_shgc: float = Field(default=0.40, ge=0, le=1)
    window_to_wall_ratio: float = Field(default=0.30, ge=0, le=1)


# =============================================================================
# SYSTEMS
# =============================================================================


class SystemDescription(BaseModel):
    """
    One heating, cooling or hot water system.

    ``kind`` is the system type value (e.g. "gas_boiler", "dx",
    "electric_water_heater"); ``efficiency`` is the generation efficiency or
    COP.
    """

    name: str = ""
    kind: str
    efficiency: float | None = Field(default=None, gt=0)
    distribution_efficiency: float | None = Field(default=None, gt=0, le=1)
    control_efficiency: float | None = Field(default=None, gt=0, le=1)
    fuel: str | None = None
    served_floor_area: float | None = Field(default=None, ge=0)


class Ventilation(BaseModel):
    outdoor_air_rate: float = Field(default=1.0, ge=0, description="l/s·m² while HVAC runs")
    heat_recovery_effectiveness: float = Field(default=0.0, ge=0, le=1)
    fan_power_density: float = Field(default=1.5, ge=0)
    pump_power_density: float = Field(default=0.3, ge=0)


# =============================================================================
# SCHEDULES & SETPOINTS
# =============================================================================


class DailyProfile(BaseModel):
    """24 hourly fractions per day type. Sunday defaults to Saturday."""

    weekday: list[float] = Field(min_length=24, max_length=24)
    saturday: list[float] = Field(min_length=24, max_length=24)
    sunday: list[float] | None = Field(default=None, min_length=24, max_length=24)


class ScheduleSet(BaseModel):
    occupancy: DailyProfile | None = None
    lighting: DailyProfile | None = None
    equipment: DailyProfile | None = None
    hvac: DailyProfile | None = None
    hot_water: DailyProfile | None = None
    exterior_lighting: DailyProfile | None = None


class Setpoints(BaseModel):
    heating: float = 21.0
    heating_setback: float = 16.0
    cooling: float = 24.0
    cooling_setback: float = 28.0


# =============================================================================
# BUILDING
# =============================================================================


class DetailedBuilding(BaseModel):
    """Complete detailed description of one building."""

    name: str = ""
    location: Location = Field(default_factory=Location)

    building_height: float | None = Field(default=None, gt=0)
    storeys: int = Field(default=1, ge=1)
    aspect_ratio: float = Field(default=1.0, gt=0)

    spaces: list[Space] = Field(default_factory=list)
    surfaces: list[Surface] = Field(default_factory=list)
    envelope_defaults: EnvelopeDefaults = Field(default_factory=EnvelopeDefaults)
    infiltration_ach50: float = Field(default=5.0, ge=0)
    heat_capacity: float = Field(default=165.0, ge=0, description="kJ/m²K floor")
    thermal_mass: ThermalMassClass | None = Field(
        default=None, description="Mass class; overrides heat_capacity when set"
    )

    heating_systems: list[SystemDescription] = Field(default_factory=list)
    cooling_systems: list[SystemDescription] = Field(default_factory=list)
    hot_water_systems: list[SystemDescription] = Field(default_factory=list)
    ventilation: Ventilation = Field(default_factory=Ventilation)

    schedules: ScheduleSet = Field(default_factory=ScheduleSet)
    setpoints: Setpoints = Field(default_factory=Setpoints)

    lighting_control_factor: float = Field(default=1.0, ge=0, le=1)
    heat_gain_per_person: float = Field(default=120.0, ge=0)
    exterior_lighting_power: float = Field(default=0.0, ge=0, description="W")
    dhw_demand: float = Field(default=5.0, ge=0, description="kWh/m²·yr useful")

    @property
    def conditioned_spaces(self) -> list[Space]:
        return [s for s in self.spaces if s.conditioned]
