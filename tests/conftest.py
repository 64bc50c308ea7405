"""
Pytest configuration and fixtures for isomodel tests.

Provides reusable test fixtures for:
- Temperate climate summary and climate library
- Mid-size office reduced model (UserModel) and its compiled form
- Detailed office description for the forward translator
"""

import pytest
from pathlib import Path
import tempfile
import shutil

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from isomodel.climate import ClimateLibrary, ClimateSummary
from isomodel.core.user_model import UserModel
from isomodel.geometry import Orientation, WALL_ORIENTATIONS, box_envelope
from isomodel.hvac import CoolingSystem, CoolingSystemType, HeatingSystem, HeatingSystemType
from isomodel.translate.description import (
    DailyProfile,
    DetailedBuilding,
    Location,
    ScheduleSet,
    Space,
    SubSurface,
    SubSurfaceType,
    Surface,
    SurfaceType,
    BoundaryCondition,
    SystemDescription,
)


WEATHER_FILE = "USA_CO_Golden-NREL.724666_TMY3.epw"


# =============================================================================
# PATH FIXTURES
# =============================================================================

@pytest.fixture
def temp_dir():
    """Temporary directory for test outputs, cleaned up after test."""
    tmp = tempfile.mkdtemp(prefix="isomodel_test_")
    yield Path(tmp)
    shutil.rmtree(tmp, ignore_errors=True)


# =============================================================================
# CLIMATE FIXTURES
# =============================================================================

# Monthly means stay below every cooling setpoint, so envelope losses are
# positive in all months.
TEMPERATE_TEMPERATURES = [-1.0, 0.5, 4.0, 8.0, 13.0, 17.0, 20.0, 19.0, 15.0, 9.0, 4.0, 0.0]

TEMPERATE_SOLAR = {
    Orientation.SOUTH: [60, 75, 95, 100, 105, 100, 105, 105, 95, 80, 60, 50],
    Orientation.EAST: [25, 40, 65, 85, 105, 110, 115, 100, 75, 50, 28, 20],
    Orientation.WEST: [25, 40, 65, 85, 105, 110, 115, 100, 75, 50, 28, 20],
    Orientation.NORTH: [12, 18, 28, 38, 50, 58, 56, 44, 32, 22, 14, 10],
    Orientation.ROOF: [30, 50, 90, 125, 160, 170, 175, 150, 110, 70, 35, 25],
}


@pytest.fixture(scope="session")
def temperate_climate() -> ClimateSummary:
    """Temperate continental climate (Golden, CO-like monthly drivers)."""
    return ClimateSummary.from_monthly(
        TEMPERATE_TEMPERATURES,
        TEMPERATE_SOLAR,
        name="Golden",
        latitude=39.74,
        longitude=-105.18,
    )


@pytest.fixture
def climate_library(temperate_climate) -> ClimateLibrary:
    """Library with the temperate climate registered under its EPW name."""
    library = ClimateLibrary()
    library.register(temperate_climate, WEATHER_FILE, latitude=39.74, longitude=-105.18)
    return library


# =============================================================================
# REDUCED MODEL FIXTURES
# =============================================================================

@pytest.fixture
def office_model() -> UserModel:
    """Mid-size office: 3 storeys, 4980 m², 33% glazing, gas boiler + chiller."""
    model = UserModel(
        name="Mid-size office",
        floor_area=4980.0,
        building_height=12.0,
        storeys=3,
        aspect_ratio=1.5,
        wall_u=0.35,
        roof_u=0.25,
        window_u=2.0,
        window_shgc=0.40,
        infiltration_ach50=5.0,
        heat_capacity=165.0,
        ventilation_rate=1.0,
        heat_recovery_effectiveness=0.5,
        lighting_power_density=10.0,
        equipment_power_density=10.0,
        exterior_lighting_power=2000.0,
        heating=HeatingSystem(HeatingSystemType.CONDENSING_BOILER),
        cooling=CoolingSystem(CoolingSystemType.AIR_COOLED_CHILLER),
        weather_file=WEATHER_FILE,
    )
    for orientation, area in box_envelope(4980.0, 3, 12.0, 1.5).items():
        ratio = 0.33 if orientation in WALL_ORIENTATIONS else 0.0
        model.set_facade(orientation, area, ratio)
    return model


@pytest.fixture
def office_sim_model(office_model, temperate_climate):
    """Compiled office model."""
    return office_model.to_sim_model(climate=temperate_climate)


@pytest.fixture
def office_results(office_sim_model):
    """Simulated office results."""
    return office_sim_model.simulate()


# =============================================================================
# DETAILED DESCRIPTION FIXTURES
# =============================================================================

def _wall(name: str, azimuth: float, gross: float, window: float) -> Surface:
    return Surface(
        name=name,
        type=SurfaceType.WALL,
        azimuth=azimuth,
        tilt=90.0,
        gross_area=gross,
        u_value=0.30,
        sub_surfaces=[
            SubSurface(name=f"{name} window", area=window, u_value=1.8, shgc=0.45),
        ],
    )


@pytest.fixture
def office_description() -> DetailedBuilding:
    """Detailed two-zone office with surfaces, systems and schedules."""
    office_hours = [0.0] * 7 + [1.0] * 11 + [0.0] * 6
    return DetailedBuilding(
        name="Detailed office",
        location=Location(weather_file=WEATHER_FILE, latitude=39.74, longitude=-105.18),
        building_height=8.0,
        storeys=2,
        spaces=[
            Space(name="Open office", floor_area=600.0, multiplier=2,
                  lighting_power_density=9.0, equipment_power_density=12.0, people_density=10.0),
            Space(name="Meeting", floor_area=200.0, multiplier=2,
                  lighting_power_density=12.0, equipment_power_density=4.0, people_density=5.0),
            Space(name="Plant room", floor_area=50.0, conditioned=False),
        ],
        surfaces=[
            _wall("South wall", 180.0, 320.0, 120.0),
            _wall("North wall", 0.0, 320.0, 60.0),
            _wall("East wall", 90.0, 160.0, 40.0),
            _wall("West wall", 270.0, 160.0, 40.0),
            Surface(
                name="Roof",
                type=SurfaceType.ROOF,
                tilt=0.0,
                gross_area=800.0,
                u_value=0.20,
                sub_surfaces=[
                    SubSurface(name="Skylight", type=SubSurfaceType.SKYLIGHT,
                               area=20.0, u_value=2.5, shgc=0.5),
                ],
            ),
            Surface(
                name="Slab",
                type=SurfaceType.FLOOR,
                boundary=BoundaryCondition.GROUND,
                tilt=180.0,
                gross_area=800.0,
                u_value=0.25,
            ),
        ],
        heating_systems=[
            SystemDescription(kind="condensing_boiler", efficiency=0.92, fuel="NaturalGas",
                              served_floor_area=1200.0),
            SystemDescription(kind="gas_boiler", efficiency=0.84, fuel="NaturalGas",
                              served_floor_area=400.0),
        ],
        cooling_systems=[
            SystemDescription(kind="dx", efficiency=3.2, fuel="Electricity"),
        ],
        hot_water_systems=[
            SystemDescription(kind="gas_water_heater", efficiency=0.8, fuel="gas"),
        ],
        schedules=ScheduleSet(
            occupancy=DailyProfile(weekday=office_hours, saturday=[0.0] * 24),
            lighting=DailyProfile(weekday=office_hours, saturday=[0.05] * 24),
        ),
    )
