"""
Tests for the forward translator (DetailedBuilding -> UserModel).

Tests:
- Floor area and mandatory data
- Orientation buckets, window ratios and area-weighted envelope properties
- Load densities and system merging
- Schedule collapse
- Determinism and non-mutation of the description
"""

import pytest

from isomodel.core.end_uses import EndUse, FuelType
from isomodel.geometry import Orientation, ThermalMassClass
from isomodel.hvac import CoolingSystemType, HeatingSystemType, HotWaterSystemType
from isomodel.schedules import OFFICE_EQUIPMENT_SCHEDULE
from isomodel.translate import ForwardTranslator, TranslationError, translate
from isomodel.translate.description import (
    DetailedBuilding,
    Location,
    Space,
    SubSurface,
    SubSurfaceType,
    Surface,
    SystemDescription,
)


@pytest.fixture
def translator():
    return ForwardTranslator()


@pytest.fixture
def user_model(translator, office_description):
    return translator.translate(office_description)


def _single_wall_building(surfaces, **kwargs) -> DetailedBuilding:
    return DetailedBuilding(
        name="Test",
        location=Location(weather_file="test.epw"),
        spaces=[Space(floor_area=100.0)],
        surfaces=surfaces,
        **kwargs,
    )


class TestMandatoryData:
    """Missing data the reduced model cannot do without."""

    def test_floor_area_from_conditioned_spaces(self, user_model):
        """Multipliers count, unconditioned spaces do not."""
        assert user_model.floor_area == pytest.approx(1600.0)

    def test_missing_weather_file(self, translator, office_description):
        building = office_description.model_copy(update={"location": Location()})
        with pytest.raises(TranslationError) as exc_info:
            translator.translate(building)
        assert exc_info.value.field == "weather_file"

    def test_no_conditioned_floor_area(self, translator, office_description):
        building = office_description.model_copy(
            update={"spaces": [Space(name="Garage", floor_area=300.0, conditioned=False)]}
        )
        with pytest.raises(TranslationError) as exc_info:
            translator.translate(building)
        assert exc_info.value.field == "floor_area"

    def test_sub_surfaces_larger_than_surface(self, translator):
        wall = Surface(
            name="Wall",
            azimuth=180.0,
            gross_area=100.0,
            u_value=0.3,
            sub_surfaces=[SubSurface(area=120.0, u_value=1.8)],
        )
        with pytest.raises(TranslationError) as exc_info:
            translator.translate(_single_wall_building([wall]))
        assert exc_info.value.field == "surfaces[0].sub_surfaces"

    def test_translation_error_is_value_error(self):
        assert issubclass(TranslationError, ValueError)


class TestEnvelope:
    """Surfaces reduced to orientations and effective properties."""

    def test_orientation_buckets(self, user_model):
        assert user_model.gross_area[Orientation.SOUTH] == pytest.approx(320.0)
        assert user_model.gross_area[Orientation.NORTH] == pytest.approx(320.0)
        assert user_model.gross_area[Orientation.EAST] == pytest.approx(160.0)
        assert user_model.gross_area[Orientation.WEST] == pytest.approx(160.0)
        assert user_model.gross_area[Orientation.ROOF] == pytest.approx(800.0)

    def test_window_ratios(self, user_model):
        assert user_model.window_to_wall_ratio[Orientation.SOUTH] == pytest.approx(120.0 / 320.0)
        assert user_model.window_to_wall_ratio[Orientation.NORTH] == pytest.approx(60.0 / 320.0)
        assert user_model.window_to_wall_ratio[Orientation.ROOF] == pytest.approx(20.0 / 800.0)

    def test_ground_surfaces_ignored(self, user_model):
        """The slab on grade adds no envelope area."""
        assert sum(user_model.gross_area.values()) == pytest.approx(320 * 2 + 160 * 2 + 800)

    def test_window_and_skylight_properties(self, user_model):
        assert user_model.window_u == pytest.approx(1.8)
        assert user_model.window_shgc == pytest.approx(0.45)
        assert user_model.skylight_u == pytest.approx(2.5)
        assert user_model.skylight_shgc == pytest.approx(0.5)
        assert user_model.roof_u == pytest.approx(0.2)

    def test_area_weighted_wall_u(self, translator):
        walls = [
            Surface(name="A", azimuth=180.0, gross_area=100.0, u_value=0.2),
            Surface(name="B", azimuth=0.0, gross_area=300.0, u_value=0.4),
        ]
        model = translator.translate(_single_wall_building(walls))
        assert model.wall_u == pytest.approx((100 * 0.2 + 300 * 0.4) / 400)

    def test_doors_count_as_opaque(self, translator):
        wall = Surface(
            name="Wall",
            azimuth=90.0,
            gross_area=100.0,
            u_value=0.3,
            sub_surfaces=[SubSurface(type=SubSurfaceType.DOOR, area=10.0, u_value=2.0)],
        )
        model = translator.translate(_single_wall_building([wall]))
        assert model.window_to_wall_ratio[Orientation.EAST] == 0.0
        assert model.wall_u == pytest.approx((90 * 0.3 + 10 * 2.0) / 100)

    def test_tilted_surface_counts_as_roof(self, translator):
        sloped = Surface(name="Slope", azimuth=180.0, tilt=30.0, gross_area=50.0, u_value=0.2)
        model = translator.translate(_single_wall_building([sloped]))
        assert model.gross_area[Orientation.ROOF] == pytest.approx(50.0)
        assert Orientation.SOUTH not in model.gross_area

    def test_heat_capacity_passed_through(self, user_model, office_description):
        assert user_model.heat_capacity == pytest.approx(office_description.heat_capacity)

    def test_thermal_mass_class_overrides_capacity(self, translator, office_description):
        building = office_description.model_copy(
            update={"heat_capacity": 100.0, "thermal_mass": ThermalMassClass.HEAVY}
        )
        assert translator.translate(building).heat_capacity == pytest.approx(260.0)

    def test_thermal_mass_parsed_from_text(self):
        building = DetailedBuilding(name="Block", thermal_mass="very_light")
        assert building.thermal_mass is ThermalMassClass.VERY_LIGHT

    def test_box_fallback(self, translator, office_description):
        building = office_description.model_copy(update={"surfaces": []})
        model = translator.translate(building)

        # 800 m² footprint, square plan, 8 m high
        assert model.gross_area[Orientation.ROOF] == pytest.approx(800.0)
        assert model.gross_area[Orientation.SOUTH] == pytest.approx(800.0 ** 0.5 * 8.0)
        assert model.window_to_wall_ratio[Orientation.SOUTH] == pytest.approx(0.30)
        assert any("box" in w for w in translator.warnings)


class TestLoads:
    """Space loads weighted by floor area."""

    def test_power_densities(self, user_model):
        assert user_model.lighting_power_density == pytest.approx((9 * 1200 + 12 * 400) / 1600)
        assert user_model.equipment_power_density == pytest.approx((12 * 1200 + 4 * 400) / 1600)

    def test_people_density_from_occupant_count(self, user_model):
        """120 + 80 people on 1600 m²."""
        assert user_model.people_density == pytest.approx(8.0)

    def test_unset_densities_keep_defaults(self, translator):
        wall = Surface(name="Wall", azimuth=180.0, gross_area=30.0, u_value=0.3)
        model = translator.translate(_single_wall_building([wall]))
        assert model.lighting_power_density == 10.0
        assert model.people_density == 15.0


class TestSystems:
    """System inventories merged into one system per service."""

    def test_weighted_heating_efficiency(self, user_model):
        assert user_model.heating.system_type is HeatingSystemType.CONDENSING_BOILER
        assert user_model.heating.generation_efficiency == pytest.approx(0.90)
        assert user_model.fuel_types[EndUse.HEATING] is FuelType.NATURAL_GAS

    def test_equal_weights_without_served_areas(self, translator, office_description):
        systems = [s.model_copy(update={"served_floor_area": None}) for s in office_description.heating_systems]
        building = office_description.model_copy(update={"heating_systems": systems})
        model = translator.translate(building)
        assert model.heating.generation_efficiency == pytest.approx(0.88)

    def test_largest_share_sets_kind(self, translator, office_description):
        systems = [
            SystemDescription(kind="condensing_boiler", efficiency=0.92, served_floor_area=400.0),
            SystemDescription(kind="district_heating", efficiency=0.97, served_floor_area=1200.0),
        ]
        building = office_description.model_copy(update={"heating_systems": systems})
        model = translator.translate(building)
        assert model.heating.system_type is HeatingSystemType.DISTRICT_HEATING
        assert model.fuel_types[EndUse.HEATING] is FuelType.DISTRICT_HEATING

    def test_cooling_and_hot_water(self, user_model):
        assert user_model.cooling.system_type is CoolingSystemType.DX
        assert user_model.cooling.cop == pytest.approx(3.2)
        assert user_model.fuel_types[EndUse.COOLING] is FuelType.ELECTRICITY
        assert user_model.hot_water.system_type is HotWaterSystemType.GAS_WATER_HEATER
        assert user_model.fuel_types[EndUse.WATER_SYSTEMS] is FuelType.NATURAL_GAS

    def test_no_cooling_systems(self, translator, office_description):
        building = office_description.model_copy(update={"cooling_systems": []})
        model = translator.translate(building)
        assert model.cooling.system_type is CoolingSystemType.NONE
        assert EndUse.COOLING not in model.active_end_uses()

    def test_no_heating_systems_warns(self, translator, office_description):
        building = office_description.model_copy(update={"heating_systems": []})
        model = translator.translate(building)
        assert model.heating.system_type is HeatingSystemType.GAS_BOILER
        assert any("heating" in w for w in translator.warnings)

    def test_unknown_kind(self, translator, office_description):
        building = office_description.model_copy(
            update={"heating_systems": [SystemDescription(kind="steam_engine")]}
        )
        with pytest.raises(TranslationError) as exc_info:
            translator.translate(building)
        assert exc_info.value.field == "heating_systems[0].kind"
        assert "gas_boiler" in exc_info.value.suggestions

    def test_unknown_fuel(self, translator, office_description):
        building = office_description.model_copy(
            update={"heating_systems": [SystemDescription(kind="gas_boiler", fuel="unobtainium")]}
        )
        with pytest.raises(TranslationError) as exc_info:
            translator.translate(building)
        assert exc_info.value.field == "heating_systems[0].fuel"


class TestSchedules:
    """Day-type profiles collapsed to monthly fractions."""

    def test_occupancy_from_profile(self, user_model):
        # January 2023: 22 weekdays at 11/24, weekends empty
        assert user_model.schedules.occupancy.fraction(1) == pytest.approx(22 * 11 / 24 / 31)

    def test_sunday_defaults_to_saturday(self, user_model):
        # Saturday lighting 0.05 all day; 4 Saturdays + 5 Sundays in January 2023
        expected = (22 * 11 / 24 + 9 * 0.05) / 31
        assert user_model.schedules.lighting.fraction(1) == pytest.approx(expected)

    def test_missing_profiles_keep_defaults(self, user_model):
        assert user_model.schedules.equipment == OFFICE_EQUIPMENT_SCHEDULE


class TestDeterminism:
    """Translation is a pure function of the description."""

    def test_same_input_same_model(self, office_description):
        assert translate(office_description) == translate(office_description)

    def test_description_not_mutated(self, translator, office_description):
        before = office_description.model_dump()
        translator.translate(office_description)
        assert office_description.model_dump() == before

    def test_warnings_reset_per_call(self, translator, office_description):
        translator.translate(office_description.model_copy(update={"surfaces": []}))
        assert translator.warnings
        translator.translate(office_description)
        assert not any("box" in w for w in translator.warnings)

    def test_translated_model_compiles(self, user_model, climate_library):
        sim_model = user_model.to_sim_model(library=climate_library)
        assert sim_model.floor_area == pytest.approx(1600.0)
