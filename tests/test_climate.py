"""
Tests for climate summaries and the climate library.
"""

import pytest

from isomodel.climate import ClimateLibrary, ClimateSummary, MonthlyClimate
from isomodel.geometry import Orientation


HOURS_2023 = 8760


class TestClimateSummary:
    """Tests for monthly climate records."""

    def test_from_monthly(self, temperate_climate):
        assert len(temperate_climate) == 12
        assert temperate_climate[1].mean_temperature == -1.0
        assert temperate_climate[7].irradiation(Orientation.SOUTH) == 105.0

    def test_missing_orientation_is_zero(self):
        summary = ClimateSummary.from_monthly([5.0] * 12, {Orientation.SOUTH: [50.0] * 12})
        assert summary[3].irradiation(Orientation.NORTH) == 0.0

    def test_month_out_of_range(self, temperate_climate):
        with pytest.raises(KeyError):
            temperate_climate[0]
        with pytest.raises(KeyError):
            temperate_climate[13]

    def test_wrong_month_count(self):
        with pytest.raises(ValueError):
            ClimateSummary.from_monthly([5.0] * 11, {})

    def test_negative_solar_rejected(self):
        with pytest.raises(ValueError):
            MonthlyClimate(month=1, mean_temperature=0.0, solar={Orientation.SOUTH: -1.0})

    def test_months_must_be_ordered(self, temperate_climate):
        months = list(temperate_climate)
        months[0], months[1] = months[1], months[0]
        with pytest.raises(ValueError):
            ClimateSummary(tuple(months))

    def test_degree_days_from_monthly_means(self, temperate_climate):
        # January mean -1 °C against an 18 °C base
        assert temperate_climate[1].heating_degree_days == pytest.approx(19.0 * 31)
        assert temperate_climate[7].cooling_degree_days == pytest.approx(2.0 * 31)

    def test_immutable(self, temperate_climate):
        with pytest.raises(TypeError):
            temperate_climate[1].solar[Orientation.SOUTH] = 0.0


class TestHourlyAggregation:
    """Aggregation of an hourly weather year."""

    def test_constant_series(self):
        summary = ClimateSummary.from_hourly(
            [10.0] * HOURS_2023,
            {Orientation.SOUTH: [100.0] * HOURS_2023},
            year=2023,
        )
        january = summary[1]
        assert january.mean_temperature == pytest.approx(10.0)
        assert january.heating_degree_days == pytest.approx(8.0 * 31)
        assert january.cooling_degree_days == 0.0
        assert january.irradiation(Orientation.SOUTH) == pytest.approx(100.0 * 744 / 1000)
        assert summary[2].irradiation(Orientation.SOUTH) == pytest.approx(100.0 * 672 / 1000)

    def test_monthly_means_follow_calendar(self):
        temperatures = []
        for month, days in enumerate([31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31], start=1):
            temperatures += [float(month)] * days * 24
        summary = ClimateSummary.from_hourly(temperatures, {}, year=2023)
        assert summary.temperatures == tuple(float(m) for m in range(1, 13))

    def test_leap_year_length(self):
        with pytest.raises(ValueError):
            ClimateSummary.from_hourly([10.0] * HOURS_2023, {}, year=2024)
        summary = ClimateSummary.from_hourly([10.0] * 8784, {}, year=2024)
        assert summary[2].heating_degree_days == pytest.approx(8.0 * 29)

    def test_negative_irradiance_clipped(self):
        summary = ClimateSummary.from_hourly(
            [0.0] * HOURS_2023, {Orientation.ROOF: [-5.0] * HOURS_2023}
        )
        assert summary.annual_irradiation(Orientation.ROOF) == 0.0

    def test_nan_temperature_rejected(self):
        temperatures = [10.0] * HOURS_2023
        temperatures[100] = float("nan")
        with pytest.raises(ValueError):
            ClimateSummary.from_hourly(temperatures, {})


class TestClimateLibrary:
    """Weather-file reference lookup."""

    def test_resolve_case_and_path_insensitive(self, climate_library, temperate_climate):
        for reference in (
            "USA_CO_Golden-NREL.724666_TMY3.epw",
            "usa_co_golden-nrel.724666_tmy3",
            "C:\\weather\\USA_CO_Golden-NREL.724666_TMY3.epw",
        ):
            assert climate_library.resolve(reference) is temperate_climate

    def test_dotted_station_names_stay_distinct(self, temperate_climate):
        """Only the weather extension is dropped, never a dotted station id."""
        library = ClimateLibrary()
        library.register(temperate_climate, "USA_CO_Golden-NREL.724666_TMY3.epw")
        assert "usa_co_golden-nrel" not in library
        assert "USA_CO_Golden-NREL.724666_TMY3" in library
        assert "USA_CO_Golden-NREL.724666_TMY3.wea" in library

    def test_compile_with_bare_station_name(self, office_model, climate_library, temperate_climate):
        model = office_model.copy(weather_file="usa_co_golden-nrel.724666_tmy3")
        sim_model = model.to_sim_model(library=climate_library)
        assert sim_model.climate is temperate_climate

    def test_unknown_reference(self, climate_library):
        with pytest.raises(KeyError):
            climate_library.resolve("SWE_Stockholm.epw")

    def test_contains(self, climate_library):
        assert "USA_CO_Golden-NREL.724666_TMY3.epw" in climate_library
        assert "SWE_Stockholm.epw" not in climate_library

    def test_aliases(self, temperate_climate):
        library = ClimateLibrary()
        library.register(temperate_climate, "golden.epw", aliases=["Denver West"])
        assert library.resolve("Denver West") is temperate_climate
        assert library.names() == ["golden.epw"]

    def test_find_nearest(self, climate_library, temperate_climate):
        library = climate_library
        cold = ClimateSummary.from_monthly([-10.0] * 12, {}, name="Fairbanks")
        library.register(cold, "USA_AK_Fairbanks.epw", latitude=64.8, longitude=-147.7)

        assert library.find_nearest(40.0, -105.0) == "USA_CO_Golden-NREL.724666_TMY3.epw"
        assert library.find_nearest(65.0, -148.0) == "USA_AK_Fairbanks.epw"

    def test_find_nearest_without_coordinates(self):
        library = ClimateLibrary()
        library.register(ClimateSummary.from_monthly([0.0] * 12, {}, name="Nowhere"))
        with pytest.raises(KeyError):
            library.find_nearest(0.0, 0.0)

    def test_register_needs_name(self):
        with pytest.raises(ValueError):
            ClimateLibrary().register(ClimateSummary.from_monthly([0.0] * 12, {}))
