"""
Tests for the EnergyPlus IDF reader.

Geometry helpers run everywhere; reading IDF content needs the EnergyPlus
IDD and is skipped when none is installed.
"""

import pytest

from isomodel.geometry import Orientation
from isomodel.translate import ForwardTranslator, IDFReader, polygon_geometry
from isomodel.translate.description import BoundaryCondition, SubSurfaceType, SurfaceType


BOX_IDF = """
Version, 23.2;

Building, Test box, 0, Suburbs, 0.04, 0.4, FullExterior, 25, 6;

Site:Location, Golden, 39.74, -105.18, -7, 1829;

Material, Insulation, MediumRough, 0.1, 0.04, 30, 1200;

WindowMaterial:SimpleGlazingSystem, Double Glazing, 1.8, 0.4;

Construction, Wall Construction, Insulation;

Construction, Window Construction, Double Glazing;

Zone, Office, 0, 0, 0, 0, 1, 1, autocalculate, autocalculate, autocalculate;

BuildingSurface:Detailed, South Wall, Wall, Wall Construction, Office, , Outdoors, ,
    SunExposed, WindExposed, autocalculate, 4,
    0, 0, 3,  0, 0, 0,  10, 0, 0,  10, 0, 3;

BuildingSurface:Detailed, North Wall, Wall, Wall Construction, Office, , Outdoors, ,
    SunExposed, WindExposed, autocalculate, 4,
    10, 10, 3,  10, 10, 0,  0, 10, 0,  0, 10, 3;

BuildingSurface:Detailed, Roof, Roof, Wall Construction, Office, , Outdoors, ,
    SunExposed, WindExposed, autocalculate, 4,
    0, 0, 3,  10, 0, 3,  10, 10, 3,  0, 10, 3;

BuildingSurface:Detailed, Floor, Floor, Wall Construction, Office, , Ground, ,
    NoSun, NoWind, autocalculate, 4,
    0, 0, 0,  0, 10, 0,  10, 10, 0,  10, 0, 0;

FenestrationSurface:Detailed, South Window, Window, Window Construction, South Wall, ,
    autocalculate, , 1, 4,
    2, 0, 2,  2, 0, 1,  8, 0, 1,  8, 0, 2;

Lights, Office Lights, Office, Always On, Watts/Area, , 8, , 0, 0.42, 0.18, 1;

People, Office People, Office, Always On, Area/Person, , , 20, 0.3, autocalculate, Activity;

ZoneInfiltration:DesignFlowRate, Office Infiltration, Office, Always On, AirChanges/Hour,
    , , , 0.25, 1, 0, 0, 0;
"""


@pytest.fixture
def reader():
    if not IDFReader.idd_available():
        pytest.skip("EnergyPlus IDD not installed")
    return IDFReader()


@pytest.fixture
def box(reader):
    return reader.read_string(BOX_IDF, weather_file="USA_CO_Golden-NREL.724666_TMY3.epw")


class TestPolygonGeometry:
    """Area, azimuth and tilt from vertices."""

    def test_south_wall(self):
        area, azimuth, tilt = polygon_geometry([(0, 0, 3), (0, 0, 0), (10, 0, 0), (10, 0, 3)])
        assert area == pytest.approx(30.0)
        assert azimuth == pytest.approx(180.0)
        assert tilt == pytest.approx(90.0)

    def test_east_wall(self):
        _, azimuth, _ = polygon_geometry([(10, 0, 3), (10, 0, 0), (10, 10, 0), (10, 10, 3)])
        assert azimuth == pytest.approx(90.0)

    def test_flat_roof(self):
        area, _, tilt = polygon_geometry([(0, 0, 3), (10, 0, 3), (10, 10, 3), (0, 10, 3)])
        assert area == pytest.approx(100.0)
        assert tilt == pytest.approx(0.0)

    def test_floor_faces_down(self):
        _, _, tilt = polygon_geometry([(0, 0, 0), (0, 10, 0), (10, 10, 0), (10, 0, 0)])
        assert tilt == pytest.approx(180.0)

    def test_degenerate(self):
        assert polygon_geometry([(0, 0, 0), (1, 1, 1)]) == (0.0, 0.0, 0.0)
        assert polygon_geometry([(0, 0, 0), (1, 0, 0), (2, 0, 0)]) == (0.0, 0.0, 0.0)


class TestIDDLookup:
    """IDD discovery without EnergyPlus."""

    def test_missing_idd_raises(self, monkeypatch):
        monkeypatch.setattr(IDFReader, "_idd_set", False)
        monkeypatch.setattr(IDFReader, "find_idd", classmethod(lambda cls: None))
        with pytest.raises(FileNotFoundError):
            IDFReader().load_string(BOX_IDF)


class TestReadBox:
    """A one-zone box read from IDF text."""

    def test_location_and_name(self, box):
        assert box.name == "Test box"
        assert box.location.latitude == pytest.approx(39.74)
        assert box.location.weather_file == "USA_CO_Golden-NREL.724666_TMY3.epw"

    def test_zone_floor_area_from_floor_surface(self, box):
        assert len(box.spaces) == 1
        assert box.spaces[0].floor_area == pytest.approx(100.0)

    def test_surfaces(self, box):
        by_name = {s.name: s for s in box.surfaces}
        south = by_name["South Wall"]
        assert south.type is SurfaceType.WALL
        assert south.azimuth == pytest.approx(180.0)
        assert south.u_value == pytest.approx(1 / (0.17 + 2.5))
        assert by_name["Floor"].boundary is BoundaryCondition.GROUND

    def test_window(self, box):
        south = next(s for s in box.surfaces if s.name == "South Wall")
        window = south.sub_surfaces[0]
        assert window.type is SubSurfaceType.WINDOW
        assert window.area == pytest.approx(6.0)
        assert window.u_value == pytest.approx(1.8)
        assert window.shgc == pytest.approx(0.4)

    def test_loads(self, box):
        assert box.spaces[0].lighting_power_density == pytest.approx(8.0)
        assert box.spaces[0].people_density == pytest.approx(20.0)

    def test_infiltration_as_ach50(self, box):
        # 0.25 1/h natural on a suburban single-storey building
        assert box.infiltration_ach50 == pytest.approx(5.0)

    def test_height_and_storeys(self, box):
        assert box.storeys == 1
        assert box.building_height == pytest.approx(3.0)

    def test_translates(self, box):
        model = ForwardTranslator().translate(box)
        assert model.floor_area == pytest.approx(100.0)
        assert model.window_to_wall_ratio[Orientation.SOUTH] == pytest.approx(0.2)
        assert model.gross_area[Orientation.ROOF] == pytest.approx(100.0)
