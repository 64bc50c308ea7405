"""
EnergyPlus IDF reader using eppy.

Reads the parts of an IDF that a reduced model needs and returns a
DetailedBuilding for ForwardTranslator:

- Zone                              -> spaces (floor area, multiplier)
- BuildingSurface:Detailed          -> surfaces (area, azimuth, tilt from vertices)
- FenestrationSurface:Detailed      -> sub-surfaces
- Construction / Material*          -> U-values from layer resistances
- WindowMaterial:SimpleGlazingSystem -> window U and SHGC
- Lights / ElectricEquipment / People -> space load densities
- ZoneInfiltration:DesignFlowRate   -> ACH50 estimate
- Site:Location, Building           -> coordinates, name, north axis

HVAC objects are not read; the translator falls back to default systems.
Requires the EnergyPlus IDD (eppy cannot parse without it).
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple
import math
import shutil
import tempfile
import logging

import numpy as np
from eppy.modeleditor import IDF

from ..geometry.envelope import TerrainClass, natural_air_changes
from .description import (
    BoundaryCondition,
    DetailedBuilding,
    Location,
    Space,
    SubSurface,
    SubSurfaceType,
    Surface,
    SurfaceType,
)

logger = logging.getLogger(__name__)

# Surface film resistances (m²K/W), ISO 6946
_FILM_RESISTANCE = {
    SurfaceType.WALL: 0.13 + 0.04,
    SurfaceType.ROOF: 0.10 + 0.04,
    SurfaceType.FLOOR: 0.17 + 0.04,
}

_LAYER_FIELDS = ["Outside_Layer"] + [f"Layer_{i}" for i in range(2, 11)]

# Zone reference field of load objects, newest EnergyPlus name first
_ZONE_FIELDS = (
    "Zone_or_ZoneList_or_Space_or_SpaceList_Name",
    "Zone_or_ZoneList_Name",
    "Zone_Name",
)

_DENSITY_FIELDS = ("Watts_per_Floor_Area", "Watts_per_Zone_Floor_Area")


def polygon_geometry(coords: Iterable[Tuple[float, float, float]]) -> Tuple[float, float, float]:
    """
    Area (m²), azimuth and tilt (degrees) of a planar polygon.

    Vertices are counter-clockwise seen from outside (the EnergyPlus default),
    so Newell's area vector points outwards. Azimuth is clockwise from +y
    (north), tilt is the angle from straight up.
    """
    points = np.asarray(list(coords), dtype=float)
    if points.ndim != 2 or len(points) < 3:
        return 0.0, 0.0, 0.0
    vector = np.cross(points, np.roll(points, -1, axis=0)).sum(axis=0) / 2.0
    area = float(np.linalg.norm(vector))
    if area == 0.0:
        return 0.0, 0.0, 0.0
    normal = vector / area
    tilt = math.degrees(math.acos(float(np.clip(normal[2], -1.0, 1.0))))
    azimuth = math.degrees(math.atan2(normal[0], normal[1])) % 360.0
    return area, azimuth, tilt


def _number(value: Any) -> Optional[float]:
    """Numeric IDF field or None for blanks and autocalculate."""
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _field(obj, *names: str, default: Any = None) -> Any:
    """First of several field names the object has (names differ across versions)."""
    for name in names:
        value = getattr(obj, name, None)
        if value is not None and value != "":
            return value
    return default


class IDFReader:
    """
    Read EnergyPlus IDF files into DetailedBuilding descriptions.

    Usage:
        reader = IDFReader()
        if IDFReader.idd_available():
            building = reader.read(Path("office.idf"), weather_file="USA_CO_Golden.epw")
            user_model = ForwardTranslator().translate(building)
    """

    _idd_set = False

    IDD_SEARCH_PATHS = [
        "/usr/local/EnergyPlus-25-1-0/Energy+.idd",
        "/Applications/EnergyPlus-25-1-0/Energy+.idd",
        "C:\\EnergyPlusV25-1-0\\Energy+.idd",
        "/usr/local/EnergyPlus-24-2-0/Energy+.idd",
        "/Applications/EnergyPlus-24-2-0/Energy+.idd",
        "/usr/local/EnergyPlus-23-2-0/Energy+.idd",
    ]

    def __init__(self, idd_path: Optional[Path] = None):
        if idd_path is not None:
            self._set_idd(Path(idd_path))

    @classmethod
    def find_idd(cls) -> Optional[Path]:
        """Locate Energy+.idd next to the energyplus binary or in common install paths."""
        candidates = list(cls.IDD_SEARCH_PATHS)
        ep_path = shutil.which("energyplus")
        if ep_path:
            candidates.insert(0, str(Path(ep_path).resolve().parent / "Energy+.idd"))
        for candidate in candidates:
            if Path(candidate).exists():
                return Path(candidate)
        return None

    @classmethod
    def idd_available(cls) -> bool:
        return cls._idd_set or cls.find_idd() is not None

    @classmethod
    def _set_idd(cls, idd_path: Path) -> None:
        if cls._idd_set:
            return
        IDF.setiddname(str(idd_path))
        cls._idd_set = True
        logger.debug(f"Using IDD from: {idd_path}")

    @classmethod
    def _ensure_idd(cls) -> None:
        """Ensure IDD is set (only needed once per process)."""
        if cls._idd_set:
            return
        idd_path = cls.find_idd()
        if idd_path is None:
            raise FileNotFoundError(
                "EnergyPlus IDD not found; install EnergyPlus or pass idd_path"
            )
        cls._set_idd(idd_path)

    # =========================================================================
    # Loading
    # =========================================================================

    def load(self, idf_path: Path) -> IDF:
        self._ensure_idd()
        return IDF(str(idf_path))

    def load_string(self, idf_content: str) -> IDF:
        """Load IDF from string content."""
        self._ensure_idd()
        # eppy requires a file path, so write to temp file
        with tempfile.NamedTemporaryFile(mode='w', suffix='.idf', delete=False) as f:
            f.write(idf_content)
            temp_path = f.name

        try:
            return IDF(temp_path)
        finally:
            Path(temp_path).unlink(missing_ok=True)

    def read(self, idf_path: Path, weather_file: Optional[str] = None) -> DetailedBuilding:
        """Load an IDF file and describe it."""
        return self.to_description(self.load(idf_path), weather_file=weather_file)

    def read_string(self, idf_content: str, weather_file: Optional[str] = None) -> DetailedBuilding:
        return self.to_description(self.load_string(idf_content), weather_file=weather_file)

    # =========================================================================
    # Description
    # =========================================================================

    def to_description(self, idf: IDF, weather_file: Optional[str] = None) -> DetailedBuilding:
        """
        Build a DetailedBuilding from a loaded IDF.

        Args:
            idf: Loaded eppy IDF
            weather_file: Weather reference for the location (IDFs do not carry one)
        """
        name, north_axis = self._building(idf)
        materials = self._material_resistances(idf)
        glazing = self._simple_glazing(idf)
        constructions = self._constructions(idf)

        surfaces, zone_of_surface, floor_levels, heights = self._surfaces(
            idf, north_axis, constructions, materials, glazing
        )
        zone_areas = self._zone_floor_areas(idf, surfaces, zone_of_surface)
        spaces = self._spaces(idf, zone_areas)

        storeys = max(1, len(floor_levels))
        building_height = (max(heights) - min(heights)) if heights else None
        location = self._location(idf, weather_file)

        description = DetailedBuilding(
            name=name,
            location=location,
            building_height=building_height if building_height and building_height > 0 else None,
            storeys=storeys,
            spaces=spaces,
            surfaces=surfaces,
            infiltration_ach50=self._infiltration_ach50(idf, zone_areas, storeys, location.terrain),
        )
        logger.info(
            f"Read IDF '{name}': {len(spaces)} zones, {len(surfaces)} exterior surfaces",
            extra={"building": name},
        )
        return description

    def _building(self, idf: IDF) -> Tuple[str, float]:
        buildings = idf.idfobjects["BUILDING"]
        if not buildings:
            return "", 0.0
        building = buildings[0]
        return str(building.Name), _number(_field(building, "North_Axis")) or 0.0

    def _location(self, idf: IDF, weather_file: Optional[str]) -> Location:
        sites = idf.idfobjects["SITE:LOCATION"]
        if not sites:
            return Location(weather_file=weather_file)
        site = sites[0]
        return Location(
            weather_file=weather_file,
            latitude=_number(site.Latitude),
            longitude=_number(site.Longitude),
        )

    # ---- constructions ------------------------------------------------------

    def _material_resistances(self, idf: IDF) -> Dict[str, float]:
        """Material name (upper case) -> thermal resistance (m²K/W)."""
        resistances: Dict[str, float] = {}
        for material in idf.idfobjects["MATERIAL"]:
            thickness = _number(material.Thickness)
            conductivity = _number(material.Conductivity)
            if thickness and conductivity:
                resistances[material.Name.upper()] = thickness / conductivity
        for key in ("MATERIAL:NOMASS", "MATERIAL:AIRGAP"):
            for material in idf.idfobjects[key]:
                resistance = _number(material.Thermal_Resistance)
                if resistance is not None:
                    resistances[material.Name.upper()] = resistance
        return resistances

    def _simple_glazing(self, idf: IDF) -> Dict[str, Tuple[float, Optional[float]]]:
        """Glazing name (upper case) -> (U, SHGC)."""
        glazing = {}
        for obj in idf.idfobjects["WINDOWMATERIAL:SIMPLEGLAZINGSYSTEM"]:
            u_value = _number(obj.UFactor)
            if u_value is not None:
                glazing[obj.Name.upper()] = (u_value, _number(obj.Solar_Heat_Gain_Coefficient))
        return glazing

    def _constructions(self, idf: IDF) -> Dict[str, List[str]]:
        """Construction name (upper case) -> layer names (upper case), outside first."""
        constructions = {}
        for construction in idf.idfobjects["CONSTRUCTION"]:
            layers = [_field(construction, name) for name in _LAYER_FIELDS]
            constructions[construction.Name.upper()] = [
                str(layer).upper() for layer in layers if layer
            ]
        return constructions

    def _opaque_u(
        self,
        construction: str,
        surface_type: SurfaceType,
        constructions: Dict[str, List[str]],
        materials: Dict[str, float],
    ) -> Optional[float]:
        layers = constructions.get(construction.upper())
        if not layers:
            return None
        resistance = _FILM_RESISTANCE[surface_type]
        for layer in layers:
            if layer not in materials:
                logger.debug(f"Construction '{construction}': unknown layer '{layer}'")
                return None
            resistance += materials[layer]
        return 1.0 / resistance

    def _window_properties(
        self,
        construction: str,
        constructions: Dict[str, List[str]],
        glazing: Dict[str, Tuple[float, Optional[float]]],
    ) -> Tuple[Optional[float], Optional[float]]:
        layers = constructions.get(construction.upper(), [])
        if layers and layers[0] in glazing:
            return glazing[layers[0]]
        return None, None

    # ---- surfaces -----------------------------------------------------------

    def _surfaces(
        self,
        idf: IDF,
        north_axis: float,
        constructions: Dict[str, List[str]],
        materials: Dict[str, float],
        glazing: Dict[str, Tuple[float, Optional[float]]],
    ):
        surfaces: List[Surface] = []
        zone_of_surface: Dict[str, str] = {}
        floor_levels = set()
        heights: List[float] = []
        by_name: Dict[str, Surface] = {}
        fallback_u = {SurfaceType.WALL: 0.35, SurfaceType.ROOF: 0.25, SurfaceType.FLOOR: 0.30}

        for obj in idf.idfobjects["BUILDINGSURFACE:DETAILED"]:
            coords = list(obj.coords)
            area, azimuth, tilt = polygon_geometry(coords)
            heights.extend(z for _, _, z in coords)

            kind = str(obj.Surface_Type).strip().lower()
            boundary_text = str(obj.Outside_Boundary_Condition).strip().lower()
            if boundary_text == "outdoors":
                boundary = BoundaryCondition.OUTDOORS
            elif boundary_text.startswith("ground"):
                boundary = BoundaryCondition.GROUND
            else:
                boundary = BoundaryCondition.ADIABATIC

            if kind == "floor":
                surface_type = SurfaceType.FLOOR
                floor_levels.add(round(min(z for _, _, z in coords), 1))
            elif kind in ("roof", "ceiling"):
                surface_type = SurfaceType.ROOF
            else:
                surface_type = SurfaceType.WALL

            u_value = self._opaque_u(obj.Construction_Name, surface_type, constructions, materials)
            if u_value is None:
                u_value = fallback_u[surface_type]
                if boundary is BoundaryCondition.OUTDOORS:
                    logger.warning(
                        f"Surface '{obj.Name}': construction '{obj.Construction_Name}' "
                        f"not resolvable, assuming U={u_value}"
                    )

            surface = Surface(
                name=obj.Name,
                type=surface_type,
                boundary=boundary,
                azimuth=(azimuth + north_axis) % 360.0,
                tilt=tilt,
                gross_area=area,
                u_value=u_value,
            )
            by_name[obj.Name.upper()] = surface
            zone_of_surface[obj.Name.upper()] = str(obj.Zone_Name).upper()
            surfaces.append(surface)

        for obj in idf.idfobjects["FENESTRATIONSURFACE:DETAILED"]:
            parent = by_name.get(str(obj.Building_Surface_Name).upper())
            if parent is None:
                logger.warning(f"Sub-surface '{obj.Name}' has no base surface, skipped")
                continue
            area, _, _ = polygon_geometry(obj.coords)
            area *= _number(_field(obj, "Multiplier")) or 1.0

            kind = str(obj.Surface_Type).strip().lower()
            if kind == "door":
                sub_type = SubSurfaceType.DOOR
                u_value = self._opaque_u(obj.Construction_Name, SurfaceType.WALL, constructions, materials)
                shgc = None
            else:
                if kind == "glassdoor":
                    sub_type = SubSurfaceType.GLASS_DOOR
                elif parent.type is SurfaceType.ROOF:
                    sub_type = SubSurfaceType.SKYLIGHT
                else:
                    sub_type = SubSurfaceType.WINDOW
                u_value, shgc = self._window_properties(obj.Construction_Name, constructions, glazing)
            if u_value is None:
                u_value = parent.u_value if sub_type is SubSurfaceType.DOOR else 2.0
                logger.debug(f"Sub-surface '{obj.Name}': assuming U={u_value}")

            parent.sub_surfaces.append(SubSurface(
                name=obj.Name, type=sub_type, area=area, u_value=u_value, shgc=shgc
            ))

        return surfaces, zone_of_surface, floor_levels, heights

    # ---- zones & loads ------------------------------------------------------

    def _zone_floor_areas(
        self,
        idf: IDF,
        surfaces: List[Surface],
        zone_of_surface: Dict[str, str],
    ) -> Dict[str, float]:
        """Zone name (upper case) -> floor area of one instance (m²)."""
        from_floors: Dict[str, float] = {}
        for surface in surfaces:
            if surface.type is SurfaceType.FLOOR:
                zone = zone_of_surface[surface.name.upper()]
                from_floors[zone] = from_floors.get(zone, 0.0) + surface.gross_area

        areas = {}
        for zone in idf.idfobjects["ZONE"]:
            key = zone.Name.upper()
            stated = _number(_field(zone, "Floor_Area"))
            areas[key] = stated if stated and stated > 0 else from_floors.get(key, 0.0)
        return areas

    def _densities(self, idf: IDF, key: str, level_field: str,
                   zone_areas: Dict[str, float]) -> Dict[str, float]:
        """Zone -> W/m² for Lights / ElectricEquipment objects."""
        densities: Dict[str, float] = {}
        for obj in idf.idfobjects[key]:
            zone = str(_field(obj, *_ZONE_FIELDS, default="")).upper()
            area = zone_areas.get(zone, 0.0)
            method = str(_field(obj, "Design_Level_Calculation_Method", default="")).lower()
            if method == "watts/area":
                value = _number(_field(obj, *_DENSITY_FIELDS))
            elif area > 0:
                level = _number(_field(obj, level_field))
                value = level / area if level is not None else None
            else:
                value = None
            if value is None:
                logger.debug(f"{key} '{obj.Name}': unsupported design level for zone '{zone}'")
                continue
            densities[zone] = densities.get(zone, 0.0) + value
        return densities

    def _people_densities(self, idf: IDF, zone_areas: Dict[str, float]) -> Dict[str, float]:
        """Zone -> m² per person."""
        people: Dict[str, float] = {}
        for obj in idf.idfobjects["PEOPLE"]:
            zone = str(_field(obj, *_ZONE_FIELDS, default="")).upper()
            area = zone_areas.get(zone, 0.0)
            method = str(_field(obj, "Number_of_People_Calculation_Method", default="")).lower()
            if method == "people/area":
                count = (_number(_field(obj, "People_per_Floor_Area", "People_per_Zone_Floor_Area")) or 0.0) * area
            elif method == "area/person":
                per_person = _number(_field(obj, "Floor_Area_per_Person", "Zone_Floor_Area_per_Person"))
                count = area / per_person if per_person else 0.0
            else:
                count = _number(_field(obj, "Number_of_People")) or 0.0
            people[zone] = people.get(zone, 0.0) + count
        return {
            zone: zone_areas.get(zone, 0.0) / count
            for zone, count in people.items()
            if count > 0 and zone_areas.get(zone, 0.0) > 0
        }

    def _spaces(self, idf: IDF, zone_areas: Dict[str, float]) -> List[Space]:
        lighting = self._densities(idf, "LIGHTS", "Lighting_Level", zone_areas)
        equipment = self._densities(idf, "ELECTRICEQUIPMENT", "Design_Level", zone_areas)
        people = self._people_densities(idf, zone_areas)

        spaces = []
        for zone in idf.idfobjects["ZONE"]:
            key = zone.Name.upper()
            included = str(_field(zone, "Part_of_Total_Floor_Area", default="Yes")).lower() != "no"
            spaces.append(Space(
                name=zone.Name,
                floor_area=zone_areas.get(key, 0.0),
                multiplier=int(_number(_field(zone, "Multiplier")) or 1),
                conditioned=included,
                lighting_power_density=lighting.get(key),
                equipment_power_density=equipment.get(key),
                people_density=people.get(key),
            ))
        return spaces

    def _infiltration_ach50(
        self,
        idf: IDF,
        zone_areas: Dict[str, float],
        storeys: int,
        terrain: TerrainClass,
    ) -> float:
        """Area-weighted natural ACH converted back to ACH50."""
        total = 0.0
        weight = 0.0
        for obj in idf.idfobjects["ZONEINFILTRATION:DESIGNFLOWRATE"]:
            ach = _number(_field(obj, "Air_Changes_per_Hour"))
            if ach is None:
                continue
            zone = str(_field(obj, *_ZONE_FIELDS, default="")).upper()
            area = zone_areas.get(zone, 0.0) or 1.0
            total += ach * area
            weight += area
        if weight == 0:
            return DetailedBuilding.model_fields["infiltration_ach50"].default
        return (total / weight) / natural_air_changes(1.0, terrain, storeys)
