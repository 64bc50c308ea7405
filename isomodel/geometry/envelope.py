"""
Envelope Geometry Helpers

Reduces building geometry to what the monthly engine needs:
- Orientation buckets (N/E/S/W walls + roof) from surface azimuth and tilt
- Gross wall/roof areas of a rectangular box (when no surfaces are known)
- Natural infiltration from a blower-door ACH50 and the site terrain
- Thermal mass classes (ISO 13790 Table 12)

Orientation convention: azimuth of the outward normal, clockwise from north.
N: 315-45, E: 45-135, S: 135-225, W: 225-315.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class Orientation(Enum):
    """Envelope orientation buckets."""
    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"
    ROOF = "roof"          # Horizontal / flat roof (skylights)

    @property
    def is_wall(self) -> bool:
        return self is not Orientation.ROOF


ORIENTATIONS: Tuple[Orientation, ...] = tuple(Orientation)
WALL_ORIENTATIONS: Tuple[Orientation, ...] = tuple(o for o in Orientation if o.is_wall)

# Surfaces flatter than this count as roof
ROOF_TILT_LIMIT_DEG = 60.0


def azimuth_to_orientation(azimuth_deg: float) -> Orientation:
    """Convert azimuth to cardinal direction (N/E/S/W)."""
    azimuth = azimuth_deg % 360.0
    if azimuth >= 315.0 or azimuth < 45.0:
        return Orientation.NORTH
    if azimuth < 135.0:
        return Orientation.EAST
    if azimuth < 225.0:
        return Orientation.SOUTH
    return Orientation.WEST


def surface_orientation(azimuth_deg: float, tilt_deg: float) -> Orientation:
    """Bucket a surface by tilt (0 = facing up, 90 = vertical) and azimuth."""
    if tilt_deg < ROOF_TILT_LIMIT_DEG:
        return Orientation.ROOF
    return azimuth_to_orientation(azimuth_deg)


def box_envelope(
    floor_area: float,
    storeys: int,
    building_height: float,
    aspect_ratio: float = 1.0,
) -> Dict[Orientation, float]:
    """
    Gross envelope areas of a rectangular box.

    The long side (aspect_ratio = length / depth) faces north and south.

    Args:
        floor_area: Total conditioned floor area (m²)
        storeys: Number of floors above ground
        building_height: Height to roof (m)
        aspect_ratio: Length (E-W) divided by depth (N-S)

    Returns:
        Gross area per orientation; ROOF is the footprint.
    """
    if floor_area <= 0 or storeys <= 0 or building_height <= 0 or aspect_ratio <= 0:
        raise ValueError(
            "box_envelope needs positive floor area, storeys, height and aspect ratio"
        )
    footprint = floor_area / storeys
    length = math.sqrt(footprint * aspect_ratio)
    depth = footprint / length

    return {
        Orientation.NORTH: length * building_height,
        Orientation.EAST: depth * building_height,
        Orientation.SOUTH: length * building_height,
        Orientation.WEST: depth * building_height,
        Orientation.ROOF: footprint,
    }


# =============================================================================
# INFILTRATION
# =============================================================================

class TerrainClass(Enum):
    """Site exposure for wind-driven infiltration."""
    OPEN = "open"              # Open flat terrain, coast
    COUNTRY = "country"        # Scattered obstructions
    SUBURBAN = "suburban"      # Low-rise neighbourhoods
    URBAN = "urban"            # Dense low/mid-rise
    CITY = "city"              # City centre, tall neighbours


# Shielding multiplier on the LBL conversion factor (higher = more sheltered)
TERRAIN_SHIELDING: Dict[TerrainClass, float] = {
    TerrainClass.OPEN: 0.9,
    TerrainClass.COUNTRY: 0.95,
    TerrainClass.SUBURBAN: 1.0,
    TerrainClass.URBAN: 1.1,
    TerrainClass.CITY: 1.2,
}

# LBL "N-factor" by number of storeys (normal shielding, mid climate)
_STOREY_N_FACTOR = {1: 20.0, 2: 16.0}
_TALL_N_FACTOR = 14.5


def natural_air_changes(ach50: float, terrain: TerrainClass, storeys: int = 1) -> float:
    """
    Seasonal-average natural infiltration (1/h) from blower-door ACH50.

    ACH_nat = ACH50 / N, with N from storey count and terrain shielding.
    """
    if ach50 <= 0:
        return 0.0
    n_factor = _STOREY_N_FACTOR.get(max(storeys, 1), _TALL_N_FACTOR)
    n_factor *= TERRAIN_SHIELDING[terrain]
    return ach50 / n_factor


# =============================================================================
# THERMAL MASS
# =============================================================================

class ThermalMassClass(Enum):
    """Building thermal mass classes."""
    VERY_LIGHT = "very_light"
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"
    VERY_HEAVY = "very_heavy"


# Internal heat capacity per floor area (kJ/m²K), ISO 13790 Table 12
HEAT_CAPACITY_BY_CLASS: Dict[ThermalMassClass, float] = {
    ThermalMassClass.VERY_LIGHT: 80.0,
    ThermalMassClass.LIGHT: 110.0,
    ThermalMassClass.MEDIUM: 165.0,
    ThermalMassClass.HEAVY: 260.0,
    ThermalMassClass.VERY_HEAVY: 370.0,
}



@dataclass(frozen=True)
class EnvelopeArea:
    """Gross area of one orientation split into glazed and opaque parts."""
    gross: float
    window_ratio: float

    @property
    def window(self) -> float:
        return self.gross * self.window_ratio

    @property
    def opaque(self) -> float:
        return self.gross - self.window
