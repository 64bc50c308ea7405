"""Envelope geometry helpers (orientation buckets, box envelope, infiltration, mass)."""

from .envelope import (
    Orientation,
    ORIENTATIONS,
    WALL_ORIENTATIONS,
    ROOF_TILT_LIMIT_DEG,
    azimuth_to_orientation,
    surface_orientation,
    box_envelope,
    TerrainClass,
    TERRAIN_SHIELDING,
    natural_air_changes,
    ThermalMassClass,
    HEAT_CAPACITY_BY_CLASS,
    EnvelopeArea,
)

__all__ = [
    "Orientation",
    "ORIENTATIONS",
    "WALL_ORIENTATIONS",
    "ROOF_TILT_LIMIT_DEG",
    "azimuth_to_orientation",
    "surface_orientation",
    "box_envelope",
    "TerrainClass",
    "TERRAIN_SHIELDING",
    "natural_air_changes",
    "ThermalMassClass",
    "HEAT_CAPACITY_BY_CLASS",
    "EnvelopeArea",
]
