"""
Translate Module - detailed building descriptions -> reduced models.

Features:
- DetailedBuilding: pydantic description of spaces, surfaces, systems
- ForwardTranslator: DetailedBuilding -> UserModel
- IDFReader: EnergyPlus IDF -> DetailedBuilding (eppy)
"""

from .description import (
    BoundaryCondition,
    DailyProfile,
    DetailedBuilding,
    EnvelopeDefaults,
    Location,
    ScheduleSet,
    Setpoints,
    Space,
    SubSurface,
    SubSurfaceType,
    Surface,
    SurfaceType,
    SystemDescription,
    Ventilation,
)
from .forward_translator import ForwardTranslator, TranslationError, translate
from .idf_reader import IDFReader, polygon_geometry

__all__ = [
    'BoundaryCondition',
    'DailyProfile',
    'DetailedBuilding',
    'EnvelopeDefaults',
    'Location',
    'ScheduleSet',
    'Setpoints',
    'Space',
    'SubSurface',
    'SubSurfaceType',
    'Surface',
    'SurfaceType',
    'SystemDescription',
    'Ventilation',
    'ForwardTranslator',
    'TranslationError',
    'translate',
    'IDFReader',
    'polygon_geometry',
]
