"""
Climate Module - monthly weather drivers and their lookup.

Features:
- ClimateSummary: twelve immutable monthly records
- Aggregation of hourly weather years with numpy
- ClimateLibrary: weather-file reference -> ClimateSummary
"""

from .summary import MonthlyClimate, ClimateSummary
from .library import ClimateEntry, ClimateLibrary

__all__ = [
    'MonthlyClimate',
    'ClimateSummary',
    'ClimateEntry',
    'ClimateLibrary',
]
