"""
Climate Library - resolve weather-file references into ClimateSummary objects.

A reduced building model only carries a weather-file reference (a path or a
station name). The library maps those references onto already-aggregated
climate summaries, so many models can share one summary per location.

Lookup is case-insensitive and tolerant of paths: "USA_CO_Golden-NREL.724666_TMY3.epw",
"/data/weather/USA_CO_Golden-NREL.724666_TMY3.epw" and
"usa_co_golden-nrel.724666_tmy3" resolve to the same entry. Only a known
weather-file extension is dropped, so dots inside station names are kept.
"""

from dataclasses import dataclass
from pathlib import PurePath
from typing import Dict, Iterable, List, Optional
import logging

from ..utils.validation import validate_coordinates
from .summary import ClimateSummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClimateEntry:
    """A registered location."""
    name: str
    summary: ClimateSummary
    latitude: Optional[float] = None
    longitude: Optional[float] = None


WEATHER_SUFFIXES = (".epw", ".wea", ".csv")


def _key(reference: str) -> str:
    name = PurePath(str(reference).strip().replace("\\", "/")).name.lower()
    for suffix in WEATHER_SUFFIXES:
        if name.endswith(suffix):
            return name[: -len(suffix)]
    return name


class ClimateLibrary:
    """
    Registry of climate summaries keyed by weather-file reference.

    Usage:
        library = ClimateLibrary()
        library.register(golden_summary, "USA_CO_Golden-NREL.724666_TMY3.epw",
                         latitude=39.74, longitude=-105.18)

        summary = library.resolve(user_model.weather_file)
        nearest = library.find_nearest(40.0, -105.0)
    """

    def __init__(self, entries: Optional[Iterable[ClimateEntry]] = None):
        self._entries: Dict[str, ClimateEntry] = {}
        for entry in entries or ():
            self._entries[_key(entry.name)] = entry

    def __contains__(self, reference: str) -> bool:
        return _key(reference) in self._entries

    def __len__(self) -> int:
        return len(self.names())

    def names(self) -> List[str]:
        """Registered names, sorted."""
        return sorted({entry.name for entry in self._entries.values()})

    def register(
        self,
        summary: ClimateSummary,
        name: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        aliases: Iterable[str] = (),
    ) -> ClimateEntry:
        """
        Register a summary under a weather-file reference (and aliases).

        Coordinates default to the summary's own.
        """
        name = name or summary.name
        if not name:
            raise ValueError("A climate summary needs a name to be registered")

        latitude = summary.latitude if latitude is None else latitude
        longitude = summary.longitude if longitude is None else longitude
        if latitude is not None and longitude is not None:
            validate_coordinates(latitude, longitude)

        entry = ClimateEntry(name=name, summary=summary, latitude=latitude, longitude=longitude)
        for reference in (name, *aliases):
            key = _key(reference)
            if key in self._entries and self._entries[key].summary is not summary:
                logger.warning(f"Replacing climate registered as '{reference}'")
            self._entries[key] = entry
        logger.debug(f"Registered climate '{name}'")
        return entry

    def resolve(self, reference: str) -> ClimateSummary:
        """
        Climate summary for a weather-file reference.

        Raises:
            KeyError: If nothing is registered under the reference
        """
        key = _key(reference) if reference else ""
        if key not in self._entries:
            available = ", ".join(self.names()) or "none registered"
            raise KeyError(f"Unknown weather file '{reference}'. Available: {available}")
        return self._entries[key].summary

    def find_nearest(self, latitude: float, longitude: float) -> str:
        """
        Name of the registered location closest to given coordinates.

        Uses plain lat/lon distance, which is adequate for picking between
        stations in the same region.

        Raises:
            KeyError: If no registered entry has coordinates
        """
        validate_coordinates(latitude, longitude)
        min_dist = float("inf")
        nearest = None

        for entry in self._entries.values():
            if entry.latitude is None or entry.longitude is None:
                continue
            dist = ((latitude - entry.latitude) ** 2 + (longitude - entry.longitude) ** 2) ** 0.5
            if dist < min_dist:
                min_dist = dist
                nearest = entry.name

        if nearest is None:
            raise KeyError("No registered climate has coordinates")
        return nearest
