"""
Climate Summary - monthly weather drivers for the engine.

The engine never reads weather files. It consumes twelve monthly records:
- mean outdoor dry-bulb temperature (°C)
- total solar irradiation on each envelope orientation (kWh/m²);
  ROOF is the horizontal surface
- heating / cooling degree-days (K·day)

``ClimateSummary.from_hourly`` aggregates an hourly dataset (8760 values,
e.g. already read from an EPW by an external reader) with numpy.

A ClimateSummary is immutable and may be shared by any number of
simulations of buildings at the same location.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Sequence, Tuple
import calendar
import logging

import numpy as np

from ..geometry.envelope import Orientation, ORIENTATIONS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthlyClimate:
    """Weather drivers for one calendar month."""
    month: int                                  # 1-12
    mean_temperature: float                     # °C
    solar: Mapping[Orientation, float]          # kWh/m² over the month
    heating_degree_days: float = 0.0            # K·day
    cooling_degree_days: float = 0.0            # K·day

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month must be 1-12, got {self.month}")
        solar = {o: float(self.solar.get(o, 0.0)) for o in ORIENTATIONS}
        negative = [o.value for o, v in solar.items() if v < 0 or not np.isfinite(v)]
        if negative:
            raise ValueError(f"Solar irradiation must be non-negative: {negative}")
        if not np.isfinite(self.mean_temperature):
            raise ValueError(f"Mean temperature must be finite (month {self.month})")
        object.__setattr__(self, "solar", MappingProxyType(solar))

    def irradiation(self, orientation: Orientation) -> float:
        return self.solar[orientation]


@dataclass(frozen=True)
class ClimateSummary:
    """
    Twelve ordered MonthlyClimate records.

    Indexing uses the calendar month: ``summary[1]`` is January.
    """
    months: Tuple[MonthlyClimate, ...]
    name: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def __post_init__(self):
        months = tuple(self.months)
        if len(months) != 12:
            raise ValueError(f"ClimateSummary requires 12 months, got {len(months)}")
        order = [m.month for m in months]
        if order != list(range(1, 13)):
            raise ValueError(f"Months must be ordered 1-12 without gaps, got {order}")
        object.__setattr__(self, "months", months)

    def __getitem__(self, month: int) -> MonthlyClimate:
        if not 1 <= month <= 12:
            raise KeyError(f"Month must be 1-12, got {month}")
        return self.months[month - 1]

    def __iter__(self) -> Iterator[MonthlyClimate]:
        return iter(self.months)

    def __len__(self) -> int:
        return 12

    @property
    def temperatures(self) -> Tuple[float, ...]:
        return tuple(m.mean_temperature for m in self.months)

    @property
    def annual_mean_temperature(self) -> float:
        return float(np.mean(self.temperatures))

    @property
    def heating_degree_days(self) -> float:
        return sum(m.heating_degree_days for m in self.months)

    @property
    def cooling_degree_days(self) -> float:
        return sum(m.cooling_degree_days for m in self.months)

    def annual_irradiation(self, orientation: Orientation) -> float:
        return sum(m.solar[orientation] for m in self.months)

    # =========================================================================
    # CONSTRUCTORS
    # =========================================================================

    @classmethod
    def from_monthly(
        cls,
        temperatures: Sequence[float],
        solar: Mapping[Orientation, Sequence[float]],
        name: str = "",
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        heating_base: float = 18.0,
        cooling_base: float = 18.0,
        year: int = 2023,
    ) -> "ClimateSummary":
        """
        Build from twelve monthly means and twelve irradiation totals per orientation.

        Degree-days are estimated from the monthly mean (no daily spread),
        which underestimates them in shoulder months.
        """
        if len(temperatures) != 12:
            raise ValueError(f"Need 12 monthly temperatures, got {len(temperatures)}")
        for orientation, values in solar.items():
            if len(values) != 12:
                raise ValueError(
                    f"Need 12 monthly irradiation values for {orientation.value}, got {len(values)}"
                )

        months = []
        for i, temperature in enumerate(temperatures):
            month = i + 1
            days = calendar.monthrange(year, month)[1]
            months.append(MonthlyClimate(
                month=month,
                mean_temperature=float(temperature),
                solar={o: float(values[i]) for o, values in solar.items()},
                heating_degree_days=max(0.0, heating_base - temperature) * days,
                cooling_degree_days=max(0.0, temperature - cooling_base) * days,
            ))
        return cls(tuple(months), name=name, latitude=latitude, longitude=longitude)

    @classmethod
    def from_hourly(
        cls,
        temperature: Sequence[float],
        irradiance: Mapping[Orientation, Sequence[float]],
        year: int = 2023,
        name: str = "",
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        heating_base: float = 18.0,
        cooling_base: float = 18.0,
    ) -> "ClimateSummary":
        """
        Aggregate an hourly weather year into monthly drivers.

        Args:
            temperature: Hourly dry-bulb temperature (°C), starting Jan 1 00:00
            irradiance: Hourly total irradiance per orientation (W/m²)
            year: Calendar year the series covers (sets leap-year length)
            heating_base / cooling_base: Degree-day base temperatures (°C)
        """
        hours_in_year = (366 if calendar.isleap(year) else 365) * 24
        temps = np.asarray(temperature, dtype=float)
        if temps.shape != (hours_in_year,):
            raise ValueError(
                f"Expected {hours_in_year} hourly temperatures for {year}, got {temps.size}"
            )
        if not np.all(np.isfinite(temps)):
            raise ValueError("Hourly temperatures contain NaN or infinite values")

        start = np.datetime64(f"{year}-01-01T00", "h")
        stamps = start + np.arange(hours_in_year)
        hour_month = stamps.astype("datetime64[M]").astype(int) % 12 + 1

        daily_mean = temps.reshape(-1, 24).mean(axis=1)
        day_month = hour_month[::24]
        hdd = np.clip(heating_base - daily_mean, 0.0, None)
        cdd = np.clip(daily_mean - cooling_base, 0.0, None)

        sums: Dict[Orientation, np.ndarray] = {}
        for orientation, values in irradiance.items():
            series = np.asarray(values, dtype=float)
            if series.shape != (hours_in_year,):
                raise ValueError(
                    f"Expected {hours_in_year} hourly irradiance values for "
                    f"{orientation.value}, got {series.size}"
                )
            series = np.clip(np.nan_to_num(series, nan=0.0), 0.0, None)
            sums[orientation] = np.bincount(hour_month, weights=series, minlength=13)[1:] / 1000.0

        months = []
        for month in range(1, 13):
            mask = hour_month == month
            day_mask = day_month == month
            months.append(MonthlyClimate(
                month=month,
                mean_temperature=float(temps[mask].mean()),
                solar={o: float(s[month - 1]) for o, s in sums.items()},
                heating_degree_days=float(hdd[day_mask].sum()),
                cooling_degree_days=float(cdd[day_mask].sum()),
            ))

        logger.debug(f"Aggregated {hours_in_year} hourly records into monthly climate '{name}'")
        return cls(tuple(months), name=name, latitude=latitude, longitude=longitude)
