"""
Operating schedules for the monthly engine.

The engine only needs one number per schedule and month: the fraction of the
month's hours during which the load (lighting, equipment, occupants, HVAC,
hot water) is on at full intensity. Those fractions are built from:

1. 24-hour profiles per day type (weekday / Saturday / Sunday)
2. the day-type count of each month in a reference (non-leap) year
3. optional seasonal factors (summer holidays, Christmas closure)

References:
- ISO 13790 Annex G (default occupancy profiles)
- ASHRAE 90.1 Appendix G / COMNET schedules (office 08-18 weekdays)
"""

import calendar
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Sequence, Tuple
import logging

logger = logging.getLogger(__name__)

MONTHS = tuple(range(1, 13))


class DayType(Enum):
    """Day types for schedule differentiation."""
    WEEKDAY = "weekday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


@dataclass
class HourlyProfile:
    """24-hour profile (0-1 fractions for each hour)."""
    values: List[float]  # 24 values, one per hour (0-23)

    def __post_init__(self):
        if len(self.values) != 24:
            raise ValueError(f"HourlyProfile requires 24 values, got {len(self.values)}")
        # Clamp values to 0-1
        self.values = [max(0.0, min(1.0, float(v))) for v in self.values]

    @classmethod
    def constant(cls, value: float) -> "HourlyProfile":
        return cls([value] * 24)

    @classmethod
    def occupied_hours(
        cls,
        start_hour: int,
        end_hour: int,
        occupied: float = 1.0,
        unoccupied: float = 0.0,
    ) -> "HourlyProfile":
        """Block profile: ``occupied`` from start_hour (inclusive) to end_hour (exclusive)."""
        if not (0 <= start_hour <= 24 and 0 <= end_hour <= 24):
            raise ValueError(f"Hours must be within 0-24, got {start_hour}-{end_hour}")
        values = [
            occupied if start_hour <= hour < end_hour else unoccupied
            for hour in range(24)
        ]
        return cls(values)

    def average(self) -> float:
        """Average value across all hours."""
        return sum(self.values) / 24

    def peak_hour(self) -> int:
        """Hour with highest value."""
        return self.values.index(max(self.values))


@dataclass
class DailySchedule:
    """Schedule for different day types."""
    weekday: HourlyProfile
    saturday: HourlyProfile
    sunday: Optional[HourlyProfile] = None

    def __post_init__(self):
        if self.sunday is None:
            self.sunday = self.saturday

    def get_profile(self, day_type: DayType) -> HourlyProfile:
        """Get profile for specific day type."""
        profiles = {
            DayType.WEEKDAY: self.weekday,
            DayType.SATURDAY: self.saturday,
            DayType.SUNDAY: self.sunday,
        }
        return profiles[day_type]


def days_in_month(month: int, year: int) -> int:
    return calendar.monthrange(year, month)[1]


def hours_in_month(month: int, year: int) -> float:
    return days_in_month(month, year) * 24.0


def day_type_counts(month: int, year: int) -> Dict[DayType, int]:
    """Number of weekdays, Saturdays and Sundays in a month."""
    counts = {DayType.WEEKDAY: 0, DayType.SATURDAY: 0, DayType.SUNDAY: 0}
    for day in range(1, days_in_month(month, year) + 1):
        weekday = calendar.weekday(year, month, day)
        if weekday < 5:
            counts[DayType.WEEKDAY] += 1
        elif weekday == 5:
            counts[DayType.SATURDAY] += 1
        else:
            counts[DayType.SUNDAY] += 1
    return counts


@dataclass(frozen=True)
class MonthlySchedule:
    """
    Twelve monthly operating fractions (index 0 = January).

    Construction only checks the shape; the 0-1 range is checked when the
    owning model is compiled, so that every bad value is reported together.
    """
    fractions: Tuple[float, ...]

    def __post_init__(self):
        values = tuple(float(v) for v in self.fractions)
        if len(values) != 12:
            raise ValueError(f"MonthlySchedule requires 12 values, got {len(values)}")
        object.__setattr__(self, "fractions", values)

    def __iter__(self) -> Iterator[float]:
        return iter(self.fractions)

    def __len__(self) -> int:
        return len(self.fractions)

    def fraction(self, month: int) -> float:
        """Operating fraction for calendar month 1-12."""
        return self.fractions[month - 1]

    @property
    def annual_average(self) -> float:
        return sum(self.fractions) / 12

    @classmethod
    def constant(cls, value: float) -> "MonthlySchedule":
        return cls((value,) * 12)

    @classmethod
    def from_daily(
        cls,
        daily: DailySchedule,
        year: int = 2023,
        seasonal_factors: Optional[Dict[int, float]] = None,
    ) -> "MonthlySchedule":
        """
        Collapse day-type profiles into monthly fractions.

        Args:
            daily: Weekday / Saturday / Sunday profiles
            year: Reference year for the weekday calendar
            seasonal_factors: Optional multiplier per month (e.g. {7: 0.6})
        """
        seasonal_factors = seasonal_factors or {}
        averages = {day_type: daily.get_profile(day_type).average() for day_type in DayType}

        fractions = []
        for month in MONTHS:
            counts = day_type_counts(month, year)
            total_days = sum(counts.values())
            value = sum(averages[dt] * n for dt, n in counts.items()) / total_days
            value *= seasonal_factors.get(month, 1.0)
            fractions.append(max(0.0, min(1.0, value)))
        return cls(tuple(fractions))

    @classmethod
    def weekly_hours(
        cls,
        start_hour: int,
        end_hour: int,
        days_per_week: int = 5,
        unoccupied: float = 0.0,
        year: int = 2023,
    ) -> "MonthlySchedule":
        """
        Schedule for a building operated a fixed block of hours per week.

        ``days_per_week`` 5 means Monday-Friday, 6 adds Saturday, 7 every day.
        """
        if not 0 <= days_per_week <= 7:
            raise ValueError(f"days_per_week must be 0-7, got {days_per_week}")
        on = HourlyProfile.occupied_hours(start_hour, end_hour, unoccupied=unoccupied)
        off = HourlyProfile.constant(unoccupied)
        daily = DailySchedule(
            weekday=on if days_per_week >= 5 else off,
            saturday=on if days_per_week >= 6 else off,
            sunday=on if days_per_week >= 7 else off,
        )
        if 0 < days_per_week < 5:
            # Spread a short week evenly over the working days
            scale = days_per_week / 5
            daily.weekday = HourlyProfile([v * scale + unoccupied * (1 - scale) for v in on.values])
        return cls.from_daily(daily, year=year)


@dataclass
class Schedules:
    """All schedules a building needs."""
    occupancy: MonthlySchedule = field(default_factory=lambda: OFFICE_SCHEDULE)
    lighting: MonthlySchedule = field(default_factory=lambda: OFFICE_SCHEDULE)
    equipment: MonthlySchedule = field(default_factory=lambda: OFFICE_EQUIPMENT_SCHEDULE)
    hvac: MonthlySchedule = field(default_factory=lambda: OFFICE_HVAC_SCHEDULE)
    hot_water: MonthlySchedule = field(default_factory=lambda: OFFICE_SCHEDULE)
    exterior_lighting: MonthlySchedule = field(default_factory=lambda: DUSK_TO_DAWN_SCHEDULE)

    def items(self) -> List[Tuple[str, MonthlySchedule]]:
        return [
            ("occupancy", self.occupancy),
            ("lighting", self.lighting),
            ("equipment", self.equipment),
            ("hvac", self.hvac),
            ("hot_water", self.hot_water),
            ("exterior_lighting", self.exterior_lighting),
        ]


# =============================================================================
# STANDARD PROFILES
# =============================================================================

OFFICE_OCCUPANCY_WEEKDAY = HourlyProfile([
    0.00, 0.00, 0.00, 0.00, 0.00, 0.00,  # 00-05: closed
    0.10, 0.20, 0.95, 0.95, 0.95, 0.95,  # 06-11: arrival, morning
    0.50, 0.95, 0.95, 0.95, 0.95, 0.30,  # 12-17: lunch dip, afternoon
    0.10, 0.10, 0.10, 0.10, 0.05, 0.05,  # 18-23: cleaning, late workers
])

OFFICE_OCCUPANCY_SATURDAY = HourlyProfile([
    0.00, 0.00, 0.00, 0.00, 0.00, 0.00,
    0.00, 0.00, 0.10, 0.10, 0.10, 0.10,
    0.10, 0.10, 0.05, 0.05, 0.00, 0.00,
    0.00, 0.00, 0.00, 0.00, 0.00, 0.00,
])

OFFICE_DAILY = DailySchedule(
    weekday=OFFICE_OCCUPANCY_WEEKDAY,
    saturday=OFFICE_OCCUPANCY_SATURDAY,
    sunday=HourlyProfile.constant(0.0),
)

# Office occupancy with a July holiday dip
OFFICE_SCHEDULE = MonthlySchedule.from_daily(OFFICE_DAILY, seasonal_factors={7: 0.7, 12: 0.9})

# Equipment never fully off (servers, standby)
OFFICE_EQUIPMENT_SCHEDULE = MonthlySchedule(
    tuple(0.15 + 0.85 * f for f in OFFICE_SCHEDULE)
)

# HVAC runs 07-19 weekdays
OFFICE_HVAC_SCHEDULE = MonthlySchedule.weekly_hours(7, 19, days_per_week=5)

# Fraction of the day without daylight at mid-latitudes (~45°N)
DUSK_TO_DAWN_SCHEDULE = MonthlySchedule((
    0.62, 0.57, 0.51, 0.45, 0.40, 0.37,
    0.38, 0.43, 0.48, 0.54, 0.60, 0.63,
))


def scale_schedule(schedule: MonthlySchedule, factors: Sequence[float]) -> MonthlySchedule:
    """Multiply a schedule month by month (values clamped to 0-1)."""
    if len(factors) != 12:
        raise ValueError(f"Need 12 factors, got {len(factors)}")
    return MonthlySchedule(tuple(
        max(0.0, min(1.0, f * k)) for f, k in zip(schedule, factors)
    ))
