"""
Operating schedules.

Usage:
    from isomodel.schedules import MonthlySchedule, Schedules, OFFICE_DAILY

    lighting = MonthlySchedule.from_daily(OFFICE_DAILY, seasonal_factors={7: 0.6})
    schedules = Schedules(lighting=lighting)
"""

from .profiles import (
    DayType,
    HourlyProfile,
    DailySchedule,
    MonthlySchedule,
    Schedules,
    MONTHS,
    days_in_month,
    hours_in_month,
    day_type_counts,
    scale_schedule,
    OFFICE_DAILY,
    OFFICE_SCHEDULE,
    OFFICE_EQUIPMENT_SCHEDULE,
    OFFICE_HVAC_SCHEDULE,
    DUSK_TO_DAWN_SCHEDULE,
)

__all__ = [
    "DayType",
    "HourlyProfile",
    "DailySchedule",
    "MonthlySchedule",
    "Schedules",
    "MONTHS",
    "days_in_month",
    "hours_in_month",
    "day_type_counts",
    "scale_schedule",
    "OFFICE_DAILY",
    "OFFICE_SCHEDULE",
    "OFFICE_EQUIPMENT_SCHEDULE",
    "OFFICE_HVAC_SCHEDULE",
    "DUSK_TO_DAWN_SCHEDULE",
]
