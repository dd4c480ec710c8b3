"""
Farmer calendar module – seasonal event resolution from the bundled calendar.
"""

from .seasonal_calendar import (
    NO_UPCOMING_EVENT,
    CalendarConfigError,
    FarmerCalendar,
    display_label,
    format_today,
    load_farmer_calendar,
    resolve_upcoming_event,
)

__all__ = [
    "NO_UPCOMING_EVENT",
    "CalendarConfigError",
    "FarmerCalendar",
    "display_label",
    "format_today",
    "load_farmer_calendar",
    "resolve_upcoming_event",
]
