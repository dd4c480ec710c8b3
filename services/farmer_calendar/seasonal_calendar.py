"""
Seasonal Event Resolver – traditional farmer calendar lookup.

Resolves, from today's date, the next upcoming entry of the farmer calendar
bundled in ``config/farmer_calendar.yaml`` and maps it to its display label.
"""

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from config.settings import FARMER_CALENDAR_FILE
from utils.helpers import load_yaml_mapping

logger = logging.getLogger("fellah.calendar")

NO_UPCOMING_EVENT = "No upcoming event"

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June", "July",
    "August", "September", "October", "November", "December",
)
WEEKDAY_NAMES = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)

CalendarTable = Mapping[int, Mapping[int, str]]
DisplayLabelMap = Mapping[str, str]


class CalendarConfigError(Exception):
    """Exception raised when the bundled calendar data is malformed."""
    pass


def display_label(raw_event: str, labels: DisplayLabelMap) -> str:
    """Canonical label for a raw event name, or the raw name if unmapped."""
    return labels.get(raw_event, raw_event)


def _next_month(month: int) -> int:
    return 1 if month == 12 else month + 1


def resolve_upcoming_event(
    today: date,
    events: CalendarTable,
    labels: DisplayLabelMap,
) -> str:
    """
    Display label of the soonest calendar event on or after ``today``.

    An event falling on today counts as upcoming. When the current month has
    nothing left, only the following month is consulted (December wraps to
    January) and its earliest event is taken. If that month has no events
    either, NO_UPCOMING_EVENT is returned.

    Args:
        today: Date to resolve from (only ``day`` and ``month`` are used)
        events: Month -> day -> raw event name
        labels: Raw event name -> display label

    Returns:
        Display label, raw event name, or NO_UPCOMING_EVENT
    """
    raw_event = None

    month_events = events.get(today.month)
    if month_events:
        upcoming_days = [d for d in month_events if d >= today.day]
        if upcoming_days:
            raw_event = month_events[min(upcoming_days)]

    if raw_event is None:
        next_events = events.get(_next_month(today.month))
        if next_events:
            raw_event = next_events[min(next_events)]

    if raw_event is None:
        # Only one month of look-ahead: a gap of two empty months lands here.
        return NO_UPCOMING_EVENT

    return display_label(raw_event, labels)


def format_today(today: date) -> str:
    """Long British date, e.g. ``Monday, 19 October 2026``."""
    return (
        f"{WEEKDAY_NAMES[today.weekday()]}, "
        f"{today.day} {MONTH_NAMES[today.month - 1]} {today.year}"
    )


def _as_int_key(value: Any, low: int, high: int, what: str) -> int:
    try:
        key = int(value)
    except (TypeError, ValueError):
        raise CalendarConfigError(f"Invalid {what} key: {value!r}")
    if not low <= key <= high:
        raise CalendarConfigError(f"{what.capitalize()} key out of range: {key}")
    return key


def build_calendar_table(raw_events: Mapping[Any, Mapping[Any, Any]]) -> CalendarTable:
    """Validate raw month/day data and freeze it into a read-only table."""
    if not isinstance(raw_events, Mapping):
        raise CalendarConfigError("Calendar 'events' must be a mapping of months")

    table = {}
    for raw_month, days in raw_events.items():
        month = _as_int_key(raw_month, 1, 12, "month")
        if not isinstance(days, Mapping) or not days:
            raise CalendarConfigError(f"Month {month} must map days to event names")

        month_table = {}
        for raw_day, name in days.items():
            day = _as_int_key(raw_day, 1, 31, "day")
            if not isinstance(name, str) or not name.strip():
                raise CalendarConfigError(f"Empty event name for {day}/{month}")
            month_table[day] = name
        table[month] = MappingProxyType(month_table)

    return MappingProxyType(table)


def build_label_map(raw_labels: Optional[Mapping[Any, Any]]) -> DisplayLabelMap:
    if raw_labels is None:
        return MappingProxyType({})
    if not isinstance(raw_labels, Mapping):
        raise CalendarConfigError("Calendar 'labels' must be a mapping")
    return MappingProxyType({str(k): str(v) for k, v in raw_labels.items()})


@dataclass(frozen=True)
class FarmerCalendar:
    """Immutable calendar table plus its display-label map."""

    events: CalendarTable
    labels: DisplayLabelMap

    def upcoming(self, today: Optional[date] = None) -> str:
        """Resolve the upcoming event label, defaulting to the system date."""
        if today is None:
            today = date.today()
        return resolve_upcoming_event(today, self.events, self.labels)


def load_farmer_calendar(path: Optional[Union[str, Path]] = None) -> FarmerCalendar:
    """
    Load the farmer calendar from YAML.

    Args:
        path: YAML file with ``events`` and ``labels`` sections.
              Defaults to FARMER_CALENDAR_FILE.

    Raises:
        CalendarConfigError: If the file is missing or malformed
    """
    config_path = path or FARMER_CALENDAR_FILE
    try:
        config = load_yaml_mapping(config_path)
    except (FileNotFoundError, ValueError) as e:
        raise CalendarConfigError(str(e))

    events = build_calendar_table(config.get("events", {}))
    labels = build_label_map(config.get("labels"))

    event_count = sum(len(days) for days in events.values())
    logger.info(f"✓ Farmer calendar loaded: {len(events)} months, {event_count} events")
    return FarmerCalendar(events=events, labels=labels)
