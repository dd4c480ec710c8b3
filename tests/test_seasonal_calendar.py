"""Tests for the farmer calendar resolver."""

from datetime import date
from types import MappingProxyType

import pytest

from services.farmer_calendar import (
    NO_UPCOMING_EVENT,
    CalendarConfigError,
    display_label,
    format_today,
    load_farmer_calendar,
    resolve_upcoming_event,
)
from services.farmer_calendar.seasonal_calendar import build_calendar_table


@pytest.fixture(scope="module")
def calendar():
    return load_farmer_calendar()


def test_smallest_day_on_or_after_today():
    events = {2: {2: "A", 13: "B"}}
    assert resolve_upcoming_event(date(2026, 2, 5), events, {}) == "B"


def test_event_today_is_included():
    events = {2: {2: "A", 13: "B"}}
    assert resolve_upcoming_event(date(2026, 2, 13), events, {}) == "B"
    assert resolve_upcoming_event(date(2026, 2, 2), events, {}) == "A"


def test_december_wraps_to_january():
    events = {12: {25: "X"}, 1: {14: "D", 13: "C"}}
    assert resolve_upcoming_event(date(2026, 12, 30), events, {}) == "C"


def test_next_month_ignores_today_day_number():
    # Day 20 of the next month is still the earliest event there
    events = {5: {3: "early"}, 6: {20: "late", 25: "later"}}
    assert resolve_upcoming_event(date(2026, 5, 10), events, {}) == "late"


def test_month_without_table_uses_next_month():
    events = {5: {30: "summer"}}
    assert resolve_upcoming_event(date(2026, 4, 10), events, {}) == "summer"


def test_sentinel_when_neither_month_has_events():
    events = {6: {1: "Z"}}
    assert resolve_upcoming_event(date(2026, 3, 15), events, {}) == NO_UPCOMING_EVENT
    assert resolve_upcoming_event(date(2026, 3, 15), {}, {}) == NO_UPCOMING_EVENT


def test_lookahead_is_one_month_only():
    events = {1: {10: "far"}}
    assert resolve_upcoming_event(date(2026, 11, 1), events, {}) == NO_UPCOMING_EVENT


def test_label_map_applied_and_raw_fallback():
    events = {7: {1: "entry of X", 2: "unmapped"}}
    labels = {"entry of X": "X", "exit of X": "X"}
    assert resolve_upcoming_event(date(2026, 7, 1), events, labels) == "X"
    assert resolve_upcoming_event(date(2026, 7, 2), events, labels) == "unmapped"
    assert display_label("exit of X", labels) == "X"


def test_bundled_entry_and_exit_collapse(calendar):
    """Entry (25 Dec) and exit (13 Jan) of the white nights share one label."""
    assert calendar.upcoming(date(2026, 12, 25)) == "الليالي البيض"
    assert calendar.upcoming(date(2027, 1, 13)) == "الليالي البيض"
    assert calendar.labels["دخول الليالي البيض"] == calendar.labels["خروج الليالي البيض"]


def test_bundled_calendar_resolutions(calendar):
    assert calendar.upcoming(date(2026, 10, 19)) == "الشتاء"
    assert calendar.upcoming(date(2026, 2, 5)) == "العزارة"
    assert calendar.upcoming(date(2026, 12, 26)) == "الليالي البيض"
    assert calendar.upcoming(date(2026, 4, 1)) == "الصيف"


def test_bundled_gap_after_march_returns_sentinel(calendar):
    # March is exhausted after the 20th and April has no entries
    assert calendar.upcoming(date(2026, 3, 25)) == NO_UPCOMING_EVENT


def test_every_bundled_event_resolves_on_its_own_day(calendar):
    for month, days in calendar.events.items():
        for day, raw in days.items():
            expected = calendar.labels.get(raw, raw)
            assert calendar.upcoming(date(2026, month, day)) == expected


def test_bundled_calendar_is_read_only(calendar):
    assert isinstance(calendar.events, MappingProxyType)
    with pytest.raises(TypeError):
        calendar.events[4] = {1: "new"}
    with pytest.raises(TypeError):
        calendar.events[1][1] = "new"
    with pytest.raises(TypeError):
        calendar.labels["x"] = "y"


def test_format_today():
    assert format_today(date(2026, 10, 19)) == "Monday, 19 October 2026"
    assert format_today(date(2027, 1, 1)) == "Friday, 1 January 2027"


def test_load_rejects_bad_month(tmp_path):
    path = tmp_path / "calendar.yaml"
    path.write_text("events:\n  13:\n    1: nope\n", encoding="utf-8")
    with pytest.raises(CalendarConfigError):
        load_farmer_calendar(path)


def test_load_missing_file(tmp_path):
    with pytest.raises(CalendarConfigError):
        load_farmer_calendar(tmp_path / "missing.yaml")


def test_load_rejects_top_level_list(tmp_path):
    path = tmp_path / "calendar.yaml"
    path.write_text("- events\n- labels\n", encoding="utf-8")
    with pytest.raises(CalendarConfigError) as exc_info:
        load_farmer_calendar(path)
    assert "mapping" in str(exc_info.value)


def test_load_rejects_unparsable_yaml(tmp_path):
    path = tmp_path / "calendar.yaml"
    path.write_text("events: [1, 2\n", encoding="utf-8")
    with pytest.raises(CalendarConfigError):
        load_farmer_calendar(path)


def test_load_empty_file_has_no_events(tmp_path):
    path = tmp_path / "calendar.yaml"
    path.write_text("", encoding="utf-8")
    calendar = load_farmer_calendar(path)
    assert calendar.upcoming(date(2026, 2, 5)) == NO_UPCOMING_EVENT


def test_load_custom_file(tmp_path):
    path = tmp_path / "calendar.yaml"
    path.write_text(
        "events:\n  2:\n    2: A\n    13: B\nlabels:\n  B: Bee\n",
        encoding="utf-8",
    )
    calendar = load_farmer_calendar(path)
    assert calendar.upcoming(date(2026, 2, 5)) == "Bee"


def test_build_table_rejects_empty_name():
    with pytest.raises(CalendarConfigError):
        build_calendar_table({1: {5: "  "}})
