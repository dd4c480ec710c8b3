"""
Weather Aggregation Pipeline.

Turns raw OpenWeatherMap payloads into the views shown on the weather screen:
- Normalizes the current-weather payload into a CurrentWeather record
- Normalizes the 3-hour forecast series, keeping the provider's order
- Derives the hourly view (next 24 hours, at most 8 entries)
- Derives the daily view (one entry per UTC day, today excluded, at most 5)

Every function here is pure: the same payloads and the same ``now`` always
produce the same report. Nothing is fetched, cached or mutated.
"""

import logging
import math
import time
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from services.weather.exceptions import MalformedPayloadError
from services.weather.models import (
    CurrentWeather,
    DailyItem,
    ForecastEntry,
    HourlyItem,
    WeatherReport,
)

logger = logging.getLogger("fellah.weather")

HOURLY_WINDOW_SECONDS = 86400
HOURLY_LIMIT = 8
DAILY_COLLECT_LIMIT = 6
DAILY_LIMIT = DAILY_COLLECT_LIMIT - 1

WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

_MISSING = object()


def round_temperature(value: float) -> int:
    """
    Round a provider temperature to the nearest integer.

    Ties go up (towards positive infinity): 2.5 -> 3, -2.5 -> -2.
    Python's built-in ``round`` would send 2.5 to 2.
    """
    return int(math.floor(float(value) + 0.5))


def _require(payload: Any, path: str, payload_name: str) -> Any:
    """Walk a dotted path (list indexes allowed) or raise MalformedPayloadError."""
    value = payload
    for key in path.split("."):
        if isinstance(value, dict):
            value = value.get(key, _MISSING)
        elif isinstance(value, (list, tuple)) and key.isdigit():
            index = int(key)
            value = value[index] if index < len(value) else _MISSING
        else:
            value = _MISSING

        if value is _MISSING or value is None:
            raise MalformedPayloadError(path, payload_name)
    return value


def _require_temperature(payload: Any, path: str, payload_name: str) -> int:
    value = _require(payload, path, payload_name)
    try:
        return round_temperature(value)
    except (TypeError, ValueError, OverflowError):
        raise MalformedPayloadError(path, payload_name)


def normalize_current(payload: Dict[str, Any]) -> CurrentWeather:
    """
    Build a CurrentWeather record from a raw current-weather payload.

    All required fields are read before the record is built, so a payload
    missing any of them raises MalformedPayloadError and nothing partial
    escapes.
    """
    name = "current weather payload"
    return CurrentWeather(
        temp=_require_temperature(payload, "main.temp", name),
        feels_like=_require_temperature(payload, "main.feels_like", name),
        humidity=_require(payload, "main.humidity", name),
        pressure=_require(payload, "main.pressure", name),
        wind_speed=_require(payload, "wind.speed", name),
        description=_require(payload, "weather.0.description", name),
        city=_require(payload, "name", name),
        country=_require(payload, "sys.country", name),
        icon=_require(payload, "weather.0.icon", name),
        temp_min=_require_temperature(payload, "main.temp_min", name),
        temp_max=_require_temperature(payload, "main.temp_max", name),
    )


def normalize_forecast(payload: Dict[str, Any]) -> Tuple[ForecastEntry, ...]:
    """Map the raw forecast list to ForecastEntry records, order untouched."""
    name = "forecast payload"
    items = _require(payload, "list", name)
    if not isinstance(items, list):
        raise MalformedPayloadError("list", name)

    entries: List[ForecastEntry] = []
    for index, item in enumerate(items):
        prefix = f"list.{index}"
        try:
            dt = int(_require(item, "dt", name))
        except (TypeError, ValueError):
            raise MalformedPayloadError(f"{prefix}.dt", name)
        except MalformedPayloadError as e:
            raise MalformedPayloadError(f"{prefix}.{e.field_path}", name)

        try:
            entries.append(
                ForecastEntry(
                    dt=dt,
                    temp=_require_temperature(item, "main.temp", name),
                    icon=_require(item, "weather.0.icon", name),
                    description=_require(item, "weather.0.description", name),
                )
            )
        except MalformedPayloadError as e:
            raise MalformedPayloadError(f"{prefix}.{e.field_path}", name)

    return tuple(entries)


def _utc_datetime(timestamp: int) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def day_key(timestamp: int) -> str:
    """UTC calendar day (YYYY-MM-DD) containing the timestamp."""
    return _utc_datetime(timestamp).date().isoformat()


def weekday_name(timestamp: int) -> str:
    """English weekday name of the UTC day containing the timestamp."""
    return WEEKDAY_NAMES[_utc_datetime(timestamp).weekday()]


def provider_timezone(current_payload: Dict[str, Any], forecast_payload: Dict[str, Any]) -> tzinfo:
    """
    Fixed-offset timezone of the location, from ``timezone`` (seconds east
    of UTC) in the current payload or ``city.timezone`` in the forecast.
    Falls back to UTC when neither carries a usable offset.
    """
    city = forecast_payload.get("city") if isinstance(forecast_payload, dict) else None
    candidates = (
        current_payload.get("timezone") if isinstance(current_payload, dict) else None,
        city.get("timezone") if isinstance(city, dict) else None,
    )
    for offset in candidates:
        if isinstance(offset, bool) or not isinstance(offset, (int, float)):
            continue
        try:
            return timezone(timedelta(seconds=int(offset)))
        except (ValueError, OverflowError):
            logger.warning(f"⚠️ Ignoring out-of-range provider timezone offset: {offset}")
    return timezone.utc


def hour_label(timestamp: int, tz: tzinfo = timezone.utc) -> str:
    """Hour of day as shown on the hourly strip, e.g. ``9:00`` or ``15:00``."""
    return f"{datetime.fromtimestamp(timestamp, tz=tz).hour}:00"


def derive_hourly(
    forecast: Sequence[ForecastEntry],
    now: float,
    tz: tzinfo = timezone.utc,
) -> Tuple[HourlyItem, ...]:
    """
    Entries in the half-open window [now, now + 24h), first 8 only.

    Args:
        forecast: Normalized forecast in provider order
        now: Current instant in seconds since the epoch
        tz: Timezone used for the hour labels only

    Returns:
        Tuple of up to 8 HourlyItem in chronological (provider) order
    """
    window_end = now + HOURLY_WINDOW_SECONDS
    hourly: List[HourlyItem] = []

    for entry in forecast:
        if now <= entry.dt < window_end:
            hourly.append(HourlyItem(entry=entry, time_label=hour_label(entry.dt, tz)))
            if len(hourly) == HOURLY_LIMIT:
                break

    return tuple(hourly)


def derive_daily(forecast: Iterable[ForecastEntry]) -> Tuple[DailyItem, ...]:
    """
    One representative entry per UTC day, skipping the first day seen.

    The first entry of each new day key represents that day. Collection stops
    once 6 distinct days are recorded; the first (partial, current) day is
    then dropped, leaving at most 5.
    """
    collected: List[DailyItem] = []
    seen = set()

    for entry in forecast:
        key = day_key(entry.dt)
        if key in seen:
            continue
        seen.add(key)
        collected.append(DailyItem(entry=entry, day_name=weekday_name(entry.dt)))
        if len(collected) == DAILY_COLLECT_LIMIT:
            break

    return tuple(collected[1:])


def aggregate_weather(
    current_payload: Dict[str, Any],
    forecast_payload: Dict[str, Any],
    now: Optional[float] = None,
    tz: Optional[tzinfo] = None,
) -> WeatherReport:
    """
    Run the whole pipeline on a pair of raw payloads.

    Both payloads are normalized before any view is derived, so a malformed
    payload fails the whole report. Hour labels use ``tz`` when given,
    otherwise the location's UTC offset reported by the provider.

    Raises:
        MalformedPayloadError: If a required field is missing from either payload
    """
    if now is None:
        now = time.time()

    current = normalize_current(current_payload)
    forecast = normalize_forecast(forecast_payload)
    if tz is None:
        tz = provider_timezone(current_payload, forecast_payload)

    hourly = derive_hourly(forecast, now, tz)
    daily = derive_daily(forecast)

    logger.debug(
        f"Aggregated weather for {current.city}: {len(forecast)} forecast entries, "
        f"{len(hourly)} hourly, {len(daily)} daily"
    )

    return WeatherReport(current=current, forecast=forecast, hourly=hourly, daily=daily)
