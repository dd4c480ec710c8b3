"""
Weather domain records.

All records are frozen so derived views can be shared without copying.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple

from config.settings import OPENWEATHERMAP_ICON_URL


def icon_url(icon: str, size: str = "2x") -> str:
    """Build the OpenWeatherMap icon URL for an icon code."""
    return OPENWEATHERMAP_ICON_URL.format(icon=icon, size=size)


@dataclass(frozen=True)
class CurrentWeather:
    """Normalized current conditions. Temperatures are rounded to integers."""

    temp: int
    feels_like: int
    humidity: float
    pressure: float
    wind_speed: float
    description: str
    city: str
    country: str
    icon: str
    temp_min: int
    temp_max: int

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["icon_url"] = icon_url(self.icon, size="4x")
        return data


@dataclass(frozen=True)
class ForecastEntry:
    dt: int
    temp: int
    icon: str
    description: str


@dataclass(frozen=True)
class HourlyItem:
    entry: ForecastEntry
    time_label: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dt": self.entry.dt,
            "time": self.time_label,
            "icon": self.entry.icon,
            "icon_url": icon_url(self.entry.icon),
            "temp": self.entry.temp,
            "description": self.entry.description,
        }


@dataclass(frozen=True)
class DailyItem:
    entry: ForecastEntry
    day_name: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dt": self.entry.dt,
            "day": self.day_name,
            "icon": self.entry.icon,
            "icon_url": icon_url(self.entry.icon),
            "temp": self.entry.temp,
            "description": self.entry.description,
        }


@dataclass(frozen=True)
class WeatherReport:
    """Output of the aggregation pipeline."""

    current: CurrentWeather
    forecast: Tuple[ForecastEntry, ...]
    hourly: Tuple[HourlyItem, ...]
    daily: Tuple[DailyItem, ...]


@dataclass(frozen=True)
class Location:
    city: str
    country: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    source: str = "default"

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ResolvedLocation:
    """Location picked by the fallback chain plus an optional soft warning."""

    location: Location
    warning: Optional[str] = None
