"""
Weather Service – data for the farmer weather screen.

Wires the collaborators together for one screen activation:
- Resolves the location through the fallback chain (never fails)
- Fetches current weather and forecast concurrently from OpenWeatherMap
- Runs the aggregation pipeline on the raw payloads
- Resolves the upcoming farmer calendar event from today's date

Configuration and data-source errors propagate unchanged to the caller.
"""

import logging
from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Any, Dict, Optional

from config.settings import OPENWEATHER_API_KEY
from services.farmer_calendar import FarmerCalendar, format_today, load_farmer_calendar
from services.weather.aggregation import aggregate_weather
from services.weather.location_detector import LocationDetector
from services.weather.models import Location, WeatherReport
from services.weather.weather_api import LocationQuery, WeatherAPI

logger = logging.getLogger("fellah.weather")


@dataclass(frozen=True)
class WeatherScreen:
    """Everything the presentation layer needs for the weather screen."""

    location: Location
    report: WeatherReport
    farmer_event: str
    today_label: str
    warning: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location.to_dict(),
            "warning": self.warning,
            "today": self.today_label,
            "farmer_event": self.farmer_event,
            "current": self.report.current.to_dict(),
            "hourly": [item.to_dict() for item in self.report.hourly],
            "daily": [item.to_dict() for item in self.report.daily],
        }


class WeatherService:
    """Facade over the weather client, location chain and farmer calendar."""

    def __init__(
        self,
        api: WeatherAPI,
        detector: Optional[LocationDetector] = None,
        calendar: Optional[FarmerCalendar] = None,
    ):
        self.api = api
        self.detector = detector or LocationDetector()
        self.calendar = calendar or load_farmer_calendar()

    @classmethod
    def from_settings(cls, calendar: Optional[FarmerCalendar] = None) -> "WeatherService":
        """
        Build the service from config.settings.

        Raises:
            APIKeyMissingError: If OPENWEATHER_API_KEY is not configured
        """
        return cls(api=WeatherAPI(api_key=OPENWEATHER_API_KEY), calendar=calendar)

    def upcoming_event(self, today: Optional[date] = None) -> str:
        return self.calendar.upcoming(today)

    def get_weather_screen(
        self,
        city: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        now: Optional[float] = None,
        today: Optional[date] = None,
        tz: Optional[tzinfo] = None,
    ) -> WeatherScreen:
        """
        Build the weather screen for the requested (or detected) location.

        Raises:
            APIKeyMissingError: If the provider rejects the API key
            WeatherDataSourceError: If the provider fails or returns a malformed payload
        """
        if today is None:
            today = date.today()

        resolved = self.detector.resolve(city=city, latitude=latitude, longitude=longitude)
        query = LocationQuery.for_location(resolved.location)

        current_payload, forecast_payload = self.api.fetch_all(query)
        report = aggregate_weather(current_payload, forecast_payload, now=now, tz=tz)

        # Provider's canonical city/country replace whatever the chain guessed
        location = Location(
            city=report.current.city,
            country=report.current.country,
            latitude=resolved.location.latitude,
            longitude=resolved.location.longitude,
            source=resolved.location.source,
        )

        screen = WeatherScreen(
            location=location,
            report=report,
            farmer_event=self.upcoming_event(today),
            today_label=format_today(today),
            warning=resolved.warning,
        )
        logger.info(
            f"✓ Weather screen ready for {location.city}, {location.country}: "
            f"{len(report.hourly)} hourly, {len(report.daily)} daily"
        )
        return screen
