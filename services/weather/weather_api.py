import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import requests

from config.settings import (
    MAX_RETRIES,
    OPENWEATHERMAP_FORECAST_URL,
    OPENWEATHERMAP_URL,
    REQUEST_TIMEOUT,
    WEATHER_LANG,
    WEATHER_UNITS,
)
from services.weather.exceptions import APIKeyMissingError, WeatherDataSourceError
from services.weather.models import Location

logger = logging.getLogger("fellah.weather")

DEFAULT_ERROR_MESSAGE = "Failed to fetch weather data"


@dataclass(frozen=True)
class LocationQuery:
    """Either a city name or a coordinate pair to query the provider with."""

    city: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @classmethod
    def for_location(cls, location: Location) -> "LocationQuery":
        if location.has_coordinates:
            return cls(latitude=location.latitude, longitude=location.longitude)
        return cls(city=location.city)

    def to_params(self) -> Dict[str, Any]:
        if self.latitude is not None and self.longitude is not None:
            return {'lat': self.latitude, 'lon': self.longitude}
        if self.city:
            return {'q': self.city}
        raise ValueError("LocationQuery needs a city or both coordinates")

    def describe(self) -> str:
        if self.city:
            return self.city
        return f"{self.latitude},{self.longitude}"


class WeatherAPI:
    """Handles weather data fetching from OpenWeatherMap API"""

    def __init__(
        self,
        api_key: Optional[str],
        timeout: int = REQUEST_TIMEOUT,
        retries: int = MAX_RETRIES,
    ):
        if not api_key:
            logger.error(
                "OPENWEATHER_API_KEY environment variable not set. "
                "Please configure the API key before using weather forecasts."
            )
            raise APIKeyMissingError("Weather API key missing")

        self.api_key = api_key
        self.base_url = OPENWEATHERMAP_URL
        self.forecast_url = OPENWEATHERMAP_FORECAST_URL
        self.timeout = timeout
        self.retries = max(1, retries)

    def _params(self, query: LocationQuery) -> Dict[str, Any]:
        params = query.to_params()
        params.update({
            'appid': self.api_key,
            'units': WEATHER_UNITS,
            'lang': WEATHER_LANG,
        })
        return params

    def _get_json(self, url: str, query: LocationQuery) -> Dict:
        """GET a provider endpoint, retrying transport failures only."""
        params = self._params(query)

        for attempt in range(self.retries):
            try:
                response = requests.get(url, params=params, timeout=self.timeout)
            except requests.exceptions.RequestException as e:
                logger.warning(f"Attempt {attempt + 1} failed: {str(e)}")
                if attempt == self.retries - 1:
                    logger.error(f"✗ Failed to fetch weather after {self.retries} attempts")
                    raise WeatherDataSourceError(DEFAULT_ERROR_MESSAGE)
                continue

            return self._handle_response(response, query)

        raise WeatherDataSourceError(DEFAULT_ERROR_MESSAGE)

    def _handle_response(self, response: requests.Response, query: LocationQuery) -> Dict:
        try:
            data = response.json()
        except ValueError:
            data = None

        if response.status_code == 401:
            logger.error("Invalid API key provided")
            raise APIKeyMissingError("Invalid OPENWEATHER_API_KEY")

        if not response.ok:
            message = None
            if isinstance(data, dict):
                message = data.get('message')
            logger.error(
                f"OpenWeatherMap API error for {query.describe()}: "
                f"{response.status_code} - {message or response.text}"
            )
            raise WeatherDataSourceError(
                message or DEFAULT_ERROR_MESSAGE,
                status_code=response.status_code,
            )

        if not isinstance(data, dict):
            raise WeatherDataSourceError(
                "Weather provider returned an unreadable response",
                status_code=response.status_code,
            )

        return data

    def fetch_current(self, query: LocationQuery) -> Dict:
        """Fetch the raw current-weather payload for a location"""
        return self._get_json(self.base_url, query)

    def fetch_forecast(self, query: LocationQuery) -> Dict:
        """Fetch the raw 5-day / 3-hour forecast payload for a location"""
        return self._get_json(self.forecast_url, query)

    def fetch_all(self, query: LocationQuery) -> Tuple[Dict, Dict]:
        """
        Fetch current weather and forecast concurrently.

        Both requests must complete before this returns; the first failure
        is raised once both have finished.
        """
        logger.info(f"Fetching weather and forecast for {query.describe()}")

        with ThreadPoolExecutor(max_workers=2) as pool:
            current_future = pool.submit(self.fetch_current, query)
            forecast_future = pool.submit(self.fetch_forecast, query)
            futures = (current_future, forecast_future)
            errors = [f.exception() for f in futures]

        for error in errors:
            if error is not None:
                raise error

        logger.info(f"✓ Successfully fetched weather for {query.describe()}")
        return current_future.result(), forecast_future.result()
