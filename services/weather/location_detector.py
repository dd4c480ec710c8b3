"""
Location Detector - Resolves the location to fetch weather for

Strategies are tried in order and the first one that yields a location wins.
Acquisition failures never abort the weather flow: they are logged and the
chain falls through to the default city.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

import requests

from config.settings import (
    DEFAULT_CITY,
    DEFAULT_COUNTRY,
    REQUEST_TIMEOUT,
)
from services.weather.exceptions import AcquisitionError
from services.weather.models import Location, ResolvedLocation

logger = logging.getLogger("fellah.weather")

FALLBACK_WARNING = "Unable to get location. Using default city."


@dataclass(frozen=True)
class LocationRequest:
    """What the caller supplied; every field is optional."""

    city: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class LocationStrategy:
    """One step of the fallback chain."""

    name = "strategy"
    # Acts on caller input
    explicit = False

    def locate(self, request: LocationRequest) -> Optional[Location]:
        """Return a Location, None when not applicable, or raise AcquisitionError."""
        raise NotImplementedError


class ExplicitCoordinatesStrategy(LocationStrategy):
    name = "coordinates"
    explicit = True

    def locate(self, request: LocationRequest) -> Optional[Location]:
        if request.latitude is None and request.longitude is None:
            return None
        if request.latitude is None or request.longitude is None:
            raise AcquisitionError("Both latitude and longitude are required")

        try:
            lat, lon = float(request.latitude), float(request.longitude)
        except (TypeError, ValueError):
            raise AcquisitionError(f"Invalid coordinates: {request.latitude}, {request.longitude}")
        if not -90 <= lat <= 90 or not -180 <= lon <= 180:
            raise AcquisitionError(f"Coordinates out of range: {lat}, {lon}")

        return Location(
            city=request.city or "",
            country="",
            latitude=lat,
            longitude=lon,
            source=self.name,
        )


class ExplicitCityStrategy(LocationStrategy):
    name = "city"
    explicit = True

    def locate(self, request: LocationRequest) -> Optional[Location]:
        if request.city is None:
            return None
        city = request.city.strip()
        if not city:
            raise AcquisitionError("Empty city name")
        return Location(city=city, country="", source=self.name)


class IPGeolocationStrategy(LocationStrategy):
    """Detects user location using multiple geolocation APIs"""

    name = "ip"

    def __init__(self, timeout: int = REQUEST_TIMEOUT):
        self.timeout = timeout
        # Multiple geolocation API endpoints to try
        self.apis = [
            {
                'name': 'ip-api.com',
                'url': 'http://ip-api.com/json/',
                'parser': self._parse_ip_api
            },
            {
                'name': 'ipapi.co',
                'url': 'https://ipapi.co/json/',
                'parser': self._parse_ipapi_co
            },
            {
                'name': 'ipinfo.io',
                'url': 'https://ipinfo.io/json',
                'parser': self._parse_ipinfo
            }
        ]

    def locate(self, request: LocationRequest) -> Optional[Location]:
        for api in self.apis:
            logger.info(f"🔄 Trying {api['name']}...")
            location = self._fetch_from_api(api)
            if location:
                logger.info(f"✓ Location detected via {api['name']}: {location.city}, {location.country}")
                return location

        raise AcquisitionError("All IP geolocation providers failed")

    def _fetch_from_api(self, api: Dict) -> Optional[Location]:
        """Fetch location from a specific API"""
        try:
            response = requests.get(
                api['url'],
                timeout=self.timeout,
                headers={
                    'User-Agent': 'FellahWeather/1.0'
                }
            )
            if response.status_code == 200:
                return api['parser'](response.json())
            logger.warning(f"⚠️ {api['name']} returned {response.status_code}")
        except requests.exceptions.Timeout:
            logger.warning(f"⏱️ {api['name']} timeout ({self.timeout}s)")
        except requests.exceptions.ConnectionError:
            logger.warning(f"🔌 {api['name']} connection error")
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning(f"❌ Error fetching from {api['name']}: {str(e)}")

        return None

    def _build(self, city, country, lat, lon) -> Optional[Location]:
        if not city:
            return None
        try:
            return Location(
                city=city,
                country=country or '',
                latitude=float(lat),
                longitude=float(lon),
                source=self.name,
            )
        except (TypeError, ValueError):
            return None

    def _parse_ip_api(self, data: Dict) -> Optional[Location]:
        """Parse response from ip-api.com"""
        if data.get('status') == 'fail':
            logger.debug(f"ip-api failed: {data.get('message')}")
            return None
        return self._build(data.get('city'), data.get('countryCode'), data.get('lat'), data.get('lon'))

    def _parse_ipapi_co(self, data: Dict) -> Optional[Location]:
        """Parse response from ipapi.co"""
        if data.get('error'):
            logger.debug(f"ipapi.co error: {data.get('reason')}")
            return None
        return self._build(data.get('city'), data.get('country_code'), data.get('latitude'), data.get('longitude'))

    def _parse_ipinfo(self, data: Dict) -> Optional[Location]:
        """Parse response from ipinfo.io"""
        if data.get('error'):
            logger.debug(f"ipinfo error: {data.get('error')}")
            return None
        loc = data.get('loc', '').split(',')
        if len(loc) != 2:
            return None
        return self._build(data.get('city'), data.get('country'), loc[0], loc[1])


def default_location() -> Location:
    return Location(
        city=DEFAULT_CITY,
        country=DEFAULT_COUNTRY,
        source="default",
    )


class LocationDetector:
    """Ordered fallback chain of location strategies"""

    def __init__(
        self,
        strategies: Optional[Sequence[LocationStrategy]] = None,
        fallback: Callable[[], Location] = default_location,
    ):
        if strategies is None:
            strategies = [
                ExplicitCoordinatesStrategy(),
                ExplicitCityStrategy(),
                IPGeolocationStrategy(),
            ]
        self.strategies: List[LocationStrategy] = list(strategies)
        self.fallback = fallback

    def resolve(
        self,
        city: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> ResolvedLocation:
        """
        Resolve a location, first success wins, default city last.

        A failing explicit strategy ends the chain at the default city.
        """
        request = LocationRequest(city=city, latitude=latitude, longitude=longitude)

        for strategy in self.strategies:
            try:
                location = strategy.locate(request)
            except AcquisitionError as e:
                logger.warning(f"⚠️ Location strategy '{strategy.name}' failed: {str(e)}")
                if strategy.explicit:
                    break
                continue

            if location is not None:
                return ResolvedLocation(location=location)

        location = self.fallback()
        logger.warning(f"⚠️ Location detection failed, using fallback: {location.city}")
        return ResolvedLocation(location=location, warning=FALLBACK_WARNING)
