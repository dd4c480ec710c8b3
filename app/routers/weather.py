"""
Weather and farmer calendar API routes – FastAPI implementation.

Reuses WeatherService, LocationDetector and the farmer calendar.
Configuration and data-source errors are mapped to HTTP errors here and
nowhere else.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from app.schemas import CalendarResponse, WeatherResponse
from services.farmer_calendar import format_today, load_farmer_calendar
from services.weather.exceptions import APIKeyMissingError, WeatherDataSourceError
from services.weather.weather_service import WeatherService

logger = logging.getLogger("fellah.api")

router = APIRouter(prefix="/api", tags=["weather", "calendar"])


def get_weather_service(request: Request) -> WeatherService:
    """Shared WeatherService from app state, built lazily on first use."""
    service = getattr(request.app.state, "weather_service", None)
    if service is None:
        try:
            service = WeatherService.from_settings(
                calendar=getattr(request.app.state, "farmer_calendar", None)
            )
        except APIKeyMissingError as e:
            logger.error(f"Weather API key not configured: {e}")
            raise HTTPException(status_code=500, detail="Weather API key missing")
        request.app.state.weather_service = service
    return service


@router.get("/weather", response_model=WeatherResponse)
def get_weather(
    location: Optional[str] = Query(None, alias="location"),
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
    service: WeatherService = Depends(get_weather_service),
) -> WeatherResponse:
    """
    GET /api/weather?location=<city>&lat=<lat>&lon=<lon>

    All params are optional; without them the location is detected and
    falls back to the default city.
    Returns: current weather, hourly view, daily view, farmer event.
    """
    try:
        screen = service.get_weather_screen(city=location, latitude=lat, longitude=lon)
    except APIKeyMissingError as e:
        logger.error(f"Weather API key rejected: {e}")
        raise HTTPException(status_code=500, detail="Weather API key missing")
    except WeatherDataSourceError as e:
        logger.warning(f"⚠️ Weather data source error: {e.message}")
        raise HTTPException(status_code=502, detail=e.message)
    except Exception as e:
        logger.exception(f"Weather request failed: {e}")
        raise HTTPException(
            status_code=500,
            detail="Failed to load weather data",
        )

    return WeatherResponse(success=True, **screen.to_dict())


@router.get("/calendar/upcoming", response_model=CalendarResponse)
async def get_upcoming_event(
    request: Request,
    on: Optional[date] = Query(None, alias="date"),
) -> CalendarResponse:
    """GET /api/calendar/upcoming?date=YYYY-MM-DD – next farmer calendar event."""
    calendar = getattr(request.app.state, "farmer_calendar", None)
    if calendar is None:
        calendar = load_farmer_calendar()
        request.app.state.farmer_calendar = calendar

    today = on or date.today()
    return CalendarResponse(
        date=today.isoformat(),
        today=format_today(today),
        farmer_event=calendar.upcoming(today),
    )
