from typing import List, Optional

from pydantic import BaseModel, Field


class LocationOut(BaseModel):
    city: str
    country: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    source: str = Field(..., description="Fallback-chain step that produced the location (coordinates, city, ip, default).")


class CurrentWeatherOut(BaseModel):
    temp: int
    feels_like: int
    humidity: float
    pressure: float
    wind_speed: float
    description: str
    city: str
    country: str
    icon: str
    icon_url: str
    temp_min: int
    temp_max: int


class HourlyOut(BaseModel):
    dt: int
    time: str = Field(..., description="Hour of day, e.g. '15:00'.")
    icon: str
    icon_url: str
    temp: int
    description: str


class DailyOut(BaseModel):
    dt: int
    day: str = Field(..., description="English weekday name of the UTC day.")
    icon: str
    icon_url: str
    temp: int
    description: str


class WeatherResponse(BaseModel):
    """Weather screen payload: current conditions, next 24h and next 5 days."""

    success: bool = True
    location: LocationOut
    warning: Optional[str] = Field(
        None,
        description="Soft warning when the default city was used.",
    )
    today: str
    farmer_event: str
    current: CurrentWeatherOut
    hourly: List[HourlyOut] = Field(default_factory=list, max_length=8)
    daily: List[DailyOut] = Field(default_factory=list, max_length=5)


class CalendarResponse(BaseModel):
    date: str
    today: str
    farmer_event: str
