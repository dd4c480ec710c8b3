"""
Configuration file for Fellah Weather
"""

# OpenWeatherMap API Configuration
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

OPENWEATHER_API_KEY = os.getenv("OPENWEATHER_API_KEY")
OPENWEATHERMAP_URL = "https://api.openweathermap.org/data/2.5/weather"
OPENWEATHERMAP_FORECAST_URL = "https://api.openweathermap.org/data/2.5/forecast"
OPENWEATHERMAP_ICON_URL = "https://openweathermap.org/img/wn/{icon}@{size}.png"
WEATHER_UNITS = "metric"
WEATHER_LANG = os.getenv("WEATHER_LANG", "en")

# Request Timeout (seconds) and transport retries
REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "5"))
MAX_RETRIES = int(os.getenv("MAX_RETRIES", "3"))

# Default location when acquisition fails
DEFAULT_CITY = os.getenv("DEFAULT_CITY", "Tunis")
DEFAULT_COUNTRY = os.getenv("DEFAULT_COUNTRY", "TN")

# Farmer calendar data
FARMER_CALENDAR_FILE = Path(__file__).parent / "farmer_calendar.yaml"

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
