"""Tests for the FastAPI weather and calendar routes."""

import logging

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.routers.weather import get_weather_service
from services.weather.exceptions import APIKeyMissingError, WeatherDataSourceError
from tests.test_weather_service import FakeWeatherAPI, _service

client = TestClient(app)


@pytest.fixture
def override_service():
    def _install(api):
        service = _service(api)
        app.dependency_overrides[get_weather_service] = lambda: service
        return service

    yield _install
    app.dependency_overrides.clear()


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_weather_endpoint(override_service, current_payload, forecast_payload):
    api = FakeWeatherAPI(current_payload, forecast_payload)
    override_service(api)

    response = client.get("/api/weather", params={"location": "Tunis"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["current"]["temp"] == 25
    assert data["location"]["city"] == "Tunis"
    assert data["warning"] is None
    assert len(data["hourly"]) <= 8
    assert len(data["daily"]) <= 5
    assert data["farmer_event"]


def test_weather_endpoint_reports_fallback_warning(override_service, current_payload, forecast_payload):
    override_service(FakeWeatherAPI(current_payload, forecast_payload))

    response = client.get("/api/weather")

    assert response.status_code == 200
    assert response.json()["warning"] == "Unable to get location. Using default city."


def test_weather_endpoint_rejects_out_of_range_coordinates(override_service):
    override_service(FakeWeatherAPI())
    response = client.get("/api/weather", params={"lat": 100, "lon": 10})
    assert response.status_code == 422


def test_weather_endpoint_data_source_error(override_service):
    override_service(FakeWeatherAPI(error=WeatherDataSourceError("city not found", status_code=404)))

    response = client.get("/api/weather", params={"location": "Atlantis"})

    assert response.status_code == 502
    assert response.json()["detail"] == "city not found"


def test_weather_endpoint_malformed_payload(override_service, forecast_payload):
    override_service(FakeWeatherAPI({"name": "Tunis"}, forecast_payload))

    response = client.get("/api/weather", params={"location": "Tunis"})

    assert response.status_code == 502
    assert "main.temp" in response.json()["detail"]


def test_weather_endpoint_non_finite_temperature(override_service, current_payload, forecast_payload):
    current_payload["main"]["temp"] = float("inf")
    override_service(FakeWeatherAPI(current_payload, forecast_payload))

    response = client.get("/api/weather", params={"location": "Tunis"})

    assert response.status_code == 502
    assert "main.temp" in response.json()["detail"]


def test_weather_endpoint_logs_data_source_message(override_service, caplog):
    override_service(FakeWeatherAPI(error=WeatherDataSourceError("city not found", status_code=404)))

    with caplog.at_level(logging.WARNING, logger="fellah.api"):
        client.get("/api/weather", params={"location": "Atlantis"})

    assert "Weather data source error: city not found" in caplog.text


def test_weather_endpoint_rejected_key(override_service):
    override_service(FakeWeatherAPI(error=APIKeyMissingError("Invalid OPENWEATHER_API_KEY")))

    response = client.get("/api/weather", params={"location": "Tunis"})

    assert response.status_code == 500
    assert response.json()["detail"] == "Weather API key missing"


def test_weather_endpoint_without_configured_key(monkeypatch):
    monkeypatch.setattr("services.weather.weather_service.OPENWEATHER_API_KEY", None)
    monkeypatch.setattr(app.state, "weather_service", None, raising=False)

    response = client.get("/api/weather")

    assert response.status_code == 500
    assert response.json()["detail"] == "Weather API key missing"


def test_calendar_endpoint():
    response = client.get("/api/calendar/upcoming", params={"date": "2026-02-05"})

    assert response.status_code == 200
    assert response.json() == {
        "date": "2026-02-05",
        "today": "Thursday, 5 February 2026",
        "farmer_event": "العزارة",
    }


def test_calendar_endpoint_sentinel():
    response = client.get("/api/calendar/upcoming", params={"date": "2026-03-25"})
    assert response.json()["farmer_event"] == "No upcoming event"
