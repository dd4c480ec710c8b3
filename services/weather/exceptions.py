"""
Weather exceptions – shared by the client, the aggregation pipeline
and the location fallback chain.
"""

from typing import Optional


class WeatherServiceError(Exception):
    """Base exception for weather flow failures."""
    pass


class APIKeyMissingError(WeatherServiceError):
    """Exception raised when the API key is missing or rejected."""
    pass


class WeatherDataSourceError(WeatherServiceError):
    """Exception raised when the provider reports a failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class MalformedPayloadError(WeatherDataSourceError):
    """Exception raised when a provider payload lacks a required field."""

    def __init__(self, field_path: str, payload_name: str = "payload"):
        super().__init__(f"Malformed {payload_name}: missing required field '{field_path}'")
        self.field_path = field_path


class AcquisitionError(WeatherServiceError):
    """Exception raised when a location strategy cannot produce a location."""
    pass
