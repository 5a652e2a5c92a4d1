"""
Exception types for the Air Quality system.

All errors raised by the core conversions, the provider client and the
service layer derive from AirQualityError so that callers (the web UI) can
surface a single "data unavailable" state without catching unrelated errors.
"""


class AirQualityError(Exception):
    """Base class for all Air Quality system errors."""


class InvalidInputError(AirQualityError, ValueError):
    """
    Raised when a concentration or coordinate is negative, NaN, non-finite
    or not a real number.

    A PM2.5 value of 0 is a valid "Good" reading, so invalid input is never
    mapped to an AQI of 0.
    """


class MissingPollutantError(AirQualityError, ValueError):
    """Raised when a pollutant required for main-pollutant ranking is absent."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"pollutant '{field}' is missing from the reading")


class ProviderError(AirQualityError):
    """Raised when the weather/air-quality provider cannot be reached or returns bad data."""


class CityNotFoundError(AirQualityError, LookupError):
    """Raised when a city id is not present in storage."""

    def __init__(self, city_id: str):
        self.city_id = city_id
        super().__init__(f"City not found: {city_id}")
