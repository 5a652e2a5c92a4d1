"""
OpenWeather client module for the Air Quality system.

This module contains the OpenWeatherClient class which fetches raw pollutant
concentrations, current weather and the 3-hourly weather forecast for a pair
of coordinates. Responses are parsed into the system's record types; every
failure (transport error, HTTP error status, malformed payload) surfaces as a
ProviderError. No retries are attempted here.
"""

import logging
import math
import numbers
from datetime import datetime, timezone
from typing import Any, Optional

import requests

from .config import DEFAULT_BASE_URL
from .aqi_converter import round_half_up
from .exceptions import AirQualityError, ProviderError
from .forecast_projector import ForecastSlot
from .pollutant_reading import PollutantReading
from .records import Weather

logger = logging.getLogger(__name__)

# Conversion factor from m/s (provider) to km/h (display)
MS_TO_KMH = 3.6


def _from_unix(seconds: Any) -> datetime:
    return datetime.fromtimestamp(int(seconds), tz=timezone.utc)


def _number(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
        raise ProviderError(f"{name} must be a finite number, got {value!r}")
    return value


class OpenWeatherClient:
    """
    Thin HTTP client for the OpenWeather air pollution, weather and forecast APIs.

    A ``requests.Session`` can be injected (tests pass a mock); otherwise one
    is created and reused for connection pooling.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session if session is not None else requests.Session()

    def _get(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        """
        Performs a GET request and returns the decoded JSON body.

        Raises:
            ProviderError: On missing API key, transport errors, non-2xx
                           responses or a body that is not a JSON object
        """
        if not self.api_key:
            raise ProviderError("OPENWEATHER_API_KEY is not configured")

        url = f"{self.base_url}/{endpoint}"
        query = dict(params, appid=self.api_key)
        try:
            response = self._session.get(url, params=query, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            # Never log the query string: it carries the API key
            logger.warning("OpenWeather %s request failed: %s", endpoint, type(e).__name__)
            raise ProviderError(f"{endpoint} request failed: {e}") from e
        except ValueError as e:
            raise ProviderError(f"{endpoint} returned invalid JSON") from e

        if not isinstance(payload, dict):
            raise ProviderError(f"{endpoint} returned an unexpected payload")
        return payload

    def get_air_pollution(self, lat: float, lon: float) -> tuple[PollutantReading, datetime]:
        """
        Fetches current pollutant concentrations.

        Returns:
            A tuple containing:
            - PollutantReading: Concentrations from ``list[0].components``
            - datetime: Measurement time from ``list[0].dt`` (UTC)
        """
        payload = self._get("air_pollution", {"lat": lat, "lon": lon})
        try:
            entry = payload["list"][0]
            reading = PollutantReading.from_components(entry["components"])
            measured_at = _from_unix(entry["dt"])
        except AirQualityError as e:
            raise ProviderError(f"air_pollution returned an invalid reading: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ProviderError(f"air_pollution returned a malformed payload: {e!r}") from e
        return reading, measured_at

    def get_current_weather(self, lat: float, lon: float) -> Weather:
        """Fetches current weather in metric units."""
        payload = self._get("weather", {"lat": lat, "lon": lon, "units": "metric"})
        try:
            main = payload["main"]
            wind = payload.get("wind") or {}
            condition = payload["weather"][0]
            temperature = _number(main["temp"], "temperature")
            return Weather(
                temperature=round_half_up(temperature),
                feels_like=round_half_up(_number(main.get("feels_like", temperature), "feels_like")),
                humidity=_number(main["humidity"], "humidity"),
                pressure=_number(main["pressure"], "pressure"),
                wind_speed=round_half_up(_number(wind.get("speed", 0), "wind speed") * MS_TO_KMH),
                wind_direction=_number(wind.get("deg", 0), "wind direction"),
                visibility=_number(payload.get("visibility", 0), "visibility"),
                description=condition["description"],
                icon=condition["icon"],
                timestamp=_from_unix(payload["dt"]),
                place_name=payload.get("name") or None,
            )
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            raise ProviderError(f"weather returned a malformed payload: {e!r}") from e

    def get_forecast(self, lat: float, lon: float, count: int = 24) -> list[ForecastSlot]:
        """
        Fetches up to ``count`` forecast slots.

        Returns:
            ForecastSlot list in provider order
        """
        payload = self._get("forecast", {"lat": lat, "lon": lon, "units": "metric", "cnt": count})
        try:
            return [
                ForecastSlot(
                    time=_from_unix(item["dt"]),
                    temperature=_number(item["main"]["temp"], "forecast temperature"),
                    icon=item["weather"][0]["icon"],
                )
                for item in payload["list"]
            ]
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            raise ProviderError(f"forecast returned a malformed payload: {e!r}") from e
