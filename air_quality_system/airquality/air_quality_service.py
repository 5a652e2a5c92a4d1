"""
Air quality service module for the Air Quality system.

This module contains the AirQualityService class, the orchestrator behind the
web UI. It pulls raw readings from the weather provider, converts PM2.5 to an
EPA AQI, picks the main pollutant, projects the hourly forecast, stores the
results and serves city listings, city details, ad-hoc locations, global
rankings and favorites.
"""

import logging
import math
import numbers
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Optional

from .config import Settings
from .exceptions import AirQualityError, CityNotFoundError, InvalidInputError
from .forecast_projector import ForecastProjector
from .openweather_client import OpenWeatherClient
from .records import AirQuality, City, FavoriteLocation
from .reports import (
    CityDetail,
    CityWithData,
    FavoriteView,
    LocationData,
    RankingEntry,
    Rankings,
    RefreshResult,
    RefreshSummary,
)
from .storage import MemStorage

logger = logging.getLogger(__name__)


# Reference cities for the global rankings: (name, country, lat, lon)
WORLD_CITIES = (
    ("Zurich", "Switzerland", 47.3769, 8.5417),
    ("Helsinki", "Finland", 60.1699, 24.9384),
    ("Oslo", "Norway", 59.9139, 10.7522),
    ("Stockholm", "Sweden", 59.3293, 18.0686),
    ("Copenhagen", "Denmark", 55.6761, 12.5683),
    ("Reykjavik", "Iceland", 64.1466, -21.9426),
    ("Wellington", "New Zealand", -41.2865, 174.7762),
    ("Sydney", "Australia", -33.8688, 151.2093),
    ("Vancouver", "Canada", 49.2827, -123.1207),
    ("Montreal", "Canada", 45.5017, -73.5673),
    ("Delhi", "India", 28.7041, 77.1025),
    ("Mumbai", "India", 19.0760, 72.8777),
    ("Beijing", "China", 39.9042, 116.4074),
    ("Shanghai", "China", 31.2304, 121.4737),
    ("Dhaka", "Bangladesh", 23.8103, 90.4125),
    ("Lahore", "Pakistan", 31.5804, 74.3587),
    ("Karachi", "Pakistan", 24.8607, 67.0011),
    ("Cairo", "Egypt", 30.0444, 31.2357),
    ("Lagos", "Nigeria", 6.5244, 3.3792),
    ("Mexico City", "Mexico", 19.4326, -99.1332),
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_coordinates(lat: object, lon: object) -> tuple[float, float]:
    """
    Checks that latitude and longitude are finite and within range.

    Returns:
        (lat, lon) as floats

    Raises:
        InvalidInputError: If either value is missing, non-numeric or out of range
    """
    for name, value, limit in (("latitude", lat, 90), ("longitude", lon, 180)):
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidInputError(f"{name} is required and must be a number")
        if not math.isfinite(value) or abs(value) > limit:
            raise InvalidInputError(f"{name} must be between -{limit} and {limit}")
    return float(lat), float(lon)


class AirQualityService:
    """
    Orchestrator for provider refreshes and read models.

    Refreshes are throttled per city: a refresh requested within
    ``settings.cache_ttl_seconds`` of the last successful one returns the
    cached RefreshResult (``reused=True``) without calling the provider,
    unless ``force`` is set.
    """

    # Worker threads for fan-out requests (refresh-all, rankings)
    MAX_WORKERS = 8
    RANKING_SIZE = 10

    def __init__(
        self,
        storage: MemStorage,
        client: OpenWeatherClient,
        projector: Optional[ForecastProjector] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = _utcnow
    ) -> None:
        self.storage = storage
        self.client = client
        self.projector = projector if projector is not None else ForecastProjector()
        self.settings = settings if settings is not None else Settings()
        self._clock = clock
        self._last_refresh: dict[str, RefreshResult] = {}

    @classmethod
    def from_settings(cls, settings: Settings) -> "AirQualityService":
        """Builds a service with seeded storage and a live provider client."""
        client = OpenWeatherClient(
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout=settings.request_timeout,
        )
        return cls(storage=MemStorage(), client=client, settings=settings)

    def clear_cache(self) -> None:
        """Forget refresh times so the next refresh of every city hits the provider."""
        self._last_refresh.clear()

    # Read models

    def _city_with_data(self, city: City) -> CityWithData:
        return CityWithData(
            city=city,
            air_quality=self.storage.get_air_quality(city.id),
            weather=self.storage.get_weather(city.id),
            is_favorite=self.storage.is_city_favorited(city.id),
        )

    def _require_city(self, city_id: str) -> City:
        city = self.storage.get_city(city_id)
        if city is None:
            raise CityNotFoundError(city_id)
        return city

    def list_cities(self) -> list[CityWithData]:
        """Returns every city with its latest stored readings."""
        return [self._city_with_data(city) for city in self.storage.get_cities()]

    def get_city_detail(self, city_id: str) -> CityDetail:
        """
        Returns one city with its readings and hourly forecast.

        Raises:
            CityNotFoundError: If the city id is unknown
        """
        city = self._require_city(city_id)
        summary = self._city_with_data(city)
        return CityDetail(
            city=city,
            air_quality=summary.air_quality,
            weather=summary.weather,
            is_favorite=summary.is_favorite,
            hourly_forecast=tuple(self.storage.get_hourly_forecast(city_id)),
        )

    # Refresh

    def refresh_city(self, city_id: str, force: bool = False) -> RefreshResult:
        """
        Fetches fresh provider data for a city and stores it.

        Air pollution, current weather and the forecast are fetched first;
        storage is only touched once all three succeeded, so a failed refresh
        leaves the previous readings in place.

        Args:
            city_id: City to refresh
            force: Bypass the throttling cache

        Returns:
            RefreshResult describing what was stored

        Raises:
            CityNotFoundError: If the city id is unknown
            ProviderError: If any provider request fails
            InvalidInputError: If the provider reports an invalid concentration
        """
        city = self._require_city(city_id)
        now = self._clock()

        cached = self._last_refresh.get(city_id)
        if (not force and cached is not None and
                (now - cached.refreshed_at).total_seconds() < self.settings.cache_ttl_seconds):
            result = replace(cached, reused=True)
            self._log_refresh(city, result)
            return result

        reading, measured_at = self.client.get_air_pollution(city.lat, city.lon)
        weather = self.client.get_current_weather(city.lat, city.lon)
        slots = self.client.get_forecast(city.lat, city.lon, count=self.settings.forecast_hours)

        air_quality = AirQuality.from_reading(reading, measured_at)
        forecasts = self.projector.project(reading, slots)

        stored_air = self.storage.update_air_quality(city.id, air_quality)
        stored_weather = self.storage.update_weather(city.id, weather)
        self.storage.replace_hourly_forecast(city.id, forecasts)

        result = RefreshResult(
            city_id=city.id,
            air_quality=stored_air,
            weather=stored_weather,
            forecast_count=len(forecasts),
            refreshed_at=now,
        )
        self._last_refresh[city.id] = result
        self._log_refresh(city, result)
        return result

    def _log_refresh(self, city: City, result: RefreshResult) -> None:
        marker = "[REUSED]" if result.reused else "[NEW]"
        logger.info(
            "%-14s | AQI %3d | %-30s | main %-5s | forecast %2d | %s",
            city.name,
            result.air_quality.aqi,
            result.air_quality.level.label,
            result.air_quality.main_pollutant,
            result.forecast_count,
            marker,
        )

    def _safe_refresh(self, city_id: str, force: bool) -> Optional[str]:
        try:
            self.refresh_city(city_id, force=force)
            return None
        except AirQualityError as e:
            logger.error("Refresh of city %s failed: %s", city_id, e)
            return str(e)

    def refresh_all(self, force: bool = False) -> RefreshSummary:
        """
        Refreshes every city concurrently.

        Per-city failures are logged and counted; they do not abort the
        other refreshes.
        """
        city_ids = [city.id for city in self.storage.get_cities()]
        with ThreadPoolExecutor(max_workers=self.MAX_WORKERS) as executor:
            outcomes = list(executor.map(lambda city_id: self._safe_refresh(city_id, force), city_ids))

        errors = {
            city_id: error
            for city_id, error in zip(city_ids, outcomes)
            if error is not None
        }
        summary = RefreshSummary(
            successful=len(city_ids) - len(errors),
            failed=len(errors),
            errors=errors,
        )
        logger.info(summary.message)
        return summary

    # Ad-hoc locations

    def get_location(self, lat: float, lon: float) -> LocationData:
        """
        Fetches air quality and weather for arbitrary coordinates.

        Nothing is stored.

        Raises:
            InvalidInputError: If the coordinates are invalid
            ProviderError: If a provider request fails
        """
        lat, lon = validate_coordinates(lat, lon)
        reading, measured_at = self.client.get_air_pollution(lat, lon)
        weather = self.client.get_current_weather(lat, lon)
        return LocationData(
            name=weather.place_name or "Current Location",
            latitude=lat,
            longitude=lon,
            air_quality=AirQuality.from_reading(reading, measured_at),
            weather=weather,
        )

    # Rankings

    def _ranking_entry(self, name: str, country: str, lat: float, lon: float) -> Optional[RankingEntry]:
        try:
            reading, _ = self.client.get_air_pollution(lat, lon)
            air_quality = AirQuality.from_reading(reading, self._clock())
        except AirQualityError as e:
            logger.warning("Skipping %s in rankings: %s", name, e)
            return None
        return RankingEntry(city=name, country=country, aqi=air_quality.aqi, pm25=reading.pm2_5)

    def get_rankings(self) -> Rankings:
        """
        Ranks the reference world cities by AQI.

        Cities whose data cannot be fetched are left out.
        """
        with ThreadPoolExecutor(max_workers=self.MAX_WORKERS) as executor:
            entries = list(executor.map(lambda args: self._ranking_entry(*args), WORLD_CITIES))

        valid = [entry for entry in entries if entry is not None]
        by_aqi = sorted(valid, key=lambda entry: entry.aqi)

        cleanest = tuple(
            RankingEntry(entry.city, entry.country, entry.aqi, entry.pm25, rank=index + 1)
            for index, entry in enumerate(by_aqi[:self.RANKING_SIZE])
        )
        polluted = tuple(
            RankingEntry(entry.city, entry.country, entry.aqi, entry.pm25, rank=index + 1)
            for index, entry in enumerate(reversed(by_aqi[-self.RANKING_SIZE:]))
        )
        return Rankings(
            cleanest=cleanest,
            polluted=polluted,
            total_cities=len(valid),
            last_updated=self._clock(),
        )

    # Favorites

    def add_favorite(self, city_id: str, custom_label: str, icon: Optional[str] = None) -> FavoriteLocation:
        """
        Pins a city under a custom label, appended after existing favorites.

        Raises:
            CityNotFoundError: If the city id is unknown
            InvalidInputError: If the label is blank
        """
        self._require_city(city_id)
        label = custom_label.strip()
        if not label:
            raise InvalidInputError("custom label must not be empty")

        existing = self.storage.get_favorite_locations()
        next_order = max((favorite.order for favorite in existing), default=-1) + 1
        return self.storage.create_favorite_location(
            FavoriteLocation(
                city_id=city_id,
                custom_label=label,
                order=next_order,
                created_at=self._clock(),
                icon=icon,
            )
        )

    def remove_favorite(self, favorite_id: str) -> bool:
        return self.storage.delete_favorite_location(favorite_id)

    def list_favorites(self) -> list[FavoriteView]:
        """Returns favorites in display order, skipping ones whose city vanished."""
        views = []
        for favorite in self.storage.get_favorite_locations():
            city = self.storage.get_city(favorite.city_id)
            if city is not None:
                views.append(FavoriteView(favorite=favorite, city=self._city_with_data(city)))
        return views
