"""
Storage module for the Air Quality system.

This module contains MemStorage, an in-memory key-value repository for cities,
their latest air-quality and weather readings, hourly forecasts and favorite
locations. It is seeded with the monitored cities of Nepal on creation.
Records are immutable dataclasses; updates replace the stored record.
"""

import threading
import uuid
from dataclasses import replace
from typing import Any, Optional

from .forecast_projector import HourlyForecast
from .records import AirQuality, City, FavoriteLocation, Weather


# (name, province, lat, lon)
NEPAL_CITIES = (
    ("Kathmandu", "Bagmati Province", 27.7172, 85.3240),
    ("Lalitpur", "Bagmati Province", 27.6588, 85.3247),
    ("Bhaktapur", "Bagmati Province", 27.6710, 85.4298),
    ("Chitwan", "Bagmati Province", 27.5291, 84.3542),
    ("Hetauda", "Bagmati Province", 27.4287, 85.0324),
    ("Bharatpur", "Bagmati Province", 27.6977, 84.4354),
    ("Pokhara", "Gandaki Province", 28.2096, 83.9856),
    ("Gorkha", "Gandaki Province", 28.0000, 84.6333),
    ("Baglung", "Gandaki Province", 28.2677, 83.5899),
    ("Mustang", "Gandaki Province", 28.9942, 83.8821),
    ("Butwal", "Lumbini Province", 27.7000, 83.4500),
    ("Bhairahawa", "Lumbini Province", 27.5000, 83.4167),
    ("Tansen", "Lumbini Province", 27.8667, 83.5500),
    ("Ghorahi", "Lumbini Province", 28.0333, 82.5000),
    ("Nepalgunj", "Lumbini Province", 28.0500, 81.6167),
    ("Tulsipur", "Lumbini Province", 28.1333, 82.2833),
    ("Biratnagar", "Koshi Province", 26.4525, 87.2718),
    ("Dharan", "Koshi Province", 26.8147, 87.2799),
    ("Itahari", "Koshi Province", 26.6667, 87.2833),
    ("Janakpur", "Koshi Province", 26.7288, 85.9266),
    ("Namche Bazaar", "Koshi Province", 27.8036, 86.7120),
    ("Taplejung", "Koshi Province", 27.3500, 87.6667),
    ("Birgunj", "Madesh Province", 27.0167, 84.8667),
    ("Rajbiraj", "Madesh Province", 26.5417, 86.7500),
    ("Kalaiya", "Madesh Province", 27.0333, 85.0000),
    ("Gaur", "Madesh Province", 26.7667, 85.2833),
    ("Surkhet", "Karnali Province", 28.6000, 81.6167),
    ("Jumla", "Karnali Province", 29.2742, 82.1839),
    ("Dunai", "Karnali Province", 28.9667, 82.9000),
    ("Manma", "Karnali Province", 29.4000, 81.8833),
    ("Dhangadi", "Sudurpashchim Province", 28.6931, 80.5898),
    ("Mahendranagar", "Sudurpashchim Province", 28.9644, 80.1789),
    ("Tikapur", "Sudurpashchim Province", 28.5167, 81.1167),
    ("Dadeldhura", "Sudurpashchim Province", 29.3000, 80.5833),
)


def _new_id() -> str:
    return str(uuid.uuid4())


class MemStorage:
    """
    In-memory repository for the Air Quality system.

    Air quality and weather hold one record per city (the latest reading);
    hourly forecasts hold a list per city. All access goes through a lock
    because the web UI may call into storage from several script threads.
    """

    def __init__(self, seed_cities: bool = True) -> None:
        """
        Initialize empty tables and optionally seed the Nepal city list.

        Args:
            seed_cities: If True, create one City per entry in NEPAL_CITIES
        """
        self._lock = threading.RLock()
        self._cities: dict[str, City] = {}
        self._air_quality: dict[str, AirQuality] = {}
        self._weather: dict[str, Weather] = {}
        self._hourly_forecast: dict[str, list[HourlyForecast]] = {}
        self._favorites: dict[str, FavoriteLocation] = {}

        if seed_cities:
            for name, province, lat, lon in NEPAL_CITIES:
                self.create_city(City(name=name, province=province, lat=lat, lon=lon))

    # Cities

    def get_cities(self) -> list[City]:
        with self._lock:
            return list(self._cities.values())

    def get_city(self, city_id: str) -> Optional[City]:
        with self._lock:
            return self._cities.get(city_id)

    def get_city_by_name(self, name: str) -> Optional[City]:
        """Case-insensitive lookup by city name."""
        wanted = name.lower()
        with self._lock:
            for city in self._cities.values():
                if city.name.lower() == wanted:
                    return city
        return None

    def create_city(self, city: City) -> City:
        created = replace(city, id=_new_id())
        with self._lock:
            self._cities[created.id] = created
        return created

    def update_city(self, city_id: str, **updates: Any) -> Optional[City]:
        """
        Applies field updates to a city.

        Returns:
            The updated city, or None if the id is unknown
        """
        updates.pop("id", None)
        with self._lock:
            city = self._cities.get(city_id)
            if city is None:
                return None
            updated = replace(city, **updates)
            self._cities[city_id] = updated
            return updated

    # Air quality

    def get_air_quality(self, city_id: str) -> Optional[AirQuality]:
        with self._lock:
            return self._air_quality.get(city_id)

    def update_air_quality(self, city_id: str, air_quality: AirQuality) -> AirQuality:
        """Stores the latest reading of a city, keeping the existing record id."""
        with self._lock:
            existing = self._air_quality.get(city_id)
            record = replace(
                air_quality,
                city_id=city_id,
                id=existing.id if existing else _new_id(),
            )
            self._air_quality[city_id] = record
            return record

    # Weather

    def get_weather(self, city_id: str) -> Optional[Weather]:
        with self._lock:
            return self._weather.get(city_id)

    def update_weather(self, city_id: str, weather: Weather) -> Weather:
        with self._lock:
            existing = self._weather.get(city_id)
            record = replace(
                weather,
                city_id=city_id,
                id=existing.id if existing else _new_id(),
            )
            self._weather[city_id] = record
            return record

    # Hourly forecast

    def get_hourly_forecast(self, city_id: str) -> list[HourlyForecast]:
        with self._lock:
            return list(self._hourly_forecast.get(city_id, []))

    def create_hourly_forecast(self, city_id: str, forecast: HourlyForecast) -> HourlyForecast:
        with self._lock:
            self._hourly_forecast.setdefault(city_id, []).append(forecast)
        return forecast

    def replace_hourly_forecast(self, city_id: str, forecasts: list[HourlyForecast]) -> None:
        """Clears and stores a city's forecast in one step."""
        with self._lock:
            self.clear_hourly_forecast(city_id)
            for forecast in forecasts:
                self.create_hourly_forecast(city_id, forecast)

    def clear_hourly_forecast(self, city_id: str) -> None:
        with self._lock:
            self._hourly_forecast.pop(city_id, None)

    # Favorite locations

    def get_favorite_locations(self) -> list[FavoriteLocation]:
        """Returns favorites sorted by their ``order`` field."""
        with self._lock:
            return sorted(self._favorites.values(), key=lambda favorite: favorite.order)

    def get_favorite_location(self, favorite_id: str) -> Optional[FavoriteLocation]:
        with self._lock:
            return self._favorites.get(favorite_id)

    def create_favorite_location(self, favorite: FavoriteLocation) -> FavoriteLocation:
        created = replace(favorite, id=_new_id())
        with self._lock:
            self._favorites[created.id] = created
        return created

    def update_favorite_location(self, favorite_id: str, **updates: Any) -> Optional[FavoriteLocation]:
        updates.pop("id", None)
        with self._lock:
            favorite = self._favorites.get(favorite_id)
            if favorite is None:
                return None
            updated = replace(favorite, **updates)
            self._favorites[favorite_id] = updated
            return updated

    def delete_favorite_location(self, favorite_id: str) -> bool:
        with self._lock:
            return self._favorites.pop(favorite_id, None) is not None

    def is_city_favorited(self, city_id: str) -> bool:
        with self._lock:
            return any(favorite.city_id == city_id for favorite in self._favorites.values())
