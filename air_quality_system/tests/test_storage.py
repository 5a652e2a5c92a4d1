"""
Tests for MemStorage.

Tests cover:
- Seeding: the Nepal city list
- CRUD for cities, air quality, weather, hourly forecasts and favorites
- Error scenarios: unknown ids
"""

from dataclasses import replace
from datetime import datetime, timezone

import pytest

from airquality.forecast_projector import HourlyForecast
from airquality.records import AirQuality, City, FavoriteLocation, Weather
from airquality.storage import NEPAL_CITIES, MemStorage


@pytest.fixture
def storage():
    """Fixture providing a seeded MemStorage."""
    return MemStorage()


@pytest.fixture
def kathmandu(storage):
    return storage.get_city_by_name("Kathmandu")


def make_weather(temperature=18):
    return Weather(
        temperature=temperature,
        feels_like=temperature,
        humidity=60,
        pressure=1012,
        wind_speed=7,
        wind_direction=180,
        visibility=8000,
        description="haze",
        icon="50d",
        timestamp=datetime(2025, 1, 15, 6, tzinfo=timezone.utc),
    )


class TestCities:
    """Test suite for city storage."""

    def test_seeded_with_nepal_cities(self, storage):
        cities = storage.get_cities()
        assert len(cities) == len(NEPAL_CITIES) == 34
        assert all(city.id for city in cities)
        assert len({city.id for city in cities}) == len(cities)

    def test_unseeded_storage_is_empty(self):
        assert MemStorage(seed_cities=False).get_cities() == []

    def test_get_city_by_name_is_case_insensitive(self, storage):
        city = storage.get_city_by_name("pOKHARA")
        assert city is not None
        assert city.province == "Gandaki Province"

    def test_get_city_by_unknown_name(self, storage):
        assert storage.get_city_by_name("Atlantis") is None

    def test_create_and_get_city(self, storage):
        created = storage.create_city(City(name="Lukla", province="Koshi Province", lat=27.69, lon=86.73))
        assert created.id is not None
        assert storage.get_city(created.id) == created

    def test_update_city(self, storage, kathmandu):
        updated = storage.update_city(kathmandu.id, name="Kathmandu Valley")
        assert updated.name == "Kathmandu Valley"
        assert updated.id == kathmandu.id
        assert storage.get_city(kathmandu.id).name == "Kathmandu Valley"

    def test_update_city_cannot_change_id(self, storage, kathmandu):
        updated = storage.update_city(kathmandu.id, id="other")
        assert updated.id == kathmandu.id

    def test_update_unknown_city(self, storage):
        assert storage.update_city("missing", name="x") is None


class TestReadings:
    """Test suite for air quality, weather and forecast storage."""

    def test_air_quality_round_trip(self, storage, kathmandu, reading, fixed_now):
        assert storage.get_air_quality(kathmandu.id) is None
        stored = storage.update_air_quality(kathmandu.id, AirQuality.from_reading(reading, fixed_now))
        assert stored.city_id == kathmandu.id
        assert stored.id is not None
        assert storage.get_air_quality(kathmandu.id) == stored

    def test_update_air_quality_keeps_id(self, storage, kathmandu, reading, fixed_now):
        first = storage.update_air_quality(kathmandu.id, AirQuality.from_reading(reading, fixed_now))
        second = storage.update_air_quality(kathmandu.id, AirQuality.from_reading(reading.scaled(2), fixed_now))
        assert second.id == first.id
        assert second.aqi != first.aqi

    def test_update_weather_keeps_id(self, storage, kathmandu):
        first = storage.update_weather(kathmandu.id, make_weather(18))
        second = storage.update_weather(kathmandu.id, make_weather(21))
        assert second.id == first.id
        assert storage.get_weather(kathmandu.id).temperature == 21

    def test_hourly_forecast(self, storage, kathmandu, reading, fixed_now):
        forecast = HourlyForecast(
            time=fixed_now, aqi=130, temperature=12, icon="01d", pollutants=reading, factor=1.0
        )
        storage.create_hourly_forecast(kathmandu.id, forecast)
        storage.create_hourly_forecast(kathmandu.id, replace(forecast, aqi=140))
        assert [f.aqi for f in storage.get_hourly_forecast(kathmandu.id)] == [130, 140]

        storage.replace_hourly_forecast(kathmandu.id, [replace(forecast, aqi=99)])
        assert [f.aqi for f in storage.get_hourly_forecast(kathmandu.id)] == [99]

        storage.clear_hourly_forecast(kathmandu.id)
        assert storage.get_hourly_forecast(kathmandu.id) == []

    def test_forecast_list_is_a_copy(self, storage, kathmandu):
        storage.get_hourly_forecast(kathmandu.id).append("junk")
        assert storage.get_hourly_forecast(kathmandu.id) == []


class TestFavorites:
    """Test suite for favorite locations."""

    def make_favorite(self, city_id, label, order):
        return FavoriteLocation(
            city_id=city_id,
            custom_label=label,
            order=order,
            created_at=datetime(2025, 1, 15, tzinfo=timezone.utc),
        )

    def test_favorites_sorted_by_order(self, storage, kathmandu):
        pokhara = storage.get_city_by_name("Pokhara")
        storage.create_favorite_location(self.make_favorite(pokhara.id, "Work", 2))
        storage.create_favorite_location(self.make_favorite(kathmandu.id, "Home", 1))
        labels = [favorite.custom_label for favorite in storage.get_favorite_locations()]
        assert labels == ["Home", "Work"]

    def test_is_city_favorited(self, storage, kathmandu):
        assert storage.is_city_favorited(kathmandu.id) is False
        storage.create_favorite_location(self.make_favorite(kathmandu.id, "Home", 0))
        assert storage.is_city_favorited(kathmandu.id) is True

    def test_update_favorite(self, storage, kathmandu):
        favorite = storage.create_favorite_location(self.make_favorite(kathmandu.id, "Home", 0))
        updated = storage.update_favorite_location(favorite.id, custom_label="Parents")
        assert updated.custom_label == "Parents"
        assert storage.get_favorite_location(favorite.id).custom_label == "Parents"

    def test_update_unknown_favorite(self, storage):
        assert storage.update_favorite_location("missing", custom_label="x") is None

    def test_delete_favorite(self, storage, kathmandu):
        favorite = storage.create_favorite_location(self.make_favorite(kathmandu.id, "Home", 0))
        assert storage.delete_favorite_location(favorite.id) is True
        assert storage.delete_favorite_location(favorite.id) is False
        assert storage.get_favorite_locations() == []
