"""
Report types for the Air Quality system.

This module defines the dataclasses returned by AirQualityService: city
listings with their latest data, city details with the hourly forecast,
ad-hoc location data, global rankings and refresh summaries. Their to_dict()
methods produce the JSON shapes the UI consumes.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .forecast_projector import HourlyForecast
from .records import AirQuality, City, FavoriteLocation, Weather


@dataclass(frozen=True)
class CityWithData:
    """A city together with its latest stored readings (either may be missing)."""

    city: City
    air_quality: Optional[AirQuality] = None
    weather: Optional[Weather] = None
    is_favorite: bool = False

    @property
    def has_data(self) -> bool:
        return self.air_quality is not None

    def to_dict(self) -> dict[str, object]:
        data = self.city.to_dict()
        data["airQuality"] = self.air_quality.to_dict() if self.air_quality else None
        data["weather"] = self.weather.to_dict() if self.weather else None
        data["isFavorite"] = self.is_favorite
        return data


@dataclass(frozen=True)
class CityDetail(CityWithData):
    """A city with its latest readings and synthesised hourly forecast."""

    hourly_forecast: tuple[HourlyForecast, ...] = ()

    def to_dict(self) -> dict[str, object]:
        data = super().to_dict()
        data["hourlyForecast"] = [forecast.to_dict() for forecast in self.hourly_forecast]
        return data


@dataclass(frozen=True)
class LocationData:
    """Air quality and weather for arbitrary coordinates."""

    name: str
    latitude: float
    longitude: float
    air_quality: AirQuality
    weather: Weather
    id: str = "current-location"

    @property
    def province(self) -> str:
        return f"{self.latitude:.4f}, {self.longitude:.4f}"

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "province": self.province,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "airQuality": self.air_quality.to_dict(),
            "weather": self.weather.to_dict(),
        }


@dataclass(frozen=True)
class RankingEntry:
    city: str
    country: str
    aqi: int
    pm25: float
    rank: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "city": self.city,
            "country": self.country,
            "aqi": self.aqi,
            "pm25": self.pm25,
            "rank": self.rank,
        }


@dataclass(frozen=True)
class Rankings:
    """
    Global air-quality rankings.

    Attributes:
        cleanest: Up to ten lowest-AQI cities, ascending, ranked from 1
        polluted: Up to ten highest-AQI cities, descending, ranked from 1
        total_cities: Number of cities whose data could be fetched
        last_updated: When the rankings were computed
    """

    cleanest: tuple[RankingEntry, ...]
    polluted: tuple[RankingEntry, ...]
    total_cities: int
    last_updated: datetime

    def to_dict(self) -> dict[str, object]:
        return {
            "cleanest": [entry.to_dict() for entry in self.cleanest],
            "polluted": [entry.to_dict() for entry in self.polluted],
            "totalCities": self.total_cities,
            "lastUpdated": self.last_updated.isoformat(),
        }


@dataclass(frozen=True)
class RefreshResult:
    """
    Outcome of refreshing one city.

    Attributes:
        city_id: Refreshed city
        air_quality: Stored air-quality record
        weather: Stored weather record
        forecast_count: Number of hourly forecasts stored
        refreshed_at: When the provider data was fetched
        reused: True if the result came from the throttling cache
    """

    city_id: str
    air_quality: AirQuality
    weather: Weather
    forecast_count: int
    refreshed_at: datetime
    reused: bool = False

    @property
    def message(self) -> str:
        if self.reused:
            return "Data is up to date"
        return "Data refreshed successfully"


@dataclass(frozen=True)
class RefreshSummary:
    successful: int
    failed: int
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def message(self) -> str:
        return f"Refresh completed: {self.successful} successful, {self.failed} failed"

    def to_dict(self) -> dict[str, object]:
        return {
            "message": self.message,
            "successful": self.successful,
            "failed": self.failed,
        }


@dataclass(frozen=True)
class FavoriteView:
    """A favorite location joined with its city's latest data."""

    favorite: FavoriteLocation
    city: CityWithData

    def to_dict(self) -> dict[str, object]:
        data = self.favorite.to_dict()
        data["city"] = self.city.to_dict()
        return data
