"""
Record types for the Air Quality system.

This module defines the dataclasses held by the in-memory storage: cities,
their latest air-quality and weather readings, and favorite locations. Each
record converts to the camelCase JSON object served to the UI.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .aqi_converter import calculate_epa_aqi
from .aqi_level import AQILevel, get_aqi_level
from .main_pollutant import select_main_pollutant
from .pollutant_reading import PollutantReading


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class City:
    """
    A monitored city.

    Attributes:
        name: City name
        province: Province (or "lat, lon" for ad-hoc locations)
        lat: Latitude in degrees
        lon: Longitude in degrees
        id: Storage id, assigned on creation
    """

    name: str
    province: str
    lat: float
    lon: float
    id: Optional[str] = None

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "province": self.province,
            "lat": self.lat,
            "lon": self.lon,
        }


@dataclass(frozen=True)
class AirQuality:
    """
    Latest air-quality reading of a city.

    Attributes:
        aqi: EPA AQI computed from PM2.5
        main_pollutant: Display name of the dominant pollutant
        pollutants: Raw concentrations from the provider
        timestamp: Measurement time reported by the provider
        city_id: Owning city id
        id: Storage id
    """

    aqi: int
    main_pollutant: str
    pollutants: PollutantReading
    timestamp: datetime
    city_id: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def from_reading(cls, reading: PollutantReading, timestamp: datetime) -> "AirQuality":
        """
        Builds an air-quality record from raw concentrations.

        The AQI is the EPA value of the PM2.5 concentration, not the
        provider's own 1-5 index.

        Raises:
            InvalidInputError: If PM2.5 is invalid
            MissingPollutantError: If a ranked pollutant is missing
        """
        return cls(
            aqi=calculate_epa_aqi(reading.pm2_5),
            main_pollutant=select_main_pollutant(reading),
            pollutants=reading,
            timestamp=timestamp,
        )

    @property
    def level(self) -> AQILevel:
        return get_aqi_level(self.aqi)

    def to_dict(self) -> dict[str, object]:
        level = self.level
        return {
            "id": self.id,
            "cityId": self.city_id,
            "aqi": self.aqi,
            "level": level.label,
            "mainPollutant": self.main_pollutant,
            "pollutants": self.pollutants.to_dict(),
            "timestamp": _isoformat(self.timestamp),
        }


@dataclass(frozen=True)
class Weather:
    """
    Current weather of a city.

    Attributes:
        temperature: Rounded temperature in Celsius
        feels_like: Rounded apparent temperature in Celsius
        humidity: Relative humidity in percent
        pressure: Pressure in hPa
        wind_speed: Rounded wind speed in km/h
        wind_direction: Wind direction in degrees
        visibility: Visibility in meters
        description: Provider weather description
        icon: Provider weather icon code
        timestamp: Observation time
        place_name: Name the provider gives to the coordinates
        city_id: Owning city id
        id: Storage id
    """

    temperature: int
    feels_like: int
    humidity: float
    pressure: float
    wind_speed: int
    wind_direction: float
    visibility: float
    description: str
    icon: str
    timestamp: datetime
    place_name: Optional[str] = None
    city_id: Optional[str] = None
    id: Optional[str] = None

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "cityId": self.city_id,
            "temperature": self.temperature,
            "feelsLike": self.feels_like,
            "humidity": self.humidity,
            "pressure": self.pressure,
            "windSpeed": self.wind_speed,
            "windDirection": self.wind_direction,
            "visibility": self.visibility,
            "description": self.description,
            "icon": self.icon,
            "timestamp": _isoformat(self.timestamp),
        }


@dataclass(frozen=True)
class FavoriteLocation:
    """
    A city pinned by the user under a custom label.

    Attributes:
        city_id: Pinned city id
        custom_label: User label ("Home", "Work", ...)
        order: Sort position
        created_at: Creation time
        icon: Optional emoji
        is_current_location: True when pinned from geolocation
        id: Storage id
    """

    city_id: str
    custom_label: str
    order: int
    created_at: datetime
    icon: Optional[str] = None
    is_current_location: bool = False
    id: Optional[str] = None

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "cityId": self.city_id,
            "customLabel": self.custom_label,
            "icon": self.icon,
            "isCurrentLocation": self.is_current_location,
            "order": self.order,
            "createdAt": _isoformat(self.created_at),
        }
