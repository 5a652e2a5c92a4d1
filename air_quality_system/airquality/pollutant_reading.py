"""
Pollutant reading module for the Air Quality system.

This module defines the PollutantReading dataclass which represents one set of
pollutant concentrations as reported by the air-pollution provider: carbon
monoxide, nitric oxide, nitrogen dioxide, ozone, sulfur dioxide, fine and
coarse particulate matter, and ammonia. It provides validation to ensure data
integrity before the readings are converted to an AQI.
"""

import math
import numbers
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from .exceptions import InvalidInputError, MissingPollutantError


# Field order used for the JSON "pollutants" object
POLLUTANT_FIELDS = ("co", "no", "no2", "o3", "so2", "pm2_5", "pm10", "nh3")


def is_valid_concentration(value: Any) -> bool:
    """
    Checks that a value is a finite, non-negative real number.

    Booleans are rejected even though they are ints in Python.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value) and value >= 0


@dataclass(frozen=True)
class PollutantReading:
    """
    Represents pollutant concentrations at one point in time.

    Units follow the upstream provider: carbon monoxide on the mg/m3 scale as
    provided, every other pollutant in ug/m3.

    Attributes:
        co: Carbon monoxide
        no: Nitric oxide
        no2: Nitrogen dioxide
        o3: Ozone
        so2: Sulfur dioxide
        pm2_5: Fine particulate matter (PM2.5)
        pm10: Coarse particulate matter (PM10)
        nh3: Ammonia
    """

    co: float
    no: float
    no2: float
    o3: float
    so2: float
    pm2_5: float
    pm10: float
    nh3: float

    @classmethod
    def from_components(cls, components: Mapping[str, Any]) -> "PollutantReading":
        """
        Builds a reading from the provider's ``components`` object.

        Args:
            components: Mapping with keys co, no, no2, o3, so2, pm2_5, pm10, nh3

        Returns:
            A validated PollutantReading

        Raises:
            MissingPollutantError: If a field is absent or None
            InvalidInputError: If a field is negative, NaN or non-finite
        """
        values = {}
        for name in POLLUTANT_FIELDS:
            value = components.get(name)
            if value is None:
                raise MissingPollutantError(name)
            values[name] = value

        reading = cls(**values)
        valid, reason = reading.validate()
        if not valid:
            raise InvalidInputError(reason)
        return reading

    def validate(self) -> tuple[bool, Optional[str]]:
        """
        Validates every concentration.

        Returns:
            A tuple containing:
            - bool: True if all concentrations are finite and >= 0
            - Optional[str]: None if valid, or a message naming the first bad field
        """
        for field in fields(self):
            value = getattr(self, field.name)
            if not is_valid_concentration(value):
                return (False, f"{field.name} must be a finite number >= 0, got {value!r}")
        return (True, None)

    def scaled(self, factor: float) -> "PollutantReading":
        """Returns a new reading with every concentration multiplied by ``factor``."""
        return PollutantReading(
            **{name: getattr(self, name) * factor for name in POLLUTANT_FIELDS}
        )

    def to_dict(self) -> dict[str, float]:
        """Converts the reading to the JSON ``pollutants`` object."""
        return {name: getattr(self, name) for name in POLLUTANT_FIELDS}
