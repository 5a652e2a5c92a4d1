"""
AQI converter module for the Air Quality system.

Converts a PM2.5 concentration (ug/m3) to the U.S. EPA Air Quality Index
(0-500) by piecewise linear interpolation over the EPA breakpoint table.

Segment membership is decided on the inclusive upper bounds
(0.0-9.0, 9.0-35.4, 35.4-55.4, ...), so concentrations between two published
segments (e.g. 9.05) belong to the upper segment. Interpolation itself uses
the published EPA lower concentrations (9.1, 35.5, ...). Concentrations above
the top breakpoint are capped at 500 instead of being extrapolated.
"""

import math
from dataclasses import dataclass

from .aqi_level import AQILevel, get_aqi_level
from .exceptions import InvalidInputError
from .pollutant_reading import is_valid_concentration


@dataclass(frozen=True)
class Breakpoint:
    """
    One linear segment of the EPA PM2.5 to AQI mapping.

    Attributes:
        aqi_low: AQI at ``conc_low``
        aqi_high: AQI at ``conc_high``
        conc_low: Published lower concentration used by the interpolation
        conc_high: Inclusive upper concentration of the segment
    """

    aqi_low: int
    aqi_high: int
    conc_low: float
    conc_high: float

    def interpolate(self, concentration: float) -> float:
        """Applies the EPA linear formula without rounding."""
        return (
            (self.aqi_high - self.aqi_low) / (self.conc_high - self.conc_low)
            * (concentration - self.conc_low)
            + self.aqi_low
        )


# EPA PM2.5 breakpoints (2024 revision), ordered by concentration
PM25_BREAKPOINTS = (
    Breakpoint(aqi_low=0, aqi_high=50, conc_low=0.0, conc_high=9.0),
    Breakpoint(aqi_low=51, aqi_high=100, conc_low=9.1, conc_high=35.4),
    Breakpoint(aqi_low=101, aqi_high=150, conc_low=35.5, conc_high=55.4),
    Breakpoint(aqi_low=151, aqi_high=200, conc_low=55.5, conc_high=125.4),
    Breakpoint(aqi_low=201, aqi_high=300, conc_low=125.5, conc_high=225.4),
    Breakpoint(aqi_low=301, aqi_high=500, conc_low=225.5, conc_high=325.4),
)

AQI_MAX = 500
PM25_MAX = PM25_BREAKPOINTS[-1].conc_high


@dataclass(frozen=True)
class AQIResult:
    """
    An AQI value together with its EPA category.

    Attributes:
        aqi: Integer AQI in [0, 500]
        level: Category derived from ``aqi``
    """

    aqi: int
    level: AQILevel

    @property
    def label(self) -> str:
        return self.level.label


def round_half_up(value: float) -> int:
    """
    Rounds half away from zero.

    Python's built-in round() rounds half to even, which would turn 50.5 into
    50 instead of 51.
    """
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def find_breakpoint(pm25: float) -> Breakpoint:
    """
    Returns the segment whose inclusive upper bound first covers ``pm25``.

    Args:
        pm25: Concentration in [0, PM25_MAX]

    Raises:
        InvalidInputError: If no segment covers the concentration
    """
    for breakpoint in PM25_BREAKPOINTS:
        if pm25 <= breakpoint.conc_high:
            return breakpoint
    raise InvalidInputError(f"PM2.5 concentration {pm25} is outside the breakpoint table")


def calculate_epa_aqi(pm25: float) -> int:
    """
    Converts a PM2.5 concentration to an EPA AQI integer.

    Args:
        pm25: PM2.5 concentration in ug/m3, finite and >= 0

    Returns:
        AQI in [0, 500]; 500 for any concentration above 325.4

    Raises:
        InvalidInputError: If pm25 is negative, NaN, infinite or not a number
    """
    if not is_valid_concentration(pm25):
        raise InvalidInputError(f"PM2.5 must be a finite number >= 0, got {pm25!r}")

    # Hazardous ceiling: no extrapolation past the last segment
    if pm25 > PM25_MAX:
        return AQI_MAX

    breakpoint = find_breakpoint(pm25)
    aqi = round_half_up(breakpoint.interpolate(pm25))

    # Concentrations between two published segments interpolate slightly
    # below aqi_low; keep them inside the segment they belong to
    return min(max(aqi, breakpoint.aqi_low), breakpoint.aqi_high)


def calculate_aqi_result(pm25: float) -> AQIResult:
    """Converts a PM2.5 concentration to an AQI paired with its category."""
    aqi = calculate_epa_aqi(pm25)
    return AQIResult(aqi=aqi, level=get_aqi_level(aqi))
