"""
Main pollutant module for the Air Quality system.

Selects the pollutant most responsible for the current air-quality concern by
normalising each candidate concentration against a fixed reference threshold
and picking the largest ratio. Ammonia and nitric oxide are not ranked.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Union

from .exceptions import InvalidInputError, MissingPollutantError
from .pollutant_reading import PollutantReading, is_valid_concentration


@dataclass(frozen=True)
class PollutantThreshold:
    """
    Normalisation constant for one candidate pollutant.

    Attributes:
        name: Display name returned by the selector
        field: Key in the reading / provider components
        threshold: Reference concentration the value is divided by
    """

    name: str
    field: str
    threshold: float


# Scan order matters: ties resolve to the earliest entry
POLLUTANT_THRESHOLDS = (
    PollutantThreshold(name="PM2.5", field="pm2_5", threshold=35),
    PollutantThreshold(name="PM10", field="pm10", threshold=150),
    PollutantThreshold(name="O3", field="o3", threshold=120),
    PollutantThreshold(name="NO2", field="no2", threshold=100),
    PollutantThreshold(name="SO2", field="so2", threshold=80),
    PollutantThreshold(name="CO", field="co", threshold=10),
)


def _get_concentration(reading: Union[PollutantReading, Mapping[str, Any]], field: str) -> float:
    if isinstance(reading, PollutantReading):
        value = getattr(reading, field)
    else:
        value = reading.get(field)

    if value is None:
        raise MissingPollutantError(field)
    if not is_valid_concentration(value):
        raise InvalidInputError(f"{field} must be a finite number >= 0, got {value!r}")
    return value


def pollutant_ratios(reading: Union[PollutantReading, Mapping[str, Any]]) -> dict[str, float]:
    """
    Computes the normalised ratio of every candidate pollutant.

    Args:
        reading: A PollutantReading or the provider ``components`` mapping

    Returns:
        Mapping of display name to concentration / threshold, in scan order

    Raises:
        MissingPollutantError: If a candidate field is absent or None
        InvalidInputError: If a candidate value is negative or non-finite
    """
    return {
        candidate.name: _get_concentration(reading, candidate.field) / candidate.threshold
        for candidate in POLLUTANT_THRESHOLDS
    }


def select_main_pollutant(reading: Union[PollutantReading, Mapping[str, Any]]) -> str:
    """
    Returns the display name of the pollutant with the highest ratio.

    A later candidate only replaces the current maximum when its ratio is
    strictly greater, so ties go to the first candidate in scan order
    (PM2.5 first).
    """
    best_name = None
    best_ratio = None
    for name, ratio in pollutant_ratios(reading).items():
        if best_ratio is None or ratio > best_ratio:
            best_name = name
            best_ratio = ratio
    return best_name
