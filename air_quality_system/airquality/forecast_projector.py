"""
Forecast projector module for the Air Quality system.

The provider's forecast endpoint only returns weather, so hourly air-quality
values are synthesised from the current reading: every forecast slot gets the
current pollutants scaled by an independent factor drawn uniformly from
[0.8, 1.2], and its AQI is recomputed from the scaled PM2.5. This is a display
approximation, not a predictive model.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

import numpy as np

from .aqi_converter import calculate_epa_aqi, round_half_up
from .pollutant_reading import PollutantReading


@dataclass(frozen=True)
class ForecastSlot:
    """
    One future timestamp from the provider's weather forecast.

    Attributes:
        time: Start of the forecast slot (timezone-aware)
        temperature: Air temperature in Celsius
        icon: Provider weather icon code (e.g. "10d")
    """

    time: datetime
    temperature: float
    icon: str


@dataclass(frozen=True)
class HourlyForecast:
    """
    A projected air-quality value for one forecast slot.

    Attributes:
        time: Start of the forecast slot
        aqi: AQI of the scaled PM2.5 concentration
        temperature: Rounded temperature in Celsius
        icon: Provider weather icon code
        pollutants: Current reading scaled by ``factor``
        factor: Multiplier applied to the current reading
    """

    time: datetime
    aqi: int
    temperature: int
    icon: str
    pollutants: PollutantReading
    factor: float

    def to_dict(self) -> dict[str, object]:
        return {
            "time": self.time.isoformat(),
            "aqi": self.aqi,
            "temperature": self.temperature,
            "icon": self.icon,
            "pollutants": self.pollutants.to_dict(),
        }


class ForecastProjector:
    """
    Synthesises hourly forecasts from a single current reading.

    The random source is injectable so that tests can pass a seeded
    ``numpy.random.Generator``; by default an unseeded generator is used and
    output is not reproducible.
    """

    MIN_FACTOR = 0.8
    MAX_FACTOR = 1.2

    def __init__(self, rng: Optional[np.random.Generator] = None) -> None:
        self._rng = rng if rng is not None else np.random.default_rng()

    def draw_factor(self) -> float:
        """Draws one multiplier from Uniform[MIN_FACTOR, MAX_FACTOR]."""
        return float(self._rng.uniform(self.MIN_FACTOR, self.MAX_FACTOR))

    def project(
        self,
        reading: PollutantReading,
        slots: Iterable[ForecastSlot]
    ) -> list[HourlyForecast]:
        """
        Projects the current reading onto each forecast slot.

        Args:
            reading: Current pollutant concentrations
            slots: Future timestamps with temperature and icon

        Returns:
            One HourlyForecast per slot, in input order

        Raises:
            InvalidInputError: If the reading has an invalid PM2.5 value
        """
        forecasts = []
        for slot in slots:
            # Independent draw per slot
            factor = self.draw_factor()
            scaled = reading.scaled(factor)
            forecasts.append(
                HourlyForecast(
                    time=slot.time,
                    aqi=calculate_epa_aqi(scaled.pm2_5),
                    temperature=round_half_up(slot.temperature),
                    icon=slot.icon,
                    pollutants=scaled,
                    factor=factor,
                )
            )
        return forecasts
