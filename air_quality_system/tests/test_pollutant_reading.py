"""
Tests for PollutantReading component.

Tests cover:
- Equivalence classes: valid readings, invalid readings
- Boundary value analysis: zero concentrations
- Error scenarios: negative, NaN, infinite, missing and non-numeric values
- Conversions: from provider components, scaling, JSON dict
"""

import math

import pytest

from airquality.exceptions import InvalidInputError, MissingPollutantError
from airquality.pollutant_reading import POLLUTANT_FIELDS, PollutantReading, is_valid_concentration


class TestPollutantReadingValidation:
    """Test suite for PollutantReading validation."""

    # ==================== Equivalence Classes ====================

    def test_valid_reading(self, reading):
        """Equivalence class: all valid values → validation passes."""
        valid, reason = reading.validate()
        assert valid is True
        assert reason is None

    def test_invalid_negative_pm25(self, components):
        """Error scenario: negative PM2.5 → validation fails."""
        components["pm2_5"] = -1.0
        valid, reason = PollutantReading(**components).validate()
        assert valid is False
        assert "pm2_5" in reason

    def test_invalid_nan(self, components):
        components["o3"] = math.nan
        valid, reason = PollutantReading(**components).validate()
        assert valid is False
        assert "o3" in reason

    def test_invalid_infinite(self, components):
        components["co"] = math.inf
        valid, reason = PollutantReading(**components).validate()
        assert valid is False
        assert "co" in reason

    def test_invalid_string(self, components):
        components["nh3"] = "3.3"
        valid, reason = PollutantReading(**components).validate()
        assert valid is False
        assert "nh3" in reason

    # ==================== Boundary Value Analysis ====================

    def test_all_zero_is_valid(self):
        """Boundary: zero concentrations are valid."""
        reading = PollutantReading(**{name: 0.0 for name in POLLUTANT_FIELDS})
        assert reading.validate() == (True, None)

    def test_is_valid_concentration(self):
        assert is_valid_concentration(0)
        assert is_valid_concentration(12.5)
        assert not is_valid_concentration(-0.001)
        assert not is_valid_concentration(True)
        assert not is_valid_concentration(None)


class TestPollutantReadingConversions:
    """Test suite for building and converting readings."""

    def test_from_components(self, components):
        reading = PollutantReading.from_components(components)
        assert reading.pm2_5 == 48.3
        assert reading.nh3 == 3.3

    def test_from_components_ignores_extra_keys(self, components):
        components["pm1"] = 12.0
        assert PollutantReading.from_components(components).pm10 == 71.9

    def test_from_components_missing_field(self, components):
        del components["nh3"]
        with pytest.raises(MissingPollutantError) as excinfo:
            PollutantReading.from_components(components)
        assert excinfo.value.field == "nh3"

    def test_from_components_invalid_value(self, components):
        components["so2"] = -2
        with pytest.raises(InvalidInputError):
            PollutantReading.from_components(components)

    def test_scaled(self, reading):
        scaled = reading.scaled(1.1)
        assert scaled.pm2_5 == pytest.approx(48.3 * 1.1)
        assert scaled.co == pytest.approx(1.2 * 1.1)
        # Original is untouched
        assert reading.pm2_5 == 48.3

    def test_to_dict(self, reading, components):
        data = reading.to_dict()
        assert list(data) == list(POLLUTANT_FIELDS)
        assert data == components

    def test_reading_is_immutable(self, reading):
        with pytest.raises(AttributeError):
            reading.pm2_5 = 1.0
