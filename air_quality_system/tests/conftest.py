"""
Pytest configuration for Air Quality system tests.

Registers custom markers and provides shared fixtures.
"""

from datetime import datetime, timezone

import numpy as np
import pytest

from airquality.pollutant_reading import PollutantReading


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def components():
    """Fixture providing a provider 'components' object for Kathmandu-like air."""
    return {
        "co": 1.2,
        "no": 0.5,
        "no2": 18.4,
        "o3": 42.0,
        "so2": 6.1,
        "pm2_5": 48.3,
        "pm10": 71.9,
        "nh3": 3.3,
    }


@pytest.fixture
def reading(components):
    """Fixture providing a PollutantReading built from ``components``."""
    return PollutantReading(**components)


@pytest.fixture
def rng():
    """Fixture providing a seeded numpy random generator."""
    return np.random.default_rng(42)


@pytest.fixture
def fixed_now():
    """Fixture providing a fixed, timezone-aware 'now'."""
    return datetime(2025, 1, 15, 6, 0, tzinfo=timezone.utc)
