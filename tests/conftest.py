"""Pytest configuration and fixtures."""

import matplotlib
matplotlib.use("Agg")

import pytest

from trip_carbon.calculator import TripCalculator
from trip_carbon.config import build_config
from trip_carbon.models import CalculatorConfig
from trip_carbon.registry import CityRegistry


@pytest.fixture
def config():
    """Documented default configuration."""
    return CalculatorConfig()


@pytest.fixture
def calculator(config):
    return TripCalculator(config, CityRegistry.default())


@pytest.fixture
def tied_config():
    """Bus made zero-emission so it ties with the bicycle."""
    return build_config({"EMISSION_FACTOR_BUS": 0.0})
