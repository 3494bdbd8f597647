from .models import (
    City,
    EmissionFactorTable,
    CarbonCreditPolicy,
    CalculatorConfig,
    ModeComparisonEntry,
    SavingsResult,
    PriceEstimate,
    CreditEstimate,
    ImpactEquivalences,
    TripReport
)
from .constants import TransportMode, ModeInfo, TRANSPORT_MODE_INFO
from .errors import TripCarbonError, ConfigurationError, InvalidInputError
from .registry import CityRegistry, load_city_table
from .emissions import EmissionEngine
from .credits import CreditEngine
from .calculator import TripCalculator
from .config import build_config, load_calculator_config

__all__ = [
    "City",
    "ModeInfo",
    "EmissionFactorTable",
    "CarbonCreditPolicy",
    "CalculatorConfig",
    "ModeComparisonEntry",
    "SavingsResult",
    "PriceEstimate",
    "CreditEstimate",
    "ImpactEquivalences",
    "TripReport",
    "TransportMode",
    "TRANSPORT_MODE_INFO",
    "TripCarbonError",
    "ConfigurationError",
    "InvalidInputError",
    "CityRegistry",
    "load_city_table",
    "EmissionEngine",
    "CreditEngine",
    "TripCalculator",
    "build_config",
    "load_calculator_config",
]
