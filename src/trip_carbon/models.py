from dataclasses import dataclass, field
from math import isfinite
from numbers import Real
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from .constants import (
    TransportMode, DEFAULT_EMISSION_FACTORS, KG_PER_CREDIT, PRICE_MIN, PRICE_MAX,
    CURRENCY, BASELINE_MODE, DECIMALS, MAX_DECIMALS
)
from .errors import ConfigurationError


def _config_number(value, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, Real) or not isfinite(value):
        raise ConfigurationError(f"{name} must be a finite number, got {value!r}")
    return float(value)


# ============================================================================
# STATIC CONFIGURATION
# ============================================================================

@dataclass(frozen=True)
class City:
    name: str
    lat: float
    lon: float

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ConfigurationError(f"City name must be a non-empty string, got {self.name!r}")
        lat = _config_number(self.lat, f"Latitude of {self.name}")
        lon = _config_number(self.lon, f"Longitude of {self.name}")
        if not -90.0 <= lat <= 90.0:
            raise ConfigurationError(f"Latitude of {self.name} out of range [-90, 90]: {lat}")
        if not -180.0 <= lon <= 180.0:
            raise ConfigurationError(f"Longitude of {self.name} out of range [-180, 180]: {lon}")
        object.__setattr__(self, "lat", lat)
        object.__setattr__(self, "lon", lon)


@dataclass(frozen=True)
class EmissionFactorTable:
    """
    kg CO2 per km for every TransportMode.
    Every member of the enumeration must be present and non-negative.
    """
    factors: Mapping[TransportMode, float] = field(
        default_factory=lambda: dict(DEFAULT_EMISSION_FACTORS)
    )

    def __post_init__(self):
        checked: Dict[TransportMode, float] = {}
        for key, value in self.factors.items():
            try:
                mode = TransportMode.parse(key)
            except ValueError:
                raise ConfigurationError(f"Emission factor given for unknown transport mode {key!r}")
            factor = _config_number(value, f"Emission factor for {mode.value}")
            if factor < 0:
                raise ConfigurationError(f"Emission factor for {mode.value} must be >= 0, got {factor}")
            checked[mode] = factor

        missing = [m.value for m in TransportMode if m not in checked]
        if missing:
            raise ConfigurationError(f"No emission factor configured for: {', '.join(missing)}")

        # Enum declaration order, read-only
        ordered = {m: checked[m] for m in TransportMode}
        object.__setattr__(self, "factors", MappingProxyType(ordered))

    def factor(self, mode: TransportMode) -> float:
        return self.factors[mode]

    @property
    def modes(self) -> List[TransportMode]:
        return list(self.factors)


@dataclass(frozen=True)
class CarbonCreditPolicy:
    kg_per_credit: float = KG_PER_CREDIT
    price_min: float = PRICE_MIN
    price_max: float = PRICE_MAX
    currency: str = CURRENCY

    def __post_init__(self):
        kg = _config_number(self.kg_per_credit, "KG_PER_CREDIT")
        lo = _config_number(self.price_min, "PRICE_MIN")
        hi = _config_number(self.price_max, "PRICE_MAX")
        if kg <= 0:
            raise ConfigurationError(f"KG_PER_CREDIT must be > 0, got {kg}")
        if lo < 0 or hi < 0:
            raise ConfigurationError(f"Credit prices must be >= 0, got {lo}..{hi}")
        if lo > hi:
            raise ConfigurationError(f"PRICE_MIN ({lo}) is greater than PRICE_MAX ({hi})")
        object.__setattr__(self, "kg_per_credit", kg)
        object.__setattr__(self, "price_min", lo)
        object.__setattr__(self, "price_max", hi)


@dataclass(frozen=True)
class CalculatorConfig:
    """
    Everything the engines need, injected at construction:
    - emission_factors: per-mode kg CO2/km
    - credit_policy: kg per credit and price range
    - baseline_mode: reference mode for percentages and savings (car)
    - decimals: rounding applied to every returned quantity
    """
    emission_factors: EmissionFactorTable = field(default_factory=EmissionFactorTable)
    credit_policy: CarbonCreditPolicy = field(default_factory=CarbonCreditPolicy)
    baseline_mode: TransportMode = BASELINE_MODE
    decimals: int = DECIMALS

    def __post_init__(self):
        try:
            baseline = TransportMode.parse(self.baseline_mode)
        except ValueError:
            raise ConfigurationError(f"Unknown BASELINE_MODE {self.baseline_mode!r}")
        object.__setattr__(self, "baseline_mode", baseline)
        if isinstance(self.decimals, bool) or not isinstance(self.decimals, int) \
                or not 0 <= self.decimals <= MAX_DECIMALS:
            raise ConfigurationError(
                f"DECIMALS must be an integer between 0 and {MAX_DECIMALS}, got {self.decimals!r}"
            )


# ============================================================================
# RESULTS
# ============================================================================

@dataclass(frozen=True)
class ModeComparisonEntry:
    """
    One row of the mode ranking. percentage_defined is False when the
    baseline emission is zero; percentage_vs_car is then reported as 0.0.
    """
    mode: TransportMode
    emission: float
    percentage_vs_car: float
    percentage_defined: bool = True


@dataclass(frozen=True)
class SavingsResult:
    saved_kg: float
    percentage: float
    percentage_defined: bool = True


@dataclass(frozen=True)
class PriceEstimate:
    min: float
    max: float
    average: float


@dataclass(frozen=True)
class CreditEstimate:
    credits: float
    price_min: float
    price_max: float
    price_average: float


@dataclass(frozen=True)
class ImpactEquivalences:
    trees_per_year: float
    electricity_mwh: float
    car_km: float


@dataclass(frozen=True)
class TripReport:
    """
    Complete analysis of one trip, as shown by the results screen.
    savings is None when the selected mode is the baseline itself.
    """
    origin: str
    destination: str
    distance_km: float
    mode: TransportMode
    emission_kg: float
    baseline_mode: TransportMode
    baseline_emission_kg: float
    savings: Optional[SavingsResult]
    comparison: List[ModeComparisonEntry]
    credits: CreditEstimate
    equivalences: ImpactEquivalences
    distance_from_registry: bool
