import logging
from typing import List, Optional

from .constants import TransportMode
from .credits import CreditEngine
from .emissions import EmissionEngine, ModeKey
from .errors import InvalidInputError
from .models import (
    CalculatorConfig, ModeComparisonEntry, PriceEstimate, SavingsResult, TripReport
)
from .registry import CityRegistry
from .utils.calculations import require_number

logger = logging.getLogger(__name__)


class TripCalculator:
    """
    Single entry point for callers (CLI, web handlers, notebooks).
    Stateless apart from the immutable config and registry, so one instance
    can be shared between threads.
    """

    def __init__(self, config: Optional[CalculatorConfig] = None, registry: Optional[CityRegistry] = None):
        self.config = config if config is not None else CalculatorConfig()
        self.registry = registry if registry is not None else CityRegistry.default(self.config.decimals)
        self.emissions = EmissionEngine(self.config)
        self.credits = CreditEngine(self.config)

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def list_cities(self) -> List[str]:
        return self.registry.list_cities()

    def find_distance(self, origin: str, destination: str) -> Optional[float]:
        return self.registry.distance_between(origin, destination)

    # ------------------------------------------------------------------
    # Emissions / credits
    # ------------------------------------------------------------------

    def compute_emission(self, distance_km: float, mode: ModeKey) -> float:
        return self.emissions.emission_for(distance_km, mode)

    def compare_modes(self, distance_km: float) -> List[ModeComparisonEntry]:
        return self.emissions.compare_all_modes(distance_km)

    def compute_credits(self, emission_kg: float) -> float:
        return self.credits.credits_for(emission_kg)

    def estimate_price(self, credits: float) -> PriceEstimate:
        return self.credits.estimate_price(credits)

    def compute_savings(self, emission: float, baseline: float) -> SavingsResult:
        return self.credits.savings_vs_baseline(emission, baseline)

    # ------------------------------------------------------------------
    # Full trip
    # ------------------------------------------------------------------

    def analyze_trip(
        self,
        origin: str,
        destination: str,
        mode: ModeKey,
        distance_km: Optional[float] = None,
    ) -> TripReport:
        """
        Everything the results screen shows for one trip.

        If distance_km is omitted it is looked up in the registry; an unknown
        route then raises InvalidInputError asking for a manual distance.
        Savings are only reported when the chosen mode is not the baseline.
        """
        origin = (origin or "").strip()
        destination = (destination or "").strip()
        if not origin or not destination:
            raise InvalidInputError("Origin and destination must not be empty")
        mode = TransportMode.parse(mode)

        from_registry = distance_km is None
        if from_registry:
            distance_km = self.find_distance(origin, destination)
            if distance_km is None:
                raise InvalidInputError(
                    f"Route {origin} -> {destination} not found. Enter the distance manually."
                )
        distance_km = require_number(distance_km, "Distance (km)")
        if distance_km <= 0:
            raise InvalidInputError(f"Distance must be greater than 0, got {distance_km}")

        emission = self.compute_emission(distance_km, mode)
        baseline_mode = self.config.baseline_mode
        baseline = self.compute_emission(distance_km, baseline_mode)
        savings = None
        if mode != baseline_mode:
            savings = self.compute_savings(emission, baseline)

        report = TripReport(
            origin=origin,
            destination=destination,
            distance_km=distance_km,
            mode=mode,
            emission_kg=emission,
            baseline_mode=baseline_mode,
            baseline_emission_kg=baseline,
            savings=savings,
            comparison=self.compare_modes(distance_km),
            credits=self.credits.estimate(emission),
            equivalences=self.credits.impact_equivalences(emission),
            distance_from_registry=from_registry,
        )
        logger.debug(f"Trip {origin} -> {destination}: {distance_km} km by {mode.value}, {emission} kg CO2")
        return report
