import logging
from typing import List, Union

from .constants import TransportMode
from .models import CalculatorConfig, ModeComparisonEntry
from .utils.calculations import require_non_negative, require_number, round_half_up

logger = logging.getLogger(__name__)

ModeKey = Union[TransportMode, str]


class EmissionEngine:
    """
    Distance and transport mode -> kg CO2, plus the ranking of every mode
    against the baseline (car) for a given distance.
    """

    def __init__(self, config: CalculatorConfig):
        self.config = config

    def emission_for(self, distance_km: float, mode: ModeKey) -> float:
        """
        CO2 (kg) for travelling distance_km with the given mode,
        rounded to config.decimals.
        """
        mode = TransportMode.parse(mode)
        distance_km = require_non_negative(distance_km, "Distance (km)")
        factor = self.config.emission_factors.factor(mode)
        product = require_number(distance_km * factor, "Emission (kg)")
        emission = round_half_up(product, self.config.decimals)
        logger.debug(f"{distance_km} km x {factor} kgCO2/km ({mode.value}) = {emission} kg")
        return emission

    def compare_all_modes(self, distance_km: float) -> List[ModeComparisonEntry]:
        """
        Emission of every configured mode for the same distance, with its share of
        the baseline emission. Sorted lowest emission first; ties keep enum order.

        When the baseline emission is zero (distance 0 or zero baseline factor)
        the percentage cannot be computed: entries carry 0.0 with
        percentage_defined=False.
        """
        decimals = self.config.decimals
        baseline = self.emission_for(distance_km, self.config.baseline_mode)

        entries = []
        for mode in self.config.emission_factors.modes:
            emission = self.emission_for(distance_km, mode)
            if baseline == 0:
                entries.append(ModeComparisonEntry(mode, emission, 0.0, percentage_defined=False))
            else:
                pct = round_half_up(
                    require_number(emission / baseline * 100, f"Share of {mode.value} emission"), decimals
                )
                entries.append(ModeComparisonEntry(mode, emission, pct))

        # sorted() is stable, so equal emissions stay in declaration order
        return sorted(entries, key=lambda e: e.emission)
