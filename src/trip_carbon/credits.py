import logging

from .constants import KG_CO2_PER_TREE_YEAR, MWH_PER_KG_CO2, KG_CO2_PER_CAR_KM
from .models import (
    CalculatorConfig, CreditEstimate, ImpactEquivalences, PriceEstimate, SavingsResult
)
from .utils.calculations import require_non_negative, require_number, round_half_up

logger = logging.getLogger(__name__)


class CreditEngine:
    """
    Converts emitted CO2 into carbon credits and a purchase price range,
    and measures savings against a baseline emission.
    """

    def __init__(self, config: CalculatorConfig):
        self.config = config

    @property
    def policy(self):
        return self.config.credit_policy

    def credits_for(self, emission_kg: float) -> float:
        """Number of credits needed to offset emission_kg."""
        emission_kg = require_non_negative(emission_kg, "Emission (kg)")
        credits = require_number(emission_kg / self.policy.kg_per_credit, "Credits")
        return round_half_up(credits, self.config.decimals)

    def estimate_price(self, credits: float) -> PriceEstimate:
        """
        Price range for a number of credits. The average is taken from the
        unrounded bounds; each value is rounded on its own.
        """
        credits = require_non_negative(credits, "Credits")
        decimals = self.config.decimals
        lo = require_number(credits * self.policy.price_min, "Minimum price")
        hi = require_number(credits * self.policy.price_max, "Maximum price")
        avg = lo / 2 + hi / 2
        return PriceEstimate(
            min=round_half_up(lo, decimals),
            max=round_half_up(hi, decimals),
            average=round_half_up(avg, decimals),
        )

    def estimate(self, emission_kg: float) -> CreditEstimate:
        credits = self.credits_for(emission_kg)
        price = self.estimate_price(credits)
        logger.debug(
            f"{emission_kg} kg -> {credits} credits, "
            f"{price.min}..{price.max} {self.policy.currency}"
        )
        return CreditEstimate(
            credits=credits,
            price_min=price.min,
            price_max=price.max,
            price_average=price.average,
        )

    def savings_vs_baseline(self, emission: float, baseline: float) -> SavingsResult:
        """
        CO2 avoided relative to the baseline emission.
        A negative saved_kg means the chosen mode emits more than the baseline.
        With a zero baseline the percentage is reported as 0.0 and flagged undefined.

        saved_kg is rounded to config.decimals like every other quantity, so a
        difference smaller than half a unit in the last place comes out as 0.0
        (11.999 against 12 saves 0.0 kg) even though emission < baseline.
        """
        emission = require_non_negative(emission, "Emission (kg)")
        baseline = require_non_negative(baseline, "Baseline emission (kg)")
        decimals = self.config.decimals

        saved = baseline - emission
        if baseline == 0:
            return SavingsResult(round_half_up(saved, decimals), 0.0, percentage_defined=False)
        pct = require_number(saved / baseline * 100, "Savings (%)")
        return SavingsResult(
            saved_kg=round_half_up(saved, decimals),
            percentage=round_half_up(pct, decimals),
        )

    def impact_equivalences(self, emission_kg: float) -> ImpactEquivalences:
        """Everyday equivalents of an emission: trees, electricity, car km."""
        emission_kg = require_non_negative(emission_kg, "Emission (kg)")
        return ImpactEquivalences(
            trees_per_year=round_half_up(emission_kg / KG_CO2_PER_TREE_YEAR, 1),
            electricity_mwh=round_half_up(emission_kg * MWH_PER_KG_CO2, 2),
            car_km=round_half_up(require_number(emission_kg / KG_CO2_PER_CAR_KM, "Car km"), 0),
        )
