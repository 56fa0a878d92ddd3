"""
Pricing Engine - derives a price breakdown from a validated quote input.

Resolution order:
1. Surface area of the part, treated as a closed box (m²)
2. Base price from area, quantity and material multiplier
3. Prep surcharge from area, quantity and prep level
4. Rush surcharge on the base price for short-turnaround rush orders
5. Total, then independent rounding of every monetary field
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from ..config.settings import get_settings, Settings, PricingRates
from .models import QuoteInput, QuoteOutput, PriceComponents, TraceStep

logger = logging.getLogger(__name__)

MM2_PER_M2 = 1_000_000.0
_CENT = Decimal('0.01')


def round_money(amount: float) -> float:
    """Round to 2 decimals, halves away from zero."""
    # repr() gives the shortest decimal that maps back to the same float
    return float(Decimal(repr(amount)).quantize(_CENT, rounding=ROUND_HALF_UP))


def surface_area_m2(quote_input: QuoteInput) -> float:
    """Total outer area of the part as a rectangular box, in m²."""
    length, width, height = quote_input.length_mm, quote_input.width_mm, quote_input.height_mm
    return 2.0 * (length * width + length * height + width * height) / MM2_PER_M2


class PricingEngine:
    """
    Core pricing engine.

    Holds only an immutable rate card, so one instance can serve any number
    of callers.
    """

    def __init__(self, settings: Optional[Settings] = None, rates: Optional[PricingRates] = None):
        self.settings = settings or get_settings()
        self.rates = rates or self.settings.rates

    def components(self, quote_input: QuoteInput) -> PriceComponents:
        """Compute the unrounded price components."""
        rates = self.rates
        area = surface_area_m2(quote_input)

        base_price = area * rates.base_rate_per_m2 * quote_input.quantity
        base_price *= rates.material_multipliers[quote_input.material.value]

        prep_surcharge = area * rates.prep_rates_per_m2[quote_input.prep_level.value] * quote_input.quantity

        # Rush is charged on the base price only, prep surcharge excluded
        if self.is_rush_applicable(quote_input):
            rush_surcharge = base_price * rates.rush_multiplier
        else:
            rush_surcharge = 0.0

        return PriceComponents(
            surface_area_m2=area,
            base_price=base_price,
            prep_surcharge=prep_surcharge,
            rush_surcharge=rush_surcharge,
            total_price=base_price + prep_surcharge + rush_surcharge,
        )

    def is_rush_applicable(self, quote_input: QuoteInput) -> bool:
        return quote_input.is_rush and quote_input.turnaround_days < self.rates.rush_threshold_days

    def calculate(self, quote_input: QuoteInput) -> QuoteOutput:
        """
        Calculate the quote with full traceability.

        Args:
            quote_input: Validated QuoteInput

        Returns:
            QuoteOutput with rounded amounts and derivation trace
        """
        raw = self.components(quote_input)
        rates = self.rates

        base_price = round_money(raw.base_price)
        prep_surcharge = round_money(raw.prep_surcharge)
        rush_surcharge = round_money(raw.rush_surcharge)
        # Rounded from the unrounded sum, not from the rounded parts
        total_price = round_money(raw.total_price)

        multiplier = rates.material_multipliers[quote_input.material.value]
        trace = [
            TraceStep(
                "Surface Area",
                f"2 × (L×W + L×H + W×H) for {quote_input.length_mm:g} × "
                f"{quote_input.width_mm:g} × {quote_input.height_mm:g} mm",
                f"{raw.surface_area_m2:.4f} m²",
            ),
            TraceStep(
                "Base Price",
                f"{rates.base_rate_per_m2:g}/m² × qty {quote_input.quantity} × "
                f"{quote_input.material.value} {multiplier:g}",
                f"{base_price:.2f}",
            ),
        ]
        if prep_surcharge:
            trace.append(TraceStep(
                "Prep Surcharge",
                f"{quote_input.prep_level.value} "
                f"{rates.prep_rates_per_m2[quote_input.prep_level.value]:g}/m² × qty {quote_input.quantity}",
                f"{prep_surcharge:.2f}",
            ))
        else:
            trace.append(TraceStep("Prep Surcharge", f"No surcharge for {quote_input.prep_level.value}"))

        if self.is_rush_applicable(quote_input):
            trace.append(TraceStep(
                "Rush Surcharge",
                f"Rush with {quote_input.turnaround_days} day turnaround, "
                f"{rates.rush_multiplier:g} × base",
                f"{rush_surcharge:.2f}",
            ))
        elif quote_input.is_rush:
            trace.append(TraceStep(
                "Rush Surcharge",
                f"Rush requested but turnaround {quote_input.turnaround_days} days "
                f"is not under {rates.rush_threshold_days}",
            ))
        else:
            trace.append(TraceStep("Rush Surcharge", "Standard turnaround"))

        trace.append(TraceStep("Total", "Base + prep + rush", f"{total_price:.2f} {rates.currency}"))

        logger.debug(
            "Quote %s/%s qty=%d area=%.4f total=%.2f",
            quote_input.material.value, quote_input.prep_level.value,
            quote_input.quantity, raw.surface_area_m2, total_price,
        )

        return QuoteOutput(
            base_price=base_price,
            prep_surcharge=prep_surcharge,
            rush_surcharge=rush_surcharge,
            total_price=total_price,
            currency=rates.currency,
            trace=tuple(trace),
        )


def calculate(quote_input: QuoteInput, settings: Optional[Settings] = None) -> QuoteOutput:
    """Price a validated quote with the configured rate card."""
    return PricingEngine(settings).calculate(quote_input)
