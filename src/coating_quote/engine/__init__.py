"""Engine subpackage - quote models and price derivation."""
from .pricing_engine import PricingEngine, calculate, round_money, surface_area_m2
from .models import QuoteInput, QuoteOutput, PriceComponents, Material, PrepLevel

__all__ = [
    'PricingEngine', 'calculate', 'round_money', 'surface_area_m2',
    'QuoteInput', 'QuoteOutput', 'PriceComponents', 'Material', 'PrepLevel',
]
