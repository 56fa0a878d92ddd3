"""
Centralized settings and rate card for the quoting service.
"""
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Optional


def _default_material_multipliers() -> dict[str, float]:
    return {
        'Aluminium': 1.0,
        'Steel': 0.9,
        'Stainless': 1.2,
    }


def _default_prep_rates() -> dict[str, float]:
    # Per m² of coated surface, per part
    return {
        'Clean': 0.0,
        'BlastClean': 15.0,
        'BlastPrime': 25.0,
    }


@dataclass(frozen=True)
class PricingRates:
    """Rate card used by the pricing engine. Rate tables are read-only views."""
    base_rate_per_m2: float = 25.0
    material_multipliers: Mapping[str, float] = field(default_factory=_default_material_multipliers, hash=False)
    prep_rates_per_m2: Mapping[str, float] = field(default_factory=_default_prep_rates, hash=False)
    rush_multiplier: float = 0.5
    rush_threshold_days: int = 5  # rush applies strictly below this
    currency: str = 'EUR'

    def __post_init__(self):
        # Copy before wrapping so the caller's dict can't change the card later
        object.__setattr__(self, 'material_multipliers', MappingProxyType(dict(self.material_multipliers)))
        object.__setattr__(self, 'prep_rates_per_m2', MappingProxyType(dict(self.prep_rates_per_m2)))


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    rates: PricingRates

    # Checkout redirect base (success / cancel pages)
    frontend_url: str = 'http://localhost:5173'

    # API
    log_level: str = 'INFO'
    cors_origins: tuple = ('*',)

    @classmethod
    def load(cls, environ: Optional[dict] = None) -> 'Settings':
        """Load settings from environment variables."""
        env = os.environ if environ is None else environ

        currency = env.get('COATING_QUOTE_CURRENCY', 'EUR').strip().upper() or 'EUR'
        origins = env.get('COATING_QUOTE_CORS_ORIGINS', '*')

        return cls(
            rates=PricingRates(currency=currency),
            frontend_url=env.get('FRONTEND_URL', 'http://localhost:5173').rstrip('/'),
            log_level=env.get('COATING_QUOTE_LOG_LEVEL', 'INFO').upper(),
            cors_origins=tuple(o.strip() for o in origins.split(',') if o.strip()),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
