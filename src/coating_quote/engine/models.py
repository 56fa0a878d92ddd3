"""
Data models for the quoting engine.

Uses frozen dataclasses for value objects and str-backed enums for the
closed sets of materials and prep levels.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


# Accepted input ranges (inclusive)
DIMENSION_MIN_MM = 10
DIMENSION_MAX_MM = 5000
TURNAROUND_MIN_DAYS = 1
TURNAROUND_MAX_DAYS = 30
QUANTITY_MIN = 1
QUANTITY_MAX = 1000
COLOR_PATTERN = r'^\d{4}$'


class Material(str, Enum):
    ALUMINIUM = "Aluminium"
    STEEL = "Steel"
    STAINLESS = "Stainless"

    def __str__(self):
        return self.value


class PrepLevel(str, Enum):
    CLEAN = "Clean"              # Basic cleaning
    BLAST_CLEAN = "BlastClean"   # Blast + clean
    BLAST_PRIME = "BlastPrime"   # Blast + prime + clean

    def __str__(self):
        return self.value


MATERIAL_INFO = {
    Material.ALUMINIUM: {"label": "Aluminium", "description": "Lightweight, corrosion-resistant"},
    Material.STEEL: {"label": "Steel", "description": "Strong, cost-effective"},
    Material.STAINLESS: {"label": "Stainless Steel", "description": "Premium, highly durable"},
}

PREP_LEVEL_INFO = {
    PrepLevel.CLEAN: {"label": "Basic Clean", "description": "Standard cleaning only"},
    PrepLevel.BLAST_CLEAN: {"label": "Blast + Clean", "description": "Media blasting for better adhesion"},
    PrepLevel.BLAST_PRIME: {"label": "Blast + Prime", "description": "Full prep with primer coat"},
}

# Starting values for a new quote form
DEFAULT_QUOTE_VALUES = {
    "length_mm": 1000,
    "width_mm": 500,
    "height_mm": 300,
    "material": Material.ALUMINIUM.value,
    "prep_level": PrepLevel.CLEAN.value,
    "color": "9005",
    "turnaround_days": 7,
    "quantity": 1,
    "is_rush": False,
}


@dataclass(frozen=True)
class TraceStep:
    """A single step in the price derivation trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass(frozen=True)
class QuoteInput:
    """A validated quote request. Only the validator should construct these."""
    length_mm: float
    width_mm: float
    height_mm: float
    material: Material
    prep_level: PrepLevel
    color: str  # RAL code, e.g. "9005"
    turnaround_days: int
    quantity: int
    is_rush: bool

    def to_dict(self) -> dict:
        """Plain-value dict, suitable for JSON or re-validation."""
        return {
            "length_mm": self.length_mm,
            "width_mm": self.width_mm,
            "height_mm": self.height_mm,
            "material": self.material.value,
            "prep_level": self.prep_level.value,
            "color": self.color,
            "turnaround_days": self.turnaround_days,
            "quantity": self.quantity,
            "is_rush": self.is_rush,
        }


@dataclass(frozen=True)
class PriceComponents:
    """Unrounded values of a single calculation."""
    surface_area_m2: float
    base_price: float
    prep_surcharge: float
    rush_surcharge: float
    total_price: float


@dataclass(frozen=True)
class QuoteOutput:
    """Complete, rounded price breakdown for one quote."""
    base_price: float
    prep_surcharge: float
    rush_surcharge: float
    total_price: float
    currency: str
    trace: tuple[TraceStep, ...] = field(default=(), compare=False)

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Breakdown without the trace."""
        return {
            "base_price": self.base_price,
            "prep_surcharge": self.prep_surcharge,
            "rush_surcharge": self.rush_surcharge,
            "total_price": self.total_price,
            "currency": self.currency,
        }
