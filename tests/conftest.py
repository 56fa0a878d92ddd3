import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from coating_quote.config.settings import Settings
from coating_quote.engine import PricingEngine


@pytest.fixture(scope="module")
def settings():
    """Settings built from an empty environment, so local env vars don't leak in."""
    return Settings.load(environ={})


@pytest.fixture(scope="module")
def engine(settings):
    """Create a single engine instance for all tests in a module."""
    return PricingEngine(settings)


@pytest.fixture
def valid_fields():
    """Raw record for the reference part: 1000 x 500 x 300 mm aluminium."""
    return {
        "length_mm": 1000,
        "width_mm": 500,
        "height_mm": 300,
        "material": "Aluminium",
        "prep_level": "Clean",
        "color": "9005",
        "turnaround_days": 7,
        "quantity": 1,
        "is_rush": False,
    }
