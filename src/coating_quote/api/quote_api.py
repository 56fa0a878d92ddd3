"""
Quote API - FastAPI router for validation and live pricing.
"""
import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel

from ..engine.models import (
    Material, PrepLevel, MATERIAL_INFO, PREP_LEVEL_INFO, DEFAULT_QUOTE_VALUES,
    DIMENSION_MIN_MM, DIMENSION_MAX_MM, TURNAROUND_MIN_DAYS, TURNAROUND_MAX_DAYS,
    QUANTITY_MIN, QUANTITY_MAX, COLOR_PATTERN,
)
from ..services.validation_service import validate, validate_fields
from .state import engine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/quote", tags=["quote"])


# Pydantic models for API.
# Field values stay loosely typed; the validation service owns the rules.
class ValidateRequest(BaseModel):
    """Request model for validating all or some quote fields."""
    fields: dict[str, Any] = {}
    only: Optional[list[str]] = None


class ValidateResponse(BaseModel):
    """Response model for validation."""
    valid: bool
    errors: dict[str, str]


class CalculateRequest(BaseModel):
    """Request model for pricing a quote."""
    fields: dict[str, Any]


class TraceStepResponse(BaseModel):
    step: str
    description: str
    value: Optional[str] = None


class QuoteResponse(BaseModel):
    """Response model for a priced quote."""
    base_price: float
    prep_surcharge: float
    rush_surcharge: float
    total_price: float
    currency: str
    trace: list[TraceStepResponse]


# Endpoints

@router.get("/options")
async def get_options():
    """Selectable materials and prep levels, defaults and accepted ranges."""
    return {
        "materials": [
            {"value": m.value, **MATERIAL_INFO[m]} for m in Material
        ],
        "prep_levels": [
            {"value": p.value, **PREP_LEVEL_INFO[p]} for p in PrepLevel
        ],
        "defaults": DEFAULT_QUOTE_VALUES,
        "bounds": {
            "dimension_mm": [DIMENSION_MIN_MM, DIMENSION_MAX_MM],
            "turnaround_days": [TURNAROUND_MIN_DAYS, TURNAROUND_MAX_DAYS],
            "quantity": [QUANTITY_MIN, QUANTITY_MAX],
            "color_pattern": COLOR_PATTERN,
        },
        "currency": engine.rates.currency,
    }


@router.post("/validate", response_model=ValidateResponse)
async def validate_quote(req: ValidateRequest):
    """Validate a quote record, or only the fields listed in `only`."""
    if req.only is not None:
        errors = validate_fields(req.fields, req.only)
        return ValidateResponse(valid=not errors, errors=errors)

    result = validate(req.fields)
    return ValidateResponse(valid=result.valid, errors=result.errors)


@router.post("/calculate", response_model=QuoteResponse)
async def calculate_quote(req: CalculateRequest):
    """Validate and price a quote."""
    result = validate(req.fields)
    if not result.valid:
        logger.warning("Rejected quote calculation: %s", result.errors)
        raise HTTPException(status_code=422, detail={"errors": result.errors})

    output = engine.calculate(result.quote_input)
    return jsonable_encoder(output)
