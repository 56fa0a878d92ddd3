"""
Checkout API - prepares payment-session requests for priced quotes.
"""
import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel

from ..services.checkout_service import build_checkout_request, CheckoutError
from ..services.validation_service import validate
from .state import engine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/checkout", tags=["checkout"])


class CheckoutPrepareRequest(BaseModel):
    """Request model for preparing a checkout session."""
    quote_id: str
    fields: dict[str, Any]
    customer_email: Optional[str] = None
    success_url: Optional[str] = None
    cancel_url: Optional[str] = None


@router.post("/prepare")
async def prepare_checkout(req: CheckoutPrepareRequest):
    """Re-price the quote and build the checkout session request."""
    result = validate(req.fields)
    if not result.valid:
        logger.warning("Rejected checkout for quote_id %s: %s", req.quote_id, result.errors)
        raise HTTPException(status_code=422, detail={"errors": result.errors})

    output = engine.calculate(result.quote_input)
    try:
        checkout = build_checkout_request(
            quote_id=req.quote_id,
            quote_input=result.quote_input,
            quote_output=output,
            customer_email=req.customer_email,
            success_url=req.success_url,
            cancel_url=req.cancel_url,
            settings=engine.settings,
        )
    except CheckoutError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return jsonable_encoder(checkout)
