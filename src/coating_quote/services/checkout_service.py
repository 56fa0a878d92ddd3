"""
Checkout Service - builds the request body for the payment session collaborator.

The payment processor works in minor units (cents), so every amount is
converted here; the quote's total and currency are also passed through
unchanged for reconciliation.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from ..config.settings import get_settings, Settings
from ..engine.models import QuoteInput, QuoteOutput

logger = logging.getLogger(__name__)

CHECKOUT_SESSION_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"


class CheckoutError(ValueError):
    """Raised when a quote cannot be turned into a checkout request."""


@dataclass
class CheckoutLineItem:
    """One priced line on the payment page."""
    name: str
    unit_amount: int  # minor units
    quantity: int = 1
    description: Optional[str] = None


@dataclass
class CheckoutRequest:
    """Body for the external checkout session-creation endpoint."""
    quote_id: str
    total_price: float
    currency: str
    total_amount: int  # minor units
    line_items: list[CheckoutLineItem]
    success_url: str
    cancel_url: str
    customer_email: Optional[str] = None
    metadata: dict[str, str] = field(default_factory=dict)


def to_minor_units(amount: float) -> int:
    """Convert a 2-decimal amount to integer cents."""
    return int((Decimal(repr(amount)) * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def build_checkout_request(
    quote_id: str,
    quote_input: QuoteInput,
    quote_output: QuoteOutput,
    customer_email: Optional[str] = None,
    success_url: Optional[str] = None,
    cancel_url: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> CheckoutRequest:
    """
    Build the checkout request for a priced quote.

    Args:
        quote_id: Caller's identifier for the quote
        quote_input: Validated input the quote was priced from
        quote_output: Result of the pricing engine for quote_input
        customer_email: Optional prefill for the payment page
        success_url: Redirect after payment (defaults to the frontend)
        cancel_url: Redirect if payment is cancelled (defaults to the frontend)

    Returns:
        CheckoutRequest with minor-unit line items

    Raises:
        CheckoutError: quote_id is blank or the total is not positive
    """
    settings = settings or get_settings()

    quote_id = (quote_id or "").strip()
    if not quote_id:
        raise CheckoutError("Quote ID is required")

    total_amount = to_minor_units(quote_output.total_price)
    if total_amount <= 0:
        raise CheckoutError("Total amount must be greater than zero")

    line_items = [
        CheckoutLineItem(
            name=f"Powder Coating - {quote_input.material.value} ({quote_input.prep_level.value})",
            unit_amount=to_minor_units(quote_output.base_price),
            description=f"Quantity: {quote_input.quantity}",
        )
    ]
    if quote_output.prep_surcharge > 0:
        line_items.append(CheckoutLineItem(
            name="Surface Preparation Surcharge",
            unit_amount=to_minor_units(quote_output.prep_surcharge),
        ))
    if quote_output.rush_surcharge > 0:
        line_items.append(CheckoutLineItem(
            name=f"Rush Order Surcharge (+{settings.rates.rush_multiplier:.0%})",
            unit_amount=to_minor_units(quote_output.rush_surcharge),
        ))

    # Components are rounded one by one, so their cents can miss the total by one;
    # the largest line absorbs the difference so the payment page matches total_amount
    remainder = total_amount - sum(item.unit_amount * item.quantity for item in line_items)
    if remainder:
        largest = max(line_items, key=lambda item: item.unit_amount)
        largest.unit_amount += remainder
        logger.debug("Adjusted '%s' by %d minor units to match total", largest.name, remainder)

    request = CheckoutRequest(
        quote_id=quote_id,
        total_price=quote_output.total_price,
        currency=quote_output.currency,
        total_amount=total_amount,
        line_items=line_items,
        success_url=success_url or f"{settings.frontend_url}/checkout/success?session_id={CHECKOUT_SESSION_PLACEHOLDER}",
        cancel_url=cancel_url or f"{settings.frontend_url}/checkout/cancel",
        customer_email=customer_email or None,
        metadata={
            "quote_id": quote_id,
            "material": quote_input.material.value,
            "quantity": str(quote_input.quantity),
        },
    )

    logger.info("Prepared checkout request for quote_id: %s (%d %s minor units)",
                quote_id, total_amount, request.currency)
    return request
