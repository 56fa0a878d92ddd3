"""
Validation Service - per-field rules for raw quote input.

Every field has its own validator so a caller can check any subset of
fields (for example one step of a form) without running the whole record.
Validators never raise on bad input; they return a message instead.
Values are taken as typed: numeric fields need numbers, the other fields
need exact strings or bools, and nothing is parsed out of text.
"""
import logging
import math
import numbers
import re
from decimal import Decimal
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from ..engine.models import (
    QuoteInput, Material, PrepLevel,
    DIMENSION_MIN_MM, DIMENSION_MAX_MM,
    TURNAROUND_MIN_DAYS, TURNAROUND_MAX_DAYS,
    QUANTITY_MIN, QUANTITY_MAX, COLOR_PATTERN,
)

logger = logging.getLogger(__name__)

# (normalized value, None) on success, (None, message) on failure
Check = tuple[Any, Optional[str]]
FieldValidator = Callable[[Any], Check]

MISSING = object()

_COLOR_RE = re.compile(COLOR_PATTERN, re.ASCII)


@dataclass
class ValidationResult:
    """Result of validating a full quote record."""
    valid: bool
    errors: dict[str, str] = field(default_factory=dict)
    quote_input: Optional[QuoteInput] = None


def _as_number(value: Any) -> Optional[float]:
    """Accept real numbers only; strings and bools are never coerced."""
    if isinstance(value, bool):
        return None
    if not isinstance(value, (numbers.Real, Decimal)):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _dimension_validator(label: str) -> FieldValidator:
    def check(value: Any) -> Check:
        if value is MISSING or value is None:
            return None, f"{label} is required"
        number = _as_number(value)
        if number is None:
            return None, f"{label} must be a number"
        if number < DIMENSION_MIN_MM:
            return None, f"{label} must be at least {DIMENSION_MIN_MM}mm"
        if number > DIMENSION_MAX_MM:
            return None, f"{label} cannot exceed {DIMENSION_MAX_MM}mm"
        return number, None
    return check


def _integer(value: Any, label: str) -> Check:
    if value is MISSING or value is None:
        return None, f"{label} is required"
    number = _as_number(value)
    if number is None:
        return None, f"{label} must be a number"
    if not number.is_integer():
        return None, f"{label} must be a whole number"
    return int(number), None


validate_length_mm = _dimension_validator("Length")
validate_width_mm = _dimension_validator("Width")
validate_height_mm = _dimension_validator("Height")


def validate_material(value: Any) -> Check:
    if value is MISSING or value is None:
        return None, "Material is required"
    if isinstance(value, Material):
        return value, None
    if isinstance(value, str):
        try:
            return Material(value), None
        except ValueError:
            pass
    options = ", ".join(m.value for m in Material)
    return None, f"Material must be one of {options}"


def validate_prep_level(value: Any) -> Check:
    if value is MISSING or value is None:
        return None, "Prep level is required"
    if isinstance(value, PrepLevel):
        return value, None
    if isinstance(value, str):
        try:
            return PrepLevel(value), None
        except ValueError:
            pass
    options = ", ".join(p.value for p in PrepLevel)
    return None, f"Prep level must be one of {options}"


def validate_color(value: Any) -> Check:
    if value is MISSING or value is None:
        return None, "RAL code is required"
    if not isinstance(value, str):
        return None, "RAL code must be text, e.g. \"9005\""
    if len(value) < 4:
        return None, "Please enter a valid RAL code"
    if not _COLOR_RE.fullmatch(value):
        return None, "RAL code must be 4 digits (e.g., 9005)"
    return value, None


def validate_turnaround_days(value: Any) -> Check:
    days, error = _integer(value, "Turnaround")
    if error:
        return None, error
    if days < TURNAROUND_MIN_DAYS:
        return None, f"Minimum turnaround is {TURNAROUND_MIN_DAYS} day"
    if days > TURNAROUND_MAX_DAYS:
        return None, f"Maximum turnaround is {TURNAROUND_MAX_DAYS} days"
    return days, None


def validate_quantity(value: Any) -> Check:
    quantity, error = _integer(value, "Quantity")
    if error:
        return None, error
    if quantity < QUANTITY_MIN:
        return None, f"Quantity must be at least {QUANTITY_MIN}"
    if quantity > QUANTITY_MAX:
        return None, f"Please contact us for quantities over {QUANTITY_MAX}"
    return quantity, None


def validate_is_rush(value: Any) -> Check:
    if value is MISSING or value is None:
        return None, "Rush flag is required"
    if not isinstance(value, bool):
        return None, "Rush flag must be true or false"
    return value, None


# Field name -> validator, in form order
FIELD_VALIDATORS: dict[str, FieldValidator] = {
    'length_mm': validate_length_mm,
    'width_mm': validate_width_mm,
    'height_mm': validate_height_mm,
    'material': validate_material,
    'prep_level': validate_prep_level,
    'color': validate_color,
    'turnaround_days': validate_turnaround_days,
    'quantity': validate_quantity,
    'is_rush': validate_is_rush,
}

QUOTE_FIELDS = tuple(FIELD_VALIDATORS)


def _lookup(raw: Any, name: str) -> Any:
    if isinstance(raw, Mapping):
        return raw.get(name, MISSING)
    return MISSING


def check_field(name: str, value: Any) -> Check:
    """Run a single field's rule, returning (normalized value, error)."""
    validator = FIELD_VALIDATORS.get(name)
    if validator is None:
        return None, f"Unknown field '{name}'"
    return validator(value)


def validate_field(name: str, value: Any) -> Optional[str]:
    """Validate one field value. Returns the violation message or None."""
    return check_field(name, value)[1]


def validate_fields(raw: Any, fields: Iterable[str]) -> dict[str, str]:
    """
    Validate only the named fields of a raw record.

    Returns a mapping of field name to message for the checked fields that
    fail; fields not named are ignored.
    """
    if isinstance(fields, str):
        fields = (fields,)
    errors = {}
    for name in fields:
        message = validate_field(name, _lookup(raw, name))
        if message:
            errors[name] = message
    return errors


def validate(raw: Any) -> ValidationResult:
    """
    Validate a full raw quote record.

    Args:
        raw: Mapping of field name to JSON-typed value

    Returns:
        ValidationResult with a QuoteInput when every field passes,
        otherwise the per-field violations
    """
    values = {}
    errors = {}
    for name in QUOTE_FIELDS:
        value, message = check_field(name, _lookup(raw, name))
        if message:
            errors[name] = message
        else:
            values[name] = value

    if errors:
        logger.debug("Quote input rejected: %s", ", ".join(sorted(errors)))
        return ValidationResult(valid=False, errors=errors)

    return ValidationResult(valid=True, quote_input=QuoteInput(**values))
