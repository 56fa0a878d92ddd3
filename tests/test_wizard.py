import pytest

from coating_quote.services.validation_service import QUOTE_FIELDS
from coating_quote.ui.formatting import format_price
from coating_quote.ui.wizard import STEPS, completed_steps, can_open_step, step_errors


def test_steps_cover_every_field_once():
    fields = [name for step in STEPS for name in step.fields]
    assert sorted(fields) == sorted(QUOTE_FIELDS)


def test_all_steps_complete_for_valid_record(valid_fields):
    assert completed_steps(valid_fields) == {1, 2, 3, 4}


def test_empty_form_has_no_completed_steps():
    assert completed_steps({}) == set()


def test_step_errors_limited_to_step_fields(valid_fields):
    valid_fields.update(width_mm=2, color="12")
    assert step_errors(valid_fields, STEPS[0]) == {"width_mm": "Width must be at least 10mm"}
    assert step_errors(valid_fields, STEPS[1]) == {}
    assert set(step_errors(valid_fields, STEPS[3])) == {"color"}


def test_forward_navigation_needs_earlier_steps(valid_fields):
    valid_fields["material"] = "Gold"
    assert completed_steps(valid_fields) == {1, 3, 4}

    assert can_open_step(valid_fields, 2, current=1)
    assert not can_open_step(valid_fields, 3, current=2)
    assert can_open_step(valid_fields, 1, current=4)


@pytest.mark.parametrize("amount,currency,expected", [
    (47.5, "EUR", "€47.50"),
    (10500000.0, "EUR", "€10,500,000.00"),
    (129.25, "usd", "$129.25"),
    (0.01, "CHF", "0.01 CHF"),
    (-5, "EUR", "-€5.00"),
])
def test_format_price(amount, currency, expected):
    assert format_price(amount, currency) == expected
