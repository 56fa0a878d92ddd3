import math
from decimal import Decimal

import pytest

from coating_quote.engine.models import Material, PrepLevel, QuoteInput, DEFAULT_QUOTE_VALUES
from coating_quote.services.validation_service import (
    validate, validate_field, validate_fields, check_field, QUOTE_FIELDS,
)


class TestFullRecord:

    def test_valid_record_yields_quote_input(self, valid_fields):
        result = validate(valid_fields)

        assert result.valid
        assert result.errors == {}
        assert isinstance(result.quote_input, QuoteInput)
        assert result.quote_input.material is Material.ALUMINIUM
        assert result.quote_input.prep_level is PrepLevel.CLEAN
        assert result.quote_input.length_mm == 1000.0
        assert isinstance(result.quote_input.quantity, int)

    def test_default_form_values_are_valid(self):
        assert validate(DEFAULT_QUOTE_VALUES).valid

    def test_partial_validity_gives_no_quote_input(self, valid_fields):
        valid_fields["color"] = "abcd"
        result = validate(valid_fields)

        assert not result.valid
        assert result.quote_input is None
        assert list(result.errors) == ["color"]

    def test_every_field_reported_when_empty(self):
        result = validate({})
        assert set(result.errors) == set(QUOTE_FIELDS)
        assert result.errors["length_mm"] == "Length is required"

    @pytest.mark.parametrize("raw", [None, [], "quote", 42, object()])
    def test_non_mapping_record_does_not_raise(self, raw):
        result = validate(raw)
        assert not result.valid
        assert set(result.errors) == set(QUOTE_FIELDS)

    def test_quote_input_round_trips_through_to_dict(self, valid_fields):
        quote_input = validate(valid_fields).quote_input
        assert validate(quote_input.to_dict()).quote_input == quote_input

    def test_extra_fields_ignored(self, valid_fields):
        valid_fields["notes"] = "please mask threads"
        assert validate(valid_fields).valid


class TestDimensions:

    @pytest.mark.parametrize("value", [10, 10.0, 5000, 5000.0, 2500.5])
    def test_accepted(self, value):
        assert validate_field("length_mm", value) is None

    @pytest.mark.parametrize("value,message", [
        (9.99, "Length must be at least 10mm"),
        (5000.01, "Length cannot exceed 5000mm"),
        (0, "Length must be at least 10mm"),
        (-50, "Length must be at least 10mm"),
    ])
    def test_out_of_range(self, value, message):
        assert validate_field("length_mm", value) == message

    @pytest.mark.parametrize("value", [
        float("nan"), float("inf"), -math.inf, "abc", "", True, False, [100], {"mm": 100}, "1e400", 10 ** 400,
        "120", " 75.5 ",
    ])
    def test_malformed_is_violation(self, value):
        assert validate_field("width_mm", value) == "Width must be a number"

    def test_none_is_required(self):
        assert validate_field("height_mm", None) == "Height is required"

    def test_decimal_accepted(self):
        value, error = check_field("height_mm", Decimal("12.5"))
        assert error is None
        assert value == 12.5


class TestClosedSets:

    @pytest.mark.parametrize("value,expected", [
        ("Aluminium", Material.ALUMINIUM),
        ("Steel", Material.STEEL),
        ("Stainless", Material.STAINLESS),
        (Material.STEEL, Material.STEEL),
    ])
    def test_material_normalized_to_enum(self, value, expected):
        assert check_field("material", value) == (expected, None)

    @pytest.mark.parametrize("value", ["aluminum", "Copper", "", " Steel", "Steel\n", 1, None])
    def test_unknown_material(self, value):
        assert validate_field("material", value) is not None

    @pytest.mark.parametrize("value", ["Clean", "BlastClean", "BlastPrime", PrepLevel.BLAST_PRIME])
    def test_prep_levels(self, value):
        assert validate_field("prep_level", value) is None

    def test_unknown_prep_level(self):
        assert validate_field("prep_level", "Sandblast") == \
            "Prep level must be one of Clean, BlastClean, BlastPrime"

    def test_prep_level_not_trimmed(self):
        assert validate_field("prep_level", "Clean ") is not None


class TestColor:

    @pytest.mark.parametrize("value", ["9005", "0000", "1015"])
    def test_four_digit_codes(self, value):
        assert check_field("color", value) == (value, None)

    def test_letters_rejected(self):
        assert validate_field("color", "abcd") == "RAL code must be 4 digits (e.g., 9005)"

    def test_short_code_rejected(self):
        assert validate_field("color", "123") == "Please enter a valid RAL code"

    @pytest.mark.parametrize("value", ["90055", "9005\n", " 9005", "٩٠٠٥", "90-5"])
    def test_not_exactly_four_ascii_digits(self, value):
        assert validate_field("color", value) is not None

    @pytest.mark.parametrize("value", [9005, 9005.0, None])
    def test_not_coerced_from_other_types(self, value):
        assert validate_field("color", value) is not None


class TestIntegers:

    @pytest.mark.parametrize("value", [1, 30, 7.0])
    def test_turnaround_accepted(self, value):
        assert validate_field("turnaround_days", value) is None

    @pytest.mark.parametrize("value,message", [
        (0, "Minimum turnaround is 1 day"),
        (31, "Maximum turnaround is 30 days"),
        (2.5, "Turnaround must be a whole number"),
        (True, "Turnaround must be a number"),
        ("15", "Turnaround must be a number"),
    ])
    def test_turnaround_rejected(self, value, message):
        assert validate_field("turnaround_days", value) == message

    def test_quantity_bounds(self):
        assert validate_field("quantity", 1) is None
        assert validate_field("quantity", 1000) is None
        assert validate_field("quantity", 0) == "Quantity must be at least 1"
        assert validate_field("quantity", 1001) == "Please contact us for quantities over 1000"

    def test_integral_float_normalized_to_int(self):
        assert check_field("quantity", 12.0) == (12, None)

    def test_numeric_text_not_parsed(self):
        assert validate_field("quantity", "12") == "Quantity must be a number"


class TestRushFlag:

    @pytest.mark.parametrize("value", [True, False])
    def test_booleans(self, value):
        assert check_field("is_rush", value) == (value, None)

    @pytest.mark.parametrize("value", [1, 0, "true", "yes", None])
    def test_non_booleans(self, value):
        assert validate_field("is_rush", value) is not None


class TestSubsetValidation:

    def test_only_named_fields_reported(self):
        raw = {"length_mm": 5, "width_mm": 200, "color": "xx"}
        errors = validate_fields(raw, ["length_mm", "width_mm"])
        assert errors == {"length_mm": "Length must be at least 10mm"}

    def test_missing_fields_outside_subset_ignored(self):
        assert validate_fields({"material": "Steel"}, ["material"]) == {}

    def test_empty_subset(self):
        assert validate_fields({}, []) == {}

    def test_unknown_field_name(self):
        assert validate_fields({}, ["colour"]) == {"colour": "Unknown field 'colour'"}

    def test_subset_on_non_mapping(self):
        assert validate_fields(None, ["is_rush"]) == {"is_rush": "Rush flag is required"}

    def test_single_field_name_as_string(self):
        assert validate_fields({"color": "abc"}, "color") == {"color": "Please enter a valid RAL code"}
        assert validate_fields({"material": "Steel"}, "material") == {}
