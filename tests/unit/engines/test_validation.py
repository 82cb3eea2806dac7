"""
Validation Service Unit Tests

Cost item validation, collection partial-failure policy, scalar
validators and CLI string parsing.
"""

import math

import pytest

from backend.config import Settings
from engines.constants import DEFAULT_CURRENCY, DEFAULT_CUSTOMER_COUNT
from engines.errors import CostCollectionTypeError, EmptyCostCollectionError, InvalidFieldError
from engines.schemas.costs import AIProvider, CurrencyCode, OutputFormat
from engines.services.validation import (
    VALID_CURRENCY_CODES,
    collect_fixed_costs,
    collect_variable_costs,
    get_number_or_default,
    parse_costs_json,
    parse_positive_integer,
    parse_positive_number,
    positive_or_default,
    validate_ai_provider,
    validate_currency_code,
    validate_fixed_cost_item,
    validate_fixed_costs,
    validate_non_negative_number,
    validate_number,
    validate_output_format,
    validate_positive_number,
    validate_variable_cost_item,
    validate_variable_costs,
)


class TestVariableCostItem:
    """Test single variable cost item validation."""

    def test_valid_item(self, variable_cost_dicts):
        result = validate_variable_cost_item(variable_cost_dicts[0])

        assert result.success is True
        assert result.data.name == "AI API Calls"
        assert result.data.cost_per_unit == 0.03
        assert result.data.usage_per_customer == 100

    def test_missing_field_names_the_field(self, variable_cost_dicts):
        data = dict(variable_cost_dicts[0])
        del data["costPerUnit"]

        result = validate_variable_cost_item(data)

        assert result.success is False
        assert result.error == "costPerUnit is required"

    def test_negative_cost_rejected(self, variable_cost_dicts):
        data = {**variable_cost_dicts[0], "costPerUnit": -1}

        result = validate_variable_cost_item(data)

        assert result.success is False
        assert result.error.startswith("costPerUnit:")
        assert "greater than or equal to 0" in result.error

    def test_numeric_string_not_coerced(self, variable_cost_dicts):
        data = {**variable_cost_dicts[0], "costPerUnit": "0.03"}

        result = validate_variable_cost_item(data)

        assert result.success is False
        assert result.error.startswith("costPerUnit:")

    def test_boolean_not_accepted_as_number(self, variable_cost_dicts):
        data = {**variable_cost_dicts[0], "usagePerCustomer": True}

        result = validate_variable_cost_item(data)

        assert result.success is False
        assert result.error.startswith("usagePerCustomer:")

    def test_infinite_usage_rejected(self, variable_cost_dicts):
        data = {**variable_cost_dicts[0], "usagePerCustomer": math.inf}

        assert validate_variable_cost_item(data).success is False

    def test_blank_name_rejected(self, variable_cost_dicts):
        data = {**variable_cost_dicts[0], "name": "   "}

        result = validate_variable_cost_item(data)

        assert result.success is False
        assert result.error == "name must not be empty"

    def test_empty_unit_rejected(self, variable_cost_dicts):
        data = {**variable_cost_dicts[0], "unit": ""}

        result = validate_variable_cost_item(data)

        assert result.success is False
        assert result.error.startswith("unit:")

    def test_non_object_rejected(self):
        result = validate_variable_cost_item("AI API Calls")

        assert result.success is False
        assert result.error == "Expected an object, got str"

    def test_presence_reported_before_range(self):
        result = validate_variable_cost_item({"costPerUnit": -1})

        assert result.success is False
        assert result.error == "id is required"

    def test_snake_case_keys_accepted(self):
        result = validate_variable_cost_item(
            {
                "id": "email-1",
                "name": "Email",
                "unit": "email",
                "cost_per_unit": 0.005,
                "usage_per_customer": 50,
                "description": "",
            }
        )

        assert result.success is True
        assert result.data.to_dict()["costPerUnit"] == 0.005


class TestFixedCostItem:
    """Test single fixed cost item validation."""

    def test_valid_item(self, fixed_cost_dicts):
        result = validate_fixed_cost_item(fixed_cost_dicts[0])

        assert result.success is True
        assert result.data.monthly_cost == 50

    def test_nan_monthly_cost_rejected(self, fixed_cost_dicts):
        data = {**fixed_cost_dicts[0], "monthlyCost": math.nan}

        result = validate_fixed_cost_item(data)

        assert result.success is False
        assert result.error.startswith("monthlyCost:")

    def test_zero_monthly_cost_allowed(self, fixed_cost_dicts):
        data = {**fixed_cost_dicts[0], "monthlyCost": 0}

        assert validate_fixed_cost_item(data).success is True


class TestCostCollections:
    """Test the partial-failure policy of collection validation."""

    def test_invalid_items_dropped_when_one_survives(self, variable_cost_dicts):
        raw = [variable_cost_dicts[0], {"name": "broken"}]

        collection = collect_variable_costs(raw)

        assert [item.id for item in collection.items] == ["api-1"]
        assert collection.errors == ["variableCosts[1]: id is required"]

    def test_all_invalid_raises(self):
        with pytest.raises(EmptyCostCollectionError) as exc_info:
            validate_fixed_costs([{"name": "A"}, "nope"])

        assert str(exc_info.value).startswith("No valid fixed costs: ")
        assert len(exc_info.value.errors) == 2
        assert "fixedCosts[0]: id is required" in str(exc_info.value)
        assert "fixedCosts[1]: Expected an object, got str" in str(exc_info.value)

    def test_empty_list_is_valid(self):
        assert validate_variable_costs([]) == []
        assert collect_fixed_costs([]).errors == []

    def test_allow_empty_keeps_errors_without_raising(self):
        collection = collect_fixed_costs([{"name": "A"}], allow_empty=True)

        assert collection.items == []
        assert collection.errors == ["fixedCosts[0]: id is required"]

    def test_tuple_accepted(self, fixed_cost_dicts):
        assert len(validate_fixed_costs(tuple(fixed_cost_dicts))) == 2

    @pytest.mark.parametrize("raw", [None, {"id": "x"}, "costs", 42])
    def test_non_sequence_raises(self, raw):
        with pytest.raises(CostCollectionTypeError) as exc_info:
            validate_variable_costs(raw)

        assert exc_info.value.field == "variableCosts"
        assert "must be an array" in str(exc_info.value)
        assert isinstance(exc_info.value, TypeError)


class TestScalarValidators:
    """Test numeric and enumeration validators."""

    def test_number_accepts_negative(self):
        assert validate_number(-12.5, "grossMargin") == -12.5

    @pytest.mark.parametrize(
        "value,expected",
        [
            (True, "price must be a number, got boolean"),
            ("29", "price must be a number, got string"),
            (None, "price must be a number, got null"),
        ],
    )
    def test_number_rejects_non_numbers(self, value, expected):
        with pytest.raises(InvalidFieldError) as exc_info:
            validate_number(value, "price")

        assert str(exc_info.value) == expected
        assert exc_info.value.field == "price"

    def test_number_rejects_nan(self):
        with pytest.raises(InvalidFieldError, match="must be a valid number, got NaN"):
            validate_number(math.nan, "price")

    def test_number_rejects_infinity(self):
        with pytest.raises(InvalidFieldError, match="must be a finite number"):
            validate_number(-math.inf, "price")

    def test_positive_number(self):
        assert validate_positive_number(29, "price") == 29
        with pytest.raises(InvalidFieldError, match="price must be positive, got 0"):
            validate_positive_number(0, "price")

    def test_non_negative_number(self):
        assert validate_non_negative_number(0, "cogs") == 0
        with pytest.raises(InvalidFieldError, match="cogs must be non-negative, got -1"):
            validate_non_negative_number(-1, "cogs")

    def test_currency_code(self):
        assert validate_currency_code("USD") == CurrencyCode.USD
        assert validate_currency_code(None) == CurrencyCode.MYR
        assert validate_currency_code(42) == CurrencyCode.MYR

    def test_defaults_share_one_source(self):
        settings = Settings(_env_file=None)

        assert validate_currency_code(None) == DEFAULT_CURRENCY
        assert settings.default_currency == DEFAULT_CURRENCY
        assert settings.default_customer_count == DEFAULT_CUSTOMER_COUNT

    def test_unknown_currency_lists_valid_codes(self):
        with pytest.raises(InvalidFieldError) as exc_info:
            validate_currency_code("usd")

        assert exc_info.value.valid_values == VALID_CURRENCY_CODES
        assert "MYR, USD, SGD, EUR, GBP, AUD" in str(exc_info.value)

    def test_ai_provider(self):
        assert validate_ai_provider("groq") == AIProvider.GROQ
        with pytest.raises(InvalidFieldError, match="Invalid AI provider: OpenAI"):
            validate_ai_provider("OpenAI")
        with pytest.raises(InvalidFieldError, match="must be a string"):
            validate_ai_provider(3)

    def test_output_format(self):
        assert validate_output_format("markdown") == OutputFormat.MARKDOWN
        with pytest.raises(InvalidFieldError, match='Invalid output format: "xml"'):
            validate_output_format("xml")


class TestCliParsing:
    """Test parsing of CLI option strings."""

    @pytest.mark.parametrize(
        "raw,expected",
        [("100", 100), (" 42", 42), ("12.9", 12), ("7 users", 7), ("+3", 3)],
    )
    def test_positive_integer_reads_leading_digits(self, raw, expected):
        assert parse_positive_integer(raw, "Customer count") == expected

    def test_positive_integer_rejects_non_numeric(self):
        with pytest.raises(InvalidFieldError) as exc_info:
            parse_positive_integer("abc", "Customer count")

        assert str(exc_info.value) == 'Customer count must be a valid number, got: "abc"'

    @pytest.mark.parametrize("raw", ["0", "-5"])
    def test_positive_integer_rejects_non_positive(self, raw):
        with pytest.raises(InvalidFieldError, match="must be a positive integer"):
            parse_positive_integer(raw, "Customer count")

    @pytest.mark.parametrize("raw,expected", [("29.90", 29.9), ("1e3", 1000.0), (".5", 0.5)])
    def test_positive_number(self, raw, expected):
        assert parse_positive_number(raw, "Price") == pytest.approx(expected)

    @pytest.mark.parametrize("raw", ["abc", "0", "-3", "1e999"])
    def test_positive_number_rejects(self, raw):
        with pytest.raises(InvalidFieldError):
            parse_positive_number(raw, "Price")


class TestNumberOrDefault:
    """get_number_or_default never raises."""

    @pytest.mark.parametrize(
        "args",
        [
            None,
            {},
            {"customerCount": None},
            {"customerCount": "5"},
            {"customerCount": math.nan},
            {"customerCount": math.inf},
            {"customerCount": 0},
            {"customerCount": -3},
            {"customerCount": True},
        ],
    )
    def test_falls_back_to_default(self, args):
        assert get_number_or_default(args, "customerCount", 100) == 100

    def test_returns_positive_value(self):
        assert get_number_or_default({"customerCount": 250}, "customerCount", 100) == 250

    @pytest.mark.parametrize("value", [None, "5", math.nan, 0, -3, True])
    def test_single_value_form(self, value):
        assert positive_or_default(value, 100) == 100
        assert positive_or_default(250, 100) == 250


class TestParseCostsJson:
    """Test cost file parsing."""

    def test_parses_both_lists(self):
        content = '{"variableCosts": [{"id": "a"}], "fixedCosts": []}'

        variable, fixed = parse_costs_json(content, "costs.json")

        assert variable == [{"id": "a"}]
        assert fixed == []

    def test_missing_or_non_array_keys_become_empty(self):
        assert parse_costs_json('{"variableCosts": "x"}', "costs.json") == ([], [])

    def test_invalid_json(self):
        with pytest.raises(InvalidFieldError, match="Invalid JSON in costs.json"):
            parse_costs_json("{not json", "costs.json")

    def test_non_object_root(self):
        with pytest.raises(InvalidFieldError, match="costs.json must contain a JSON object"):
            parse_costs_json("[1, 2]", "costs.json")
