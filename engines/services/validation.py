"""
Cost Validation Service

Turns untrusted input (JSON cost files, CLI option strings, MCP tool
arguments) into typed cost items before it reaches the calculators.

Item validators return a tagged result and never raise. Collection
validators drop invalid items as long as one item survives. Scalar
validators raise InvalidFieldError naming the field.
"""

import json
import logging
import math
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from engines.constants import DEFAULT_CURRENCY
from engines.errors import CostCollectionTypeError, EmptyCostCollectionError, InvalidFieldError
from engines.schemas.costs import (
    AIProvider,
    CurrencyCode,
    FixedCostItem,
    OutputFormat,
    VariableCostItem,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

VALID_CURRENCY_CODES: list[str] = [c.value for c in CurrencyCode]
VALID_AI_PROVIDERS: list[str] = [p.value for p in AIProvider]
VALID_OUTPUT_FORMATS: list[str] = [f.value for f in OutputFormat]

# Rule precedence: object shape, field presence/type, numeric range, emptiness
_SHAPE_ERRORS = {"model_type", "model_attributes_type", "dict_type"}
_RANGE_ERRORS = {
    "greater_than",
    "greater_than_equal",
    "less_than",
    "less_than_equal",
    "finite_number",
}

# Prefixes accepted by radix-10 integer and float parsing
_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


# ── Tagged Results ────────────────────────────────────


@dataclass(frozen=True)
class ValidationSuccess(Generic[T]):
    """Item passed validation."""

    data: T
    success: bool = field(default=True, init=False)


@dataclass(frozen=True)
class ValidationFailure:
    """Item failed validation; error names the offending field."""

    error: str
    success: bool = field(default=False, init=False)


ValidationResult = ValidationSuccess[T] | ValidationFailure


@dataclass
class CostCollection(Generic[T]):
    """Valid items of a collection plus the errors of the dropped ones."""

    items: list[T]
    errors: list[str]


def _rule_rank(error: dict) -> int:
    error_type = error["type"]
    if error_type in _SHAPE_ERRORS:
        return 0
    if error_type in _RANGE_ERRORS:
        return 2
    if error_type == "missing" or error_type.endswith("_type"):
        return 1
    return 3


def _format_error(error: dict) -> str:
    field_name = ".".join(str(part) for part in error["loc"]) or "value"
    error_type = error["type"]

    if error_type in _SHAPE_ERRORS:
        return f"Expected an object, got {type(error['input']).__name__}"
    if error_type == "missing":
        return f"{field_name} is required"
    if error_type == "value_error":
        message = error["msg"].removeprefix("Value error, ")
        return f"{field_name} {message}"
    if error_type in _RANGE_ERRORS or error_type.endswith("_type"):
        return f"{field_name}: {error['msg']} (got {error['input']!r})"
    return f"{field_name}: {error['msg']}"


def first_error_message(exc: ValidationError) -> str:
    """Pick the error that the rule precedence reports first."""
    errors = sorted(exc.errors(), key=_rule_rank)
    if not errors:
        return "Invalid data"
    return _format_error(errors[0])


def validate_model(model: type[T], data: Any) -> ValidationResult:
    """Validate data against a model and return a tagged result."""
    try:
        return ValidationSuccess(model.model_validate(data))
    except ValidationError as e:
        return ValidationFailure(first_error_message(e))


def validate_variable_cost_item(data: Any) -> ValidationResult:
    """Validate a single variable cost item."""
    return validate_model(VariableCostItem, data)


def validate_fixed_cost_item(data: Any) -> ValidationResult:
    """Validate a single fixed cost item."""
    return validate_model(FixedCostItem, data)


# ── Collections ───────────────────────────────────────


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _collect(
    model: type[T],
    raw_items: Any,
    field_name: str,
    allow_empty: bool = False,
) -> CostCollection[T]:
    if not _is_sequence(raw_items):
        raise CostCollectionTypeError(field_name, raw_items)

    items: list[T] = []
    errors: list[str] = []
    for i, raw in enumerate(raw_items):
        result = validate_model(model, raw)
        if result.success:
            items.append(result.data)
        else:
            errors.append(f"{field_name}[{i}]: {result.error}")

    if errors and not items and not allow_empty:
        raise EmptyCostCollectionError(field_name, errors)

    for error in errors:
        logger.debug(f"Dropped invalid cost item {error}")

    return CostCollection(items=items, errors=errors)


def collect_variable_costs(
    raw_costs: Any, allow_empty: bool = False
) -> CostCollection[VariableCostItem]:
    """
    Validate variable costs, keeping the per-item errors for display.

    With allow_empty, a list whose items all fail yields an empty
    collection instead of raising.
    """
    return _collect(VariableCostItem, raw_costs, "variableCosts", allow_empty)


def collect_fixed_costs(raw_costs: Any, allow_empty: bool = False) -> CostCollection[FixedCostItem]:
    """Validate fixed costs; same options as collect_variable_costs."""
    return _collect(FixedCostItem, raw_costs, "fixedCosts", allow_empty)


def validate_variable_costs(raw_costs: Any) -> list[VariableCostItem]:
    """
    Validate and parse a variable costs array.

    Invalid items are dropped while at least one item is valid. An empty
    array is returned unchanged.

    Raises:
        CostCollectionTypeError: raw_costs is not a sequence
        EmptyCostCollectionError: items were given but none validated
    """
    return collect_variable_costs(raw_costs).items


def validate_fixed_costs(raw_costs: Any) -> list[FixedCostItem]:
    """
    Validate and parse a fixed costs array.

    Same partial-failure policy as validate_variable_costs.
    """
    return collect_fixed_costs(raw_costs).items


# ── Scalars ───────────────────────────────────────────


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, str):
        return "string"
    return type(value).__name__


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_number(value: Any, field_name: str) -> float:
    """Validate that a value is a finite number (any sign)."""
    if not _is_number(value):
        raise InvalidFieldError(
            field_name, f"{field_name} must be a number, got {_type_name(value)}", value
        )
    if math.isnan(value):
        raise InvalidFieldError(field_name, f"{field_name} must be a valid number, got NaN", value)
    if math.isinf(value):
        raise InvalidFieldError(
            field_name, f"{field_name} must be a finite number, got {value}", value
        )
    return value


def validate_positive_number(value: Any, field_name: str) -> float:
    """Validate that a value is a finite number greater than zero."""
    value = validate_number(value, field_name)
    if value <= 0:
        raise InvalidFieldError(field_name, f"{field_name} must be positive, got {value}", value)
    return value


def validate_non_negative_number(value: Any, field_name: str) -> float:
    """Validate that a value is a finite number of zero or more."""
    value = validate_number(value, field_name)
    if value < 0:
        raise InvalidFieldError(
            field_name, f"{field_name} must be non-negative, got {value}", value
        )
    return value


def validate_currency_code(value: Any) -> CurrencyCode:
    """
    Validate a currency code.

    Lenient on type, strict on value: anything that is not a string yields
    the default currency, while an unknown code string is rejected.
    """
    if not isinstance(value, str):
        return DEFAULT_CURRENCY
    if value not in VALID_CURRENCY_CODES:
        raise InvalidFieldError(
            "currency",
            f"Invalid currency code: {value}. Valid codes: {', '.join(VALID_CURRENCY_CODES)}",
            value,
            VALID_CURRENCY_CODES,
        )
    return CurrencyCode(value)


def validate_ai_provider(value: Any) -> AIProvider:
    """Validate an AI provider name."""
    if not isinstance(value, str):
        raise InvalidFieldError(
            "provider", f"AI provider must be a string, got {_type_name(value)}", value
        )
    if value not in VALID_AI_PROVIDERS:
        raise InvalidFieldError(
            "provider",
            f"Invalid AI provider: {value}. Valid providers: {', '.join(VALID_AI_PROVIDERS)}",
            value,
            VALID_AI_PROVIDERS,
        )
    return AIProvider(value)


def validate_output_format(value: str) -> OutputFormat:
    """Validate a CLI output format."""
    if value not in VALID_OUTPUT_FORMATS:
        raise InvalidFieldError(
            "output",
            f'Invalid output format: "{value}". Valid formats: {", ".join(VALID_OUTPUT_FORMATS)}',
            value,
            VALID_OUTPUT_FORMATS,
        )
    return OutputFormat(value)


def parse_positive_integer(value: str, field_name: str) -> int:
    """
    Parse a CLI string as a positive integer.

    Parsing reads the leading integer of the string, so "12.9" is 12 and
    "7 users" is 7; a string with no leading digits is rejected.
    """
    match = _INT_PREFIX.match(value)
    if not match:
        raise InvalidFieldError(
            field_name, f'{field_name} must be a valid number, got: "{value}"', value
        )
    number = int(match.group(1))
    if number <= 0:
        raise InvalidFieldError(
            field_name, f"{field_name} must be a positive integer, got: {number}", value
        )
    return number


def parse_positive_number(value: str, field_name: str) -> float:
    """Parse a CLI string as a positive, finite number."""
    match = _FLOAT_PREFIX.match(value)
    if not match:
        raise InvalidFieldError(
            field_name, f'{field_name} must be a valid number, got: "{value}"', value
        )
    number = float(match.group(1))
    if math.isinf(number):
        raise InvalidFieldError(
            field_name, f"{field_name} must be a finite number, got: {value}", value
        )
    if number <= 0:
        raise InvalidFieldError(
            field_name, f"{field_name} must be a positive number, got: {number:g}", value
        )
    return number


def get_number_or_default(
    args: Mapping[str, Any] | None,
    key: str,
    default_value: float,
) -> float:
    """
    Read a strictly positive number from tool arguments.

    Missing keys, non-numbers, NaN, infinities, zero and negatives all
    fall back to default_value. Never raises.
    """
    if not args:
        return default_value
    return positive_or_default(args.get(key), default_value)


def positive_or_default(value: Any, default_value: float) -> float:
    """Single-value form of get_number_or_default."""
    if not _is_number(value) or not math.isfinite(value):
        return default_value
    return value if value > 0 else default_value


def parse_costs_json(content: str, filename: str) -> tuple[list[Any], list[Any]]:
    """
    Parse a cost-definition file.

    Returns (variable_costs, fixed_costs) as raw lists; missing or
    non-array keys become empty lists.
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise InvalidFieldError("input", f"Invalid JSON in {filename}: {e.msg}", filename) from e

    if not isinstance(data, dict):
        raise InvalidFieldError("input", f"{filename} must contain a JSON object", filename)

    variable_costs = data.get("variableCosts")
    fixed_costs = data.get("fixedCosts")
    return (
        variable_costs if isinstance(variable_costs, list) else [],
        fixed_costs if isinstance(fixed_costs, list) else [],
    )
