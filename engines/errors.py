"""
Pricing Engine Errors

Exception taxonomy shared by the validators, calculators and codecs.
Callers distinguish failures by class, and every error carries enough
context (field, value, valid set) to render a message without re-deriving it.
"""

from collections.abc import Sequence
from typing import Any


class PricingError(Exception):
    """Base class for all pricing engine errors."""


class InvalidFieldError(PricingError, ValueError):
    """A single field failed a structural, numeric or enumeration rule."""

    def __init__(
        self,
        field: str,
        message: str,
        value: Any = None,
        valid_values: Sequence[str] | None = None,
    ):
        self.field = field
        self.value = value
        self.valid_values = list(valid_values) if valid_values is not None else None
        super().__init__(message)


class CostCollectionTypeError(PricingError, TypeError):
    """A cost collection was not a sequence at all."""

    def __init__(self, field: str, value: Any = None):
        self.field = field
        self.value = value
        super().__init__(f"{field} must be an array, got {type(value).__name__}")


class EmptyCostCollectionError(PricingError, ValueError):
    """Items were provided but none of them validated."""

    def __init__(self, field: str, errors: list[str]):
        self.field = field
        self.errors = list(errors)
        label = "variable" if field == "variableCosts" else "fixed"
        super().__init__(f"No valid {label} costs: {'; '.join(self.errors)}")
