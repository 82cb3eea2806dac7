"""
Cost Engine Schemas

Cost items, COGS breakdowns, margin results and the closed enumerations
used across the pricing engines.
"""

from enum import Enum

from pydantic import ConfigDict, Field, StrictStr, field_validator

from engines.schemas.base import CamelModel, NonNegativeAmount


class CurrencyCode(str, Enum):
    """Supported display currencies."""
    MYR = "MYR"
    USD = "USD"
    SGD = "SGD"
    EUR = "EUR"
    GBP = "GBP"
    AUD = "AUD"


class AIProvider(str, Enum):
    """AI providers with known token pricing."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    OPENROUTER = "openrouter"
    MINIMAX = "minimax"
    GLM = "glm"
    GROQ = "groq"


class OutputFormat(str, Enum):
    """CLI output formats."""
    TABLE = "table"
    JSON = "json"
    MARKDOWN = "markdown"


class MarginHealth(str, Enum):
    """Gross margin health bands."""
    HEALTHY = "healthy"
    ACCEPTABLE = "acceptable"
    LOW = "low"


class MarginStatus(str, Enum):
    """Short-form margin status used on price cards."""
    GREAT = "great"
    OK = "ok"
    LOW = "low"


class VariableCostItem(CamelModel):
    """
    Per-customer, usage-scaled cost driver (API tokens, storage GB, emails).

    Contribution per customer = cost_per_unit × usage_per_customer.
    """

    model_config = ConfigDict(frozen=True)

    id: StrictStr
    name: StrictStr
    unit: StrictStr = Field(..., min_length=1)
    cost_per_unit: NonNegativeAmount
    usage_per_customer: NonNegativeAmount
    description: StrictStr

    @field_validator("id", "name")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v


class FixedCostItem(CamelModel):
    """Cost incurred once per billing period regardless of customer count."""

    model_config = ConfigDict(frozen=True)

    id: StrictStr
    name: StrictStr
    monthly_cost: NonNegativeAmount
    description: StrictStr

    @field_validator("id", "name")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v


class CostBreakdown(CamelModel):
    """
    Per-customer COGS breakdown.

    All fields are finite and non-negative; fixed_per_customer is 0 when
    there are no customers to allocate fixed costs to.
    """

    model_config = ConfigDict(frozen=True)

    variable_total: float = Field(..., ge=0, description="Variable cost per customer")
    fixed_total: float = Field(..., ge=0, description="Total monthly fixed costs")
    fixed_per_customer: float = Field(..., ge=0, description="Fixed cost allocated per customer")
    total_cogs: float = Field(
        ...,
        ge=0,
        alias="totalCOGS",
        description="Variable + allocated fixed cost per customer",
    )


class MarginInfo(CamelModel):
    """Margin, profit and status for a single price point."""

    model_config = ConfigDict(frozen=True)

    margin: float = Field(..., description="Gross margin percent, may be negative")
    profit: float = Field(..., description="Profit per customer, may be negative")
    status: MarginStatus


class MarginThresholds(CamelModel):
    """Lower bounds (inclusive, in percent) of the margin health bands."""

    model_config = ConfigDict(frozen=True)

    healthy: float = 70.0
    acceptable: float = 50.0
    minimum: float = 0.0


class Currency(CamelModel):
    """Display metadata for a supported currency."""

    model_config = ConfigDict(frozen=True)

    code: CurrencyCode
    symbol: str
    name: str
    rate: float = Field(..., gt=0, description="Indicative rate relative to MYR")
    position: str = "before"
    decimal_places: int = 2
    thousands_separator: str = ","
    decimal_separator: str = "."
