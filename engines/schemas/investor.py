"""
Investor Metrics Schemas

Input/output models for ARR, valuation and growth milestone projections.
"""

from typing import Literal

from pydantic import ConfigDict, Field

from engines.schemas.base import CamelModel
from engines.schemas.costs import MarginHealth

HealthRating = Literal["healthy", "acceptable", "concerning"]


class InvestorMetricsInput(CamelModel):
    """
    Pre-computed scalars the investor engine projects from.

    Ranges are enforced by the caller's validators; this model only
    carries the values.
    """

    mrr: float = Field(..., description="Monthly Recurring Revenue")
    paid_customers: float = Field(..., description="Current paying customers")
    arpu: float = Field(..., description="Average Revenue Per User (monthly)")
    gross_margin: float = Field(..., description="Gross margin percent")
    break_even_customers: int | None = Field(
        ...,
        description="Customers needed to break even; None when unreachable",
    )
    monthly_growth_rate: float = Field(..., description="Monthly customer growth, e.g. 0.05")
    ltv: float = Field(..., description="Customer Lifetime Value")
    estimated_cac: float | None = Field(
        default=None,
        description="Estimated Customer Acquisition Cost",
    )


class ValuationProjection(CamelModel):
    """ARR-multiple valuation range; always low <= mid <= high."""

    model_config = ConfigDict(frozen=True)

    current_arr: float = Field(..., alias="currentARR")
    valuation_low: float
    valuation_mid: float
    valuation_high: float


class MilestoneTarget(CamelModel):
    """A single ARR milestone projection."""

    model_config = ConfigDict(frozen=True)

    label: str
    target_arr: float = Field(..., alias="targetARR")
    customers_needed: int | None = Field(
        ...,
        description="Paying customers required; None when ARPU is not positive",
    )
    months_to_reach: int | None = Field(
        ...,
        description="Months of compound growth needed; None beyond the projection horizon",
    )


class InvestorMetrics(CamelModel):
    """Investor-facing projections derived from revenue and margin scalars."""

    model_config = ConfigDict(frozen=True)

    mrr: float
    arr: float
    arpu: float
    paid_customers: float
    valuation: ValuationProjection
    gross_margin_health: MarginHealth
    break_even_customers: int | None
    current_paid_customers: float
    customers_to_break_even: float | None
    months_to_break_even: int | None
    milestones: list[MilestoneTarget]
    ltv: float
    ltv_cac_ratio: float | None = None
    payback_period_months: int | None = None
