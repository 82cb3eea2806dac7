"""
Calculation Pydantic Schemas

API request/response models for the calculation endpoints.
"""

from typing import Annotated, Any

from pydantic import ConfigDict, Field

from engines.schemas.base import CamelModel
from engines.schemas.costs import CostBreakdown, MarginHealth, MarginInfo, MarginStatus


class COGSRequest(CamelModel):
    """
    Schema for a COGS breakdown request.

    Cost items are validated one by one so a single bad item is reported
    as a warning instead of rejecting the whole request.
    """

    variable_costs: list[Any] = Field(default_factory=list)
    fixed_costs: list[Any] = Field(default_factory=list)
    customer_count: Annotated[int, Field(ge=0)] | None = Field(
        default=None,
        description="Defaults to 100",
    )
    utilization_rate: float = Field(default=1.0, ge=0, le=1, allow_inf_nan=False)
    price: Annotated[float, Field(gt=0, allow_inf_nan=False)] | None = Field(
        default=None,
        description="When given, margin and break-even are included",
    )


class COGSResponse(CamelModel):
    """Schema for a COGS breakdown response."""

    customer_count: int
    breakdown: CostBreakdown
    margin: MarginInfo | None = None
    margin_health: MarginHealth | None = None
    break_even_customers: int | None = None
    warnings: list[str] = Field(default_factory=list)


class MarginRequest(CamelModel):
    price: float = Field(..., gt=0, allow_inf_nan=False)
    cogs: float = Field(..., ge=0, allow_inf_nan=False)


class MarginResponse(CamelModel):
    price: float
    cogs: float
    margin: float
    profit: float
    status: MarginStatus
    health: MarginHealth


class BreakEvenRequest(CamelModel):
    fixed_total: float = Field(..., ge=0, allow_inf_nan=False)
    price: float = Field(..., gt=0, allow_inf_nan=False)
    variable_cost_per_customer: float = Field(..., ge=0, allow_inf_nan=False)


class BreakEvenResponse(CamelModel):
    """breakEvenCustomers is null when price does not exceed variable cost."""

    break_even_customers: int | None
    can_break_even: bool
    contribution_margin: float


class InvestorMetricsRequest(CamelModel):
    """Schema for an investor metrics request."""

    model_config = ConfigDict(allow_inf_nan=False)

    mrr: float = Field(..., gt=0)
    paid_customers: float = Field(..., gt=0)
    arpu: float = Field(..., gt=0)
    gross_margin: float
    break_even_customers: Annotated[int, Field(ge=0)] | None
    monthly_growth_rate: float
    ltv: float = Field(..., gt=0)
    estimated_cac: Annotated[float, Field(gt=0)] | None = None
