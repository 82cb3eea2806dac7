"""
Calculation API Routes

Stateless endpoints over the COGS, margin and investor engines.
"""

import logging

from fastapi import APIRouter, HTTPException, status

from backend.config import get_settings
from backend.schemas.calculation import (
    BreakEvenRequest,
    BreakEvenResponse,
    COGSRequest,
    COGSResponse,
    InvestorMetricsRequest,
    MarginRequest,
    MarginResponse,
)
from engines.errors import PricingError
from engines.schemas.costs import MarginThresholds
from engines.schemas.investor import InvestorMetrics, InvestorMetricsInput
from engines.services.cogs_calculator import (
    calculate_break_even_customers,
    calculate_cogs_breakdown,
)
from engines.services.investor_metrics import calculate_investor_metrics
from engines.services.margin_calculator import (
    calculate_gross_margin,
    calculate_profit,
    get_margin_health,
    get_margin_info,
    get_margin_status,
)
from engines.services.validation import collect_fixed_costs, collect_variable_costs

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter()


@router.post(
    "/cogs",
    response_model=COGSResponse,
    summary="Calculate COGS breakdown",
    description="Per-customer COGS from variable and fixed cost items, with margin when a price is given.",
)
async def calculate_cogs(request: COGSRequest) -> COGSResponse:
    """Calculate a COGS breakdown."""
    try:
        variable = collect_variable_costs(request.variable_costs)
        fixed = collect_fixed_costs(request.fixed_costs)
    except PricingError as e:
        logger.info(f"Rejected COGS request: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    customer_count = (
        request.customer_count
        if request.customer_count is not None
        else settings.default_customer_count
    )
    breakdown = calculate_cogs_breakdown(
        variable.items, fixed.items, customer_count, request.utilization_rate
    )

    response = COGSResponse(
        customer_count=customer_count,
        breakdown=breakdown,
        warnings=variable.errors + fixed.errors,
    )
    if request.price is not None:
        thresholds = settings.margin_thresholds
        margin = get_margin_info(request.price, breakdown.total_cogs, thresholds)
        response.margin = margin
        response.margin_health = get_margin_health(margin.margin, thresholds)
        response.break_even_customers = calculate_break_even_customers(
            breakdown.fixed_total, request.price, breakdown.variable_total
        )
    return response


@router.post(
    "/margins",
    response_model=MarginResponse,
    summary="Calculate gross margin",
)
async def calculate_margins(request: MarginRequest) -> MarginResponse:
    """Calculate margin, profit and health for a price point."""
    thresholds = settings.margin_thresholds
    margin = calculate_gross_margin(request.price, request.cogs)
    return MarginResponse(
        price=request.price,
        cogs=request.cogs,
        margin=margin,
        profit=calculate_profit(request.price, request.cogs),
        status=get_margin_status(margin, thresholds),
        health=get_margin_health(margin, thresholds),
    )


@router.post(
    "/break-even",
    response_model=BreakEvenResponse,
    summary="Calculate break-even customers",
)
async def calculate_break_even(request: BreakEvenRequest) -> BreakEvenResponse:
    """Calculate the customers needed to cover fixed costs."""
    break_even = calculate_break_even_customers(
        request.fixed_total, request.price, request.variable_cost_per_customer
    )
    return BreakEvenResponse(
        break_even_customers=break_even,
        can_break_even=break_even is not None,
        contribution_margin=request.price - request.variable_cost_per_customer,
    )


@router.post(
    "/investor-metrics",
    response_model=InvestorMetrics,
    summary="Calculate investor metrics",
)
async def calculate_investor_metrics_route(request: InvestorMetricsRequest) -> InvestorMetrics:
    """Calculate ARR, valuation, break-even timeline and milestones."""
    return calculate_investor_metrics(
        InvestorMetricsInput.model_validate(request.model_dump()),
        thresholds=settings.margin_thresholds,
        horizon_months=settings.monthly_growth_horizon_months,
    )


@router.get(
    "/margin-thresholds",
    response_model=MarginThresholds,
    summary="Get margin health thresholds",
)
async def get_margin_thresholds() -> MarginThresholds:
    """Get the configured gross margin bands."""
    return settings.margin_thresholds
