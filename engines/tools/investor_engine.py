"""
Investor Metrics MCP Tool

ARR, valuation range, break-even timeline and ARR milestone projections
exposed as an MCP tool.
"""

import math

from backend.config import get_settings
from engines.schemas.investor import InvestorMetricsInput
from engines.services.investor_metrics import (
    calculate_investor_metrics as compute_investor_metrics,
    get_ltv_cac_health,
    get_payback_health,
)
from engines.services.validation import (
    validate_non_negative_number,
    validate_number,
    validate_positive_number,
)

# Use the same MCP instance as the COGS engine
from engines.tools.cogs_engine import mcp

settings = get_settings()


def _format_millions(value: float) -> str:
    return f"{value / 1_000_000:.1f}M"


async def calculate_investor_metrics(
    mrr: float,
    paid_customers: float,
    arpu: float,
    gross_margin: float,
    break_even_customers: float | None,
    monthly_growth_rate: float,
    ltv: float,
    estimated_cac: float | None = None,
) -> dict:
    """
    Calculate investor-facing metrics from revenue and margin figures.

    Args:
        mrr: Monthly Recurring Revenue (must be positive)
        paid_customers: Current paying customers (must be positive)
        arpu: Average Revenue Per User, monthly (must be positive)
        gross_margin: Gross margin percent
        break_even_customers: Customers needed to break even; null when
            break-even is unreachable at the current price
        monthly_growth_rate: Monthly customer growth, e.g. 0.05 for 5%
        ltv: Customer Lifetime Value (must be positive)
        estimated_cac: Customer Acquisition Cost (optional, positive)

    Returns:
        Dictionary with the metrics, LTV:CAC and payback health, and a
        readable valuation range. Projections that are not reached within
        the projection horizon are null.

    Example:
        MRR 2,900 → ARR 34,800 → valuation 174K / 348K / 522K
    """
    validated = InvestorMetricsInput(
        mrr=validate_positive_number(mrr, "mrr"),
        paid_customers=validate_positive_number(paid_customers, "paidCustomers"),
        arpu=validate_positive_number(arpu, "arpu"),
        gross_margin=validate_number(gross_margin, "grossMargin"),
        break_even_customers=(
            math.ceil(validate_non_negative_number(break_even_customers, "breakEvenCustomers"))
            if break_even_customers is not None
            else None
        ),
        monthly_growth_rate=validate_number(monthly_growth_rate, "monthlyGrowthRate"),
        ltv=validate_positive_number(ltv, "ltv"),
        estimated_cac=(
            validate_positive_number(estimated_cac, "estimatedCac")
            if estimated_cac is not None
            else None
        ),
    )

    metrics = compute_investor_metrics(
        validated,
        thresholds=settings.margin_thresholds,
        horizon_months=settings.monthly_growth_horizon_months,
    )
    valuation = metrics.valuation

    return {
        "metrics": metrics.to_dict(),
        "health": {
            "grossMarginHealth": metrics.gross_margin_health.value,
            "ltvCacHealth": get_ltv_cac_health(metrics.ltv_cac_ratio),
            "paybackHealth": get_payback_health(metrics.payback_period_months),
        },
        "valuationSummary": {
            "low": f"{_format_millions(valuation.valuation_low)} (5x ARR)",
            "mid": f"{_format_millions(valuation.valuation_mid)} (10x ARR)",
            "high": f"{_format_millions(valuation.valuation_high)} (15x ARR)",
        },
    }


mcp.tool()(calculate_investor_metrics)
