"""
Investor Metrics Calculator

ARR, valuation ranges, unit economics and growth projections built from
already-computed revenue and margin scalars. Nothing here re-derives
cost data or re-validates ranges; callers pass validated values.
"""

import math
from collections.abc import Sequence

from engines.constants import (
    DEFAULT_MARGIN_THRESHOLDS,
    MILESTONE_LADDER,
    PROJECTION_HORIZON_MONTHS,
    VALUATION_MULTIPLES,
)
from engines.schemas.costs import MarginThresholds
from engines.schemas.investor import (
    HealthRating,
    InvestorMetrics,
    InvestorMetricsInput,
    MilestoneTarget,
    ValuationProjection,
)
from engines.services.margin_calculator import get_margin_health

# LTV:CAC of 3:1 or better is the usual SaaS benchmark
LTV_CAC_HEALTHY = 3.0
LTV_CAC_ACCEPTABLE = 1.0

PAYBACK_HEALTHY_MONTHS = 12
PAYBACK_ACCEPTABLE_MONTHS = 24


# ── Revenue & Valuation ───────────────────────────────


def calculate_arr(mrr: float) -> float:
    return mrr * 12


def calculate_mrr_from_customers(customer_count: float, arpu: float) -> float:
    return customer_count * arpu


def calculate_valuation(
    arr: float,
    multiples: Sequence[float] = VALUATION_MULTIPLES,
) -> ValuationProjection:
    """
    Valuation range from ARR multiples.

    Multiples are sorted so low <= mid <= high holds for any non-negative ARR.
    """
    low, mid, high = sorted(multiples)
    return ValuationProjection(
        current_arr=arr,
        valuation_low=arr * low,
        valuation_mid=arr * mid,
        valuation_high=arr * high,
    )


# ── Unit Economics ────────────────────────────────────


def calculate_ltv(arpu: float, gross_margin_percent: float, lifetime_months: float) -> float:
    """LTV = ARPU × gross margin × average customer lifetime."""
    return arpu * (gross_margin_percent / 100) * lifetime_months


def calculate_ltv_from_churn(
    arpu: float,
    gross_margin_percent: float,
    monthly_churn_rate: float,
) -> float | None:
    """LTV with lifetime = 1 / churn; None when churn is not positive."""
    if monthly_churn_rate <= 0:
        return None
    return calculate_ltv(arpu, gross_margin_percent, 1 / monthly_churn_rate)


def calculate_ltv_cac_ratio(ltv: float, cac: float | None) -> float | None:
    if cac is None or cac <= 0:
        return None
    return ltv / cac


def get_ltv_cac_health(ratio: float | None) -> HealthRating:
    if ratio is None:
        return "concerning"
    if ratio >= LTV_CAC_HEALTHY:
        return "healthy"
    if ratio >= LTV_CAC_ACCEPTABLE:
        return "acceptable"
    return "concerning"


def calculate_payback_period(
    arpu: float,
    gross_margin_percent: float,
    cac: float | None,
) -> int | None:
    """Months of gross profit needed to recover CAC."""
    if cac is None or arpu <= 0 or gross_margin_percent <= 0 or cac <= 0:
        return None
    monthly_contribution = arpu * (gross_margin_percent / 100)
    return math.ceil(cac / monthly_contribution)


def get_payback_health(months: int | None) -> HealthRating:
    if months is None:
        return "concerning"
    if months <= PAYBACK_HEALTHY_MONTHS:
        return "healthy"
    if months <= PAYBACK_ACCEPTABLE_MONTHS:
        return "acceptable"
    return "concerning"


# ── Growth Projections ────────────────────────────────


def months_to_reach(
    current_customers: float,
    target_customers: float,
    monthly_growth_rate: float,
    horizon_months: int = PROJECTION_HORIZON_MONTHS,
) -> int | None:
    """
    Smallest m >= 0 with current × (1 + rate)^m >= target.

    Returns None when the target is not reached within horizon_months,
    which covers zero current customers and non-positive growth.
    """
    growth = 1 + monthly_growth_rate
    customers = current_customers
    for month in range(horizon_months + 1):
        if customers >= target_customers:
            return month
        customers *= growth
    return None


def calculate_milestones(
    arpu: float,
    current_paid_customers: float,
    monthly_growth_rate: float,
    ladder: Sequence[tuple[str, float]] = MILESTONE_LADDER,
    horizon_months: int = PROJECTION_HORIZON_MONTHS,
) -> list[MilestoneTarget]:
    """
    Project customers and months needed for each ARR milestone.

    customers_needed = ceil(target_arr / (12 × arpu)); with a non-positive
    ARPU no customer count reaches the target and both projections are None.
    """
    milestones = []
    for label, target_arr in ladder:
        if arpu > 0:
            customers_needed = math.ceil(target_arr / (12 * arpu))
            months = months_to_reach(
                current_paid_customers, customers_needed, monthly_growth_rate, horizon_months
            )
        else:
            customers_needed = None
            months = None

        milestones.append(
            MilestoneTarget(
                label=label,
                target_arr=target_arr,
                customers_needed=customers_needed,
                months_to_reach=months,
            )
        )
    return milestones


def calculate_break_even_timeline(
    current_paid_customers: float,
    break_even_customers: int | None,
    monthly_growth_rate: float,
    horizon_months: int = PROJECTION_HORIZON_MONTHS,
) -> int | None:
    """
    Months of growth until break-even.

    None when break-even is unreachable, already reached, or beyond the horizon.
    """
    if break_even_customers is None or current_paid_customers >= break_even_customers:
        return None
    return months_to_reach(
        current_paid_customers, break_even_customers, monthly_growth_rate, horizon_months
    )


# ── Aggregate ─────────────────────────────────────────


def calculate_investor_metrics(
    input_data: InvestorMetricsInput,
    thresholds: MarginThresholds = DEFAULT_MARGIN_THRESHOLDS,
    ladder: Sequence[tuple[str, float]] = MILESTONE_LADDER,
    horizon_months: int = PROJECTION_HORIZON_MONTHS,
) -> InvestorMetrics:
    """
    Calculate the full investor metrics set.

    Algorithm:
    1. ARR = MRR × 12 and the valuation range from ARR multiples
    2. Gross margin health from the margin bands
    3. Customers and months to break-even
    4. ARR milestone projections under compound monthly growth
    5. LTV:CAC and payback, when a CAC estimate is supplied
    """
    arr = calculate_arr(input_data.mrr)
    break_even = input_data.break_even_customers
    paid = input_data.paid_customers

    customers_to_break_even = max(0.0, break_even - paid) if break_even is not None else None

    return InvestorMetrics(
        mrr=input_data.mrr,
        arr=arr,
        arpu=input_data.arpu,
        paid_customers=paid,
        valuation=calculate_valuation(arr),
        gross_margin_health=get_margin_health(input_data.gross_margin, thresholds),
        break_even_customers=break_even,
        current_paid_customers=paid,
        customers_to_break_even=customers_to_break_even,
        months_to_break_even=calculate_break_even_timeline(
            paid, break_even, input_data.monthly_growth_rate, horizon_months
        ),
        milestones=calculate_milestones(
            input_data.arpu, paid, input_data.monthly_growth_rate, ladder, horizon_months
        ),
        ltv=input_data.ltv,
        ltv_cac_ratio=calculate_ltv_cac_ratio(input_data.ltv, input_data.estimated_cac),
        payback_period_months=calculate_payback_period(
            input_data.arpu, input_data.gross_margin, input_data.estimated_cac
        ),
    )
