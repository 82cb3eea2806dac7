"""
Margin Calculator

Gross margin, profit and margin health classification for price points.
Every threshold-based function takes the band table explicitly and
defaults to the shipped SaaS bands (70% healthy, 50% acceptable).
"""

from collections.abc import Sequence

from engines.constants import DEFAULT_MARGIN_THRESHOLDS
from engines.schemas.costs import MarginHealth, MarginInfo, MarginStatus, MarginThresholds


def calculate_gross_margin(price: float, cogs: float) -> float:
    """
    Gross margin percent = (price - cogs) / price × 100.

    A non-positive price has no meaningful margin and yields 0. The result
    is negative when cogs exceeds price and is not clamped.
    """
    if price <= 0:
        return 0.0
    return ((price - cogs) / price) * 100


def calculate_profit(price: float, cogs: float) -> float:
    return price - cogs


def get_margin_status(
    margin: float,
    thresholds: MarginThresholds = DEFAULT_MARGIN_THRESHOLDS,
) -> MarginStatus:
    """Short-form status; lower bound of each band is inclusive."""
    if margin >= thresholds.healthy:
        return MarginStatus.GREAT
    if margin >= thresholds.acceptable:
        return MarginStatus.OK
    return MarginStatus.LOW


def get_margin_health(
    margin: float,
    thresholds: MarginThresholds = DEFAULT_MARGIN_THRESHOLDS,
) -> MarginHealth:
    """
    Classify a margin percent into a health band.

    With the default bands: 70 -> healthy, 69.999 -> acceptable,
    50 -> acceptable, 49.999 -> low.
    """
    if margin >= thresholds.healthy:
        return MarginHealth.HEALTHY
    if margin >= thresholds.acceptable:
        return MarginHealth.ACCEPTABLE
    return MarginHealth.LOW


def get_margin_info(
    price: float,
    cogs: float,
    thresholds: MarginThresholds = DEFAULT_MARGIN_THRESHOLDS,
) -> MarginInfo:
    """Margin, profit and status for a single price point."""
    margin = calculate_gross_margin(price, cogs)
    return MarginInfo(
        margin=margin,
        profit=calculate_profit(price, cogs),
        status=get_margin_status(margin, thresholds),
    )


def calculate_margin_breakdown(
    price: float,
    variable_cost_per_customer: float,
    fixed_cost_per_customer: float,
    thresholds: MarginThresholds = DEFAULT_MARGIN_THRESHOLDS,
) -> dict:
    cogs = variable_cost_per_customer + fixed_cost_per_customer
    gross_margin = calculate_gross_margin(price, cogs)
    return {
        "grossMargin": gross_margin,
        "grossMarginHealth": get_margin_health(gross_margin, thresholds).value,
        "profit": calculate_profit(price, cogs),
        "cogs": cogs,
    }


def compare_price_points(
    price_points: Sequence[float],
    cogs: float,
    thresholds: MarginThresholds = DEFAULT_MARGIN_THRESHOLDS,
) -> list[dict]:
    """Margin, profit and status for each candidate price, in input order."""
    comparison = []
    for price in price_points:
        info = get_margin_info(price, cogs, thresholds)
        comparison.append({"price": price, **info.to_dict()})
    return comparison


def find_minimum_price_for_margin(cogs: float, target_margin: float) -> float | None:
    """
    Lowest price achieving target_margin percent.

    price = cogs / (1 - target_margin / 100)

    Returns None for targets of 100% or more, which no finite price reaches.
    """
    if target_margin >= 100:
        return None
    return cogs / (1 - target_margin / 100)


def is_margin_healthy(
    margin: float,
    thresholds: MarginThresholds = DEFAULT_MARGIN_THRESHOLDS,
) -> bool:
    return margin >= thresholds.healthy


def is_margin_acceptable(
    margin: float,
    thresholds: MarginThresholds = DEFAULT_MARGIN_THRESHOLDS,
) -> bool:
    return margin >= thresholds.acceptable
