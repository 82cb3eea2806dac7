"""
COGS Engine MCP Tools

COGS breakdown, margin, break-even and threshold lookups exposed as MCP
tools. Every argument passes through the cost validators before it
reaches a calculator.
"""

from typing import Any

from fastmcp import FastMCP

from backend.config import get_settings
from engines.constants import CURRENCIES
from engines.schemas.costs import CurrencyCode, MarginHealth
from engines.services.cogs_calculator import (
    calculate_break_even_customers,
    calculate_cogs_breakdown,
    calculate_item_cost_per_customer,
)
from engines.services.margin_calculator import (
    calculate_gross_margin,
    calculate_profit,
    get_margin_health,
    get_margin_status,
    is_margin_acceptable,
    is_margin_healthy,
)
from engines.services.validation import (
    collect_fixed_costs,
    collect_variable_costs,
    positive_or_default,
    validate_currency_code,
    validate_non_negative_number,
    validate_positive_number,
)

settings = get_settings()

# Initialize MCP server (will be started from server.py)
mcp = FastMCP(
    "SaaS Pricer Engines",
    instructions=(
        "Pricing and unit-economics calculators for SaaS products: COGS breakdowns, "
        "gross margins, break-even customer counts, investor metrics, AI token costs "
        "and shareable report encoding. Unreachable results are returned as null."
    ),
)

MARGIN_RECOMMENDATIONS = {
    MarginHealth.HEALTHY: "Margins are healthy",
    MarginHealth.ACCEPTABLE: "Margins are acceptable but could be improved",
    MarginHealth.LOW: "Consider reducing costs or increasing price to improve margins",
}


def _resolve_currency(currency: Any) -> CurrencyCode:
    if currency is None:
        return settings.default_currency
    return validate_currency_code(currency)


async def calculate_cogs(
    variable_costs: list[dict],
    fixed_costs: list[dict],
    customer_count: float | None = None,
    currency: str | None = None,
) -> dict:
    """
    Calculate the Cost of Goods Sold breakdown per customer.

    Invalid cost items are dropped and reported under "warnings" as long
    as at least one item of each non-empty list is valid.

    Args:
        variable_costs: Items with name, unit, costPerUnit, usagePerCustomer
        fixed_costs: Items with name and monthlyCost
        customer_count: Customers sharing the fixed costs (default: 100)
        currency: Display currency code (default: MYR)

    Returns:
        Dictionary with per-customer variable, fixed and total COGS

    Example:
        Variable: 0.03/1K tokens × 100 + 0.10/GB × 2 = 3.20
        Fixed: (50 + 25) / 100 customers = 0.75
        Total COGS per customer = 3.95
    """
    count = positive_or_default(customer_count, settings.default_customer_count)
    currency_code = _resolve_currency(currency)
    symbol = CURRENCIES[currency_code].symbol

    variable = collect_variable_costs(variable_costs)
    fixed = collect_fixed_costs(fixed_costs)

    breakdown = calculate_cogs_breakdown(variable.items, fixed.items, count)

    return {
        "customerCount": count,
        "currency": currency_code.value,
        "breakdown": breakdown.to_dict(),
        "variableCosts": [
            {"name": item.name, "costPerCustomer": calculate_item_cost_per_customer(item)}
            for item in variable.items
        ],
        "fixedCosts": [
            {
                "name": item.name,
                "monthlyCost": item.monthly_cost,
                "costPerCustomer": item.monthly_cost / count,
            }
            for item in fixed.items
        ],
        "warnings": variable.errors + fixed.errors,
        "summary": (
            f"Total COGS per customer: {symbol} {breakdown.total_cogs:.2f} "
            f"(Variable: {symbol} {breakdown.variable_total:.2f}, "
            f"Fixed: {symbol} {breakdown.fixed_per_customer:.2f})"
        ),
    }


async def calculate_margins(
    price: float,
    cogs: float,
    currency: str | None = None,
) -> dict:
    """
    Calculate gross margin, profit and health for a price point.

    Args:
        price: Price per customer per month (must be positive)
        cogs: COGS per customer (must be non-negative)
        currency: Display currency code (default: MYR)

    Returns:
        Dictionary with margin percent, profit, health band and a recommendation
    """
    price = validate_positive_number(price, "price")
    cogs = validate_non_negative_number(cogs, "cogs")
    currency_code = _resolve_currency(currency)
    symbol = CURRENCIES[currency_code].symbol
    thresholds = settings.margin_thresholds

    margin = calculate_gross_margin(price, cogs)
    profit = calculate_profit(price, cogs)
    health = get_margin_health(margin, thresholds)

    return {
        "price": price,
        "cogs": cogs,
        "currency": currency_code.value,
        "profit": profit,
        "grossMargin": margin,
        "marginHealth": health.value,
        "marginStatus": get_margin_status(margin, thresholds).value,
        "isHealthy": is_margin_healthy(margin, thresholds),
        "isAcceptable": is_margin_acceptable(margin, thresholds),
        "summary": (
            f"Gross margin: {margin:.1f}% ({health.value}). "
            f"Profit per customer: {symbol} {profit:.2f}"
        ),
        "recommendations": [MARGIN_RECOMMENDATIONS[health]],
    }


async def calculate_break_even(
    total_fixed_costs: float,
    price_per_customer: float,
    variable_cost_per_customer: float,
) -> dict:
    """
    Calculate the customers needed to cover fixed costs.

    Args:
        total_fixed_costs: Monthly fixed costs (must be non-negative)
        price_per_customer: Price per customer per month (must be positive)
        variable_cost_per_customer: Variable cost per customer (must be non-negative)

    Returns:
        Dictionary with breakEvenCustomers (null when price does not
        exceed variable cost) and the contribution margin
    """
    fixed_total = validate_non_negative_number(total_fixed_costs, "totalFixedCosts")
    price = validate_positive_number(price_per_customer, "pricePerCustomer")
    variable_cost = validate_non_negative_number(
        variable_cost_per_customer, "variableCostPerCustomer"
    )

    break_even = calculate_break_even_customers(fixed_total, price, variable_cost)
    contribution = price - variable_cost

    if break_even is None:
        summary = "Cannot break even with current pricing - price must exceed variable costs"
    else:
        summary = f"Need {break_even} customers to break even"

    return {
        "breakEvenCustomers": break_even,
        "canBreakEven": break_even is not None,
        "totalFixedCosts": fixed_total,
        "pricePerCustomer": price,
        "variableCostPerCustomer": variable_cost,
        "contributionMargin": contribution,
        "contributionMarginPercent": round(contribution / price * 100, 1),
        "summary": summary,
    }


async def get_margin_thresholds() -> dict:
    """
    Get the SaaS gross margin bands used for health classification.

    Returns:
        Dictionary with the thresholds, what each band means, and benchmarks
    """
    thresholds = settings.margin_thresholds
    return {
        "thresholds": thresholds.to_dict(),
        "explanation": {
            "healthy": f">= {thresholds.healthy:g}% - Healthy SaaS gross margin",
            "acceptable": f">= {thresholds.acceptable:g}% - Acceptable but room for improvement",
            "low": f"< {thresholds.acceptable:g}% - Concerning, review pricing or costs",
        },
        "industryBenchmarks": {
            "topQuartile": "80%+",
            "median": "70%",
            "bottomQuartile": "50-60%",
        },
    }


for _tool in (calculate_cogs, calculate_margins, calculate_break_even, get_margin_thresholds):
    mcp.tool()(_tool)
