"""
COGS Calculator

Pure calculation logic for per-customer Cost of Goods Sold.
Inputs are validated cost collections; outputs never contain NaN or
infinite values.
"""

import math
from collections.abc import Mapping, Sequence

from engines.schemas.costs import CostBreakdown, FixedCostItem, VariableCostItem


def calculate_item_cost_per_customer(
    item: VariableCostItem,
    utilization_rate: float = 1.0,
) -> float:
    """Cost of a single variable item for one customer."""
    return item.cost_per_unit * item.usage_per_customer * utilization_rate


def calculate_variable_costs(
    variable_costs: Sequence[VariableCostItem],
    utilization_rate: float = 1.0,
) -> float:
    """Total variable cost per customer."""
    return sum(
        (calculate_item_cost_per_customer(item, utilization_rate) for item in variable_costs),
        0.0,
    )


def calculate_total_variable_costs(
    variable_costs: Sequence[VariableCostItem],
    customer_count: int,
    utilization_rate: float = 1.0,
) -> float:
    """Variable cost across all customers."""
    return calculate_variable_costs(variable_costs, utilization_rate) * customer_count


def calculate_total_fixed_costs(fixed_costs: Sequence[FixedCostItem]) -> float:
    """Monthly fixed costs."""
    return sum((item.monthly_cost for item in fixed_costs), 0.0)


def calculate_fixed_cost_per_customer(
    fixed_costs: Sequence[FixedCostItem],
    customer_count: int,
) -> float:
    """Fixed costs allocated per customer; 0 when there are no customers."""
    if customer_count <= 0:
        return 0.0
    return calculate_total_fixed_costs(fixed_costs) / customer_count


def calculate_cogs_breakdown(
    variable_costs: Sequence[VariableCostItem],
    fixed_costs: Sequence[FixedCostItem],
    customer_count: int,
    utilization_rate: float = 1.0,
) -> CostBreakdown:
    """
    Calculate the per-customer COGS breakdown.

    With zero customers the fixed costs have nobody to be allocated to, so
    fixed_per_customer is 0 and total_cogs is the variable cost alone. The
    fixed total is still reported, so the unallocated amount stays visible.

    Algorithm:
    1. variable_total = Σ cost_per_unit × usage_per_customer × utilization
    2. fixed_total = Σ monthly_cost
    3. fixed_per_customer = fixed_total / customer_count (0 if no customers)
    4. total_cogs = variable_total + fixed_per_customer
    """
    variable_total = calculate_variable_costs(variable_costs, utilization_rate)
    fixed_total = calculate_total_fixed_costs(fixed_costs)
    fixed_per_customer = fixed_total / customer_count if customer_count > 0 else 0.0

    return CostBreakdown(
        variable_total=variable_total,
        fixed_total=fixed_total,
        fixed_per_customer=fixed_per_customer,
        total_cogs=variable_total + fixed_per_customer,
    )


def calculate_mrr(
    tier_prices: Mapping[str, float],
    tier_distribution: Mapping[str, float],
) -> float:
    """MRR of a tier distribution; tiers without a known price contribute 0."""
    return sum(
        (tier_prices.get(tier_id, 0.0) * count for tier_id, count in tier_distribution.items()),
        0.0,
    )


def calculate_monthly_profit(
    mrr: float,
    total_variable_costs: float,
    total_fixed_costs: float,
) -> float:
    return mrr - total_variable_costs - total_fixed_costs


def calculate_break_even_customers(
    fixed_total: float,
    price: float,
    variable_cost_per_customer: float,
) -> int | None:
    """
    Customers needed for contribution margin to cover fixed costs.

    Break-even = ceil(fixed_total / (price - variable_cost_per_customer))

    Returns None when every customer loses money (contribution margin
    <= 0), since no customer count can ever break even. Returns 0 when
    there are no fixed costs to cover.
    """
    contribution = price - variable_cost_per_customer
    if contribution <= 0:
        return None
    if fixed_total <= 0:
        return 0
    return math.ceil(fixed_total / contribution)
