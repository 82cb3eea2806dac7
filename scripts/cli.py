"""CLI for SaaS Pricer.

Usage:
    pricer cogs [--input costs.json] [--customers 100] [--price 29] [--output table|json|markdown]
                [--currency MYR] [--save out.txt]
    pricer thresholds
    pricer share --input report.json [--stakeholder investor] [--shape portable|legacy|short]
    pricer open URL
"""
import argparse
import json
import logging
import sys
from pathlib import Path

from backend.config import get_settings
from engines.constants import CURRENCIES
from engines.errors import PricingError
from engines.schemas.costs import CostBreakdown, FixedCostItem, OutputFormat, VariableCostItem
from engines.schemas.report import StakeholderType
from engines.services.cogs_calculator import (
    calculate_break_even_customers,
    calculate_cogs_breakdown,
    calculate_item_cost_per_customer,
)
from engines.services.margin_calculator import calculate_gross_margin, get_margin_health
from engines.services.validation import (
    collect_fixed_costs,
    collect_variable_costs,
    parse_costs_json,
    parse_positive_integer,
    parse_positive_number,
    validate_currency_code,
    validate_output_format,
)
from reports.codec import decode, decode_safe
from reports.store import get_report_store
from reports.urls import UrlShape, create_shareable_url, parse_report_url

logger = logging.getLogger(__name__)

SAMPLE_VARIABLE_COSTS = [
    VariableCostItem(
        id="api-1",
        name="AI API Calls",
        unit="1K tokens",
        cost_per_unit=0.03,
        usage_per_customer=100,
        description="LLM API usage",
    ),
    VariableCostItem(
        id="storage-1",
        name="Cloud Storage",
        unit="GB",
        cost_per_unit=0.10,
        usage_per_customer=2,
        description="File storage",
    ),
    VariableCostItem(
        id="email-1",
        name="Email Service",
        unit="email",
        cost_per_unit=0.005,
        usage_per_customer=50,
        description="Transactional emails",
    ),
]

SAMPLE_FIXED_COSTS = [
    FixedCostItem(id="hosting-1", name="Hosting", monthly_cost=50, description="Server hosting"),
    FixedCostItem(id="db-1", name="Database", monthly_cost=25, description="Managed database"),
]

HEALTH_ICONS = {"healthy": "🟢", "acceptable": "🟡", "low": "🔴"}


def load_costs(file_path: str) -> tuple[list[VariableCostItem], list[FixedCostItem]]:
    """Load a costs file, warning about and skipping invalid items."""
    path = Path(file_path)
    if not path.exists():
        raise PricingError(f"File not found: {file_path}")

    raw_variable, raw_fixed = parse_costs_json(path.read_text(encoding="utf-8"), file_path)

    variable = collect_variable_costs(raw_variable, allow_empty=True)
    fixed = collect_fixed_costs(raw_fixed, allow_empty=True)
    variable_costs, fixed_costs = variable.items, fixed.items
    warnings = variable.errors + fixed.errors

    if warnings:
        print("\nWarnings while parsing costs file:", file=sys.stderr)
        for warning in warnings:
            print(f"  - {warning}", file=sys.stderr)

    if not variable_costs and not fixed_costs:
        raise PricingError("No valid cost items found in file")

    logger.debug(
        f"Loaded {len(variable_costs)} variable and {len(fixed_costs)} fixed costs from {file_path}"
    )
    return variable_costs, fixed_costs


def _margin_analysis(breakdown: CostBreakdown, price: float) -> dict:
    settings = get_settings()
    margin = calculate_gross_margin(price, breakdown.total_cogs)
    return {
        "price": price,
        "margin": margin,
        "health": get_margin_health(margin, settings.margin_thresholds).value,
        "profit": price - breakdown.total_cogs,
        "breakEvenCustomers": calculate_break_even_customers(
            breakdown.fixed_total, price, breakdown.variable_total
        ),
    }


def format_json(variable_costs, fixed_costs, breakdown, customers, currency_code, price=None):
    result = {
        "customerCount": customers,
        "currency": currency_code,
        "breakdown": breakdown.to_dict(),
        "variableCosts": [c.to_dict() for c in variable_costs],
        "fixedCosts": [c.to_dict() for c in fixed_costs],
    }
    if price is not None:
        result["marginAnalysis"] = _margin_analysis(breakdown, price)
    return json.dumps(result, indent=2, ensure_ascii=False)


def format_table(variable_costs, fixed_costs, breakdown, customers, symbol, price=None):
    rows = [("Cost Item", "Type", "Per Unit", "Usage", "Per Customer")]
    for cost in variable_costs:
        rows.append((
            cost.name,
            "Variable",
            f"{symbol} {cost.cost_per_unit:.4f}",
            f"{cost.usage_per_customer:g} {cost.unit}",
            f"{symbol} {calculate_item_cost_per_customer(cost):.2f}",
        ))
    for cost in fixed_costs:
        per_customer = cost.monthly_cost / customers if customers > 0 else 0
        rows.append((
            cost.name,
            "Fixed",
            f"{symbol} {cost.monthly_cost:.2f}/mo",
            "-",
            f"{symbol} {per_customer:.2f}",
        ))
    rows.append(("Variable Total", "", "", "", f"{symbol} {breakdown.variable_total:.2f}"))
    rows.append((
        "Fixed Total", "", f"{symbol} {breakdown.fixed_total:.2f}/mo", "",
        f"{symbol} {breakdown.fixed_per_customer:.2f}",
    ))
    rows.append(("Total COGS", "", "", "", f"{symbol} {breakdown.total_cogs:.2f}"))

    widths = [max(len(row[i]) for row in rows) for i in range(len(rows[0]))]
    lines = ["", "COGS Breakdown", ""]
    for n, row in enumerate(rows):
        lines.append("  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip())
        if n == 0:
            lines.append("  ".join("-" * width for width in widths))

    if price is not None:
        analysis = _margin_analysis(breakdown, price)
        break_even = analysis["breakEvenCustomers"]
        lines += [
            "",
            "Margin Analysis",
            "",
            f"  Price:       {symbol} {price:.2f}",
            f"  COGS:        {symbol} {breakdown.total_cogs:.2f}",
            f"  Profit:      {symbol} {analysis['profit']:.2f}",
            f"  Margin:      {analysis['margin']:.1f}% ({analysis['health']})",
            f"  Break-even:  {break_even if break_even is not None else 'not reachable'} customers",
        ]
    return "\n".join(lines)


def format_markdown(variable_costs, fixed_costs, breakdown, customers, symbol, price=None):
    md = "## COGS Breakdown\n\n"
    md += "### Variable Costs (per customer)\n\n"
    md += "| Cost Item | Unit | Cost/Unit | Usage | Per Customer |\n"
    md += "|-----------|------|-----------|-------|-------------|\n"
    for cost in variable_costs:
        md += (
            f"| {cost.name} | {cost.unit} | {symbol} {cost.cost_per_unit:.4f} | "
            f"{cost.usage_per_customer:g} | {symbol} {calculate_item_cost_per_customer(cost):.2f} |\n"
        )
    md += f"| **Total Variable** | | | | **{symbol} {breakdown.variable_total:.2f}** |\n\n"

    md += "### Fixed Costs (monthly)\n\n"
    md += "| Cost Item | Monthly Cost | Per Customer |\n"
    md += "|-----------|-------------|-------------|\n"
    for cost in fixed_costs:
        per_customer = cost.monthly_cost / customers if customers > 0 else 0
        md += f"| {cost.name} | {symbol} {cost.monthly_cost:.2f} | {symbol} {per_customer:.2f} |\n"
    md += (
        f"| **Total Fixed** | **{symbol} {breakdown.fixed_total:.2f}** | "
        f"**{symbol} {breakdown.fixed_per_customer:.2f}** |\n\n"
    )

    md += "### Summary\n\n"
    md += f"- **Total COGS per customer**: {symbol} {breakdown.total_cogs:.2f}\n"
    md += f"- **Customer count**: {customers}\n"

    if price is not None:
        analysis = _margin_analysis(breakdown, price)
        break_even = analysis["breakEvenCustomers"]
        md += "\n## Margin Analysis\n\n"
        md += "| Metric | Value |\n|--------|-------|\n"
        md += f"| Price | {symbol} {price:.2f} |\n"
        md += f"| Profit | {symbol} {analysis['profit']:.2f} |\n"
        md += f"| Gross Margin | {analysis['margin']:.1f}% {HEALTH_ICONS[analysis['health']]} |\n"
        md += f"| Break-even | {break_even if break_even is not None else 'N/A'} customers |\n"
    return md


def cmd_cogs(args):
    """Calculate COGS and margins."""
    output_format = validate_output_format(args.output)
    customers = parse_positive_integer(args.customers, "Customer count")
    currency_code = validate_currency_code(args.currency or get_settings().default_currency.value)
    symbol = CURRENCIES[currency_code].symbol
    price = parse_positive_number(args.price, "Price") if args.price is not None else None

    if args.input:
        variable_costs, fixed_costs = load_costs(args.input)
    else:
        variable_costs, fixed_costs = SAMPLE_VARIABLE_COSTS, SAMPLE_FIXED_COSTS
        print("Using sample data. Use --input to provide your own costs.json\n", file=sys.stderr)

    breakdown = calculate_cogs_breakdown(variable_costs, fixed_costs, customers)

    if output_format == OutputFormat.JSON:
        output = format_json(variable_costs, fixed_costs, breakdown, customers, currency_code.value, price)
    elif output_format == OutputFormat.MARKDOWN:
        output = format_markdown(variable_costs, fixed_costs, breakdown, customers, symbol, price)
    else:
        output = format_table(variable_costs, fixed_costs, breakdown, customers, symbol, price)

    print(output)

    if args.save:
        Path(args.save).write_text(output, encoding="utf-8")
        print(f"\n✓ Saved to {args.save}")


def cmd_thresholds(args):
    """Show margin health thresholds."""
    thresholds = get_settings().margin_thresholds
    print("Gross margin health bands:")
    print(f"  🟢 healthy     >= {thresholds.healthy:g}%")
    print(f"  🟡 acceptable  >= {thresholds.acceptable:g}%")
    print(f"  🔴 low         <  {thresholds.acceptable:g}%")


def cmd_share(args):
    """Create a shareable link for a report file."""
    path = Path(args.input)
    if not path.exists():
        raise PricingError(f"File not found: {args.input}")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise PricingError(f"Invalid JSON in {args.input}: {e.msg}") from e

    report = decode_safe(raw)
    if report is None:
        raise PricingError(f"{args.input} does not contain a valid report")

    shape = UrlShape(args.shape)
    store = None
    if shape == UrlShape.SHORT:
        store = get_report_store()

    base_url = args.base_url or get_settings().share_base_url
    print(create_shareable_url(base_url, report, StakeholderType(args.stakeholder), shape, store))


def cmd_open(args):
    """Resolve a report link and summarize the report."""
    parsed = parse_report_url(args.url)
    if parsed is None:
        raise PricingError(f"Not a report link: {args.url}")

    if parsed.shape == UrlShape.SHORT:
        report = get_report_store().retrieve(parsed.token)
        if report is None:
            raise PricingError(f"Report {parsed.token} not found or expired")
    else:
        report = decode(parsed.token)

    state = report.state
    breakdown = calculate_cogs_breakdown(
        state.variable_costs, state.fixed_costs, state.customer_count, state.utilization_rate
    )
    print(f"📄 {report.project_name} ({parsed.shape.value} link, for {parsed.stakeholder.value})")
    print(f"   Created:   {report.created_at}")
    print(f"   Customers: {state.customer_count}")
    print(f"   COGS:      {breakdown.total_cogs:.2f} per customer")
    if state.selected_price > 0:
        analysis = _margin_analysis(breakdown, state.selected_price)
        print(f"   Margin:    {analysis['margin']:.1f}% ({analysis['health']}) at {state.selected_price:.2f}")
    note = getattr(report.notes, parsed.stakeholder.value)
    if note:
        print(f"   Note:      {note}")


def main(argv=None):
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    parser = argparse.ArgumentParser(
        prog="pricer",
        description="SaaS Pricer CLI: COGS, margins and shareable pricing reports",
    )
    sub = parser.add_subparsers(dest="command", help="Command")

    # cogs
    p = sub.add_parser("cogs", help="Calculate COGS and margins")
    p.add_argument("--input", "-i", help="JSON file with variableCosts and fixedCosts")
    p.add_argument("--customers", "-c", default=str(settings.default_customer_count),
                   help="Number of customers (positive integer)")
    p.add_argument("--price", "-p", help="Price per customer for margin analysis")
    p.add_argument("--output", "-o", default="table", help="Output format: table, json, markdown")
    p.add_argument("--currency", help="Currency code (MYR, USD, SGD, EUR, GBP, AUD)")
    p.add_argument("--save", help="Save output to file")

    # thresholds
    sub.add_parser("thresholds", help="Show margin health thresholds")

    # share
    p = sub.add_parser("share", help="Create a shareable report link")
    p.add_argument("--input", "-i", required=True, help="JSON file with a report")
    p.add_argument("--stakeholder", "-s", default="investor",
                   choices=["accountant", "investor", "engineer", "marketer"])
    p.add_argument("--shape", default="portable", choices=["portable", "legacy", "short"])
    p.add_argument("--base-url", help="Link origin (default: SHARE_BASE_URL)")

    # open
    p = sub.add_parser("open", help="Resolve a report link")
    p.add_argument("url", help="Short, portable or legacy report link")

    args = parser.parse_args(argv)

    commands = {
        "cogs": cmd_cogs,
        "thresholds": cmd_thresholds,
        "share": cmd_share,
        "open": cmd_open,
    }

    if args.command not in commands:
        parser.print_help()
        sys.exit(1)

    try:
        commands[args.command](args)
    except (PricingError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
