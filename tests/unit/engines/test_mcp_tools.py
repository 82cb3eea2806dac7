"""
MCP Tool Unit Tests

The tool functions are plain coroutines; they are awaited directly here.
"""

import math

import pytest

from engines.errors import CostCollectionTypeError, InvalidFieldError
from engines.tools.ai_cost_engine import estimate_ai_cost
from engines.tools.cogs_engine import (
    calculate_break_even,
    calculate_cogs,
    calculate_margins,
    get_margin_thresholds,
    mcp,
)
from engines.tools.investor_engine import calculate_investor_metrics
from engines.tools.report_tools import decode_report, encode_report


class TestCogsTool:
    """Test the calculate_cogs tool."""

    @pytest.mark.asyncio
    async def test_reference_scenario(self, variable_cost_dicts, fixed_cost_dicts):
        result = await calculate_cogs(variable_cost_dicts, fixed_cost_dicts, 100)

        assert result["customerCount"] == 100
        assert result["currency"] == "MYR"
        assert result["breakdown"]["totalCOGS"] == pytest.approx(3.95)
        assert result["fixedCosts"][0]["costPerCustomer"] == pytest.approx(0.50)
        assert result["warnings"] == []
        assert result["summary"] == (
            "Total COGS per customer: RM 3.95 (Variable: RM 3.20, Fixed: RM 0.75)"
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("customer_count", [None, 0, -5, math.nan])
    async def test_customer_count_falls_back_to_default(
        self, variable_cost_dicts, fixed_cost_dicts, customer_count
    ):
        result = await calculate_cogs(variable_cost_dicts, fixed_cost_dicts, customer_count)

        assert result["customerCount"] == 100

    @pytest.mark.asyncio
    async def test_invalid_items_reported_as_warnings(self, variable_cost_dicts, fixed_cost_dicts):
        result = await calculate_cogs(
            variable_cost_dicts + [{"name": "broken"}], fixed_cost_dicts, 100
        )

        assert len(result["variableCosts"]) == 2
        assert result["warnings"] == ["variableCosts[2]: id is required"]

    @pytest.mark.asyncio
    async def test_currency_symbol(self, variable_cost_dicts, fixed_cost_dicts):
        result = await calculate_cogs(variable_cost_dicts, fixed_cost_dicts, 100, "USD")

        assert result["currency"] == "USD"
        assert result["summary"].startswith("Total COGS per customer: $ 3.95")

    @pytest.mark.asyncio
    async def test_non_array_rejected(self, fixed_cost_dicts):
        with pytest.raises(CostCollectionTypeError):
            await calculate_cogs("costs", fixed_cost_dicts)

    @pytest.mark.asyncio
    async def test_unknown_currency_rejected(self, variable_cost_dicts, fixed_cost_dicts):
        with pytest.raises(InvalidFieldError):
            await calculate_cogs(variable_cost_dicts, fixed_cost_dicts, 100, "JPY")


class TestMarginTools:
    """Test the margin, break-even and threshold tools."""

    @pytest.mark.asyncio
    async def test_margins(self):
        result = await calculate_margins(29, 3.95)

        assert result["grossMargin"] == pytest.approx(86.379, abs=1e-3)
        assert result["marginHealth"] == "healthy"
        assert result["marginStatus"] == "great"
        assert result["isHealthy"] is True
        assert result["recommendations"] == ["Margins are healthy"]

    @pytest.mark.asyncio
    async def test_low_margin_recommendation(self):
        result = await calculate_margins(10, 8)

        assert result["marginHealth"] == "low"
        assert result["isAcceptable"] is False
        assert "increasing price" in result["recommendations"][0]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("price,cogs", [(0, 1), (-1, 1), (10, -1), ("10", 1)])
    async def test_margins_reject_invalid(self, price, cogs):
        with pytest.raises(InvalidFieldError):
            await calculate_margins(price, cogs)

    @pytest.mark.asyncio
    async def test_break_even(self):
        result = await calculate_break_even(75, 29, 3.20)

        assert result["breakEvenCustomers"] == 3
        assert result["canBreakEven"] is True
        assert result["contributionMargin"] == pytest.approx(25.8)
        assert result["contributionMarginPercent"] == 89.0
        assert result["summary"] == "Need 3 customers to break even"

    @pytest.mark.asyncio
    async def test_break_even_unreachable(self):
        result = await calculate_break_even(75, 3, 3.20)

        assert result["breakEvenCustomers"] is None
        assert result["canBreakEven"] is False
        assert result["summary"].startswith("Cannot break even")

    @pytest.mark.asyncio
    async def test_thresholds(self):
        result = await get_margin_thresholds()

        assert result["thresholds"]["healthy"] == 70
        assert result["thresholds"]["acceptable"] == 50
        assert result["explanation"]["low"].startswith("< 50%")


class TestInvestorTool:
    """Test the calculate_investor_metrics tool."""

    @pytest.mark.asyncio
    async def test_metrics(self):
        result = await calculate_investor_metrics(
            mrr=2900,
            paid_customers=100,
            arpu=29,
            gross_margin=86.4,
            break_even_customers=2.4,
            monthly_growth_rate=0.05,
            ltv=600,
            estimated_cac=200,
        )

        assert result["metrics"]["arr"] == 34800
        assert result["metrics"]["breakEvenCustomers"] == 3
        assert result["health"] == {
            "grossMarginHealth": "healthy",
            "ltvCacHealth": "healthy",
            "paybackHealth": "healthy",
        }
        assert result["valuationSummary"]["mid"] == "0.3M (10x ARR)"

    @pytest.mark.asyncio
    async def test_unreachable_break_even(self):
        result = await calculate_investor_metrics(
            mrr=2900,
            paid_customers=100,
            arpu=29,
            gross_margin=-5,
            break_even_customers=None,
            monthly_growth_rate=0.05,
            ltv=600,
        )

        assert result["metrics"]["breakEvenCustomers"] is None
        assert result["metrics"]["monthsToBreakEven"] is None
        assert result["health"]["grossMarginHealth"] == "low"
        assert result["health"]["ltvCacHealth"] == "concerning"

    @pytest.mark.asyncio
    async def test_rejects_non_positive_mrr(self):
        with pytest.raises(InvalidFieldError, match="mrr must be positive"):
            await calculate_investor_metrics(
                mrr=0,
                paid_customers=100,
                arpu=29,
                gross_margin=80,
                break_even_customers=3,
                monthly_growth_rate=0.05,
                ltv=600,
            )


class TestAiCostTool:
    """Test the estimate_ai_cost tool."""

    @pytest.mark.asyncio
    async def test_monthly_estimate(self):
        result = await estimate_ai_cost(
            "openai", 1000, 500, requests_per_customer=100, customer_count=10
        )

        # (1000 × 2.50 + 500 × 10.00) / 1M = 0.0075 per request
        assert result["model"] == "GPT-4o"
        assert result["perRequest"]["costUSD"] == pytest.approx(0.0075)
        assert result["monthly"]["totalRequests"] == 1000
        assert result["monthly"]["totalCostUSD"] == pytest.approx(7.5)
        assert result["monthly"]["costPerCustomerUSD"] == pytest.approx(0.75)

    @pytest.mark.asyncio
    async def test_defaults_to_one_request_and_customer(self):
        result = await estimate_ai_cost("groq", 1000, 1000, requests_per_customer=-2)

        assert result["monthly"]["requestsPerCustomer"] == 1
        assert result["monthly"]["customerCount"] == 1

    @pytest.mark.asyncio
    async def test_unknown_provider(self):
        with pytest.raises(InvalidFieldError, match="Invalid AI provider"):
            await estimate_ai_cost("acme", 1000, 1000)


class TestReportTools:
    """Test the report encode/decode tools."""

    @pytest.mark.asyncio
    async def test_encode_then_decode(self, report_dict):
        encoded = await encode_report(report_dict, stakeholder="investor")

        assert encoded["length"] == len(encoded["token"])
        assert "/report/investor?d=" in encoded["url"]

        decoded = await decode_report(encoded["token"])
        assert decoded["projectName"] == "Acme Analytics"
        assert decoded["state"]["customerCount"] == 100

    @pytest.mark.asyncio
    async def test_encode_without_stakeholder(self, report_dict):
        encoded = await encode_report(report_dict)

        assert encoded["url"] is None


@pytest.mark.asyncio
async def test_all_tools_registered():
    """Every engine tool is exposed by the shared MCP server."""
    import engines.server  # noqa: F401

    tools = await mcp.get_tools()

    assert {
        "calculate_cogs",
        "calculate_margins",
        "calculate_break_even",
        "get_margin_thresholds",
        "calculate_investor_metrics",
        "estimate_ai_cost",
        "encode_report",
        "decode_report",
    } <= set(tools)
