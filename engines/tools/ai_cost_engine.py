"""
AI Cost MCP Tool

Monthly LLM API cost estimate exposed as an MCP tool.
"""

from backend.config import get_settings
from engines.services.ai_cost_calculator import calculate_token_cost
from engines.services.validation import (
    get_number_or_default,
    validate_ai_provider,
    validate_positive_number,
)
from engines.tools.cogs_engine import mcp

settings = get_settings()


async def estimate_ai_cost(
    provider: str,
    estimated_input_tokens: float,
    estimated_output_tokens: float,
    model: str | None = None,
    requests_per_customer: float | None = None,
    customer_count: float | None = None,
) -> dict:
    """
    Estimate AI/LLM API costs from expected usage.

    Args:
        provider: openai, anthropic, openrouter, minimax, glm or groq
        estimated_input_tokens: Input tokens per request (must be positive)
        estimated_output_tokens: Output tokens per request (must be positive)
        model: Model id; the provider default is used when omitted or unknown
        requests_per_customer: Requests per customer per month (default: 1)
        customer_count: Customers (default: 1)

    Returns:
        Dictionary with per-request and monthly costs in USD and MYR
    """
    provider_code = validate_ai_provider(provider)
    input_tokens = validate_positive_number(estimated_input_tokens, "estimatedInputTokens")
    output_tokens = validate_positive_number(estimated_output_tokens, "estimatedOutputTokens")
    args = {"requestsPerCustomer": requests_per_customer, "customerCount": customer_count}
    requests = get_number_or_default(args, "requestsPerCustomer", 1)
    customers = get_number_or_default(args, "customerCount", 1)

    per_request = calculate_token_cost(
        int(input_tokens),
        int(output_tokens),
        provider_code,
        model if isinstance(model, str) else None,
        exchange_rate=settings.usd_to_myr_rate,
    )

    total_requests = requests * customers
    total_usd = per_request.total_cost_usd * total_requests
    total_myr = per_request.total_cost_myr * total_requests

    return {
        "provider": provider_code.value,
        "model": per_request.model_name,
        "perRequest": {
            "inputTokens": per_request.input_tokens,
            "outputTokens": per_request.output_tokens,
            "costUSD": per_request.total_cost_usd,
            "costMYR": per_request.total_cost_myr,
        },
        "monthly": {
            "requestsPerCustomer": requests,
            "customerCount": customers,
            "totalRequests": total_requests,
            "totalCostUSD": total_usd,
            "totalCostMYR": total_myr,
            "costPerCustomerUSD": total_usd / customers,
            "costPerCustomerMYR": total_myr / customers,
        },
        "summary": (
            f"Est. {total_usd:.4f} USD ({total_myr:.2f} MYR) per month "
            f"for {customers:g} customers"
        ),
    }


mcp.tool()(estimate_ai_cost)
