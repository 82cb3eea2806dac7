"""
AI Cost Calculator

Token-based cost estimates for LLM API usage, used to size AI-driven
variable costs (e.g. "1K tokens" cost items).
"""

from engines.schemas.ai_cost import AICostBreakdown, ModelPricing, ProviderPricing
from engines.schemas.costs import AIProvider

DEFAULT_USD_TO_MYR_RATE = 4.47

TOKENS_PER_MILLION = 1_000_000


def _model(
    name: str,
    display_name: str,
    input_price: float,
    output_price: float,
    context_window: int,
    notes: str | None = None,
) -> ModelPricing:
    return ModelPricing(
        name=name,
        display_name=display_name,
        input_price_per_million=input_price,
        output_price_per_million=output_price,
        context_window=context_window,
        notes=notes,
    )


def _provider(
    provider: AIProvider,
    provider_name: str,
    default_model: str,
    *models: ModelPricing,
) -> ProviderPricing:
    return ProviderPricing(
        provider=provider,
        provider_name=provider_name,
        default_model=default_model,
        models={m.name: m for m in models},
    )


# USD per million tokens
AI_PRICING: dict[AIProvider, ProviderPricing] = {
    AIProvider.OPENAI: _provider(
        AIProvider.OPENAI,
        "OpenAI",
        "gpt-4o",
        _model("gpt-4o", "GPT-4o", 2.50, 10.00, 128_000),
        _model("gpt-4o-mini", "GPT-4o Mini", 0.15, 0.60, 128_000),
        _model("gpt-4-turbo", "GPT-4 Turbo", 10.00, 30.00, 128_000),
    ),
    AIProvider.ANTHROPIC: _provider(
        AIProvider.ANTHROPIC,
        "Anthropic",
        "claude-sonnet-4-20250514",
        _model("claude-sonnet-4-20250514", "Claude Sonnet 4", 3.00, 15.00, 200_000),
        _model("claude-3-5-sonnet-20241022", "Claude 3.5 Sonnet", 3.00, 15.00, 200_000),
        _model("claude-3-haiku-20240307", "Claude 3 Haiku", 0.25, 1.25, 200_000),
    ),
    AIProvider.OPENROUTER: _provider(
        AIProvider.OPENROUTER,
        "OpenRouter",
        "anthropic/claude-3.5-sonnet",
        _model(
            "anthropic/claude-3.5-sonnet",
            "Claude 3.5 Sonnet (via OpenRouter)",
            3.00,
            15.00,
            200_000,
            "OpenRouter adds small markup",
        ),
        _model(
            "openai/gpt-4o",
            "GPT-4o (via OpenRouter)",
            2.50,
            10.00,
            128_000,
            "OpenRouter adds small markup",
        ),
    ),
    AIProvider.MINIMAX: _provider(
        AIProvider.MINIMAX,
        "MiniMax",
        "MiniMax-M2.1",
        _model("MiniMax-M2.1", "MiniMax M2.1", 0.12, 0.60, 200_000, "Excellent for coding tasks"),
        _model("MiniMax-M1", "MiniMax M1", 0.40, 2.20, 1_000_000, "Reasoning model with 1M context"),
    ),
    AIProvider.GLM: _provider(
        AIProvider.GLM,
        "GLM (Zhipu)",
        "glm-4.7",
        _model("glm-4.7", "GLM-4.7", 0.60, 2.20, 200_000),
        _model("glm-4.5-flash", "GLM-4.5 Flash", 0.00, 0.00, 131_000, "Free tier available"),
    ),
    AIProvider.GROQ: _provider(
        AIProvider.GROQ,
        "Groq",
        "llama-3.3-70b-versatile",
        _model("llama-3.3-70b-versatile", "Llama 3.3 70B", 0.59, 0.79, 128_000),
        _model("mixtral-8x7b-32768", "Mixtral 8x7B", 0.24, 0.24, 32_768),
    ),
}


def get_pricing_for_model(provider: AIProvider, model: str | None = None) -> ModelPricing:
    """Pricing for a model; unknown or missing names fall back to the provider default."""
    provider_pricing = AI_PRICING[provider]
    if model and model in provider_pricing.models:
        return provider_pricing.models[model]
    return provider_pricing.models[provider_pricing.default_model]


def calculate_token_cost(
    input_tokens: int,
    output_tokens: int,
    provider: AIProvider,
    model: str | None = None,
    exchange_rate: float = DEFAULT_USD_TO_MYR_RATE,
) -> AICostBreakdown:
    """
    Cost of one usage record.

    Negative token counts are treated as 0.
    """
    input_tokens = max(0, input_tokens)
    output_tokens = max(0, output_tokens)
    pricing = get_pricing_for_model(provider, model)

    input_cost = input_tokens / TOKENS_PER_MILLION * pricing.input_price_per_million
    output_cost = output_tokens / TOKENS_PER_MILLION * pricing.output_price_per_million
    total_usd = input_cost + output_cost

    return AICostBreakdown(
        input_cost=input_cost,
        output_cost=output_cost,
        total_cost_usd=total_usd,
        total_cost_myr=total_usd * exchange_rate,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        provider=provider,
        model_name=pricing.display_name,
    )
