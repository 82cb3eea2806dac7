"""
AI Cost Schemas

Token pricing tables and per-call cost results for LLM providers.
"""

from pydantic import ConfigDict, Field

from engines.schemas.base import CamelModel
from engines.schemas.costs import AIProvider


class ModelPricing(CamelModel):
    """Per-model token pricing in USD per million tokens."""

    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str
    input_price_per_million: float = Field(..., ge=0)
    output_price_per_million: float = Field(..., ge=0)
    context_window: int
    notes: str | None = None


class ProviderPricing(CamelModel):
    """Models offered by one provider and the one used when none is named."""

    model_config = ConfigDict(frozen=True)

    provider: AIProvider
    provider_name: str
    default_model: str
    models: dict[str, ModelPricing]


class AICostBreakdown(CamelModel):
    """Cost of a single token usage record."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    input_cost: float = Field(..., description="Input token cost in USD")
    output_cost: float = Field(..., description="Output token cost in USD")
    total_cost_usd: float = Field(..., alias="totalCostUSD")
    total_cost_myr: float = Field(..., alias="totalCostMYR")
    input_tokens: int
    output_tokens: int
    provider: AIProvider
    model_name: str
