"""
Report Schemas

Pricing-state snapshot and shareable report models. These guard every
payload that comes back from a share link or the report store.
"""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr, field_validator

from engines.schemas.base import CamelModel, NonNegativeAmount, UnitInterval
from engines.schemas.costs import FixedCostItem, VariableCostItem


class BusinessType(str, Enum):
    """Detected or selected business archetype."""
    API_SERVICE = "api_service"
    MARKETPLACE = "marketplace"
    FINTECH = "fintech"
    AI_ML_SAAS = "ai_ml_saas"
    DEVELOPER_TOOLS = "developer_tools"
    B2B_SAAS = "b2b_saas"
    CONSUMER_SAAS = "consumer_saas"
    GENERIC = "generic"


class PricingModelType(str, Enum):
    """Pricing model families."""
    USAGE_BASED = "usage_based"
    SEAT_BASED = "seat_based"
    FEATURE_TIERED = "feature_tiered"
    TAKE_RATE = "take_rate"
    HYBRID = "hybrid"
    FREEMIUM = "freemium"


class StakeholderType(str, Enum):
    """Report audiences."""
    ACCOUNTANT = "accountant"
    INVESTOR = "investor"
    ENGINEER = "engineer"
    MARKETER = "marketer"


class TierLimit(CamelModel):
    """Usage limit of one feature within a tier."""

    feature_id: StrictStr = Field(..., min_length=1)
    limit: StrictBool | StrictFloat | Literal["unlimited"]
    unit: StrictStr | None = None


class Tier(CamelModel):
    """Pricing tier as configured in the tier editor."""

    id: StrictStr = Field(..., min_length=1)
    name: StrictStr = Field(..., min_length=1)
    tagline: StrictStr
    monthly_price_myr: NonNegativeAmount = Field(..., alias="monthlyPriceMYR")
    annual_price_myr: NonNegativeAmount = Field(..., alias="annualPriceMYR")
    annual_discount: StrictFloat = Field(..., ge=0, le=100)
    status: Literal["active", "coming_soon", "internal"]
    target_audience: StrictStr
    limits: list[TierLimit]
    included_features: list[StrictStr]
    excluded_features: list[StrictStr]
    highlight_features: list[StrictStr]


class TierDisplayConfig(CamelModel):
    """Presentation settings of a tier card."""

    highlighted: StrictBool
    highlighted_features: list[StrictStr]
    cta_text: StrictStr
    cta_style: Literal["primary", "secondary", "outline"]
    badge_text: StrictStr
    show_limits: StrictBool
    max_visible_features: StrictInt = Field(..., gt=0)
    monthly_price: NonNegativeAmount
    annual_price: NonNegativeAmount
    tagline: StrictStr


class Feature(CamelModel):
    """Product feature, detected from a codebase or entered manually."""

    id: StrictStr = Field(..., min_length=1)
    name: StrictStr = Field(..., min_length=1)
    description: StrictStr
    category: StrictStr = Field(..., min_length=1)
    complexity: Literal["low", "medium", "high"]
    has_limit: StrictBool
    limit_unit: StrictStr | None = None
    cost_driver: StrictStr | None = None
    value_proposition: StrictStr
    source: Literal["codebase", "manual"]
    source_file: StrictStr | None = None
    created_at: StrictStr | None = None


class PricingState(CamelModel):
    """Full calculator state captured when a report is shared."""

    variable_costs: list[VariableCostItem]
    fixed_costs: list[FixedCostItem]
    customer_count: StrictInt = Field(..., ge=0)
    selected_price: NonNegativeAmount
    tiers: list[Tier]
    features: list[Feature]
    tier_display_configs: dict[str, TierDisplayConfig]
    utilization_rate: UnitInterval
    tier_distribution: dict[str, NonNegativeAmount]
    business_type: BusinessType | None
    business_type_confidence: UnitInterval
    pricing_model_type: PricingModelType


class ReportNotes(CamelModel):
    """Free-text notes addressed to each stakeholder."""

    model_config = ConfigDict(extra="forbid")

    accountant: StrictStr | None = None
    investor: StrictStr | None = None
    engineer: StrictStr | None = None
    marketer: StrictStr | None = None


class ReportData(CamelModel):
    """Shareable snapshot of a pricing project."""

    project_name: StrictStr = Field(..., min_length=1)
    created_at: StrictStr
    state: PricingState
    notes: ReportNotes
    selected_mockup: StrictStr | None = None

    @field_validator("project_name")
    @classmethod
    def validate_project_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Project name is required")
        return v

    @field_validator("created_at")
    @classmethod
    def validate_created_at(cls, v: str) -> str:
        try:
            datetime.fromisoformat(v)
        except ValueError as e:
            raise ValueError(f"createdAt must be an ISO-8601 timestamp, got {v!r}") from e
        return v
