"""
Report Pydantic Schemas

API request/response models for report sharing endpoints.
"""

from pydantic import Field

from engines.schemas.base import CamelModel
from engines.schemas.costs import CostBreakdown, MarginInfo
from engines.schemas.report import ReportData, StakeholderType
from reports.urls import UrlShape


class ReportCreateResponse(CamelModel):
    """Short id plus short and portable links for every stakeholder."""

    id: str
    short_urls: dict[str, str]
    portable_urls: dict[str, str]


class ReportView(CamelModel):
    """A shared report as rendered for one stakeholder."""

    shape: UrlShape
    stakeholder: StakeholderType
    report: ReportData
    breakdown: CostBreakdown
    margin: MarginInfo
    break_even_customers: int | None = Field(
        default=None,
        description="Null when the selected price does not cover variable cost",
    )
