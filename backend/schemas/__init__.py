"""Pydantic API Schemas for SaaS Pricer."""

from backend.schemas.calculation import (
    BreakEvenRequest,
    BreakEvenResponse,
    COGSRequest,
    COGSResponse,
    InvestorMetricsRequest,
    MarginRequest,
    MarginResponse,
)
from backend.schemas.report import ReportCreateResponse, ReportView

__all__ = [
    "BreakEvenRequest",
    "BreakEvenResponse",
    "COGSRequest",
    "COGSResponse",
    "InvestorMetricsRequest",
    "MarginRequest",
    "MarginResponse",
    "ReportCreateResponse",
    "ReportView",
]
