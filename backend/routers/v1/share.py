"""
Share Link Routes

Resolve the three report link shapes. The shape is known from the route
that matched, never guessed from the token.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from backend.config import get_settings
from backend.schemas.report import ReportView
from engines.schemas.report import ReportData, StakeholderType
from engines.services.cogs_calculator import (
    calculate_break_even_customers,
    calculate_cogs_breakdown,
)
from engines.services.margin_calculator import get_margin_info
from reports.codec import ReportDecodeError, decode
from reports.store import ReportStore, get_report_store
from reports.urls import UrlShape

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter()


def build_report_view(
    report: ReportData,
    stakeholder: StakeholderType,
    shape: UrlShape,
) -> ReportView:
    """Recompute the headline figures of a shared snapshot."""
    state = report.state
    breakdown = calculate_cogs_breakdown(
        state.variable_costs,
        state.fixed_costs,
        state.customer_count,
        state.utilization_rate,
    )
    return ReportView(
        shape=shape,
        stakeholder=stakeholder,
        report=report,
        breakdown=breakdown,
        margin=get_margin_info(state.selected_price, breakdown.total_cogs, settings.margin_thresholds),
        break_even_customers=calculate_break_even_customers(
            breakdown.fixed_total, state.selected_price, breakdown.variable_total
        ),
    )


def _decode_or_400(token: str) -> ReportData:
    try:
        return decode(token)
    except ReportDecodeError as e:
        logger.debug(f"Rejected share token: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e


@router.get(
    "/r/{report_id}/{stakeholder}",
    response_model=ReportView,
    summary="Open short report link",
)
async def open_short_link(
    report_id: str,
    stakeholder: StakeholderType,
    store: ReportStore = Depends(get_report_store),
) -> ReportView:
    """Resolve a short link through the report store."""
    report = store.retrieve(report_id)
    if report is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Report {report_id} not found or expired",
        )
    return build_report_view(report, stakeholder, UrlShape.SHORT)


@router.get(
    "/report/{stakeholder}",
    response_model=ReportView,
    summary="Open portable report link",
)
async def open_portable_link(
    stakeholder: StakeholderType,
    d: str = Query(..., min_length=1, description="Encoded report token"),
) -> ReportView:
    """Resolve a link carrying the encoded report in its query string."""
    return build_report_view(_decode_or_400(d), stakeholder, UrlShape.PORTABLE)


@router.get(
    "/report/{data}/{stakeholder}",
    response_model=ReportView,
    summary="Open legacy report link",
)
async def open_legacy_link(data: str, stakeholder: StakeholderType) -> ReportView:
    """Resolve an older link with the encoded report embedded in its path."""
    return build_report_view(_decode_or_400(data), stakeholder, UrlShape.LEGACY)
