"""
Report API Routes

Publish report snapshots under short ids and fetch them back.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from backend.config import get_settings
from backend.schemas.report import ReportCreateResponse
from engines.schemas.report import ReportData
from reports.store import ReportStore, StoredReportSummary, get_report_store
from reports.urls import generate_all_report_urls

settings = get_settings()

router = APIRouter()


@router.post(
    "",
    response_model=ReportCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Share report",
    description="Store a report snapshot and return short and portable links for every stakeholder.",
)
async def create_report(
    report: ReportData,
    store: ReportStore = Depends(get_report_store),
) -> ReportCreateResponse:
    """Store a report and build its share links."""
    urls = generate_all_report_urls(settings.share_base_url, report, store)
    return ReportCreateResponse(
        id=urls["shortId"],
        short_urls=urls["short"],
        portable_urls=urls["portable"],
    )


@router.get(
    "",
    response_model=list[StoredReportSummary],
    summary="List stored reports",
)
async def list_reports(
    store: ReportStore = Depends(get_report_store),
) -> list[StoredReportSummary]:
    """List unexpired reports, newest first."""
    return store.list_reports()


@router.get(
    "/{report_id}",
    response_model=ReportData,
    summary="Get stored report",
)
async def get_report(
    report_id: str,
    store: ReportStore = Depends(get_report_store),
) -> ReportData:
    """Get a stored report by short id."""
    report = store.retrieve(report_id)
    if report is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Report {report_id} not found or expired",
        )
    return report


@router.delete(
    "/{report_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete stored report",
)
async def delete_report(
    report_id: str,
    store: ReportStore = Depends(get_report_store),
) -> None:
    """Delete a stored report."""
    if not store.delete(report_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Report {report_id} not found",
        )
