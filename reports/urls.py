"""
Shareable Report URLs

Three link shapes, each identifiable from its path alone:

    short     {base}/r/{id}/{stakeholder}           id in the report store
    portable  {base}/report/{stakeholder}?d={token} token in the query string
    legacy    {base}/report/{token}/{stakeholder}   token embedded in the path
"""

from dataclasses import dataclass
from enum import Enum
from urllib.parse import parse_qs, urlsplit

from engines.schemas.report import ReportData, StakeholderType
from reports.codec import encode
from reports.store import ReportStore

STAKEHOLDERS = [s.value for s in StakeholderType]


class UrlShape(str, Enum):
    """How a report link carries its report."""
    SHORT = "short"
    PORTABLE = "portable"
    LEGACY = "legacy"


@dataclass(frozen=True)
class ParsedReportUrl:
    """A recognized report link. token is a store id for SHORT links, else an encoded report."""

    shape: UrlShape
    stakeholder: StakeholderType
    token: str


def _join(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}{path}"


def create_shareable_url(
    base_url: str,
    report: ReportData,
    stakeholder: StakeholderType,
    shape: UrlShape = UrlShape.PORTABLE,
    store: ReportStore | None = None,
) -> str:
    """
    Compose a link for one stakeholder.

    SHORT links persist the report and need a store; the other shapes are
    pure string composition over encode().
    """
    stakeholder = StakeholderType(stakeholder)

    if shape == UrlShape.SHORT:
        if store is None:
            raise ValueError("A report store is required for short links")
        report_id = store.store(report)
        return _join(base_url, f"/r/{report_id}/{stakeholder.value}")

    token = encode(report)
    if shape == UrlShape.LEGACY:
        return _join(base_url, f"/report/{token}/{stakeholder.value}")
    return _join(base_url, f"/report/{stakeholder.value}?d={token}")


def generate_all_report_urls(
    base_url: str,
    report: ReportData,
    store: ReportStore | None = None,
) -> dict:
    """
    Links for every stakeholder.

    The report is stored and encoded once and shared by all links. Short
    links are omitted when no store is given.
    """
    token = encode(report)
    portable = {s: _join(base_url, f"/report/{s}?d={token}") for s in STAKEHOLDERS}

    if store is None:
        return {"shortId": None, "short": {}, "portable": portable}

    report_id = store.store(report)
    short = {s: _join(base_url, f"/r/{report_id}/{s}") for s in STAKEHOLDERS}
    return {"shortId": report_id, "short": short, "portable": portable}


def parse_report_url(url: str) -> ParsedReportUrl | None:
    """
    Identify the shape of a report link and extract its parts.

    Returns None for anything that is not one of the three shapes or that
    names an unknown stakeholder.
    """
    parts = urlsplit(url)
    segments = [s for s in parts.path.split("/") if s]

    if len(segments) < 2:
        return None

    # Shapes are matched on the trailing segments so a base path prefix is allowed.
    # Portable first: its base path may itself end in r or report.
    query = parse_qs(parts.query)
    if segments[-2] == "report" and query.get("d"):
        shape, token, stakeholder = UrlShape.PORTABLE, query["d"][0], segments[-1]
    elif len(segments) >= 3 and segments[-3] == "r":
        shape, token, stakeholder = UrlShape.SHORT, segments[-2], segments[-1]
    elif len(segments) >= 3 and segments[-3] == "report":
        shape, token, stakeholder = UrlShape.LEGACY, segments[-2], segments[-1]
    else:
        return None

    if stakeholder not in STAKEHOLDERS or not token:
        return None
    return ParsedReportUrl(shape=shape, stakeholder=StakeholderType(stakeholder), token=token)
