"""
Report Codec MCP Tools

Encode a pricing snapshot into a shareable token and decode it back.
"""

from backend.config import get_settings
from engines.schemas.report import ReportData, StakeholderType
from reports.codec import decode, encode
from reports.urls import UrlShape, create_shareable_url

# Use the same MCP instance as the COGS engine
from engines.tools.cogs_engine import mcp

settings = get_settings()


async def encode_report(report: dict, stakeholder: str | None = None) -> dict:
    """
    Encode a report snapshot into a compact URL-safe token.

    Args:
        report: ReportData object (projectName, createdAt, state, notes)
        stakeholder: accountant, investor, engineer or marketer; when given,
            a portable share link for that audience is included

    Returns:
        Dictionary with the token, its length and the optional share link
    """
    validated = ReportData.model_validate(report)
    token = encode(validated)

    result = {"token": token, "length": len(token), "url": None}
    if stakeholder is not None:
        result["url"] = create_shareable_url(
            settings.share_base_url,
            validated,
            StakeholderType(stakeholder),
            UrlShape.PORTABLE,
        )
    return result


async def decode_report(token: str) -> dict:
    """
    Decode a token produced by encode_report.

    Args:
        token: Encoded report token (the "d" query parameter of a share link)

    Returns:
        The ReportData object
    """
    return decode(token).to_dict()


for _tool in (encode_report, decode_report):
    mcp.tool()(_tool)
