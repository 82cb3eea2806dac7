"""
Report Data Codec

Compact, URL-safe encoding of ReportData snapshots.

Wire format: canonical JSON (sorted keys, no whitespace) is deflated with
zlib and then base64url-encoded without padding. Compression always runs
before the text transform, so tokens stay short enough for query strings.
"""

import base64
import binascii
import json
import logging
import zlib
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from engines.errors import PricingError
from engines.schemas.report import PricingState, ReportData, ReportNotes

logger = logging.getLogger(__name__)

COMPRESSION_LEVEL = 9

# Upper bound on inflated payload size; tokens arrive from untrusted URLs
MAX_DECODED_BYTES = 2 * 1024 * 1024


class ReportEncodeError(PricingError):
    """A report snapshot could not be serialized."""


class ReportDecodeError(PricingError, ValueError):
    """A token is empty, corrupt, or does not describe a valid report."""


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def create_report_data(
    project_name: str,
    state: PricingState,
    notes: ReportNotes | dict | None = None,
    selected_mockup: str | None = None,
) -> ReportData:
    """Snapshot the current pricing state for sharing, stamped with the current time."""
    return ReportData(
        project_name=project_name,
        created_at=utc_timestamp(),
        state=state,
        notes=notes if notes is not None else ReportNotes(),
        selected_mockup=selected_mockup,
    )


def _canonical_json(report: ReportData) -> bytes:
    return json.dumps(
        report.to_dict(),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    ).encode("utf-8")


def encode(report: ReportData) -> str:
    """
    Encode a report into a URL-safe token.

    Equal snapshots always produce tokens that decode to equal reports.
    """
    try:
        payload = _canonical_json(report)
    except (TypeError, ValueError) as e:
        raise ReportEncodeError(f"Failed to encode report data: {e}") from e

    compressed = zlib.compress(payload, COMPRESSION_LEVEL)
    return base64.urlsafe_b64encode(compressed).rstrip(b"=").decode("ascii")


def _inflate(token: str) -> bytes:
    padded = token + "=" * (-len(token) % 4)
    compressed = base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)

    inflater = zlib.decompressobj()
    payload = inflater.decompress(compressed, MAX_DECODED_BYTES)
    if inflater.unconsumed_tail:
        raise ValueError(f"payload exceeds {MAX_DECODED_BYTES} bytes")
    if not inflater.eof:
        raise ValueError("truncated payload")
    return payload


def _load_token(token: str) -> Any:
    if not isinstance(token, str) or not token.strip():
        raise ReportDecodeError("Report data is empty")

    try:
        payload = _inflate(token.strip())
        return json.loads(payload.decode("utf-8"))
    except (binascii.Error, zlib.error, UnicodeError, ValueError) as e:
        logger.debug(f"Report token rejected: {e}")
        raise ReportDecodeError("Invalid report data") from e


def decode(token: str) -> ReportData:
    """
    Decode a token produced by encode().

    Strict: missing fields are never defaulted.

    Raises:
        ReportDecodeError: empty, undecodable, or structurally invalid input
    """
    data = _load_token(token)

    try:
        return ReportData.model_validate(data)
    except ValidationError as e:
        logger.debug(f"Report payload failed validation: {e.error_count()} errors")
        raise ReportDecodeError(f"Invalid report structure: {e.errors()[0]['msg']}") from e


def _with_legacy_defaults(raw: dict[str, Any]) -> dict[str, Any] | None:
    """Fill the fields older snapshots omitted; None when required fields are absent."""
    if not raw.get("projectName") or not raw.get("state"):
        return None

    candidate = dict(raw)
    if not candidate.get("createdAt"):
        candidate["createdAt"] = utc_timestamp()
    if candidate.get("notes") is None:
        candidate["notes"] = {}
    return candidate


def decode_safe(raw: Any) -> ReportData | None:
    """
    Permissive counterpart of decode(). Never raises.

    Accepts a token or an already-parsed mapping. Payloads missing only
    createdAt or notes (older snapshots) get those filled in; anything that
    still fails validation yields None.
    """
    if isinstance(raw, str):
        try:
            raw = _load_token(raw)
        except ReportDecodeError:
            return None

    if not isinstance(raw, dict):
        return None

    try:
        return ReportData.model_validate(raw)
    except ValidationError:
        pass

    candidate = _with_legacy_defaults(raw)
    if candidate is None:
        return None

    try:
        report = ReportData.model_validate(candidate)
    except ValidationError as e:
        logger.debug(f"Legacy report payload rejected: {e.error_count()} errors")
        return None

    logger.info(f"Recovered legacy report '{report.project_name}' with defaulted fields")
    return report
