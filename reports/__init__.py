"""Report sharing: codec, short-id store and link helpers."""

from reports.codec import (
    ReportDecodeError,
    ReportEncodeError,
    create_report_data,
    decode,
    decode_safe,
    encode,
)

__all__ = [
    "ReportDecodeError",
    "ReportEncodeError",
    "create_report_data",
    "decode",
    "decode_safe",
    "encode",
]
