"""
Base Model Classes

Declarative base for the report store tables.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    """Naive UTC now; SQLite stores datetimes without an offset."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Declarative base for all SaaS Pricer models."""

    type_annotation_map: dict[type, Any] = {}
