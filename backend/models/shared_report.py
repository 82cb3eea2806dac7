"""
Shared Report Model

One row per report snapshot published under a short link.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from backend.models.base import Base, utcnow


class SharedReport(Base):
    """Encoded report snapshot addressed by an 8-character id."""

    __tablename__ = "shared_reports"

    id: Mapped[str] = mapped_column(
        String(8),
        primary_key=True,
        comment="Random base62 short id",
    )
    project_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    payload: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Encoded report token",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        nullable=False,
        comment="UTC time the report was stored",
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        index=True,
        comment="UTC time after which the report is purged",
    )

    def __repr__(self) -> str:
        return f"<SharedReport {self.id} ({self.project_name})>"
