"""SQLAlchemy ORM Models for SaaS Pricer."""

from backend.models.base import Base
from backend.models.shared_report import SharedReport

__all__ = [
    "Base",
    "SharedReport",
]
