"""
Report Store

Short-id persistence for shared reports, backed by the SQL report table.

Ids are 8 random base62 characters. Concurrent writers cannot collide on
an id: the primary key rejects a duplicate insert and the writer retries
with a fresh id. Reads touch only their own row.
"""

import logging
import secrets
import string
from datetime import datetime, timedelta
from functools import lru_cache

from pydantic import ConfigDict
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from backend.models.base import utcnow
from backend.models.shared_report import SharedReport
from engines.errors import PricingError
from engines.schemas.base import CamelModel
from engines.schemas.report import ReportData
from reports.codec import decode_safe, encode

logger = logging.getLogger(__name__)

ID_ALPHABET = string.ascii_letters + string.digits
ID_LENGTH = 8
MAX_ID_ATTEMPTS = 5

DEFAULT_TTL_DAYS = 30


def generate_report_id(length: int = ID_LENGTH) -> str:
    """Random base62 id from a cryptographic source."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))


class StoredReportSummary(CamelModel):
    """Index entry of a stored report."""

    model_config = ConfigDict(frozen=True)

    id: str
    project_name: str
    created_at: datetime
    expires_at: datetime


class ReportStore:
    """Stores and retrieves encoded report snapshots by short id."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        ttl_days: int = DEFAULT_TTL_DAYS,
    ):
        self.session_factory = session_factory
        self.ttl = timedelta(days=ttl_days)

    def store(self, report: ReportData) -> str:
        """
        Persist a report and return its id.

        Expired reports are purged first so the table does not grow unbounded.
        """
        self.cleanup_expired()
        payload = encode(report)

        for _ in range(MAX_ID_ATTEMPTS):
            report_id = generate_report_id()
            now = utcnow()
            with self.session_factory() as session:
                session.add(
                    SharedReport(
                        id=report_id,
                        project_name=report.project_name,
                        payload=payload,
                        created_at=now,
                        expires_at=now + self.ttl,
                    )
                )
                try:
                    session.commit()
                except IntegrityError:
                    session.rollback()
                    logger.debug(f"Report id collision on {report_id}, retrying")
                    continue

            logger.info(f"Stored report {report_id} for '{report.project_name}'")
            return report_id

        raise PricingError(f"Could not allocate a unique report id after {MAX_ID_ATTEMPTS} attempts")

    def retrieve(self, report_id: str) -> ReportData | None:
        """
        Load a report by id.

        Unknown, expired, or unreadable reports yield None. An expired report
        is deleted on access.
        """
        with self.session_factory() as session:
            row = session.get(SharedReport, report_id)
            if row is None:
                return None

            if row.expires_at <= utcnow():
                session.delete(row)
                session.commit()
                logger.info(f"Report {report_id} expired and was removed")
                return None

            payload = row.payload

        report = decode_safe(payload)
        if report is None:
            logger.warning(f"Stored report {report_id} could not be decoded")
        return report

    def delete(self, report_id: str) -> bool:
        """Delete a report; True when a row was removed."""
        with self.session_factory() as session:
            result = session.execute(delete(SharedReport).where(SharedReport.id == report_id))
            session.commit()
            return result.rowcount > 0

    def cleanup_expired(self) -> int:
        """Delete every expired report and return how many were removed."""
        with self.session_factory() as session:
            result = session.execute(
                delete(SharedReport).where(SharedReport.expires_at <= utcnow())
            )
            session.commit()
            removed = result.rowcount

        if removed:
            logger.info(f"Purged {removed} expired reports")
        return removed

    def list_reports(self) -> list[StoredReportSummary]:
        """Unexpired reports, newest first."""
        with self.session_factory() as session:
            rows = session.scalars(
                select(SharedReport)
                .where(SharedReport.expires_at > utcnow())
                .order_by(SharedReport.created_at.desc())
            ).all()
            return [
                StoredReportSummary(
                    id=row.id,
                    project_name=row.project_name,
                    created_at=row.created_at,
                    expires_at=row.expires_at,
                )
                for row in rows
            ]


@lru_cache
def get_report_store() -> ReportStore:
    """Process-wide store on the configured database; creates the table on first use."""
    from backend.config import get_settings
    from backend.db.session import engine, init_db, session_factory

    init_db(engine)
    return ReportStore(session_factory, ttl_days=get_settings().report_ttl_days)
