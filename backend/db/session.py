"""
Database Session Management

SQLAlchemy engine and session factory for the shared report store.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from backend.config import get_settings
from backend.models.base import Base

settings = get_settings()


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine; SQLite connections may be shared across threads."""
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, echo=echo, connect_args=connect_args)


def create_session_factory(db_engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        db_engine,
        expire_on_commit=False,
        autoflush=False,
    )


def init_db(db_engine: Engine) -> None:
    """Create missing tables."""
    Base.metadata.create_all(db_engine)


engine = create_db_engine(settings.database_url, echo=settings.debug)

session_factory = create_session_factory(engine)
