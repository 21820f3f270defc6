"""Database engine, session factory and declarative base for the ledger."""

import logging
from collections.abc import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from gasledger.core.config import settings

logger = logging.getLogger(__name__)


def _connect_args(database_url: str) -> dict[str, bool]:
    # SQLite connections are shared across FastAPI's worker threads
    if make_url(database_url).get_backend_name() == "sqlite":
        return {"check_same_thread": False}
    return {}


engine = create_engine(settings.DATABASE_URL, connect_args=_connect_args(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    """Base class for ledger tables."""


def init_db() -> None:
    """Create missing tables on the configured engine."""
    # Registers the ledger tables on Base.metadata
    from gasledger.models import customer, reading, storage  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database ready at %s", engine.url.render_as_string(hide_password=True))


def get_db() -> Iterator[Session]:
    """Dependency yielding one session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
