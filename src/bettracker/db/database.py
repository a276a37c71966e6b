"""Database helpers for the BetTracker catalog store."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from bettracker.config import get_settings
from bettracker.db.models import Base

settings = get_settings()
engine = create_engine(str(settings.database_url), future=True, echo=False)
SessionLocal = sessionmaker(bind=engine, class_=Session, expire_on_commit=False, autoflush=False)

__all__ = ["engine", "SessionLocal", "get_session", "init_db"]


def init_db() -> None:
    """Create catalog tables if they do not exist yet."""

    Base.metadata.create_all(engine)


@contextmanager
def get_session() -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""

    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:  # pragma: no cover - defensive rollback
        session.rollback()
        raise
    finally:
        session.close()
