"""ORM models for the reference catalog."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base declarative class."""


class CatalogEntityRecord(Base):
    """Canonical team, player or stat type with its aliases."""

    __tablename__ = "catalog_entities"
    __table_args__ = (UniqueConstraint("kind", "lookup_key", "sport_key", name="uq_catalog_entity"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    kind: Mapped[str] = mapped_column(String(32), nullable=False)
    canonical: Mapped[str] = mapped_column(String(255), nullable=False)
    lookup_key: Mapped[str] = mapped_column(String(255), nullable=False)
    sport: Mapped[str | None] = mapped_column(String(32))
    # "" for unscoped rows; NULLs never collide in a unique index
    sport_key: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    aliases: Mapped[list[str]] = mapped_column(JSON, default=list)
    disabled: Mapped[bool] = mapped_column(Boolean, default=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class AcceptedNameRecord(Base):
    """Name the user accepted as-is without a catalog entry."""

    __tablename__ = "accepted_names"
    __table_args__ = (UniqueConstraint("kind", "lookup_key", name="uq_accepted_name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    kind: Mapped[str] = mapped_column(String(32), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    lookup_key: Mapped[str] = mapped_column(String(255), nullable=False)


class CatalogStateRecord(Base):
    """Single-row table holding the persisted catalog version."""

    __tablename__ = "catalog_state"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
