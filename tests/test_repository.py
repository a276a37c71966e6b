"""Catalog persistence tests."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bettracker.catalog.catalog import Catalog
from bettracker.catalog.resolver import resolve_team
from bettracker.catalog.types import CanonicalEntity, EntityKind, ResolutionStatus
from bettracker.db.models import Base
from bettracker.db.repository import CatalogRepository, CatalogStore


@pytest.fixture
def session_scope():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool, future=True
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, class_=Session, expire_on_commit=False)

    @contextmanager
    def _scope() -> Iterator[Session]:
        session = factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    yield _scope
    engine.dispose()


def test_empty_store_loads_empty_catalog(session_scope) -> None:
    catalog = CatalogStore(session_scope).load()
    assert len(catalog) == 0
    assert catalog.version == 0


def test_round_trip_keeps_entities_accepted_names_and_version(session_scope) -> None:
    catalog = Catalog()
    catalog.add(CanonicalEntity(EntityKind.TEAM, "Lakers", sport="NBA", aliases=("LA Lakers", "LAL")))
    catalog.add(CanonicalEntity(EntityKind.TEAM, "Kings", sport="NHL"))
    catalog.add(CanonicalEntity(EntityKind.STAT_TYPE, "Pts", aliases=("Points",)))
    catalog.disable(EntityKind.TEAM, "Kings", sport="NHL")
    catalog.accept(EntityKind.PLAYER, "Will Richard")

    store = CatalogStore(session_scope)
    store.save(catalog)
    loaded = store.load()

    assert loaded.entities() == catalog.entities()
    assert loaded.version == catalog.version
    assert loaded.accepted_names(EntityKind.PLAYER) == ("Will Richard",)
    assert resolve_team("LAL", "NBA", loaded).status is ResolutionStatus.RESOLVED
    assert resolve_team("Kings", "NHL", loaded).status is ResolutionStatus.UNRESOLVED


def test_save_replaces_previous_contents(session_scope) -> None:
    store = CatalogStore(session_scope)
    catalog = Catalog([CanonicalEntity(EntityKind.PLAYER, "A"), CanonicalEntity(EntityKind.PLAYER, "B")])
    store.save(catalog)

    catalog.remove(EntityKind.PLAYER, "A")
    store.save(catalog)

    with session_scope() as session:
        reloaded = CatalogRepository(session).load()
    assert [entity.canonical for entity in reloaded.entities()] == ["B"]
    assert reloaded.version == 1
