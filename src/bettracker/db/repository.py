"""Persistence of the reference catalog."""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import AbstractContextManager
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from bettracker.catalog.catalog import Catalog
from bettracker.catalog.types import CanonicalEntity, EntityKind, to_lookup_key
from bettracker.db.database import get_session
from bettracker.db.models import AcceptedNameRecord, CatalogEntityRecord, CatalogStateRecord

logger = logging.getLogger(__name__)

STATE_ROW_ID = 1


class CatalogRepository:
    """Loads and saves a whole :class:`Catalog` within one session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def load(self) -> Catalog:
        records = self.session.scalars(
            select(CatalogEntityRecord).order_by(CatalogEntityRecord.position, CatalogEntityRecord.id)
        )
        entities = [
            CanonicalEntity(
                kind=EntityKind(record.kind),
                canonical=record.canonical,
                sport=record.sport,
                aliases=tuple(record.aliases or ()),
                disabled=record.disabled,
            )
            for record in records
        ]
        accepted: dict[EntityKind, list[str]] = {}
        for record in self.session.scalars(select(AcceptedNameRecord).order_by(AcceptedNameRecord.id)):
            accepted.setdefault(EntityKind(record.kind), []).append(record.name)

        state = self.session.get(CatalogStateRecord, STATE_ROW_ID)
        version = state.version if state else 0
        logger.debug("Loaded catalog with %d entities at version %d", len(entities), version)
        return Catalog(entities, accepted=accepted, version=version)

    def save(self, catalog: Catalog) -> None:
        """Replace the stored catalog with ``catalog``."""

        now = datetime.utcnow()
        self.session.execute(delete(CatalogEntityRecord))
        self.session.execute(delete(AcceptedNameRecord))
        # Flush deletes before inserts that reuse the same unique keys.
        self.session.flush()

        for position, entity in enumerate(catalog.entities()):
            self.session.add(
                CatalogEntityRecord(
                    position=position,
                    kind=entity.kind.value,
                    canonical=entity.canonical,
                    lookup_key=to_lookup_key(entity.canonical),
                    sport=entity.sport,
                    sport_key=(entity.sport or "").strip().upper(),
                    aliases=list(entity.aliases),
                    disabled=entity.disabled,
                    updated_at=now,
                )
            )
        for kind in EntityKind:
            for name in catalog.accepted_names(kind):
                self.session.add(AcceptedNameRecord(kind=kind.value, name=name, lookup_key=to_lookup_key(name)))

        state = self.session.get(CatalogStateRecord, STATE_ROW_ID)
        if state is None:
            state = CatalogStateRecord(id=STATE_ROW_ID)
            self.session.add(state)
        state.version = catalog.version
        state.updated_at = now
        self.session.flush()
        logger.info("Saved catalog with %d entities at version %d", len(catalog), catalog.version)


class CatalogStore:
    """Session-managed load/save used by the API."""

    def __init__(self, session_scope: Callable[[], AbstractContextManager[Session]] = get_session) -> None:
        self._session_scope = session_scope

    def load(self) -> Catalog:
        with self._session_scope() as session:
            return CatalogRepository(session).load()

    def save(self, catalog: Catalog) -> None:
        with self._session_scope() as session:
            CatalogRepository(session).save(catalog)
