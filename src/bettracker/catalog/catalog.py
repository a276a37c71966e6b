"""In-memory reference catalog of canonical teams, players and stat types.

Every mutation bumps :attr:`Catalog.version`. Readers take a
:class:`CatalogSnapshot`, an immutable view whose alias index is built once per
version, and memoize against that version.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from functools import cached_property

from bettracker.catalog.types import CanonicalEntity, EntityKind, to_lookup_key

logger = logging.getLogger(__name__)


class CatalogError(KeyError):
    """Raised for invalid catalog management requests."""

    def __str__(self) -> str:  # KeyError would quote the message
        return str(self.args[0]) if self.args else ""


class EntityNotFoundError(CatalogError):
    pass


class DuplicateEntityError(CatalogError):
    pass


def dedupe_aliases(aliases: Iterable[str]) -> tuple[str, ...]:
    """Keep the first spelling of each alias by lookup key; drop blanks."""

    seen: set[str] = set()
    unique: list[str] = []
    for alias in aliases:
        key = to_lookup_key(alias)
        if not key or key in seen:
            continue
        seen.add(key)
        unique.append(alias.strip())
    return tuple(unique)


@dataclass(frozen=True)
class CatalogSnapshot:
    version: int
    entities: tuple[CanonicalEntity, ...]
    accepted: Mapping[EntityKind, frozenset[str]] = field(default_factory=dict)

    @cached_property
    def alias_index(self) -> dict[tuple[EntityKind, str], tuple[CanonicalEntity, ...]]:
        index: dict[tuple[EntityKind, str], list[CanonicalEntity]] = {}
        for entity in self.entities:
            if entity.disabled:
                continue
            for key in entity.lookup_keys():
                index.setdefault((entity.kind, key), []).append(entity)
        return {key: tuple(matches) for key, matches in index.items()}

    def candidates(self, kind: EntityKind, lookup_key: str) -> tuple[CanonicalEntity, ...]:
        return self.alias_index.get((kind, lookup_key), ())

    def is_accepted(self, kind: EntityKind, lookup_key: str) -> bool:
        return lookup_key in self.accepted.get(kind, frozenset())


class Catalog:
    """Mutable catalog owned by the management layer."""

    def __init__(
        self,
        entities: Iterable[CanonicalEntity] = (),
        accepted: Mapping[EntityKind, Iterable[str]] | None = None,
        version: int = 0,
    ) -> None:
        self._entities: dict[tuple[EntityKind, str, str | None], CanonicalEntity] = {}
        self._accepted: dict[EntityKind, list[str]] = {kind: [] for kind in EntityKind}
        self._version = version
        self._snapshot: CatalogSnapshot | None = None

        for entity in entities:
            normalized = entity.with_changes(aliases=dedupe_aliases(entity.aliases))
            if normalized.key in self._entities:
                raise DuplicateEntityError(f"Duplicate {entity.kind.value} '{entity.canonical}'")
            self._entities[normalized.key] = normalized
        for kind, names in (accepted or {}).items():
            for name in names:
                self._append_accepted(EntityKind(kind), name)

    @property
    def version(self) -> int:
        return self._version

    def _bump(self) -> None:
        self._version += 1
        self._snapshot = None

    def _key(self, kind: EntityKind, canonical: str, sport: str | None) -> tuple[EntityKind, str, str | None]:
        return CanonicalEntity(kind=EntityKind(kind), canonical=canonical, sport=sport).key

    def _require(self, kind: EntityKind, canonical: str, sport: str | None) -> CanonicalEntity:
        entity = self._entities.get(self._key(kind, canonical, sport))
        if entity is None:
            raise EntityNotFoundError(f"Unknown {EntityKind(kind).value} '{canonical}' (sport={sport})")
        return entity

    def _append_accepted(self, kind: EntityKind, name: str) -> bool:
        key = to_lookup_key(name)
        if not key or key in {to_lookup_key(existing) for existing in self._accepted[kind]}:
            return False
        self._accepted[kind].append(name.strip())
        return True

    # -- reads --------------------------------------------------------------

    def get(self, kind: EntityKind, canonical: str, sport: str | None = None) -> CanonicalEntity:
        return self._require(kind, canonical, sport)

    def entities(self, kind: EntityKind | None = None) -> list[CanonicalEntity]:
        return [entity for entity in self._entities.values() if kind is None or entity.kind == kind]

    def accepted_names(self, kind: EntityKind) -> tuple[str, ...]:
        return tuple(self._accepted[EntityKind(kind)])

    def is_accepted(self, kind: EntityKind, raw: str) -> bool:
        return self.snapshot().is_accepted(EntityKind(kind), to_lookup_key(raw))

    def snapshot(self) -> CatalogSnapshot:
        if self._snapshot is None or self._snapshot.version != self._version:
            self._snapshot = CatalogSnapshot(
                version=self._version,
                entities=tuple(self._entities.values()),
                accepted={
                    kind: frozenset(to_lookup_key(name) for name in names) for kind, names in self._accepted.items()
                },
            )
        return self._snapshot

    def __len__(self) -> int:
        return len(self._entities)

    def copy(self) -> Catalog:
        return Catalog(self._entities.values(), accepted=self._accepted, version=self._version)

    def adopt(self, draft: Catalog) -> None:
        """Replace this catalog's contents and version with ``draft``'s."""

        self._entities = dict(draft._entities)
        self._accepted = {kind: list(names) for kind, names in draft._accepted.items()}
        self._version = draft._version
        self._snapshot = None

    # -- mutations ----------------------------------------------------------

    def add(self, entity: CanonicalEntity) -> CanonicalEntity:
        if not to_lookup_key(entity.canonical):
            raise CatalogError("Canonical name must not be empty")
        normalized = entity.with_changes(canonical=entity.canonical.strip(), aliases=dedupe_aliases(entity.aliases))
        if normalized.key in self._entities:
            raise DuplicateEntityError(f"{entity.kind.value} '{entity.canonical}' already exists")
        self._entities[normalized.key] = normalized
        self._bump()
        logger.info("Added %s '%s' (catalog version %d)", entity.kind.value, normalized.canonical, self._version)
        return normalized

    def update(
        self,
        kind: EntityKind,
        canonical: str,
        sport: str | None = None,
        *,
        new_canonical: str | None = None,
        new_sport: str | None = None,
        aliases: Iterable[str] | None = None,
    ) -> CanonicalEntity:
        current = self._require(kind, canonical, sport)
        updated = current.with_changes(
            canonical=(new_canonical or current.canonical).strip(),
            sport=current.sport if new_sport is None else (new_sport or None),
            aliases=current.aliases if aliases is None else dedupe_aliases(aliases),
        )
        if updated.key != current.key and updated.key in self._entities:
            raise DuplicateEntityError(f"{updated.kind.value} '{updated.canonical}' already exists")

        # Rebuild to keep the entity at its original position.
        self._entities = {
            (updated.key if key == current.key else key): (updated if key == current.key else value)
            for key, value in self._entities.items()
        }
        self._bump()
        return updated

    def remove(self, kind: EntityKind, canonical: str, sport: str | None = None) -> CanonicalEntity:
        entity = self._require(kind, canonical, sport)
        del self._entities[entity.key]
        self._bump()
        logger.info("Removed %s '%s' (catalog version %d)", entity.kind.value, entity.canonical, self._version)
        return entity

    def _set_disabled(self, kind: EntityKind, canonical: str, sport: str | None, disabled: bool) -> CanonicalEntity:
        entity = self._require(kind, canonical, sport).with_changes(disabled=disabled)
        self._entities[entity.key] = entity
        self._bump()
        return entity

    def disable(self, kind: EntityKind, canonical: str, sport: str | None = None) -> CanonicalEntity:
        return self._set_disabled(kind, canonical, sport, True)

    def enable(self, kind: EntityKind, canonical: str, sport: str | None = None) -> CanonicalEntity:
        return self._set_disabled(kind, canonical, sport, False)

    def add_aliases(
        self, kind: EntityKind, canonical: str, aliases: Iterable[str], sport: str | None = None
    ) -> CanonicalEntity:
        current = self._require(kind, canonical, sport)
        entity = current.with_changes(aliases=dedupe_aliases((*current.aliases, *aliases)))
        self._entities[entity.key] = entity
        self._bump()
        return entity

    def accept(self, kind: EntityKind, name: str) -> None:
        """Mark a raw name as intentionally accepted without a catalog entry."""

        if not to_lookup_key(name):
            raise CatalogError("Accepted name must not be empty")
        self._append_accepted(EntityKind(kind), name)
        self._bump()
