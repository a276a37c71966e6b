"""Pure entity resolution over a catalog snapshot."""

from __future__ import annotations

import logging

from bettracker.catalog.catalog import Catalog, CatalogSnapshot
from bettracker.catalog.types import (
    Ambiguous,
    EntityKind,
    Resolved,
    ResolutionResult,
    Unresolved,
    to_lookup_key,
)
from bettracker.config import get_settings

logger = logging.getLogger(__name__)


def _as_snapshot(catalog: Catalog | CatalogSnapshot) -> CatalogSnapshot:
    return catalog.snapshot() if isinstance(catalog, Catalog) else catalog


def get_resolver_version(catalog: Catalog | CatalogSnapshot) -> int:
    return catalog.version


def resolve(
    kind: EntityKind, raw: str | None, sport: str | None, catalog: Catalog | CatalogSnapshot
) -> ResolutionResult:
    """Resolve ``raw`` to a canonical name of ``kind``.

    Names the user explicitly accepted resolve to themselves. Otherwise every
    enabled entity whose canonical name or alias shares the lookup key is a
    match; more than one distinct canonical is reported as ambiguous.
    """

    raw = raw or ""
    key = to_lookup_key(raw)
    if not key:
        return Unresolved(raw=raw)

    snapshot = _as_snapshot(catalog)
    kind = EntityKind(kind)
    if snapshot.is_accepted(kind, key):
        return Resolved(raw=raw, canonical=raw.strip())

    canonicals: list[str] = []
    for entity in snapshot.candidates(kind, key):
        if entity.applies_to(sport) and entity.canonical not in canonicals:
            canonicals.append(entity.canonical)

    if not canonicals:
        return Unresolved(raw=raw)
    if len(canonicals) == 1:
        return Resolved(raw=raw, canonical=canonicals[0])
    logger.debug("Ambiguous %s '%s' (sport=%s): %s", kind.value, raw, sport, canonicals)
    return Ambiguous(raw=raw, candidates=tuple(canonicals))


def resolve_team(raw: str | None, sport: str | None, catalog: Catalog | CatalogSnapshot) -> ResolutionResult:
    return resolve(EntityKind.TEAM, raw, sport, catalog)


def resolve_player(raw: str | None, sport: str | None, catalog: Catalog | CatalogSnapshot) -> ResolutionResult:
    return resolve(EntityKind.PLAYER, raw, sport, catalog)


def resolve_bet_type(raw: str | None, sport: str | None, catalog: Catalog | CatalogSnapshot) -> ResolutionResult:
    """Resolve a stat/bet type such as "Pts" or "Rebounds"."""

    return resolve(EntityKind.STAT_TYPE, raw, sport, catalog)


def resolve_aggregation_key(
    kind: EntityKind,
    raw: str | None,
    sport: str | None,
    catalog: Catalog | CatalogSnapshot,
    unresolved_bucket: str | None = None,
) -> str:
    """Canonical name, or the shared bucket for anything not uniquely resolved."""

    result = resolve(kind, raw, sport, catalog)
    if isinstance(result, Resolved):
        return result.canonical
    return unresolved_bucket if unresolved_bucket is not None else get_settings().unresolved_bucket


class ResolutionCache:
    """Memoizes resolutions for one catalog, discarding them whenever its version moves."""

    def __init__(self, catalog: Catalog) -> None:
        self._catalog = catalog
        self._version = catalog.version
        self._results: dict[tuple[EntityKind, str, str | None], ResolutionResult] = {}
        self.hits = 0
        self.misses = 0

    @property
    def version(self) -> int:
        return self._version

    def resolve(self, kind: EntityKind, raw: str | None, sport: str | None = None) -> ResolutionResult:
        current = get_resolver_version(self._catalog)
        if current != self._version:
            logger.debug("Catalog moved from version %d to %d; dropping %d cached results",
                         self._version, current, len(self._results))
            self._results.clear()
            self._version = current

        cache_key = (EntityKind(kind), raw or "", sport)
        cached = self._results.get(cache_key)
        if cached is not None:
            self.hits += 1
            return cached
        self.misses += 1
        result = resolve(kind, raw, sport, self._catalog)
        self._results[cache_key] = result
        return result

    def __len__(self) -> int:
        return len(self._results)
