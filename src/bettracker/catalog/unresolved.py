"""Review queue of entity strings the catalog could not uniquely resolve."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from bettracker.bets.flatten import dedupe_legs, expand_legs
from bettracker.bets.schemas import Bet, EntityType
from bettracker.catalog.catalog import Catalog, CatalogSnapshot
from bettracker.catalog.resolver import resolve
from bettracker.catalog.types import EntityKind, ResolutionStatus, to_lookup_key

logger = logging.getLogger(__name__)

_KIND_BY_ENTITY_TYPE = {
    EntityType.PLAYER: EntityKind.PLAYER,
    EntityType.TEAM: EntityKind.TEAM,
}


@dataclass(frozen=True)
class UnresolvedItem:
    id: str
    raw_value: str
    kind: EntityKind
    status: ResolutionStatus
    book: str
    bet_id: str
    encountered_at: str
    leg_index: int | None = None
    market: str | None = None
    sport: str | None = None
    candidates: tuple[str, ...] = ()


def generate_item_id(raw_value: str, bet_id: str, leg_index: int | None = None) -> str:
    parts = [to_lookup_key(raw_value), bet_id]
    if leg_index is not None:
        parts.append(str(leg_index))
    return "::".join(parts)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def collect_unresolved(bets: Iterable[Bet], catalog: Catalog | CatalogSnapshot) -> list[UnresolvedItem]:
    """Every leg entity that resolves as ambiguous or unresolved, one item per (raw, bet, leg)."""

    snapshot = catalog.snapshot() if isinstance(catalog, Catalog) else catalog
    items: dict[str, UnresolvedItem] = {}
    encountered_at = _now()

    for bet in bets:
        for leg_index, leg in enumerate(dedupe_legs(expand_legs(bet.legs))):
            kind = _KIND_BY_ENTITY_TYPE.get(leg.entity_type) if leg.entity_type else None
            if kind is None:
                continue
            for raw in leg.entities:
                result = resolve(kind, raw, bet.sport, snapshot)
                if result.status == ResolutionStatus.RESOLVED:
                    continue
                item_id = generate_item_id(raw, bet.bet_id, leg_index)
                if item_id in items:
                    continue
                items[item_id] = UnresolvedItem(
                    id=item_id,
                    raw_value=raw,
                    kind=kind,
                    status=result.status,
                    book=bet.book,
                    bet_id=bet.bet_id,
                    encountered_at=encountered_at,
                    leg_index=leg_index,
                    market=leg.market or None,
                    sport=bet.sport or None,
                    candidates=getattr(result, "candidates", ()),
                )
    return list(items.values())


def merge_queue(existing: Sequence[UnresolvedItem], new_items: Iterable[UnresolvedItem]) -> list[UnresolvedItem]:
    """Append items whose id is not queued yet; the first sighting keeps its timestamp."""

    queued = list(existing)
    known = {item.id for item in queued}
    added = 0
    for item in new_items:
        if item.id in known:
            continue
        known.add(item.id)
        queued.append(item)
        added += 1
    if added:
        logger.info("Added %d unresolved items, queue now has %d", added, len(queued))
    return queued


def remove_from_queue(queue: Sequence[UnresolvedItem], ids: Iterable[str]) -> list[UnresolvedItem]:
    drop = set(ids)
    return [item for item in queue if item.id not in drop]


def prune_resolved(queue: Sequence[UnresolvedItem], catalog: Catalog | CatalogSnapshot) -> list[UnresolvedItem]:
    """Drop queued items that the current catalog now resolves."""

    snapshot = catalog.snapshot() if isinstance(catalog, Catalog) else catalog
    return [
        item
        for item in queue
        if resolve(item.kind, item.raw_value, item.sport, snapshot).status != ResolutionStatus.RESOLVED
    ]
