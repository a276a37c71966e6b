"""Unresolved queue tests."""

from __future__ import annotations

from bettracker.catalog.catalog import Catalog
from bettracker.catalog.types import CanonicalEntity, EntityKind, ResolutionStatus
from bettracker.catalog.unresolved import collect_unresolved, generate_item_id, merge_queue, prune_resolved


def test_item_id_uses_lookup_key() -> None:
    assert generate_item_id("  Will  RICHARD ", "B1", 0) == "will richard::B1::0"
    assert generate_item_id("Lakers", "B2") == "lakers::B2"


def test_collects_unresolved_and_ambiguous_entities(make_bet) -> None:
    catalog = Catalog(
        [
            CanonicalEntity(EntityKind.TEAM, "Lakers", sport="NBA", aliases=("LAL",)),
            CanonicalEntity(EntityKind.TEAM, "Lightning", sport="NBA", aliases=("LAL",)),
            CanonicalEntity(EntityKind.PLAYER, "LeBron James", sport="NBA"),
        ]
    )
    bet = make_bet(
        betType="parlay",
        legs=[
            {"market": "Points", "entities": ["Will Richard"], "entityType": "player", "target": "10+"},
            {"market": "Points", "entities": ["LeBron James"], "entityType": "player", "target": "25+"},
            {"market": "Moneyline", "entities": ["LAL"], "entityType": "team"},
            {"market": "Points", "entities": ["Mystery"], "target": "5+"},
        ],
    )
    items = collect_unresolved([bet], catalog)

    assert [(item.raw_value, item.status) for item in items] == [
        ("Will Richard", ResolutionStatus.UNRESOLVED),
        ("LAL", ResolutionStatus.AMBIGUOUS),
    ]
    assert items[0].id == "will richard::B1::0"
    assert items[1].candidates == ("Lakers", "Lightning")
    assert items[1].kind is EntityKind.TEAM


def test_merge_skips_known_ids_and_prune_drops_resolved(make_bet) -> None:
    catalog = Catalog()
    first = collect_unresolved([make_bet()], catalog)
    queue = merge_queue([], first)
    queue = merge_queue(queue, collect_unresolved([make_bet()], catalog))
    assert len(queue) == 1

    catalog.add(CanonicalEntity(EntityKind.PLAYER, "Will Richard", sport="NBA"))
    assert prune_resolved(queue, catalog) == []
