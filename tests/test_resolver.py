"""Entity resolution tests."""

from __future__ import annotations

from bettracker.catalog import resolver
from bettracker.catalog.catalog import Catalog
from bettracker.catalog.types import (
    Ambiguous,
    CanonicalEntity,
    EntityKind,
    Resolved,
    ResolutionStatus,
    Unresolved,
)


def _catalog() -> Catalog:
    return Catalog([CanonicalEntity(EntityKind.TEAM, "Lakers", sport="NBA", aliases=("LA Lakers", "LAL"))])


def test_resolved_unresolved_and_ambiguous() -> None:
    catalog = _catalog()
    assert resolver.resolve_team("LAL", "NBA", catalog) == Resolved(raw="LAL", canonical="Lakers")
    assert resolver.resolve_team("Clippers", "NBA", catalog) == Unresolved(raw="Clippers")

    catalog.add(CanonicalEntity(EntityKind.TEAM, "Los Angeles Lightning", sport="NBA", aliases=("LAL",)))
    result = resolver.resolve_team("lal", "NBA", catalog)
    assert isinstance(result, Ambiguous)
    assert result.status is ResolutionStatus.AMBIGUOUS
    assert result.candidates == ("Lakers", "Los Angeles Lightning")


def test_canonical_name_matches_without_alias() -> None:
    assert resolver.resolve_team("  lakers ", "NBA", _catalog()).status is ResolutionStatus.RESOLVED


def test_disabled_entities_do_not_match() -> None:
    catalog = _catalog()
    catalog.add(CanonicalEntity(EntityKind.TEAM, "Los Angeles Lightning", sport="NBA", aliases=("LAL",)))
    catalog.disable(EntityKind.TEAM, "Los Angeles Lightning", sport="NBA")
    assert resolver.resolve_team("LAL", "NBA", catalog) == Resolved(raw="LAL", canonical="Lakers")


def test_sport_scoping() -> None:
    catalog = _catalog()
    catalog.add(CanonicalEntity(EntityKind.STAT_TYPE, "Pts", aliases=("Points",)))
    assert resolver.resolve_team("LAL", "NFL", catalog).status is ResolutionStatus.UNRESOLVED
    assert resolver.resolve_team("LAL", None, catalog).status is ResolutionStatus.RESOLVED
    # unscoped entities apply to every sport
    assert resolver.resolve_bet_type("points", "WNBA", catalog) == Resolved(raw="points", canonical="Pts")


def test_kinds_are_separate() -> None:
    assert resolver.resolve_player("LAL", "NBA", _catalog()).status is ResolutionStatus.UNRESOLVED


def test_empty_raw_is_unresolved() -> None:
    assert resolver.resolve_player("   ", "NBA", _catalog()) == Unresolved(raw="   ")
    assert resolver.resolve_player(None, "NBA", _catalog()) == Unresolved(raw="")


def test_accepted_names_short_circuit() -> None:
    catalog = _catalog()
    catalog.accept(EntityKind.PLAYER, "Will Richard")
    assert resolver.resolve_player(" will richard ", "NBA", catalog) == Resolved(
        raw=" will richard ", canonical="will richard"
    )


def test_resolver_version_tracks_catalog() -> None:
    catalog = _catalog()
    before = resolver.get_resolver_version(catalog)
    catalog.add_aliases(EntityKind.TEAM, "Lakers", ["Lake Show"], sport="NBA")
    assert resolver.get_resolver_version(catalog) > before
    assert resolver.get_resolver_version(catalog.snapshot()) == catalog.version


def test_cache_is_invalidated_by_catalog_edits() -> None:
    catalog = _catalog()
    cache = resolver.ResolutionCache(catalog)

    assert cache.resolve(EntityKind.TEAM, "Lake Show", "NBA").status is ResolutionStatus.UNRESOLVED
    assert cache.resolve(EntityKind.TEAM, "Lake Show", "NBA").status is ResolutionStatus.UNRESOLVED
    assert (cache.hits, cache.misses) == (1, 1)

    catalog.add_aliases(EntityKind.TEAM, "Lakers", ["Lake Show"], sport="NBA")
    assert cache.resolve(EntityKind.TEAM, "Lake Show", "NBA") == Resolved(raw="Lake Show", canonical="Lakers")
    assert cache.version == catalog.version
    assert len(cache) == 1


def test_aggregation_key_buckets_unresolved() -> None:
    catalog = _catalog()
    assert resolver.resolve_aggregation_key(EntityKind.TEAM, "LAL", "NBA", catalog) == "Lakers"
    assert resolver.resolve_aggregation_key(EntityKind.TEAM, "Nets", "NBA", catalog) == "[Unresolved]"
    assert resolver.resolve_aggregation_key(EntityKind.TEAM, "Nets", "NBA", catalog, "Other") == "Other"
