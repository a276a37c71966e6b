"""Catalog entity records and resolution outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum


class EntityKind(str, Enum):
    TEAM = "team"
    PLAYER = "player"
    STAT_TYPE = "stat_type"


class ResolutionStatus(str, Enum):
    RESOLVED = "resolved"
    AMBIGUOUS = "ambiguous"
    UNRESOLVED = "unresolved"


def to_lookup_key(raw: str | None) -> str:
    """Trim, case-fold and collapse internal whitespace."""

    if not raw:
        return ""
    return " ".join(raw.split()).casefold()


@dataclass(frozen=True)
class CanonicalEntity:
    """A user-curated team, player or stat type with its accepted aliases."""

    kind: EntityKind
    canonical: str
    sport: str | None = None
    aliases: tuple[str, ...] = ()
    disabled: bool = False

    @property
    def key(self) -> tuple[EntityKind, str, str | None]:
        return (self.kind, to_lookup_key(self.canonical), _sport_key(self.sport))

    def lookup_keys(self) -> set[str]:
        keys = {to_lookup_key(alias) for alias in self.aliases}
        keys.add(to_lookup_key(self.canonical))
        keys.discard("")
        return keys

    def applies_to(self, sport: str | None) -> bool:
        # Unscoped entities and unscoped queries match everything.
        wanted = _sport_key(sport)
        return self.sport is None or wanted is None or _sport_key(self.sport) == wanted

    def with_changes(self, **changes: object) -> CanonicalEntity:
        return replace(self, **changes)


def _sport_key(sport: str | None) -> str | None:
    if sport is None or not sport.strip():
        return None
    return sport.strip().upper()


@dataclass(frozen=True)
class Resolved:
    raw: str
    canonical: str

    @property
    def status(self) -> ResolutionStatus:
        return ResolutionStatus.RESOLVED


@dataclass(frozen=True)
class Ambiguous:
    raw: str
    candidates: tuple[str, ...] = field(default_factory=tuple)

    @property
    def status(self) -> ResolutionStatus:
        return ResolutionStatus.AMBIGUOUS


@dataclass(frozen=True)
class Unresolved:
    raw: str

    @property
    def status(self) -> ResolutionStatus:
        return ResolutionStatus.UNRESOLVED


ResolutionResult = Resolved | Ambiguous | Unresolved
