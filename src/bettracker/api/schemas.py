"""Pydantic schemas for the BetTracker API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from bettracker.catalog.types import EntityKind, ResolutionStatus


class ValidationResponse(BaseModel):
    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class BetsRequest(BaseModel):
    bets: list[dict[str, Any]]
    sportsbook: str = ""


class BatchValidationResponse(BaseModel):
    total_bets: int
    valid_bets: int
    invalid_bets: int
    errors: list[str]
    warnings: list[str]


class RowsResponse(BaseModel):
    rows: list[dict[str, Any]]
    warnings: list[str] = Field(default_factory=list)


class ClassifyRequest(BaseModel):
    market: str
    sport: str = ""


class ClassifyResponse(BaseModel):
    category: str
    type: str


class ResolutionResponse(BaseModel):
    kind: EntityKind
    raw: str
    status: ResolutionStatus
    canonical: str | None = None
    candidates: list[str] = Field(default_factory=list)
    resolver_version: int


class EntityPayload(BaseModel):
    kind: EntityKind
    canonical: str = Field(min_length=1)
    sport: str | None = None
    aliases: list[str] = Field(default_factory=list)
    disabled: bool = False


class EntityRef(BaseModel):
    kind: EntityKind
    canonical: str
    sport: str | None = None


class AliasRequest(EntityRef):
    aliases: list[str] = Field(min_length=1)


class EntityUpdate(EntityRef):
    new_canonical: str | None = None
    new_sport: str | None = None
    aliases: list[str] | None = None


class AcceptRequest(BaseModel):
    kind: EntityKind
    name: str = Field(min_length=1)


class EntityResponse(BaseModel):
    kind: EntityKind
    canonical: str
    sport: str | None
    aliases: list[str]
    disabled: bool
    resolver_version: int


class SummaryResponse(BaseModel):
    total_bets: int
    total_wagered: float
    net_profit: float
    wins: int
    losses: int
    pushes: int
    pending: int
    win_rate: float
    roi: float
    rejected: int = 0


class AcceptedNamesResponse(BaseModel):
    kind: EntityKind
    accepted: list[str]
    resolver_version: int
