"""FastAPI backend for BetTracker."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache
from typing import Annotated, Any

from fastapi import Depends, FastAPI, Header, HTTPException, Query, status
from fastapi.middleware.cors import CORSMiddleware

from bettracker import __version__
from bettracker.analytics.aggregation import compute_overall_stats
from bettracker.api.schemas import (
    AcceptedNamesResponse,
    AcceptRequest,
    AliasRequest,
    BatchValidationResponse,
    BetsRequest,
    ClassifyRequest,
    ClassifyResponse,
    EntityPayload,
    EntityRef,
    EntityResponse,
    EntityUpdate,
    ResolutionResponse,
    RowsResponse,
    SummaryResponse,
)
from bettracker.bets.contract import parse_bet, validate_bets_contract
from bettracker.bets.flatten import bet_to_final_rows
from bettracker.bets.schemas import Bet
from bettracker.catalog.catalog import Catalog, CatalogError, DuplicateEntityError, EntityNotFoundError
from bettracker.catalog.resolver import get_resolver_version, resolve
from bettracker.catalog.types import Ambiguous, CanonicalEntity, EntityKind, Resolved
from bettracker.config import get_api_access_key
from bettracker.db.database import init_db
from bettracker.db.repository import CatalogStore
from bettracker.markets.classifier import classify, determine_type

logger = logging.getLogger(__name__)

app = FastAPI(
    title="BetTracker API",
    version=__version__,
    description="Bet validation, flattening, market classification and entity resolution.",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Guards read-modify-save of the shared catalog.
_catalog_lock = threading.Lock()


@lru_cache(maxsize=1)
def get_store() -> CatalogStore:
    init_db()
    return CatalogStore()


@lru_cache(maxsize=1)
def get_catalog() -> Catalog:
    return get_store().load()


def require_api_key(x_api_key: str | None = Header(default=None, alias="X-API-Key")) -> None:
    expected = get_api_access_key()
    if expected is None:
        return
    if not x_api_key or x_api_key != expected:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


CatalogDep = Annotated[Catalog, Depends(get_catalog)]
StoreDep = Annotated[CatalogStore, Depends(get_store)]
APIKeyDep = Annotated[None, Depends(require_api_key)]
RawQuery = Annotated[str, Query(min_length=1)]
SportQuery = Annotated[str | None, Query()]


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/version")
def version(catalog: CatalogDep) -> dict[str, Any]:
    return {
        "name": "bettracker",
        "version": __version__,
        "resolver_version": get_resolver_version(catalog),
    }


@app.post("/bets/validate", response_model=BatchValidationResponse)
def validate_bets(payload: BetsRequest, _: APIKeyDep) -> BatchValidationResponse:
    summary = validate_bets_contract(payload.bets, payload.sportsbook)
    return BatchValidationResponse(
        total_bets=summary.total_bets,
        valid_bets=summary.valid_bets,
        invalid_bets=summary.invalid_bets,
        errors=summary.all_errors,
        warnings=summary.all_warnings,
    )


def _parse_all(payload: BetsRequest) -> tuple[list[Bet], list[str], list[str]]:
    bets: list[Bet] = []
    errors: list[str] = []
    warnings: list[str] = []
    for candidate in payload.bets:
        bet, report = parse_bet(candidate, payload.sportsbook)
        warnings.extend(report.warnings)
        if bet is None:
            errors.extend(report.errors)
        else:
            bets.append(bet)
    return bets, errors, warnings


@app.post("/bets/rows", response_model=RowsResponse)
def bets_to_rows(payload: BetsRequest, _: APIKeyDep) -> RowsResponse:
    bets, errors, warnings = _parse_all(payload)
    if errors:
        raise HTTPException(status_code=422, detail={"errors": errors})
    rows = [row.model_dump(by_alias=True) for bet in bets for row in bet_to_final_rows(bet)]
    return RowsResponse(rows=rows, warnings=warnings)


@app.post("/markets/classify", response_model=ClassifyResponse)
def classify_market(payload: ClassifyRequest) -> ClassifyResponse:
    category = classify(payload.market, payload.sport)
    return ClassifyResponse(category=category, type=determine_type(payload.market, category, payload.sport))


@app.get("/resolve/{kind}", response_model=ResolutionResponse)
def resolve_entity(kind: EntityKind, raw: RawQuery, catalog: CatalogDep, sport: SportQuery = None) -> ResolutionResponse:
    result = resolve(kind, raw, sport, catalog)
    return ResolutionResponse(
        kind=kind,
        raw=raw,
        status=result.status,
        canonical=result.canonical if isinstance(result, Resolved) else None,
        candidates=list(result.candidates) if isinstance(result, Ambiguous) else [],
        resolver_version=get_resolver_version(catalog),
    )


def _entity_response(entity: CanonicalEntity, version: int) -> EntityResponse:
    return EntityResponse(
        kind=entity.kind,
        canonical=entity.canonical,
        sport=entity.sport,
        aliases=list(entity.aliases),
        disabled=entity.disabled,
        resolver_version=version,
    )


@contextmanager
def _catalog_edit(catalog: Catalog, store: CatalogStore) -> Iterator[Catalog]:
    """Yield a draft of ``catalog``; it replaces the live catalog only once saved."""

    with _catalog_lock:
        draft = catalog.copy()
        try:
            yield draft
        except DuplicateEntityError as exc:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
        except EntityNotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        except CatalogError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        store.save(draft)
        catalog.adopt(draft)


@app.post("/catalog/entities", response_model=EntityResponse, status_code=status.HTTP_201_CREATED)
def create_entity(payload: EntityPayload, _: APIKeyDep, catalog: CatalogDep, store: StoreDep) -> EntityResponse:
    entity = CanonicalEntity(
        kind=payload.kind,
        canonical=payload.canonical,
        sport=payload.sport,
        aliases=tuple(payload.aliases),
        disabled=payload.disabled,
    )
    with _catalog_edit(catalog, store) as draft:
        created = draft.add(entity)
    return _entity_response(created, draft.version)


@app.put("/catalog/entities", response_model=EntityResponse)
def update_entity(payload: EntityUpdate, _: APIKeyDep, catalog: CatalogDep, store: StoreDep) -> EntityResponse:
    with _catalog_edit(catalog, store) as draft:
        entity = draft.update(
            payload.kind,
            payload.canonical,
            payload.sport,
            new_canonical=payload.new_canonical,
            new_sport=payload.new_sport,
            aliases=payload.aliases,
        )
    return _entity_response(entity, draft.version)


@app.post("/catalog/entities/remove", response_model=EntityResponse)
def remove_entity(payload: EntityRef, _: APIKeyDep, catalog: CatalogDep, store: StoreDep) -> EntityResponse:
    with _catalog_edit(catalog, store) as draft:
        entity = draft.remove(payload.kind, payload.canonical, payload.sport)
    return _entity_response(entity, draft.version)


@app.post("/catalog/entities/aliases", response_model=EntityResponse)
def add_aliases(payload: AliasRequest, _: APIKeyDep, catalog: CatalogDep, store: StoreDep) -> EntityResponse:
    with _catalog_edit(catalog, store) as draft:
        entity = draft.add_aliases(payload.kind, payload.canonical, payload.aliases, payload.sport)
    return _entity_response(entity, draft.version)


@app.post("/catalog/entities/disable", response_model=EntityResponse)
def disable_entity(payload: EntityRef, _: APIKeyDep, catalog: CatalogDep, store: StoreDep) -> EntityResponse:
    with _catalog_edit(catalog, store) as draft:
        entity = draft.disable(payload.kind, payload.canonical, payload.sport)
    return _entity_response(entity, draft.version)


@app.post("/catalog/entities/enable", response_model=EntityResponse)
def enable_entity(payload: EntityRef, _: APIKeyDep, catalog: CatalogDep, store: StoreDep) -> EntityResponse:
    with _catalog_edit(catalog, store) as draft:
        entity = draft.enable(payload.kind, payload.canonical, payload.sport)
    return _entity_response(entity, draft.version)


@app.post("/catalog/accepted", response_model=AcceptedNamesResponse)
def accept_name(payload: AcceptRequest, _: APIKeyDep, catalog: CatalogDep, store: StoreDep) -> AcceptedNamesResponse:
    with _catalog_edit(catalog, store) as draft:
        draft.accept(payload.kind, payload.name)
    return AcceptedNamesResponse(
        kind=payload.kind,
        accepted=list(draft.accepted_names(payload.kind)),
        resolver_version=draft.version,
    )


@app.post("/analytics/summary", response_model=SummaryResponse)
def analytics_summary(payload: BetsRequest, _: APIKeyDep) -> SummaryResponse:
    bets, errors, _warnings = _parse_all(payload)
    if errors:
        logger.warning("Summary skipped %d invalid bets", len(payload.bets) - len(bets))
    stats = compute_overall_stats(bets)
    return SummaryResponse(
        total_bets=stats.total_bets,
        total_wagered=stats.total_wagered,
        net_profit=stats.net_profit,
        wins=stats.wins,
        losses=stats.losses,
        pushes=stats.pushes,
        pending=stats.pending,
        win_rate=stats.win_rate,
        roi=stats.roi,
        rejected=len(payload.bets) - len(bets),
    )
