"""Parser contract checks applied before a bet enters the pipeline.

A bet that fails here must never reach flattening or aggregation: a malformed
stake or odds value would silently corrupt dashboard totals. Cosmetic
omissions only produce warnings and fall back to classification defaults.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from bettracker.bets.schemas import Bet, BetResult, BetType, EntityType, MarketCategory

logger = logging.getLogger(__name__)

VALID_BET_RESULTS = frozenset(result.value for result in BetResult)
VALID_BET_TYPES = frozenset(bet_type.value for bet_type in BetType)
VALID_MARKET_CATEGORIES = frozenset(category.value for category in MarketCategory)
VALID_ENTITY_TYPES = frozenset(entity_type.value for entity_type in EntityType)
VALID_LEG_RESULTS = frozenset({"WIN", "LOSS", "PUSH", "PENDING", "UNKNOWN"})

# Bet types that may omit legs and describe the selection at bet level.
LEGACY_SINGLE_TYPES = frozenset({BetType.SINGLE.value, BetType.LIVE.value, BetType.OTHER.value})


@dataclass(frozen=True)
class BetValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class BatchValidationSummary:
    total_bets: int
    valid_bets: int
    invalid_bets: int
    all_errors: list[str]
    all_warnings: list[str]


def _get(candidate: Mapping[str, Any], camel: str, snake: str | None = None) -> Any:
    if camel in candidate:
        return candidate[camel]
    if snake is not None:
        return candidate.get(snake)
    return None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_member(value: Any, allowed: frozenset[str]) -> bool:
    return isinstance(value, str) and value in allowed


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z``."""

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _as_mapping(candidate: Bet | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(candidate, Bet):
        return candidate.model_dump(by_alias=True, mode="json")
    return candidate


def _is_legacy_single(bet: Mapping[str, Any]) -> bool:
    bet_type = _get(bet, "betType", "bet_type")
    if bet_type is not None and not _is_member(bet_type, LEGACY_SINGLE_TYPES):
        return False
    return not (_is_blank(bet.get("name")) and _is_blank(bet.get("type")))


def _check_legs(legs: Sequence[Any], prefix: str, path: str, errors: list[str], warnings: list[str]) -> None:
    for index, leg in enumerate(legs):
        label = f"{path}{index}"
        if not isinstance(leg, Mapping):
            errors.append(f"{prefix}Leg {label} is not an object")
            continue

        if _is_blank(leg.get("market")):
            errors.append(f"{prefix}Leg {label} missing market")

        entity_type = _get(leg, "entityType", "entity_type")
        if entity_type is None:
            warnings.append(f"{prefix}Leg {label} missing entityType")
        elif not _is_member(entity_type, VALID_ENTITY_TYPES):
            errors.append(f'{prefix}Leg {label} invalid entityType "{entity_type}"')

        result = leg.get("result")
        if isinstance(result, str) and result != result.upper() and result.upper() in VALID_LEG_RESULTS:
            warnings.append(f'{prefix}Leg {label} result should be uppercase ("{result.upper()}" not "{result}")')

        odds = leg.get("odds")
        if odds is not None and not _is_number(odds):
            errors.append(f"{prefix}Leg {label} invalid odds {odds!r}")

        children = leg.get("children")
        if _get(leg, "isGroupLeg", "is_group_leg") and children is not None:
            if not isinstance(children, Sequence) or isinstance(children, str) or not children:
                errors.append(f"{prefix}Leg {label} is group leg but has empty/invalid children")
                continue
        if isinstance(children, Sequence) and not isinstance(children, str):
            _check_legs(children, prefix, f"{label}.", errors, warnings)


def validate_bet_contract(candidate: Bet | Mapping[str, Any], sportsbook: str = "") -> BetValidationResult:
    """Check a parser-produced bet. Never raises for malformed input."""

    prefix = f"{sportsbook}: " if sportsbook else ""
    errors: list[str] = []
    warnings: list[str] = []

    if not isinstance(candidate, (Bet, Mapping)):
        return BetValidationResult(is_valid=False, errors=[f"{prefix}Bet is not an object"])
    bet = _as_mapping(candidate)

    for camel, snake in (("id", None), ("betId", "bet_id"), ("placedAt", "placed_at")):
        if _is_blank(_get(bet, camel, snake)):
            errors.append(f"{prefix}Missing bet.{camel}")
    if _is_blank(bet.get("book")):
        warnings.append(f"{prefix}Missing bet.book")

    stake = bet.get("stake")
    if not _is_number(stake) or stake <= 0:
        errors.append(f"{prefix}Invalid stake {stake!r} (must be a positive number)")

    payout = bet.get("payout")
    if payout is None:
        warnings.append(f"{prefix}Missing bet.payout")
    elif not _is_number(payout) or payout < 0:
        errors.append(f"{prefix}Invalid payout {payout!r} (must be a non-negative number)")

    odds = bet.get("odds")
    if odds is not None and not _is_number(odds):
        errors.append(f"{prefix}Invalid odds {odds!r} (must be a number)")

    placed_at = _get(bet, "placedAt", "placed_at")
    if isinstance(placed_at, str) and placed_at.strip() and parse_timestamp(placed_at) is None:
        errors.append(f"{prefix}Invalid placedAt date {placed_at!r}")
    elif placed_at is not None and not isinstance(placed_at, str):
        errors.append(f"{prefix}Invalid placedAt date {placed_at!r}")

    result = bet.get("result")
    if not _is_member(result, VALID_BET_RESULTS):
        errors.append(f'{prefix}Invalid result value "{result}"')

    bet_type = _get(bet, "betType", "bet_type")
    if bet_type is not None and not _is_member(bet_type, VALID_BET_TYPES):
        errors.append(f'{prefix}Invalid betType value "{bet_type}"')

    category = _get(bet, "marketCategory", "market_category")
    if category is None:
        warnings.append(f"{prefix}Missing marketCategory")
    elif not _is_member(category, VALID_MARKET_CATEGORIES):
        warnings.append(f'{prefix}Unknown marketCategory "{category}"')

    legs = bet.get("legs")
    if legs is None or (isinstance(legs, Sequence) and not isinstance(legs, str) and not legs):
        if not _is_legacy_single(bet):
            errors.append(f"{prefix}Missing or empty legs")
    elif not isinstance(legs, Sequence) or isinstance(legs, str):
        errors.append(f"{prefix}Invalid legs (must be a list)")
    else:
        _check_legs(legs, prefix, "", errors, warnings)
        if bet_type == BetType.SINGLE.value and len(legs) != 1:
            warnings.append(f"{prefix}Single bet should have exactly 1 leg, has {len(legs)}")
        if bet_type == BetType.PARLAY.value and len(legs) < 2:
            warnings.append(f"{prefix}Parlay should have 2+ legs, has {len(legs)}")

    return BetValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def parse_bet(
    candidate: Bet | Mapping[str, Any], sportsbook: str = ""
) -> tuple[Bet | None, BetValidationResult]:
    """Validate and build a :class:`Bet`; invalid input yields ``(None, result)``."""

    report = validate_bet_contract(candidate, sportsbook)
    if not report.is_valid:
        logger.warning("Rejected bet %s: %s", _describe(candidate), "; ".join(report.errors))
        return None, report
    if isinstance(candidate, Bet):
        return candidate, report
    try:
        bet = Bet.model_validate(candidate)
    except ValidationError as exc:
        errors = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        ]
        logger.warning("Rejected bet %s: %s", _describe(candidate), "; ".join(errors))
        return None, BetValidationResult(is_valid=False, errors=errors, warnings=report.warnings)
    return bet, report


def _describe(candidate: Bet | Mapping[str, Any]) -> str:
    if isinstance(candidate, Bet):
        return candidate.bet_id
    if isinstance(candidate, Mapping):
        return str(_get(candidate, "betId", "bet_id") or candidate.get("id") or "<unknown>")
    return "<unknown>"


def validate_bets_contract(bets: Iterable[Bet | Mapping[str, Any]], sportsbook: str = "") -> BatchValidationSummary:
    total = valid = 0
    all_errors: list[str] = []
    all_warnings: list[str] = []
    for bet in bets:
        report = validate_bet_contract(bet, sportsbook)
        total += 1
        valid += int(report.is_valid)
        all_errors.extend(report.errors)
        all_warnings.extend(report.warnings)
    return BatchValidationSummary(
        total_bets=total,
        valid_bets=valid,
        invalid_bets=total - valid,
        all_errors=all_errors,
        all_warnings=all_warnings,
    )
