"""Bet to FinalRow flattening.

One row per leg. Multi-leg tickets get an extra header row that carries the
ticket's stake, odds, payout and net; child rows never repeat that money.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

from bettracker.bets import finance
from bettracker.bets.contract import parse_timestamp
from bettracker.bets.schemas import Bet, FinalRow, Leg
from bettracker.config import get_settings
from bettracker.markets.classifier import (
    MAIN_MARKETS,
    PARLAYS,
    classify,
    determine_parlay_type,
    determine_type,
    normalize_category_for_display,
)

logger = logging.getLogger(__name__)

settings = get_settings()

SGP_PLACEHOLDER_MARKER = "same game parlay"
MILESTONE_INDICATOR = "+"

_FINAL_RESULTS = {"win": "Win", "loss": "Loss", "push": "Push", "pending": "Pending", "unknown": "Pending"}


def _is_sgp_placeholder(leg: Leg) -> bool:
    return SGP_PLACEHOLDER_MARKER in leg.market.lower() and not leg.entities and not leg.children


def expand_legs(legs: Sequence[Leg]) -> list[Leg]:
    """Drop SGP wrappers and replace group legs with their (nested) children."""

    expanded: list[Leg] = []
    for leg in legs:
        if _is_sgp_placeholder(leg):
            continue
        if leg.is_group_leg:
            expanded.extend(expand_legs(leg.children or []))
            continue
        expanded.append(leg)
    return expanded


def _leg_key(leg: Leg) -> tuple[tuple[str, ...], str, str, str]:
    return (
        tuple(" ".join(entity.split()).casefold() for entity in leg.entities),
        " ".join(leg.market.split()).casefold(),
        "" if leg.target is None else str(leg.target).strip(),
        leg.ou or "",
    )


def dedupe_legs(legs: Sequence[Leg]) -> list[Leg]:
    seen: set[tuple[tuple[str, ...], str, str, str]] = set()
    unique: list[Leg] = []
    for leg in legs:
        key = _leg_key(leg)
        if key in seen:
            continue
        seen.add(key)
        unique.append(leg)
    return unique


def to_final_result(result: str | None) -> str:
    if result is None or not str(result).strip():
        return ""
    normalized = str(result).strip().lower()
    if normalized in _FINAL_RESULTS:
        return _FINAL_RESULTS[normalized]
    if normalized.startswith("won"):
        return "Win"
    if normalized.startswith(("lost", "lose")):
        return "Loss"
    if normalized.startswith("push"):
        return "Push"
    logger.warning('Unknown result value %r, defaulting to "Pending"', result)
    return "Pending"


def over_under_flags(ou: str | None, target: str | int | float | None) -> tuple[str, str]:
    if ou == "Over":
        return "1", "0"
    if ou == "Under":
        return "0", "1"
    if target is not None and MILESTONE_INDICATOR in str(target):
        return "1", "0"
    return "", ""


def format_line(target: str | int | float | None) -> str:
    if target is None:
        return ""
    return str(target).strip()


def format_date(placed_at: str | None) -> str:
    """MM/DD/YY in the timestamp's own offset; blank when unparseable."""

    if not placed_at:
        return ""
    parsed = parse_timestamp(placed_at)
    if parsed is None:
        return ""
    return parsed.strftime("%m/%d/%y")


def normalize_leg_odds(odds: int | float | None, context: str = "") -> int | None:
    """Leg odds of 0 mean "not shown"; fractional values are not American odds."""

    if odds is None or odds == 0 or not math.isfinite(odds):
        return None
    if float(odds) != int(odds):
        logger.warning("Non-integer leg odds %s (%s); only whole-number American odds are accepted", odds, context)
        return None
    return int(odds)


@dataclass(frozen=True)
class _RowPlacement:
    parlay_group_id: str | None = None
    leg_index: int | None = None
    leg_count: int | None = None
    is_header: bool = False
    is_child: bool = False

    @property
    def shows_money(self) -> bool:
        return not self.is_child


def _build_row(
    bet: Bet,
    placement: _RowPlacement,
    *,
    category: str,
    type_code: str,
    name: str,
    name2: str | None = None,
    target: str | int | float | None = None,
    ou: str | None = None,
    result: str | None = None,
    leg_odds: int | None = None,
) -> FinalRow:
    if placement.is_child and leg_odds is not None:
        raw_odds: int | float | None = leg_odds
    elif placement.shows_money:
        raw_odds = bet.odds
    else:
        raw_odds = None

    raw_bet = raw_to_win = raw_net = None
    if placement.shows_money:
        raw_bet = bet.stake
        raw_to_win = finance.to_win(bet.stake, bet.odds, bet.payout)
        raw_net = finance.net(bet.result, bet.stake, bet.odds, bet.payout)

    over, under = over_under_flags(ou, target)
    return FinalRow(
        date=format_date(bet.placed_at),
        site=bet.book,
        sport=bet.sport,
        category=category,
        type=type_code,
        name=name,
        name2=name2,
        over=over,
        under=under,
        line=format_line(target),
        odds=finance.format_odds(raw_odds),
        bet=finance.format_money(raw_bet),
        to_win=finance.format_money(raw_to_win),
        result=to_final_result(result),
        net=finance.format_money(raw_net),
        live="1" if bet.is_live else "",
        tail="1" if bet.tail else "",
        raw_odds=raw_odds,
        raw_bet=raw_bet,
        raw_to_win=raw_to_win,
        raw_net=raw_net,
        parlay_group_id=placement.parlay_group_id,
        leg_index=placement.leg_index,
        leg_count=placement.leg_count,
        is_parlay_header=placement.is_header,
        is_parlay_child=placement.is_child,
    )


def _legacy_row(bet: Bet) -> FinalRow:
    market = bet.type or ""
    if bet.market_category:
        category = normalize_category_for_display(bet.market_category)
    else:
        category = classify(market or bet.description, bet.sport)
    type_code = determine_type(market, category, bet.sport) or market
    return _build_row(
        bet,
        _RowPlacement(),
        category=category,
        type_code=type_code,
        name=bet.name or "",
        target=bet.line,
        ou=bet.ou,
        result=bet.result.value,
    )


def _leg_row(bet: Bet, leg: Leg, index: int, is_parlay: bool) -> FinalRow:
    category = classify(leg.market, bet.sport)
    type_code = determine_type(leg.market, category, bet.sport)
    name = leg.entities[0] if leg.entities else ""
    # Totals name both sides of the game instead of collapsing to one subject.
    name2 = leg.entities[1] if category == MAIN_MARKETS and type_code == "Total" and len(leg.entities) >= 2 else None

    if is_parlay:
        placement = _RowPlacement(parlay_group_id=bet.id, leg_index=index + 1, is_child=True)
        result = leg.result
    else:
        placement = _RowPlacement()
        result = leg.result or bet.result.value

    return _build_row(
        bet,
        placement,
        category=category,
        type_code=type_code,
        name=name,
        name2=name2,
        target=leg.target,
        ou=leg.ou,
        result=result,
        leg_odds=normalize_leg_odds(leg.odds, f"bet={bet.id} market={leg.market or 'N/A'} entity={name or 'N/A'}"),
    )


def bet_to_final_rows(bet: Bet) -> list[FinalRow]:
    """Flatten a validated bet into display rows.

    Parlays of N legs give N + 1 rows (header first); everything else gives one
    row per leg, or a single row built from bet-level fields when the parser
    supplied no legs. The input bet is never modified.
    """

    if not bet.legs:
        return [_legacy_row(bet)]

    legs = dedupe_legs(expand_legs(bet.legs))
    if not legs:
        logger.warning("Bet %s has no renderable legs after flattening", bet.bet_id)
        return []

    is_parlay = len(legs) > 1
    limit = settings.max_legs_per_bet
    if len(legs) > limit:
        logger.error(
            "Bet %s has %d legs - limiting to %d to prevent excessive rows", bet.bet_id, len(legs), limit
        )
        legs = legs[:limit]

    rows: list[FinalRow] = []
    if is_parlay:
        label = determine_parlay_type(bet.bet_type)
        rows.append(
            _build_row(
                bet,
                _RowPlacement(parlay_group_id=bet.id, leg_count=len(legs), is_header=True),
                category=PARLAYS,
                type_code=label,
                name=f"{label} ({len(legs)})",
                result=bet.result.value,
            )
        )
    rows.extend(_leg_row(bet, leg, index, is_parlay) for index, leg in enumerate(legs))
    return rows
