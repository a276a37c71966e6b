"""Market category and type inference from free-text market descriptions."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import lru_cache

from bettracker.bets.schemas import Bet, BetType, MarketCategory
from bettracker.markets.vocabulary import (
    BASKETBALL_SPORTS,
    DEFAULT_STAT_SPORT,
    DIRECT_PROP_TYPES,
    FUTURES_KEYWORDS,
    FUTURES_TYPES,
    MAIN_MARKET_KEYWORDS,
    MAIN_MARKET_TYPES,
    PROP_KEYWORDS,
    PROP_OVERRIDE_MARKERS,
    STAT_TYPE_MAPPINGS,
)

PROPS = MarketCategory.PROPS.value
MAIN_MARKETS = MarketCategory.MAIN_MARKETS.value
FUTURES = MarketCategory.FUTURES.value
PARLAYS = MarketCategory.PARLAYS.value

_TD_TOKEN = re.compile(r"(?:^|\s)td(?:\s|$)")
_TRAILING_SPREAD = re.compile(r"[+-]\d{1,3}(?:\.5)?$")


@lru_cache(maxsize=None)
def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(rf"(?<!\w){re.escape(keyword)}(?!\w)")


def _has_keyword(text: str, keywords: Iterable[str]) -> bool:
    return any(_keyword_pattern(keyword).search(text) for keyword in keywords)


def _first_keyword_match(text: str, table: Iterable[tuple[str, str]]) -> str | None:
    for keyword, code in table:
        if _keyword_pattern(keyword).search(text):
            return code
    return None


def _sport_key(sport: str | None) -> str:
    return (sport or "").strip().upper()


def is_basketball(sport: str | None) -> bool:
    return _sport_key(sport) in BASKETBALL_SPORTS


def stat_vocabulary(sport: str | None) -> tuple[tuple[str, str], ...]:
    """Ordered (pattern, code) pairs for a sport; unknown sports use basketball."""

    return STAT_TYPE_MAPPINGS.get(_sport_key(sport), STAT_TYPE_MAPPINGS[DEFAULT_STAT_SPORT])


def _matches_stat_vocabulary(text: str, sport: str) -> bool:
    return any(pattern in text for pattern, _ in stat_vocabulary(sport))


def _is_main_market(text: str, _sport: str) -> bool:
    if not _has_keyword(text, MAIN_MARKET_KEYWORDS):
        return False
    # "player points total" is a prop even though it says "total"
    return not any(marker in text for marker in PROP_OVERRIDE_MARKERS)


def _is_basketball_td(text: str, sport: str) -> bool:
    # TD is triple-double only in basketball; football leaves it to type mapping
    return is_basketball(sport) and bool(_TD_TOKEN.search(text))


@dataclass(frozen=True)
class ClassificationRule:
    name: str
    applies: Callable[[str, str], bool]
    category: str


# Evaluated top to bottom; the first rule that applies wins.
CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    # Season-long wording beats everything, "win total" would otherwise look like a total.
    ClassificationRule("futures", lambda text, _: _has_keyword(text, FUTURES_KEYWORDS), FUTURES),
    ClassificationRule("main-market", _is_main_market, MAIN_MARKETS),
    ClassificationRule("basketball-td", _is_basketball_td, PROPS),
    ClassificationRule("prop-keyword", lambda text, _: _has_keyword(text, PROP_KEYWORDS), PROPS),
    ClassificationRule("stat-vocabulary", _matches_stat_vocabulary, PROPS),
)

# Calling a prop a main market skews the totals dashboards more than the reverse.
DEFAULT_CATEGORY = PROPS


def classify(market_text: str | None, sport: str | None = "") -> str:
    """Return the category of one leg's market text."""

    text = (market_text or "").strip().lower()
    if not text:
        return DEFAULT_CATEGORY
    sport = sport or ""
    for rule in CLASSIFICATION_RULES:
        if rule.applies(text, sport):
            return rule.category
    return DEFAULT_CATEGORY


def determine_type(market_text: str | None, category: str, sport: str | None = "") -> str:
    """Return the type code for a market within ``category``.

    An empty string for props means the market needs manual classification.
    """

    text = (market_text or "").lower()
    normalized = text.strip()

    if category == PROPS:
        if _is_basketball_td(normalized, sport or ""):
            return "TD"
        if normalized in DIRECT_PROP_TYPES:
            return DIRECT_PROP_TYPES[normalized]
        for pattern, code in stat_vocabulary(sport):
            if pattern in text:
                return code
        return ""

    # Keyword sets match whole words rather than substrings ("Thunder" is not "under").
    if category == MAIN_MARKETS:
        return _first_keyword_match(normalized, MAIN_MARKET_TYPES) or "Spread"

    if category == FUTURES:
        return _first_keyword_match(normalized, FUTURES_TYPES) or "Future"

    return ""


def determine_parlay_type(bet_type: BetType | str) -> str:
    value = bet_type.value if isinstance(bet_type, BetType) else str(bet_type)
    if value == BetType.SGP_PLUS.value:
        return "SGP+"
    if value == BetType.SGP.value:
        return "SGP"
    return "Parlay"


def normalize_category_for_display(category: str | None) -> str:
    """Map a parser-level category onto the row categories."""

    if category == MarketCategory.SGP.value:
        return PARLAYS
    if category in {PROPS, MAIN_MARKETS, FUTURES, PARLAYS}:
        return category
    return DEFAULT_CATEGORY


def classify_bet(bet: Bet) -> str:
    """Ticket-level category, used when a parser left ``marketCategory`` empty."""

    if bet.bet_type in {BetType.SGP, BetType.SGP_PLUS}:
        return MarketCategory.SGP.value
    if bet.bet_type == BetType.PARLAY:
        return PARLAYS

    description = bet.description.lower()
    if _has_keyword(description, FUTURES_KEYWORDS):
        return FUTURES
    if _has_keyword(description, MAIN_MARKET_KEYWORDS) or _TRAILING_SPREAD.search(description.strip()):
        return MAIN_MARKETS
    if (bet.name or "").strip() or (bet.type or "").strip():
        return PROPS
    if any(leg.entities for leg in bet.legs):
        return PROPS
    if _has_keyword(description, PROP_KEYWORDS):
        return PROPS
    return MAIN_MARKETS
