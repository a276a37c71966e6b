"""Keyword lists and stat vocabularies for market classification.

Keyword sets are matched on word boundaries. Type maps are matched as
substrings in declaration order, so combined stats must precede the single
stats they contain ("points rebounds assists" before "points").
"""

from __future__ import annotations

BASKETBALL_SPORTS: frozenset[str] = frozenset({"NBA", "WNBA", "CBB", "NCAAB"})

FUTURES_KEYWORDS: tuple[str, ...] = (
    "to win",
    "award",
    "mvp",
    "dpoy",
    "roy",
    "champion",
    "championship",
    "outright",
    "win total",
    "win totals",
    "make playoffs",
    "miss playoffs",
    "make/miss playoffs",
    "nba finals",
    "super bowl",
    "world series",
    "stanley cup",
)

MAIN_MARKET_KEYWORDS: tuple[str, ...] = (
    "moneyline",
    "money line",
    "ml",
    "spread",
    "point spread",
    "total",
    "totals",
    "over",
    "under",
    "run line",
    "puck line",
)

# Any of these turns a main-market looking text back into a prop.
PROP_OVERRIDE_MARKERS: tuple[str, ...] = ("player", "prop")

PROP_KEYWORDS: tuple[str, ...] = (
    "triple double",
    "triple-double",
    "double double",
    "double-double",
    "first basket",
    "first field goal",
    "first fg",
    "top scorer",
    "top points",
    "top pts",
    "points",
    "pts",
    "rebounds",
    "reb",
    "assists",
    "ast",
    "threes",
    "3pt",
    "3-pointers",
    "made threes",
    "steals",
    "stl",
    "blocks",
    "blk",
    "turnovers",
    "pra",
    "pr",
    "ra",
    "pa",
    "stocks",
    "player",
    "prop",
    "to record",
    "to score",
    "yards",
    "touchdown",
    "td",
    "receiving",
    "rushing",
    "passing",
    "receptions",
    "home runs",
    "strikeouts",
    "hits",
    "runs",
    "total bases",
    "goals",
    "shots on goal",
    "saves",
)

# Exact market texts with a fixed prop code, regardless of sport.
DIRECT_PROP_TYPES: dict[str, str] = {
    "fb": "FB",
    "first basket": "FB",
    "first field goal": "FB",
    "first fg": "FB",
    "top pts": "Top Pts",
    "top scorer": "Top Pts",
    "top points": "Top Pts",
    "top points scorer": "Top Pts",
    "dd": "DD",
    "double double": "DD",
    "double-double": "DD",
    "triple double": "TD",
    "triple-double": "TD",
}

_BASKETBALL_STATS: tuple[tuple[str, str], ...] = (
    ("points rebounds assists", "PRA"),
    ("points + rebounds + assists", "PRA"),
    ("pts reb ast", "PRA"),
    ("pts + reb + ast", "PRA"),
    ("points rebounds", "PR"),
    ("points + rebounds", "PR"),
    ("pts reb", "PR"),
    ("rebounds assists", "RA"),
    ("rebounds + assists", "RA"),
    ("reb ast", "RA"),
    ("points assists", "PA"),
    ("points + assists", "PA"),
    ("pts ast", "PA"),
    ("steals blocks", "Stocks"),
    ("steals + blocks", "Stocks"),
    ("stl blk", "Stocks"),
    ("first basket", "FB"),
    ("first field goal", "FB"),
    ("first fg", "FB"),
    ("top scorer", "Top Pts"),
    ("top points", "Top Pts"),
    ("top pts", "Top Pts"),
    ("double double", "DD"),
    ("double-double", "DD"),
    ("triple double", "TD"),
    ("triple-double", "TD"),
    ("made threes", "3pt"),
    ("3-pointers", "3pt"),
    ("threes", "3pt"),
    ("3pt", "3pt"),
    ("points", "Pts"),
    ("pts", "Pts"),
    ("rebounds", "Reb"),
    ("reb", "Reb"),
    ("assists", "Ast"),
    ("ast", "Ast"),
    ("steals", "Stl"),
    ("stl", "Stl"),
    ("blocks", "Blk"),
    ("blk", "Blk"),
    ("turnovers", "TO"),
)

STAT_TYPE_MAPPINGS: dict[str, tuple[tuple[str, str], ...]] = {
    "NBA": _BASKETBALL_STATS,
    "WNBA": _BASKETBALL_STATS,
    "CBB": _BASKETBALL_STATS,
    "NCAAB": _BASKETBALL_STATS,
    "NFL": (
        ("passing yards", "Pass Yds"),
        ("rushing + receiving yards", "Rush+Rec Yds"),
        ("rushing yards", "Rush Yds"),
        ("receiving yards", "Rec Yds"),
        ("passing touchdowns", "Pass TD"),
        ("passing tds", "Pass TD"),
        ("anytime touchdown", "ATD"),
        ("anytime td", "ATD"),
        ("first touchdown", "FTD"),
        ("first td", "FTD"),
        ("touchdown", "ATD"),
        ("receptions", "Rec"),
        ("completions", "Comp"),
        ("interceptions", "Int"),
    ),
    "MLB": (
        ("hits + runs + rbis", "HRR"),
        ("hits runs rbis", "HRR"),
        ("home runs", "HR"),
        ("earned runs", "ER"),
        ("total bases", "TB"),
        ("strikeouts", "K"),
        ("stolen bases", "SB"),
        ("rbis", "RBI"),
        ("hits", "Hits"),
        ("runs", "Runs"),
    ),
    "NHL": (
        ("shots on goal", "SOG"),
        ("power play points", "PPP"),
        ("goalscorer", "Goal"),
        ("saves", "Saves"),
        ("goals", "Goals"),
        ("assists", "Ast"),
        ("points", "Pts"),
    ),
    "SOCCER": (
        ("shots on target", "SOT"),
        ("anytime goalscorer", "AGS"),
        ("goals", "Goals"),
        ("shots", "Shots"),
        ("assists", "Ast"),
    ),
}

DEFAULT_STAT_SPORT = "NBA"

MAIN_MARKET_TYPES: tuple[tuple[str, str], ...] = (
    ("point spread", "Spread"),
    ("spread", "Spread"),
    ("run line", "Spread"),
    ("puck line", "Spread"),
    ("totals", "Total"),
    ("total", "Total"),
    ("over", "Total"),
    ("under", "Total"),
    ("moneyline", "Moneyline"),
    ("money line", "Moneyline"),
    ("ml", "Moneyline"),
)

FUTURES_TYPES: tuple[tuple[str, str], ...] = (
    ("nba finals", "NBA Finals"),
    ("super bowl", "Super Bowl"),
    ("world series", "World Series"),
    ("stanley cup", "Stanley Cup"),
    ("wcc", "WCC"),
    ("ecc", "ECC"),
    ("win totals", "Win Total"),
    ("win total", "Win Total"),
    ("make playoffs", "Make Playoffs"),
    ("miss playoffs", "Miss Playoffs"),
    ("mvp", "MVP"),
    ("dpoy", "DPOY"),
    ("roy", "ROY"),
    ("championship", "Champion"),
    ("champion", "Champion"),
)
