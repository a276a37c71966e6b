"""Pydantic schemas for parsed bets and flattened display rows."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BetResult(str, Enum):
    WIN = "win"
    LOSS = "loss"
    PUSH = "push"
    PENDING = "pending"


class BetType(str, Enum):
    SINGLE = "single"
    PARLAY = "parlay"
    SGP = "sgp"
    SGP_PLUS = "sgp_plus"
    LIVE = "live"
    OTHER = "other"


class MarketCategory(str, Enum):
    PROPS = "Props"
    MAIN_MARKETS = "Main Markets"
    FUTURES = "Futures"
    SGP = "SGP/SGP+"
    PARLAYS = "Parlays"


class EntityType(str, Enum):
    PLAYER = "player"
    TEAM = "team"
    UNKNOWN = "unknown"


PARLAY_BET_TYPES = frozenset({BetType.PARLAY, BetType.SGP, BetType.SGP_PLUS})


class _ParserModel(BaseModel):
    """Parser output arrives camelCased; Python code uses snake_case names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Leg(_ParserModel):
    """One selection within a ticket. Group legs hold an inner SGP as children."""

    market: str = ""
    entities: list[str] = Field(default_factory=list)
    entity_type: EntityType | None = None
    target: str | int | float | None = None
    ou: Literal["Over", "Under"] | None = None
    odds: int | float | None = None
    actual: str | int | float | None = None
    result: str | None = None
    is_group_leg: bool = False
    children: list[Leg] | None = None


class Bet(_ParserModel):
    """A single wager ticket as emitted by a sportsbook parser."""

    id: str
    book: str = ""
    bet_id: str
    placed_at: str
    settled_at: str | None = None
    bet_type: BetType = BetType.SINGLE
    market_category: str | None = None
    sport: str = ""
    description: str = ""
    odds: int | float | None = None
    stake: float
    payout: float = 0.0
    result: BetResult
    is_live: bool = False
    tail: str | None = None
    legs: list[Leg] = Field(default_factory=list)

    # Legacy single bets without legs carry their selection here.
    name: str | None = None
    type: str | None = None
    line: str | int | float | None = None
    ou: Literal["Over", "Under"] | None = None

    @property
    def is_parlay_type(self) -> bool:
        return self.bet_type in PARLAY_BET_TYPES


VISIBLE_COLUMNS: tuple[str, ...] = (
    "Date",
    "Site",
    "Sport",
    "Category",
    "Type",
    "Name",
    "Name2",
    "Over",
    "Under",
    "Line",
    "Odds",
    "Bet",
    "To Win",
    "Result",
    "Net",
    "Live",
    "Tail",
)


class FinalRow(BaseModel):
    """One spreadsheet row. Serialize with ``by_alias=True`` for column names."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    date: str = Field(default="", alias="Date")
    site: str = Field(default="", alias="Site")
    sport: str = Field(default="", alias="Sport")
    category: str = Field(default="", alias="Category")
    type: str = Field(default="", alias="Type")
    name: str = Field(default="", alias="Name")
    name2: str | None = Field(default=None, alias="Name2")
    over: str = Field(default="", alias="Over")
    under: str = Field(default="", alias="Under")
    line: str = Field(default="", alias="Line")
    odds: str = Field(default="", alias="Odds")
    bet: str = Field(default="", alias="Bet")
    to_win: str = Field(default="", alias="To Win")
    result: str = Field(default="", alias="Result")
    net: str = Field(default="", alias="Net")
    live: str = Field(default="", alias="Live")
    tail: str = Field(default="", alias="Tail")

    raw_odds: int | float | None = Field(default=None, alias="_rawOdds")
    raw_bet: float | None = Field(default=None, alias="_rawBet")
    raw_to_win: float | None = Field(default=None, alias="_rawToWin")
    raw_net: float | None = Field(default=None, alias="_rawNet")

    parlay_group_id: str | None = Field(default=None, alias="_parlayGroupId")
    leg_index: int | None = Field(default=None, alias="_legIndex")
    leg_count: int | None = Field(default=None, alias="_legCount")
    is_parlay_header: bool = Field(default=False, alias="_isParlayHeader")
    is_parlay_child: bool = Field(default=False, alias="_isParlayChild")

    def visible_columns(self) -> dict[str, str | None]:
        data = self.model_dump(by_alias=True)
        return {column: data[column] for column in VISIBLE_COLUMNS}
