"""Portfolio statistics over validated bets.

Aggregates use KPI semantics: pending bets count toward stake but contribute 0
net, unlike the blank per-row net shown in the flattened table.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd

from bettracker.bets import finance
from bettracker.bets.flatten import dedupe_legs, expand_legs
from bettracker.bets.schemas import Bet, BetResult, Leg

BET_COLUMNS = ["bet_id", "book", "sport", "bet_type", "category", "placed_at", "stake", "net", "result"]
DIMENSION_COLUMNS = ["key", "count", "stake", "net", "wins", "losses", "pushes", "roi"]
ENTITY_COLUMNS = [
    "entity",
    "tickets",
    "singles",
    "parlays",
    "stake_singles",
    "net_singles",
    "legs",
    "leg_wins",
    "leg_losses",
    "leg_pushes",
    "leg_pending",
    "leg_unknown",
    "leg_win_rate",
    "roi_singles",
]
OVER_UNDER_SIDES = ["Over", "Under"]
OVER_UNDER_COLUMNS = ["side", "count", "wins", "losses", "stake", "net", "roi"]


def calculate_roi(net: float, stake: float) -> float:
    return (net / stake) * 100 if stake > 0 else 0.0


def bets_frame(bets: Iterable[Bet]) -> pd.DataFrame:
    rows = [
        {
            "bet_id": bet.bet_id,
            "book": bet.book,
            "sport": bet.sport,
            "bet_type": bet.bet_type.value,
            "category": bet.market_category or "",
            "placed_at": bet.placed_at,
            "stake": bet.stake,
            "net": finance.net_for_kpi(bet.result, bet.stake, bet.payout),
            "result": bet.result.value,
        }
        for bet in bets
    ]
    df = pd.DataFrame(rows, columns=BET_COLUMNS)
    df["placed_at"] = pd.to_datetime(df["placed_at"], utc=True, format="ISO8601")
    return df


@dataclass(frozen=True)
class OverallStats:
    total_bets: int = 0
    total_wagered: float = 0.0
    net_profit: float = 0.0
    wins: int = 0
    losses: int = 0
    pushes: int = 0
    pending: int = 0
    win_rate: float = 0.0
    roi: float = 0.0


def compute_overall_stats(bets: Iterable[Bet]) -> OverallStats:
    df = bets_frame(bets)
    if df.empty:
        return OverallStats()

    counts = df["result"].value_counts()
    wins = int(counts.get(BetResult.WIN.value, 0))
    losses = int(counts.get(BetResult.LOSS.value, 0))
    total_wagered = round(float(df["stake"].sum()), 2)
    net_profit = round(float(df["net"].sum()), 2)
    decided = wins + losses
    return OverallStats(
        total_bets=len(df),
        total_wagered=total_wagered,
        net_profit=net_profit,
        wins=wins,
        losses=losses,
        pushes=int(counts.get(BetResult.PUSH.value, 0)),
        pending=int(counts.get(BetResult.PENDING.value, 0)),
        # pushes and pending are not decided
        win_rate=(wins / decided) * 100 if decided else 0.0,
        roi=calculate_roi(net_profit, total_wagered),
    )


def compute_profit_over_time(bets: Iterable[Bet]) -> pd.DataFrame:
    """Cumulative KPI net, one point per bet in placement order."""

    df = bets_frame(bets)
    if df.empty:
        return pd.DataFrame(columns=["date", "profit"])
    df = df.sort_values("placed_at", kind="stable")
    return pd.DataFrame(
        {
            "date": df["placed_at"].dt.strftime("%Y-%m-%d"),
            "profit": df["net"].cumsum().round(2),
        }
    ).reset_index(drop=True)


def compute_stats_by_dimension(
    bets: Iterable[Bet], key_fn: Callable[[Bet], str | Sequence[str] | None]
) -> pd.DataFrame:
    """Stake/net/result counts per key; a bet listing several keys counts once under each."""

    records: list[dict] = []
    for bet in bets:
        keys = key_fn(bet)
        if not keys:
            continue
        key_list = [keys] if isinstance(keys, str) else list(keys)
        net = finance.net_for_kpi(bet.result, bet.stake, bet.payout)
        for key in key_list:
            if key:
                records.append({"key": key, "stake": bet.stake, "net": net, "result": bet.result.value})
    if not records:
        return pd.DataFrame(columns=DIMENSION_COLUMNS)

    df = pd.DataFrame(records)
    grouped = df.groupby("key", sort=False)
    stats = pd.DataFrame(
        {
            "count": grouped.size(),
            "stake": grouped["stake"].sum().round(2),
            "net": grouped["net"].sum().round(2),
            "wins": grouped["result"].apply(lambda s: int((s == BetResult.WIN.value).sum())),
            "losses": grouped["result"].apply(lambda s: int((s == BetResult.LOSS.value).sum())),
            "pushes": grouped["result"].apply(lambda s: int((s == BetResult.PUSH.value).sum())),
        }
    )
    stats["roi"] = np.where(stats["stake"] > 0, stats["net"] / stats["stake"].where(stats["stake"] > 0, 1) * 100, 0.0)
    return stats.reset_index()[DIMENSION_COLUMNS]


def entity_money_contribution(bet: Bet) -> tuple[float, float]:
    """(stake, net) attributed to each entity on the ticket.

    Parlay stakes are shared by every leg, so parlays attribute nothing.
    """

    if bet.is_parlay_type:
        return 0.0, 0.0
    return bet.stake, finance.net_for_kpi(bet.result, bet.stake, bet.payout)


_LEG_OUTCOME_COLUMNS = {
    "win": "leg_wins",
    "loss": "leg_losses",
    "push": "leg_pushes",
    "pending": "leg_pending",
    "unknown": "leg_unknown",
}


def _leg_outcome(leg: Leg, bet: Bet, is_parlay: bool) -> str:
    result = leg.result
    if not result and not is_parlay:
        result = bet.result.value
    normalized = (result or "unknown").strip().lower()
    return normalized if normalized in _LEG_OUTCOME_COLUMNS else "unknown"


def default_entity_keys(leg: Leg, _bet: Bet) -> list[str]:
    return [entity.strip() for entity in leg.entities if entity.strip()]


def compute_entity_stats(
    bets: Iterable[Bet], key_fn: Callable[[Leg, Bet], Sequence[str]] = default_entity_keys
) -> pd.DataFrame:
    """Ticket, money and leg-outcome counts per entity."""

    stats: dict[str, dict] = {}

    def _entry(entity: str) -> dict:
        return stats.setdefault(entity, {column: 0 for column in ENTITY_COLUMNS[1:]})

    for bet in bets:
        is_parlay = bet.is_parlay_type
        stake, net = entity_money_contribution(bet)
        on_ticket: list[str] = []

        legs = dedupe_legs(expand_legs(bet.legs))
        if legs:
            for leg in legs:
                outcome = _leg_outcome(leg, bet, is_parlay)
                for entity in key_fn(leg, bet):
                    entry = _entry(entity)
                    entry["legs"] += 1
                    entry[_LEG_OUTCOME_COLUMNS[outcome]] += 1
                    if entity not in on_ticket:
                        on_ticket.append(entity)
        elif bet.name:
            on_ticket.append(bet.name.strip())

        for entity in on_ticket:
            entry = _entry(entity)
            entry["tickets"] += 1
            entry["parlays" if is_parlay else "singles"] += 1
            entry["stake_singles"] += stake
            entry["net_singles"] += net

    if not stats:
        return pd.DataFrame(columns=ENTITY_COLUMNS)

    df = pd.DataFrame.from_dict(stats, orient="index")
    df.index.name = "entity"
    df["stake_singles"] = df["stake_singles"].astype(float).round(2)
    df["net_singles"] = df["net_singles"].astype(float).round(2)
    decided = df["leg_wins"] + df["leg_losses"]
    df["leg_win_rate"] = np.where(decided > 0, df["leg_wins"] / decided.where(decided > 0, 1) * 100, 0.0)
    df["roi_singles"] = np.where(
        df["stake_singles"] > 0, df["net_singles"] / df["stake_singles"].where(df["stake_singles"] > 0, 1) * 100, 0.0
    )
    return df.reset_index()[ENTITY_COLUMNS]


def compute_over_under_breakdown(
    bets: Iterable[Bet],
    exclude_parlays: bool = True,
    entity: str | None = None,
    use_entity_money: bool = False,
) -> pd.DataFrame:
    """Over and Under totals, one record per O/U leg.

    Each matching leg books the ticket's stake and net, and wins and losses
    follow the bet result. ``entity`` keeps only legs naming that entity
    exactly; ``use_entity_money`` applies :func:`entity_money_contribution`.
    Both sides are always present.
    """

    records: list[dict] = []
    for bet in bets:
        if exclude_parlays and bet.is_parlay_type:
            continue
        if use_entity_money:
            stake, net = entity_money_contribution(bet)
        else:
            stake, net = bet.stake, finance.net_for_kpi(bet.result, bet.stake, bet.payout)
        for leg in expand_legs(bet.legs):
            if leg.ou is None:
                continue
            if entity is not None and entity not in leg.entities:
                continue
            records.append({"side": leg.ou, "stake": stake, "net": net, "result": bet.result.value})

    df = pd.DataFrame(records, columns=["side", "stake", "net", "result"]).astype({"stake": float, "net": float})
    df["wins"] = df["result"].eq(BetResult.WIN.value).astype(int)
    df["losses"] = df["result"].eq(BetResult.LOSS.value).astype(int)
    grouped = df.groupby("side")
    stats = grouped[["wins", "losses", "stake", "net"]].sum()
    stats.insert(0, "count", grouped.size())
    stats = stats.reindex(OVER_UNDER_SIDES, fill_value=0).astype(
        {"count": int, "wins": int, "losses": int, "stake": float, "net": float}
    )
    stats["stake"] = stats["stake"].round(2)
    stats["net"] = stats["net"].round(2)
    stats["roi"] = np.where(stats["stake"] > 0, stats["net"] / stats["stake"].where(stats["stake"] > 0, 1) * 100, 0.0)
    stats.index.name = "side"
    return stats.reset_index()[OVER_UNDER_COLUMNS]
