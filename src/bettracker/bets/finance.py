"""Stake, payout and net derivation from American odds.

All helpers are pure. Missing or unusable inputs produce ``None`` (rendered as a
blank cell), never ``NaN`` and never an exception.
"""

from __future__ import annotations

import math
from typing import Any

from bettracker.bets.schemas import BetResult

AMERICAN_ODDS_DIVISOR = 100


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return float(value)


def _result_key(result: BetResult | str | None) -> str:
    if isinstance(result, BetResult):
        return result.value
    return (result or "").strip().lower()


def _cents(amount: float) -> float:
    # round() can hand back -0.0, which would format as "-0.00"
    return round(amount, 2) + 0.0


def american_to_decimal(odds: int | float | None) -> float | None:
    numeric = _as_number(odds)
    if numeric is None or numeric == 0:
        return None
    return 1 + (numeric / AMERICAN_ODDS_DIVISOR) if numeric > 0 else 1 + (AMERICAN_ODDS_DIVISOR / abs(numeric))


def profit_from_odds(stake: float, odds: int | float | None) -> float | None:
    """Profit (excluding returned stake) for a winning bet at American ``odds``.

    Zero odds are not a valid American price and are treated as missing.
    """

    numeric_stake = _as_number(stake)
    numeric_odds = _as_number(odds)
    if numeric_stake is None or numeric_odds is None or numeric_odds == 0:
        return None
    if numeric_odds > 0:
        return numeric_stake * (numeric_odds / AMERICAN_ODDS_DIVISOR)
    return numeric_stake / (abs(numeric_odds) / AMERICAN_ODDS_DIVISOR)


def to_win(stake: float, odds: int | float | None, payout: float | None = None) -> float | None:
    """Total return if the bet wins. A realized payout wins over recomputation."""

    realized = _as_number(payout)
    if realized is not None and realized > 0:
        return _cents(realized)
    profit = profit_from_odds(stake, odds)
    if profit is None:
        return None
    return _cents(float(stake) + profit)


def net(
    result: BetResult | str | None,
    stake: float,
    odds: int | float | None,
    payout: float | None = None,
) -> float | None:
    """Per-row profit/loss. Pending returns ``None`` so the cell renders blank.

    Portfolio KPIs use :func:`net_for_kpi` instead, where pending counts as 0.
    """

    numeric_stake = _as_number(stake)
    if numeric_stake is None or numeric_stake < 0:
        return None

    outcome = _result_key(result)
    if outcome == BetResult.WIN.value:
        realized = _as_number(payout)
        if realized is not None and realized > 0:
            return _cents(realized - numeric_stake)
        profit = profit_from_odds(numeric_stake, odds)
        return None if profit is None else _cents(profit)
    if outcome == BetResult.LOSS.value:
        return _cents(-numeric_stake)
    if outcome == BetResult.PUSH.value:
        return 0.0
    return None


def net_for_kpi(result: BetResult | str | None, stake: float, payout: float) -> float:
    """Net used by aggregate statistics: undecided bets contribute nothing."""

    if _result_key(result) == BetResult.PENDING.value:
        return 0.0
    return _cents(float(payout) - float(stake))


def recalculate_payout(stake: float, odds: int | float | None, result: BetResult | str) -> float:
    outcome = _result_key(result)
    if outcome == BetResult.WIN.value:
        return to_win(stake, odds) or 0.0
    if outcome == BetResult.PUSH.value:
        return float(stake)
    return 0.0


def format_odds(odds: int | float | str | None) -> str:
    """``+150`` / ``-110``; zero, missing or unparseable odds render blank."""

    if isinstance(odds, str):
        try:
            odds = float(odds.strip())
        except ValueError:
            return ""
    numeric = _as_number(odds)
    if numeric is None:
        return ""
    rounded = math.floor(numeric + 0.5)
    if rounded == 0:
        return ""
    return f"+{rounded}" if rounded > 0 else str(rounded)


def format_money(amount: float | None) -> str:
    numeric = _as_number(amount)
    if numeric is None:
        return ""
    return f"{_cents(numeric):.2f}"
