"""Financial calculator tests."""

from __future__ import annotations

import math

import pytest

from bettracker.bets import finance


def test_net_win_uses_odds_without_payout() -> None:
    assert finance.net("win", 10, 360) == 36.0


def test_net_win_prefers_realized_payout() -> None:
    assert finance.net("win", 1, 360, 4.6) == 3.6


def test_net_loss_push_pending() -> None:
    assert finance.net("loss", 12, -120) == -12.0
    assert finance.net("push", 10, -110) == 0.0
    assert finance.net("pending", 10, 200) is None


def test_net_win_without_odds_or_payout_is_missing() -> None:
    assert finance.net("win", 10, None) is None
    assert finance.net("win", 10, 0) is None


def test_net_rejects_unusable_stake() -> None:
    assert finance.net("loss", math.nan, -110) is None
    assert finance.net("loss", -5, -110) is None


def test_to_win_from_odds_and_payout() -> None:
    assert finance.to_win(10, -110) == 19.09
    assert finance.to_win(10, 150) == 25.0
    assert finance.to_win(10, 150, payout=30.0) == 30.0
    assert finance.to_win(10, None) is None


def test_net_for_kpi_counts_pending_as_zero() -> None:
    assert finance.net_for_kpi("pending", 10, 0) == 0.0
    assert finance.net_for_kpi("loss", 10, 0) == -10.0
    assert finance.net_for_kpi("win", 10, 25) == 15.0


def test_recalculate_payout() -> None:
    assert finance.recalculate_payout(10, 150, "win") == 25.0
    assert finance.recalculate_payout(10, 150, "push") == 10.0
    assert finance.recalculate_payout(10, 150, "loss") == 0.0


@pytest.mark.parametrize(
    ("odds", "expected"),
    [(360, "+360"), (-110, "-110"), (0, ""), (None, ""), ("150", "+150"), ("abc", ""), (math.nan, "")],
)
def test_format_odds(odds, expected) -> None:
    assert finance.format_odds(odds) == expected


def test_format_money() -> None:
    assert finance.format_money(3.6) == "3.60"
    assert finance.format_money(-12) == "-12.00"
    assert finance.format_money(-0.001) == "0.00"
    assert finance.format_money(None) == ""


def test_american_to_decimal() -> None:
    assert finance.american_to_decimal(150) == pytest.approx(2.5)
    assert finance.american_to_decimal(-200) == pytest.approx(1.5)


@pytest.mark.parametrize("odds", [0, None, math.inf, -math.inf, math.nan])
def test_american_to_decimal_unusable_odds(odds) -> None:
    assert finance.american_to_decimal(odds) is None
