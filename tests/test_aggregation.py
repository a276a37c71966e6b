"""Portfolio aggregation tests."""

from __future__ import annotations

import pytest

from bettracker.analytics import aggregation
from bettracker.bets import finance


@pytest.fixture
def ledger(make_bet):
    return [
        make_bet(id="FD:1", betId="1", placedAt="2025-01-03T20:00:00Z", stake=10.0, payout=20.0, result="win"),
        make_bet(id="FD:2", betId="2", placedAt="2025-01-01T20:00:00Z", stake=10.0, payout=0.0, result="loss"),
        make_bet(
            id="DK:3",
            betId="3",
            book="DraftKings",
            placedAt="2025-01-02T20:00:00Z",
            stake=5.0,
            payout=0.0,
            result="pending",
        ),
    ]


def test_overall_stats_treat_pending_as_zero(ledger) -> None:
    stats = aggregation.compute_overall_stats(ledger)
    assert stats.total_bets == 3
    assert stats.total_wagered == 25.0
    assert stats.net_profit == 0.0
    assert (stats.wins, stats.losses, stats.pushes, stats.pending) == (1, 1, 0, 1)
    assert stats.win_rate == pytest.approx(50.0)
    assert stats.roi == 0.0


def test_row_display_and_kpi_disagree_on_pending(ledger) -> None:
    pending = ledger[2]
    assert finance.net(pending.result, pending.stake, pending.odds, pending.payout) is None
    assert finance.net_for_kpi(pending.result, pending.stake, pending.payout) == 0.0


def test_empty_inputs() -> None:
    assert aggregation.compute_overall_stats([]) == aggregation.OverallStats()
    assert aggregation.compute_profit_over_time([]).empty
    assert aggregation.compute_stats_by_dimension([], lambda bet: bet.book).empty
    assert aggregation.compute_entity_stats([]).empty


def test_profit_over_time_is_chronological(ledger) -> None:
    curve = aggregation.compute_profit_over_time(ledger)
    assert curve["date"].tolist() == ["2025-01-01", "2025-01-02", "2025-01-03"]
    assert curve["profit"].tolist() == [-10.0, -10.0, 0.0]


def test_stats_by_dimension(ledger) -> None:
    stats = aggregation.compute_stats_by_dimension(ledger, lambda bet: bet.book).set_index("key")
    assert stats.loc["FanDuel", "count"] == 2
    assert stats.loc["FanDuel", "net"] == 0.0
    assert stats.loc["FanDuel", "wins"] == 1
    assert stats.loc["DraftKings", "stake"] == 5.0
    assert stats.loc["DraftKings", "roi"] == 0.0


def test_parlays_do_not_attribute_money_to_entities(make_bet) -> None:
    single = make_bet(
        id="FD:1",
        betId="1",
        stake=10.0,
        payout=20.0,
        legs=[{"market": "Points", "entities": ["LeBron James"], "entityType": "player"}],
    )
    parlay = make_bet(
        id="FD:2",
        betId="2",
        betType="parlay",
        stake=5.0,
        payout=0.0,
        result="loss",
        legs=[
            {"market": "Points", "entities": ["LeBron James"], "result": "WIN"},
            {"market": "Rebounds", "entities": ["Stephen Curry"], "result": "LOSS"},
        ],
    )
    assert aggregation.entity_money_contribution(parlay) == (0.0, 0.0)

    stats = aggregation.compute_entity_stats([single, parlay]).set_index("entity")
    lebron = stats.loc["LeBron James"]
    assert (lebron["tickets"], lebron["singles"], lebron["parlays"]) == (2, 1, 1)
    assert lebron["stake_singles"] == 10.0
    assert lebron["net_singles"] == 10.0
    assert lebron["leg_wins"] == 2
    assert lebron["roi_singles"] == pytest.approx(100.0)

    curry = stats.loc["Stephen Curry"]
    assert curry["stake_singles"] == 0.0
    assert curry["leg_losses"] == 1
    assert curry["leg_win_rate"] == 0.0


def test_calculate_roi() -> None:
    assert aggregation.calculate_roi(5.0, 20.0) == 25.0
    assert aggregation.calculate_roi(5.0, 0.0) == 0.0


@pytest.fixture
def over_under_ledger(make_bet):
    def _ou_leg(entity: str, ou: str | None) -> dict:
        return {"market": "Points", "entities": [entity], "entityType": "player", "target": "20.5", "ou": ou}

    return [
        make_bet(id="FD:1", betId="1", stake=10.0, payout=20.0, result="win", legs=[_ou_leg("Player A", "Over")]),
        make_bet(id="FD:2", betId="2", stake=10.0, payout=0.0, result="loss", legs=[_ou_leg("Player B", "Under")]),
        make_bet(id="FD:3", betId="3", stake=4.0, payout=8.0, result="win", legs=[_ou_leg("Player A", None)]),
        make_bet(
            id="FD:4",
            betId="4",
            betType="parlay",
            stake=5.0,
            payout=30.0,
            result="win",
            legs=[_ou_leg("Player A", "Over"), _ou_leg("Player B", "Under")],
        ),
    ]


def test_over_under_breakdown_excludes_parlays_by_default(over_under_ledger) -> None:
    stats = aggregation.compute_over_under_breakdown(over_under_ledger).set_index("side")
    over, under = stats.loc["Over"], stats.loc["Under"]
    assert (over["count"], over["wins"], over["losses"]) == (1, 1, 0)
    assert (over["stake"], over["net"], over["roi"]) == (10.0, 10.0, pytest.approx(100.0))
    assert (under["count"], under["wins"], under["losses"]) == (1, 0, 1)
    assert under["net"] == -10.0


def test_over_under_breakdown_can_include_parlays(over_under_ledger) -> None:
    stats = aggregation.compute_over_under_breakdown(over_under_ledger, exclude_parlays=False).set_index("side")
    assert stats.loc["Over", "count"] == 2
    assert stats.loc["Over", "stake"] == 15.0
    assert stats.loc["Over", "net"] == 35.0
    assert stats.loc["Under", "wins"] == 1

    entity_money = aggregation.compute_over_under_breakdown(
        over_under_ledger, exclude_parlays=False, use_entity_money=True
    ).set_index("side")
    assert entity_money.loc["Over", "count"] == 2
    assert entity_money.loc["Over", "stake"] == 10.0


def test_over_under_breakdown_entity_filter(over_under_ledger) -> None:
    stats = aggregation.compute_over_under_breakdown(over_under_ledger, entity="Player B").set_index("side")
    assert stats.loc["Over", "count"] == 0
    assert stats.loc["Over", "roi"] == 0.0
    assert stats.loc["Under", "count"] == 1
    assert stats.loc["Under", "stake"] == 10.0


def test_over_under_breakdown_without_bets() -> None:
    stats = aggregation.compute_over_under_breakdown([])
    assert stats["side"].tolist() == ["Over", "Under"]
    assert stats["count"].tolist() == [0, 0]
    assert stats["net"].tolist() == [0.0, 0.0]
