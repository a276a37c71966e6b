"""Shared bet builders."""

from __future__ import annotations

from typing import Any

import pytest

from bettracker.bets.schemas import Bet


def _payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": "FanDuel:B1",
        "book": "FanDuel",
        "betId": "B1",
        "placedAt": "2025-11-26T01:30:00Z",
        "betType": "single",
        "marketCategory": "Props",
        "sport": "NBA",
        "description": "Will Richard 3+ made threes",
        "odds": 360,
        "stake": 1.0,
        "payout": 4.6,
        "result": "win",
        "legs": [
            {
                "market": "made threes",
                "entities": ["Will Richard"],
                "entityType": "player",
                "target": "3+",
            }
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_payload():
    return _payload


@pytest.fixture
def make_bet():
    def _make(**overrides: Any) -> Bet:
        return Bet.model_validate(_payload(**overrides))

    return _make
