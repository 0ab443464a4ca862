from __future__ import annotations

import copy
from pathlib import Path

import pytest

from dfsproj.persistence import FeedStore, draftables_key, odds_key, simulations_key, team_averages_key


SLATE_START = "2024-10-06T17:00:00Z"


def _game(game_date: str, opponent: str, venue: str, sample: list[float], mean: float, **extra) -> dict:
    game = {
        "game_date": game_date,
        "team_id": extra.pop("team_id", "CIN"),
        "opponent_id": opponent,
        "venue_id": venue,
        "dk_sample": sample,
        "dk_mean": mean,
        "dk_std": extra.pop("dk_std", 6.5),
        "dk_cumulative": extra.pop("dk_cumulative", sum(sample)),
        "fd_sample": [value * 0.8 for value in sample],
        "fd_mean": round(mean * 0.8, 2),
        "fd_std": 5.0,
        "fd_cumulative": 80.0,
    }
    game.update(extra)
    return game


_DK_DRAFTABLES = {
    "startTime": SLATE_START,
    "draftables": [
        {
            "playerId": 1001,
            "displayName": "Joe Burrow",
            "teamAbbreviation": "CIN",
            "position": "QB",
            "salary": 7200,
            "rosterSlotId": 66,
            "isDisabled": False,
            "status": "None",
            "playerGameAttributes": [{"key": "starting_lineup", "value": "true"}],
        },
        {
            "playerId": 1002,
            "displayName": "Ja'Marr Chase",
            "teamAbbreviation": "CIN",
            "position": "WR",
            "salary": 8100,
            "rosterSlotId": 68,
            "isDisabled": False,
            "status": "Q",
        },
        {
            "playerId": 1002,
            "displayName": "Ja'Marr Chase",
            "teamAbbreviation": "CIN",
            "position": "WR",
            "salary": 8100,
            "rosterSlotId": 70,
            "isDisabled": False,
            "status": "Q",
        },
        {
            "playerId": 1003,
            "displayName": "Bengals",
            "teamAbbreviation": "CIN",
            "position": "DST",
            "salary": 3000,
            "rosterSlotId": 71,
            "isDisabled": False,
            "status": "O",
        },
        {
            "playerId": 1004,
            "displayName": "Lamar Jackson",
            "teamAbbreviation": "BAL",
            "position": "QB",
            "salary": 8000,
            "rosterSlotId": 66,
            "isDisabled": True,
        },
        {
            "playerId": 9999,
            "displayName": "Practice Squad",
            "teamAbbreviation": "BAL",
            "position": "RB",
            "salary": 4000,
            "rosterSlotId": 67,
            "isDisabled": False,
        },
    ],
}

_DK_SHOWDOWN = {
    "startTime": SLATE_START,
    "draftables": [
        {
            "playerId": 1002,
            "displayName": "Ja'Marr Chase",
            "teamAbbreviation": "CIN",
            "position": "WR",
            "salary": 12150,
            "rosterSlotId": 511,
            "isDisabled": False,
        },
        {
            "playerId": 1002,
            "displayName": "Ja'Marr Chase",
            "teamAbbreviation": "CIN",
            "position": "WR",
            "salary": 8100,
            "rosterSlotId": 512,
            "isDisabled": False,
        },
    ],
}

_SIMULATIONS = {
    "athletes": [
        {
            "athlete_id": 501,
            "name": "Joe Burrow",
            "team": "CIN",
            "season": {"games_played": 4, "passing_yards": 1040, "touchdowns": 8, "dk_points_avg": 19.4},
            "games": [
                _game("2024-09-29T17:00:00Z", "CAR", "BOA", [10, 20], 15.0),
                _game(SLATE_START, "BAL", "PAYCOR", [5, 12, 25, 31, 64], 22.1),
                _game("2024-10-13T17:00:00Z", "NYG", "METLIFE", [18, 19], 18.5),
            ],
        },
        {
            "athlete_id": 502,
            "name": "Ja'Marr Chase",
            "team": "CIN",
            "season": {"games_played": 4, "receiving_yards": 390, "dk_points_avg": 16.2},
            "games": [_game(SLATE_START, "BAL", "PAYCOR", [0, 8, 14, 22, 41, 55], 18.0)],
        },
        {
            "athlete_id": 503,
            "name": "Bengals",
            "team": "CIN",
            "season": {"games_played": 4},
            "games": [_game(SLATE_START, "BAL", "PAYCOR", [-2, 3, 7, 11], 5.5)],
        },
        {
            "athlete_id": 504,
            "name": "Lamar Jackson",
            "team": "BAL",
            "games": [_game(SLATE_START, "CIN", "PAYCOR", [20, 30], 25.0, team_id="BAL")],
        },
    ]
}

_ODDS = {
    "CIN": [{"commence_time": SLATE_START, "implied_points": 27.5}],
    "BAL": [{"commence_time": SLATE_START, "implied_points": 24.5}],
}

_TEAM_AVERAGES = {"CIN": 25.0, "BAL": 24.5}

_CROSSWALK = [
    {"provider_id": "1001", "sport": "NFL", "service": "dk", "canonical_id": 501},
    {"provider_id": "1002", "sport": "NFL", "service": "dk", "canonical_id": 502},
    {"provider_id": "1003", "sport": "NFL", "service": "dk", "canonical_id": 503},
    {"provider_id": "1004", "sport": "NFL", "service": "dk", "canonical_id": 504},
]


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def feed_payloads() -> dict:
    return copy.deepcopy(
        {
            "draftables": _DK_DRAFTABLES,
            "showdown": _DK_SHOWDOWN,
            "simulations": _SIMULATIONS,
            "odds": _ODDS,
            "team_averages": _TEAM_AVERAGES,
            "crosswalk": _CROSSWALK,
        }
    )


@pytest.fixture
def feed_store(tmp_path: Path, feed_payloads: dict) -> FeedStore:
    store = FeedStore(tmp_path / "feeds", tmp_path / "crosswalk.sqlite")
    store.write_object(draftables_key("NFL", "dk", "main"), feed_payloads["draftables"])
    store.write_object(draftables_key("NFL", "dk", "showdown"), feed_payloads["showdown"])
    store.write_object(simulations_key("NFL"), feed_payloads["simulations"])
    store.write_object(odds_key("NFL"), feed_payloads["odds"])
    store.write_object(team_averages_key("NFL"), feed_payloads["team_averages"])
    store.save_crosswalk(feed_payloads["crosswalk"])
    return store
