import pytest

from dfsproj.aggregate import aggregate
from dfsproj.ingest import parse_draftables, parse_ledgers, parse_team_averages, parse_team_odds
from dfsproj.tables import Crosswalk, FeedTables


def test_parse_dk_listing(feed_payloads):
    feed = parse_draftables(feed_payloads["draftables"], "DK")

    assert feed.slate_start == "2024-10-06T17:00:00Z"
    assert [slot.provider_id for slot in feed.slots] == ["1001", "1002", "1002", "1003", "1004", "9999"]
    burrow = feed.slots[0]
    assert burrow.team == "CIN"
    assert burrow.salary == 7200
    assert burrow.attributes[0].key == "starting_lineup"
    assert burrow.attributes[0].value == "true"
    assert feed.slots[4].eligible is False
    assert feed.slots[5].eligible is True
    assert feed.rejected == []


def test_parse_fd_listing_joins_name_and_cleans_salary():
    payload = {
        "players": [
            {
                "id": "77-1",
                "first_name": "Joe",
                "last_name": "Burrow",
                "team": "cin",
                "position": "QB",
                "salary": "$9,000",
                "draftable": "false",
                "injury_status": "Q",
                "attributes": {"starting_lineup": "1"},
            }
        ]
    }

    slot = parse_draftables(payload, "fd").slots[0]
    assert slot.name == "Joe Burrow"
    assert slot.team == "CIN"
    assert slot.salary == 9000
    assert slot.eligible is False
    assert slot.status == "Q"
    assert slot.attributes[0].value == "1"


def test_unparseable_rows_are_rejected_not_fatal():
    payload = [
        {"playerId": 1, "displayName": "Good", "salary": 5000},
        {"playerId": 2, "displayName": "No Salary", "salary": "TBD"},
        {"playerId": "", "displayName": "No Id", "salary": 4000},
    ]

    feed = parse_draftables(payload, "dk")
    assert [slot.name for slot in feed.slots] == ["Good"]
    assert feed.rejected == ["No Salary", "No Id"]
    assert feed.slate_start is None


def test_missing_negated_flag_keeps_slot_eligible():
    payload = {"data": [{"playerId": "s1", "fName": "A", "lName": "B", "salary": 10}]}
    slot = parse_draftables(payload, "superdraft").slots[0]
    assert slot.eligible is True
    assert slot.name == "A B"


def test_unknown_service_raises_key_error():
    with pytest.raises(KeyError):
        parse_draftables([], "pickem")


def test_listing_without_rows_raises_value_error():
    with pytest.raises(ValueError):
        parse_draftables({"slate": "main"}, "dk")


def test_parse_ledgers_drops_invalid_athletes(feed_payloads):
    payload = feed_payloads["simulations"]
    payload["athletes"].append({"name": "No Id"})

    ledgers = parse_ledgers(payload)
    assert [ledger.athlete_id for ledger in ledgers] == [501, 502, 503, 504]
    assert ledgers[0].games[1].dk_mean == pytest.approx(22.1)


def test_parse_team_odds_accepts_wrapped_payload():
    odds = parse_team_odds(
        {
            "teams": {
                "cin": [
                    {"commence_time": "2024-10-06T17:00:00Z", "implied_points": 27.5},
                    {"commence_time": "2024-10-06T17:00:00Z"},
                ]
            }
        }
    )
    assert list(odds) == ["CIN"]
    assert len(odds["CIN"]) == 1
    assert odds["CIN"][0].implied_points == pytest.approx(27.5)


def test_parse_team_averages_from_rows_and_mapping():
    assert parse_team_averages({"cin": 25}) == {"CIN": 25.0}
    rows = {"teams": [{"team": "bal", "avg_points": "24.5"}, {"team": "nyg"}]}
    assert parse_team_averages(rows) == {"BAL": 24.5}


def test_parse_team_averages_unwraps_data_and_teams_envelopes():
    assert parse_team_averages({"data": [{"team": "cin", "avg_points": 25.0}]}) == {"CIN": 25.0}
    assert parse_team_averages({"teams": {"CIN": 25.0, "bal": "24.5"}}) == {"CIN": 25.0, "BAL": 24.5}


def test_parse_team_averages_rejects_scalar_payload():
    with pytest.raises(ValueError):
        parse_team_averages({"data": 25.0})


def test_wrapped_team_averages_feed_odds_factor(feed_payloads):
    tables = FeedTables.build(
        crosswalk=Crosswalk.from_rows(feed_payloads["crosswalk"]),
        ledgers=parse_ledgers(feed_payloads["simulations"]),
        odds=parse_team_odds(feed_payloads["odds"]),
        team_averages=parse_team_averages({"data": [{"team": "CIN", "avg_points": 25.0}]}),
    )
    slots = parse_draftables(feed_payloads["draftables"], "dk").slots[:1]

    record = aggregate(slots, "2024-10-06T17:00:00Z", "NFL", "dk", tables)[0]
    assert record.player_odds_factor == pytest.approx(1.1)
