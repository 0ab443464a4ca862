from datetime import datetime, timezone

import pytest

from dfsproj.aggregate import aggregate, run_aggregation
from dfsproj.config import Settings
from dfsproj.export import dump_projections_json
from dfsproj.ingest import parse_draftables, parse_ledgers, parse_team_averages, parse_team_odds
from dfsproj.models import RosterSlotEntry
from dfsproj.tables import Crosswalk, FeedTables


REFERENCE = "2024-10-06T17:00:00Z"


def _tables(payloads: dict) -> FeedTables:
    return FeedTables.build(
        crosswalk=Crosswalk.from_rows(payloads["crosswalk"]),
        ledgers=parse_ledgers(payloads["simulations"]),
        odds=parse_team_odds(payloads["odds"]),
        team_averages=parse_team_averages(payloads["team_averages"]),
    )


def _slots(payloads: dict, key: str = "draftables") -> list[RosterSlotEntry]:
    return parse_draftables(payloads[key], "dk").slots


def test_aggregate_builds_enriched_records(feed_payloads):
    records = aggregate(_slots(feed_payloads), REFERENCE, "NFL", "dk", _tables(feed_payloads))

    names = [record.name for record in records]
    assert names == ["Joe Burrow", "Ja'Marr Chase", "Bengals", "Practice Squad"]

    burrow = records[0]
    assert burrow.canonical_id == 501
    assert burrow.opponent == "BAL"
    assert burrow.game_date == REFERENCE
    assert burrow.game_date_unix == int(datetime(2024, 10, 6, 17, tzinfo=timezone.utc).timestamp())
    assert burrow.histogram == [0, 1, 1, 1, 1, 0, 0, 1]
    assert burrow.projected_points == pytest.approx(22.1)
    assert burrow.team_projected_points == pytest.approx(27.5)
    assert burrow.opponent_projected_points == pytest.approx(24.5)
    assert burrow.player_odds_factor == pytest.approx(1.1)
    assert burrow.season_avg_points == pytest.approx(19.4)
    assert burrow.starting_lineup is True
    assert burrow.injury_status == "None"

    assert records[2].positions == ["dst"]
    assert records[2].injury_status == "None"


def test_duplicate_uids_keep_first_in_input_order(feed_payloads):
    records, report = run_aggregation(_slots(feed_payloads), REFERENCE, "NFL", "dk", _tables(feed_payloads))

    chase = [record for record in records if record.provider_id == "1002"]
    assert len(chase) == 1
    assert chase[0].roster_slot_id == 68
    assert report.duplicates_skipped == 1


def test_ineligible_slot_never_emitted(feed_payloads):
    records, report = run_aggregation(_slots(feed_payloads), REFERENCE, "NFL", "dk", _tables(feed_payloads))

    assert "Lamar Jackson" not in {record.name for record in records}
    assert all(record.eligible for record in records)
    assert report.ineligible_skipped == 1


def test_unresolved_id_gets_zeroed_fields_and_pass_continues(feed_payloads):
    records, report = run_aggregation(_slots(feed_payloads), REFERENCE, "NFL", "dk", _tables(feed_payloads))

    unknown = records[-1]
    assert unknown.provider_id == "9999"
    assert unknown.canonical_id == 0
    assert unknown.opponent == ""
    assert unknown.player_odds_factor == 0.0
    assert unknown.team_projected_points == 0.0
    assert unknown.histogram == [0] * 8
    assert report.unresolved_ids == ["9999"]
    assert report.total_slots == 6
    assert report.emitted == 4


def test_showdown_captain_and_flex_both_emitted(feed_payloads):
    records = aggregate(_slots(feed_payloads, "showdown"), REFERENCE, "NFL", "dk", _tables(feed_payloads))

    assert len(records) == 2
    assert records[0].slot_type == "captain"
    assert records[1].slot_type == "utility"
    assert records[0].draftable_uid != records[1].draftable_uid
    assert {record.canonical_id for record in records} == {502}


def test_showdown_slots_with_equal_salary_stay_distinct(feed_payloads):
    for row in feed_payloads["showdown"]["draftables"]:
        row["salary"] = 8100

    records = aggregate(_slots(feed_payloads, "showdown"), REFERENCE, "NFL", "dk", _tables(feed_payloads))
    assert len(records) == 2


def test_aggregate_is_idempotent(feed_payloads):
    slots = _slots(feed_payloads)
    tables = _tables(feed_payloads)

    first = dump_projections_json(aggregate(slots, REFERENCE, "NFL", "dk", tables))
    second = dump_projections_json(aggregate(slots, REFERENCE, "NFL", "dk", tables))
    assert first == second


def test_malformed_game_timestamp_skips_only_that_slot(feed_payloads):
    feed_payloads["simulations"]["athletes"][1]["games"][0]["game_date"] = "not-a-date"

    records, report = run_aggregation(_slots(feed_payloads), REFERENCE, "NFL", "dk", _tables(feed_payloads))

    assert "Ja'Marr Chase" not in {record.name for record in records}
    assert {"Joe Burrow", "Bengals", "Practice Squad"} <= {record.name for record in records}
    assert [item.provider_id for item in report.skipped] == ["1002", "1002"]
    assert "not-a-date" in report.skipped[0].reason


def test_missing_future_game_recorded(feed_payloads):
    records, report = run_aggregation(
        _slots(feed_payloads), "2024-12-01T00:00:00Z", "NFL", "dk", _tables(feed_payloads)
    )

    assert records[0].opponent == ""
    assert records[0].histogram == [0] * 8
    assert "1001" in report.missing_games


def test_legacy_odds_setting_is_honored(feed_payloads, tmp_path):
    feed_payloads["odds"]["CIN"].insert(0, {"commence_time": "2024-10-07T00:15:00Z", "implied_points": 31.0})
    tables = _tables(feed_payloads)
    slots = _slots(feed_payloads)[:1]

    fixed = aggregate(slots, REFERENCE, "NFL", "dk", tables)
    legacy = aggregate(
        slots,
        REFERENCE,
        "NFL",
        "dk",
        tables,
        settings=Settings(feed_root=tmp_path, db_path=tmp_path / "x.sqlite", legacy_odds_scan=True),
    )
    assert fixed[0].team_projected_points == pytest.approx(27.5)
    assert legacy[0].team_projected_points == 0.0


def test_empty_listing_returns_empty_list(feed_payloads):
    assert aggregate([], REFERENCE, "NFL", "dk", _tables(feed_payloads)) == []


def test_unknown_sport_raises_key_error(feed_payloads):
    with pytest.raises(KeyError):
        aggregate([], REFERENCE, "CURLING", "dk", _tables(feed_payloads))
