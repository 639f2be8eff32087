import pytest
from pydantic import ValidationError

from reverseball.models import PlayerRecord, format_market_value


def test_player_record_is_frozen():
    record = PlayerRecord(name="Test Player", sofascore_id=12345, positions=["ST"])

    assert record.external_id == "12345"
    assert record.positions == ["ST"]

    with pytest.raises((TypeError, ValidationError)):
        record.name = "Other"  # type: ignore[misc]


def test_player_record_defaults_missing_positions_and_stats():
    record = PlayerRecord.model_validate({"name": "No Positions", "positions": None, "stats": None})

    assert record.positions == []
    assert record.stats == {}
    assert record.external_id is None


def test_player_record_keeps_scraped_fields_and_drops_private_keys():
    record = PlayerRecord.model_validate(
        {"name": "Stored", "_id": "abc", "season": "24/25", "preferred_foot_rating": 4}
    )

    document = record.to_document()
    assert document["season"] == "24/25"
    assert document["preferred_foot_rating"] == 4
    assert "_id" not in document


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, "0 €"),
        (0, "0 €"),
        (950, "950 €"),
        (500_000, "500K €"),
        (4_100_000, "4.1M €"),
        (65_000_000, "65.0M €"),
    ],
)
def test_format_market_value(value, expected):
    assert format_market_value(value) == expected


def test_to_summary_projects_display_fields():
    record = PlayerRecord(
        name="Winger",
        sofascore_id="77",
        age=21,
        club="Club",
        league="League",
        league_country="Country",
        nationality="Nation",
        footed="left",
        height_cm=178,
        market_value=4_500_000,
        positions=["LW", "ML"],
        stats={"goals": 5},
    )

    summary = record.to_summary()

    assert summary.name == "Winger"
    assert summary.market_value == "4.5M €"
    assert summary.market_value_raw == 4_500_000
    assert summary.positions == "LW,ML"
    assert not hasattr(summary, "stats")


def test_to_document_round_trips():
    record = PlayerRecord(name="Keeper", sofascore_id="9", positions=["GK"], stats={"saves": 30})
    document = record.to_document()

    assert document["sofascore_id"] == "9"
    assert PlayerRecord.model_validate(document) == record
