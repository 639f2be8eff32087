import dataclasses
import json

import httpx
import pytest

from reverseball.enrichment import EnrichmentClient, build_prediction_payload, parse_market_value
from reverseball.models import (
    EnrichmentAnnotation,
    EnrichmentStatus,
    PlayerDetail,
    PlayerRecord,
    QualificationResult,
)


BASE_URL = "http://ml.test"


def _record(name, external_id=None, **fields):
    return PlayerRecord(name=name, sofascore_id=external_id, positions=["ST"], **fields)


def _results(*records):
    return [
        QualificationResult(player=record.to_summary(), source=record, rank_score=float(10 - index))
        for index, record in enumerate(records)
    ]


def _client(handler, **kwargs):
    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    return EnrichmentClient(BASE_URL, http_client=http_client, **kwargs)


def _provider(predictions=None, *, healthy=True, batch_error=None, calls=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        if request.url.path == "/health":
            return httpx.Response(200, json={"status": "ok", "models_loaded": healthy})
        if request.url.path == "/predict_batch":
            if batch_error is not None:
                raise batch_error(request)
            return httpx.Response(200, json={"predictions": predictions or []})
        if request.url.path == "/predict":
            return httpx.Response(200, json=(predictions or [{}])[0])
        return httpx.Response(404)

    return handler


def test_health_requires_models_loaded():
    assert _client(_provider(healthy=True)).check_availability() is True

    client = _client(_provider(healthy=False))
    assert client.check_availability() is False
    assert client.is_healthy is False


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"error": "boom"}),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json=["models_loaded"]),
    ],
)
def test_health_failures_mark_provider_unavailable(response):
    client = _client(lambda request: response)
    assert client.check_availability() is False


def test_health_connection_error_is_not_raised():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    assert _client(handler).check_availability() is False


def test_batch_matches_by_id_then_name_and_resorts():
    records = [_record("Alpha", "1"), _record("Bravo", "2"), _record("Charlie")]
    predictions = [
        {"sofascore_id": 1, "name": "Renamed", "future_potential": 60, "current_potential": 55},
        {"sofascore_id": "999", "name": "Charlie", "future_potential": 90},
    ]
    client = _client(_provider(predictions))

    batch = client.enrich_batch(_results(*records), records)

    assert batch.status is EnrichmentStatus.APPLIED
    assert batch.matched == 2
    assert [item.player.name for item in batch.results] == ["Charlie", "Alpha", "Bravo"]
    charlie, alpha, bravo = batch.results
    assert charlie.insights.future_score == 90
    assert alpha.insights.current_score == 55
    assert bravo.insights is None


def test_batch_applies_annotation_defaults():
    records = [_record("Alpha", "1")]
    client = _client(_provider([{"sofascore_id": "1", "future_potential": 70, "suitable_roles": None}]))

    (result,) = client.annotate_batch(_results(*records), records)

    assert result.insights.trajectory_label == "Unknown"
    assert result.insights.confidence == 0.75
    assert result.insights.suitable_roles == []


def test_batch_first_prediction_wins_for_duplicate_ids():
    records = [_record("Alpha", "1")]
    predictions = [
        {"sofascore_id": "1", "future_potential": 40},
        {"sofascore_id": "1", "future_potential": 99},
    ]

    (result,) = _client(_provider(predictions)).annotate_batch(_results(*records), records)

    assert result.insights.future_score == 40


def test_batch_timeout_returns_original_order_without_insights():
    records = [_record("Alpha", "1"), _record("Bravo", "2"), _record("Charlie", "3")]
    display = _results(*records)

    def timeout(request):
        return httpx.ReadTimeout("timed out", request=request)

    batch = _client(_provider(batch_error=timeout)).enrich_batch(display, records)

    assert batch.status is EnrichmentStatus.FAILED
    assert batch.results == display
    assert all(item.insights is None for item in batch.results)


def test_batch_without_predictions_list_is_a_failure():
    records = [_record("Alpha", "1")]

    def handler(request):
        if request.url.path == "/health":
            return httpx.Response(200, json={"models_loaded": True})
        return httpx.Response(200, json={"error": "model missing"})

    batch = _client(handler).enrich_batch(_results(*records), records)

    assert batch.status is EnrichmentStatus.FAILED
    assert batch.results[0].insights is None


def test_batch_skips_malformed_predictions():
    records = [_record("Alpha", "1"), _record("Bravo", "2")]
    predictions = [
        {"sofascore_id": "1", "future_potential": "very high"},
        {"sofascore_id": "2", "future_potential": 50},
    ]

    batch = _client(_provider(predictions)).enrich_batch(_results(*records), records)

    assert batch.matched == 1
    assert [item.player.name for item in batch.results] == ["Bravo", "Alpha"]
    assert len(batch.results) == len(records)


def test_batch_skipped_when_provider_unhealthy():
    calls = []
    records = [_record("Alpha", "1"), _record("Bravo", "2")]
    display = _results(*records)

    batch = _client(_provider(healthy=False, calls=calls)).enrich_batch(display, records)

    assert batch.status is EnrichmentStatus.UNAVAILABLE
    assert batch.results == display
    assert [request.url.path for request in calls] == ["/health"]


def test_disabled_client_makes_no_requests():
    calls = []
    records = [_record("Alpha", "1")]
    display = _results(*records)

    batch = _client(_provider(calls=calls), enabled=False).enrich_batch(display, records)

    assert batch.status is EnrichmentStatus.DISABLED
    assert batch.results == display
    assert calls == []


def test_empty_batch_is_skipped():
    calls = []
    batch = _client(_provider(calls=calls)).enrich_batch([], [])

    assert batch.status is EnrichmentStatus.SKIPPED
    assert batch.results == []
    assert calls == []


def test_misaligned_inputs_raise():
    records = [_record("Alpha", "1")]
    with pytest.raises(ValueError):
        _client(_provider()).enrich_batch(_results(*records), [])


def test_batch_request_carries_raw_stats_and_timeout():
    calls = []
    records = [
        _record("Alpha", "1", age=22, market_value=1_500_000, stats={"minutesPlayed": 900, "goals": 7})
    ]

    _client(_provider(calls=calls), batch_timeout=42.0).enrich_batch(_results(*records), records)

    batch_request = calls[-1]
    assert batch_request.url.path == "/predict_batch"
    body = json.loads(batch_request.content)
    (player,) = body["players"]
    assert player["sofascore_id"] == "1"
    assert player["market_value"] == 1_500_000
    assert player["stats"] == {"minutesPlayed": 900, "goals": 7}
    assert batch_request.extensions["timeout"]["read"] == 42.0


def test_annotate_one_sets_insights_when_healthy():
    record = _record("Alpha", "1")
    client = _client(_provider([{"sofascore_id": "1", "future_potential": 77}]))
    client.check_availability()

    detail = client.annotate_one(PlayerDetail(player=record), record)

    assert detail.insights.future_score == 77


def test_annotate_one_without_health_check_leaves_detail_unchanged():
    calls = []
    record = _record("Alpha", "1")
    detail = PlayerDetail(player=record)

    assert _client(_provider(calls=calls)).annotate_one(detail, record) is detail
    assert calls == []


def test_predict_one_reports_request_failure():
    def handler(request):
        if request.url.path == "/health":
            return httpx.Response(200, json={"models_loaded": True})
        return httpx.Response(503, text="overloaded")

    client = _client(handler)
    client.check_availability()

    outcome = client.predict_one(_record("Alpha", "1"))

    assert not outcome.available
    assert outcome.reason == "request_failed"


@pytest.mark.parametrize(
    "value, expected",
    [(None, 0.0), (2_500_000, 2_500_000.0), ("4.5M €", 4_500_000.0), ("500K €", 500_000.0), ("n/a", 0.0)],
)
def test_parse_market_value(value, expected):
    assert parse_market_value(value) == pytest.approx(expected)


def test_prediction_payload_shape():
    record = PlayerRecord(
        name="Alpha",
        sofascore_id=10,
        age=19,
        positions="ST, AM",
        stats={"goals": 3},
    )

    payload = build_prediction_payload(record)

    assert payload["sofascore_id"] == "10"
    assert payload["positions"] == ["ST", "AM"]
    assert payload["age"] == 19
    assert payload["club"] is None
    assert payload["stats"] == {"goals": 3}


def test_batch_skips_non_finite_scores():
    records = [_record("Alpha", "1"), _record("Bravo", "2"), _record("Charlie", "3")]
    body = (
        b'{"predictions": ['
        b'{"sofascore_id": "1", "future_potential": 10}, '
        b'{"sofascore_id": "2", "future_potential": NaN}, '
        b'{"sofascore_id": "3", "future_potential": 90}]}'
    )

    def handler(request):
        if request.url.path == "/health":
            return httpx.Response(200, json={"models_loaded": True})
        return httpx.Response(200, content=body, headers={"content-type": "application/json"})

    batch = _client(handler).enrich_batch(_results(*records), records)

    assert batch.matched == 2
    assert [item.player.name for item in batch.results] == ["Charlie", "Alpha", "Bravo"]
    assert batch.results[2].insights is None


def test_future_score_ignores_non_finite_annotations():
    (result,) = _results(_record("Alpha", "1"))
    result = dataclasses.replace(result, insights=EnrichmentAnnotation(future_score=float("nan")))

    assert result.future_score == 0.0


def test_set_enabled_toggles_batch_enrichment():
    calls = []
    records = [_record("Alpha", "1")]
    client = _client(_provider([{"sofascore_id": "1", "future_potential": 50}], calls=calls))

    client.set_enabled(False)
    disabled = client.enrich_batch(_results(*records), records)

    assert disabled.status is EnrichmentStatus.DISABLED
    assert calls == []

    client.set_enabled(True)
    enabled = client.enrich_batch(_results(*records), records)

    assert enabled.status is EnrichmentStatus.APPLIED
    assert enabled.results[0].insights.future_score == 50
