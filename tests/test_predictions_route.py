import pytest
from fastapi import HTTPException

from app.routes import predictions as predictions_route


def test_daily_payload_empty_when_no_batch(monkeypatch):
    monkeypatch.setattr(predictions_route.db, "get_daily_predictions", lambda batch_date: None)

    out = predictions_route.daily_payload("2026-10-18")

    assert out == {"batch_date": "2026-10-18", "predictions_count": 0, "predictions": []}


def test_get_predictions_by_date_passes_batch(monkeypatch):
    batch = {"batch_date": "2026-10-18", "predictions_count": 1, "predictions": [{"match_id": 1}]}
    monkeypatch.setattr(predictions_route.db, "get_daily_predictions", lambda batch_date: batch)

    assert predictions_route.get_predictions_by_date("2026-10-18") == batch


def test_get_predictions_by_date_rejects_bad_date():
    with pytest.raises(HTTPException) as exc:
        predictions_route.get_predictions_by_date("18-10-2026")

    assert exc.value.status_code == 400


def test_get_stats_summary_merges_counts_and_accuracy(monkeypatch):
    monkeypatch.setattr(predictions_route.db, "system_counts", lambda: {"matches": 12, "teams": 8, "predictions": 3})
    monkeypatch.setattr(
        predictions_route.db,
        "accuracy_summary",
        lambda: {"total_predictions": 3, "wins": 2, "losses": 1, "push": 0, "pending": 0, "accuracy": 66.67},
    )

    out = predictions_route.get_stats_summary()

    assert out["matches"] == 12
    assert out["accuracy"] == 66.67
