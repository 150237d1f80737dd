from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException

import db

router = APIRouter()


def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def _valid_date(s: str) -> bool:
    try:
        datetime.strptime(s, "%Y-%m-%d")
        return True
    except ValueError:
        return False


def daily_payload(batch_date: str) -> dict:
    """Batch del día; si no hay, lista vacía (no es error: no hubo señal suficiente)."""
    batch = db.get_daily_predictions(batch_date)
    if batch is None:
        return {"batch_date": batch_date, "predictions_count": 0, "predictions": []}
    return batch


@router.get("/predictions/today")
def get_today_predictions():
    return daily_payload(_today())


@router.get("/predictions/{batch_date}")
def get_predictions_by_date(batch_date: str):
    if not _valid_date(batch_date):
        raise HTTPException(status_code=400, detail="Fecha inválida, usar YYYY-MM-DD")
    return daily_payload(batch_date)


@router.get("/stats/summary")
def get_stats_summary():
    return {**db.system_counts(), **db.accuracy_summary()}
