"""
Pipeline diario: sincronizar partidos/stats → predecir → top 5 → guardar batch.
Punto de entrada para cron externo (python -m app.cli analyze).
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import db
from config.settings import settings
from core.evaluation import evaluate_prediction
from core.models import BlendConfig, BookmakerOdds, MatchContext, Prediction, PredictionResult, PredictionStatus
from core.predictor import predict_match
from core.ranking import rank_top
from data.cache import is_fresh
from data.providers.football_data import (
    get_finished_matches,
    get_match_odds,
    get_team_season_stats,
    get_upcoming_matches,
)

logger = logging.getLogger(__name__)


def _leagues(leagues: list[str] | None) -> list[str]:
    if not leagues:
        return settings.league_codes()
    return [c for c in leagues if settings.is_valid_league(c)]


# -------------------------
# Sync
# -------------------------
def sync_matches(leagues: list[str] | None = None, days_ahead: int | None = None) -> int:
    """Trae partidos programados por liga y los guarda. Una liga que falla no corta el resto."""
    days = settings.sync_days_ahead if days_ahead is None else days_ahead
    total = 0
    for code in _leagues(leagues):
        try:
            matches = get_upcoming_matches(code, days_ahead=days)
        except Exception as e:
            logger.warning("No pude traer partidos de %s: %s", code, e)
            continue
        for m in matches:
            db.upsert_match(m)
        total += len(matches)
        logger.info("Liga %s: %d partidos programados", code, len(matches))
    return total


def _teams_to_sync(days_ahead: int) -> list[tuple[int, int]]:
    """(team_id, season) de los partidos próximos, sin repetidos, en orden de kickoff."""
    pairs: list[tuple[int, int]] = []
    for m in db.get_upcoming_matches(days_ahead):
        season = MatchContext.from_dict(m).season
        for tid in (m.get("home_team_id"), m.get("away_team_id")):
            if tid is None:
                continue
            pair = (int(tid), season)
            if pair not in pairs:
                pairs.append(pair)
    return pairs


def _stale_teams(pairs: list[tuple[int, int]]) -> list[tuple[int, int]]:
    """Pares sin stats vigentes en DB: primero los que nunca se bajaron, después los vencidos."""
    missing, expired = [], []
    for team_id, season in pairs:
        updated_at = db.get_team_stats_updated_at(team_id, season)
        if updated_at is None:
            missing.append((team_id, season))
        elif not is_fresh(updated_at, settings.team_stats_ttl_seconds):
            expired.append((team_id, season))
    return missing + expired


def sync_team_stats(limit: int | None = None, days_ahead: int | None = None) -> int:
    """
    Refresca stats de temporada de los equipos con partido próximo.
    El tope `limit` (rate limit) solo cuenta equipos sin stats vigentes, así que
    corridas sucesivas terminan cubriendo a todos.
    """
    cap = settings.stats_sync_limit if limit is None else limit
    days = settings.sync_days_ahead if days_ahead is None else days_ahead

    pairs = _teams_to_sync(days)
    pending = _stale_teams(pairs)
    updated = 0
    for team_id, season in pending[:cap]:
        stats = get_team_season_stats(team_id, season)
        if stats is None:
            continue
        db.upsert_team_stats(team_id, season, stats)
        updated += 1

    logger.info(
        "Stats actualizadas: %d equipos (%d vigentes, %d pendientes de %d)",
        updated, len(pairs) - len(pending), len(pending) - updated, len(pairs),
    )
    return updated


def sync_football_data(leagues: list[str] | None = None, days_ahead: int | None = None) -> tuple[int, int]:
    db.init_db()
    n_matches = sync_matches(leagues, days_ahead)
    n_teams = sync_team_stats(days_ahead=days_ahead)
    return n_matches, n_teams


# -------------------------
# Analysis
# -------------------------
def analyze_match(match_row: dict[str, Any], odds: BookmakerOdds, config: BlendConfig | None = None) -> PredictionResult:
    """Carga stats del partido desde DB y corre el motor."""
    match = MatchContext.from_dict(match_row)
    home_stats = db.get_team_stats(match.home_team_id, match.season)
    away_stats = db.get_team_stats(match.away_team_id, match.season)
    return predict_match(match, home_stats, away_stats, odds, config or BlendConfig.from_settings())


def run_daily_analysis(today: str | None = None, sync: bool = True) -> list[Prediction]:
    """
    Predice los partidos de los próximos días, guarda las aceptadas y el top del día.
    Returns: top predicciones (<= top_k, confianza desc).
    """
    db.init_db()
    if sync:
        sync_football_data()

    today = today or datetime.now(timezone.utc).date().isoformat()
    config = BlendConfig.from_settings()

    upcoming = db.get_upcoming_matches(settings.analysis_days_ahead)
    if not upcoming:
        logger.info("No hay partidos próximos para analizar")
        return []

    logger.info("Analizando %d partidos...", len(upcoming))

    predictions: list[Prediction] = []
    counts = {status: 0 for status in PredictionStatus}

    for m in upcoming:
        try:
            odds = get_match_odds(m["match_id"])
            result = analyze_match(m, odds, config)
        except Exception as e:
            logger.warning("Error analizando partido %s: %s", m.get("match_id"), e)
            continue

        counts[result.status] += 1
        if not result.ok:
            logger.debug("Partido %s sin predicción: %s (%s)", m.get("match_id"), result.status.value, result.reason)
            continue

        db.save_prediction(result.prediction, odds)
        predictions.append(result.prediction)

    top = rank_top(predictions, min_confidence=config.min_confidence, limit=config.top_k)

    if top:
        db.save_daily_batch(today, [p.match_id for p in top])

    logger.info(
        "Análisis %s: ok=%d insuficientes=%d baja_confianza=%d fallos=%d | top=%d",
        today,
        counts[PredictionStatus.OK],
        counts[PredictionStatus.INSUFFICIENT_DATA],
        counts[PredictionStatus.BELOW_THRESHOLD],
        counts[PredictionStatus.FAILED],
        len(top),
    )
    return top


# -------------------------
# Finished => result
# -------------------------
def settle_results(leagues: list[str] | None = None, days_back: int | None = None) -> int:
    """Evalúa predicciones PENDING cuyos partidos ya terminaron. Returns: cantidad evaluada."""
    db.init_db()
    pending = {int(p["match_id"]): p for p in db.pending_predictions()}
    if not pending:
        return 0

    days = settings.finished_days_back if days_back is None else days_back
    pending_leagues = {p.get("league") for p in pending.values() if p.get("league")}
    codes = [c for c in _leagues(leagues) if c in pending_leagues] if pending_leagues else _leagues(leagues)

    settled = 0
    for code in codes:
        try:
            finished = get_finished_matches(code, days_back=days)
        except Exception as e:
            logger.warning("No pude traer FINISHED para %s (sigo sin evaluar): %s", code, e)
            continue

        for m in finished:
            mid = m.get("match_id")
            if mid is None or int(mid) not in pending:
                continue
            db.upsert_match(m)
            result, reason = evaluate_prediction(
                pending[int(mid)].get("prediction_type"), m["home_goals"], m["away_goals"]
            )
            db.save_result(int(mid), result, reason)
            settled += 1

    logger.info("Resultados evaluados: %d", settled)
    return settled


def system_stats() -> dict[str, Any]:
    db.init_db()
    return {**db.system_counts(), **db.accuracy_summary()}
