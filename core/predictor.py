"""
Orquestación por partido: estimadores -> blend -> gate -> apuesta -> EV.
Sin I/O: las stats y cuotas llegan ya resueltas por el caller.
"""
from __future__ import annotations

import logging

from core.blender import blend
from core.decision import confidence_gate, expected_value, recommend_bet
from core.estimators import estimate_from_form, estimate_from_odds, estimate_from_stats
from core.models import (
    BlendConfig,
    BookmakerOdds,
    MatchContext,
    Prediction,
    PredictionResult,
    PredictionStatus,
    TeamSeasonStats,
)

logger = logging.getLogger(__name__)


def predict_match(
    match: MatchContext,
    home_stats: TeamSeasonStats | None,
    away_stats: TeamSeasonStats | None,
    odds: BookmakerOdds,
    config: BlendConfig | None = None,
) -> PredictionResult:
    """
    Devuelve un PredictionResult que distingue:
    - INSUFFICIENT_DATA: falta alguna de las stats (se saltea el partido)
    - BELOW_THRESHOLD: la confianza no llega al mínimo
    - FAILED: error aritmético inesperado (bug, no dato)
    - OK: predicción creada
    """
    cfg = config or BlendConfig()

    if home_stats is None or away_stats is None:
        missing = "home" if home_stats is None else "away"
        return PredictionResult(PredictionStatus.INSUFFICIENT_DATA, reason=f"missing {missing} stats")

    try:
        market = odds.with_defaults()
        probs = blend(
            estimate_from_odds(market),
            estimate_from_stats(home_stats, away_stats),
            estimate_from_form(home_stats, away_stats),
            cfg,
        )

        ptype, confidence, passed = confidence_gate(probs, cfg.min_confidence)
        if not passed:
            return PredictionResult(
                PredictionStatus.BELOW_THRESHOLD,
                reason=f"confidence {confidence:.3f} < {cfg.min_confidence:.2f}",
            )

        bet = recommend_bet(
            ptype,
            confidence,
            market,
            min_confidence=cfg.bet_min_confidence,
            min_odd=cfg.bet_min_odd,
        )
        prediction = Prediction(
            type=ptype,
            confidence=confidence,
            probabilities=probs,
            recommended_bet=bet,
            expected_value=expected_value(bet, probs),
            match_id=match.match_id,
        )
    except (ArithmeticError, ValueError) as e:
        logger.exception("Fallo de cálculo en partido %s (%s vs %s)", match.match_id, match.home, match.away)
        return PredictionResult(PredictionStatus.FAILED, reason=str(e))

    return PredictionResult(PredictionStatus.OK, prediction=prediction)


def predict(
    match: MatchContext,
    home_stats: TeamSeasonStats | None,
    away_stats: TeamSeasonStats | None,
    odds: BookmakerOdds,
    config: BlendConfig | None = None,
) -> Prediction | None:
    """Atajo: la Prediction o None si no hubo (datos insuficientes, baja confianza o fallo)."""
    return predict_match(match, home_stats, away_stats, odds, config).prediction
