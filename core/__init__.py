"""
Lógica de negocio: estimadores 1X2, blend, gate de confianza, apuesta, EV y top-K.
Sin dependencias de I/O (DB, HTTP, disco); solo datos en memoria.
"""
from core.blender import blend
from core.decision import confidence_gate, expected_value, recommend_bet
from core.estimators import estimate_from_form, estimate_from_odds, estimate_from_stats
from core.evaluation import evaluate_prediction
from core.models import (
    DEFAULT_ODDS,
    BetRecommendation,
    BlendConfig,
    BookmakerOdds,
    MatchContext,
    Prediction,
    PredictionResult,
    PredictionStatus,
    ProbabilityTriple,
    TeamSeasonStats,
)
from core.predictor import predict, predict_match
from core.ranking import rank_top

__all__ = [
    "estimate_from_odds",
    "estimate_from_stats",
    "estimate_from_form",
    "blend",
    "confidence_gate",
    "recommend_bet",
    "expected_value",
    "predict",
    "predict_match",
    "rank_top",
    "evaluate_prediction",
    "DEFAULT_ODDS",
    "BetRecommendation",
    "BlendConfig",
    "BookmakerOdds",
    "MatchContext",
    "Prediction",
    "PredictionResult",
    "PredictionStatus",
    "ProbabilityTriple",
    "TeamSeasonStats",
]
