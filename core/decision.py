"""
Decisión sobre el blend final: gate de confianza, recomendación de apuesta y EV.
"""
from __future__ import annotations

from core.models import BetRecommendation, BookmakerOdds, ProbabilityTriple


def prediction_type(probs: ProbabilityTriple) -> str:
    """Resultado con la prob máxima. Empates: gana 1, después 2, después X."""
    top = max(probs.p1, probs.px, probs.p2)
    if top == probs.p1:
        return "1"
    if top == probs.p2:
        return "2"
    return "X"


def confidence_gate(probs: ProbabilityTriple, threshold: float = 0.75) -> tuple[str, float, bool]:
    """
    Returns: (tipo, confianza, pasa_gate).
    Confianza = max(p1, px, p2); no pasa si confianza < threshold.
    """
    confidence = max(probs.p1, probs.px, probs.p2)
    return prediction_type(probs), confidence, confidence >= threshold


def recommend_bet(
    outcome: str,
    confidence: float,
    odds: BookmakerOdds,
    min_confidence: float = 0.80,
    min_odd: float = 2.0,
) -> BetRecommendation | None:
    """Apuesta solo con confianza >= min_confidence y cuota del resultado > min_odd."""
    if confidence < min_confidence:
        return None

    odd = odds.odd_for(outcome)
    if odd is not None and odd > min_odd:
        return BetRecommendation(outcome=outcome, odd=float(odd))
    return None


def expected_value(bet: BetRecommendation | None, probs: ProbabilityTriple) -> float:
    """EV por unidad apostada: p * (cuota - 1) - (1 - p). Sin apuesta => 0."""
    if bet is None:
        return 0.0
    p = probs.get(bet.outcome)
    return p * (bet.odd - 1) - (1 - p)
