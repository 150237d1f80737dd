"""
Evaluación de una predicción 1X2 según resultado del partido (goles).
Devuelve (WIN | LOSS | PUSH, reason). PUSH solo si el tipo no es 1/X/2.
"""
from __future__ import annotations

from core.models import OUTCOMES


def outcome_from_score(home_goals: int, away_goals: int) -> str:
    if home_goals > away_goals:
        return "1"
    if home_goals < away_goals:
        return "2"
    return "X"


def evaluate_prediction(prediction_type: str, home_goals: int, away_goals: int) -> tuple[str, str]:
    """
    Evalúa el tipo predicho ("1", "X", "2") con el resultado (home_goals, away_goals).
    Returns: (result, reason) con result in WIN | LOSS | PUSH.
    """
    t = (prediction_type or "").strip().upper()
    score = f"{home_goals}-{away_goals}"

    if t not in OUTCOMES:
        return ("PUSH", "Prediction type not supported")

    actual = outcome_from_score(home_goals, away_goals)
    if t == actual:
        return ("WIN", score)
    if actual == "X":
        return ("LOSS", f"{score} (empate)")
    return ("LOSS", score)
