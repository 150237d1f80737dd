"""
Top-K del día: de todas las predicciones aceptadas, las de mayor confianza.
"""
from __future__ import annotations

from typing import Iterable

from core.models import BlendConfig, Prediction


def rank_top(
    predictions: Iterable[Prediction | None],
    min_confidence: float = BlendConfig.min_confidence,
    limit: int = BlendConfig.top_k,
) -> list[Prediction]:
    """
    Descarta None y las que no llegan a min_confidence, ordena por confianza desc
    y devuelve como máximo `limit`.
    """
    kept = [p for p in predictions if p is not None and p.confidence >= min_confidence]
    kept.sort(key=lambda p: p.confidence, reverse=True)
    return kept[: max(0, limit)]
