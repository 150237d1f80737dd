"""
Tres estimadores independientes de probabilidades 1X2:
- cuotas del bookmaker (probabilidad implícita sin overround)
- stats de temporada (win rate + goles por partido)
- forma (wins - losses sobre partidos jugados)
"""
from __future__ import annotations

from core.models import BookmakerOdds, ProbabilityTriple, TeamSeasonStats

# Fallback cuando la fuerza combinada es 0 (X apenas favorecido para cerrar en 1)
UNIFORM_FALLBACK = ProbabilityTriple(p1=0.33, px=0.34, p2=0.33)

STATS_FLOOR = 0.1
FORM_DRAW_BASE = 0.1
FORM_MIN_GAMES = 5


def _normalize(p1: float, px: float, p2: float) -> ProbabilityTriple:
    total = p1 + px + p2
    return ProbabilityTriple(p1=p1 / total, px=px / total, p2=p2 / total)


def estimate_from_odds(odds: BookmakerOdds) -> ProbabilityTriple:
    """
    1/cuota por resultado, normalizado por la suma (quita el margen del bookmaker).
    Cuotas faltantes o <= 0 se reemplazan por el fallback 2.0 / 3.0 / 3.5.
    """
    o = odds.with_defaults()
    return _normalize(1.0 / o.o1, 1.0 / o.ox, 1.0 / o.o2)


def _strength(stats: TeamSeasonStats) -> float:
    gp = max(stats.games_played, 1)
    win_rate = stats.wins / gp
    goals_per_game = stats.goals_for / gp
    return win_rate * 0.6 + goals_per_game * 0.1


def estimate_from_stats(home: TeamSeasonStats, away: TeamSeasonStats) -> ProbabilityTriple:
    """
    Reparto por fuerza relativa con topes (p1 <= 0.7, p2 <= 0.6) y piso 0.1 por componente.
    El piso se aplica después de calcular px y NO se re-normaliza: la suma puede pasar de 1.
    """
    home_strength = _strength(home)
    away_strength = _strength(away)
    total = home_strength + away_strength

    if total == 0:
        return UNIFORM_FALLBACK

    p1 = min(0.7, home_strength / total * 1.2)
    p2 = min(0.6, away_strength / total * 0.9)
    px = 1 - p1 - p2

    return ProbabilityTriple(
        p1=max(STATS_FLOOR, p1),
        px=max(STATS_FLOOR, px),
        p2=max(STATS_FLOOR, p2),
    )


def _form(stats: TeamSeasonStats) -> float:
    # piso de 5 partidos para amortiguar muestras chicas
    return (stats.wins - stats.losses) / max(stats.games_played, FORM_MIN_GAMES)


def estimate_from_form(home: TeamSeasonStats, away: TeamSeasonStats) -> ProbabilityTriple:
    p1 = 0.5 + _form(home) * 0.15
    p2 = 0.5 - _form(away) * 0.15
    return _normalize(p1, FORM_DRAW_BASE, p2)
