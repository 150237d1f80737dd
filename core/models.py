"""
Registros tipados que circulan por el motor: stats de temporada, cuotas,
probabilidades 1X2, predicciones y configuración del blend.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

OUTCOMES = ("1", "X", "2")


def _to_int(x: Any, default: int = 0) -> int:
    try:
        if x is None:
            return default
        return int(x)
    except (TypeError, ValueError):
        return default


def _to_float(x: Any, default: float = 0.0) -> float:
    try:
        if x is None:
            return float(default)
        return float(x)
    except (TypeError, ValueError):
        return float(default)


@dataclass(frozen=True)
class TeamSeasonStats:
    games_played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    possession_avg: float = 50.0  # informativo
    shots_per_game: float = 0.0  # informativo

    @classmethod
    def from_dict(cls, row: dict[str, Any]) -> "TeamSeasonStats":
        """Construye desde fila de DB o payload del proveedor (claves snake_case)."""
        return cls(
            games_played=_to_int(row.get("games_played")),
            wins=_to_int(row.get("wins")),
            draws=_to_int(row.get("draws")),
            losses=_to_int(row.get("losses")),
            goals_for=_to_int(row.get("goals_for")),
            goals_against=_to_int(row.get("goals_against")),
            possession_avg=_to_float(row.get("possession_avg"), 50.0),
            shots_per_game=_to_float(row.get("shots_per_game")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "games_played": self.games_played,
            "wins": self.wins,
            "draws": self.draws,
            "losses": self.losses,
            "goals_for": self.goals_for,
            "goals_against": self.goals_against,
            "possession_avg": self.possession_avg,
            "shots_per_game": self.shots_per_game,
        }


@dataclass(frozen=True)
class BookmakerOdds:
    """Cuotas decimales 1 / X / 2. Pueden venir None o <= 0 si el proveedor no tenía."""

    o1: float | None = None
    ox: float | None = None
    o2: float | None = None

    def odd_for(self, outcome: str) -> float | None:
        return {"1": self.o1, "X": self.ox, "2": self.o2}.get(outcome)

    def with_defaults(self) -> "BookmakerOdds":
        """Reemplaza cada cuota faltante o no positiva por su fallback."""

        def pick(value: float | None, fallback: float | None) -> float | None:
            if value is None or value <= 0:
                return fallback
            return float(value)

        return BookmakerOdds(
            o1=pick(self.o1, DEFAULT_ODDS.o1),
            ox=pick(self.ox, DEFAULT_ODDS.ox),
            o2=pick(self.o2, DEFAULT_ODDS.o2),
        )


DEFAULT_ODDS = BookmakerOdds(o1=2.0, ox=3.0, o2=3.5)


@dataclass(frozen=True)
class ProbabilityTriple:
    p1: float
    px: float
    p2: float

    def get(self, outcome: str) -> float:
        return {"1": self.p1, "X": self.px, "2": self.p2}[outcome]

    def total(self) -> float:
        return self.p1 + self.px + self.p2

    def as_dict(self) -> dict[str, float]:
        return {"p1": self.p1, "px": self.px, "p2": self.p2}


@dataclass(frozen=True)
class MatchContext:
    match_id: int | None
    home_team_id: int | None
    away_team_id: int | None
    match_date: str | datetime | date | None = None
    home: str = ""
    away: str = ""
    league: str = ""

    @property
    def season(self) -> int:
        """Año de temporada derivado de la fecha del partido (hoy si no se puede parsear)."""
        # Limitación conocida: es el año calendario del kickoff. Football-Data usa el año
        # de inicio de temporada, así que los partidos de enero a mayo piden la temporada
        # siguiente y vuelven sin stats.
        d = self.match_date
        if isinstance(d, (datetime, date)):
            return d.year
        if isinstance(d, str) and d:
            s = d.strip()
            try:
                if s.endswith("Z"):
                    s = s.replace("Z", "+00:00")
                return datetime.fromisoformat(s).year
            except ValueError:
                pass
        return datetime.now().year

    @classmethod
    def from_dict(cls, row: dict[str, Any]) -> "MatchContext":
        return cls(
            match_id=row.get("match_id"),
            home_team_id=row.get("home_team_id"),
            away_team_id=row.get("away_team_id"),
            match_date=row.get("utcDate") or row.get("match_date"),
            home=row.get("home") or "",
            away=row.get("away") or "",
            league=row.get("league") or "",
        )


@dataclass(frozen=True)
class BetRecommendation:
    outcome: str
    odd: float

    def label(self) -> str:
        return f"{self.outcome} @{self.odd:.2f}"


@dataclass(frozen=True)
class Prediction:
    type: str
    confidence: float
    probabilities: ProbabilityTriple
    recommended_bet: BetRecommendation | None = None
    expected_value: float = 0.0
    match_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        bet = self.recommended_bet
        return {
            "match_id": self.match_id,
            "type": self.type,
            "confidence": self.confidence,
            "probabilities": self.probabilities.as_dict(),
            "recommended_bet": bet.label() if bet else None,
            "expected_value": self.expected_value,
        }


class PredictionStatus(str, Enum):
    OK = "ok"
    INSUFFICIENT_DATA = "insufficient_data"
    BELOW_THRESHOLD = "below_threshold"
    FAILED = "failed"


@dataclass(frozen=True)
class PredictionResult:
    status: PredictionStatus
    prediction: Prediction | None = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status is PredictionStatus.OK and self.prediction is not None


@dataclass(frozen=True)
class BlendConfig:
    """Pesos y umbrales del motor. Defaults = constantes del modelo en producción."""

    w_odds: float = 0.40
    w_stats: float = 0.35
    w_form: float = 0.15
    home_adv: float = 0.05
    min_confidence: float = 0.75
    bet_min_confidence: float = 0.80
    bet_min_odd: float = 2.0
    top_k: int = 5

    @classmethod
    def from_settings(cls, s: Any = None) -> "BlendConfig":
        if s is None:
            from config.settings import settings as s
        return cls(
            w_odds=s.weight_odds,
            w_stats=s.weight_stats,
            w_form=s.weight_form,
            home_adv=s.home_advantage,
            min_confidence=s.min_confidence,
            bet_min_confidence=s.bet_min_confidence,
            bet_min_odd=s.bet_min_odd,
            top_k=s.top_k,
        )
