import pytest

from core.models import (
    BetRecommendation,
    BlendConfig,
    BookmakerOdds,
    MatchContext,
    PredictionStatus,
    TeamSeasonStats,
)
from core.predictor import predict, predict_match

MATCH = MatchContext(match_id=101, home_team_id=1, away_team_id=2, match_date="2026-10-20T19:00:00Z")

STRONG = TeamSeasonStats(games_played=10, wins=10, goals_for=30)
WEAK = TeamSeasonStats(games_played=10, losses=10)
EVEN = TeamSeasonStats(games_played=10, wins=5, losses=5, goals_for=15)


def test_predict_returns_none_when_stats_missing():
    odds = BookmakerOdds(1.8, 3.4, 4.5)

    assert predict(MATCH, None, EVEN, odds) is None
    assert predict(MATCH, EVEN, None, odds) is None

    result = predict_match(MATCH, EVEN, None, odds)
    assert result.status is PredictionStatus.INSUFFICIENT_DATA
    assert result.prediction is None


def test_balanced_match_is_below_threshold():
    result = predict_match(MATCH, EVEN, EVEN, BookmakerOdds(2.5, 3.2, 2.9))

    assert result.status is PredictionStatus.BELOW_THRESHOLD
    assert not result.ok
    assert predict(MATCH, EVEN, EVEN, BookmakerOdds(2.5, 3.2, 2.9)) is None


def test_heavy_favourite_passes_gate_without_bet():
    result = predict_match(MATCH, STRONG, WEAK, BookmakerOdds(1.01, 100.0, 100.0))

    assert result.ok
    p = result.prediction
    assert p.type == "1"
    assert p.match_id == 101
    # p1 = (0.4*0.9802 + 0.35*0.7 + 0.15*0.4643 + 0.05) / 0.95
    assert p.confidence == pytest.approx(0.7966, abs=1e-4)
    assert p.recommended_bet is None
    assert p.expected_value == 0.0
    assert p.probabilities.total() == pytest.approx(1.0, abs=1e-12)


def test_bet_attached_when_confidence_and_odd_allow():
    config = BlendConfig(w_odds=0.2, w_stats=0.3, w_form=0.0, home_adv=0.5)

    p = predict(MATCH, STRONG, WEAK, BookmakerOdds(2.2, 3.0, 15.0), config)

    assert p is not None
    assert p.type == "1"
    assert p.confidence == pytest.approx(0.8164, abs=1e-4)
    assert p.recommended_bet == BetRecommendation("1", 2.2)
    p1 = p.probabilities.p1
    assert p.expected_value == pytest.approx(p1 * 1.2 - (1 - p1))
    assert p.to_dict()["recommended_bet"] == "1 @2.20"


def test_missing_odds_are_defaulted_before_recommendation():
    config = BlendConfig(w_odds=0.2, w_stats=0.3, w_form=0.0, home_adv=0.5)

    p = predict(MATCH, STRONG, WEAK, BookmakerOdds(None, 3.0, 15.0), config)

    # o1 cae al fallback 2.0, que no supera el mínimo de 2.0
    assert p is not None
    assert p.recommended_bet is None


def test_arithmetic_fault_is_reported_as_failed():
    broken = BlendConfig(w_odds=0.0, w_stats=0.0, w_form=0.0, home_adv=0.05)

    result = predict_match(MATCH, STRONG, WEAK, BookmakerOdds(1.8, 3.4, 4.5), broken)

    assert result.status is PredictionStatus.FAILED
    assert result.prediction is None
    assert result.reason


def test_predict_is_deterministic():
    odds = BookmakerOdds(1.01, 100.0, 100.0)

    assert predict(MATCH, STRONG, WEAK, odds) == predict(MATCH, STRONG, WEAK, odds)


def test_match_context_season_from_kickoff():
    assert MATCH.season == 2026
    assert MatchContext(1, 1, 2, "2025-08-16T14:00:00+00:00").season == 2025
