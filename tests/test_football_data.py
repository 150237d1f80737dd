from datetime import datetime, timedelta, timezone

import pytest

from core.models import DEFAULT_ODDS, BookmakerOdds, TeamSeasonStats
from data.providers import football_data


def _iso(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")


def _finished(mid, home_id, away_id, hg, ag):
    return {
        "id": mid,
        "status": "FINISHED",
        "utcDate": "2026-09-01T15:00:00Z",
        "homeTeam": {"id": home_id, "name": f"T{home_id}"},
        "awayTeam": {"id": away_id, "name": f"T{away_id}"},
        "score": {"fullTime": {"home": hg, "away": ag}},
    }


def test_get_upcoming_matches_keeps_only_window(monkeypatch):
    now = datetime.now(timezone.utc)
    monkeypatch.setattr(
        football_data,
        "_get",
        lambda path, params=None: {
            "matches": [
                {
                    "id": 1,
                    "utcDate": _iso(now + timedelta(days=2)),
                    "status": "SCHEDULED",
                    "homeTeam": {"id": 10, "name": "A"},
                    "awayTeam": {"id": 20, "name": "B"},
                },
                {"id": 2, "utcDate": _iso(now + timedelta(days=20)), "homeTeam": {}, "awayTeam": {}},
                {"id": 3, "utcDate": _iso(now - timedelta(days=1)), "homeTeam": {}, "awayTeam": {}},
                {"id": 4, "utcDate": None},
            ]
        },
    )

    out = football_data.get_upcoming_matches("PL", days_ahead=7)

    assert [m["match_id"] for m in out] == [1]
    assert out[0]["home"] == "A"
    assert out[0]["away_team_id"] == 20
    assert out[0]["league"] == "PL"


def test_get_finished_matches_skips_missing_score(monkeypatch):
    monkeypatch.setattr(
        football_data,
        "_get",
        lambda path, params=None: {
            "matches": [
                _finished(1, 10, 20, 2, 1),
                {"id": 2, "score": {"fullTime": {"home": None, "away": None}}},
            ]
        },
    )

    out = football_data.get_finished_matches("PL")

    assert len(out) == 1
    assert out[0]["home_goals"] == 2
    assert out[0]["away_goals"] == 1


def test_parse_match_odds_flat_format():
    out = football_data.parse_match_odds({"odds": {"homeWin": 1.8, "draw": 3.4, "awayWin": None}})

    assert out == BookmakerOdds(o1=1.8, ox=3.4, o2=3.5)


def test_parse_match_odds_bookmakers_format():
    match = {
        "odds": {
            "bookmakers": [
                {
                    "bets": [
                        {"name": "OVER_UNDER", "values": []},
                        {
                            "name": "WIN_DRAW_WIN",
                            "values": [
                                {"resultType": "1", "odds": 2.1},
                                {"resultType": "X", "odds": 3.3},
                                {"resultType": "2", "odds": 3.9},
                            ],
                        },
                    ]
                }
            ]
        }
    }

    assert football_data.parse_match_odds(match) == BookmakerOdds(2.1, 3.3, 3.9)


def test_parse_match_odds_without_odds_uses_default():
    assert football_data.parse_match_odds({}) == DEFAULT_ODDS
    assert football_data.parse_match_odds({"odds": {"msg": "Activate Odds-Package"}}) == DEFAULT_ODDS


def test_get_match_odds_provider_error_falls_back(monkeypatch):
    def boom(path, params=None):
        raise RuntimeError("Football-Data Error 500")

    monkeypatch.setattr(football_data, "_get", boom)

    assert football_data.get_match_odds(99) == DEFAULT_ODDS


def test_aggregate_team_stats_from_both_sides():
    matches = [
        _finished(1, 10, 20, 2, 0),  # local, gana
        _finished(2, 30, 10, 1, 1),  # visitante, empata
        _finished(3, 40, 10, 3, 1),  # visitante, pierde
    ]

    out = football_data.aggregate_team_stats(10, matches)

    assert out.games_played == 3
    assert (out.wins, out.draws, out.losses) == (1, 1, 1)
    assert out.goals_for == 4
    assert out.goals_against == 4
    assert out.shots_per_game == (4 + 3 * 0.5) / 3


def test_get_team_season_stats_fetches_and_caches(monkeypatch):
    written = {}
    monkeypatch.setattr(football_data, "read_json", lambda filename: [])
    monkeypatch.setattr(football_data, "write_json", lambda filename, data: written.update({filename: data}))
    monkeypatch.setattr(
        football_data,
        "_get",
        lambda path, params=None: {"matches": [_finished(1, 10, 20, 2, 0)]},
    )

    out = football_data.get_team_season_stats(10, 2026)

    assert out.wins == 1
    assert written["team_stats_10_2026.json"]["stats"]["wins"] == 1


def test_get_team_season_stats_uses_stale_cache_on_error(monkeypatch):
    cached = {
        "meta": {"fetched_at": "2020-01-01T00:00:00+00:00"},
        "stats": TeamSeasonStats(games_played=5, wins=3).to_dict(),
    }
    monkeypatch.setattr(football_data, "read_json", lambda filename: cached)

    def boom(path, params=None):
        raise RuntimeError("Football-Data 429")

    monkeypatch.setattr(football_data, "_get", boom)

    out = football_data.get_team_season_stats(10, 2026)

    assert out == TeamSeasonStats(games_played=5, wins=3)


def test_get_team_season_stats_error_without_cache_is_none(monkeypatch):
    monkeypatch.setattr(football_data, "read_json", lambda filename: [])

    def boom(path, params=None):
        raise RuntimeError("Football-Data 429")

    monkeypatch.setattr(football_data, "_get", boom)

    assert football_data.get_team_season_stats(10, 2026) is None


def test_headers_use_api_key_from_settings(monkeypatch):
    monkeypatch.setattr(football_data.settings, "football_data_api_key", "abc123")
    assert football_data._headers() == {"X-Auth-Token": "abc123"}

    monkeypatch.setattr(football_data.settings, "football_data_api_key", "")
    with pytest.raises(RuntimeError, match="FOOTBALL_DATA_API_KEY"):
        football_data._headers()
