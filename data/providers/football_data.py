"""
Cliente de la API Football-Data.org v4.
Usa config.settings para API key. Devuelve dicts planos / registros de core.models.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
import os
import time
import logging

import requests

from config.settings import settings
from core.models import DEFAULT_ODDS, BookmakerOdds, TeamSeasonStats
from data.cache import is_fresh, read_json, write_json

logger = logging.getLogger(__name__)

BASE = "https://api.football-data.org/v4"

# ✅ DEV/PROD switch:
#   PICK5_SLEEP_ON_429=0 -> no duerme, tira error rápido (ideal dev)
#   PICK5_SLEEP_ON_429=1 -> duerme y reintenta (ideal prod)
SLEEP_ON_429 = os.getenv("PICK5_SLEEP_ON_429", "1").strip().lower() in ("1", "true", "yes")


def _headers() -> dict[str, str]:
    if not settings.football_data_api_key:
        raise RuntimeError("FOOTBALL_DATA_API_KEY no está configurada (config o .env)")
    return {"X-Auth-Token": settings.football_data_api_key}


def _get(path: str, params: dict | None = None) -> dict:
    url = f"{BASE}{path}"
    while True:
        r = requests.get(url, headers=_headers(), params=params, timeout=20)

        remaining = r.headers.get("X-Requests-Available-Minute")
        reset = r.headers.get("X-RequestCounter-Reset")

        if r.status_code == 429:
            wait = int(reset or 60)
            if SLEEP_ON_429:
                logger.warning("Football-Data 429. Sleeping %ss... (%s)", wait, url)
                time.sleep(wait)
                continue
            # fallback rápido: raise y que el caller lo maneje
            raise RuntimeError(f"Football-Data 429: {r.text}")

        # si va quedando poco presupuesto, esperamos antes de la próxima llamada
        if remaining is not None:
            try:
                rem = int(remaining)
                if rem <= 1:
                    wait = int(reset or 60)
                    logger.warning("Rate limit bajo (%s). Sleeping %ss...", rem, wait)
                    time.sleep(wait)
            except ValueError:
                pass

        if r.status_code != 200:
            raise RuntimeError(f"Football-Data Error {r.status_code}: {r.text}")

        return r.json()


def _parse_utc(s: str | None) -> datetime | None:
    if not s or not isinstance(s, str):
        return None
    try:
        if s.endswith("Z"):
            s = s.replace("Z", "+00:00")
        dt = datetime.fromisoformat(s)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt
    except ValueError:
        return None


def _normalize_match(m: dict, league_code: str) -> dict:
    home = m.get("homeTeam") or {}
    away = m.get("awayTeam") or {}
    return {
        "match_id": m.get("id"),
        "utcDate": m.get("utcDate", ""),
        "status": m.get("status", ""),
        "home": home.get("name", ""),
        "away": away.get("name", ""),
        "league": league_code,
        "home_team_id": home.get("id"),
        "away_team_id": away.get("id"),
    }


def get_upcoming_matches(league_code: str, days_ahead: int = 7) -> list[dict]:
    """Partidos SCHEDULED con kickoff en (ahora, ahora + days_ahead]."""
    data = _get(f"/competitions/{league_code}/matches", params={"status": "SCHEDULED"})
    now = datetime.now(timezone.utc)
    end = now + timedelta(days=days_ahead)

    out: list[dict] = []
    for m in data.get("matches", []) or []:
        kickoff = _parse_utc(m.get("utcDate"))
        if kickoff is None or not (now < kickoff <= end):
            continue
        out.append(_normalize_match(m, league_code))
    return out


def get_finished_matches(league_code: str, days_back: int = 5) -> list[dict]:
    """
    Partidos finalizados con resultado (home_goals, away_goals).
    Los que no traen fullTime se descartan.
    """
    end = datetime.now(timezone.utc)
    start = end - timedelta(days=days_back)

    data = _get(
        f"/competitions/{league_code}/matches",
        params={
            "status": "FINISHED",
            "dateFrom": start.strftime("%Y-%m-%d"),
            "dateTo": end.strftime("%Y-%m-%d"),
        },
    )

    out: list[dict] = []
    for m in data.get("matches", []) or []:
        ft = ((m.get("score") or {}).get("fullTime")) or {}
        hg = ft.get("home")
        ag = ft.get("away")
        if hg is None or ag is None:
            continue
        row = _normalize_match(m, league_code)
        row["home_goals"] = int(hg)
        row["away_goals"] = int(ag)
        out.append(row)
    return out


# -------------------------
# Odds
# -------------------------
def parse_match_odds(match: dict) -> BookmakerOdds:
    """
    Soporta los dos formatos que devuelve el proveedor:
    - plano: odds = {homeWin, draw, awayWin}
    - por bookmaker: odds.bookmakers[0].bets[name=WIN_DRAW_WIN].values[resultType=1|X|2]
    Lo que falte queda en el fallback 2.0 / 3.0 / 3.5.
    """
    odds = match.get("odds")
    if not isinstance(odds, dict):
        return DEFAULT_ODDS

    if any(k in odds for k in ("homeWin", "draw", "awayWin")):
        return BookmakerOdds(
            o1=odds.get("homeWin"),
            ox=odds.get("draw"),
            o2=odds.get("awayWin"),
        ).with_defaults()

    bookmakers = odds.get("bookmakers") or []
    if bookmakers:
        bets = bookmakers[0].get("bets") or []
        win_draw = next((b for b in bets if b.get("name") == "WIN_DRAW_WIN"), None)
        if win_draw and win_draw.get("values"):
            by_result = {v.get("resultType"): v.get("odds") for v in win_draw["values"]}
            return BookmakerOdds(
                o1=by_result.get("1"),
                ox=by_result.get("X"),
                o2=by_result.get("2"),
            ).with_defaults()

    return DEFAULT_ODDS


def get_match_odds(match_id: int) -> BookmakerOdds:
    """Cuotas 1X2 del partido. Si la API falla, fallback con warning (no corta el pipeline)."""
    try:
        data = _get(f"/matches/{match_id}")
    except (RuntimeError, requests.RequestException) as e:
        logger.warning("No pude traer odds del partido %s: %s", match_id, e)
        return DEFAULT_ODDS
    # v4 devuelve el partido plano; algunas respuestas lo envuelven en "match"
    match = data.get("match") if isinstance(data.get("match"), dict) else data
    return parse_match_odds(match)


# -------------------------
# Team season stats
# -------------------------
def _stats_cache_key(team_id: int, season: int) -> str:
    return f"team_stats_{team_id}_{season}.json"


def aggregate_team_stats(team_id: int, matches: list[dict]) -> TeamSeasonStats:
    """W/D/L y goles desde la perspectiva de team_id sobre partidos FINISHED."""
    wins = draws = losses = 0
    goals_for = goals_against = 0
    games = 0

    for m in matches:
        if m.get("status") not in (None, "FINISHED"):
            continue
        ft = ((m.get("score") or {}).get("fullTime")) or {}
        hg = ft.get("home")
        ag = ft.get("away")
        if hg is None or ag is None:
            continue

        is_home = (m.get("homeTeam") or {}).get("id") == team_id
        gf, ga = (int(hg), int(ag)) if is_home else (int(ag), int(hg))

        games += 1
        goals_for += gf
        goals_against += ga
        if gf > ga:
            wins += 1
        elif gf < ga:
            losses += 1
        else:
            draws += 1

    return TeamSeasonStats(
        games_played=games,
        wins=wins,
        draws=draws,
        losses=losses,
        goals_for=goals_for,
        goals_against=goals_against,
        possession_avg=50.0,  # el plan free no trae posesión
        shots_per_game=(goals_for + games * 0.5) / max(games, 1),
    )


def get_team_season_stats(
    team_id: int,
    season: int,
    ttl_seconds: int | None = None,
) -> TeamSeasonStats | None:
    """
    Stats de temporada del equipo agregadas desde sus partidos FINISHED.
    Cachea por team_id + season con TTL. Si la API falla, usa cache viejo si existe; si no, None.
    """
    ttl = settings.team_stats_ttl_seconds if ttl_seconds is None else ttl_seconds
    key = _stats_cache_key(team_id, season)
    cached = read_json(key)

    cached_stats: dict | None = None
    if isinstance(cached, dict) and isinstance(cached.get("stats"), dict):
        cached_stats = cached["stats"]
        meta = cached.get("meta") if isinstance(cached.get("meta"), dict) else {}
        if is_fresh(meta.get("fetched_at"), ttl):
            return TeamSeasonStats.from_dict(cached_stats)

    try:
        data = _get(f"/teams/{team_id}/matches", params={"season": season, "status": "FINISHED"})
    except (RuntimeError, requests.RequestException) as e:
        logger.warning("No pude traer stats del equipo %s (%s): %s", team_id, season, e)
        if cached_stats:
            return TeamSeasonStats.from_dict(cached_stats)
        return None

    stats = aggregate_team_stats(team_id, data.get("matches", []) or [])
    write_json(
        key,
        {
            "meta": {
                "team_id": team_id,
                "season": season,
                "fetched_at": datetime.now(timezone.utc).isoformat(),
                "ttl_seconds": ttl,
            },
            "stats": stats.to_dict(),
        },
    )
    return stats
