import json
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from config.settings import settings
from core.models import BookmakerOdds, Prediction, TeamSeasonStats

DB_PATH = settings.db_path

UPCOMING_STATUSES = ("SCHEDULED", "TIMED")


@contextmanager
def get_conn():
    conn = sqlite3.connect(DB_PATH, timeout=30, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def init_db():
    with get_conn() as conn:
        conn.execute("""
        CREATE TABLE IF NOT EXISTS matches (
            match_id INTEGER PRIMARY KEY,
            league TEXT,
            utcDate TEXT,
            status TEXT,
            home TEXT,
            away TEXT,
            home_team_id INTEGER,
            away_team_id INTEGER,
            home_goals INTEGER,
            away_goals INTEGER,
            last_updated TEXT
        );
        """)

        conn.execute("""
        CREATE TABLE IF NOT EXISTS team_stats (
            team_id INTEGER NOT NULL,
            season INTEGER NOT NULL,
            games_played INTEGER,
            wins INTEGER,
            draws INTEGER,
            losses INTEGER,
            goals_for INTEGER,
            goals_against INTEGER,
            possession_avg REAL,
            shots_per_game REAL,
            updated_at TEXT,
            PRIMARY KEY (team_id, season)
        );
        """)

        conn.execute("""
        CREATE TABLE IF NOT EXISTS predictions (
            match_id INTEGER PRIMARY KEY,
            created_at TEXT NOT NULL,
            prediction_type TEXT,
            confidence REAL,
            probability_1 REAL,
            probability_x REAL,
            probability_2 REAL,
            recommended_bet TEXT,
            expected_value REAL,
            odds_1 REAL,
            odds_x REAL,
            odds_2 REAL,
            result TEXT,           -- WIN / LOSS / PUSH / PENDING
            result_reason TEXT     -- texto corto
        );
        """)

        conn.execute("""
        CREATE TABLE IF NOT EXISTS daily_batches (
            batch_date TEXT PRIMARY KEY,
            match_ids TEXT,
            predictions_count INTEGER,
            created_at TEXT
        );
        """)

        conn.execute("""
        CREATE INDEX IF NOT EXISTS idx_matches_status ON matches(status);
        """)

        conn.execute("""
        CREATE INDEX IF NOT EXISTS idx_matches_date ON matches(utcDate);
        """)


# -------------------------
# Matches
# -------------------------
def upsert_match(m: Dict[str, Any]):
    with get_conn() as conn:
        conn.execute("""
        INSERT INTO matches (
            match_id, league, utcDate, status, home, away,
            home_team_id, away_team_id, home_goals, away_goals, last_updated
        )
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(match_id) DO UPDATE SET
            league=excluded.league,
            utcDate=excluded.utcDate,
            status=excluded.status,
            home=excluded.home,
            away=excluded.away,
            home_team_id=excluded.home_team_id,
            away_team_id=excluded.away_team_id,
            home_goals=COALESCE(excluded.home_goals, matches.home_goals),
            away_goals=COALESCE(excluded.away_goals, matches.away_goals),
            last_updated=excluded.last_updated
        """, (
            m.get("match_id"), m.get("league"), m.get("utcDate"), m.get("status") or "SCHEDULED",
            m.get("home"), m.get("away"),
            m.get("home_team_id"), m.get("away_team_id"),
            m.get("home_goals"), m.get("away_goals"),
            _now_iso(),
        ))


def _parse_utc(s: Optional[str]) -> Optional[datetime]:
    if not s:
        return None
    try:
        if s.endswith("Z"):
            s = s.replace("Z", "+00:00")
        dt = datetime.fromisoformat(s)
        return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)
    except ValueError:
        return None


def get_upcoming_matches(days_ahead: int = 3, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Partidos programados con kickoff en [now, now + days_ahead], ordenados por fecha."""
    now = now or datetime.now(timezone.utc)
    end = now + timedelta(days=days_ahead)

    with get_conn() as conn:
        rows = conn.execute(
            f"""
            SELECT * FROM matches
            WHERE status IN ({",".join("?" for _ in UPCOMING_STATUSES)})
            ORDER BY utcDate ASC
            """,
            UPCOMING_STATUSES,
        ).fetchall()

    out = []
    for r in rows:
        kickoff = _parse_utc(r["utcDate"])
        if kickoff is not None and now <= kickoff <= end:
            out.append({k: r[k] for k in r.keys()})
    return out


# -------------------------
# Team stats
# -------------------------
def upsert_team_stats(team_id: int, season: int, stats: TeamSeasonStats):
    row = stats.to_dict()
    with get_conn() as conn:
        conn.execute("""
        INSERT INTO team_stats (
            team_id, season, games_played, wins, draws, losses,
            goals_for, goals_against, possession_avg, shots_per_game, updated_at
        )
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(team_id, season) DO UPDATE SET
            games_played=excluded.games_played,
            wins=excluded.wins,
            draws=excluded.draws,
            losses=excluded.losses,
            goals_for=excluded.goals_for,
            goals_against=excluded.goals_against,
            possession_avg=excluded.possession_avg,
            shots_per_game=excluded.shots_per_game,
            updated_at=excluded.updated_at
        """, (
            team_id, season,
            row["games_played"], row["wins"], row["draws"], row["losses"],
            row["goals_for"], row["goals_against"],
            row["possession_avg"], row["shots_per_game"],
            _now_iso(),
        ))


def get_team_stats(team_id: Optional[int], season: int) -> Optional[TeamSeasonStats]:
    if team_id is None:
        return None
    with get_conn() as conn:
        r = conn.execute(
            "SELECT * FROM team_stats WHERE team_id = ? AND season = ?",
            (team_id, season),
        ).fetchone()
    if r is None:
        return None
    return TeamSeasonStats.from_dict({k: r[k] for k in r.keys()})


def get_team_stats_updated_at(team_id: int, season: int) -> Optional[str]:
    with get_conn() as conn:
        r = conn.execute(
            "SELECT updated_at FROM team_stats WHERE team_id = ? AND season = ?",
            (team_id, season),
        ).fetchone()
    return r["updated_at"] if r else None


# -------------------------
# Predictions
# -------------------------
def save_prediction(prediction: Prediction, odds: BookmakerOdds):
    """Guarda (o pisa) la predicción del partido. El resultado arranca PENDING."""
    probs = prediction.probabilities
    bet = prediction.recommended_bet

    with get_conn() as conn:
        conn.execute("""
        INSERT INTO predictions (
            match_id, created_at, prediction_type, confidence,
            probability_1, probability_x, probability_2,
            recommended_bet, expected_value,
            odds_1, odds_x, odds_2,
            result, result_reason
        )
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 'PENDING', NULL)
        ON CONFLICT(match_id) DO UPDATE SET
            created_at=excluded.created_at,
            prediction_type=excluded.prediction_type,
            confidence=excluded.confidence,
            probability_1=excluded.probability_1,
            probability_x=excluded.probability_x,
            probability_2=excluded.probability_2,
            recommended_bet=excluded.recommended_bet,
            expected_value=excluded.expected_value,
            odds_1=excluded.odds_1,
            odds_x=excluded.odds_x,
            odds_2=excluded.odds_2
        """, (
            prediction.match_id, _now_iso(), prediction.type, prediction.confidence,
            probs.p1, probs.px, probs.p2,
            bet.label() if bet else None, prediction.expected_value,
            odds.o1, odds.ox, odds.o2,
        ))


def save_daily_batch(batch_date: str, match_ids: List[int]):
    with get_conn() as conn:
        conn.execute("""
        INSERT INTO daily_batches (batch_date, match_ids, predictions_count, created_at)
        VALUES (?, ?, ?, ?)
        ON CONFLICT(batch_date) DO UPDATE SET
            match_ids=excluded.match_ids,
            predictions_count=excluded.predictions_count,
            created_at=excluded.created_at
        """, (batch_date, json.dumps(match_ids), len(match_ids), _now_iso()))


def get_daily_predictions(batch_date: str) -> Optional[Dict[str, Any]]:
    """
    Batch del día con sus predicciones (join con matches), por confianza desc.
    None si no hay batch para esa fecha.
    """
    with get_conn() as conn:
        batch = conn.execute(
            "SELECT * FROM daily_batches WHERE batch_date = ?", (batch_date,)
        ).fetchone()
        if batch is None:
            return None

        match_ids = json.loads(batch["match_ids"] or "[]")
        rows = []
        if match_ids:
            rows = conn.execute(
                f"""
                SELECT p.*, m.utcDate, m.league, m.home, m.away
                FROM predictions p
                LEFT JOIN matches m ON m.match_id = p.match_id
                WHERE p.match_id IN ({",".join("?" for _ in match_ids)})
                ORDER BY p.confidence DESC
                """,
                match_ids,
            ).fetchall()

    return {
        "batch_date": batch["batch_date"],
        "predictions_count": batch["predictions_count"],
        "match_ids": match_ids,
        "predictions": [{k: r[k] for k in r.keys()} for r in rows],
    }


def pending_predictions() -> List[Dict[str, Any]]:
    with get_conn() as conn:
        rows = conn.execute("""
        SELECT p.match_id, p.prediction_type, m.league
        FROM predictions p
        LEFT JOIN matches m ON m.match_id = p.match_id
        WHERE p.result = 'PENDING'
        """).fetchall()
    return [{k: r[k] for k in r.keys()} for r in rows]


def save_result(match_id: int, result: str, reason: str):
    with get_conn() as conn:
        conn.execute("""
        UPDATE predictions
        SET result = ?, result_reason = ?
        WHERE match_id = ?
        """, (result, reason, match_id))


# -------------------------
# Stats
# -------------------------
def accuracy_summary() -> Dict[str, Any]:
    with get_conn() as conn:
        rows = conn.execute("SELECT result FROM predictions").fetchall()

    wins = sum(1 for r in rows if (r["result"] or "") == "WIN")
    losses = sum(1 for r in rows if (r["result"] or "") == "LOSS")
    push = sum(1 for r in rows if (r["result"] or "") == "PUSH")
    pending = len(rows) - wins - losses - push
    decided = wins + losses

    return {
        "total_predictions": len(rows),
        "wins": wins,
        "losses": losses,
        "push": push,
        "pending": pending,
        "accuracy": round((wins / decided) * 100, 2) if decided else 0.0,
    }


def system_counts() -> Dict[str, int]:
    with get_conn() as conn:
        matches = conn.execute("SELECT COUNT(*) AS n FROM matches").fetchone()["n"]
        teams = conn.execute("SELECT COUNT(DISTINCT team_id) AS n FROM team_stats").fetchone()["n"]
        predictions = conn.execute("SELECT COUNT(*) AS n FROM predictions").fetchone()["n"]
    return {"matches": matches, "teams": teams, "predictions": predictions}


def get_last_updated() -> Optional[str]:
    with get_conn() as conn:
        r = conn.execute("SELECT MAX(last_updated) AS lu FROM matches").fetchone()
        return r["lu"] if r and r["lu"] else None
