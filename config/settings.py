"""
Configuración centralizada cargada desde variables de entorno.
Para producción: definir env vars o usar .env (python-dotenv).
"""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Raíz del proyecto (donde está core/, app/, config/)
BASE_DIR: Path = Path(__file__).resolve().parents[1]

# Cache de datos (JSON: stats de equipos por temporada)
CACHE_DIR: Path = Path(os.getenv("PICK5_CACHE_DIR") or str(BASE_DIR / "data" / "cache"))

# Base de datos SQLite
DB_PATH: str = os.getenv("PICK5_DB_PATH") or os.getenv("DB_PATH") or str(BASE_DIR / "pick5.db")

# API Football-Data.org
FOOTBALL_DATA_API_KEY: str = (os.getenv("FOOTBALL_DATA_API_KEY") or "").strip()

# Ligas soportadas (código -> nombre)
LEAGUES: dict[str, str] = {
    "PL": "Premier League",
    "BL1": "Bundesliga",
    "SA": "Serie A",
    "PD": "LaLiga",
    "FL1": "Ligue 1",
    "PPL": "Primeira Liga",
    "DED": "Eredivisie",
}

# ✅ Pesos del blend (constantes fijas, no se ajustan con históricos)
WEIGHT_ODDS: float = float(os.getenv("PICK5_WEIGHT_ODDS", "0.40"))
WEIGHT_STATS: float = float(os.getenv("PICK5_WEIGHT_STATS", "0.35"))
WEIGHT_FORM: float = float(os.getenv("PICK5_WEIGHT_FORM", "0.15"))
HOME_ADVANTAGE: float = float(os.getenv("PICK5_HOME_ADVANTAGE", "0.05"))

# ✅ Umbrales de decisión
MIN_CONFIDENCE: float = float(os.getenv("PICK5_MIN_CONFIDENCE", "0.75"))
BET_MIN_CONFIDENCE: float = float(os.getenv("PICK5_BET_MIN_CONFIDENCE", "0.80"))
BET_MIN_ODD: float = float(os.getenv("PICK5_BET_MIN_ODD", "2.0"))
TOP_K: int = int(os.getenv("PICK5_TOP_K", "5"))

# Ventanas del pipeline diario
SYNC_DAYS_AHEAD: int = int(os.getenv("PICK5_SYNC_DAYS_AHEAD", "7"))
ANALYSIS_DAYS_AHEAD: int = int(os.getenv("PICK5_ANALYSIS_DAYS_AHEAD", "3"))
FINISHED_DAYS_BACK: int = int(os.getenv("PICK5_FINISHED_DAYS_BACK", "5"))

# Para no reventar rate limits: máximo de equipos a los que se les refrescan stats por corrida
STATS_SYNC_LIMIT: int = int(os.getenv("PICK5_STATS_SYNC_LIMIT", "10"))
TEAM_STATS_TTL_SECONDS: int = int(os.getenv("PICK5_TEAM_STATS_TTL", str(12 * 60 * 60)))

# App
DEBUG: bool = os.getenv("PICK5_DEBUG", "").lower() in ("1", "true", "yes")
LOG_LEVEL: str = os.getenv("PICK5_LOG_LEVEL", "INFO")


class Settings:
    """Objeto de configuración accesible en toda la app."""

    def __init__(self) -> None:
        self.cache_dir = CACHE_DIR
        self.db_path = DB_PATH
        self.football_data_api_key = FOOTBALL_DATA_API_KEY

        self.leagues = LEAGUES

        self.weight_odds = WEIGHT_ODDS
        self.weight_stats = WEIGHT_STATS
        self.weight_form = WEIGHT_FORM
        self.home_advantage = HOME_ADVANTAGE

        self.min_confidence = MIN_CONFIDENCE
        self.bet_min_confidence = BET_MIN_CONFIDENCE
        self.bet_min_odd = BET_MIN_ODD
        self.top_k = TOP_K

        self.sync_days_ahead = SYNC_DAYS_AHEAD
        self.analysis_days_ahead = ANALYSIS_DAYS_AHEAD
        self.finished_days_back = FINISHED_DAYS_BACK
        self.stats_sync_limit = STATS_SYNC_LIMIT
        self.team_stats_ttl_seconds = TEAM_STATS_TTL_SECONDS

        self.debug = DEBUG
        self.log_level = LOG_LEVEL

    def league_codes(self) -> list[str]:
        return list(self.leagues.keys())

    def is_valid_league(self, code: str) -> bool:
        return code in self.leagues


settings = Settings()
