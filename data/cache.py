"""
Acceso a cache JSON en data/cache (stats de equipos por temporada, etc.).
Usa config.settings para la ruta.
"""
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any


# Import tardío para evitar ciclos; se resuelve en runtime
def _get_dir():
    from config.settings import settings
    return settings.cache_dir


def read_json(filename: str) -> list[Any] | dict[str, Any]:
    """Lee desde data/cache. Si no existe, devuelve []."""
    path = _get_dir() / filename
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    return []


def write_json(filename: str, data: Any) -> None:
    """Guarda siempre en data/cache."""
    cache_dir = _get_dir()
    cache_dir.mkdir(parents=True, exist_ok=True)
    path = cache_dir / filename
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def is_fresh(fetched_at_iso: str | None, ttl_seconds: int) -> bool:
    """True si fetched_at (ISO, soporta 'Z') está dentro del TTL."""
    if not fetched_at_iso:
        return False
    try:
        s = fetched_at_iso
        if s.endswith("Z"):
            s = s.replace("Z", "+00:00")
        fetched_at = datetime.fromisoformat(s)
        if fetched_at.tzinfo is None:
            fetched_at = fetched_at.replace(tzinfo=timezone.utc)
        return (datetime.now(timezone.utc) - fetched_at).total_seconds() <= ttl_seconds
    except ValueError:
        return False
