"""
Punto de entrada CLI para tareas de producción (sync, análisis diario, resultados).
Uso: python -m app.cli analyze
"""
from __future__ import annotations

import logging
import sys

from config.settings import settings
from services.daily import run_daily_analysis, settle_results, sync_football_data, system_stats

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def cmd_sync() -> int:
    n_matches, n_teams = sync_football_data()
    print(f"OK sync: {n_matches} partidos | {n_teams} equipos con stats")
    return 0


def cmd_analyze() -> int:
    top = run_daily_analysis()
    if not top:
        print("Sin predicciones de alta confianza hoy")
        return 0
    for i, p in enumerate(top, start=1):
        bet = p.recommended_bet.label() if p.recommended_bet else "-"
        print(f"{i}. match {p.match_id}: {p.type} ({p.confidence * 100:.1f}%) | bet {bet} | EV {p.expected_value:+.3f}")
    return 0


def cmd_settle() -> int:
    n = settle_results()
    print(f"OK settle: {n} predicciones evaluadas")
    return 0


def cmd_stats() -> int:
    s = system_stats()
    print(f"Partidos en DB: {s['matches']}")
    print(f"Equipos en DB: {s['teams']}")
    print(f"Predicciones en DB: {s['predictions']}")
    print(f"Accuracy: {s['accuracy']}% ({s['wins']}/{s['wins'] + s['losses']})")
    return 0


COMMANDS = {
    "sync": cmd_sync,
    "analyze": cmd_analyze,
    "settle": cmd_settle,
    "stats": cmd_stats,
}


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print("Uso: python -m app.cli <comando>")
        print("  sync     - Actualizar partidos y stats de equipos")
        print("  analyze  - Sync + predicciones + top 5 del día")
        print("  settle   - Evaluar predicciones de partidos terminados")
        print("  stats    - Resumen del sistema")
        return 1
    cmd = args[0].lower()
    handler = COMMANDS.get(cmd)
    if handler is None:
        print(f"Comando desconocido: {cmd}")
        return 1
    return handler()


if __name__ == "__main__":
    raise SystemExit(main())
