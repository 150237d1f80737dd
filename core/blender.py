"""
Blend ponderado de los tres estimadores + ventaja de local.
"""
from __future__ import annotations

from core.models import BlendConfig, ProbabilityTriple

DEFAULT_CONFIG = BlendConfig()


def blend(
    odds: ProbabilityTriple,
    stats: ProbabilityTriple,
    form: ProbabilityTriple,
    config: BlendConfig | None = None,
) -> ProbabilityTriple:
    """
    p1 lleva la ventaja de local en numerador y denominador; p2 no.
    px se deriva como complemento, así que p1 + px + p2 == 1 por construcción.
    """
    cfg = config or DEFAULT_CONFIG

    p1 = (
        odds.p1 * cfg.w_odds
        + stats.p1 * cfg.w_stats
        + form.p1 * cfg.w_form
        + cfg.home_adv
    ) / (cfg.w_odds + cfg.w_stats + cfg.w_form + cfg.home_adv)

    p2 = (
        odds.p2 * cfg.w_odds
        + stats.p2 * cfg.w_stats
        + form.p2 * cfg.w_form
    ) / (cfg.w_odds + cfg.w_stats + cfg.w_form)

    px = 1 - p1 - p2

    return ProbabilityTriple(p1=p1, px=px, p2=p2)
