#!/usr/bin/env python3
import os
from dataclasses import dataclass, field


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


@dataclass(frozen=True)
class EngineConfig:
    """Perillas de ajuste del motor de compatibilidad.

    Todas las puntuaciones finales viven en la escala [0, 100].
    """

    # búsqueda por filtros: skill_weight + recency_max == 100
    skill_weight: float = field(default_factory=lambda: _env_float("MATCH_SKILL_WEIGHT", 70.0))
    recency_max: float = field(default_factory=lambda: _env_float("MATCH_RECENCY_MAX", 30.0))
    recency_window_days: int = field(default_factory=lambda: _env_int("MATCH_RECENCY_WINDOW_DAYS", 30))
    recent_threshold: float = field(default_factory=lambda: _env_float("MATCH_RECENT_THRESHOLD", 10.0))
    # recomendación: bono en unidades de ratio de skills (máximo natural 1 + bono)
    location_bonus: float = field(default_factory=lambda: _env_float("MATCH_LOCATION_BONUS", 0.2))
    recommend_min_score: float = field(default_factory=lambda: _env_float("MATCH_RECOMMEND_MIN_SCORE", 40.0))
    low_confidence_score: float = field(default_factory=lambda: _env_float("MATCH_LOW_CONFIDENCE", 0.5))
    candidate_window: int = field(default_factory=lambda: _env_int("MATCH_CANDIDATE_WINDOW", 200))
    page_size: int = field(default_factory=lambda: _env_int("MATCH_PAGE_SIZE", 50))
    top_n: int = field(default_factory=lambda: _env_int("MATCH_TOP_N", 5))
    min_query_length: int = 2
    cache_ttl_seconds: int = field(default_factory=lambda: _env_int("MATCH_CACHE_TTL_SECONDS", 30))
    debounce_ms: int = field(default_factory=lambda: _env_int("MATCH_DEBOUNCE_MS", 300))
