#!/usr/bin/env python3
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from engine_config import EngineConfig
from models import CompatibilityScore
from recency_location import round_half_up

MAX_SCORE = 100.0
NO_MATCH_EXPLANATION = "No matches found"


class ScoringMode(str, Enum):
    # búsqueda por filtros: skills del filtro * 70 + recencia
    SEARCH = "search"
    # recomendación por perfil: ratio de skills de la vacante + bono de ubicación
    RECOMMEND = "recommend"
    # recomendación por texto libre: coseno TF-IDF + bono de ubicación
    LEXICAL = "lexical"


@dataclass(frozen=True)
class MatchSignals:
    skill_score: float = 0.0
    overlap_count: int = 0
    lexical_score: Optional[float] = None
    recency_score: float = 0.0
    location_boost: float = 0.0
    location: Optional[str] = None


class CompatibilityComposer:
    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def compose(self, mode: ScoringMode, signals: MatchSignals) -> CompatibilityScore:
        if mode == ScoringMode.SEARCH:
            value = self._search_value(signals)
        elif mode == ScoringMode.RECOMMEND:
            value = self._recommendation_value(signals.skill_score, signals.location_boost)
        elif mode == ScoringMode.LEXICAL:
            value = self._recommendation_value(signals.lexical_score or 0.0, signals.location_boost)
        else:
            raise ValueError(f"modo de puntuación desconocido: {mode!r}")
        return CompatibilityScore(value=value, explanation=tuple(self.explain(signals)))

    def constant(self, signals: MatchSignals) -> CompatibilityScore:
        """Score de baja confianza para voluntarios sin bio ni skills."""
        value = round(self._clamp(self.config.low_confidence_score * MAX_SCORE), 2)
        return CompatibilityScore(value=value, explanation=tuple(self.explain(signals)))

    def _search_value(self, signals: MatchSignals) -> float:
        raw = signals.skill_score * self.config.skill_weight + signals.recency_score
        return float(round_half_up(self._clamp(raw)))

    def _recommendation_value(self, base: float, boost: float) -> float:
        # lleva el máximo natural (1 + bono) a la escala [0, 100]
        natural_max = 1.0 + self.config.location_bonus
        if natural_max <= 0:
            return 0.0
        return round(self._clamp((base + boost) / natural_max * MAX_SCORE), 2)

    @staticmethod
    def _clamp(value: float) -> float:
        return max(0.0, min(MAX_SCORE, value))

    def explain(self, signals: MatchSignals) -> List[str]:
        parts: List[str] = []
        if signals.overlap_count > 0:
            parts.append(f"{signals.overlap_count} skill(s) in common")
        if signals.lexical_score:
            parts.append("Similar profile text")
        if signals.recency_score > self.config.recent_threshold:
            parts.append("Recent posting")
        if signals.location:
            parts.append(signals.location)
        return parts or [NO_MATCH_EXPLANATION]
