#!/usr/bin/env python3
"""
Ejecutor de consultas: pide candidatos al almacén, puntúa, ordena y pagina.

Orden fijo del pipeline: filtro -> puntuación -> umbral -> orden -> truncado.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Protocol

from compatibility_composer import CompatibilityComposer, MatchSignals, ScoringMode
from engine_config import EngineConfig
from exceptions import FetchFailed
from lexical_similarity import LexicalSimilarityEngine
from metrics import (
    RANKING_CACHE_HITS_TOTAL,
    RANKING_DURATION_MS,
    RANKING_FETCH_FAILURES_TOTAL,
    RANKING_QUERIES_TOTAL,
)
from models import OpportunityPosting, RankedResult, SearchFilter, VolunteerProfile
from opportunity_store import SearchPredicates
from recency_location import location_boost, recency_score
from skill_matcher import matches_any, overlap_count, selected_skill_score, skill_score
from text_normalizer import tokenize

logger = logging.getLogger(__name__)


class OpportunityStore(Protocol):
    async def fetch_active_opportunities(self, predicates: SearchPredicates, limit: int) -> List[OpportunityPosting]:
        ...


class QueryState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    SCORING = "scoring"
    SORTED = "sorted"
    DONE = "done"
    FAILED = "failed"


@dataclass
class RankingQuery:
    mode: ScoringMode
    key: str
    state: QueryState = QueryState.IDLE
    results: List[RankedResult] = field(default_factory=list)
    candidates: int = 0
    error: Optional[str] = None

    def transition(self, state: QueryState) -> None:
        logger.debug(f"query {self.mode.value} {self.state.value} -> {state.value}")
        self.state = state


def sort_results(results: Iterable[RankedResult]) -> List[RankedResult]:
    # score desc, luego más reciente, luego id para que sea determinista
    return sorted(
        results,
        key=lambda r: (-r.score.value, -r.posting.created_at.timestamp(), r.posting.id),
    )


def _unique_active(postings: Iterable[OpportunityPosting]) -> List[OpportunityPosting]:
    seen = set()
    unique: List[OpportunityPosting] = []
    for p in postings:
        if not p.active or p.id in seen:
            continue
        seen.add(p.id)
        unique.append(p)
    return unique


class OpportunityRanker:
    def __init__(
        self,
        store: OpportunityStore,
        config: Optional[EngineConfig] = None,
        cache: Optional[Any] = None,
    ):
        self.store = store
        self.config = config or EngineConfig()
        self.cache = cache
        self.composer = CompatibilityComposer(self.config)
        self.lexical = LexicalSimilarityEngine(self.config.low_confidence_score)

    # -------- búsqueda por filtros --------
    def predicates_for(self, search_filter: SearchFilter) -> SearchPredicates:
        text = search_filter.query.strip()
        return SearchPredicates(
            min_hours=search_filter.min_hours,
            max_hours=search_filter.max_hours,
            locations=search_filter.locations,
            text=text if len(text) >= self.config.min_query_length else None,
        )

    async def execute_search(
        self,
        search_filter: SearchFilter,
        now: Optional[datetime] = None,
        page_size: Optional[int] = None,
    ) -> RankingQuery:
        query = RankingQuery(mode=ScoringMode.SEARCH, key=search_filter.cache_key())
        started = time.perf_counter()
        candidates = await self._fetch(query, self.predicates_for(search_filter))
        query.transition(QueryState.SCORING)
        scored = self.score_for_search(search_filter, candidates, now or datetime.now(timezone.utc))
        self._finish(query, scored, self.config.page_size if page_size is None else page_size, started)
        return query

    async def search(self, search_filter: SearchFilter, now: Optional[datetime] = None, page_size: Optional[int] = None) -> List[RankedResult]:
        return (await self.execute_search(search_filter, now=now, page_size=page_size)).results

    def score_for_search(self, search_filter: SearchFilter, postings: Iterable[OpportunityPosting], now: datetime) -> List[RankedResult]:
        selected = frozenset(search_filter.skills)
        results: List[RankedResult] = []
        for p in _unique_active(postings):
            # semántica OR: se excluye sólo si hay skills en el filtro y ninguna coincide
            if not matches_any(selected, p.skills_required):
                continue
            signals = MatchSignals(
                skill_score=selected_skill_score(selected, p.skills_required),
                overlap_count=overlap_count(selected, p.skills_required),
                recency_score=self._recency(p, now),
                location=p.location,
            )
            results.append(RankedResult(p, self.composer.compose(ScoringMode.SEARCH, signals)))
        return results

    # -------- recomendación por perfil --------
    async def execute_recommendation(
        self,
        profile: VolunteerProfile,
        mode: ScoringMode = ScoringMode.RECOMMEND,
        now: Optional[datetime] = None,
        top_n: Optional[int] = None,
    ) -> RankingQuery:
        if mode == ScoringMode.SEARCH:
            raise ValueError("las recomendaciones usan el modo recommend o lexical")
        query = RankingQuery(mode=mode, key=f"{mode.value}:{profile.text}:{sorted(profile.locations)}")
        started = time.perf_counter()
        candidates = await self._fetch(query, SearchPredicates())
        query.transition(QueryState.SCORING)
        scored = self.score_for_profile(profile, candidates, mode, now or datetime.now(timezone.utc))
        self._finish(query, scored, self.config.top_n if top_n is None else top_n, started)
        return query

    async def recommend(
        self,
        profile: VolunteerProfile,
        mode: ScoringMode = ScoringMode.RECOMMEND,
        now: Optional[datetime] = None,
        top_n: Optional[int] = None,
    ) -> List[RankedResult]:
        return (await self.execute_recommendation(profile, mode=mode, now=now, top_n=top_n)).results

    def score_for_profile(
        self,
        profile: VolunteerProfile,
        postings: Iterable[OpportunityPosting],
        mode: ScoringMode,
        now: datetime,
    ) -> List[RankedResult]:
        candidates = _unique_active(postings)
        if self._lacks_signal(profile, mode):
            # sin señal del voluntario: score constante, sin umbral
            return [RankedResult(p, self.composer.constant(self._profile_signals(profile, p, now))) for p in candidates]

        if mode == ScoringMode.LEXICAL:
            similarities = self.lexical.score_candidates(profile.text, [p.text for p in candidates])
            return [
                RankedResult(p, self.composer.compose(mode, self._profile_signals(profile, p, now, lexical=sim)))
                for p, sim in zip(candidates, similarities)
            ]

        results: List[RankedResult] = []
        for p in candidates:
            signals = self._profile_signals(profile, p, now)
            # umbral sobre la mezcla cruda (solapamiento + bonus), antes de reescalar
            if signals.skill_score + signals.location_boost < self.config.recommend_min_score / 100.0:
                continue
            results.append(RankedResult(p, self.composer.compose(mode, signals)))
        return results

    def _lacks_signal(self, profile: VolunteerProfile, mode: ScoringMode) -> bool:
        if mode == ScoringMode.LEXICAL:
            return not tokenize(profile.text)
        return not profile.skills

    def _profile_signals(
        self,
        profile: VolunteerProfile,
        posting: OpportunityPosting,
        now: datetime,
        lexical: Optional[float] = None,
    ) -> MatchSignals:
        return MatchSignals(
            skill_score=skill_score(profile.skills, posting.skills_required),
            overlap_count=overlap_count(profile.skills, posting.skills_required),
            lexical_score=lexical,
            recency_score=self._recency(posting, now),
            location_boost=location_boost(posting.location, profile.locations, self.config.location_bonus),
            location=posting.location,
        )

    # -------- comunes --------
    def _recency(self, posting: OpportunityPosting, now: datetime) -> float:
        return recency_score(posting.created_at, now, self.config.recency_window_days, self.config.recency_max)

    async def _fetch(self, query: RankingQuery, predicates: SearchPredicates) -> List[OpportunityPosting]:
        query.transition(QueryState.FETCHING)
        RANKING_QUERIES_TOTAL.labels(mode=query.mode.value).inc()
        limit = self.config.candidate_window
        cache_key = f"candidates:{limit}:{predicates.cache_key()}"
        if self.cache is not None:
            cached = self.cache.get_fresh(cache_key)
            if cached is not None:
                RANKING_CACHE_HITS_TOTAL.inc()
                candidates = [OpportunityPosting.from_dict(item) for item in cached]
                query.candidates = len(candidates)
                return candidates
        try:
            candidates = list(await self.store.fetch_active_opportunities(predicates, limit))
        except Exception as e:
            query.error = str(e)
            query.transition(QueryState.FAILED)
            RANKING_FETCH_FAILURES_TOTAL.inc()
            logger.error(f"Error obteniendo candidatos: {e}")
            raise FetchFailed(f"no se pudieron obtener vacantes: {e}", predicates.cache_key()) from e
        if self.cache is not None:
            self.cache.set_swr(cache_key, [p.to_dict() for p in candidates], ttl_seconds=self.config.cache_ttl_seconds, swr_seconds=0)
        query.candidates = len(candidates)
        return candidates

    def _finish(self, query: RankingQuery, scored: List[RankedResult], limit: int, started: float) -> None:
        ranked = sort_results(scored)
        query.transition(QueryState.SORTED)
        # truncar siempre después de ordenar la ventana completa
        query.results = ranked[: max(0, limit)]
        query.transition(QueryState.DONE)
        RANKING_DURATION_MS.labels(mode=query.mode.value).observe((time.perf_counter() - started) * 1000.0)
        logger.info(f"ranking {query.mode.value}: {query.candidates} candidatos -> {len(query.results)} resultados")


def results_to_dicts(results: Iterable[RankedResult]) -> List[Dict[str, Any]]:
    return [r.to_dict() for r in results]
