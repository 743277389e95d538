#!/usr/bin/env python3
import asyncio
import logging
from datetime import datetime
from typing import List, Optional

from engine_config import EngineConfig
from models import RankedResult, SearchFilter
from opportunity_ranker import OpportunityRanker

logger = logging.getLogger(__name__)


class SearchSession:
    """Sesión de búsqueda de un usuario: debounce de ediciones y descarte de respuestas viejas.

    Cada resultado queda asociado a la clave del filtro que lo produjo; si al
    terminar la consulta el filtro vigente ya es otro, el resultado se descarta
    (no hay cancelación real de la consulta en curso).
    """

    def __init__(self, ranker: OpportunityRanker, debounce_ms: Optional[int] = None):
        self.ranker = ranker
        config: EngineConfig = ranker.config
        self.debounce_ms = config.debounce_ms if debounce_ms is None else debounce_ms
        self._generation = 0
        self._current_key: Optional[str] = None
        self.latest_results: List[RankedResult] = []
        self.latest_key: Optional[str] = None
        self.discarded = 0

    @property
    def current_key(self) -> Optional[str]:
        return self._current_key

    async def submit(self, search_filter: SearchFilter, now: Optional[datetime] = None) -> Optional[List[RankedResult]]:
        """Devuelve los resultados, o None si otro filtro llegó antes de terminar."""
        self._generation += 1
        generation = self._generation
        key = search_filter.cache_key()
        self._current_key = key

        if self.debounce_ms > 0:
            await asyncio.sleep(self.debounce_ms / 1000.0)
        if generation != self._generation:
            # otra edición llegó durante el debounce: no se consulta
            logger.debug("filtro reemplazado durante debounce")
            return None

        query = await self.ranker.execute_search(search_filter, now=now)
        if query.key != self._current_key or generation != self._generation:
            self.discarded += 1
            logger.debug(f"resultado obsoleto descartado ({len(query.results)} items)")
            return None

        self.latest_results = query.results
        self.latest_key = query.key
        return query.results
