#!/usr/bin/env python3
"""
Opportunity Matching MCP
Búsqueda y recomendación de vacantes de voluntariado con puntuación de compatibilidad
"""

import logging
import time
from dataclasses import asdict
from datetime import datetime
from typing import Dict, Any, List, Optional

from compatibility_composer import ScoringMode
from engine_config import EngineConfig
from metrics import MCP_REQUESTS_TOTAL, MCP_ERRORS_TOTAL, MCP_TOOL_DURATION_MS
from models import OpportunityPosting, SearchFilter, VolunteerProfile, parse_timestamp
from opportunity_ranker import OpportunityRanker, results_to_dicts
from opportunity_store import InMemoryOpportunityStore, SqlOpportunityStore
from redis_cache import redis_cache
from sample_data import build_sample_postings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _parse_mode(raw: Any, default: ScoringMode) -> ScoringMode:
    if not raw:
        return default
    try:
        return ScoringMode(str(raw).lower())
    except ValueError:
        raise ValueError(f"modo inválido: {raw} (use search, recommend o lexical)")


def _parse_now(params: Dict[str, Any]) -> Optional[datetime]:
    raw = params.get("now")
    return parse_timestamp(raw) if raw else None


def _parse_limit(raw: Any) -> Optional[int]:
    if raw is None:
        return None
    try:
        return max(0, int(raw))
    except (TypeError, ValueError):
        return None


class OpportunityMCPServer:
    def __init__(self, ranker: Optional[OpportunityRanker] = None, store: Optional[Any] = None):
        self.config = ranker.config if ranker else EngineConfig()
        self.store = store if store is not None else (ranker.store if ranker else SqlOpportunityStore())
        self.ranker = ranker or OpportunityRanker(self.store, self.config, cache=redis_cache)
        self.tools = {
            "opportunity.search": self._search,
            "opportunity.recommend": self._recommend,
            "opportunity.rank": self._rank,
            "opportunity.seed": self._seed,
        }
        self.stats = {
            "requests": 0,
            "errors": 0,
            "start_time": datetime.now().isoformat(),
            "tool_metrics": {}
        }

    def get_tools(self) -> List[str]:
        return list(self.tools.keys())

    async def handle_request(self, request: Dict[str, Any]) -> Dict[str, Any]:
        try:
            self.stats["requests"] += 1
            tool = request.get("tool", "")
            params = request.get("params") or {}

            if tool not in self.tools:
                return {"success": False, "error": f"Tool not found: {tool}", "available_tools": self.get_tools()}

            start = time.perf_counter()
            result = await self.tools[tool](params)
            duration_ms = (time.perf_counter() - start) * 1000.0

            # metrics
            MCP_REQUESTS_TOTAL.labels(tool=tool).inc()
            MCP_TOOL_DURATION_MS.labels(tool=tool).observe(duration_ms)

            tm = self.stats["tool_metrics"].setdefault(tool, {"calls": 0, "total_ms": 0.0, "avg_ms": 0.0, "last_ms": 0.0})
            tm["calls"] += 1
            tm["total_ms"] += duration_ms
            tm["last_ms"] = duration_ms
            tm["avg_ms"] = tm["total_ms"] / max(1, tm["calls"])

            return {
                "success": True,
                "result": result,
                "tool": tool,
                "duration_ms": round(duration_ms, 2),
                "timestamp": datetime.now().isoformat(),
            }
        except Exception as e:
            self.stats["errors"] += 1
            MCP_ERRORS_TOTAL.labels(tool=request.get("tool", "unknown")).inc()
            logger.error(f"Error: {e}")
            return {"success": False, "error": str(e), "error_type": type(e).__name__}

    async def _search(self, params: Dict[str, Any]) -> Dict[str, Any]:
        search_filter = SearchFilter.from_dict(params.get("filters", params))
        results = await self.ranker.search(
            search_filter,
            now=_parse_now(params),
            page_size=_parse_limit(params.get("page_size")),
        )
        return {"filters": asdict(search_filter), "results": results_to_dicts(results), "count": len(results)}

    async def _recommend(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Recomendaciones personalizadas a partir del perfil del voluntario"""
        profile = VolunteerProfile.from_dict(params.get("profile", {}))
        mode = _parse_mode(params.get("mode"), ScoringMode.RECOMMEND)
        results = await self.ranker.recommend(
            profile,
            mode=mode,
            now=_parse_now(params),
            top_n=_parse_limit(params.get("top_n")),
        )
        return {"mode": mode.value, "results": results_to_dicts(results), "count": len(results)}

    async def _rank(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Rankea una lista de vacantes provista por el cliente, sin pasar por el almacén"""
        postings = [OpportunityPosting.from_dict(p) for p in params.get("postings", [])]
        mode = _parse_mode(params.get("mode"), ScoringMode.SEARCH)
        ranker = OpportunityRanker(InMemoryOpportunityStore(postings), self.config)
        now = _parse_now(params)
        limit = _parse_limit(params.get("limit"))
        if mode == ScoringMode.SEARCH:
            results = await ranker.search(SearchFilter.from_dict(params.get("filters", {})), now=now, page_size=limit)
        else:
            profile = VolunteerProfile.from_dict(params.get("profile", {}))
            results = await ranker.recommend(profile, mode=mode, now=now, top_n=limit)
        return {"mode": mode.value, "results": results_to_dicts(results), "count": len(results)}

    async def _seed(self, params: Dict[str, Any]) -> Dict[str, Any]:
        postings = build_sample_postings(now=_parse_now(params))
        stored = self.store.save_postings(postings)
        return {"success": True, "stored": stored}


opportunity_mcp_server = OpportunityMCPServer()


if __name__ == "__main__":
    print("🚀 Opportunity Matching MCP")
    for t in opportunity_mcp_server.get_tools():
        print(" -", t)
