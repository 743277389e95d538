#!/usr/bin/env python3
from prometheus_client import Counter, Histogram

# Métricas básicas para observabilidad
MCP_REQUESTS_TOTAL = Counter(
    "mcp_requests_total",
    "Total de solicitudes MCP",
    labelnames=["tool"],
)

MCP_ERRORS_TOTAL = Counter(
    "mcp_errors_total",
    "Total de errores MCP",
    labelnames=["tool"],
)

MCP_TOOL_DURATION_MS = Histogram(
    "mcp_tool_duration_ms",
    "Duración de cada herramienta MCP en milisegundos",
    labelnames=["tool"],
    buckets=[5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000],
)

RANKING_QUERIES_TOTAL = Counter(
    "ranking_queries_total",
    "Consultas de ranking ejecutadas",
    labelnames=["mode"],
)

RANKING_FETCH_FAILURES_TOTAL = Counter(
    "ranking_fetch_failures_total",
    "Fallos del almacén al obtener candidatos",
)

RANKING_CACHE_HITS_TOTAL = Counter(
    "ranking_cache_hits_total",
    "Ventanas de candidatos servidas desde caché",
)

RANKING_DURATION_MS = Histogram(
    "ranking_duration_ms",
    "Duración de fetch + puntuación + orden en milisegundos",
    labelnames=["mode"],
    buckets=[1, 5, 10, 25, 50, 100, 250, 500, 1000, 2500],
)
