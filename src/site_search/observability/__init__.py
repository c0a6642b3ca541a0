"""Observability module for OpenTelemetry-aligned tracing, metrics, and logging."""

from site_search.observability.context import get_trace_context, set_trace_context, trace_context
from site_search.observability.logging import JsonFormatter, configure_logging
from site_search.observability.metrics import (
    INDEX_BUILD_ERRORS,
    INDEX_DOC_COUNT,
    SEARCH_LATENCY,
    SEARCH_REQUESTS,
    SEARCH_RESULTS,
    get_metrics,
    get_metrics_content_type,
    track_latency,
)
from site_search.observability.tracing import (
    TraceContextMiddleware,
    configure_trace_exporter,
    create_span,
    init_tracing,
)


__all__ = [
    "INDEX_BUILD_ERRORS",
    "INDEX_DOC_COUNT",
    "SEARCH_LATENCY",
    "SEARCH_REQUESTS",
    "SEARCH_RESULTS",
    "JsonFormatter",
    "TraceContextMiddleware",
    "configure_logging",
    "configure_trace_exporter",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "init_tracing",
    "set_trace_context",
    "trace_context",
    "track_latency",
]
