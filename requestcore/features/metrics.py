"""
Prometheus metrics for request parsing and session creation.

Metric objects live in the default prometheus_client registry so an
embedding server can expose them with its existing /metrics endpoint.
"""

"""
Copyright 2025 Chris Bunting
File: metrics.py | Purpose: Parser metrics
@author Chris Bunting | @version 1.0.0

CHANGELOG:
2026-10-18 - Chris Bunting: Initial implementation
"""

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

REQUESTS_PARSED = Counter(
    "requestcore_requests_parsed_total", "Requests parsed successfully", ["method"]
)
PARSE_ERRORS = Counter(
    "requestcore_parse_errors_total", "Requests rejected by the parser", ["error"]
)
SESSIONS_CREATED = Counter(
    "requestcore_sessions_created_total", "Sessions created for cookie-less requests"
)
PARSE_LATENCY = Histogram(
    "requestcore_parse_duration_seconds", "Time spent parsing a request"
)


def record_parsed(method: str, duration: float) -> None:
    REQUESTS_PARSED.labels(method=method).inc()
    PARSE_LATENCY.observe(duration)


def record_error(error: Exception) -> None:
    PARSE_ERRORS.labels(error=type(error).__name__).inc()


def record_session_created() -> None:
    SESSIONS_CREATED.inc()


def render_latest():
    """Return (body, content_type) for a metrics endpoint."""
    return generate_latest(), CONTENT_TYPE_LATEST
