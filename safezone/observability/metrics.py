"""
Metrics definitions for safezone.

This module defines Prometheus metrics for monitoring
the refresh and assessment pipeline.
"""

from prometheus_client import Counter, Histogram, Gauge

# 카운터 메트릭
refresh_requests = Counter(
    "refresh_requests_total",
    "Number of refresh requests issued",
    ["origin"]
)

refresh_outcomes = Counter(
    "refresh_outcomes_total",
    "Number of refresh requests by terminal outcome",
    ["outcome"]
)

assessments = Counter(
    "assessments_total",
    "Number of safety assessments produced",
    ["severity"]
)

escape_actions_opened = Counter(
    "escape_actions_opened_total",
    "Number of escape routes opened"
)

external_call_errors = Counter(
    "external_call_errors_total",
    "External service call failures",
    ["service"]
)

# 히스토그램 메트릭
external_call_seconds = Histogram(
    "external_call_duration_seconds",
    "Latency of external service calls",
    ["service"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 15.0]
)

assess_seconds = Histogram(
    "assess_duration_seconds",
    "Time spent building a safety assessment",
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1]
)

# 게이지 메트릭
current_severity = Gauge(
    "current_severity_rank",
    "Rank of the currently displayed dominant severity (0 = safe)"
)

uptime_seconds = Gauge(
    "uptime_seconds",
    "Service uptime in seconds"
)
