"""Prometheus metrics for auditchain.

Tracks append throughput and latency, and the outcome of chain
verification runs.
"""

from prometheus_client import Counter, Gauge, Histogram

APPENDS = Counter(
    "auditchain_appends_total",
    "Total number of audit appends attempted",
    labelnames=["kind", "status"],
)

APPEND_LATENCY = Histogram(
    "auditchain_append_latency_seconds",
    "Time spent appending a record, including waiting for the writer lock",
    labelnames=["kind"],
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

VERIFICATIONS = Counter(
    "auditchain_verifications_total",
    "Total number of chain verification runs",
    labelnames=["result"],
)

VERIFICATION_ISSUES = Gauge(
    "auditchain_verification_issues",
    "Number of issues found by the most recent verification",
)

CHAIN_LENGTH = Gauge(
    "auditchain_chain_length",
    "Number of records seen by the most recent verification",
)
