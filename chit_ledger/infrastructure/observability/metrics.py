"""Prometheus metrics for payment classifications, cycle generation and store health"""

from prometheus_client import Counter, Histogram

# Payment metrics
payment_classification_counter = Counter(
    "chit_payment_classification_total",
    "Payment previews by advisory kind",
    ["kind"],  # success | info | warning | error
)

payment_advance_cycles_histogram = Histogram(
    "chit_payment_advance_cycles",
    "Additional whole cycles covered by advance payments",
    buckets=[0, 1, 2, 3, 6, 12, 24],
)

# Cycle schedule metrics
cycles_generated_counter = Counter(
    "chit_cycles_generated_total",
    "Cycles generated for new funds",
    ["interval_type"],
)

cycle_config_rejected_counter = Counter(
    "chit_cycle_config_rejected_total",
    "Cycle configurations rejected by validation",
)

# Store metrics
store_failures_counter = Counter(
    "chit_store_failures_total",
    "Failed reads/writes against the fund store",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_payment_preview(kind: str, cycles_covered: int) -> None:
    """Record classification outcome and advance depth for a payment preview"""
    payment_classification_counter.labels(kind=kind).inc()

    if cycles_covered > 0:
        payment_advance_cycles_histogram.observe(cycles_covered)


def record_cycles_generated(interval_type: str, cycle_count: int) -> None:
    """Record cycles materialized for a fund"""
    cycles_generated_counter.labels(interval_type=interval_type).inc(cycle_count)
