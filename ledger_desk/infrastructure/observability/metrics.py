"""Prometheus metrics for ledger queries and invoice rendering"""

from prometheus_client import Counter, Histogram

# Ledger metrics
ledger_summary_counter = Counter(
    "ledger_desk_ledger_summary_total",
    "Ledger summaries served",
    ["window"],  # current_month | month | yearly | search
)

ledger_fetch_failures_counter = Counter(
    "ledger_fetch_failures_total",
    "Failed ledger store reads",
)

# Invoice metrics
invoice_render_counter = Counter(
    "ledger_desk_invoice_render_total",
    "Invoice documents rendered",
    ["kind", "outcome"],  # standard | weekly_aggregate, success | failure
)

invoice_render_latency_histogram = Histogram(
    "invoice_render_seconds",
    "Invoice PDF render time",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

invoice_size_histogram = Histogram(
    "invoice_size_bytes",
    "Rendered invoice PDF size",
    buckets=[2_000, 5_000, 10_000, 25_000, 50_000, 100_000],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_invoice_render(kind: str, success: bool, size_bytes: int = 0) -> None:
    """Record render outcome; size is only observed for successful renders"""
    outcome = "success" if success else "failure"
    invoice_render_counter.labels(kind=kind, outcome=outcome).inc()
    if success:
        invoice_size_histogram.observe(size_bytes)
