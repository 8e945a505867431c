"""Prometheus metrics for monitoring balance aggregation and data source health"""

from prometheus_client import Counter, Histogram

# Aggregation metrics
balance_aggregation_counter = Counter(
    "balance_aggregation_total",
    "Total balance aggregation calls",
    ["outcome"],  # success | empty | failed | timeout
)

accounts_per_aggregation_histogram = Histogram(
    "balance_aggregation_accounts",
    "Accounts listed on the customer per aggregation",
    buckets=[0, 1, 2, 3, 5, 8, 13, 21],
)

# Data source metrics
bucket_fetch_latency_histogram = Histogram(
    "bucket_fetch_latency_seconds",
    "Transaction bucket retrieval time per account",
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

bucket_fetch_failures_counter = Counter(
    "bucket_fetch_failures_total",
    "Failed transaction bucket retrievals",
)

malformed_transactions_counter = Counter(
    "malformed_transactions_total",
    "Transactions missing an amount or transaction code",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_aggregation(outcome: str, account_count: int) -> None:
    """Record the outcome of a balance aggregation call"""
    balance_aggregation_counter.labels(outcome=outcome).inc()
    accounts_per_aggregation_histogram.observe(account_count)
