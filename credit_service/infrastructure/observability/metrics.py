"""Prometheus metrics for credit creation, balance operations, inquiries and upstream health"""

from prometheus_client import Counter, Histogram

# Credit lifecycle metrics
credit_created_counter = Counter(
    "credit_created_total",
    "Credits created",
    ["credit_type"],
)

balance_operation_counter = Counter(
    "credit_balance_operation_total",
    "Balance operations applied to credits",
    ["operation", "outcome"],  # payment | consumption | third_party_payment ; ok | rejected | conflict
)

# Inquiry metrics
inquiry_counter = Counter(
    "credit_inquiry_total",
    "Balance sufficiency inquiries answered",
    ["outcome"],  # valid | invalid
)

publish_latency_histogram = Histogram(
    "inquiry_publish_latency_seconds",
    "Inquiry response publish time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

publish_failure_counter = Counter(
    "inquiry_publish_failures_total",
    "Failed inquiry response deliveries",
)

# Collaborator metrics
upstream_failure_counter = Counter(
    "upstream_failures_total",
    "Failed collaborator calls",
    ["service"],  # customer | account | transaction
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_balance_operation(operation: str, outcome: str) -> None:
    balance_operation_counter.labels(operation=operation, outcome=outcome).inc()


def record_inquiry(is_valid: bool) -> None:
    inquiry_counter.labels(outcome="valid" if is_valid else "invalid").inc()
