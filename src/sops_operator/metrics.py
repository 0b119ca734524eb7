"""Prometheus metrics for the SOPS Operator."""

from prometheus_client import Counter, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "sops_operator_reconcile_total",
    "Total number of reconciliations",
    ["kind", "result"],
)

reconcile_duration_seconds = Histogram(
    "sops_operator_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    ["kind"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
)

error_total = Counter(
    "sops_operator_error_total",
    "Total number of reconciliation errors",
    ["kind", "error_type"],
)

# Secret apply metrics
secret_operations_total = Counter(
    "sops_operator_secret_operations_total",
    "Total number of managed Secret apply results",
    ["result"],
)

# Decryption metrics
decrypt_total = Counter(
    "sops_operator_decrypt_total",
    "Total number of sops decryptions",
    ["result"],
)

# Retry scheduling
requeue_delay_seconds = Histogram(
    "sops_operator_requeue_delay_seconds",
    "Requested delay before the next reconciliation attempt",
    buckets=[1, 2, 4, 8, 16, 60, 300, 1800, 3600, 21600],
)

status_update_failures_total = Counter(
    "sops_operator_status_update_failures_total",
    "Total number of failed status writes",
)

# API call metrics
api_call_total = Counter(
    "sops_operator_api_call_total",
    "Total number of API calls",
    ["api_type", "operation", "result"],
)

api_call_duration_seconds = Histogram(
    "sops_operator_api_call_duration_seconds",
    "Duration of API calls in seconds",
    ["api_type", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)
