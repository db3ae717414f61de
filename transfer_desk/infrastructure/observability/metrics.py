"""Prometheus metrics for sync health, transfer outcomes and session lifetime"""

from prometheus_client import Counter, Gauge, Histogram

# Sync metrics
sync_cycle_counter = Counter(
    "transfer_desk_sync_cycles_total",
    "Data sync cycles by outcome",
    ["outcome"],  # applied | failed | discarded
)

# Transfer metrics
transfer_submission_counter = Counter(
    "transfer_desk_transfer_submissions_total",
    "Transfer submissions by outcome",
    ["outcome"],  # rejected | failed | succeeded | succeeded_with_warning
)

recipient_operation_counter = Counter(
    "transfer_desk_recipient_operations_total",
    "Saved recipient create/delete operations",
    ["operation", "outcome"],
)

# Session metrics
session_termination_counter = Counter(
    "transfer_desk_session_terminations_total",
    "Sessions ended, by reason",
    ["reason"],  # manual | inactivity | account_deleted
)

active_sessions_gauge = Gauge(
    "transfer_desk_active_sessions",
    "Sessions currently active in this process",
)

# Remote API metrics
remote_request_duration_histogram = Histogram(
    "transfer_desk_remote_request_duration_seconds",
    "Remote banking API response time",
    ["operation"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


def record_sync_cycle(outcome: str) -> None:
    sync_cycle_counter.labels(outcome=outcome).inc()


def record_transfer(outcome: str) -> None:
    transfer_submission_counter.labels(outcome=outcome).inc()


def record_recipient_operation(operation: str, succeeded: bool) -> None:
    recipient_operation_counter.labels(
        operation=operation, outcome="succeeded" if succeeded else "failed"
    ).inc()
