"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_writes = Counter(
    'booking_writes_total',
    'Booking submissions and cancellations',
    ['operation', 'result']  # create/cancel/migrate, success/rejected/error
)

# Reconciliation metrics
reconciliation_runs = Counter(
    'reconciliation_runs_total',
    'Reconciliation passes over a booking snapshot',
    ['view']  # user, admin, analytics, stream
)

reconciliation_catalog_misses = Counter(
    'reconciliation_catalog_misses_total',
    'Bookings whose vehicle is no longer in the catalog'
)

reconciliation_latency = Histogram(
    'reconciliation_latency_seconds',
    'Time spent reconciling one snapshot',
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5]
)

# Interaction metrics
interactions_recorded = Counter(
    'interactions_recorded_total',
    'Interaction events appended to the log',
    ['action']  # view, like, share, contact
)

# Access control metrics
access_decisions = Counter(
    'access_decisions_total',
    'Role-gated access decisions',
    ['area', 'outcome']  # outcome: allowed, redirected
)

# Store metrics
store_operations = Counter(
    'store_operations_total',
    'Document store operations',
    ['operation']  # get, set, update, push, remove
)

store_errors = Counter(
    'store_errors_total',
    'Document store failures surfaced to callers',
    ['operation']
)

watchers_opened = Counter(
    'store_watchers_opened_total',
    'Snapshot watchers opened against the store'
)


def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Usage:
        @app.get("/metrics")
        def metrics():
            return metrics_endpoint()
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_write(operation: str, result: str):
    """Record booking write. Result: success, rejected, error"""
    booking_writes.labels(operation=operation, result=result).inc()


def record_reconciliation(view: str, catalog_misses: int = 0):
    reconciliation_runs.labels(view=view).inc()
    if catalog_misses:
        reconciliation_catalog_misses.inc(catalog_misses)


def record_interaction(action: str):
    interactions_recorded.labels(action=action).inc()


def record_access_decision(area: str, redirected: bool):
    outcome = "redirected" if redirected else "allowed"
    access_decisions.labels(area=area, outcome=outcome).inc()


def record_store_operation(operation: str):
    """Record store operation. Operation: get, set, update, push, remove"""
    store_operations.labels(operation=operation).inc()


def record_store_error(operation: str):
    store_errors.labels(operation=operation).inc()
