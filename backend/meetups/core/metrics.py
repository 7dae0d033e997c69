"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Admission metrics
admission_decisions = Counter(
    'subscription_admission_total',
    'Subscription admission decisions',
    ['operation', 'result']  # join/leave, admitted/<rejection kind>
)

admission_latency = Histogram(
    'subscription_admission_latency_seconds',
    'Subscription admission latency',
    ['operation'],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

conflict_checks = Counter(
    'subscription_conflict_checks_total',
    'Schedule conflict checks',
    ['result']  # clear, conflict, error
)

# Database metrics
db_retries = Counter(
    'db_retry_attempts_total',
    'Database retry attempts due to version conflicts'
)

# Notification metrics
notifications = Counter(
    'subscription_notifications_total',
    'Subscription notifications dispatched',
    ['status']  # sent, failed
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_admission(operation: str, result: str):
    """Record admission decision. Result: admitted or the rejection kind."""
    admission_decisions.labels(operation=operation, result=result).inc()


def record_conflict_check(result: str):
    """Record conflict check. Result: clear, conflict, error"""
    conflict_checks.labels(result=result).inc()


def record_notification(sent: bool):
    notifications.labels(status="sent" if sent else "failed").inc()
