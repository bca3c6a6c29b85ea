"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Admission control metrics
admission_requests = Counter(
    'registration_admissions_total',
    'Registration admission decisions',
    ['result']  # admitted, capacity_exceeded, duplicate, past_event, not_found, invalid
)

admission_latency = Histogram(
    'registration_admission_latency_seconds',
    'Time spent deciding and persisting a registration',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

withdrawals = Counter(
    'registration_withdrawals_total',
    'Registrations withdrawn',
    ['actor']  # owner, superadmin
)

# Auth metrics
login_attempts = Counter(
    'admin_login_attempts_total',
    'Admin login attempts',
    ['result']  # success, failure
)

token_refreshes = Counter(
    'admin_token_refresh_total',
    'Access token refresh attempts',
    ['result']  # success, failure
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


# Convenience functions for instrumentation
def record_admission(result: str):
    admission_requests.labels(result=result).inc()


def record_withdrawal(actor: str):
    withdrawals.labels(actor=actor).inc()


def record_login(success: bool):
    login_attempts.labels(result="success" if success else "failure").inc()


def record_token_refresh(success: bool):
    token_refreshes.labels(result="success" if success else "failure").inc()
