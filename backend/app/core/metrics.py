"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at the /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_attempts = Counter(
    'booking_attempts_total',
    'Total booking create/update attempts',
    ['status']  # success, conflict, invalid
)

venue_conflicts_detected = Counter(
    'venue_conflicts_detected_total',
    'Venue/day pairs flagged by the conflict detector during booking checks'
)

occupancy_entries_expanded = Histogram(
    'occupancy_entries_per_booking',
    'Number of occupancy entries produced when expanding a booking',
    buckets=[1, 2, 4, 8, 16, 32, 64, 128]
)

# Menu pricing metrics
package_price_recalculations = Counter(
    'package_price_recalculations_total',
    'Menu package price recomputations',
    ['trigger']  # item_created, item_updated, item_deleted, manual
)

price_lock_wait = Histogram(
    'package_price_lock_wait_seconds',
    'Time spent waiting for the per-package price lock',
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0]
)

# HTTP metrics
request_latency = Histogram(
    'http_request_latency_seconds',
    'HTTP request latency',
    ['method', 'status_code'],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

# Redis metrics
redis_connection_errors = Counter(
    'redis_connection_errors_total',
    'Redis connection errors'
)

redis_circuit_breaker_open = Gauge(
    'redis_circuit_breaker_open',
    'Redis circuit breaker state (1=open, 0=closed)'
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


# Convenience functions for instrumentation
def record_booking_attempt(status: str):
    """Record booking attempt. Status: success, conflict, invalid"""
    booking_attempts.labels(status=status).inc()


def record_price_recalculation(trigger: str):
    """Record a package price recomputation and what caused it."""
    package_price_recalculations.labels(trigger=trigger).inc()
