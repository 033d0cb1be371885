"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# HTTP metrics
http_requests = Counter(
    'http_requests_total',
    'HTTP requests by route template and status',
    ['method', 'route', 'status']
)

http_request_latency = Histogram(
    'http_request_latency_seconds',
    'HTTP request latency by route template',
    ['route'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)

# Booking metrics
booking_attempts = Counter(
    'booking_attempts_total',
    'Total booking attempts',
    ['status']  # success, conflict, error
)

booking_latency = Histogram(
    'booking_latency_seconds',
    'Booking request latency',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

booking_retries = Counter(
    'booking_retry_attempts_total',
    'Booking retry attempts due to court version conflicts'
)

# Pricing metrics
price_quotes = Counter(
    'price_quotes_total',
    'Price quotes computed without booking',
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)

redis_connection_errors = Counter(
    'redis_connection_errors_total',
    'Redis connection errors'
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


# Convenience functions for instrumentation
def record_booking_attempt(status: str):
    """Record booking attempt. Status: success, conflict, error"""
    booking_attempts.labels(status=status).inc()


def record_cache_operation(operation: str, hit: bool):
    """Record cache operation."""
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()


def record_http_request(method: str, route: str, status_code: int, seconds: float):
    """Record one finished request against its route template."""
    http_requests.labels(method=method, route=route, status=str(status_code)).inc()
    http_request_latency.labels(route=route).observe(seconds)
