"""Prometheus metrics for the music catalog service."""
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# HTTP metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total number of HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'Time spent handling HTTP requests',
    ['method', 'endpoint'],
    buckets=(0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0)
)

# Catalog metrics
catalog_writes_total = Counter(
    'catalog_writes_total',
    'Total number of catalog write operations',
    ['resource', 'operation', 'outcome']  # outcome: 'success' or the error class name
)

catalog_validation_failures_total = Counter(
    'catalog_validation_failures_total',
    'Total number of write payloads rejected by field validation',
    ['resource']
)

catalog_reference_failures_total = Counter(
    'catalog_reference_failures_total',
    'Total number of writes rejected because a referenced record does not exist',
    ['resource']
)


def get_metrics() -> bytes:
    """Render all registered metrics in the Prometheus text format."""
    return generate_latest()


METRICS_CONTENT_TYPE = CONTENT_TYPE_LATEST
