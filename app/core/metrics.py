"""Prometheus metrics for monitoring"""
from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry, generate_latest

registry = CollectorRegistry()

request_count = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status'],
    registry=registry
)

request_duration = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    registry=registry
)

fee_calculations = Counter(
    'fee_calculations_total',
    'Total fee calculations',
    ['vehicle_type', 'outcome'],
    registry=registry
)

cache_hits = Counter(
    'cache_hits_total',
    'Total fee breakdown cache hits',
    registry=registry
)

cache_misses = Counter(
    'cache_misses_total',
    'Total fee breakdown cache misses',
    registry=registry
)

rate_limit_exceeded = Counter(
    'rate_limit_exceeded_total',
    'Total rate limit exceeded events',
    ['endpoint'],
    registry=registry
)

rate_limit_queued = Counter(
    'rate_limit_queued_total',
    'Total requests that waited in the rate limit queue',
    ['endpoint'],
    registry=registry
)

redis_connected = Gauge(
    'redis_connected',
    'Redis connection status (1=connected, 0=disconnected)',
    registry=registry
)


def get_metrics_text() -> str:
    """Generate Prometheus metrics in text format"""
    return generate_latest(registry).decode('utf-8')
