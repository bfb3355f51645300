"""
Prometheus metrics for BrainCache
"""

import time
from functools import wraps
from typing import Callable

from prometheus_client import CollectorRegistry, Counter, Histogram
from prometheus_client.exposition import generate_latest

# Create a custom registry
metrics_registry = CollectorRegistry()

# Request metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
    registry=metrics_registry
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint"],
    buckets=(.005, .01, .025, .05, .075, .1, .25, .5, .75, 1.0, 2.5, 5.0),
    registry=metrics_registry
)

# Access control metrics
access_decisions_total = Counter(
    "access_decisions_total",
    "Access gate decisions",
    ["resource_type", "level", "allowed"],
    registry=metrics_registry
)

grants_total = Counter(
    "grants_total",
    "Grant store mutations",
    ["resource_type", "action"],
    registry=metrics_registry
)

share_links_total = Counter(
    "share_links_total",
    "Share link operations",
    ["resource_type", "action"],
    registry=metrics_registry
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
    registry=metrics_registry
)


def track_request(method: str, endpoint: str):
    """Decorator to track HTTP requests"""
    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.time()
            status = "success"
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                status = "error"
                errors_total.labels(
                    error_type=type(e).__name__,
                    endpoint=endpoint
                ).inc()
                raise
            finally:
                duration = time.time() - start_time
                http_requests_total.labels(
                    method=method,
                    endpoint=endpoint,
                    status=status
                ).inc()
                http_request_duration_seconds.labels(
                    method=method,
                    endpoint=endpoint
                ).observe(duration)
        return wrapper
    return decorator


def get_metrics() -> bytes:
    """Generate Prometheus metrics exposition format"""
    return generate_latest(metrics_registry)
