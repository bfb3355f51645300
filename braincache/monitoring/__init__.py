"""
Monitoring module for application metrics
"""

from braincache.monitoring.metrics import metrics_registry, get_metrics, track_request

__all__ = [
    "metrics_registry",
    "get_metrics",
    "track_request",
]
