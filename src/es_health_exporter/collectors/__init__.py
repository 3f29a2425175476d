"""Collectors exposing Elasticsearch state to a Prometheus registry."""

from .base_collector import BaseCollector
from .cluster_health import (
    ClusterHealthCollector,
    ClusterHealthFetcher,
    ClusterHealthMetrics,
    MetricDescriptor,
    Sample,
    StatusDescriptor,
)
from .errors import ClusterHealthError, DecodeError, HTTPStatusError, TransportError
from .schemas import ClusterHealthResponse

__all__ = [
    "BaseCollector",
    "ClusterHealthCollector",
    "ClusterHealthFetcher",
    "ClusterHealthMetrics",
    "ClusterHealthResponse",
    "MetricDescriptor",
    "Sample",
    "StatusDescriptor",
    "ClusterHealthError",
    "TransportError",
    "HTTPStatusError",
    "DecodeError",
]
