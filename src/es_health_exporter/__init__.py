"""Prometheus exporter for Elasticsearch cluster health."""

__version__ = "0.1.0"
