"""Prometheus metrics endpoint.

Serves the registry holding the cluster health collector. Each request to
``/metrics`` triggers one scrape of the cluster; there is no caching between
requests.
"""

from flask import Blueprint, Response, current_app, jsonify
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

metrics_bp = Blueprint("metrics", __name__)


@metrics_bp.route("/metrics", methods=["GET"])
def prometheus_metrics():
    """Prometheus metrics endpoint.

    Returns:
        Prometheus text format metrics, or 503 if no registry is configured
    """
    registry = current_app.config.get("METRICS_REGISTRY")
    if registry is None:
        return jsonify({"error": "Metrics registry not initialized"}), 503

    return Response(generate_latest(registry), content_type=CONTENT_TYPE_LATEST)
