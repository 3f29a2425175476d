"""
HTTP server exposing Elasticsearch cluster health metrics
"""

from flask import Flask, jsonify
from prometheus_client import CollectorRegistry
from typing import Optional
import logging

import requests

from es_health_exporter import __version__
from es_health_exporter.api.metrics_routes import metrics_bp
from es_health_exporter.collectors.cluster_health import ClusterHealthCollector
from es_health_exporter.utils.config import Config
from es_health_exporter.utils.session import create_session

logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)
app.register_blueprint(metrics_bp)

# Configured by init_app() before the server starts
collector: Optional[ClusterHealthCollector] = None


def init_app(
    config: Optional[Config] = None, session: Optional[requests.Session] = None
) -> CollectorRegistry:
    """Initialize the application with a registry and cluster health collector.

    Args:
        config: Exporter configuration (defaults are used if omitted)
        session: HTTP session for Elasticsearch (built from config if omitted)

    Returns:
        The registry served on /metrics
    """
    global collector
    config = config or Config()
    session = session if session is not None else create_session(config)

    collector = ClusterHealthCollector(
        config.get("elasticsearch.url"),
        session=session,
        config=config.collector_config(),
    )
    registry = CollectorRegistry()
    registry.register(collector)

    app.config["METRICS_REGISTRY"] = registry
    logger.info(f"Exporting cluster health of {collector.url}")
    return registry


@app.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint"""
    return jsonify(
        {
            "status": "healthy",
            "service": "es-health-exporter",
            "version": __version__,
            "target": collector.url if collector is not None else None,
        }
    )


def run_server(config: Config, host="0.0.0.0", port=9114, debug=False):  # nosec B104
    """Run the Flask server"""
    init_app(config)
    logger.info(f"Starting Elasticsearch health exporter on {host}:{port}")
    app.run(host=host, port=port, debug=debug)
