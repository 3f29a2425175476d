"""
Command-line interface for the Elasticsearch health exporter
"""

import click
import json
import sys
from typing import List, Optional
from tabulate import tabulate

from es_health_exporter import __version__
from es_health_exporter.collectors.cluster_health import ClusterHealthCollector, Sample
from es_health_exporter.utils.config import Config, load_config
from es_health_exporter.utils.logging_utils import setup_logging
from es_health_exporter.utils.session import create_session


def _load(
    config_path: Optional[str], es_url: Optional[str], timeout: Optional[float]
) -> Config:
    config = load_config(config_path)
    if es_url:
        config.set("elasticsearch.url", es_url)
    if timeout is not None:
        config.set("elasticsearch.timeout", timeout)
    setup_logging(config)
    return config


@click.group()
@click.version_option(version=__version__)
def cli():
    """Elasticsearch health exporter - expose cluster health as Prometheus metrics"""
    pass


@cli.command()
@click.option("--es-url", default=None, help="Elasticsearch base URL")
@click.option(
    "--host", default=None, help="Host to bind the server to (default: 0.0.0.0)"
)
@click.option(
    "--port", default=None, type=int, help="Port to bind the server to (default: 9114)"
)
@click.option(
    "--timeout", default=None, type=float, help="Request timeout in seconds"
)
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(exists=True),
    help="Path to YAML configuration file",
)
@click.option("--debug", is_flag=True, help="Enable debug mode")
def serve(
    es_url: Optional[str],
    host: Optional[str],
    port: Optional[int],
    timeout: Optional[float],
    config_path: Optional[str],
    debug: bool,
):
    """Start the metrics server"""
    from es_health_exporter.api.server import run_server

    config = _load(config_path, es_url, timeout)
    host = host or config.get("api.host")
    port = port or config.get("api.port")
    debug = debug or bool(config.get("api.debug"))

    click.echo(f"Starting Elasticsearch health exporter on {host}:{port}")
    click.echo(f"Elasticsearch: {config.get('elasticsearch.url')}")
    click.echo(f"Debug mode: {'enabled' if debug else 'disabled'}")

    run_server(config, host=host, port=port, debug=debug)


@cli.command()
@click.option("--es-url", default=None, help="Elasticsearch base URL")
@click.option(
    "--timeout", default=None, type=float, help="Request timeout in seconds"
)
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(exists=True),
    help="Path to YAML configuration file",
)
@click.option(
    "--format",
    "output_format",
    default="table",
    type=click.Choice(["table", "json"]),
    help="Output format",
)
def scrape(
    es_url: Optional[str],
    timeout: Optional[float],
    config_path: Optional[str],
    output_format: str,
):
    """Scrape cluster health once and print the resulting samples"""

    config = _load(config_path, es_url, timeout)
    collector = ClusterHealthCollector(
        config.get("elasticsearch.url"),
        session=create_session(config),
        config=config.collector_config(),
    )

    samples = collector.scrape()

    if output_format == "json":
        output_json(samples)
    else:
        output_table(samples)

    error_metric = collector.metrics.fq_name("last_scrape_error")
    if any(s.name == error_metric and s.value for s in samples):
        click.echo("✗ Scrape failed, see log output for details", err=True)
        sys.exit(1)


def output_table(samples: List[Sample]):
    """Print samples as a table"""
    rows = [
        [
            sample.name,
            ", ".join(f"{k}={v}" for k, v in sorted(sample.labels.items())),
            sample.value,
        ]
        for sample in samples
    ]
    click.echo(tabulate(rows, headers=["Metric", "Labels", "Value"], tablefmt="simple"))


def output_json(samples: List[Sample]):
    """Print samples as JSON"""
    click.echo(json.dumps([sample._asdict() for sample in samples], indent=2))


def main():
    """Main entry point"""
    cli()


if __name__ == "__main__":
    main()
