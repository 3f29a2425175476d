"""Tests for the command-line interface."""

import pytest
from unittest.mock import patch
import json

from click.testing import CliRunner

from es_health_exporter.cli.commands import cli


@pytest.fixture
def runner():
    return CliRunner()


class TestScrapeCommand:
    """Tests for the scrape command."""

    @patch("es_health_exporter.cli.commands.create_session")
    def test_scrape_table(self, mock_create_session, runner, mock_session):
        mock_create_session.return_value = mock_session

        result = runner.invoke(cli, ["scrape", "--es-url", "http://es:9200"])

        assert result.exit_code == 0
        assert "elasticsearch_cluster_health_active_shards" in result.output
        assert "cluster=es1" in result.output
        mock_session.get.assert_called_once_with(
            "http://es:9200/_cluster/health", timeout=5.0
        )

    @patch("es_health_exporter.cli.commands.create_session")
    def test_scrape_json(self, mock_create_session, runner, mock_session):
        mock_create_session.return_value = mock_session

        result = runner.invoke(
            cli, ["scrape", "--es-url", "http://es:9200", "--format", "json"]
        )

        assert result.exit_code == 0
        samples = json.loads(result.output)
        green = [
            s
            for s in samples
            if s["name"] == "elasticsearch_cluster_health_status"
            and s["labels"]["color"] == "green"
        ]
        assert green == [
            {
                "name": "elasticsearch_cluster_health_status",
                "labels": {"cluster": "es1", "color": "green"},
                "value": 1.0,
            }
        ]

    @patch("es_health_exporter.cli.commands.create_session")
    def test_scrape_timeout_option(self, mock_create_session, runner, mock_session):
        mock_create_session.return_value = mock_session

        runner.invoke(cli, ["scrape", "--timeout", "1.5"])

        mock_session.get.assert_called_once_with(
            "http://localhost:9200/_cluster/health", timeout=1.5
        )

    @patch("es_health_exporter.cli.commands.create_session")
    def test_scrape_failure_exit_code(
        self, mock_create_session, runner, failing_session
    ):
        mock_create_session.return_value = failing_session

        result = runner.invoke(cli, ["scrape", "--format", "json"])

        assert result.exit_code == 1


class TestServeCommand:
    """Tests for the serve command."""

    @patch("es_health_exporter.api.server.run_server")
    def test_serve_defaults(self, mock_run_server, runner):
        result = runner.invoke(cli, ["serve"])

        assert result.exit_code == 0
        config = mock_run_server.call_args[0][0]
        assert config.get("elasticsearch.url") == "http://localhost:9200"
        assert mock_run_server.call_args[1] == {
            "host": "0.0.0.0",
            "port": 9114,
            "debug": False,
        }

    @patch("es_health_exporter.api.server.run_server")
    def test_serve_options(self, mock_run_server, runner):
        result = runner.invoke(
            cli,
            [
                "serve",
                "--es-url",
                "https://es:9243",
                "--port",
                "9200",
                "--host",
                "127.0.0.1",
            ],
        )

        assert result.exit_code == 0
        assert "https://es:9243" in result.output
        config = mock_run_server.call_args[0][0]
        assert config.get("elasticsearch.url") == "https://es:9243"
        assert mock_run_server.call_args[1]["port"] == 9200
        assert mock_run_server.call_args[1]["host"] == "127.0.0.1"


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output
