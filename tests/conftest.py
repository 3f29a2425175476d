"""Pytest configuration and shared fixtures."""

import pytest
from unittest.mock import MagicMock, Mock

import requests


@pytest.fixture
def health_payload():
    """Sample cluster health response body.

    Returns:
        Dictionary as returned by GET /_cluster/health
    """
    return {
        "cluster_name": "es1",
        "status": "green",
        "timed_out": False,
        "number_of_nodes": 3,
        "number_of_data_nodes": 2,
        "active_primary_shards": 5,
        "active_shards": 10,
        "relocating_shards": 0,
        "initializing_shards": 0,
        "unassigned_shards": 0,
        "delayed_unassigned_shards": 0,
        "number_of_pending_tasks": 0,
        "number_of_in_flight_fetch": 0,
        "task_max_waiting_in_queue_millis": 0,
        "active_shards_percent_as_number": 100.0,
    }


def _make_response(status_code=200, payload=None, json_error=None):
    """Build a mock requests response."""
    response = MagicMock()
    response.__enter__.return_value = response
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def make_response():
    """Factory for mock requests responses."""
    return _make_response


@pytest.fixture
def mock_session(health_payload):
    """Session whose GET returns a healthy cluster.

    Returns:
        Mock with the spec of requests.Session
    """
    session = Mock(spec=requests.Session)
    session.get.return_value = _make_response(payload=health_payload)
    return session


@pytest.fixture
def failing_session():
    """Session whose GET answers HTTP 500."""
    session = Mock(spec=requests.Session)
    session.get.return_value = _make_response(status_code=500)
    return session


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove exporter environment variables for the duration of a test."""
    for name in (
        "ES_HEALTH_EXPORTER_ES_URL",
        "ES_HEALTH_EXPORTER_TIMEOUT",
        "ES_HEALTH_EXPORTER_API_HOST",
        "ES_HEALTH_EXPORTER_API_PORT",
        "ES_HEALTH_EXPORTER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
