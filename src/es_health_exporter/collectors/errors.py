"""Errors raised while fetching cluster health from Elasticsearch."""

from typing import Optional


class ClusterHealthError(Exception):
    """Base class for cluster health fetch failures."""


class TransportError(ClusterHealthError):
    """The request could not be completed (DNS, refused connection, timeout)."""


class HTTPStatusError(ClusterHealthError):
    """The health endpoint answered with a non-200 status code."""

    def __init__(self, status_code: int, url: Optional[str] = None):
        self.status_code = status_code
        self.url = url
        message = f"HTTP request failed with code {status_code}"
        if url:
            message += f" ({url})"
        super().__init__(message)


class DecodeError(ClusterHealthError):
    """The response body is not valid JSON or does not match the schema."""
