"""HTTP session setup for talking to Elasticsearch."""

import requests

from .config import Config


def create_session(config: Config) -> requests.Session:
    """Create a requests session with the configured TLS settings.

    Args:
        config: Exporter configuration

    Returns:
        Session to hand to the cluster health collector
    """
    session = requests.Session()

    ca_cert = config.get("elasticsearch.ca_cert")
    session.verify = ca_cert if ca_cert else bool(config.get("elasticsearch.verify", True))

    client_cert = config.get("elasticsearch.client_cert")
    client_key = config.get("elasticsearch.client_key")
    if client_cert and client_key:
        session.cert = (client_cert, client_key)
    elif client_cert:
        session.cert = client_cert

    return session
