"""Base class for scrape-time collectors."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional


class BaseCollector(ABC):
    """Abstract base class for collectors consumed by a metrics registry.

    Subclasses implement ``collect`` and are registered with a
    ``prometheus_client.CollectorRegistry``; the registry decides when a
    collection happens.
    """

    def __init__(self, config: Optional[Dict] = None):
        """Initialize the collector.

        Args:
            config: Optional collector-specific configuration dictionary
        """
        self.config = config or {}

    @abstractmethod
    def collect(self) -> List:
        """Run one collection and return the resulting metric families."""
        pass

    @abstractmethod
    def validate_config(self) -> bool:
        """Check that the collector is able to reach its data source.

        Returns:
            True if the configuration is valid and the source is reachable
        """
        pass
