"""Collector for the Elasticsearch cluster health API."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterator, List, NamedTuple, Optional, Tuple
from urllib.parse import urlsplit, urlunsplit
import logging
import time

import requests
from prometheus_client import Counter, Gauge
from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily, Metric
from pydantic import ValidationError

from .base_collector import BaseCollector
from .errors import ClusterHealthError, DecodeError, HTTPStatusError, TransportError
from .schemas import STATUS_COLORS, ClusterHealthResponse

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "elasticsearch"
DEFAULT_SUBSYSTEM = "cluster_health"
HEALTH_PATH = "/_cluster/health"

CLUSTER_LABELS = ("cluster",)
STATUS_LABELS = ("cluster", "color")


class ValueType(Enum):
    """Kind of value a descriptor reports."""

    GAUGE = "gauge"
    COUNTER = "counter"


class Sample(NamedTuple):
    """One emitted value with its label set."""

    name: str
    labels: Dict[str, str]
    value: float


def build_fq_name(namespace: str, subsystem: str, name: str) -> str:
    """Join the non-empty name parts with underscores."""
    return "_".join(part for part in (namespace, subsystem, name) if part)


def health_endpoint(url: str) -> str:
    """Return ``url`` with its path replaced by the cluster health path."""
    parts = urlsplit(url)
    return urlunsplit(parts._replace(path=HEALTH_PATH))


def _field(name: str) -> Callable[[ClusterHealthResponse], float]:
    # float(True) == 1.0, so boolean fields go through the same path
    def value(record: ClusterHealthResponse) -> float:
        return float(getattr(record, name))

    return value


@dataclass(frozen=True)
class MetricDescriptor:
    """Static description of one scalar metric derived from a health record."""

    name: str
    documentation: str
    value: Callable[[ClusterHealthResponse], float]
    labels: Tuple[str, ...] = CLUSTER_LABELS
    value_type: ValueType = ValueType.GAUGE

    def family(self) -> Metric:
        """Create an empty metric family for this descriptor."""
        if self.value_type is ValueType.COUNTER:
            return CounterMetricFamily(
                self.name, self.documentation, labels=self.labels
            )
        return GaugeMetricFamily(self.name, self.documentation, labels=self.labels)


@dataclass(frozen=True)
class StatusDescriptor:
    """One-hot expansion of the categorical cluster status."""

    name: str
    documentation: str
    labels: Tuple[str, ...] = STATUS_LABELS

    def value(self, record: ClusterHealthResponse, color: str) -> float:
        return 1.0 if record.status == color else 0.0

    def family(self) -> Metric:
        return GaugeMetricFamily(self.name, self.documentation, labels=self.labels)


class ClusterHealthMetrics:
    """Fixed set of descriptors reported for the cluster health API.

    Built once per collector and never mutated, so it can be read
    concurrently by ``describe`` and ``collect``.
    """

    SCALAR_FIELDS = (
        (
            "active_primary_shards",
            "The number of primary shards in your cluster. "
            "This is an aggregate total across all indices.",
        ),
        (
            "active_shards",
            "Aggregate total of all shards across all indices, "
            "which includes replica shards.",
        ),
        (
            "delayed_unassigned_shards",
            "Shards delayed to reduce reallocation overhead.",
        ),
        (
            "initializing_shards",
            "Count of shards that are being freshly created.",
        ),
        ("number_of_data_nodes", "Number of data nodes in the cluster."),
        ("number_of_in_flight_fetch", "The number of ongoing shard info requests."),
        ("number_of_nodes", "Number of nodes in the cluster."),
        (
            "number_of_pending_tasks",
            "Cluster level changes which have not yet been executed.",
        ),
        (
            "relocating_shards",
            "The number of shards that are currently moving from one node "
            "to another node.",
        ),
        ("timed_out", "Whether the cluster health check timed out."),
        (
            "unassigned_shards",
            "The number of shards that exist in the cluster state, "
            "but cannot be found in the cluster itself.",
        ),
    )

    def __init__(
        self, namespace: str = DEFAULT_NAMESPACE, subsystem: str = DEFAULT_SUBSYSTEM
    ):
        """Build the descriptor set.

        Args:
            namespace: Metric namespace (first name component)
            subsystem: Metric subsystem (second name component)
        """
        self.namespace = namespace
        self.subsystem = subsystem

        self.metrics: Tuple[MetricDescriptor, ...] = tuple(
            MetricDescriptor(
                name=self.fq_name(field),
                documentation=documentation,
                value=_field(field),
            )
            for field, documentation in self.SCALAR_FIELDS
        )
        self.status = StatusDescriptor(
            name=self.fq_name("status"),
            documentation="Whether all primary and replica shards are allocated.",
        )

    def fq_name(self, name: str) -> str:
        return build_fq_name(self.namespace, self.subsystem, name)

    def descriptors(self) -> Iterator:
        """Yield every scalar descriptor followed by the status descriptor."""
        yield from self.metrics
        yield self.status


class ScrapeStats:
    """Metrics about the collector's own scrapes.

    The underlying ``prometheus_client`` objects are created without a
    registry; they are exposed only through the collector that owns them and
    live exactly as long as it does.
    """

    def __init__(self, metrics: ClusterHealthMetrics, url: str):
        """Create the scrape counters and gauges.

        Args:
            metrics: Descriptor set supplying namespace and subsystem
            url: Target URL, attached to every meta-metric as the ``url`` label
        """
        opts = {
            "labelnames": ("url",),
            "namespace": metrics.namespace,
            "subsystem": metrics.subsystem,
            "registry": None,
        }

        self._scrapes_total = Counter(
            "scrapes_total",
            "Total number of times Elasticsearch cluster health was scraped "
            "for metrics.",
            **opts,
        )
        self._scrape_errors_total = Counter(
            "scrape_errors_total",
            "Total number of times an error occurred scraping Elasticsearch "
            "cluster health.",
            **opts,
        )
        self._last_scrape_error = Gauge(
            "last_scrape_error",
            "Whether the last scrape of metrics from Elasticsearch cluster health "
            "resulted in an error (1 for error, 0 for success).",
            **opts,
        )
        self._last_scrape_timestamp = Gauge(
            "last_scrape_timestamp",
            "Number of seconds since 1970 since last scrape from Elasticsearch "
            "cluster health.",
            **opts,
        )
        self._last_scrape_duration_seconds = Gauge(
            "last_scrape_duration_seconds",
            "Duration of the last scrape from Elasticsearch cluster health.",
            **opts,
        )

        self.scrapes_total = self._scrapes_total.labels(url=url)
        self.scrape_errors_total = self._scrape_errors_total.labels(url=url)
        self.last_scrape_error = self._last_scrape_error.labels(url=url)
        self.last_scrape_timestamp = self._last_scrape_timestamp.labels(url=url)
        self.last_scrape_duration_seconds = self._last_scrape_duration_seconds.labels(
            url=url
        )

    def finish(self, failed: bool, begun: float) -> List[Metric]:
        """Update the last-scrape gauges and return all meta-metric families.

        Args:
            failed: Whether the fetch of this scrape failed
            begun: ``time.monotonic()`` value taken when the scrape started

        Returns:
            Counter families followed by the error, timestamp and duration gauges
        """
        families: List[Metric] = []
        families.extend(self._scrapes_total.collect())
        families.extend(self._scrape_errors_total.collect())

        self.last_scrape_error.set(1 if failed else 0)
        families.extend(self._last_scrape_error.collect())

        self.last_scrape_timestamp.set(time.time())
        families.extend(self._last_scrape_timestamp.collect())

        self.last_scrape_duration_seconds.set(time.monotonic() - begun)
        families.extend(self._last_scrape_duration_seconds.collect())

        return families


class ClusterHealthFetcher:
    """Fetches and decodes ``/_cluster/health`` with a caller-supplied session.

    Timeouts and TLS settings belong to the session wiring; the fetcher makes
    exactly one attempt per call.
    """

    def __init__(
        self,
        session: requests.Session,
        url: str,
        timeout: Optional[float] = None,
    ):
        self.session = session
        self.url = url
        self.timeout = timeout

    @property
    def health_url(self) -> str:
        return health_endpoint(self.url)

    def fetch(self) -> Tuple[ClusterHealthResponse, Optional[ClusterHealthError]]:
        """Fetch the cluster health document.

        Returns:
            ``(record, None)`` on success, otherwise the zero-valued record
            together with the error that occurred
        """
        try:
            return self._fetch_and_decode(), None
        except ClusterHealthError as e:
            return ClusterHealthResponse(), e

    def _fetch_and_decode(self) -> ClusterHealthResponse:
        url = self.health_url

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(
                f"failed to get cluster health from {url}: {e}"
            ) from e

        try:
            if response.status_code != 200:
                raise HTTPStatusError(response.status_code, url)

            try:
                payload = response.json()
            except ValueError as e:
                raise DecodeError(f"invalid JSON in cluster health response: {e}") from e
            except requests.RequestException as e:
                raise TransportError(
                    f"failed to read cluster health from {url}: {e}"
                ) from e
        finally:
            response.close()

        if not isinstance(payload, dict):
            raise DecodeError(
                f"expected a JSON object, got {type(payload).__name__}"
            )

        try:
            return ClusterHealthResponse.model_validate(payload)
        except ValidationError as e:
            raise DecodeError(f"unexpected cluster health response: {e}") from e


class ClusterHealthCollector(BaseCollector):
    """Exposes Elasticsearch cluster health to a Prometheus registry.

    Every call to ``collect`` performs one fetch and always returns the full
    set of families: when the fetch fails the values fall back to zero and the
    ``cluster`` label to an empty string, so a broken cluster never breaks the
    scrape.

    Example:
        registry = CollectorRegistry()
        registry.register(ClusterHealthCollector("http://localhost:9200"))
    """

    def __init__(
        self,
        url: str,
        session: Optional[requests.Session] = None,
        config: Optional[Dict] = None,
    ):
        """Initialize the cluster health collector.

        Args:
            url: Base URL of the Elasticsearch cluster (e.g., http://localhost:9200)
            session: HTTP session used for requests (a new one if omitted)
            config: Optional configuration dictionary with:
                - timeout: Request timeout in seconds (default: None)
                - namespace: Metric namespace (default: elasticsearch)
                - subsystem: Metric subsystem (default: cluster_health)
        """
        super().__init__(config)
        self.url = url
        self.session = session if session is not None else requests.Session()
        timeout = self.config.get("timeout")
        # a malformed timeout fails here, not on every scrape
        self.timeout = float(timeout) if timeout is not None else None

        self.metrics = ClusterHealthMetrics(
            namespace=self.config.get("namespace", DEFAULT_NAMESPACE),
            subsystem=self.config.get("subsystem", DEFAULT_SUBSYSTEM),
        )
        self.fetcher = ClusterHealthFetcher(self.session, url, timeout=self.timeout)
        self.stats = ScrapeStats(self.metrics, url)

    def describe(self) -> List[Metric]:
        """Return the 11 scalar families and the status family, without samples."""
        return [descriptor.family() for descriptor in self.metrics.descriptors()]

    def collect(self) -> List[Metric]:
        """Scrape cluster health once.

        Returns:
            Scalar families in declared order, the status family (green,
            yellow, red), then the scrape meta-metrics
        """
        begun = time.monotonic()
        self.stats.scrapes_total.inc()

        record, error = self.fetcher.fetch()
        if error is not None:
            logger.warning(f"Failed to fetch and decode cluster health: {error}")
            self.stats.scrape_errors_total.inc()

        families: List[Metric] = []
        for descriptor in self.metrics.metrics:
            family = descriptor.family()
            family.add_metric([record.cluster_name], descriptor.value(record))
            families.append(family)

        status = self.metrics.status
        status_family = status.family()
        for color in STATUS_COLORS:
            status_family.add_metric(
                [record.cluster_name, color], status.value(record, color)
            )
        families.append(status_family)

        families.extend(self.stats.finish(error is not None, begun))
        return families

    def scrape(self) -> List[Sample]:
        """Run one collection and flatten it into samples in emission order.

        Counter creation timestamps (``*_created``) are left out.
        """
        return [
            Sample(sample.name, dict(sample.labels), sample.value)
            for family in self.collect()
            for sample in family.samples
            if not (family.type == "counter" and sample.name.endswith("_created"))
        ]

    def validate_config(self) -> bool:
        """Check that the cluster health endpoint answers.

        Returns:
            True if the endpoint returns HTTP 200
        """
        try:
            with self.session.get(
                self.fetcher.health_url, timeout=self.timeout
            ) as response:
                return response.status_code == 200
        except requests.RequestException as e:
            logger.debug(f"Cluster health endpoint unreachable: {e}")
            return False
