"""Self-monitoring metrics for the remote-read double."""
from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest


class SelfMetrics:
    """Counters describing the exchanges a server instance has handled."""

    def __init__(self, registry=None, prefix="readmock_"):
        # A private registry per server keeps parallel test servers apart
        if registry is None:
            registry = CollectorRegistry()
        self.registry = registry
        self.prefix = prefix

        self.read_requests_total = Counter(
            f"{prefix}read_requests_total",
            "Total number of read requests received",
            registry=registry
        )

        self.read_failures_total = Counter(
            f"{prefix}read_failures_total",
            "Total number of fatal protocol violations",
            ["kind"],
            registry=registry
        )

        self.series_returned_total = Counter(
            f"{prefix}series_returned_total",
            "Total number of non-empty series returned",
            registry=registry
        )

        self.samples_returned_total = Counter(
            f"{prefix}samples_returned_total",
            "Total number of samples returned",
            registry=registry
        )

        self.read_duration_seconds = Histogram(
            f"{prefix}read_duration_seconds",
            "Duration of each read exchange in seconds",
            buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
            registry=registry
        )

    def record_request(self):
        self.read_requests_total.inc()

    def record_failure(self, kind: str):
        """Record a fatal violation by error kind."""
        self.read_failures_total.labels(kind=kind).inc()

    def record_result(self, series: int, samples: int, duration: float):
        """Record what a successful exchange returned."""
        self.series_returned_total.inc(series)
        self.samples_returned_total.inc(samples)
        self.read_duration_seconds.observe(duration)

    def requests_served(self) -> int:
        """Read requests received so far, taken from the registry."""
        value = self.registry.get_sample_value(f"{self.prefix}read_requests_total")
        return int(value or 0)

    def render(self) -> bytes:
        """Prometheus text exposition of this registry."""
        return generate_latest(self.registry)
