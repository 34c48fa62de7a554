# tutorsearch/services/search/metrics.py
"""Search-specific Prometheus metrics, registered on the service registry."""

from prometheus_client import Counter, Histogram

from tutorsearch.monitoring.prometheus_metrics import REGISTRY

search_duration_seconds = Histogram(
    "tutorsearch_search_duration_seconds",
    "Time to answer a search request",
    ["entity", "has_origin"],
    registry=REGISTRY,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

search_results_total = Counter(
    "tutorsearch_search_results_total",
    "Number of results returned on search pages",
    ["entity"],
    registry=REGISTRY,
)

search_zero_results_total = Counter(
    "tutorsearch_search_zero_results_total",
    "Searches whose predicate matched nothing",
    ["entity"],
    registry=REGISTRY,
)

search_timeouts_total = Counter(
    "tutorsearch_search_timeouts_total",
    "Search requests abandoned after the request timeout",
    ["operation"],
    registry=REGISTRY,
)


def record_search(entity: str, has_origin: bool, duration: float, returned: int, total: int) -> None:
    search_duration_seconds.labels(entity=entity, has_origin=str(has_origin).lower()).observe(
        duration
    )
    search_results_total.labels(entity=entity).inc(returned)
    if total == 0:
        search_zero_results_total.labels(entity=entity).inc()


def record_timeout(operation: str) -> None:
    search_timeouts_total.labels(operation=operation).inc()
