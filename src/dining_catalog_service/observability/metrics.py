"""Custom metrics for the dining catalog service."""

from opentelemetry import metrics

meter = metrics.get_meter("dining-catalog")

# Catalog refreshes by where the data came from (memory, cache, network)
refresh_success_counter = meter.create_counter(
    name="catalog_refresh_success_total",
    description="Total number of successful catalog refreshes by data source",
    unit="1",
)

refresh_failure_counter = meter.create_counter(
    name="catalog_refresh_failure_total",
    description="Total number of failed catalog refreshes by error type",
    unit="1",
)

refresh_duration_histogram = meter.create_histogram(
    name="catalog_refresh_duration_seconds",
    description="Duration of catalog refreshes by data source",
    unit="s",
)

# Response cache lookups (hit, stale, miss)
cache_lookup_counter = meter.create_counter(
    name="response_cache_lookup_total",
    description="Response cache lookups by outcome",
    unit="1",
)

catalog_size_histogram = meter.create_histogram(
    name="catalog_eatery_count",
    description="Number of eateries held after each parsed refresh",
    unit="1",
)


def record_refresh_success(source: str) -> None:
    """Record a successful catalog refresh.

    Args:
        source: Where the data came from ("memory", "cache" or "network")
    """
    refresh_success_counter.add(1, {"source": source})


def record_refresh_failure(error_type: str) -> None:
    """Record a failed catalog refresh.

    Args:
        error_type: Class name of the surfaced error
    """
    refresh_failure_counter.add(1, {"error_type": error_type})


def record_refresh_duration(source: str, duration_seconds: float) -> None:
    """Record the duration of a catalog refresh."""
    refresh_duration_histogram.record(duration_seconds, {"source": source})


def record_cache_lookup(outcome: str) -> None:
    """Record a response cache lookup ("hit", "stale" or "miss")."""
    cache_lookup_counter.add(1, {"outcome": outcome})


def record_catalog_size(eatery_count: int) -> None:
    """Record how many eateries a parsed refresh produced."""
    catalog_size_histogram.record(eatery_count)
