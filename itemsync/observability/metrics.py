"""Prometheus metrics for the mutation engine."""

import time
from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import Counter, Histogram

REMOTE_CALLS = Counter(
    "itemsync_remote_calls_total",
    "Remote validation and delete calls",
    labelnames=["operation", "outcome"],
)

REMOTE_CALL_LATENCY = Histogram(
    "itemsync_remote_call_latency_seconds",
    "Latency of remote calls in seconds",
    labelnames=["operation"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

LOCAL_UPDATES = Counter(
    "itemsync_local_updates_total",
    "Edits applied without a remote round-trip",
)

RECONCILED_ITEMS = Counter(
    "itemsync_reconciled_items_total",
    "Items folded back into the stores after a remote call",
    labelnames=["outcome"],
)

DELETED_ITEMS = Counter(
    "itemsync_deleted_items_total",
    "Items removed by delete requests",
    labelnames=["outcome"],
)


@contextmanager
def track_remote_call(operation: str, enabled: bool = True) -> Iterator[None]:
    """Record latency and outcome of one remote call."""
    if not enabled:
        yield
        return

    start = time.perf_counter()
    try:
        yield
    except Exception:
        REMOTE_CALLS.labels(operation=operation, outcome="failure").inc()
        raise
    else:
        REMOTE_CALLS.labels(operation=operation, outcome="success").inc()
    finally:
        REMOTE_CALL_LATENCY.labels(operation=operation).observe(time.perf_counter() - start)
