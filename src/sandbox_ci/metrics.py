"""
Prometheus metrics for sandbox-ci.

Each invocation is a short-lived process, so metrics live in a dedicated
registry and are written to a node-exporter textfile at exit instead of being
served over HTTP.
"""

from contextlib import contextmanager
from typing import Iterator

from prometheus_client import CollectorRegistry, Counter, Histogram, write_to_textfile


registry = CollectorRegistry()

notifications_total = Counter(
    "sandbox_ci_notifications_total",
    "Total number of notifications sent to a provider",
    ["provider", "kind", "event"],  # kind = status|comment
    registry=registry,
)

notification_errors_total = Counter(
    "sandbox_ci_notification_errors_total",
    "Total number of notifications that failed to send",
    ["provider", "kind", "error_type"],
    registry=registry,
)

notification_duration_seconds = Histogram(
    "sandbox_ci_notification_duration_seconds",
    "Time spent sending notifications",
    ["provider", "kind"],
    registry=registry,
)

notifications_skipped_total = Counter(
    "sandbox_ci_notifications_skipped_total",
    "Total number of notifications that were not sent",
    ["reason"],  # reason = unknown_provider|missing_credentials|disabled|sterile|no_pr
    registry=registry,
)

sandbox_steps_total = Counter(
    "sandbox_ci_sandbox_steps_total",
    "Total number of remote sandbox build steps run",
    ["result"],  # result = success|failure
    registry=registry,
)


@contextmanager
def track_notification(provider: str, kind: str) -> Iterator[None]:
    """Time one outbound provider call; a raised error is counted by type."""
    with notification_duration_seconds.labels(provider, kind).time():
        try:
            yield
        except Exception as e:
            notification_errors_total.labels(provider, kind, type(e).__name__).inc()
            raise


def write_metrics(path: str) -> None:
    write_to_textfile(path, registry)
