"""In-memory metric collection for a test session."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from loadcheck._internal.logging import get_logger
from loadcheck.metrics.models import CheckSummary, RunSummary

if TYPE_CHECKING:
    from loadcheck.dsl.checks import CheckResult
    from loadcheck.dsl.http_client import RequestMetric

logger = get_logger("metrics.collector")


def _compute_latency_stats(
    latencies: list[float],
) -> tuple[float, float, float, float, float, float]:
    """Compute latency statistics.

    Args:
        latencies: Latency values in milliseconds.

    Returns:
        Tuple of (min, max, avg, p50, p95, p99).
    """
    if not latencies:
        return (0.0, 0.0, 0.0, 0.0, 0.0, 0.0)

    arr = np.array(latencies, dtype=np.float64)
    p50, p95, p99 = np.percentile(arr, [50.0, 95.0, 99.0])

    return (
        float(np.min(arr)),
        float(np.max(arr)),
        float(np.mean(arr)),
        float(p50),
        float(p95),
        float(p99),
    )


class MetricCollector:
    """Receives request metrics, check results and iteration outcomes.

    ``record`` is passed to ``HttpClient`` as its ``on_request`` hook and
    ``record_check`` is bound as the check recorder of every virtual user.
    All methods are called from the event loop thread only.
    """

    def __init__(self) -> None:
        self._latencies: list[float] = []
        self._total_requests = 0
        self._failed_requests = 0
        self._iterations = 0
        self._interrupted_iterations = 0
        self._checks: dict[str, CheckSummary] = {}

    def record(self, metric: RequestMetric) -> None:
        """Record one HTTP request.

        A request that raised, was cancelled or never got a status is a
        failure, and its partial latency stays out of the percentiles.
        """
        self._total_requests += 1
        if metric.error is not None or metric.status_code == 0:
            self._failed_requests += 1
            return
        self._latencies.append(metric.latency_ms)
        if metric.status_code >= 400:
            self._failed_requests += 1

    def record_check(self, result: CheckResult) -> None:
        """Record one check outcome under its label."""
        summary = self._checks.get(result.name)
        if summary is None:
            summary = self._checks[result.name] = CheckSummary(name=result.name)
        if result.passed:
            summary.passes += 1
        else:
            summary.fails += 1

    def record_iteration(self, *, interrupted: bool = False) -> None:
        """Record the end of one iteration."""
        if interrupted:
            self._interrupted_iterations += 1
        else:
            self._iterations += 1

    def summarize(self, elapsed_seconds: float) -> RunSummary:
        """Build a RunSummary of everything recorded so far.

        Args:
            elapsed_seconds: Run duration, used for the request rate.
        """
        lat_min, lat_max, lat_avg, p50, p95, p99 = _compute_latency_stats(self._latencies)
        total = self._total_requests
        return RunSummary(
            total_requests=total,
            failed_requests=self._failed_requests,
            error_rate=self._failed_requests / total if total else 0.0,
            requests_per_second=total / elapsed_seconds if elapsed_seconds > 0 else 0.0,
            latency_min=lat_min,
            latency_max=lat_max,
            latency_avg=lat_avg,
            latency_p50=p50,
            latency_p95=p95,
            latency_p99=p99,
            iterations=self._iterations,
            interrupted_iterations=self._interrupted_iterations,
            checks={
                name: CheckSummary(name=name, passes=c.passes, fails=c.fails)
                for name, c in self._checks.items()
            },
        )
