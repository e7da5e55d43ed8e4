"""Run summary dataclasses for loadcheck."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class CheckSummary:
    """Pass/fail tally for one check label.

    Attributes:
        name: The check label.
        passes: Number of evaluations that passed.
        fails: Number of evaluations that failed.
    """

    name: str
    passes: int = 0
    fails: int = 0

    @property
    def total(self) -> int:
        return self.passes + self.fails

    @property
    def pass_rate(self) -> float:
        """Fraction of evaluations that passed (0.0 when never evaluated)."""
        return self.passes / self.total if self.total else 0.0


@dataclass
class RunSummary:
    """Totals for a whole run.

    Attributes:
        total_requests: Number of HTTP requests issued.
        failed_requests: Requests that raised, were cancelled, or got no
            status or a status >= 400.
        error_rate: ``failed_requests / total_requests`` (0.0 to 1.0).
        requests_per_second: Average request rate over the run.
        latency_min: Minimum latency in milliseconds. Latency figures
            cover completed requests only.
        latency_max: Maximum latency in milliseconds.
        latency_avg: Mean latency in milliseconds.
        latency_p50: 50th percentile latency (ms).
        latency_p95: 95th percentile latency (ms).
        latency_p99: 99th percentile latency (ms).
        iterations: Iterations that ran to completion.
        interrupted_iterations: Iterations ended by an exception.
        checks: Per-label check tallies, in first-seen order.
    """

    total_requests: int = 0
    failed_requests: int = 0
    error_rate: float = 0.0
    requests_per_second: float = 0.0
    latency_min: float = 0.0
    latency_max: float = 0.0
    latency_avg: float = 0.0
    latency_p50: float = 0.0
    latency_p95: float = 0.0
    latency_p99: float = 0.0
    iterations: int = 0
    interrupted_iterations: int = 0
    checks: dict[str, CheckSummary] = field(default_factory=dict)

    @property
    def checks_passed(self) -> int:
        return sum(c.passes for c in self.checks.values())

    @property
    def checks_failed(self) -> int:
        return sum(c.fails for c in self.checks.values())


@dataclass
class RunResult:
    """What a finished session hands back.

    Attributes:
        scenario_name: Name of the scenario that ran.
        users: Number of concurrent virtual users.
        duration_seconds: Wall-clock time from start to the last user
            exiting.
        stop_reason: ``"duration"``, ``"iterations"``, ``"signal"`` or
            ``"requested"``.
        summary: Request, iteration and check totals.
    """

    scenario_name: str
    users: int
    duration_seconds: float
    stop_reason: str
    summary: RunSummary = field(default_factory=RunSummary)
