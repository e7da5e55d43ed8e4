"""Runs a scenario with a fixed number of virtual users on one event loop."""

from __future__ import annotations

import asyncio
import contextlib
import signal
import time
from enum import Enum
from typing import TYPE_CHECKING

from loadcheck._internal.config import LoadCheckConfig
from loadcheck._internal.errors import ConfigError, EngineError
from loadcheck._internal.logging import get_logger
from loadcheck.dsl.checks import recording_checks
from loadcheck.dsl.http_client import HttpClient
from loadcheck.metrics.collector import MetricCollector
from loadcheck.metrics.models import RunResult

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from loadcheck.dsl.scenario import Scenario

logger = get_logger("engine.session")


class SessionState(Enum):
    PENDING = "pending"
    RUNNING = "running"
    DRAINING = "draining"
    FINISHED = "finished"
    FAILED = "failed"


@contextlib.contextmanager
def _stop_on_signals(
    loop: asyncio.AbstractEventLoop, on_signal: Callable[[signal.Signals], None]
) -> Iterator[None]:
    """Route SIGINT and SIGTERM to *on_signal* while the block runs.

    Loops that cannot install handlers (Windows, or a loop outside the main
    thread) keep the default behaviour.
    """
    installed: list[signal.Signals] = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, on_signal, sig)
        except (NotImplementedError, RuntimeError, ValueError):
            logger.debug("Cannot install a handler for %s on this loop", sig.name)
            continue
        installed.append(sig)
    try:
        yield
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)


class LoadSession:
    """Run *scenario* from *users* concurrent virtual users.

    Every virtual user is an ``asyncio.Task`` that owns one ``HttpClient``
    and repeats the scenario's iteration until the session stops. The
    session stops when *duration* elapses, when the shared *iterations*
    budget is used up, on SIGINT/SIGTERM, or on ``request_stop()``. Users
    then get ``config.graceful_stop`` seconds to finish the iteration they
    are in before they are cancelled.

    A session runs once: PENDING -> RUNNING -> DRAINING -> FINISHED, or
    FAILED if the engine itself breaks.
    """

    def __init__(
        self,
        scenario: Scenario,
        *,
        users: int = 1,
        duration: float = 30.0,
        iterations: int | None = None,
        config: LoadCheckConfig | None = None,
    ) -> None:
        if users < 1:
            msg = f"users must be >= 1, got {users}"
            raise ConfigError(msg)
        if not duration > 0:
            msg = f"duration must be > 0, got {duration}"
            raise ConfigError(msg)
        if iterations is not None and iterations < 1:
            msg = f"iterations must be >= 1, got {iterations}"
            raise ConfigError(msg)

        self._scenario = scenario
        self._users = users
        self._duration = duration
        self._budget = iterations
        self._config = config or LoadCheckConfig()

        self._state = SessionState.PENDING
        self._collector = MetricCollector()
        self._stopped = asyncio.Event()
        self._stop_reason: str | None = None
        self._tasks: list[asyncio.Task[None]] = []
        self._live_users = 0

    @property
    def state(self) -> SessionState:
        return self._state

    def request_stop(self) -> None:
        """Ask a running session to wind down."""
        self._stop("requested")

    def _stop(self, reason: str) -> None:
        if self._stop_reason is None:
            self._stop_reason = reason
            logger.info("Stopping session (%s)", reason)
        self._stopped.set()

    def _on_signal(self, sig: signal.Signals) -> None:
        logger.info("Received %s", sig.name)
        self._stop("signal")

    async def run(self) -> RunResult:
        """Run until a stop condition and return the collected totals.

        Raises:
            EngineError: If the session was already run or breaks while
                running.
        """
        if self._state is not SessionState.PENDING:
            msg = f"session already {self._state.value}"
            raise EngineError(msg)

        logger.info(
            "Running %r with %d user(s) for up to %.1fs, iterations=%s",
            self._scenario.name,
            self._users,
            self._duration,
            self._budget if self._budget is not None else "unbounded",
        )
        loop = asyncio.get_running_loop()
        started = time.monotonic()
        self._state = SessionState.RUNNING

        with _stop_on_signals(loop, self._on_signal):
            try:
                self._tasks = [
                    asyncio.create_task(self._virtual_user(n), name=f"loadcheck-vu-{n}")
                    for n in range(self._users)
                ]
                try:
                    await asyncio.wait_for(self._stopped.wait(), timeout=self._duration)
                except TimeoutError:
                    self._stop("duration")
            except Exception as exc:
                self._state = SessionState.FAILED
                msg = f"session for {self._scenario.name!r} failed"
                raise EngineError(msg) from exc
            finally:
                if self._state is not SessionState.FAILED:
                    self._state = SessionState.DRAINING
                await self._drain()

        elapsed = time.monotonic() - started
        summary = self._collector.summarize(elapsed_seconds=elapsed)
        self._state = SessionState.FINISHED
        logger.info(
            "Finished in %.1fs: %d iteration(s), %d request(s), checks %d passed / %d failed",
            elapsed,
            summary.iterations,
            summary.total_requests,
            summary.checks_passed,
            summary.checks_failed,
        )
        return RunResult(
            scenario_name=self._scenario.name,
            users=self._users,
            duration_seconds=elapsed,
            stop_reason=self._stop_reason or "requested",
            summary=summary,
        )

    def _take_iteration(self) -> bool:
        if self._budget is None:
            return True
        if self._budget == 0:
            return False
        self._budget -= 1
        return True

    async def _virtual_user(self, number: int) -> None:
        self._live_users += 1
        try:
            async with HttpClient(
                on_request=self._collector.record, timeout=self._config.request_timeout
            ) as client:
                with recording_checks(self._collector.record_check):
                    while not self._stopped.is_set() and self._take_iteration():
                        await self._iterate(number, client)
        finally:
            self._live_users -= 1
            if self._budget == 0 and self._live_users == 0:
                self._stop("iterations")

    async def _iterate(self, number: int, client: HttpClient) -> None:
        try:
            await self._scenario.run_iteration(client)
        except asyncio.CancelledError:
            self._collector.record_iteration(interrupted=True)
            raise
        except Exception:
            self._collector.record_iteration(interrupted=True)
            logger.debug("Iteration of user %d raised", number, exc_info=True)
        else:
            self._collector.record_iteration()

    async def _drain(self) -> None:
        """Give users the grace period, then cancel the stragglers."""
        pending = {task for task in self._tasks if not task.done()}
        grace = self._config.graceful_stop
        if pending and grace > 0:
            _, pending = await asyncio.wait(pending, timeout=grace)
        if pending:
            logger.info("Cancelling %d user(s) still running after %.1fs", len(pending), grace)
            for task in pending:
                task.cancel()
        outcomes = await asyncio.gather(*self._tasks, return_exceptions=True)
        for outcome in outcomes:
            if isinstance(outcome, Exception):
                logger.warning("Virtual user crashed", exc_info=outcome)
