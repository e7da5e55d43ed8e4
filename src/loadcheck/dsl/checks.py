"""Named boolean assertions against responses.

A failed check is data, not an error: ``check`` never raises because of an
assertion outcome. Results go to the recorder bound to the current virtual
user, which the session points at its metric collector.
"""

from __future__ import annotations

import contextlib
import contextvars
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from loadcheck._internal.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping

logger = get_logger("dsl.checks")


@dataclass(frozen=True)
class CheckResult:
    """Outcome of one named check.

    Attributes:
        name: The check label, e.g. ``"status is 200"``.
        passed: Whether the predicate held.
        timestamp: Monotonic time at which the check was evaluated.
    """

    name: str
    passed: bool
    timestamp: float


_active_recorder: contextvars.ContextVar[Callable[[CheckResult], None] | None] = (
    contextvars.ContextVar("loadcheck_check_recorder", default=None)
)


@contextlib.contextmanager
def recording_checks(recorder: Callable[[CheckResult], None]) -> Iterator[None]:
    """Route ``check`` outcomes in the current context to *recorder*.

    Each asyncio task runs in its own copy of the context, so binding a
    recorder inside a virtual user's task does not leak into others.
    """
    token = _active_recorder.set(recorder)
    try:
        yield
    finally:
        _active_recorder.reset(token)


def check(value: Any, checks: Mapping[str, Callable[[Any], object]]) -> bool:
    """Evaluate named predicates against *value* and record each outcome.

    Predicates run in insertion order. A predicate that raises counts as a
    failure for its label.

    Args:
        value: The object under test, usually a ``Response``.
        checks: Mapping of label to predicate.

    Returns:
        True if every predicate passed (including when *checks* is empty).
    """
    recorder = _active_recorder.get()
    all_passed = True

    for name, predicate in checks.items():
        try:
            passed = bool(predicate(value))
        except Exception:
            logger.debug("Check %r raised; counting it as failed", name, exc_info=True)
            passed = False

        result = CheckResult(name=name, passed=passed, timestamp=time.monotonic())
        if recorder is not None:
            recorder(result)
        else:
            logger.debug("Check %r %s (no recorder bound)", name, "passed" if passed else "failed")

        all_passed = all_passed and passed

    return all_passed
