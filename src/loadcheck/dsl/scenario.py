"""The ``@scenario`` decorator and the object it produces.

A scenario is one coroutine that performs a single iteration against a
client. The session calls it over and over from every virtual user::

    @scenario(name="Book Lookup")
    async def get_book(client: HttpClient) -> None:
        response = await client.get(TARGET_URL)
        check(response, {"status is 202": lambda r: r.status == 202})
        await sleep(1)
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loadcheck._internal.errors import ScenarioError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from loadcheck.dsl.http_client import HttpClient

    IterationFunc = Callable[[HttpClient], Awaitable[None]]


@dataclass(frozen=True)
class Scenario:
    """A named iteration coroutine.

    Attributes:
        name: Display name used in logs and the summary.
        iteration: ``async def f(client)`` run once per iteration.
    """

    name: str
    iteration: IterationFunc

    async def run_iteration(self, client: HttpClient) -> None:
        await self.iteration(client)


def scenario(*, name: str) -> Callable[[IterationFunc], Scenario]:
    """Turn an ``async def`` taking an ``HttpClient`` into a ``Scenario``.

    Raises:
        ScenarioError: If *name* is blank or the decorated function is not
            a coroutine function.
    """
    if not name.strip():
        msg = "Scenario name must not be empty"
        raise ScenarioError(msg)

    def wrap(func: IterationFunc) -> Scenario:
        if not inspect.iscoroutinefunction(func):
            msg = f"Scenario {name!r}: {func.__qualname__} must be declared with 'async def'"
            raise ScenarioError(msg)
        return Scenario(name=name, iteration=func)

    return wrap
