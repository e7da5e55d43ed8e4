"""Fixtures shared by the unit, integration and e2e suites."""

from __future__ import annotations

import asyncio
import socket
import threading
from typing import TYPE_CHECKING

import pytest
from aiohttp import web

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Iterator
    from pathlib import Path

BOOK_ID = "2aee4051-94e0-494b-8a3d-f03954fa0556"


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark each test after the suite directory it lives in."""
    for item in items:
        for suite in ("unit", "integration", "e2e"):
            if f"/{suite}/" in str(item.fspath):
                item.add_marker(getattr(pytest.mark, suite))
                break


def _unused_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def closed_port_url() -> str:
    """Base URL of a localhost port with no listener."""
    return f"http://127.0.0.1:{_unused_port()}"


# Stand-in for the book API: the deployed stage answers lookups with 202.
routes = web.RouteTableDef()


@routes.get("/dev/{book_id}")
async def _lookup(request: web.Request) -> web.Response:
    return web.json_response({"id": request.match_info["book_id"]}, status=202)


@routes.get("/status/{code:\\d+}")
async def _fixed_status(request: web.Request) -> web.Response:
    return web.Response(status=int(request.match_info["code"]))


@routes.get("/slow")
async def _slow(request: web.Request) -> web.Response:
    await asyncio.sleep(float(request.query.get("seconds", "0.1")))
    return web.Response(status=202)


async def _start_book_api(port: int) -> web.AppRunner:
    app = web.Application()
    app.add_routes(routes)
    runner = web.AppRunner(app)
    await runner.setup()
    await web.TCPSite(runner, "127.0.0.1", port).start()
    return runner


@pytest.fixture
async def book_server() -> AsyncIterator[str]:
    """Book API on the test's own event loop; yields its base URL."""
    port = _unused_port()
    runner = await _start_book_api(port)
    yield f"http://127.0.0.1:{port}"
    await runner.cleanup()


@pytest.fixture
def threaded_book_server() -> Iterator[str]:
    """Book API on a background loop, for code that calls ``asyncio.run``."""
    port = _unused_port()
    loop = asyncio.new_event_loop()
    ready = threading.Event()

    def _serve() -> None:
        asyncio.set_event_loop(loop)
        runner = loop.run_until_complete(_start_book_api(port))
        ready.set()
        loop.run_forever()
        loop.run_until_complete(runner.cleanup())
        loop.close()

    thread = threading.Thread(target=_serve, daemon=True)
    thread.start()
    assert ready.wait(timeout=5.0), "book API did not start"
    yield f"http://127.0.0.1:{port}"
    loop.call_soon_threadsafe(loop.stop)
    thread.join(timeout=5.0)


@pytest.fixture
def write_scenario(tmp_path: Path) -> Callable[..., Path]:
    """Write a book-lookup scenario aimed at *url* and return its path.

    The iteration matches ``scenarios/book_lookup.py`` except for the URL
    and a much shorter pause.
    """

    def _write(url: str, *, name: str = "Book Lookup (test)", pause: float = 0.01) -> Path:
        path = tmp_path / "book_lookup_test.py"
        path.write_text(
            "from loadcheck import check, scenario, sleep\n"
            "\n"
            f"@scenario(name={name!r})\n"
            "async def get_book(client):\n"
            f"    response = await client.get({url!r}, name='Get Book')\n"
            "    check(response, {'status is 200': lambda r: r.status == 202})\n"
            f"    await sleep({pause!r})\n"
        )
        return path

    return _write
