"""aiohttp-backed client handed to every scenario iteration."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import aiohttp

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass
class RequestMetric:
    """One finished, failed or cancelled request.

    Attributes:
        timestamp: Monotonic time at which the request was sent.
        name: Grouping label, the URL unless the caller passed ``name``.
        method: HTTP method.
        url: Requested URL.
        status_code: Response status, 0 when no response arrived.
        latency_ms: Milliseconds until the body was read or the request
            ended.
        content_length: Body size in bytes.
        error: ``"cancelled"`` or ``"<ExceptionType>: <message>"`` when the
            request did not complete, else None.
    """

    timestamp: float
    name: str
    method: str
    url: str
    status_code: int
    latency_ms: float
    content_length: int
    error: str | None = None


@dataclass(frozen=True)
class Response:
    """Status, headers and body of a completed request.

    The body is read before scenario code sees the response, so the
    connection is already back in the pool when checks run.
    """

    status: int
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    latency_ms: float = 0.0

    def text(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding, errors="replace")


class HttpClient:
    """Times each request and passes a ``RequestMetric`` to *on_request*.

    Must be entered with ``async with`` before use; each virtual user owns
    one client and therefore one ``aiohttp.ClientSession``.
    """

    def __init__(
        self,
        on_request: Callable[[RequestMetric], None] | None = None,
        timeout: float = 60.0,
    ) -> None:
        self._on_request = on_request
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> HttpClient:
        self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def get(self, url: str, *, name: str | None = None, **kwargs: object) -> Response:
        """GET *url* and return the fully read response.

        Error statuses are returned, not raised. Transport failures
        (``aiohttp.ClientError``, ``TimeoutError``) propagate after the
        metric has been emitted.
        """
        if self._session is None:
            msg = "HttpClient must be used as an async context manager"
            raise RuntimeError(msg)

        metric = RequestMetric(
            timestamp=time.monotonic(),
            name=name or url,
            method="GET",
            url=url,
            status_code=0,
            latency_ms=0.0,
            content_length=0,
        )
        try:
            async with self._session.get(url, **kwargs) as resp:  # type: ignore[arg-type]
                metric.status_code = resp.status
                body = await resp.read()
                metric.content_length = len(body)
                headers = dict(resp.headers)
        except asyncio.CancelledError:
            metric.error = "cancelled"
            raise
        except Exception as exc:
            metric.error = f"{type(exc).__name__}: {exc}"
            raise
        finally:
            metric.latency_ms = (time.monotonic() - metric.timestamp) * 1000
            if self._on_request is not None:
                self._on_request(metric)

        return Response(
            status=metric.status_code,
            url=url,
            headers=headers,
            body=body,
            latency_ms=metric.latency_ms,
        )
