"""Pausing a virtual user between iterations."""

from __future__ import annotations

import asyncio


async def sleep(seconds: float) -> None:
    """Suspend the calling virtual user for *seconds*.

    Only the current virtual user waits; other users keep running.

    Raises:
        ValueError: If *seconds* is negative or NaN.
    """
    # NaN compares false against everything
    if not seconds >= 0:
        msg = f"sleep duration must be >= 0, got {seconds}"
        raise ValueError(msg)
    await asyncio.sleep(seconds)
