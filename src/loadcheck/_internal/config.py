"""Configuration loading for loadcheck."""

from __future__ import annotations

import os
from dataclasses import dataclass

from loadcheck._internal.errors import ConfigError


@dataclass(frozen=True)
class LoadCheckConfig:
    """Runtime configuration.

    Scenario files never read this; it only tunes the runtime that
    executes them.

    Attributes:
        request_timeout: Per-request timeout in seconds.
        graceful_stop: Seconds to wait for in-flight iterations at shutdown
            before cancelling them.
    """

    request_timeout: float = 60.0
    graceful_stop: float = 5.0


def _read_float(name: str, default: str) -> float:
    raw = os.environ.get(name, default)
    try:
        return float(raw)
    except ValueError:
        msg = f"{name} must be a number, got: {raw!r}"
        raise ConfigError(msg) from None


def load_config() -> LoadCheckConfig:
    """Load configuration from environment variables with defaults.

    Environment variables:
        LOADCHECK_TIMEOUT: Request timeout in seconds (default: 60.0).
        LOADCHECK_GRACEFUL_STOP: Shutdown grace period in seconds
            (default: 5.0).

    Returns:
        Populated LoadCheckConfig instance.

    Raises:
        ConfigError: If an environment variable has an invalid value.
    """
    timeout = _read_float("LOADCHECK_TIMEOUT", "60.0")
    if not timeout > 0:
        msg = f"LOADCHECK_TIMEOUT must be positive, got: {timeout}"
        raise ConfigError(msg)

    graceful_stop = _read_float("LOADCHECK_GRACEFUL_STOP", "5.0")
    if not graceful_stop >= 0:
        msg = f"LOADCHECK_GRACEFUL_STOP must be >= 0, got: {graceful_stop}"
        raise ConfigError(msg)

    return LoadCheckConfig(
        request_timeout=timeout,
        graceful_stop=graceful_stop,
    )
