"""Blocking entry point: load a scenario file and run it to completion."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from loadcheck._internal.config import load_config
from loadcheck._internal.logging import get_logger, setup_logging
from loadcheck.dsl.loader import load_scenario
from loadcheck.engine.session import LoadSession

if TYPE_CHECKING:
    from loadcheck.metrics.models import RunResult

logger = get_logger("engine.runner")


def run_scenario_file(
    scenario_path: str | Path,
    *,
    users: int = 1,
    duration: float = 30.0,
    iterations: int | None = None,
    log_level: int = logging.INFO,
    json_logs: bool = False,
) -> RunResult:
    """Configure logging, read the environment, then run the file's scenario.

    Blocks on a fresh event loop until the session stops.

    Raises:
        ScenarioError: If the file cannot be loaded.
        ConfigError: If the environment or the arguments are invalid.
        EngineError: If the session breaks.
    """
    setup_logging(log_level, json_format=json_logs)
    config = load_config()

    path = Path(scenario_path).resolve()
    scenario = load_scenario(path)
    logger.debug("Loaded scenario %r from %s", scenario.name, path)

    session = LoadSession(
        scenario,
        users=users,
        duration=duration,
        iterations=iterations,
        config=config,
    )
    return asyncio.run(session.run())
