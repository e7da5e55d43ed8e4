"""loadcheck: HTTP load tests with named checks, written as Python code."""

from __future__ import annotations

from loadcheck.dsl.checks import CheckResult, check
from loadcheck.dsl.http_client import HttpClient, RequestMetric, Response
from loadcheck.dsl.scenario import Scenario, scenario
from loadcheck.dsl.timing import sleep

__version__ = "0.1.0"

__all__ = [
    "CheckResult",
    "HttpClient",
    "RequestMetric",
    "Response",
    "Scenario",
    "check",
    "scenario",
    "sleep",
]
