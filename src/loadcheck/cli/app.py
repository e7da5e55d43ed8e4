"""The ``loadcheck`` command line."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from loadcheck import __version__
from loadcheck._internal.errors import LoadCheckError
from loadcheck.engine.runner import run_scenario_file

if TYPE_CHECKING:
    from loadcheck.metrics.models import RunResult

app = typer.Typer(
    name="loadcheck",
    help="Drive an HTTP endpoint with virtual users and tally named checks.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console(stderr=True)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"loadcheck {__version__}")
        raise typer.Exit


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Print the version and exit.",
        callback=_show_version,
        is_eager=True,
    ),
) -> None:
    """loadcheck: HTTP load tests with named checks."""


def _totals_table(result: RunResult) -> Table:
    s = result.summary
    table = Table(title=f"{result.scenario_name}: stopped on {result.stop_reason}", expand=True)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    rows = [
        ("Users", str(result.users)),
        ("Duration", f"{result.duration_seconds:.1f}s"),
        ("Iterations", str(s.iterations)),
        ("Interrupted iterations", str(s.interrupted_iterations)),
        ("Requests", str(s.total_requests)),
        ("Failed requests", f"{s.failed_requests} ({s.error_rate:.2%})"),
        ("Requests/sec", f"{s.requests_per_second:.1f}"),
        ("Latency avg", f"{s.latency_avg:.1f}ms"),
        ("Latency p95", f"{s.latency_p95:.1f}ms"),
        ("Latency p99", f"{s.latency_p99:.1f}ms"),
    ]
    for label, value in rows:
        table.add_row(label, value)
    return table


def _checks_table(result: RunResult) -> Table:
    table = Table(title="Checks", header_style="bold cyan", expand=True)
    table.add_column("")
    table.add_column("Check")
    for header in ("Passes", "Fails", "Pass rate"):
        table.add_column(header, justify="right")
    for item in result.summary.checks.values():
        table.add_row(
            "[green]✓[/green]" if item.fails == 0 else "[red]✗[/red]",
            item.name,
            str(item.passes),
            str(item.fails),
            f"{item.pass_rate:.2%}",
        )
    return table


@app.command("run")
def run(
    scenario_file: Path = typer.Argument(
        ...,
        help="Python file declaring one @scenario.",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    users: int = typer.Option(1, "--users", "-u", min=1, help="Concurrent virtual users."),
    duration: float = typer.Option(
        30.0, "--duration", "-d", min=0.1, help="Upper bound on run time, in seconds."
    ),
    iterations: int | None = typer.Option(
        None, "--iterations", "-i", min=1, help="Iterations shared by all users; stop once used."
    ),
    fail_on_checks: bool = typer.Option(
        False, "--fail-on-checks", help="Exit 1 when any check evaluation failed."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
    json_logs: bool = typer.Option(False, "--json-logs", help="Log one JSON object per line."),
) -> None:
    """Run a scenario file and print its request and check totals."""
    console.print(
        Panel(
            f"{scenario_file.name}\n"
            f"{users} user(s), up to {duration:g}s, "
            f"{iterations if iterations is not None else 'unbounded'} iteration(s)",
            title="loadcheck",
            border_style="cyan",
        )
    )

    try:
        result = run_scenario_file(
            scenario_file,
            users=users,
            duration=duration,
            iterations=iterations,
            log_level=logging.DEBUG if verbose else logging.INFO,
            json_logs=json_logs,
        )
    except LoadCheckError as exc:
        console.print(f"[red]Load test failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    console.print(_totals_table(result))
    if result.summary.checks:
        console.print(_checks_table(result))

    failed = result.summary.checks_failed
    if fail_on_checks and failed:
        console.print(f"[red]FAIL:[/red] {failed} check evaluation(s) failed")
        raise typer.Exit(code=1)
    console.print("[green]Load test completed.[/green]")
