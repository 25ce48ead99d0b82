"""Typer CLI entrypoint for scan-job scheduling."""

from __future__ import annotations

import logging
from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from scanjob.config import ConfigError, ScanJobConfig, load_config
from scanjob.jobs import (
    SCAN_JOB,
    APSchedulerGateway,
    ComponentInstalled,
    EventBus,
    EventKind,
    ReconcileOutcome,
    ScanJobError,
    StaticExecutionContext,
    build_gateway,
    build_listener,
)

app = typer.Typer(help="Antivirus scan-job scheduling CLI")
_CONSOLE = Console()
_LOGGING_CONFIGURED = False

ConfigOption = Annotated[
    Path,
    typer.Option(
        "--config",
        file_okay=True,
        dir_okay=False,
        help="Path to scanjob YAML/JSON config.",
    ),
]


class ReconcileEvent(StrEnum):
    """CLI names for reconcile event kinds."""

    POST_INIT = "post-init"
    INSTALL = "install"


_EVENT_KINDS = {
    ReconcileEvent.POST_INIT: EventKind.POST_INIT_RECHECK,
    ReconcileEvent.INSTALL: EventKind.INSTALL_EVENT,
}


def _configure_logging() -> None:
    """Configure Rich-backed logging once for CLI commands."""
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if _LOGGING_CONFIGURED:
        return
    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(show_path=False, rich_tracebacks=True)],
    )
    _LOGGING_CONFIGURED = True


def _load_config_or_exit(config_path: Path) -> ScanJobConfig:
    """Load config or exit with a rendered error.

    Args:
        config_path: Config file path.

    Returns:
        Loaded config.

    Raises:
        typer.Exit: If config is invalid.
    """
    try:
        return load_config(config_path)
    except ConfigError as exc:
        _CONSOLE.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1) from exc


def _start_gateway(config: ScanJobConfig, config_path: Path) -> APSchedulerGateway:
    """Build and start the scan-job gateway.

    Args:
        config: Loaded scanjob config.
        config_path: Config file handed to the scan callback.

    Returns:
        Started gateway; callers must shut it down.
    """
    gateway = build_gateway(config, config_path=config_path)
    gateway.start()
    return gateway


def _render_outcome(outcome: ReconcileOutcome) -> None:
    """Render one reconcile outcome table.

    Args:
        outcome: Completed reconcile outcome.
    """
    table = Table(title="Reconcile", header_style="bold")
    table.add_column("Job", style="cyan")
    table.add_column("Event")
    table.add_column("Observed")
    table.add_column("Decision", style="green")
    table.add_row(
        outcome.job.value,
        outcome.event_kind.value,
        outcome.observed_state.value,
        outcome.decision.value,
    )
    _CONSOLE.print(table)
    _CONSOLE.print(f"Decision: {outcome.decision.value}")


@app.command("status")
def status(config_path: ConfigOption = Path("scanjob.yaml")) -> None:
    """Show the scan job trigger state."""
    _configure_logging()
    config = _load_config_or_exit(config_path)
    gateway = _start_gateway(config, config_path)
    try:
        payload = gateway.status(SCAN_JOB)
    except ScanJobError as exc:
        _CONSOLE.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1) from exc
    finally:
        gateway.shutdown()
    table = Table(title="Scan job", header_style="bold")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in payload.items():
        table.add_row(key, "-" if value is None else str(value))
    _CONSOLE.print(table)


@app.command("reconcile")
def reconcile(
    event: Annotated[
        ReconcileEvent,
        typer.Option("--event", help="Lifecycle event to reconcile for."),
    ],
    config_path: ConfigOption = Path("scanjob.yaml"),
) -> None:
    """Run one reconciliation of the scan job manually."""
    _configure_logging()
    config = _load_config_or_exit(config_path)
    gateway = _start_gateway(config, config_path)
    listener = build_listener(config, gateway=gateway)
    try:
        if event == ReconcileEvent.POST_INIT:
            outcome = listener.initialize(
                StaticExecutionContext(request_available=True)
            )
        else:
            outcome = listener.reconcile(_EVENT_KINDS[event])
    except ScanJobError as exc:
        _CONSOLE.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1) from exc
    finally:
        gateway.shutdown()
    if outcome is not None:
        _render_outcome(outcome)


@app.command("install")
def install(
    package_id: Annotated[str, typer.Argument(help="Installed package id.")],
    config_path: ConfigOption = Path("scanjob.yaml"),
) -> None:
    """Publish a component-installed event to the scan-job listener."""
    _configure_logging()
    config = _load_config_or_exit(config_path)
    gateway = _start_gateway(config, config_path)
    bus = EventBus()
    bus.subscribe(build_listener(config, gateway=gateway))
    try:
        failures = bus.publish(ComponentInstalled(package_id=package_id))
        state = gateway.get_trigger_state(SCAN_JOB)
    except ScanJobError as exc:
        _CONSOLE.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1) from exc
    finally:
        gateway.shutdown()
    if failures:
        for failure in failures:
            _CONSOLE.print(f"[bold red]{failure.listener}: {failure.error}[/bold red]")
        raise typer.Exit(code=1)
    _CONSOLE.print(f"Handled install of [bold]{package_id}[/bold]")
    _CONSOLE.print(f"Scan job trigger state: {state.value}")


if __name__ == "__main__":
    app()
