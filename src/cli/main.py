"""gocd-provision CLI (typer)."""

from __future__ import annotations

import subprocess
from typing import NoReturn, Optional

import httpx
import typer
from rich.console import Console
from rich.markup import escape

from adapters.go_server import GoServerHost
from adapters.gocd_api import GoCDClient
from adapters.shell import ShellRunner
from cli import doctor
from cli.ui_components import build_report_panel, print_banner
from core.config import AppSettings
from core.errors import ProvisionError
from core.logger import configure_logging
from core.services.provisioning import ServerConfiguration
from core.services.readiness import ServerReadiness

app = typer.Typer(no_args_is_help=True, help="Provision and validate a GoCD test server.")
app.add_typer(doctor.app, name="doctor")

_console = Console()

# Failures reported as a one-line error instead of a traceback.
_HANDLED_ERRORS = (
    ProvisionError,
    httpx.HTTPError,
    subprocess.CalledProcessError,
    OSError,
    ValueError,
)


class _State:
    settings: AppSettings | None = None


_state = _State()


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override GOCD_PROVISION_LOG_LEVEL."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Skip the banner."),
) -> None:
    settings = AppSettings()
    configure_logging(log_level or settings.log_level)
    _state.settings = settings
    if not quiet:
        print_banner(_console)


def _settings() -> AppSettings:
    return _state.settings or AppSettings()


def _fail(exc: Exception) -> NoReturn:
    _console.print(f"[red]Error:[/red] {escape(str(exc))}")
    raise typer.Exit(code=1)


@app.command()
def provision() -> None:
    """Wait for the server, set up features and run the validation pipeline."""

    settings = _settings()
    try:
        with GoCDClient(settings) as client:
            host = GoServerHost(settings, ShellRunner())
            readiness = ServerReadiness(settings, client)
            report = ServerConfiguration(settings, client, host, readiness).run()
    except _HANDLED_ERRORS as exc:
        _fail(exc)
    _console.print(build_report_panel(report))


@app.command()
def wait() -> None:
    """Wait until the server (and postgres, if enabled) and an agent are up."""

    settings = _settings()
    try:
        with GoCDClient(settings) as client:
            ServerReadiness(settings, client).service_status()
    except _HANDLED_ERRORS as exc:
        _fail(exc)
    _console.print("[green]Server and agent are up[/green]")


@app.command(name="postgres-addon")
def postgres_addon(
    version: Optional[str] = typer.Argument(None, help="Full GoCD version (`<version>-<build>`); defaults to GO_VERSION."),
) -> None:
    """Stop the server and switch it to the PostgreSQL addon."""

    settings = _settings()
    core_version = version or settings.go_version
    if not core_version:
        raise typer.BadParameter("a version is required (argument or GO_VERSION)")
    try:
        jar = GoServerHost(settings, ShellRunner()).setup_postgres_addon(core_version)
    except _HANDLED_ERRORS as exc:
        _fail(exc)
    _console.print(f"[green]Installed postgres addon:[/green] {jar}")


@app.command(name="server-version")
def server_version() -> None:
    """Print the full version of the running server."""

    try:
        with GoCDClient(_settings()) as client:
            version = client.version()
    except _HANDLED_ERRORS as exc:
        _fail(exc)
    _console.print(version.full_version)


def run() -> None:
    app()
