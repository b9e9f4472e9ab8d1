"""Doctor command for environment diagnostics."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adapters.gocd_api import GoCDClient
from cli.ui_components import build_media_types_table
from core.api_versions import MediaTypes
from core.config import AppSettings
from core.domain.models import ServerVersion

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_server(settings: AppSettings) -> tuple[bool, str, ServerVersion | None]:
    try:
        with GoCDClient(settings) as client:
            version = client.version()
        return True, f"GoCD {version.full_version}", version
    except Exception as exc:
        return False, escape(str(exc)), None


@app.command()
def run() -> None:
    """Show the effective configuration and probe the server."""

    settings = AppSettings()

    table = Table(title="gocd-provision Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Server URL", "OK", settings.api_url)
    table.add_row("Postgres addon", "ON" if settings.use_postgres else "OFF", settings.go_version or "GO_VERSION not set")
    if settings.use_postgres and not settings.addon_builds_file.exists():
        table.add_row("Addon catalogue", "FAIL", f"{settings.addon_builds_file} not found")
    if not settings.pipeline_config_file.exists():
        table.add_row("Pipeline config", "FAIL", f"{settings.pipeline_config_file} not found")
    else:
        table.add_row("Pipeline config", "OK", str(settings.pipeline_config_file))

    for label, url in (
        ("Elastic agents plugin", settings.ea_plugin_download_url),
        ("Analytics plugin", settings.analytics_plugin_download_url),
    ):
        table.add_row(label, "OK" if url else "OPTIONAL", url or "No download URL -> skipped")
    if (settings.ea_plugin_download_url or settings.analytics_plugin_download_url) and not settings.extensions_user:
        table.add_row("Extensions credentials", "WARN", "EXTENSIONS_USER not set")

    ok_server, detail_server, version = _check_server(settings)
    table.add_row("Server reachable", "OK" if ok_server else "FAIL", detail_server)

    _console.print(table)

    if version is not None:
        _console.print(build_media_types_table(MediaTypes.for_version(version.go_version)))
