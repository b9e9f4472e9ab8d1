"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- Lets `provision` and `doctor` share tables and panels.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.api_versions import MediaTypes
from core.domain.models import ProvisionReport


def print_banner(console: Console) -> None:
    title = Text("gocd-provision", style="bold cyan")
    subtitle = Text("Provision • Configure • Validate a GoCD test server", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_media_types_table(media_types: MediaTypes) -> Table:
    """Accept headers the harness will send to this server version."""

    table = Table(title=f"API media types for GoCD {media_types.version}")
    table.add_column("Endpoint", style="cyan", no_wrap=True)
    table.add_column("Accept", style="white")
    for endpoint, media_type in media_types.as_rows():
        table.add_row(endpoint, media_type)
    return table


def build_report_panel(report: ProvisionReport) -> Panel:
    ok = report.pipeline_passed
    body = Text()
    body.append(f"Server: {report.server_version}\n")
    body.append(f"Applied: {', '.join(report.features_applied) or '-'}\n")
    body.append(f"Skipped: {', '.join(report.features_skipped) or '-'}\n", style="dim")
    body.append(
        f"Pipeline {report.pipeline_name}: {'Passed' if ok else 'Not passed'}",
        style="green" if ok else "red",
    )
    title = Text("Provisioning report", style="bold yellow")
    return Panel(body, title=title, border_style="green" if ok else "red")
