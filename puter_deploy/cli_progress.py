"""Console rendering and progress helpers for the deploy CLI."""
from __future__ import annotations

import time
from typing import Any, Dict, Optional

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

console = Console()

PHASE_LABELS = {
    "directory": "Ensuring remote directory",
    "collect": "Collecting files",
    "upload": "Uploading",
    "binding": "Reconciling subdomain",
}


def mask_secret(value: Optional[str]) -> str:
    if not value:
        return "(missing)"
    if len(value) <= 8:
        return "*" * len(value)
    return f"{value[:4]}…{'*' * 4}"


def render_configuration_summary(config: Dict[str, Any]) -> None:
    """Render startup configuration summary."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column(style="white")

    for key, value in config.items():
        rendered = "-" if value is None else str(value)
        table.add_row(key, rendered)

    panel = Panel(
        table,
        title="[bold green]puter-deploy[/bold green]",
        subtitle="[dim]deploy to Puter hosting[/dim]",
        border_style="blue",
    )
    console.print(panel)


def render_result(result: Any) -> None:
    """Render the final deploy outcome."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column(style="white")
    table.add_row("Files", str(result.deployed_files))
    table.add_row("Binding", result.binding_action.value)
    table.add_row("URL", f"[link={result.deployment_url}]{result.deployment_url}[/link]")
    console.print(Panel(table, title="[bold green]Deployed[/bold green]", border_style="green"))


class DeployProgressDisplay:
    """Event-based console display for a deploy run."""

    def __init__(self):
        self._started_at = time.monotonic()
        self._upload_task: Optional[TaskID] = None
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold cyan]{task.description}", justify="left"),
            BarColumn(bar_width=42),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            expand=False,
            console=console,
            transient=True,
        )

    def on_phase_start(self, phase_name: str) -> None:
        label = PHASE_LABELS.get(phase_name, phase_name)
        console.print(f"[dim]{time.strftime('%H:%M:%S')}[/dim] [blue]{label}...[/blue]")

    def on_discovered(self, count: int) -> None:
        if count <= 0:
            return
        self._progress.start()
        self._upload_task = self._progress.add_task("Uploading", total=count)

    def on_progress(self, progress: Any) -> None:
        if self._upload_task is None:
            return
        self._progress.update(self._upload_task, completed=progress.completed, total=progress.total)

    def on_finish(self, result: Any) -> None:
        self.stop()
        elapsed = time.monotonic() - self._started_at
        console.print(f"[bold]Finished[/bold] in {elapsed:.1f}s")
        render_result(result)

    def on_error(self, error: BaseException) -> None:
        self.stop()
        console.print(f"[red]Error:[/red] {error}")

    def stop(self) -> None:
        if self._upload_task is not None:
            self._progress.stop()
            self._upload_task = None
