"""Console rendering and progress helpers for the dSYM uploader CLI."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)
from rich.markup import escape
from rich.table import Table

from .models import UploadResult
from .orchestrator.models import RunSummary


SUCCESS_MESSAGE = "dSYMs successfully uploaded to AppDynamics!"
SECRET_MASK = "********"

console = Console()


def _human_size(value: int) -> str:
    size = float(max(value, 0))
    units = ["B", "KB", "MB", "GB", "TB"]
    unit_idx = 0
    while size >= 1024.0 and unit_idx < len(units) - 1:
        size /= 1024.0
        unit_idx += 1
    if unit_idx == 0:
        return f"{int(size)} {units[unit_idx]}"
    return f"{size:.2f} {units[unit_idx]}"


def mask_secret(value: Optional[str]) -> str:
    return SECRET_MASK if value else "(missing)"


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
        title="[bold green]appdynamics-dsym[/bold green]",
        subtitle="[dim]dSYM uploader[/dim]",
        border_style="blue",
    )
    console.print(panel)


class UploadProgressDisplay:
    """Per-file byte progress for a sequential upload run."""

    def __init__(self):
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold cyan]{task.fields[filename]}", justify="left"),
            BarColumn(bar_width=42),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            DownloadColumn(),
            TransferSpeedColumn(),
            TimeRemainingColumn(),
            expand=False,
            console=console,
        )
        self._tasks: Dict[Path, TaskID] = {}

    def __enter__(self):
        self._progress.start()
        return self

    def __exit__(self, *args):
        self._progress.stop()

    def on_file_start(self, path: Path) -> None:
        console.print(f"[cyan]Uploading:[/cyan] {escape(str(path))}", soft_wrap=True)

    def on_file_progress(self, path: Path, sent: int, total: int) -> None:
        task_id = self._tasks.get(path)
        if task_id is None:
            task_id = self._progress.add_task(
                "upload",
                filename=path.name[:60],
                total=total,
            )
            self._tasks[path] = task_id
        self._progress.update(task_id, completed=sent, total=total)


def render_failure(result: UploadResult) -> None:
    console.print(f"[red]Failed:[/red] {result.filename} - {result.error}")


def render_run_summary(summary: RunSummary) -> None:
    if not summary.paths:
        console.print("[yellow]No dSYM files to upload.[/yellow]")
    for result in summary.results:
        size = _human_size(result.path.stat().st_size) if result.path.exists() else "?"
        console.print(f"[green]Uploaded:[/green] {result.filename} ({size})")
    console.print(f"[bold green]{SUCCESS_MESSAGE}[/bold green]")
