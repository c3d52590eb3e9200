# extension_deploy/cli/utils/output.py
"""Output formatting utilities"""

from typing import Any, Dict, List, Optional, Tuple

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ...models import DeploymentResult, OperationStatus
from ...utils.formatting import format_duration, pluralize, shorten_url

console = Console()

_STATUS_STYLE = {
    OperationStatus.SUCCESS: "green",
    OperationStatus.PARTIAL: "yellow",
    OperationStatus.FAILED: "red",
    OperationStatus.SKIPPED: "dim",
    OperationStatus.IN_PROGRESS: "blue",
}


def _status(status: OperationStatus) -> str:
    style = _STATUS_STYLE.get(status, "white")
    return f"[{style}]{status.value}[/{style}]"


def format_deployment_result(result: DeploymentResult, verbose: bool = False) -> None:
    """Format and display a deployment result"""
    style = _STATUS_STYLE.get(result.status, "white")

    if result.is_failed:
        lines = [f"[red]✗ Deployment failed during {_failed_stage(result)}:[/red] {escape(result.message)}"]
        for error in result.errors:
            lines.append(f"  [red]• {error.code}[/red] {escape(error.message)}")

        console.print(Panel("\n".join(lines), title="Deploy Error", border_style="red"))
        return

    lines = [
        f"[bold]Extension:[/bold] {result.extension_name}",
        f"[bold]Status:[/bold] {_status(result.status)}",
        f"[bold]Duration:[/bold] {format_duration(result.duration)}",
        "",
    ]

    if result.sync:
        lines.append(f"[bold]Assets:[/bold] {pluralize(len(result.sync.assets), 'asset')} uploaded")
        lines.append(f"[bold]Entry point:[/bold] {result.sync.entry_point_url}")

    if result.registration:
        registration = result.registration
        if registration.is_failed:
            lines.append(
                f"[bold]Extension record:[/bold] {_status(registration.status)} "
                f"({registration.status_code} {registration.status_text})"
            )
        else:
            lines.append(f"[bold]Extension record:[/bold] {registration.action}")

    if result.purge:
        purge = result.purge
        if purge.status == OperationStatus.SKIPPED:
            lines.append(f"[bold]Purge:[/bold] {_status(purge.status)}")
        else:
            lines.append(
                f"[bold]Purge:[/bold] {_status(purge.status)}, "
                f"{pluralize(len(purge.deleted), 'asset')} deleted"
            )
            if purge.failures:
                lines.append(f"  [yellow]{pluralize(len(purge.failures), 'deletion')} failed[/yellow]")

    if result.warnings:
        lines.append("")
        for warning in result.warnings:
            lines.append(f"[yellow]⚠ {escape(warning)}[/yellow]")

    console.print(Panel("\n".join(lines), title="Deploy Result", border_style=style))

    if verbose:
        _print_details(result)


def _print_details(result: DeploymentResult) -> None:
    if result.sync and result.sync.assets:
        rows = [
            {
                "key": key,
                "title": asset.title,
                "uid": asset.uid,
                "url": shorten_url(asset.url or ""),
                "replaced": str(result.sync.replacements.get(key, 0)),
            }
            for key, asset in result.sync.assets.items()
        ]
        console.print(format_table(
            rows,
            [("key", "Reference"), ("title", "Asset"), ("uid", "UID"), ("url", "URL"), ("replaced", "Replaced")],
            title="Uploaded Assets",
        ))

    if result.purge and (result.purge.deleted or result.purge.failures):
        rows = [{"title": a.title, "uid": a.uid, "outcome": "deleted"} for a in result.purge.deleted]
        rows.extend(
            {"title": f.asset.title, "uid": f.asset.uid, "outcome": f"{f.status_code} {f.status_text}"}
            for f in result.purge.failures
        )
        console.print(format_table(
            rows,
            [("title", "Asset"), ("uid", "UID"), ("outcome", "Outcome")],
            title="Purged Assets",
        ))


def _failed_stage(result: DeploymentResult) -> str:
    # The stage before the terminal FAILED transition
    history = result.stage_history
    if len(history) >= 2:
        return history[-2].value
    return result.stage.value


def format_table(data: List[Dict[str, Any]],
                 columns: List[Tuple[str, str]],
                 title: Optional[str] = None) -> Table:
    """Create a formatted table

    Args:
        data: List of dictionaries with data
        columns: List of (key, header) tuples
        title: Optional table title

    Returns:
        Rich Table object
    """
    table = Table(title=title, box=box.ROUNDED)

    for key, header in columns:
        table.add_column(header, style="cyan" if key in ("key", "title") else None)

    for item in data:
        table.add_row(*[str(item.get(key, "")) for key, _ in columns])

    return table
