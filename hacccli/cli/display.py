"""Display components for CLI using Rich."""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from hacccli.models.component import BranchPolicy, Component, ReleasePolicy
from hacccli.models.sync import BatchReport, SyncOutcome, SyncStatus

console = Console()

BANNER = r"""
[bold cyan]
  _                        _ _
 | |__   __ _  ___ ___ ___| (_)
 | '_ \ / _` |/ __/ __/ __| | |
 | | | | (_| | (_| (_| (__| | |
 |_| |_|\__,_|\___\___\___|_|_|
[/bold cyan]
[dim]Keep your Home Assistant custom components up to date[/dim]
"""

_STATUS_STYLES = {
    SyncStatus.UPDATED: ("green", "✓"),
    SyncStatus.DOWNLOADED: ("green", "✓"),
    SyncStatus.UP_TO_DATE: ("dim", "="),
    SyncStatus.DEFERRED: ("yellow", "!"),
    SyncStatus.FAILED: ("red", "✗"),
}


def show_banner() -> None:
    """Display the hacccli banner."""
    console.print()
    console.print(Panel(BANNER, border_style="cyan", padding=(0, 2)))
    console.print()


def show_success(title: str, message: str) -> None:
    """Display a success message."""
    console.print()
    console.print(
        Panel(
            f"[bold green]{escape(message)}[/]",
            title=f"[bold]{escape(title)}[/]",
            border_style="green",
        )
    )


def show_error(title: str, message: str) -> None:
    """Display an error message."""
    console.print()
    console.print(
        Panel(
            f"[bold red]{escape(message)}[/]",
            title=f"[bold]{escape(title)}[/]",
            border_style="red",
        )
    )


def show_info(title: str, message: str) -> None:
    """Display an info message."""
    console.print()
    console.print(
        Panel(
            escape(message),
            title=f"[bold]{escape(title)}[/]",
            border_style="blue",
        )
    )


def create_progress() -> Progress:
    """Create a spinner for steps of unknown length."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    )


def show_outcome(outcome: SyncOutcome) -> None:
    """Print the status line of one synced component."""
    style, mark = _STATUS_STYLES[outcome.status]
    console.print(f"[{style}]{mark} {escape(outcome.describe())}[/]")

    if outcome.status == SyncStatus.DEFERRED:
        console.print(
            "[dim]  Consider upgrading by running hacccli interactively and "
            "selecting 'fetch registered components'.[/]"
        )


def show_batch_summary(report: BatchReport) -> None:
    """Display the totals of a batch sync and every failure."""
    console.print()
    table = Table(title="[bold]Sync Summary[/]", show_header=False, box=None)
    table.add_column("Status", style="cyan")
    table.add_column("Count", style="white")

    table.add_row("Updated", str(report.count(SyncStatus.UPDATED)))
    table.add_row("Downloaded", str(report.count(SyncStatus.DOWNLOADED)))
    table.add_row("Up to date", str(report.count(SyncStatus.UP_TO_DATE)))
    table.add_row("Deferred", str(report.count(SyncStatus.DEFERRED)))
    table.add_row("Failed", str(len(report.failures)))

    if report.failures:
        table.add_section()
        for failure in report.failures:
            table.add_row(escape(failure.component.name), f"[red]{escape(failure.error or '')}[/]")

    console.print(Panel(table, border_style="green" if report.succeeded else "red"))


def _describe_policy(component: Component) -> str:
    policy = component.policy
    if isinstance(policy, BranchPolicy):
        return f"branch {policy.branch_name}"
    if isinstance(policy, ReleasePolicy):
        asset = policy.asset_name or "source archive"
        return f"releases ({policy.tier.value}, {asset})"
    return "unknown"


def show_components(components: list[Component]) -> None:
    """Display the tracked components in a table."""
    if not components:
        show_info("Components", "No custom components registered yet.")
        return

    table = Table(title="[bold]Registered Components[/]")
    table.add_column("Name", style="cyan")
    table.add_column("Tracking", style="white")
    table.add_column("Version", style="green")
    table.add_column("Location", style="white")
    table.add_column("Source", style="dim")

    for component in components:
        table.add_row(
            escape(component.name),
            _describe_policy(component),
            escape(component.version or "-"),
            escape(component.local_path),
            escape(component.url),
        )

    console.print(table)
