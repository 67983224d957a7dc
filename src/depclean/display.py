"""Rich terminal display for depclean."""

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.status import Status
from rich.table import Table

from depclean.models import (
    CleanupSession,
    DeletionResult,
    EcosystemRule,
    FoundDependency,
    ScanConfig,
)
from depclean.scanner import format_size

console = Console()

PROJECT_COLUMN_WIDTH = 38
DELETED_PATH_WIDTH = 50


def truncate_path(path: str, max_len: int, home: Optional[str] = None) -> str:
    """
    Shorten a path for display.

    The home directory prefix becomes '~'; paths still longer than max_len
    keep their tail behind a leading '...'.
    """
    home = (home if home is not None else str(Path.home())).rstrip("/")
    # a filesystem-root home would swallow every path
    if home and (path == home or path.startswith(home + "/")):
        path = "~" + path[len(home):]
    if len(path) <= max_len:
        return path
    return "..." + path[len(path) - max_len + 3:]


def show_scan_header(config: ScanConfig, days: int, dry_run: bool) -> None:
    """Display what is about to be scanned."""
    console.print("[bold]depclean - stale project dependency cleanup[/bold]\n")
    console.print(f"[cyan]Search path:[/cyan] {config.root}")
    console.print(f"[cyan]Threshold:[/cyan] untouched for {days}+ days")
    if config.min_size_bytes > 0:
        console.print(f"[cyan]Minimum size:[/cyan] {format_size(config.min_size_bytes)}")
    if dry_run:
        console.print("\n[yellow]DRY RUN - No files will be deleted[/yellow]")
    console.print()


def show_scanning_status(path: Path) -> Status:
    """Create a spinner shown while the walk runs."""
    return console.status(f"Scanning {path}...", spinner="dots")


def show_nothing_found(days: int) -> None:
    console.print(f"[green]✓ No dependencies untouched for {days}+ days[/green]")


def show_found_table(found: list[FoundDependency]) -> None:
    """Display found dependencies in discovery order, followed by totals."""
    table = Table(title="Stale Dependencies", show_header=True, header_style="bold", show_footer=True)

    total = sum(dep.size_bytes for dep in found)

    table.add_column("Project", footer=f"Total {len(found)}", no_wrap=True)
    table.add_column("Type", style="cyan")
    table.add_column("Size", justify="right", footer=format_size(total))
    table.add_column("Unused", justify="right")

    for dep in found:
        table.add_row(
            truncate_path(dep.project_path, PROJECT_COLUMN_WIDTH),
            dep.dep_type,
            format_size(dep.size_bytes),
            f"{dep.days_since} days",
        )

    console.print(table)


def show_deletion_result(result: DeletionResult) -> None:
    """Display result of a single deletion."""
    path = truncate_path(result.dep_path, DELETED_PATH_WIDTH)
    if result.success:
        console.print(f"  [green]✓[/green] Deleted {path} ({format_size(result.bytes_freed)})")
    else:
        console.print(f"  [red]✗[/red] Failed {path}: {result.error}")


def show_cleanup_summary(session: CleanupSession) -> None:
    """Display cleanup summary."""
    console.print()
    if session.has_failures:
        console.print("[bold yellow]Cleanup finished with errors[/bold yellow]")
    else:
        console.print("[bold green]Cleanup Complete![/bold green]")
    console.print()

    table = Table(show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Space freed", format_size(session.total_bytes_freed))
    table.add_row("Items deleted", str(session.success_count))
    if session.failure_count > 0:
        table.add_row("[red]Failed[/red]", str(session.failure_count))

    console.print(table)


def show_rules_table(rules: list[EcosystemRule]) -> None:
    """Display the ecosystem rules in priority order."""
    table = Table(title="Ecosystems", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Ecosystem", style="cyan")
    table.add_column("Folders")
    table.add_column("Indicator")
    table.add_column("Description")

    for i, rule in enumerate(rules, 1):
        table.add_row(
            str(i),
            rule.name,
            ", ".join(rule.candidate_names),
            rule.indicator or "-",
            rule.description,
        )

    console.print(table)
    console.print(
        Panel(
            "Shared folder names (vendor, target) belong to the first ecosystem\n"
            "whose indicator file exists next to them.",
            border_style="blue",
        )
    )


def confirm_action(message: str) -> bool:
    """Ask for confirmation."""
    from rich.prompt import Confirm

    return Confirm.ask(message, default=False)
