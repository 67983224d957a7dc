"""CLI interface for depclean."""

import logging

import typer
from rich.logging import RichHandler

from depclean import __version__
from depclean.cleaner import exit_code_for, run_cleanup
from depclean.display import (
    confirm_action,
    console,
    show_cleanup_summary,
    show_deletion_result,
    show_found_table,
    show_nothing_found,
    show_rules_table,
    show_scan_header,
    show_scanning_status,
)
from depclean.ecosystems import get_all_rules, get_rule_table
from depclean.recursive_scanner import scan_dependencies
from depclean.scanner import build_scan_config

# Create Typer app
app = typer.Typer(
    name="depclean",
    help="Find and remove stale project dependency folders (node_modules, target, venv, ...)",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"depclean version {__version__}")
        raise typer.Exit()


def setup_logging(verbose: bool) -> None:
    """Route library debug logs through rich when --verbose is given."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """depclean - stale project dependency cleanup."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


@app.command()
def scan(
    path: str = typer.Option(".", "--path", "-p", help="Directory to search (supports ~/)"),
    depth: int = typer.Option(5, "--depth", "-d", min=0, help="Maximum search depth"),
    days: int = typer.Option(
        30, "--days", min=0, help="Only report folders untouched for this many days"
    ),
    min_size: str = typer.Option(
        "0", "--min-size", help="Minimum folder size, e.g. 100MB or 1GB"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Analyze only, never delete"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging"),
) -> None:
    """Scan for stale dependency folders and optionally delete them."""
    setup_logging(verbose)

    config = build_scan_config(path=path, max_depth=depth, days=days, min_size=min_size)

    if not config.root.is_dir():
        console.print(f"[red]Error: Not a directory: {config.root}[/red]")
        raise typer.Exit(1)

    show_scan_header(config, days, dry_run)

    with show_scanning_status(config.root):
        found = scan_dependencies(config, rules=get_rule_table())

    if not found:
        show_nothing_found(days)
        raise typer.Exit(0)

    show_found_table(found)
    console.print()

    if dry_run:
        console.print("[dim]Remove [bold]--dry-run[/bold] to delete these folders[/dim]")
        raise typer.Exit(0)

    confirm = (lambda message: True) if yes else confirm_action
    session = run_cleanup(found, confirm=confirm, progress_callback=show_deletion_result)

    if session is None:
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(0)

    show_cleanup_summary(session)
    raise typer.Exit(exit_code_for(session))


@app.command(name="list")
def list_ecosystems() -> None:
    """List supported ecosystems in priority order."""
    show_rules_table(get_all_rules())


if __name__ == "__main__":
    app()
