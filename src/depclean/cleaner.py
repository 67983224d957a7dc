"""Deletion of found dependency folders with safety checks."""

import logging
import os
import shutil
from pathlib import Path
from typing import Callable

from depclean.models import CleanupSession, DeletionResult, FoundDependency

logger = logging.getLogger(__name__)

# Paths that should NEVER be deleted, even if a rule matched them
BLOCKED_PATHS = [
    "/",
    "/System",
    "/Library",
    "/Applications",
    "/usr",
    "/bin",
    "/sbin",
    "/etc",
    "/var",
    "/private",
    "/Users",
    "/home",
]

EXIT_OK = 0
EXIT_PARTIAL_FAILURE = 1


def is_path_safe(path: Path) -> bool:
    """
    Check if a path is safe to delete.

    Args:
        path: Path to check

    Returns:
        True if safe to delete, False otherwise
    """
    path_str = os.path.normpath(str(path))

    if path_str in BLOCKED_PATHS:
        return False

    # Don't allow deleting home directory itself
    if path_str == str(Path.home()):
        return False

    return True


def delete_dependency(dep: FoundDependency, dry_run: bool = False) -> DeletionResult:
    """
    Recursively delete one dependency folder.

    Args:
        dep: Folder to delete
        dry_run: If True, don't actually delete

    Returns:
        DeletionResult; failures are reported, never raised
    """
    path = Path(dep.dep_path)

    if not is_path_safe(path):
        return DeletionResult(
            dep_path=dep.dep_path,
            bytes_freed=0,
            success=False,
            error=f"Blocked path: {path}",
            dry_run=dry_run,
        )

    if dry_run:
        return DeletionResult(dep_path=dep.dep_path, bytes_freed=dep.size_bytes, dry_run=True)

    try:
        shutil.rmtree(path)
    except PermissionError as e:
        logger.debug("Delete failed for %s: %s", path, e)
        return DeletionResult(
            dep_path=dep.dep_path,
            bytes_freed=0,
            success=False,
            error=f"Permission denied: {e}",
        )
    except OSError as e:
        logger.debug("Delete failed for %s: %s", path, e)
        return DeletionResult(
            dep_path=dep.dep_path,
            bytes_freed=0,
            success=False,
            error=f"OS error: {e}",
        )

    return DeletionResult(dep_path=dep.dep_path, bytes_freed=dep.size_bytes)


def clean_dependencies(
    found: list[FoundDependency],
    dry_run: bool = False,
    progress_callback: Callable[[DeletionResult], None] | None = None,
) -> CleanupSession:
    """
    Delete every found dependency, continuing past individual failures.

    Args:
        found: Dependencies to delete, in report order
        dry_run: If True, don't actually delete
        progress_callback: Optional callback(result) after each item

    Returns:
        CleanupSession with one result per item
    """
    session = CleanupSession()

    for dep in found:
        result = delete_dependency(dep, dry_run=dry_run)
        session.results.append(result)

        if progress_callback:
            progress_callback(result)

    return session


def run_cleanup(
    found: list[FoundDependency],
    confirm: Callable[[str], bool],
    dry_run: bool = False,
    progress_callback: Callable[[DeletionResult], None] | None = None,
) -> CleanupSession | None:
    """
    Ask once for confirmation, then delete everything.

    Args:
        found: Dependencies to delete
        confirm: Callable(message) -> bool deciding whether to proceed
        dry_run: If True, skip the question and don't delete
        progress_callback: Optional callback(result) after each item

    Returns:
        CleanupSession, or None if the user declined
    """
    if not found:
        return CleanupSession()

    if not dry_run and not confirm(f"Delete the {len(found)} folders above?"):
        return None

    return clean_dependencies(found, dry_run=dry_run, progress_callback=progress_callback)


def exit_code_for(session: CleanupSession | None) -> int:
    """Non-zero when any deletion failed."""
    if session is not None and session.has_failures:
        return EXIT_PARTIAL_FAILURE
    return EXIT_OK
