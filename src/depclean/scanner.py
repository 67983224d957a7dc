"""Directory aggregates and input helpers for depclean."""

import logging
import os
import re
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from depclean.models import ScanConfig

logger = logging.getLogger(__name__)

KB = 1024
MB = KB * 1024
GB = MB * 1024

SIZE_SUFFIXES = (
    ("GB", GB),
    ("MB", MB),
    ("KB", KB),
)

_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def expand_path(path: str) -> Path:
    """Expand a leading '~/' to the home directory."""
    if path.startswith("~/"):
        return Path.home() / path[2:]
    return Path(path)


def resolve_root(path: str, cwd: Optional[Path] = None) -> Path:
    """
    Turn a user-supplied root into an absolute path.

    Args:
        path: Path as typed by the user (may start with '~/')
        cwd: Directory to resolve relative paths against (defaults to os.getcwd())

    Returns:
        Absolute path (not resolved through symlinks)
    """
    expanded = expand_path(path)
    if not expanded.is_absolute():
        base = cwd if cwd is not None else Path(os.getcwd())
        expanded = base / expanded
    return Path(os.path.normpath(expanded))


def parse_size(text: str) -> int:
    """
    Parse a size threshold like '100MB' or '1.5gb' into bytes.

    Suffixes are binary (KB=1024). Unsuffixed values are bytes. Anything that
    does not start with a number parses as 0 rather than failing.
    """
    s = text.strip().upper()
    if s in ("", "0"):
        return 0

    multiplier = 1
    for suffix, factor in SIZE_SUFFIXES:
        if s.endswith(suffix):
            multiplier = factor
            s = s[: -len(suffix)]
            break

    match = _LEADING_NUMBER.match(s.strip())
    if not match:
        logger.debug("Unparseable size %r, treating as 0", text)
        return 0
    return int(float(match.group(0)) * multiplier)


def format_size(size_bytes: int) -> str:
    """Format bytes to human-readable string (binary units)."""
    if size_bytes >= GB:
        return f"{size_bytes / GB:.2f} GB"
    elif size_bytes >= MB:
        return f"{size_bytes / MB:.2f} MB"
    elif size_bytes >= KB:
        return f"{size_bytes / KB:.2f} KB"
    else:
        return f"{size_bytes} B"


def get_directory_size(path: Path) -> int:
    """
    Sum the sizes of all regular files beneath a directory.

    Symlinks are not followed. Entries that cannot be read are skipped. Uses
    an explicit stack so arbitrarily deep trees cannot exhaust the recursion
    limit.

    Args:
        path: Directory to measure

    Returns:
        Total size in bytes
    """
    total_size = 0
    pending = [str(path)]

    while pending:
        p = pending.pop()
        try:
            with os.scandir(p) as entries:
                for entry in entries:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            pending.append(entry.path)
                        elif entry.is_file(follow_symlinks=False):
                            total_size += entry.stat(follow_symlinks=False).st_size
                    except (PermissionError, OSError) as e:
                        logger.debug("Skipping %s: %s", entry.path, e)
                        continue
        except (PermissionError, OSError) as e:
            logger.debug("Cannot list %s: %s", p, e)

    return total_size


def get_last_modified(path: Path) -> datetime:
    """
    Find the newest modification time in a directory tree.

    Starts from the directory's own mtime and takes the maximum over every
    entry beneath it. Modification time stands in for access time, which is
    unreliable across platforms.

    Args:
        path: Directory to inspect

    Returns:
        Newest mtime as a naive local datetime, or now() if path cannot be stat'ed
    """
    try:
        newest = os.stat(path, follow_symlinks=False).st_mtime
    except (PermissionError, OSError) as e:
        logger.debug("Cannot stat %s: %s", path, e)
        return datetime.now()

    pending = [str(path)]
    while pending:
        p = pending.pop()
        try:
            with os.scandir(p) as entries:
                for entry in entries:
                    try:
                        mtime = entry.stat(follow_symlinks=False).st_mtime
                        if mtime > newest:
                            newest = mtime
                        if entry.is_dir(follow_symlinks=False):
                            pending.append(entry.path)
                    except (PermissionError, OSError) as e:
                        logger.debug("Skipping %s: %s", entry.path, e)
                        continue
        except (PermissionError, OSError) as e:
            logger.debug("Cannot list %s: %s", p, e)

    return datetime.fromtimestamp(newest)


def build_scan_config(
    path: str = ".",
    max_depth: int = 5,
    days: int = 30,
    min_size: str = "0",
    now: Optional[datetime] = None,
    cwd: Optional[Path] = None,
) -> ScanConfig:
    """
    Build a ScanConfig from command-line style values.

    Args:
        path: Root path, may start with '~/'; relative paths resolve against cwd
        max_depth: Maximum walk depth
        days: Only report dependencies untouched for at least this many days
        min_size: Size threshold such as '100MB' (malformed values mean 0)
        now: Reference time for the cutoff (defaults to datetime.now())
        cwd: Base for relative paths (defaults to the process cwd)

    Returns:
        ScanConfig ready for scan_dependencies()
    """
    now = now or datetime.now()
    return ScanConfig(
        root=resolve_root(path, cwd),
        max_depth=max_depth,
        cutoff=now - timedelta(days=days),
        min_size_bytes=parse_size(min_size),
    )
