"""Recursive discovery of stale dependency folders.

Walks a directory tree once, depth-first, and decides at every directory
whether it is a dependency folder to report, a subtree to skip, or a plain
directory to descend into. Once a directory is matched or pruned, nothing
beneath it is visited.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from depclean.ecosystems import DEFAULT_RULE_TABLE, EcosystemRuleTable
from depclean.models import Classification, FoundDependency, ScanConfig, WalkDecision
from depclean.scanner import get_directory_size, get_last_modified

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def get_depth(path: Path, root: Path) -> int:
    """Number of separators in path relative to root (root and its children are 0)."""
    rel = os.path.relpath(path, root)
    if rel == os.curdir:
        return 0
    return rel.count(os.sep)


def evaluate_match(
    path: Path,
    classification: Classification,
    config: ScanConfig,
    now: datetime,
) -> tuple[WalkDecision, Optional[FoundDependency]]:
    """
    Apply the recency and size filters to a classified directory.

    Recency is checked first so the size walk is skipped for recently used
    folders. A rejected match is still terminal for the walk.

    Args:
        path: Matched directory
        classification: Rule that claimed it
        config: Scan thresholds
        now: Reference time for days_since

    Returns:
        Tuple of (decision, FoundDependency or None)
    """
    last_modified = get_last_modified(path)
    if last_modified > config.cutoff:
        logger.debug("Too recent: %s (%s)", path, last_modified)
        return WalkDecision.MATCH_REJECTED, None

    size = get_directory_size(path)
    if size < config.min_size_bytes:
        logger.debug("Too small: %s (%d bytes)", path, size)
        return WalkDecision.MATCH_REJECTED, None

    elapsed = (now - last_modified).total_seconds()
    found = FoundDependency(
        project_path=str(path.parent),
        dep_path=str(path),
        dep_type=classification.rule.name,
        size_bytes=size,
        last_modified=last_modified,
        days_since=int(elapsed // SECONDS_PER_DAY),
    )
    return WalkDecision.MATCH_ACCEPTED, found


def decide(
    path: Path,
    name: str,
    config: ScanConfig,
    rules: EcosystemRuleTable,
    now: datetime,
    is_root: bool = False,
) -> tuple[WalkDecision, Optional[FoundDependency]]:
    """
    Decide what to do with one directory. The first applicable step wins.

    1. Deeper than max_depth: prune.
    2. Hidden and not a known cache name: prune.
    3. Claimed by an ecosystem rule: filter, then report or reject (terminal either way).
    4. In the always-skip set: prune.
    5. Otherwise descend.

    The root itself is exempt from steps 2 and 4 since the user asked for it.
    """
    if get_depth(path, config.root) > config.max_depth:
        return WalkDecision.PRUNE_DEPTH, None

    if not is_root and rules.is_hidden_pruned(name):
        return WalkDecision.PRUNE_SILENT, None

    classification = rules.classify(name, path)
    if classification is not None:
        return evaluate_match(path, classification, config, now)

    if not is_root and rules.is_always_skipped(name):
        return WalkDecision.PRUNE_SILENT, None

    return WalkDecision.DESCEND, None


def _list_subdirectories(path: Path) -> list[os.DirEntry]:
    """Child directories in name order; symlinks are not followed."""
    subdirs = []
    try:
        with os.scandir(path) as entries:
            for entry in entries:
                try:
                    if entry.is_dir(follow_symlinks=False):
                        subdirs.append(entry)
                except (PermissionError, OSError):
                    continue
    except (PermissionError, OSError) as e:
        logger.debug("Cannot list %s: %s", path, e)
    subdirs.sort(key=lambda e: e.name)
    return subdirs


def scan_dependencies(
    config: ScanConfig,
    rules: EcosystemRuleTable = DEFAULT_RULE_TABLE,
    now: Optional[datetime] = None,
    progress_callback: Callable[[FoundDependency], None] | None = None,
    visit_callback: Callable[[Path, WalkDecision], None] | None = None,
    should_cancel: Callable[[], bool] | None = None,
) -> list[FoundDependency]:
    """
    Walk config.root and collect stale dependency folders.

    Args:
        config: Root, depth limit and filter thresholds
        rules: Rule table used for classification and skip lists
        now: Reference time for days_since (defaults to datetime.now())
        progress_callback: Optional callback(found) for each accepted match
        visit_callback: Optional callback(path, decision) for every visited directory
        should_cancel: Optional check polled before each directory; True stops the walk

    Returns:
        FoundDependency list in discovery order
    """
    now = now or datetime.now()
    results: list[FoundDependency] = []

    if not config.root.is_dir():
        return results

    # Explicit stack of (path, name, is_root); children pushed in reverse so
    # they pop in name order, giving a pre-order walk without recursion.
    pending: list[tuple[Path, str, bool]] = [(config.root, config.root.name, True)]

    while pending:
        if should_cancel is not None and should_cancel():
            break

        path, name, is_root = pending.pop()
        decision, found = decide(path, name, config, rules, now, is_root=is_root)

        if visit_callback:
            visit_callback(path, decision)

        if found is not None:
            results.append(found)
            if progress_callback:
                progress_callback(found)

        if decision.is_terminal:
            continue

        for entry in reversed(_list_subdirectories(path)):
            pending.append((Path(entry.path), entry.name, False))

    return results


def total_size(found: list[FoundDependency]) -> int:
    """Sum of sizes of all found dependencies."""
    return sum(dep.size_bytes for dep in found)
