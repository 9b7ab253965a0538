from __future__ import annotations

"""
Fixture Discovery Service.

Walks a test-data root and returns the relative paths of every entry
accepted by the Path Matcher. Output order is fully determined by the
directory contents: children are visited in case-sensitive lexicographic
order and the walk is pre-order, so repeated scans of the same tree
produce identical lists.
"""

import logging
import os
from typing import Iterable, List, Optional, Set, Tuple

from suitegen.core.matching.path_matcher import PathMatcher
from suitegen.domain.errors import ConfigurationError
from suitegen.domain.suite_models import EntityKind, FixturePattern

logger = logging.getLogger(__name__)


# ==============================================================================
# PUBLIC API
# ==============================================================================

def scan(
        root_path: str,
        pattern: FixturePattern,
        recursive: Optional[bool] = None,
        exclude_dirs: Iterable[str] = (),
) -> List[str]:
    """
    Discover fixtures under a test-data root.

    Args:
        root_path: Directory to scan.
        pattern: Fixture naming rule.
        recursive: Test every descendant (True) or only the immediate
                   children of the root (False). Defaults to pattern.recursive.
        exclude_dirs: Directory names that are never reported or descended into.

    Returns:
        List[str]: POSIX paths relative to `root_path`, in walk order.

    Raises:
        ConfigurationError: If the root is missing, is not a directory, cannot
                            be read, or contains a symlink cycle.
    """
    if recursive is None:
        recursive = pattern.recursive

    root_abs = os.path.abspath(root_path)
    if not os.path.exists(root_abs):
        raise ConfigurationError(f"Test-data root does not exist: '{root_path}'")
    if not os.path.isdir(root_abs):
        raise ConfigurationError(f"Test-data root is not a directory: '{root_path}'")

    matcher = PathMatcher(pattern)
    found: List[str] = []
    stack: Set[str] = set()

    _walk(root_abs, "", matcher, recursive, frozenset(exclude_dirs), stack, found)

    logger.info(
        f"Scanned '{root_path}' ({'recursive' if recursive else 'shallow'}): "
        f"{len(found)} fixture(s) matching {pattern.regex}"
    )
    return found


def list_entries(dir_path: str) -> List[Tuple[str, EntityKind]]:
    """
    List the children of a directory in deterministic order.

    Entries that are neither regular files nor directories (broken links,
    sockets) are skipped.

    Raises:
        ConfigurationError: If the directory cannot be read.
    """
    try:
        with os.scandir(dir_path) as it:
            raw = [(e.name, e.is_dir(), e.is_file()) for e in it]
    except OSError as e:
        raise ConfigurationError(f"Cannot read directory '{dir_path}': {e}") from e

    entries: List[Tuple[str, EntityKind]] = []
    for name, is_dir, is_file in sorted(raw):
        if is_dir:
            entries.append((name, EntityKind.DIRECTORY))
        elif is_file:
            entries.append((name, EntityKind.FILE))
    return entries


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _walk(
        abs_dir: str,
        rel_dir: str,
        matcher: PathMatcher,
        recursive: bool,
        exclude_dirs: frozenset,
        stack: Set[str],
        found: List[str],
) -> None:
    """Pre-order walk tracking the canonical paths on the current stack."""
    canonical = os.path.realpath(abs_dir)
    if canonical in stack:
        raise ConfigurationError(
            f"Symlink cycle detected at '{abs_dir}' (resolves to '{canonical}')"
        )
    stack.add(canonical)

    try:
        for name, kind in list_entries(abs_dir):
            rel_path = f"{rel_dir}/{name}" if rel_dir else name

            # Excluded directories are neither fixtures nor descended into
            if kind is EntityKind.DIRECTORY and name in exclude_dirs:
                logger.debug(f"Skipping excluded directory: {rel_path}")
                continue

            if matcher.matches(name, kind):
                found.append(rel_path)
                continue

            if kind is not EntityKind.DIRECTORY or not recursive:
                continue

            _walk(
                os.path.join(abs_dir, name), rel_path,
                matcher, recursive, exclude_dirs, stack, found,
            )
    finally:
        stack.discard(canonical)
