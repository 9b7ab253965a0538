from __future__ import annotations

"""
Suite Model Builder.

Turns a flat scan result into the hierarchical suite model: one SuiteNode
per directory that holds fixtures (directly or below it), one Fixture per
scanned path, each bound to its resolved operation hook. Directories
without fixtures never become nodes, so no dead branches are emitted.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from suitegen.core.matching.path_matcher import PathMatcher
from suitegen.core.model.hook_resolver import resolve_hook
from suitegen.domain.suite_models import (
    EntityKind,
    Fixture,
    FixturePattern,
    HookBinding,
    SuiteDefinition,
    SuiteNode,
)

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build(
        scan_result: Sequence[str],
        hook_bindings: Iterable[HookBinding] = (),
        default_hook: Optional[str] = None,
        pattern: Optional[FixturePattern] = None,
) -> SuiteNode:
    """
    Build the suite model for a scan result.

    Every hook is resolved before any node is created, so an unresolved
    binding aborts the build without producing a partial tree.

    Args:
        scan_result: Relative POSIX fixture paths in scan order.
        hook_bindings: Ordered hook-binding table.
        default_hook: Suite-level fallback hook.
        pattern: Fixture pattern used for the scan; supplies display names
                 and the fixture kind.

    Returns:
        SuiteNode: Root of the model (path "").

    Raises:
        ConfigurationError: If a fixture's hook cannot be resolved.
    """
    bindings = tuple(hook_bindings)
    matcher = PathMatcher(pattern) if pattern is not None else None
    kind = pattern.kind if pattern is not None else EntityKind.FILE

    # 1. Resolve fixtures and group them by containing directory
    fixtures_by_dir: Dict[str, List[Fixture]] = {}
    children_by_dir: Dict[str, List[str]] = {}

    for path in scan_result:
        parent, _, entry = path.rpartition("/")
        fixture = Fixture(
            path=path,
            name=matcher.display_name(entry) if matcher else entry,
            hook=resolve_hook(path, bindings, default_hook),
            kind=kind,
        )
        fixtures_by_dir.setdefault(parent, []).append(fixture)
        _register_ancestors(parent, children_by_dir)

    # 2. Assemble nodes bottom-up from the grouped data
    root = _build_node("", fixtures_by_dir, children_by_dir)
    logger.info(
        f"Built suite model: {sum(1 for _ in root.walk())} group(s), "
        f"{len(scan_result)} fixture(s)"
    )
    return root


def build_for_definition(definition: SuiteDefinition, scan_result: Sequence[str]) -> SuiteNode:
    """Build the model of a declared suite from its scan result."""
    return build(
        scan_result,
        definition.hooks,
        default_hook=definition.default_hook,
        pattern=definition.pattern,
    )

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _register_ancestors(dir_path: str, children_by_dir: Dict[str, List[str]]) -> None:
    """Link a directory and all its ancestors, keeping first-seen order."""
    while dir_path:
        parent = dir_path.rpartition("/")[0]
        siblings = children_by_dir.setdefault(parent, [])
        if dir_path in siblings:
            return
        siblings.append(dir_path)
        dir_path = parent


def _build_node(
        path: str,
        fixtures_by_dir: Dict[str, List[Fixture]],
        children_by_dir: Dict[str, List[str]],
) -> SuiteNode:
    fixtures = tuple(fixtures_by_dir.get(path, ()))
    children = tuple(
        _build_node(child, fixtures_by_dir, children_by_dir)
        for child in children_by_dir.get(path, ())
    )

    hooks = {f.hook for f in fixtures}
    level_hook = hooks.pop() if len(hooks) == 1 else None

    return SuiteNode(path=path, children=children, fixtures=fixtures, hook=level_hook)
