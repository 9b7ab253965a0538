from __future__ import annotations

"""
Generated Test Descriptor Builder.

Converts a hook-resolved suite model into the descriptor tree consumed by
rendering back ends: one group per SuiteNode, one entry per fixture.
"""

import logging
from typing import List, Set

from suitegen.core.generation.naming import (
    entry_name,
    group_name,
    presence_check_name,
    unique_name,
)
from suitegen.domain.suite_models import EntryDescriptor, GroupDescriptor, SuiteNode

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render(suite_model: SuiteNode, name: str = "") -> List[GroupDescriptor]:
    """
    Produce the generated-test-unit descriptors of a suite model.

    Args:
        suite_model: Root SuiteNode, already validated and hook-resolved.
        name: Suite name used for the top-level group; defaults to the
              root directory name.

    Returns:
        List[GroupDescriptor]: The top-level descriptors (one per suite).
    """
    top_name = group_name(name or suite_model.name or "Fixtures")
    descriptor = _render_node(suite_model, top_name)
    logger.debug(f"Rendered descriptor tree '{top_name}'")
    return [descriptor]

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _render_node(node: SuiteNode, name: str) -> GroupDescriptor:
    # The presence check shares the namespace of the entries
    used: Set[str] = {presence_check_name(name)}
    entries = tuple(
        EntryDescriptor(
            name=unique_name(entry_name(f.name), used),
            fixture_path=f.path,
            hook=f.hook,
        )
        for f in node.fixtures
    )

    child_names: Set[str] = set()
    groups = tuple(
        _render_node(child, unique_name(group_name(child.name), child_names))
        for child in node.children
    )

    return GroupDescriptor(name=name, path=node.path, groups=groups, entries=entries)
