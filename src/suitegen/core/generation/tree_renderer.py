from __future__ import annotations

"""
Suite Tree Renderer.

Converts a suite model into a visual ASCII tree for previews: groups are
directories, leaves are fixtures annotated with their bound hook.
"""

from typing import List, Sequence, Tuple

from suitegen.domain.suite_models import SuiteNode

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_suite_tree(node: SuiteNode, root_label: str = ".") -> List[str]:
    """
    Render a suite model as lines of an ASCII tree.

    Args:
        node: Root of the suite model.
        root_label: Text of the first line.

    Returns:
        List[str]: Visual lines of the tree.
    """
    lines: List[str] = [root_label]
    render_tree_structure(node, lines, prefix="")
    return lines


def render_member_trees(members: Sequence[Tuple[str, SuiteNode]], root_label: str = ".") -> List[str]:
    """Render the members of a composite suite as labelled sibling subtrees."""
    lines: List[str] = [root_label]
    for i, (label, node) in enumerate(members):
        is_last = (i == len(members) - 1)
        lines.append(f"{'└── ' if is_last else '├── '}{label}")
        render_tree_structure(node, lines, prefix="    " if is_last else "│   ")
    return lines


def render_tree_structure(node: SuiteNode, lines: List[str], prefix: str = "") -> None:
    """
    Recursively append the entries of a node to `lines`.

    Fixtures are listed before nested groups, matching the layout of the
    generated classes.
    """
    entries = [(f.path.rsplit("/", 1)[-1], f.hook, None) for f in node.fixtures]
    entries += [(child.name, None, child) for child in node.children]
    total = len(entries)

    for i, (label, hook, child) in enumerate(entries):
        is_last = (i == total - 1)
        connector = "└── " if is_last else "├── "

        # Scenario A: nested group
        if child is not None:
            lines.append(f"{prefix}{connector}{label}/")
            new_prefix = prefix + ("    " if is_last else "│   ")
            render_tree_structure(child, lines, prefix=new_prefix)
            continue

        # Scenario B: fixture leaf
        lines.append(f"{prefix}{connector}{label}  [{hook}]")
