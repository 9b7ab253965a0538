from __future__ import annotations

"""
Pytest Module Emitter.

Renders a descriptor tree into the source of a pytest module: one class
per group, nested as in the suite model, one tagged test method per
fixture and a presence check per group. The emitted module records its
fixture paths as literals, so later runs detect drift against the disk.
"""

import logging
import os
from typing import List, Sequence, Tuple

from suitegen.core.generation.naming import presence_check_name, upper_camel
from suitegen.domain.errors import ConfigurationError
from suitegen.domain.suite_models import GroupDescriptor, SuiteDefinition

logger = logging.getLogger(__name__)

GENERATED_HEADER = "# This module is generated by suitegen. DO NOT MODIFY MANUALLY."
_INDENT = "    "

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def emit_module(
        descriptors: Sequence[GroupDescriptor],
        definition: SuiteDefinition,
        project_root_from_module: str = ".",
) -> str:
    """
    Produce the source text of a generated test module.

    Args:
        descriptors: Top-level groups rendered from the suite model.
        definition: Suite the descriptors belong to.
        project_root_from_module: Project root, relative to the directory of
                                  the generated module.

    Returns:
        str: Module source ending with a newline.
    """
    return emit_suite_module(definition, [(definition, descriptors)], project_root_from_module)


def emit_suite_module(
        definition: SuiteDefinition,
        sections: Sequence[Tuple[SuiteDefinition, Sequence[GroupDescriptor]]],
        project_root_from_module: str = ".",
) -> str:
    """
    Produce the module of a plain or composite suite.

    Each section pairs a scanned definition (the suite itself, or one of its
    member groups) with its rendered descriptors. Every section gets its own
    shared base class carrying its root, pattern and exclusions, so the
    presence checks of different members never see each other's fixtures.
    """
    base_import, base_name = split_base_class(definition.base_class)

    lines: List[str] = [
        GENERATED_HEADER,
        f"# Suite: {definition.name}",
        "",
        "import os",
        "",
    ]
    if base_import:
        lines.append(f"from {base_import} import {base_name}")
    lines += [
        "from suitegen.domain.suite_models import EntityKind, FixturePattern",
        "from suitegen.runtime.fixture_suite import FixtureSuite, fixture_metadata",
    ]

    for member, descriptors in sections:
        shared_base = f"_{upper_camel(member.name)}Base"
        lines += ["", ""]
        _emit_shared_base(member, shared_base, base_name, project_root_from_module, lines)
        for descriptor in descriptors:
            lines += ["", ""]
            _emit_group(descriptor, shared_base, lines, prefix="")

    logger.info(
        f"Emitted module for suite '{definition.name}' "
        f"({len(sections)} section(s), {len(lines)} lines)"
    )
    return "\n".join(lines) + "\n"


def write_module(path: str, source: str, overwrite: bool = False) -> str:
    """
    Persist a generated module.

    Returns:
        str: "created", "updated", "unchanged" or "skipped" (existing file
             differs and `overwrite` is False).
    """
    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            if f.read() == source:
                return "unchanged"
        if not overwrite:
            logger.warning(f"Refusing to replace modified module without overwrite: {path}")
            return "skipped"
        status = "updated"
    else:
        status = "created"

    out_dir = os.path.dirname(os.path.abspath(path))
    os.makedirs(out_dir, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(source)
    logger.info(f"Generated module {status}: {path}")
    return status

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _emit_shared_base(
        member: SuiteDefinition,
        shared_base: str,
        base_name: str,
        project_root_from_module: str,
        lines: List[str],
) -> None:
    pattern = member.pattern
    lines += [
        f"class {shared_base}({base_name + ', ' if base_name else ''}FixtureSuite):",
        f"{_INDENT}project_root = os.path.normpath(",
        f"{_INDENT * 2}os.path.join(os.path.dirname(os.path.abspath(__file__)), "
        f"{_posix(project_root_from_module)!r})",
        f"{_INDENT})",
        f"{_INDENT}data_root = {_posix(member.root)!r}",
        f"{_INDENT}fixture_pattern = FixturePattern(",
        f"{_INDENT * 2}{pattern.regex!r},",
        f"{_INDENT * 2}EntityKind.{pattern.kind.name},",
        f"{_INDENT * 2}recursive={pattern.recursive!r},",
        f"{_INDENT})",
        f"{_INDENT}exclude_dirs = {tuple(member.exclude_dirs)!r}",
    ]


def _emit_group(group: GroupDescriptor, shared_base: str, lines: List[str], prefix: str) -> None:
    body = prefix + _INDENT
    lines.append(f"{prefix}class {group.name}({shared_base}):")
    lines.append(f"{body}group_path = {group.path!r}")
    lines.append("")
    lines.append(f"{body}def {presence_check_name(group.name)}(self):")
    lines.append(f"{body}{_INDENT}self.assert_all_fixtures_present()")

    for entry in group.entries:
        lines.append("")
        lines.append(f"{body}@fixture_metadata({entry.fixture_path!r})")
        lines.append(f"{body}def {entry.name}(self):")
        lines.append(f"{body}{_INDENT}self.run_fixture({entry.fixture_path!r}, {entry.hook!r})")

    for child in group.groups:
        lines.append("")
        _emit_group(child, shared_base, lines, prefix=body)


def split_base_class(import_path: str) -> Tuple[str, str]:
    """Split "package.module:ClassName" into its import parts."""
    if not import_path:
        return "", ""
    module, sep, name = import_path.partition(":")
    if not sep or not module or not name.isidentifier():
        raise ConfigurationError(f"Invalid base class '{import_path}': expected 'module:ClassName'")
    return module, name


def _posix(path: str) -> str:
    return path.replace(os.sep, "/")
