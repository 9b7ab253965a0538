from __future__ import annotations

"""
Identifier Naming Helpers.

Conventions for generated names: groups are `Test` + UpperCamelCase of the
directory name, entries are `test_` + the fixture display name, and any
character that is not valid in an identifier becomes an underscore.
"""

import logging
import re
from typing import Set

logger = logging.getLogger(__name__)

_INVALID_CHARS_RX = re.compile(r"\W", re.ASCII)
_WORD_SPLIT_RX = re.compile(r"[^0-9A-Za-z]+")
_CAMEL_BOUNDARY_RX = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def escape_identifier(text: str) -> str:
    """Replace characters that cannot appear in a Python identifier."""
    return _INVALID_CHARS_RX.sub("_", text) if text else "_"


def upper_camel(text: str) -> str:
    """`codeFragments` -> `CodeFragments`, `multi-file` -> `MultiFile`."""
    parts = [p for p in _WORD_SPLIT_RX.split(text) if p]
    return "".join(p[0].upper() + p[1:] for p in parts) or "_"


def snake_case(text: str) -> str:
    """`CodeFragments` -> `code_fragments`."""
    words = [p for p in _WORD_SPLIT_RX.split(_CAMEL_BOUNDARY_RX.sub("_", text)) if p]
    return "_".join(w.lower() for w in words) or "_"


def group_name(dir_name: str) -> str:
    return "Test" + upper_camel(dir_name)


def entry_name(display_name: str) -> str:
    return "test_" + escape_identifier(display_name)


def presence_check_name(group: str) -> str:
    """Name of the drift self-check method of a generated group."""
    bare = group[len("Test"):] if group.startswith("Test") else group
    return "test_all_fixtures_present_in_" + snake_case(bare)


def unique_name(candidate: str, used: Set[str]) -> str:
    """
    Reserve a name, appending a numeric suffix on collision.

    The reserved name is added to `used`.
    """
    name = candidate
    counter = 2
    while name in used:
        name = f"{candidate}_{counter}"
        counter += 1
    if name != candidate:
        logger.warning(f"Generated name '{candidate}' collides; using '{name}'")
    used.add(name)
    return name
