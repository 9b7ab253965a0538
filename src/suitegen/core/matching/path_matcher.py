from __future__ import annotations

"""
Fixture Path Matcher.

Classifies a single directory entry as a fixture or not. Patterns are
compiled once at construction and always match the whole path segment,
so a pattern for `.kt` files never accepts `.kt.bak`.
"""

import re

from suitegen.domain.errors import ConfigurationError
from suitegen.domain.suite_models import EntityKind, FixturePattern


def compile_fixture_regex(regex: str) -> re.Pattern:
    """
    Compile a raw fixture regex.

    Raises:
        ConfigurationError: If the expression is empty or unparsable.
    """
    if not regex:
        raise ConfigurationError("Fixture pattern must not be empty.")
    try:
        return re.compile(regex)
    except re.error as e:
        raise ConfigurationError(f"Invalid fixture pattern '{regex}': {e}") from e


class PathMatcher:
    """
    Matcher bound to one FixturePattern.

    Attributes:
        pattern: The immutable pattern configuration.
    """

    def __init__(self, pattern: FixturePattern) -> None:
        self.pattern = pattern
        self._rx = compile_fixture_regex(pattern.regex)

    @property
    def kind(self) -> EntityKind:
        return self.pattern.kind

    def matches(self, entry_name: str, entity_kind: EntityKind) -> bool:
        """
        Decide whether an entry is a fixture.

        Args:
            entry_name: Single path segment (not a full path).
            entity_kind: Whether the entry is a file or a directory.

        Returns:
            bool: True only for entries of the configured kind whose whole
                  name matches the expression.
        """
        if entity_kind is not self.pattern.kind:
            return False
        return self._rx.fullmatch(entry_name) is not None

    def display_name(self, entry_name: str) -> str:
        """
        Derive the display name of a matched entry.

        The first capture group is used when present and non-empty,
        e.g. `binaryExpression` for `binaryExpression.kt` under `^(.+)\\.kt$`.
        """
        m = self._rx.fullmatch(entry_name)
        if m is None or not m.groups():
            return entry_name
        return m.group(1) or entry_name
