from __future__ import annotations

"""
Operation Hook Resolution.

Selects the operation hook for a fixture from an ordered binding table.
Prefix rules match at path-segment boundaries anywhere in the relative
path (a leading "/" anchors them at the test-data root); pattern rules are
regular expressions searched in the path. The rule with the longest match
wins, earlier rules win ties, and the suite default applies otherwise.
"""

import re
from typing import Iterable, Optional, Tuple

from suitegen.domain.errors import ConfigurationError
from suitegen.domain.suite_models import HookBinding


def resolve_hook(
        fixture_path: str,
        bindings: Iterable[HookBinding],
        default_hook: Optional[str] = None,
) -> str:
    """
    Resolve the hook bound to a fixture path.

    Args:
        fixture_path: POSIX path relative to the test-data root.
        bindings: Ordered hook-binding table.
        default_hook: Hook used when no rule matches.

    Returns:
        str: The selected hook identifier.

    Raises:
        ConfigurationError: If no rule matches and there is no default.
    """
    best: Optional[Tuple[int, str]] = None

    for binding in bindings:
        length = match_length(fixture_path, binding)
        if length < 0:
            continue
        if best is None or length > best[0]:
            best = (length, binding.hook)

    if best is not None:
        return best[1]
    if default_hook:
        return default_hook
    raise ConfigurationError(
        f"No hook binding matches fixture '{fixture_path}' and no default hook is configured."
    )


def match_length(fixture_path: str, binding: HookBinding) -> int:
    """
    Measure how specifically a binding matches a path.

    Returns:
        int: Length of the matched text, or -1 when the rule does not apply.
    """
    if binding.is_pattern:
        m = compile_rule(binding.rule).search(fixture_path)
        return (m.end() - m.start()) if m else -1

    anchored = binding.rule.startswith("/")
    prefix = binding.rule.strip("/")
    if not prefix:
        return 0

    haystack = f"/{fixture_path}/"
    needle = f"/{prefix}/"
    hit = haystack.startswith(needle) if anchored else needle in haystack
    return len(prefix) if hit else -1


def compile_rule(rule: str) -> re.Pattern:
    """
    Compile a pattern rule of the binding table.

    Raises:
        ConfigurationError: If the expression is unparsable.
    """
    try:
        return re.compile(rule)
    except re.error as e:
        raise ConfigurationError(f"Invalid hook binding pattern '{rule}': {e}") from e
