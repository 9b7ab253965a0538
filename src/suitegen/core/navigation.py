from __future__ import annotations

"""
Fixture navigation references.

Pure formatting of the locator strings handed to operation hooks and shown
in failure reports. Total over every path the scanner can produce.
"""

import os

from suitegen.domain.suite_models import EntityKind


def navigation_metadata(path: str, kind: EntityKind = EntityKind.FILE) -> str:
    """
    Format a fixture path as a navigable reference.

    Separators are normalised to "/" and directory fixtures end with "/".
    """
    ref = path.replace(os.sep, "/") if os.sep != "/" else path
    if kind is EntityKind.DIRECTORY and not ref.endswith("/"):
        ref += "/"
    return ref


def fixture_reference(root: str, rel_path: str, kind: EntityKind = EntityKind.FILE) -> str:
    """Join a test-data root and a relative fixture path into a reference."""
    root_ref = navigation_metadata(root).rstrip("/")
    joined = f"{root_ref}/{rel_path}" if root_ref else rel_path
    return navigation_metadata(joined, kind)
