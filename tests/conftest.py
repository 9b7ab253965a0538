from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixture trees and suite definitions used across unit tests.
"""

import os
import sys
from pathlib import Path
from typing import Callable

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from suitegen.domain.suite_models import (  # noqa: E402
    EntityKind,
    FixturePattern,
    HookBinding,
    SuiteDefinition,
)

KT_PATTERN = r"^(.+)\.kt$"


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def fixture_root(tmp_path: Path) -> Path:
    """
    Create a test-data tree modelled on a code-fragment checker suite.

    Structure:
    /testData
      /checker/codeFragments
        binaryExpression.kt
        binaryExpression.kt.bak   (not a fixture)
        blockCodeFragment.kt
        notes.txt                 (not a fixture)
        /empty
        /imports
          hashMap.kt
    """
    root = tmp_path / "testData"
    fragments = root / "checker" / "codeFragments"
    (fragments / "imports").mkdir(parents=True)
    (fragments / "empty").mkdir()

    (fragments / "binaryExpression.kt").write_text("1 + 2", encoding="utf-8")
    (fragments / "binaryExpression.kt.bak").write_text("old", encoding="utf-8")
    (fragments / "blockCodeFragment.kt").write_text("{ }", encoding="utf-8")
    (fragments / "notes.txt").write_text("notes", encoding="utf-8")
    (fragments / "imports" / "hashMap.kt").write_text("HashMap()", encoding="utf-8")

    return root


@pytest.fixture
def kt_pattern() -> FixturePattern:
    return FixturePattern(regex=KT_PATTERN, kind=EntityKind.FILE, recursive=True)


@pytest.fixture
def make_definition(fixture_root: Path) -> Callable[..., SuiteDefinition]:
    """Factory for suite definitions rooted at the shared test-data tree."""
    def _make(**overrides) -> SuiteDefinition:
        values = {
            "name": "CodeFragmentHighlighting",
            "root": "testData",
            "root_path": str(fixture_root),
            "pattern": FixturePattern(regex=KT_PATTERN, kind=EntityKind.FILE, recursive=True),
            "default_hook": "do_test",
            "hooks": (HookBinding(rule="imports/", hook="do_test_with_import"),),
        }
        values.update(overrides)
        return SuiteDefinition(**values)
    return _make


@pytest.fixture
def composite_definition(fixture_root: Path) -> SuiteDefinition:
    """
    Composite suite over the shared tree, mixing matching modes.

    CodeFragments matches only the immediate children of its root, while
    Imports matches recursively under its own root with its own hook.
    """
    fragments_root = fixture_root / "checker" / "codeFragments"
    fragments = SuiteDefinition(
        name="CodeFragments",
        root="testData/checker/codeFragments",
        root_path=str(fragments_root),
        pattern=FixturePattern(regex=KT_PATTERN, kind=EntityKind.FILE, recursive=False),
        default_hook="do_test",
    )
    imports = SuiteDefinition(
        name="Imports",
        root="testData/checker/codeFragments/imports",
        root_path=str(fragments_root / "imports"),
        pattern=FixturePattern(regex=KT_PATTERN, kind=EntityKind.FILE, recursive=True),
        default_hook="do_test_with_import",
    )
    return SuiteDefinition(
        name="CodeFragmentHighlighting",
        root="",
        root_path="",
        pattern=fragments.pattern,
        groups=(fragments, imports),
    )
