from __future__ import annotations

"""
Unit tests for the Suite Engine.

Verifies the per-suite workflows behind the CLI commands and the
isolation of configuration failures between suites.
"""

import os
import shutil
from pathlib import Path
from typing import Callable

import pytest

from suitegen.core import engine
from suitegen.domain.suite_models import SuiteDefinition


@pytest.fixture
def definition(make_definition: Callable[..., SuiteDefinition]) -> SuiteDefinition:
    return make_definition()


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "tests" / "generated"


def _generate(definition: SuiteDefinition, output_dir: Path, **kwargs):
    project_root = os.path.dirname(definition.root_path)
    return engine.generate_suites([definition], str(output_dir), project_root, **kwargs)[0]


def test_generated_module_path(definition: SuiteDefinition, output_dir: Path) -> None:
    path = engine.generated_module_path(definition, str(output_dir))
    assert path == os.path.join(str(output_dir), "test_code_fragment_highlighting_generated.py")


def test_scan_suites_lists_fixtures(definition: SuiteDefinition) -> None:
    result = engine.scan_suites([definition])[0]

    assert result.ok
    assert result.fixtures == [
        "checker/codeFragments/binaryExpression.kt",
        "checker/codeFragments/blockCodeFragment.kt",
        "checker/codeFragments/imports/hashMap.kt",
    ]


def test_show_suites_renders_tree(definition: SuiteDefinition) -> None:
    result = engine.show_suites([definition])[0]

    assert result.tree_lines[0] == "CodeFragmentHighlighting (testData)"
    assert any("hashMap.kt  [do_test_with_import]" in line for line in result.tree_lines)


def test_generate_dry_run_writes_nothing(definition: SuiteDefinition, output_dir: Path) -> None:
    result = _generate(definition, output_dir, dry_run=True)

    assert result.ok
    assert result.module_status == "planned"
    assert not output_dir.exists()


def test_generate_then_check_passes(definition: SuiteDefinition, output_dir: Path) -> None:
    generated = _generate(definition, output_dir)
    checked = engine.check_suites([definition], str(output_dir))[0]

    assert generated.module_status == "created"
    assert os.path.isfile(generated.module_path)
    assert checked.ok
    assert checked.error == ""


def test_check_detects_added_fixture(
        definition: SuiteDefinition, output_dir: Path, fixture_root: Path,
) -> None:
    _generate(definition, output_dir)
    (fixture_root / "checker" / "added.kt").write_text("", encoding="utf-8")

    result = engine.check_suites([definition], str(output_dir))[0]

    assert not result.ok
    assert not result.config_error
    assert result.missing_from_model == ["checker/added.kt"]
    assert "Missing from generated tests: [checker/added.kt]" in result.error


def test_check_detects_deleted_fixture(
        definition: SuiteDefinition, output_dir: Path, fixture_root: Path,
) -> None:
    _generate(definition, output_dir)
    (fixture_root / "checker" / "codeFragments" / "blockCodeFragment.kt").unlink()

    result = engine.check_suites([definition], str(output_dir))[0]

    assert result.missing_from_disk == ["checker/codeFragments/blockCodeFragment.kt"]


def test_fresh_check_never_drifts(definition: SuiteDefinition, fixture_root: Path) -> None:
    (fixture_root / "checker" / "added.kt").write_text("", encoding="utf-8")

    result = engine.check_suites([definition], "unused", against_generated=False)[0]
    assert result.ok


def test_check_without_generated_module_is_config_error(
        definition: SuiteDefinition, output_dir: Path,
) -> None:
    result = engine.check_suites([definition], str(output_dir))[0]

    assert result.config_error
    assert "Generated module not found" in result.error


def test_regenerate_without_overwrite_is_skipped(
        definition: SuiteDefinition, output_dir: Path, fixture_root: Path,
) -> None:
    _generate(definition, output_dir)
    assert _generate(definition, output_dir).module_status == "unchanged"

    (fixture_root / "checker" / "added.kt").write_text("", encoding="utf-8")
    skipped = _generate(definition, output_dir)
    updated = _generate(definition, output_dir, overwrite=True)

    assert skipped.module_status == "skipped"
    assert not skipped.ok
    assert updated.module_status == "updated"
    assert updated.ok


def test_failing_suite_does_not_abort_others(
        make_definition: Callable[..., SuiteDefinition], tmp_path: Path,
) -> None:
    broken = make_definition(name="Broken", root_path=str(tmp_path / "missing"))
    healthy = make_definition()

    results = engine.scan_suites([broken, healthy])

    assert [r.suite for r in results] == ["Broken", "CodeFragmentHighlighting"]
    assert results[0].config_error
    assert "does not exist" in results[0].error
    assert results[1].ok

# -----------------------------------------------------------------------------
# Composite suites
# -----------------------------------------------------------------------------

def _generate_composite(definition: SuiteDefinition, output_dir: Path, fixture_root: Path):
    return engine.generate_suites([definition], str(output_dir), str(fixture_root.parent))[0]


def test_composite_scan_qualifies_member_paths(composite_definition: SuiteDefinition) -> None:
    result = engine.scan_suites([composite_definition])[0]

    # The shallow member never reaches imports/, which the recursive member owns
    assert result.fixtures == [
        "testData/checker/codeFragments/binaryExpression.kt",
        "testData/checker/codeFragments/blockCodeFragment.kt",
        "testData/checker/codeFragments/imports/hashMap.kt",
    ]


def test_composite_show_renders_one_subtree_per_member(composite_definition: SuiteDefinition) -> None:
    result = engine.show_suites([composite_definition])[0]

    assert result.tree_lines == [
        "CodeFragmentHighlighting",
        "├── CodeFragments (testData/checker/codeFragments)",
        "│   ├── binaryExpression.kt  [do_test]",
        "│   └── blockCodeFragment.kt  [do_test]",
        "└── Imports (testData/checker/codeFragments/imports)",
        "    └── hashMap.kt  [do_test_with_import]",
    ]


def test_composite_generate_then_check_passes(
        composite_definition: SuiteDefinition, output_dir: Path, fixture_root: Path,
) -> None:
    generated = _generate_composite(composite_definition, output_dir, fixture_root)
    checked = engine.check_suites([composite_definition], str(output_dir))[0]

    assert generated.module_status == "created"
    assert checked.ok, checked.error


def test_composite_check_scopes_drift_per_member(
        composite_definition: SuiteDefinition, output_dir: Path, fixture_root: Path,
) -> None:
    _generate_composite(composite_definition, output_dir, fixture_root)
    fragments = fixture_root / "checker" / "codeFragments"
    (fragments / "imports" / "added.kt").write_text("", encoding="utf-8")
    # Below the shallow member's root but outside the recursive member's root
    (fragments / "empty" / "nested.kt").write_text("", encoding="utf-8")

    result = engine.check_suites([composite_definition], str(output_dir))[0]

    assert not result.ok
    assert result.missing_from_model == ["testData/checker/codeFragments/imports/added.kt"]
    assert result.missing_from_disk == []


def test_composite_member_failure_aborts_suite(
        composite_definition: SuiteDefinition, fixture_root: Path,
) -> None:
    shutil.rmtree(fixture_root / "checker" / "codeFragments" / "imports")

    result = engine.scan_suites([composite_definition])[0]

    assert result.config_error
    assert "does not exist" in result.error
    assert result.fixtures == []
