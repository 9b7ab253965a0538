from __future__ import annotations

"""
Suite Engine.

Orchestrates the per-suite workflows behind the CLI commands: scanning,
previewing, drift checking and generating. Each suite is processed
independently; a configuration error aborts only the suite it belongs to
and is reported in that suite's result.
"""

import logging
import os
from typing import Callable, Iterable, List, Sequence, Tuple

from suitegen.core.discovery.scanner import scan
from suitegen.core.generation.generator import render
from suitegen.core.generation.naming import group_name, snake_case
from suitegen.core.generation.source_writer import emit_suite_module, write_module
from suitegen.core.generation.tree_renderer import render_member_trees, render_suite_tree
from suitegen.core.model.suite_builder import build_for_definition
from suitegen.core.verification.drift_oracle import check, check_paths, format_report
from suitegen.core.verification.recorded_fixtures import read_recorded_fixtures
from suitegen.domain.errors import ConfigurationError
from suitegen.domain.run_models import (
    SuiteRunResult,
    create_check_result,
    create_error_result,
    create_success_result,
)
from suitegen.domain.suite_models import CoverageReport, SuiteDefinition, SuiteNode

logger = logging.getLogger(__name__)

# A scanned member: its definition, the scan result and the built model
LoadedMember = Tuple[SuiteDefinition, List[str], SuiteNode]


# ==============================================================================
# PUBLIC API
# ==============================================================================

def load_suite(definition: SuiteDefinition) -> Tuple[List[str], SuiteNode]:
    """
    Scan a suite's root and build its model.

    `definition` must be a scanned unit: a plain suite or one member group.

    Raises:
        ConfigurationError: If scanning or hook resolution fails.
    """
    paths = scan(
        definition.root_path,
        definition.pattern,
        definition.pattern.recursive,
        definition.exclude_dirs,
    )
    return paths, build_for_definition(definition, paths)


def load_members(definition: SuiteDefinition) -> List[LoadedMember]:
    """
    Scan and build every member of a suite.

    A plain suite is its own single member. A failure in any member aborts
    the whole suite.
    """
    loaded: List[LoadedMember] = []
    for member in definition.members():
        paths, model = load_suite(member)
        loaded.append((member, paths, model))
    return loaded


def generated_module_path(definition: SuiteDefinition, output_dir: str) -> str:
    return os.path.join(output_dir, f"test_{snake_case(definition.name)}_generated.py")


def scan_suites(suites: Sequence[SuiteDefinition]) -> List[SuiteRunResult]:
    """List the fixtures of every suite."""
    def _scan(definition: SuiteDefinition) -> SuiteRunResult:
        loaded = load_members(definition)
        return create_success_result(definition.name, _all_paths(definition, loaded))
    return _run_each(suites, _scan)


def show_suites(suites: Sequence[SuiteDefinition]) -> List[SuiteRunResult]:
    """Render the ASCII tree of every suite model."""
    def _show(definition: SuiteDefinition) -> SuiteRunResult:
        loaded = load_members(definition)
        if definition.is_composite:
            lines = render_member_trees(
                [(f"{member.name} ({member.root})", model) for member, _, model in loaded],
                root_label=definition.name,
            )
        else:
            _, _, model = loaded[0]
            lines = render_suite_tree(model, root_label=f"{definition.name} ({definition.root})")
        return create_success_result(definition.name, _all_paths(definition, loaded), tree_lines=lines)
    return _run_each(suites, _show)


def check_suites(
        suites: Sequence[SuiteDefinition],
        output_dir: str,
        against_generated: bool = True,
) -> List[SuiteRunResult]:
    """
    Run the drift oracle for every suite.

    Members of a composite suite are checked against their own root and
    pattern; the suite result lists their drift with root-qualified paths.

    Args:
        suites: Suites to check.
        output_dir: Directory holding the generated modules.
        against_generated: Compare against the paths recorded in the
                           generated modules; otherwise against a freshly
                           built model.
    """
    def _check(definition: SuiteDefinition) -> SuiteRunResult:
        module_path = ""
        if against_generated:
            module_path = generated_module_path(definition, output_dir)
            if not os.path.isfile(module_path):
                raise ConfigurationError(
                    f"Generated module not found: '{module_path}'. Run 'suitegen generate' first."
                )

        fixtures: List[str] = []
        unrepresented: List[str] = []
        stale: List[str] = []
        for member in definition.members():
            if against_generated:
                recorded = read_recorded_fixtures(module_path, group_name(member.name))
                report = check_paths(
                    recorded,
                    member.root_path,
                    member.pattern,
                    exclude_dirs=member.exclude_dirs,
                )
            else:
                recorded, model = load_suite(member)
                report = check(
                    model,
                    member.root_path,
                    member.pattern,
                    exclude_dirs=member.exclude_dirs,
                )
            fixtures += _member_paths(definition, member, recorded)
            unrepresented += _member_paths(definition, member, report.missing_from_model)
            stale += _member_paths(definition, member, report.missing_from_disk)

        report = CoverageReport(missing_from_model=tuple(unrepresented), missing_from_disk=tuple(stale))
        return create_check_result(
            definition.name, fixtures, report, format_report(report), module_path
        )
    return _run_each(suites, _check)


def generate_suites(
        suites: Sequence[SuiteDefinition],
        output_dir: str,
        project_root: str,
        dry_run: bool = False,
        overwrite: bool = False,
) -> List[SuiteRunResult]:
    """
    Emit one pytest module per suite into `output_dir`.

    Args:
        suites: Suites to generate.
        output_dir: Target directory for the modules.
        project_root: Root the suite roots are relative to.
        dry_run: Compute module paths without writing anything.
        overwrite: Replace existing modules whose content differs.
    """
    root_from_module = os.path.relpath(project_root, output_dir)

    def _generate(definition: SuiteDefinition) -> SuiteRunResult:
        loaded = load_members(definition)
        sections = [(member, render(model, member.name)) for member, _, model in loaded]
        source = emit_suite_module(definition, sections, root_from_module)
        module_path = generated_module_path(definition, output_dir)
        paths = _all_paths(definition, loaded)

        if dry_run:
            logger.info(f"[dry-run] Would write {module_path} ({len(paths)} fixture(s))")
            status = "planned"
        else:
            status = write_module(module_path, source, overwrite=overwrite)
        return create_success_result(definition.name, paths, module_path, status)
    return _run_each(suites, _generate)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _member_paths(definition: SuiteDefinition, member: SuiteDefinition, paths: Iterable[str]) -> List[str]:
    """Paths as reported for a suite: member paths are prefixed with the member root."""
    if not definition.is_composite:
        return list(paths)
    prefix = member.root.replace(os.sep, "/").rstrip("/")
    return [f"{prefix}/{p}" for p in paths]


def _all_paths(definition: SuiteDefinition, loaded: Sequence[LoadedMember]) -> List[str]:
    out: List[str] = []
    for member, paths, _ in loaded:
        out += _member_paths(definition, member, paths)
    return out


def _run_each(
        suites: Sequence[SuiteDefinition],
        action: Callable[[SuiteDefinition], SuiteRunResult],
) -> List[SuiteRunResult]:
    """Apply an action to every suite, isolating configuration failures."""
    results: List[SuiteRunResult] = []
    for definition in suites:
        try:
            results.append(action(definition))
        except ConfigurationError as e:
            logger.error(f"Suite '{definition.name}': {e}")
            results.append(create_error_result(definition.name, str(e)))
    return results
