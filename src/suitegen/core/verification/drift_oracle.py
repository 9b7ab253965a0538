from __future__ import annotations

"""
Coverage Drift Oracle.

Re-scans a test-data root and compares the live fixture set against the
fixtures a suite model (or generated code) claims to cover. Checks are
side-effect free and can run as ordinary tests on every suite execution:
fixtures added after generation and references to deleted fixtures are
both reported, each listing every offending path.
"""

import logging
from typing import Iterable, List, Optional

from suitegen.core.discovery.scanner import scan
from suitegen.domain.errors import CoverageDrift
from suitegen.domain.suite_models import CoverageReport, FixturePattern, SuiteNode

logger = logging.getLogger(__name__)

MISSING_FROM_MODEL_LABEL = "Missing from generated tests"
MISSING_FROM_DISK_LABEL = "No longer present on disk"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def check(
        suite_model: SuiteNode,
        root_path: str,
        pattern: FixturePattern,
        recursive: Optional[bool] = None,
        scope: str = "",
        exclude_dirs: Iterable[str] = (),
) -> CoverageReport:
    """
    Compare a suite model against the current disk state.

    Args:
        suite_model: Model built from an earlier scan.
        root_path: Test-data root used to build the model.
        pattern: Fixture pattern used to build the model.
        recursive: Recursive flag used to build the model.
        scope: Restrict the comparison to fixtures under this directory.
        exclude_dirs: Directory names excluded from the scan.

    Returns:
        CoverageReport: Differences in both directions.
    """
    recorded = [f.path for f in suite_model.iter_fixtures()]
    return check_paths(recorded, root_path, pattern, recursive, scope, exclude_dirs)


def check_paths(
        recorded_paths: Iterable[str],
        root_path: str,
        pattern: FixturePattern,
        recursive: Optional[bool] = None,
        scope: str = "",
        exclude_dirs: Iterable[str] = (),
) -> CoverageReport:
    """
    Compare recorded fixture paths against the current disk state.

    Used directly by generated test classes, which carry their fixture
    paths as literals instead of a SuiteNode.
    """
    on_disk = [p for p in scan(root_path, pattern, recursive, exclude_dirs) if _in_scope(p, scope)]
    recorded = _dedupe(p for p in recorded_paths if _in_scope(p, scope))

    disk_set = set(on_disk)
    recorded_set = set(recorded)

    report = CoverageReport(
        missing_from_model=tuple(p for p in on_disk if p not in recorded_set),
        missing_from_disk=tuple(p for p in recorded if p not in disk_set),
    )

    if report.ok:
        logger.debug(f"No drift under '{root_path}' (scope='{scope}', {len(on_disk)} fixture(s))")
    else:
        logger.warning(
            f"Drift under '{root_path}' (scope='{scope}'): "
            f"{len(report.missing_from_model)} unrepresented, "
            f"{len(report.missing_from_disk)} stale"
        )
    return report


def format_report(report: CoverageReport) -> str:
    """
    Render the failure message of a report.

    Returns:
        str: One line per non-empty set, or "" when the report passes.
    """
    lines: List[str] = []
    if report.missing_from_model:
        lines.append(f"{MISSING_FROM_MODEL_LABEL}: [{', '.join(report.missing_from_model)}]")
    if report.missing_from_disk:
        lines.append(f"{MISSING_FROM_DISK_LABEL}: [{', '.join(report.missing_from_disk)}]")
    return "\n".join(lines)


def assert_coverage(report: CoverageReport) -> None:
    """
    Fail when a report shows drift.

    Raises:
        CoverageDrift: Naming every unrepresented and every stale fixture.
    """
    if not report.ok:
        raise CoverageDrift(format_report(report), report)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _in_scope(path: str, scope: str) -> bool:
    if not scope:
        return True
    return path.startswith(scope.rstrip("/") + "/")


def _dedupe(paths: Iterable[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for p in paths:
        if p not in seen:
            seen.add(p)
            out.append(p)
    return out
