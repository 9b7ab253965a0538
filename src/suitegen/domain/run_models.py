from __future__ import annotations

"""
Engine Result Data Models.

Per-suite outcome objects passed from the engine to the CLI, together with
the factory functions used to build them.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from suitegen.domain.suite_models import CoverageReport

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class SuiteRunResult:
    """
    Result of running one engine command on one suite.

    Attributes:
        suite: Suite name.
        ok: Whether the command succeeded for this suite.
        error: Failure description ("" on success).
        config_error: True when the failure is a ConfigurationError.
        fixtures: Relative fixture paths found on disk.
        missing_from_model: Fixtures on disk not covered (check command).
        missing_from_disk: Covered fixtures no longer on disk (check command).
        module_path: Generated module path (generate/check commands).
        module_status: created/updated/unchanged/skipped/planned.
        tree_lines: ASCII preview of the suite model (show command).
    """
    suite: str
    ok: bool
    error: str = ""
    config_error: bool = False

    fixtures: List[str] = field(default_factory=list)
    missing_from_model: List[str] = field(default_factory=list)
    missing_from_disk: List[str] = field(default_factory=list)

    module_path: str = ""
    module_status: str = ""
    tree_lines: List[str] = field(default_factory=list)

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(suite: str, error: str, config_error: bool = True) -> SuiteRunResult:
    """Create a failed result for a suite that could not be processed."""
    return SuiteRunResult(suite=suite, ok=False, error=error, config_error=config_error)


def create_check_result(
        suite: str,
        fixtures: List[str],
        report: CoverageReport,
        message: str,
        module_path: str = "",
) -> SuiteRunResult:
    """Create the result of a drift check; fails when the report shows drift."""
    return SuiteRunResult(
        suite=suite,
        ok=report.ok,
        error=message,
        fixtures=fixtures,
        missing_from_model=list(report.missing_from_model),
        missing_from_disk=list(report.missing_from_disk),
        module_path=module_path,
    )


def create_success_result(
        suite: str,
        fixtures: List[str],
        module_path: str = "",
        module_status: str = "",
        tree_lines: Optional[List[str]] = None,
) -> SuiteRunResult:
    """Create a successful scan/show/generate result."""
    return SuiteRunResult(
        suite=suite,
        ok=module_status != "skipped",
        error="Generated module differs; use --overwrite to replace it." if module_status == "skipped" else "",
        fixtures=fixtures,
        module_path=module_path,
        module_status=module_status,
        tree_lines=tree_lines or [],
    )
