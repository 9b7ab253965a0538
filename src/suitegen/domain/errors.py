from __future__ import annotations

"""
Error Taxonomy.

Separates fatal configuration problems from the two kinds of test failures
reported while a generated suite runs: coverage drift between disk and the
generated tests, and failures raised by an operation hook.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from suitegen.domain.suite_models import CoverageReport


class SuitegenError(Exception):
    """Base class for every error raised by suitegen."""


class ConfigurationError(SuitegenError):
    """
    Fatal misconfiguration detected before any suite is built.

    Raised for unparsable patterns, missing or unreadable roots, symlink
    cycles, hooks that cannot be resolved and invalid config files.
    """


class CoverageDrift(SuitegenError, AssertionError):
    """
    Disk and generated tests disagree about which fixtures exist.

    Subclasses AssertionError so test runners report it as a failure
    rather than an error.

    Attributes:
        report: The CoverageReport that triggered the failure.
    """

    def __init__(self, message: str, report: "CoverageReport") -> None:
        super().__init__(message)
        self.report = report


class OperationFailure(SuitegenError):
    """
    An operation hook failed while exercising a fixture.

    Attributes:
        fixture_path: Path handed to the hook.
        cause: The exception raised by the hook, unmodified.
    """

    def __init__(self, fixture_path: str, cause: Optional[BaseException] = None) -> None:
        detail = f"{type(cause).__name__}: {cause}" if cause is not None else "unknown failure"
        super().__init__(f"Fixture '{fixture_path}' failed: {detail}")
        self.fixture_path = fixture_path
        self.cause = cause
