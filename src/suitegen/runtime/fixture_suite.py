from __future__ import annotations

"""
Runtime Support for Generated Test Classes.

Generated pytest classes extend `FixtureSuite`. Each generated entry point
is tagged with the fixture it covers (`fixture_metadata`) and dispatches to
an operation hook implemented as a method of the test class. The per-group
presence check collects those tags from the class and its nested groups and
runs the drift oracle against the current disk state.
"""

import logging
import os
from typing import Any, Callable, List, Optional, Tuple, Type

from suitegen.core.generation.naming import presence_check_name
from suitegen.core.navigation import fixture_reference
from suitegen.core.verification.drift_oracle import assert_coverage, check_paths
from suitegen.domain.errors import ConfigurationError, OperationFailure
from suitegen.domain.suite_models import (
    EntityKind,
    FixturePattern,
    GroupDescriptor,
    SuiteDefinition,
)

logger = logging.getLogger(__name__)

_FIXTURE_ATTR = "__fixture_path__"


# ==============================================================================
# ENTRY POINT TAGGING
# ==============================================================================

def fixture_metadata(fixture_path: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Tag a generated test method with the relative path of its fixture."""
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        setattr(func, _FIXTURE_ATTR, fixture_path)
        return func
    return decorator


def collect_recorded_fixtures(cls: type) -> List[str]:
    """
    Gather the fixture paths recorded by a generated class.

    Walks the methods defined on `cls` and, recursively, the nested
    FixtureSuite classes defined inside it, in definition order.
    """
    recorded: List[str] = []
    for attr in vars(cls).values():
        path = getattr(attr, _FIXTURE_ATTR, None)
        if isinstance(path, str):
            recorded.append(path)
        elif isinstance(attr, type) and issubclass(attr, FixtureSuite):
            recorded.extend(collect_recorded_fixtures(attr))
    return recorded


# ==============================================================================
# BASE CLASS
# ==============================================================================

class FixtureSuite:
    """
    Mixin for generated fixture test groups.

    Attributes:
        project_root: Directory the test-data root is relative to ("" = cwd).
        data_root: Root of the suite's fixtures.
        fixture_pattern: Pattern the generated code was produced with.
        exclude_dirs: Directory names excluded from the scan.
        group_path: Directory of this group, relative to the test-data root.
    """
    # Generated entries are named "test_*"; no attribute here may use that prefix
    project_root: str = ""
    data_root: str = ""
    fixture_pattern: Optional[FixturePattern] = None
    exclude_dirs: Tuple[str, ...] = ()
    group_path: str = ""

    @classmethod
    def resolved_root(cls) -> str:
        if cls.project_root:
            return os.path.normpath(os.path.join(cls.project_root, cls.data_root))
        return cls.data_root

    def run_fixture(self, fixture_path: str, hook: str) -> None:
        """
        Execute the operation hook bound to a fixture.

        Args:
            fixture_path: Path relative to the test-data root.
            hook: Name of the hook method on this class.

        Raises:
            ConfigurationError: If the class does not implement the hook.
            OperationFailure: If the hook raises; the original exception is
                              chained and available as `cause`.
        """
        operation = getattr(self, hook, None)
        if not callable(operation):
            raise ConfigurationError(
                f"{type(self).__name__} does not implement operation hook '{hook}'"
            )

        pattern = type(self).fixture_pattern
        kind = pattern.kind if pattern is not None else EntityKind.FILE
        reference = fixture_reference(self.resolved_root(), fixture_path, kind)

        logger.debug(f"Running {hook} on {reference}")
        try:
            operation(reference)
        except Exception as exc:
            logger.error(f"Operation hook '{hook}' failed for {reference}: {exc}")
            raise OperationFailure(reference, exc) from exc

    def assert_all_fixtures_present(self) -> None:
        """
        Fail if fixtures under this group drifted from the generated methods.

        Raises:
            CoverageDrift: Listing unrepresented and stale fixtures.
        """
        cls = type(self)
        if cls.fixture_pattern is None:
            raise ConfigurationError(f"{cls.__name__} declares no fixture_pattern")

        report = check_paths(
            collect_recorded_fixtures(cls),
            cls.resolved_root(),
            cls.fixture_pattern,
            scope=cls.group_path,
            exclude_dirs=cls.exclude_dirs,
        )
        assert_coverage(report)


# ==============================================================================
# IN-MEMORY MATERIALIZATION
# ==============================================================================

def materialize(
        descriptor: GroupDescriptor,
        definition: SuiteDefinition,
        base: Type[Any] = object,
) -> type:
    """
    Build the generated class hierarchy in memory instead of emitting source.

    Args:
        descriptor: Top-level group descriptor of the suite.
        definition: Suite the descriptor was rendered from.
        base: Class providing the operation hooks.

    Returns:
        type: The top-level test class; nested groups are class attributes.
    """
    bases: Tuple[type, ...] = (FixtureSuite,) if base is object else (base, FixtureSuite)
    settings = {
        "project_root": "",
        "data_root": definition.root_path,
        "fixture_pattern": definition.pattern,
        "exclude_dirs": definition.exclude_dirs,
    }
    return _materialize_group(descriptor, bases, settings)


def _materialize_group(descriptor: GroupDescriptor, bases: Tuple[type, ...], settings: dict) -> type:
    namespace: dict = dict(settings)
    namespace["group_path"] = descriptor.path
    namespace[presence_check_name(descriptor.name)] = _presence_check()

    for entry in descriptor.entries:
        namespace[entry.name] = _entry_point(entry.fixture_path, entry.hook)
    for group in descriptor.groups:
        namespace[group.name] = _materialize_group(group, bases, settings)

    return type(descriptor.name, bases, namespace)


def _entry_point(fixture_path: str, hook: str) -> Callable[[Any], None]:
    @fixture_metadata(fixture_path)
    def entry(self: FixtureSuite) -> None:
        self.run_fixture(fixture_path, hook)
    return entry


def _presence_check() -> Callable[[Any], None]:
    def presence(self: FixtureSuite) -> None:
        self.assert_all_fixtures_present()
    return presence
