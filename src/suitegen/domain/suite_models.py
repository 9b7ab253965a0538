from __future__ import annotations

"""
Suite Domain Data Models.

Immutable structures shared by the scanner, the model builder, the drift
oracle and the generator. Fixtures and suite nodes are rebuilt on every scan;
patterns, bindings and suite definitions are configuration.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Tuple

# -----------------------------------------------------------------------------
# CONFIGURATION MODELS
# -----------------------------------------------------------------------------

class EntityKind(Enum):
    """Discriminates file fixtures from directory fixtures."""
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class FixturePattern:
    """
    Naming rule for fixtures of one suite.

    Attributes:
        regex: Raw regular expression, matched against a whole path segment.
        kind: Whether fixtures are files or directories.
        recursive: Whether matching applies below the immediate children.
    """
    regex: str
    kind: EntityKind = EntityKind.FILE
    recursive: bool = True


@dataclass(frozen=True)
class HookBinding:
    """
    Single rule of the hook-binding table.

    Attributes:
        rule: Path prefix (segment aligned) or regular expression.
        hook: Identifier of the operation hook to bind.
        is_pattern: True when `rule` is a regular expression.
    """
    rule: str
    hook: str
    is_pattern: bool = False


@dataclass(frozen=True)
class SuiteDefinition:
    """
    Complete declaration of one fixture suite.

    Attributes:
        name: Suite identifier, also the base of generated names.
        root: Test-data root as written in the config (project relative).
        root_path: Absolute test-data root on disk.
        pattern: Fixture naming rule.
        default_hook: Hook used when no binding matches.
        hooks: Ordered hook-binding table.
        exclude_dirs: Directory names never descended into.
        base_class: Import path ("module:Class") of the generated classes' base.
        groups: Member groups of a composite suite. Each member carries its own
                root, pattern and hooks, and the suite itself scans nothing.
    """
    name: str
    root: str
    root_path: str
    pattern: FixturePattern
    default_hook: Optional[str] = "do_test"
    hooks: Tuple[HookBinding, ...] = ()
    exclude_dirs: Tuple[str, ...] = ()
    base_class: str = ""
    groups: Tuple["SuiteDefinition", ...] = ()

    @property
    def is_composite(self) -> bool:
        return bool(self.groups)

    def members(self) -> Tuple["SuiteDefinition", ...]:
        """The definitions that are scanned: the member groups, or the suite itself."""
        return self.groups or (self,)

# -----------------------------------------------------------------------------
# SCAN-TIME MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Fixture:
    """
    One test-data entry; identity is its relative path.

    Attributes:
        path: POSIX path relative to the test-data root.
        name: Display name derived from the entry name.
        hook: Resolved operation hook identifier.
        kind: File or directory fixture.
    """
    path: str
    name: str = field(default="", compare=False)
    hook: str = field(default="", compare=False)
    kind: EntityKind = field(default=EntityKind.FILE, compare=False)


@dataclass(frozen=True)
class SuiteNode:
    """
    One directory level of the suite model.

    Attributes:
        path: POSIX directory path relative to the root ("" for the root).
        children: Nested suite nodes in scan order.
        fixtures: Fixtures located directly at this level, in scan order.
        hook: Hook bound to the fixtures at this level when they share one.
    """
    path: str = ""
    children: Tuple["SuiteNode", ...] = ()
    fixtures: Tuple[Fixture, ...] = ()
    hook: Optional[str] = None

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1] if self.path else ""

    def walk(self) -> Iterator["SuiteNode"]:
        """Yield this node and every descendant in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def iter_fixtures(self) -> Iterator[Fixture]:
        """Yield every fixture of the subtree in pre-order."""
        for node in self.walk():
            yield from node.fixtures


@dataclass(frozen=True)
class CoverageReport:
    """
    Outcome of a drift check.

    Attributes:
        missing_from_model: Fixtures on disk the model does not cover.
        missing_from_disk: Fixtures the model covers that no longer exist.
    """
    missing_from_model: Tuple[str, ...] = ()
    missing_from_disk: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.missing_from_model and not self.missing_from_disk

# -----------------------------------------------------------------------------
# GENERATOR DESCRIPTORS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class EntryDescriptor:
    """Generated entry point bound to one fixture."""
    name: str
    fixture_path: str
    hook: str


@dataclass(frozen=True)
class GroupDescriptor:
    """
    Generated test group mirroring one SuiteNode.

    Attributes:
        name: Class name of the group.
        path: Directory path of the mirrored SuiteNode.
        groups: Nested group descriptors.
        entries: Entry points for fixtures at this level.
    """
    name: str
    path: str
    groups: Tuple["GroupDescriptor", ...] = ()
    entries: Tuple[EntryDescriptor, ...] = ()
