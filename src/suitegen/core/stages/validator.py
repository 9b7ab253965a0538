from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper between the raw JSON config and the suite engine. Coerces loose
scalar values with warnings, injects defaults, resolves paths and turns
each suite declaration into an immutable SuiteDefinition. Anything that
would make a suite unbuildable is a fatal ConfigurationError.
"""

import logging
import os
from typing import Any, Dict, List, Optional, Set, Tuple

from suitegen.core.generation.naming import group_name
from suitegen.core.generation.source_writer import split_base_class
from suitegen.core.matching.path_matcher import compile_fixture_regex
from suitegen.core.model.hook_resolver import compile_rule
from suitegen.domain.config import (
    DEFAULT_DIRECTORY_PATTERN,
    DEFAULT_FILE_PATTERN,
    get_default_config,
    get_default_suite,
)
from suitegen.domain.errors import ConfigurationError
from suitegen.domain.suite_models import (
    EntityKind,
    FixturePattern,
    HookBinding,
    SuiteDefinition,
)

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize a raw configuration dictionary.

    Args:
        config: Raw configuration data, usually from `load_config`.
        strict: If True, type mismatches are fatal instead of coerced.

    Returns:
        Tuple[Dict[str, Any], List[str]]: The normalized configuration
            (absolute `project_root` and `output_dir`, `suites` as a tuple of
            SuiteDefinition) and a list of warnings.

    Raises:
        ConfigurationError: For any suite that cannot be built.
    """
    warnings: List[str] = []

    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Invalid config type: expected dict, received {type(config).__name__}."
        )

    merged: Dict[str, Any] = dict(get_default_config())
    merged.update(config)

    # 1. Path resolution
    config_dir = _as_str(merged.get("config_dir"), os.getcwd(), "config_dir", warnings, strict)
    project_root = _as_str(merged.get("project_root"), ".", "project_root", warnings, strict)
    project_root_abs = os.path.normpath(os.path.join(config_dir, project_root))
    output_dir = _as_str(
        merged.get("output_dir"), get_default_config()["output_dir"], "output_dir", warnings, strict
    )

    # 2. Suite declarations
    raw_suites = merged.get("suites")
    if not isinstance(raw_suites, list):
        raise ConfigurationError(
            f"Invalid field 'suites': expected list, received {type(raw_suites).__name__}."
        )

    suites: List[SuiteDefinition] = []
    seen: Set[str] = set()
    for i, raw in enumerate(raw_suites):
        suite = _validate_suite(raw, i, project_root_abs, warnings, strict)
        if suite.name in seen:
            raise ConfigurationError(f"Duplicate suite name '{suite.name}'.")
        seen.add(suite.name)
        suites.append(suite)

    if not suites:
        warnings.append("No suites declared.")

    for w in warnings:
        logger.debug(f"Config warning: {w}")

    return {
        "version": merged.get("version"),
        "project_root": project_root_abs,
        "output_dir": os.path.normpath(os.path.join(project_root_abs, output_dir)),
        "suites": tuple(suites),
    }, warnings


def select_suites(
        suites: Tuple[SuiteDefinition, ...],
        names: Optional[List[str]],
) -> Tuple[SuiteDefinition, ...]:
    """
    Restrict suites to the requested names, preserving config order.

    Raises:
        ConfigurationError: If a requested name is not declared.
    """
    if not names:
        return suites
    known = {s.name for s in suites}
    unknown = [n for n in names if n not in known]
    if unknown:
        raise ConfigurationError(f"Unknown suite(s): {', '.join(unknown)}")
    return tuple(s for s in suites if s.name in names)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: SUITE NORMALIZATION
# -----------------------------------------------------------------------------

def _validate_suite(
        raw: Any,
        index: int,
        project_root: str,
        warnings: List[str],
        strict: bool,
) -> SuiteDefinition:
    """Turn one raw suite declaration into a SuiteDefinition."""
    where = f"suites[{index}]"
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Invalid {where}: expected object, received {type(raw).__name__}.")

    merged: Dict[str, Any] = dict(get_default_suite())
    merged.update(raw)

    name = _as_str(merged.get("name"), "", f"{where}.name", warnings, strict)
    if not name:
        raise ConfigurationError(f"Invalid {where}: 'name' is required.")

    base_class = _as_str(merged.get("base_class"), "", f"{where}.base_class", warnings, strict)
    split_base_class(base_class)

    raw_groups = merged.get("groups")
    if not raw_groups:
        return _validate_member(merged, name, where, project_root, base_class, warnings, strict)

    # Composite suite: members inherit every suite-level setting they do not override
    if not isinstance(raw_groups, list):
        raise ConfigurationError(f"Invalid 'groups' in suite '{name}': expected list.")
    if _as_str(merged.get("root"), "", f"{where}.root", warnings, strict):
        raise ConfigurationError(f"Invalid suite '{name}': declare either 'root' or 'groups', not both.")

    inherited = {k: v for k, v in merged.items() if k not in ("name", "root", "groups", "base_class")}
    members: List[SuiteDefinition] = []
    class_names: Set[str] = set()
    for i, raw_group in enumerate(raw_groups):
        group_where = f"{where}.groups[{i}]"
        if not isinstance(raw_group, dict):
            raise ConfigurationError(f"Invalid {group_where}: expected object.")

        group_merged = dict(inherited)
        group_merged.update(raw_group)
        fallback_name = _last_segment(group_merged.get("root"))
        group = _validate_member(
            group_merged,
            _as_str(group_merged.get("name"), fallback_name, f"{group_where}.name", warnings, strict),
            group_where,
            project_root,
            base_class,
            warnings,
            strict,
        )

        class_name = group_name(group.name)
        if class_name in class_names:
            raise ConfigurationError(
                f"Duplicate group '{group.name}' in suite '{name}' (class {class_name})."
            )
        class_names.add(class_name)
        members.append(group)

    first = members[0]
    return SuiteDefinition(
        name=name,
        root="",
        root_path="",
        pattern=first.pattern,
        default_hook=first.default_hook,
        base_class=base_class,
        groups=tuple(members),
    )


def _validate_member(
        merged: Dict[str, Any],
        name: str,
        where: str,
        project_root: str,
        base_class: str,
        warnings: List[str],
        strict: bool,
) -> SuiteDefinition:
    """Build the definition of a scanned unit: a plain suite or one member group."""
    root = _as_str(merged.get("root"), "", f"{where}.root", warnings, strict)
    if not root:
        raise ConfigurationError(f"Invalid {where} ('{name}'): 'root' is required.")

    kind = _as_kind(merged.get("kind"), name)
    fallback_pattern = DEFAULT_DIRECTORY_PATTERN if kind is EntityKind.DIRECTORY else DEFAULT_FILE_PATTERN
    regex = _as_str(merged.get("pattern"), fallback_pattern, f"{where}.pattern", warnings, strict)
    compile_fixture_regex(regex)

    recursive = _as_bool(merged.get("recursive"), True, f"{where}.recursive", warnings, strict)
    default_hook = _as_str(merged.get("default_hook"), "", f"{where}.default_hook", warnings, strict)
    exclude_dirs = _as_list_str(merged.get("exclude_dirs"), [], f"{where}.exclude_dirs", warnings, strict)

    return SuiteDefinition(
        name=name,
        root=root,
        root_path=os.path.normpath(os.path.join(project_root, root)),
        pattern=FixturePattern(regex=regex, kind=kind, recursive=recursive),
        default_hook=default_hook or None,
        hooks=_as_bindings(merged.get("hooks"), name),
        exclude_dirs=tuple(exclude_dirs),
        base_class=base_class,
    )


def _last_segment(root: Any) -> str:
    if not isinstance(root, str):
        return ""
    return root.strip().replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]


def _as_kind(value: Any, suite: str) -> EntityKind:
    if value is None:
        return EntityKind.FILE
    if isinstance(value, str):
        try:
            return EntityKind(value.strip().lower())
        except ValueError:
            pass
    raise ConfigurationError(
        f"Invalid kind {value!r} in suite '{suite}': expected 'file' or 'directory'."
    )


def _as_bindings(value: Any, suite: str) -> Tuple[HookBinding, ...]:
    """Parse the ordered hook-binding table of a suite."""
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ConfigurationError(f"Invalid 'hooks' in suite '{suite}': expected list.")

    bindings: List[HookBinding] = []
    for i, item in enumerate(value):
        where = f"hooks[{i}] of suite '{suite}'"
        if not isinstance(item, dict):
            raise ConfigurationError(f"Invalid {where}: expected object.")

        hook = item.get("hook")
        if not isinstance(hook, str) or not hook.strip():
            raise ConfigurationError(f"Invalid {where}: 'hook' must be a non-empty string.")

        has_prefix = isinstance(item.get("prefix"), str)
        has_pattern = isinstance(item.get("pattern"), str)
        if has_prefix == has_pattern:
            raise ConfigurationError(f"Invalid {where}: declare exactly one of 'prefix' or 'pattern'.")

        if has_pattern:
            compile_rule(item["pattern"])
            bindings.append(HookBinding(rule=item["pattern"], hook=hook.strip(), is_pattern=True))
        else:
            bindings.append(HookBinding(rule=item["prefix"], hook=hook.strip()))

    return tuple(bindings)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise ConfigurationError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise ConfigurationError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_list_str(
        value: Any,
        fallback: List[str],
        field: str,
        warnings: List[str],
        strict: bool,
) -> List[str]:
    """Ensure input is a list of sanitized strings, supporting CSV parsing."""
    if value is None:
        return list(fallback)

    if isinstance(value, str) and not strict:
        items = [x.strip() for x in value.split(",") if x.strip()]
        warnings.append(f"Field '{field}' converted from CSV string to list.")
        return items

    if isinstance(value, list):
        out: List[str] = []
        for i, item in enumerate(value):
            if isinstance(item, str):
                s = item.strip()
                if s:
                    out.append(s)
            else:
                msg = f"Invalid item in '{field}[{i}]': expected str."
                if strict:
                    raise ConfigurationError(msg)
                warnings.append(f"{msg} Item discarded.")
        return out

    msg = f"Invalid field '{field}': expected list[str], received {type(value).__name__}."
    if strict:
        raise ConfigurationError(msg)
    warnings.append(f"{msg} Using fallback.")
    return list(fallback)