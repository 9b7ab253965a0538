from __future__ import annotations

"""
Recorded Fixture Extraction.

Reads the fixture paths a generated module claims to cover straight from
its syntax tree, so drift can be checked without importing the module (and
therefore without importing the user's base class and its dependencies).
"""

import ast
import logging
from typing import List, Optional

from suitegen.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

_DECORATOR_NAME = "fixture_metadata"


def read_recorded_fixtures(module_path: str, class_name: Optional[str] = None) -> List[str]:
    """
    Collect the literal paths of every `@fixture_metadata(...)` decorator.

    Args:
        module_path: Path of a generated test module.
        class_name: Only read the top-level class of this name and the groups
                    nested in it. Composite suites record one such class per
                    member group.

    Returns:
        List[str]: Recorded fixture paths in source order.

    Raises:
        ConfigurationError: If the module cannot be read or parsed, or does
                            not define `class_name`.
    """
    try:
        with open(module_path, "r", encoding="utf-8") as f:
            source = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read generated module '{module_path}': {e}") from e

    try:
        module = ast.parse(source, filename=module_path)
    except SyntaxError as e:
        raise ConfigurationError(
            f"Generated module '{module_path}' is not valid Python: {e.msg} (line {e.lineno})"
        ) from e

    scope: ast.AST = module
    if class_name is not None:
        scoped = [
            n for n in module.body
            if isinstance(n, ast.ClassDef) and n.name == class_name
        ]
        if not scoped:
            raise ConfigurationError(
                f"Generated module '{module_path}' has no class '{class_name}'. "
                f"Run 'suitegen generate' again."
            )
        scope = scoped[0]

    recorded: List[str] = []
    functions = [n for n in ast.walk(scope) if isinstance(n, ast.FunctionDef)]
    # ast.walk is breadth-first; line numbers restore source order
    for node in sorted(functions, key=lambda n: n.lineno):
        for decorator in node.decorator_list:
            path = _decorator_path(decorator)
            if path is not None:
                recorded.append(path)

    logger.debug(f"Read {len(recorded)} recorded fixture(s) from {module_path}")
    return recorded


def _decorator_path(decorator: ast.expr) -> Optional[str]:
    if not isinstance(decorator, ast.Call) or len(decorator.args) != 1:
        return None
    func = decorator.func
    name = func.id if isinstance(func, ast.Name) else getattr(func, "attr", None)
    if name != _DECORATOR_NAME:
        return None
    arg = decorator.args[0]
    if isinstance(arg, ast.Constant) and isinstance(arg.value, str):
        return arg.value
    return None
