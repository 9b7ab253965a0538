from __future__ import annotations

"""
Configuration Domain Management.

Loads suite declarations from the project's JSON config file and provides
the defaults injected by the validator for every missing key.
"""

import json
import logging
import os
from typing import Any, Dict

from suitegen.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE_NAME = "suitegen.json"
CURRENT_CONFIG_VERSION = "1.0.0"
DEFAULT_OUTPUT_DIR = os.path.join("tests", "generated")
DEFAULT_HOOK = "do_test"

# Matches every file with an extension, capturing the stem as display name
DEFAULT_FILE_PATTERN = r"^(.+)\.[^.]+$"
# Matches directories without dots, as used for multi-file fixtures
DEFAULT_DIRECTORY_PATTERN = r"^([^.]+)$"


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default top-level configuration.

    Returns:
        Dict[str, Any]: Default configuration values with no suites.
    """
    return {
        "version": CURRENT_CONFIG_VERSION,
        "project_root": ".",
        "output_dir": DEFAULT_OUTPUT_DIR,
        "suites": [],
    }


def get_default_suite() -> Dict[str, Any]:
    """
    Generate the defaults applied to a single suite declaration.

    `name` and `root` have no meaningful default and must be declared. A
    composite suite lists `groups` instead of a `root`; each group takes the
    keys of a suite and inherits the values it leaves out.
    """
    return {
        "name": "",
        "root": "",
        "pattern": None,
        "kind": "file",
        "recursive": True,
        "default_hook": DEFAULT_HOOK,
        "hooks": [],
        "exclude_dirs": [],
        "base_class": "",
        "groups": [],
    }


# -----------------------------------------------------------------------------
# Persistence
# -----------------------------------------------------------------------------
def find_config(start_dir: str) -> str:
    """
    Walk up from `start_dir` looking for the config file.

    Returns:
        str: Absolute path of the nearest config file, or "" if none exists.
    """
    current = os.path.abspath(start_dir)
    while True:
        candidate = os.path.join(current, CONFIG_FILE_NAME)
        if os.path.isfile(candidate):
            return candidate
        parent = os.path.dirname(current)
        if parent == current:
            return ""
        current = parent


def load_config(path: str) -> Dict[str, Any]:
    """
    Read the raw configuration dictionary from disk.

    The file's directory is recorded under `config_dir` so relative roots can
    be resolved against it later.

    Raises:
        ConfigurationError: If the file is missing, unreadable or not a JSON object.
    """
    if not path or not os.path.isfile(path):
        raise ConfigurationError(f"Config file not found: '{path}'")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Config file '{path}' is not valid JSON: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Config file '{path}' cannot be read: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file '{path}' must contain a JSON object, found {type(data).__name__}."
        )

    version = data.get("version")
    if version and version != CURRENT_CONFIG_VERSION:
        logger.warning(f"Config version {version} differs from {CURRENT_CONFIG_VERSION}.")

    data["config_dir"] = os.path.dirname(os.path.abspath(path))
    logger.debug(f"Loaded config from {path}")
    return data
