from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, config discovery and
validation, engine execution and result rendering.

Exit codes: 0 success, 1 drift or failed generation, 2 configuration
error, 130 interrupted.
"""

import json
import os
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from suitegen.core import engine
from suitegen.core.stages.validator import select_suites, validate_config
from suitegen.domain.config import CONFIG_FILE_NAME, find_config, load_config
from suitegen.domain.errors import ConfigurationError
from suitegen.domain.run_models import SuiteRunResult
from suitegen.infra.logging import LoggingConfig, configure_logging, get_logger
from suitegen.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    # 1. Argument parsing
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap
    configure_logging(_logging_config(args))

    # 3. Configuration resolution
    try:
        settings = _load_settings(args)
        suites = select_suites(settings["suites"], args.suites)
    except ConfigurationError as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    # 4. Engine execution
    try:
        results = _dispatch(args, settings, suites)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.critical(f"Unexpected failure: {e}", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

    # 5. Output rendering
    if args.json_output:
        print(json.dumps([asdict(r) for r in results], ensure_ascii=False, indent=2))
    else:
        _print_human_summary(args.command, results)

    return _exit_code(results)

# -----------------------------------------------------------------------------
# CONFIGURATION AND DISPATCH
# -----------------------------------------------------------------------------

def _logging_config(args: Any) -> LoggingConfig:
    """Map the diagnostic flags to a logging configuration. --debug wins over --quiet."""
    if args.debug:
        return LoggingConfig(level="DEBUG", log_file=args.log_file)
    level = "WARNING" if args.quiet else "INFO"
    # Keep stderr free of scan chatter when stdout carries JSON
    overrides = (("suitegen.core", "WARNING"),) if args.json_output else ()
    return LoggingConfig(level=level, log_file=args.log_file, logger_levels=overrides)


def _load_settings(args: Any) -> Dict[str, Any]:
    config_path = args.config_path or find_config(os.getcwd())
    if not config_path:
        raise ConfigurationError(
            f"No {CONFIG_FILE_NAME} found in '{os.getcwd()}' or its parents; pass --config."
        )

    settings, warnings = validate_config(load_config(config_path))
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if getattr(args, "output_dir", None):
        settings["output_dir"] = os.path.abspath(args.output_dir)
    return settings


def _dispatch(args: Any, settings: Dict[str, Any], suites: Any) -> List[SuiteRunResult]:
    if args.command == "scan":
        return engine.scan_suites(suites)
    if args.command == "show":
        return engine.show_suites(suites)
    if args.command == "check":
        return engine.check_suites(suites, settings["output_dir"], against_generated=not args.fresh)
    return engine.generate_suites(
        suites,
        settings["output_dir"],
        settings["project_root"],
        dry_run=args.dry_run,
        overwrite=args.overwrite,
    )


def _exit_code(results: List[SuiteRunResult]) -> int:
    if any(r.config_error for r in results):
        return EXIT_CONFIG_ERROR
    if any(not r.ok for r in results):
        return EXIT_FAILURE
    return EXIT_OK

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(command: str, results: List[SuiteRunResult]) -> None:
    """Print one block per suite describing the command's outcome."""
    for result in results:
        status = "OK" if result.ok else "FAILED"
        print(f"[{status}] {result.suite}")

        if result.config_error:
            print(f"  configuration error: {result.error}")
            continue

        if command == "scan":
            for path in result.fixtures:
                print(f"  {path}")
            print(f"  {len(result.fixtures)} fixture(s)")
        elif command == "show":
            for line in result.tree_lines:
                print(f"  {line}")
        elif command == "check":
            if result.ok:
                print(f"  {len(result.fixtures)} fixture(s) covered, no drift")
            else:
                for line in result.error.splitlines():
                    print(f"  {line}")
        else:
            print(f"  {result.module_status}: {result.module_path} ({len(result.fixtures)} fixture(s))")
            if result.error:
                print(f"  {result.error}")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
