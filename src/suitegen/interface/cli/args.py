from __future__ import annotations

"""
CLI Argument Definition.

Defines the command-line schema: global options shared by every command
and one subcommand per engine workflow.
"""

import argparse

COMMANDS = ("scan", "show", "check", "generate")


def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the suitegen CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="suitegen",
        description="Discover fixture files, generate fixture test suites and detect drift.",
    )

    # --- Configuration ---
    p.add_argument(
        "-c", "--config",
        dest="config_path",
        default=None,
        help="Path to suitegen.json (default: nearest one above the current directory).",
    )
    p.add_argument(
        "--suite",
        dest="suites",
        action="append",
        default=None,
        metavar="NAME",
        help="Restrict the command to a suite. May be repeated.",
    )

    # --- Diagnostics and output ---
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only log warnings and errors.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write logs to this file (rotated).",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print results as JSON.",
    )

    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    sub.add_parser("scan", help="List the fixtures discovered for each suite.")
    sub.add_parser("show", help="Print the suite model as a tree.")

    check = sub.add_parser("check", help="Detect drift between fixtures on disk and generated tests.")
    check.add_argument(
        "--fresh",
        action="store_true",
        help="Check a freshly built model instead of the generated modules.",
    )

    generate = sub.add_parser("generate", help="Write one generated pytest module per suite.")
    generate.add_argument(
        "--dry-run",
        action="store_true",
        help="Report the modules that would be written without writing them.",
    )
    generate.add_argument(
        "--overwrite",
        action="store_true",
        help="Replace generated modules whose content differs.",
    )
    generate.add_argument(
        "-o", "--output-dir",
        dest="output_dir",
        default=None,
        help="Override the output directory from the config.",
    )

    return p
