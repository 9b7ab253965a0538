from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Verifies the application's external behavior by invoking the entry point
script via subprocess: config discovery from the working directory, exit
codes, stream output and the generated pytest module, which is itself run
in a separate pytest process.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"
ENTRY_POINT = SRC_DIR / "suitegen" / "main.py"

HOOKS_MODULE = '''
import os


class FragmentHooks:
    def do_test(self, path):
        assert os.path.isfile(path), path

    def do_test_with_import(self, path):
        assert path.endswith("/imports/hashMap.kt"), path
'''


def _env(extra_path: Optional[Path] = None) -> dict:
    env = os.environ.copy()
    paths = [str(SRC_DIR)] + ([str(extra_path)] if extra_path else [])
    env["PYTHONPATH"] = os.pathsep.join(paths + [env.get("PYTHONPATH", "")])
    return env


def run_cli(args: List[str], cwd: Path) -> subprocess.CompletedProcess:
    """
    Execute the CLI in a separate process.

    Injects the 'src' directory into PYTHONPATH so the package resolves
    without being installed in site-packages.
    """
    return subprocess.run(
        [sys.executable, str(ENTRY_POINT)] + args,
        cwd=cwd,
        env=_env(),
        capture_output=True,
        text=True,
        encoding="utf-8",
    )


def run_generated(module: Path, project: Path) -> subprocess.CompletedProcess:
    """Run a generated module under pytest with the project importable."""
    return subprocess.run(
        [sys.executable, "-m", "pytest", "-q", "-p", "no:cacheprovider", str(module)],
        cwd=project,
        env=_env(extra_path=project),
        capture_output=True,
        text=True,
        encoding="utf-8",
    )


@pytest.fixture
def project(fixture_root: Path) -> Path:
    """
    Turn the shared fixture tree into a project with a config and hooks.

    Structure:
    /<tmp>
      suitegen.json
      hooks.py
      /testData/...
    """
    root = fixture_root.parent
    (root / "hooks.py").write_text(HOOKS_MODULE, encoding="utf-8")
    (root / "suitegen.json").write_text(json.dumps({
        "version": "1.0.0",
        "output_dir": "generated",
        "suites": [{
            "name": "Fragments",
            "root": "testData",
            "pattern": r"^(.+)\.kt$",
            "base_class": "hooks:FragmentHooks",
            "hooks": [{"prefix": "imports/", "hook": "do_test_with_import"}],
        }],
    }), encoding="utf-8")
    return root


def test_cli_scan_discovers_config_from_cwd(project: Path) -> None:
    """TC-01: A standard scan from the project directory succeeds."""
    result = run_cli(["scan"], cwd=project / "testData" / "checker")

    assert result.returncode == 0, f"CLI failed with stderr: {result.stderr}"
    assert "checker/codeFragments/binaryExpression.kt" in result.stdout


def test_cli_generated_module_runs_under_pytest(project: Path) -> None:
    """TC-02: The generated module passes on an unchanged tree."""
    result = run_cli(["generate"], cwd=project)
    module = project / "generated" / "test_fragments_generated.py"

    assert result.returncode == 0, result.stderr
    assert module.is_file()

    run = run_generated(module, project)
    assert run.returncode == 0, run.stdout + run.stderr
    assert "7 passed" in run.stdout


def test_cli_drift_fails_check_and_generated_suite(project: Path) -> None:
    """TC-03: A fixture added after generation fails both the CLI check and pytest."""
    assert run_cli(["generate"], cwd=project).returncode == 0
    (project / "testData" / "checker" / "codeFragments" / "newCase.kt").write_text("", encoding="utf-8")

    check = run_cli(["check"], cwd=project)
    assert check.returncode == 1
    assert "checker/codeFragments/newCase.kt" in check.stdout

    run = run_generated(project / "generated" / "test_fragments_generated.py", project)
    assert run.returncode == 1
    assert "newCase.kt" in run.stdout


def test_cli_dry_run_writes_nothing(project: Path) -> None:
    """TC-04: 'dry-run' reports the plan without touching the disk."""
    result = run_cli(["generate", "--dry-run"], cwd=project)

    assert result.returncode == 0
    assert "planned" in result.stdout
    assert not (project / "generated").exists()


def test_cli_invalid_pattern_is_config_error(project: Path) -> None:
    """TC-05: An unparsable pattern aborts with exit code 2."""
    config = json.loads((project / "suitegen.json").read_text(encoding="utf-8"))
    config["suites"][0]["pattern"] = "^(.+\\.kt$"
    (project / "suitegen.json").write_text(json.dumps(config), encoding="utf-8")

    result = run_cli(["scan"], cwd=project)

    assert result.returncode == 2
    assert "Invalid fixture pattern" in result.stderr


def test_cli_missing_root_is_config_error(project: Path) -> None:
    """TC-06: A suite whose root vanished reports a configuration error."""
    config = json.loads((project / "suitegen.json").read_text(encoding="utf-8"))
    config["suites"][0]["root"] = "gone"
    (project / "suitegen.json").write_text(json.dumps(config), encoding="utf-8")

    broken = run_cli(["scan"], cwd=project)
    assert broken.returncode == 2
    assert "does not exist" in broken.stdout + broken.stderr


def test_cli_composite_suite_mixes_shallow_and_recursive_groups(project: Path) -> None:
    """TC-07: One module holds a shallow and a recursive group, each with its own presence check."""
    config = json.loads((project / "suitegen.json").read_text(encoding="utf-8"))
    config["suites"] = [{
        "name": "Fragments",
        "pattern": r"^(.+)\.kt$",
        "base_class": "hooks:FragmentHooks",
        "groups": [
            {"root": "testData/checker/codeFragments", "recursive": False},
            {"root": "testData/checker/codeFragments/imports", "default_hook": "do_test_with_import"},
        ],
    }]
    (project / "suitegen.json").write_text(json.dumps(config), encoding="utf-8")

    assert run_cli(["generate"], cwd=project).returncode == 0
    module = project / "generated" / "test_fragments_generated.py"
    run = run_generated(module, project)
    assert run.returncode == 0, run.stdout + run.stderr
    assert "5 passed" in run.stdout

    (project / "testData" / "checker" / "codeFragments" / "imports" / "added.kt").write_text("", encoding="utf-8")
    check = run_cli(["check"], cwd=project)
    assert check.returncode == 1
    assert "testData/checker/codeFragments/imports/added.kt" in check.stdout
