from __future__ import annotations

"""
Unit tests for the CLI Application Controller.

Runs `main()` in-process against a temporary project, with the logging
bootstrap mocked out so the root logger of the test session is untouched.
"""

import json
from pathlib import Path
from typing import Iterator
from unittest.mock import patch

import pytest

from suitegen.interface.cli.app import (
    EXIT_CONFIG_ERROR,
    EXIT_FAILURE,
    EXIT_OK,
    _logging_config,
    main,
)
from suitegen.interface.cli.args import build_parser


@pytest.fixture(autouse=True)
def no_logging_setup() -> Iterator[None]:
    with patch("suitegen.interface.cli.app.configure_logging"):
        yield


@pytest.fixture
def config_file(fixture_root: Path) -> Path:
    project = fixture_root.parent
    config = project / "suitegen.json"
    config.write_text(json.dumps({
        "version": "1.0.0",
        "output_dir": "generated",
        "suites": [{
            "name": "Fragments",
            "root": "testData",
            "pattern": r"^(.+)\.kt$",
            "hooks": [{"prefix": "imports/", "hook": "do_test_with_import"}],
        }],
    }), encoding="utf-8")
    return config


def test_scan_prints_fixtures(config_file: Path, capsys: pytest.CaptureFixture) -> None:
    code = main(["-c", str(config_file), "scan"])
    out = capsys.readouterr().out

    assert code == EXIT_OK
    assert "[OK] Fragments" in out
    assert "checker/codeFragments/imports/hashMap.kt" in out
    assert "3 fixture(s)" in out


def test_json_output(config_file: Path, capsys: pytest.CaptureFixture) -> None:
    code = main(["-c", str(config_file), "--json", "scan"])
    payload = json.loads(capsys.readouterr().out)

    assert code == EXIT_OK
    assert payload[0]["suite"] == "Fragments"
    assert len(payload[0]["fixtures"]) == 3


def test_show_prints_tree(config_file: Path, capsys: pytest.CaptureFixture) -> None:
    assert main(["-c", str(config_file), "show"]) == EXIT_OK
    assert "hashMap.kt  [do_test_with_import]" in capsys.readouterr().out


def test_generate_and_check_cycle(
        config_file: Path, fixture_root: Path, capsys: pytest.CaptureFixture,
) -> None:
    assert main(["-c", str(config_file), "generate"]) == EXIT_OK
    assert (config_file.parent / "generated" / "test_fragments_generated.py").is_file()
    assert main(["-c", str(config_file), "check"]) == EXIT_OK

    (fixture_root / "checker" / "added.kt").write_text("", encoding="utf-8")
    capsys.readouterr()

    assert main(["-c", str(config_file), "check"]) == EXIT_FAILURE
    assert "Missing from generated tests: [checker/added.kt]" in capsys.readouterr().out


def test_output_dir_override(config_file: Path, tmp_path: Path) -> None:
    target = tmp_path / "elsewhere"
    assert main(["-c", str(config_file), "generate", "-o", str(target)]) == EXIT_OK
    assert (target / "test_fragments_generated.py").is_file()


def test_check_before_generate_is_config_error(config_file: Path) -> None:
    assert main(["-c", str(config_file), "check"]) == EXIT_CONFIG_ERROR


def test_unknown_suite_is_config_error(config_file: Path, capsys: pytest.CaptureFixture) -> None:
    assert main(["-c", str(config_file), "--suite", "Nope", "scan"]) == EXIT_CONFIG_ERROR
    assert "Unknown suite" in capsys.readouterr().err


def test_missing_config_is_config_error(tmp_path: Path) -> None:
    assert main(["-c", str(tmp_path / "absent.json"), "scan"]) == EXIT_CONFIG_ERROR


def test_unexpected_exception_is_failure(config_file: Path) -> None:
    with patch("suitegen.interface.cli.app.engine.scan_suites", side_effect=RuntimeError("boom")):
        assert main(["-c", str(config_file), "scan"]) == EXIT_FAILURE


@pytest.mark.parametrize("argv, level, overrides", [
    (["scan"], "INFO", ()),
    (["-q", "scan"], "WARNING", ()),
    (["--debug", "-q", "scan"], "DEBUG", ()),
    (["--json", "scan"], "INFO", (("suitegen.core", "WARNING"),)),
])
def test_logging_flags_mapping(argv, level, overrides) -> None:
    cfg = _logging_config(build_parser().parse_args(argv))

    assert cfg.level == level
    assert cfg.logger_levels == overrides
