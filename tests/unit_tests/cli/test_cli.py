"""CLI tests driven through Typer's ``CliRunner``."""

from __future__ import annotations

import shlex
from collections.abc import Callable
from pathlib import Path

import pytest
from typer.testing import CliRunner

from workflow_converter.cli.cli import app, main

runner = CliRunner()

LITERAL_FLAGS = ["--no-lines", "--no-comments"]


def test_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in ("convert", "build", "doctor"):
        assert command in result.output


def test_convert_without_files_prints_usage() -> None:
    result = runner.invoke(app, ["convert"])

    assert result.exit_code == 1
    assert "Usage: workflow-converter convert <workflow-files>" in result.output
    assert "Example: workflow-converter convert" in result.output


def test_convert_reports_unmatched_pattern(tmp_path: Path) -> None:
    result = runner.invoke(app, ["convert", str(tmp_path / "*.yml")])

    assert result.exit_code == 1
    assert "No YAML files found matching" in result.output


def test_convert_literal_keeps_sources(write_workflow: Callable[..., Path]) -> None:
    source = write_workflow("ci.yml")

    result = runner.invoke(app, ["convert", str(source), *LITERAL_FLAGS])

    assert result.exit_code == 0, result.output
    assert f"- {source}" in result.output
    assert f"Wrote:[/green] {source.with_name('ci.main.py')}" in result.output
    assert "workflow-converter build" in result.output
    assert "IMPORTANT" in result.output
    assert f"rm {shlex.join([str(source)])}" in result.output
    assert source.exists()


def test_convert_remove_deletes_sources(write_workflow: Callable[..., Path]) -> None:
    source = write_workflow("ci.yml")

    result = runner.invoke(app, ["convert", str(source), "--remove", *LITERAL_FLAGS])

    assert result.exit_code == 0, result.output
    assert f"Removed {source}" in result.output
    assert "IMPORTANT" not in result.output
    assert not source.exists()


def test_convert_declined_overwrite(write_workflow: Callable[..., Path]) -> None:
    source = write_workflow("ci.yml")
    existing = source.with_name("ci.main.py")
    existing.write_text("# mine\n", encoding="utf-8")

    result = runner.invoke(app, ["convert", str(source), *LITERAL_FLAGS], input="n\n")

    assert result.exit_code == 0, result.output
    assert "already exists. Overwrite?" in result.output
    assert f"Skipping {existing}" in result.output
    assert existing.read_text(encoding="utf-8") == "# mine\n"


def test_convert_force_skips_prompt(write_workflow: Callable[..., Path]) -> None:
    source = write_workflow("ci.yml")
    existing = source.with_name("ci.main.py")
    existing.write_text("# mine\n", encoding="utf-8")

    result = runner.invoke(app, ["convert", str(source), "--force", *LITERAL_FLAGS])

    assert result.exit_code == 0, result.output
    assert "Overwrite?" not in result.output
    assert "wf = workflow(" in existing.read_text(encoding="utf-8")


def test_convert_failure_sets_exit_code(write_workflow: Callable[..., Path]) -> None:
    broken = write_workflow("broken.yml", "jobs: [unclosed\n")
    good = write_workflow("good.yml")

    result = runner.invoke(app, ["convert", str(broken), str(good), *LITERAL_FLAGS])

    assert result.exit_code == 1
    assert "MalformedMarkupError" in result.output
    assert "1 file(s) failed to convert." in result.output
    assert good.with_name("good.main.py").exists()


def test_build_without_modules_fails(tmp_path: Path) -> None:
    result = runner.invoke(app, ["build", str(tmp_path)])

    assert result.exit_code == 1
    assert "UsageError" in result.output


def test_doctor_prints_toolchain(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("WORKFLOW_CONVERTER_FORMATTER", raising=False)

    result = runner.invoke(app, ["doctor"])

    assert result.exit_code == 0
    assert "Python:" in result.output
    assert "formatter: ruff==0.8.6" in result.output


def test_main_maps_invalid_arguments_to_exit_one() -> None:
    with pytest.raises(SystemExit) as info:
        main(["convert", "--bogus"])

    assert info.value.code == 1


def test_main_help_exits_zero(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as info:
        main(["--help"])

    assert info.value.code == 0
    assert "workflow-converter" in capsys.readouterr().out


def test_build_reports_unexpected_errors(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    from workflow_converter.application import use_cases

    (tmp_path / "ci.main.py").write_text("", encoding="utf-8")

    async def _explode(*args: object, **kwargs: object) -> None:
        raise RuntimeError("runner crashed")

    monkeypatch.setattr(use_cases, "build_workflow_files", _explode)

    result = runner.invoke(app, ["build", str(tmp_path)])

    assert result.exit_code == 1
    assert "RuntimeError:[/red] runner crashed" in result.output
