"""Unit tests for YAML generation from workflow modules."""

from __future__ import annotations

from pathlib import Path

import pytest

from workflow_converter.authoring import lines, workflow
from workflow_converter.codec import parse
from workflow_converter.comments import extract_comments
from workflow_converter.generation import (
    CHECK_ENV_VAR,
    generate_workflow_yaml,
    generated_header,
    is_generated_header,
)

WORKFLOW = {
    "name": "CI",
    "on": {"push": {"branches": ["main"]}},
    "jobs": {"test": {"steps": [{"run": "npm ci\nnpm test\n"}]}},
}


def test_generate_writes_headed_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CHECK_ENV_VAR, raising=False)
    module = tmp_path / "ci.main.py"

    target = generate_workflow_yaml(WORKFLOW, str(module))

    text = target.read_text(encoding="utf-8")
    assert target == tmp_path / "ci.generated.yml"
    assert text.splitlines()[0] == generated_header(module)
    assert text.startswith("# Generated from ci.main.py by workflow-converter. Do not edit.\n")
    assert "on:\n  push:\n" in text
    assert "      - run: |\n          npm ci\n          npm test\n" in text
    assert parse(text) == WORKFLOW
    assert extract_comments(text) == ""


def test_check_mode_passes_when_current(tmp_path: Path) -> None:
    module = tmp_path / "ci.main.py"
    target = generate_workflow_yaml(WORKFLOW, module, check=False)
    before = target.stat().st_mtime_ns

    assert generate_workflow_yaml(WORKFLOW, module, check=True) == target
    assert target.stat().st_mtime_ns == before


@pytest.mark.parametrize("existing", [None, "name: stale\n"])
def test_check_mode_fails_when_stale(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], existing: str | None
) -> None:
    module = tmp_path / "ci.main.py"
    target = tmp_path / "ci.generated.yml"
    if existing is not None:
        target.write_text(existing, encoding="utf-8")

    with pytest.raises(SystemExit) as info:
        generate_workflow_yaml(WORKFLOW, module, check=True)

    assert info.value.code == 1
    assert "Out of date" in capsys.readouterr().err
    assert (target.read_text(encoding="utf-8") if target.exists() else None) == existing


def test_check_mode_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(CHECK_ENV_VAR, "1")

    with pytest.raises(SystemExit):
        generate_workflow_yaml(WORKFLOW, tmp_path / "ci.main.py")
    assert not (tmp_path / "ci.generated.yml").exists()


def test_header_detection() -> None:
    assert is_generated_header(generated_header(Path("x/deploy.main.py")))
    assert not is_generated_header("# Generated by hand")


def test_lines_dedents_blocks() -> None:
    script = lines(
        """
        npm ci
          npm test
        """
    )

    assert script == "npm ci\n  npm test\n"


def test_workflow_returns_plain_dict() -> None:
    definition = workflow({"name": "CI"})

    assert definition == {"name": "CI"}
    assert type(definition) is dict
