"""Shared pytest configuration, marker assignment and workflow fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

HELLO_WORLD_YAML = """\
# Example workflow
name: Example workflow
on:
  push:
    branches:
      - main # default branch only
jobs:
  exampleJob:
    steps:
      - run: echo hi
"""


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Attach suite markers based on test file path."""
    del config
    for item in items:
        parts = set(Path(str(item.fspath)).parts)
        if "e2e_tests" in parts:
            item.add_marker(pytest.mark.e2e)
        elif "integration_tests" in parts:
            item.add_marker(pytest.mark.integration)
        elif "unit_tests" in parts:
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def hello_world_yaml() -> str:
    """YAML text of the reference hello-world workflow."""
    return HELLO_WORLD_YAML


@pytest.fixture
def write_workflow(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a workflow file into ``tmp_path`` and return its path."""

    def _write(name: str, text: str = HELLO_WORLD_YAML) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
