#!/usr/bin/env python3
"""Layer boundary checks for the workflow converter package."""

from __future__ import annotations

from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
PACKAGE = ROOT / "src/workflow_converter"

# Modules imported by generated workflow files must stay free of CLI code.
RUNTIME_MODULES = ("authoring.py", "generation.py", "codec.py", "template.py")


def _assert_no_imports(path: Path, banned: list[str]) -> None:
    text = path.read_text(encoding="utf-8")
    for token in banned:
        if token in text:
            raise SystemExit(f"Architecture violation in {path}: found '{token}'")


def main() -> None:
    """Run repository architecture boundary checks."""
    _assert_no_imports(PACKAGE / "cli/cli.py", ["import yaml", "from yaml"])

    for path in (PACKAGE / "application").glob("*.py"):
        _assert_no_imports(path, ["import typer", "from typer", "import click"])

    for name in RUNTIME_MODULES:
        _assert_no_imports(
            PACKAGE / name,
            ["import typer", "from typer", "workflow_converter.cli", "use_cases"],
        )

    print("Architecture checks passed.")


if __name__ == "__main__":
    main()
