#!/usr/bin/env python3
"""Convert the example workflow to Python and regenerate its YAML."""

from __future__ import annotations

import shutil
import subprocess
import sys
import tempfile
from pathlib import Path

from workflow_converter import convert_workflows, parse

HERE = Path(__file__).resolve().parent


def main() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        source = Path(tmp) / "hello-world.yml"
        shutil.copy(HERE / "hello-world.yml", source)

        report = convert_workflows([str(source)], use_lines=False, remove=True)
        module = report.results[0].output_path
        if module is None:
            raise SystemExit(f"FAIL: {report.results[0].error}")
        print(module.read_text(encoding="utf-8"))

        subprocess.run([sys.executable, str(module)], check=True)
        generated = Path(tmp) / "hello-world.generated.yml"
        original = parse((HERE / "hello-world.yml").read_text(encoding="utf-8"))
        if parse(generated.read_text(encoding="utf-8")) != original:
            raise SystemExit("FAIL: regenerated YAML differs from the original.")
        print(generated.read_text(encoding="utf-8"))
        print("PASS: YAML -> Python -> YAML round-trip preserved the workflow.")


if __name__ == "__main__":
    main()
