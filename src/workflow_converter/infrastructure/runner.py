"""Single-file runner for ``.main.py`` workflow modules."""

from __future__ import annotations

import asyncio
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from workflow_converter.errors import ExternalToolError
from workflow_converter.generation import CHECK_ENV_VAR


@dataclass(frozen=True)
class ScriptRun:
    """Exit status and combined output of one workflow module run."""

    path: Path
    returncode: int
    output: str


async def run_workflow_script(
    path: Path,
    *,
    check: bool = False,
    python: str | None = None,
) -> ScriptRun:
    """Execute ``path`` with the current interpreter.

    Parameters
    ----------
    path : Path
        Workflow module to execute.
    check : bool, default=False
        Ask the module to verify its YAML instead of writing it.
    python : str | None, default=None
        Interpreter override, defaults to ``sys.executable``.
    """
    env = dict(os.environ)
    if check:
        env[CHECK_ENV_VAR] = "1"
    else:
        env.pop(CHECK_ENV_VAR, None)
    try:
        process = await asyncio.create_subprocess_exec(
            python or sys.executable,
            str(path.resolve()),
            cwd=path.parent,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            env=env,
        )
    except OSError as exc:
        raise ExternalToolError(f"Unable to run {path}: {exc}") from exc
    stdout, _ = await process.communicate()
    return ScriptRun(
        path=path,
        returncode=process.returncode if process.returncode is not None else 1,
        output=stdout.decode("utf-8", errors="replace"),
    )
