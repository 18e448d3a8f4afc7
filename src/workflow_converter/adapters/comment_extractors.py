"""Comment extractor adapters implementing the ``CommentExtractor`` port."""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

from workflow_converter.errors import ExternalToolError

COMMENTS_MODULE = "workflow_converter.comments"


class ScriptCommentExtractor:
    """Run the comment extraction module in a separate interpreter."""

    def __init__(self, python: str | None = None) -> None:
        self.python = python or sys.executable

    async def extract(self, source_path: Path) -> str:
        """Return the raw comment block printed for ``source_path``.

        Raises
        ------
        ExternalToolError
            If the process cannot start, exits non-zero or prints invalid UTF-8.
        """
        try:
            process = await asyncio.create_subprocess_exec(
                self.python,
                "-m",
                COMMENTS_MODULE,
                str(source_path),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env={**os.environ, "PYTHONIOENCODING": "utf-8"},
            )
        except OSError as exc:
            raise ExternalToolError(f"Unable to start comment extraction: {exc}") from exc

        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            raise ExternalToolError(
                f"Comment extraction failed for {source_path} "
                f"(exit code {process.returncode}).",
                stderr=stderr.decode("utf-8", errors="replace"),
            )
        try:
            return stdout.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ExternalToolError(
                f"Comment extraction for {source_path} produced invalid UTF-8: {exc}"
            ) from exc


class DisabledCommentExtractor:
    """Used with ``--no-comments``."""

    async def extract(self, source_path: Path) -> str:
        del source_path
        return ""
