"""Run-scoped cache of external tools installed into throwaway directories."""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import sys
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType

from workflow_converter.errors import ExternalToolError
from workflow_converter.schemas import ToolSpec

logger = logging.getLogger(__name__)

_DIRECTORY_PREFIX = "workflow-converter-tools."


@dataclass(frozen=True)
class ToolOutput:
    """Captured output of one tool invocation."""

    stdout: str
    stderr: str


@dataclass(frozen=True)
class InstalledTool:
    """Tool installed into an isolated ``pip --target`` directory."""

    spec: ToolSpec
    directory: Path

    @property
    def executable(self) -> Path:
        """Absolute path of the tool's executable."""
        return self.directory / self.spec.binary

    async def invoke(
        self,
        args: Sequence[str],
        input_text: str | None = None,
    ) -> ToolOutput:
        """Run the tool and return its decoded output.

        Parameters
        ----------
        args : Sequence[str]
            Command-line arguments after the executable.
        input_text : str | None, default=None
            Text written to the tool's stdin.

        Raises
        ------
        ExternalToolError
            If the tool cannot be started or exits non-zero.
        """
        env = {**os.environ, "PYTHONPATH": str(self.directory)}
        stdin = asyncio.subprocess.PIPE if input_text is not None else asyncio.subprocess.DEVNULL
        try:
            process = await asyncio.create_subprocess_exec(
                str(self.executable),
                *args,
                stdin=stdin,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=env,
            )
        except OSError as exc:
            raise ExternalToolError(
                f"Unable to start {self.spec.requirement} ({self.executable}): {exc}"
            ) from exc

        stdout, stderr = await process.communicate(
            input_text.encode("utf-8") if input_text is not None else None
        )
        if process.returncode != 0:
            raise ExternalToolError(
                f"{self.spec.requirement} exited with code {process.returncode}.",
                stderr=stderr.decode("utf-8", errors="replace"),
            )
        try:
            decoded = stdout.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ExternalToolError(
                f"{self.spec.requirement} produced invalid UTF-8 output: {exc}"
            ) from exc
        return ToolOutput(
            stdout=decoded,
            stderr=stderr.decode("utf-8", errors="replace"),
        )


class ToolCache:
    """Install each requested tool at most once per run.

    Installs for different requirements are independent. A second request
    for a requirement whose install is still running awaits that install
    instead of starting another one. A failed install is forgotten so a
    later request can retry it.
    """

    def __init__(self, *, python: str | None = None) -> None:
        self._python = python or sys.executable
        self._installs: dict[str, asyncio.Task[Path]] = {}
        self._directories: list[Path] = []

    @property
    def directories(self) -> list[Path]:
        """Install directories created so far."""
        return list(self._directories)

    async def ensure(self, spec: ToolSpec) -> InstalledTool:
        """Return the installed tool, installing it on first use."""
        task = self._installs.get(spec.requirement)
        if task is None:
            task = asyncio.create_task(self._install(spec.requirement))
            self._installs[spec.requirement] = task
        try:
            directory = await task
        except ExternalToolError:
            if self._installs.get(spec.requirement) is task:
                del self._installs[spec.requirement]
            raise
        return InstalledTool(spec=spec, directory=directory)

    async def _install(self, requirement: str) -> Path:
        directory = Path(tempfile.mkdtemp(prefix=_DIRECTORY_PREFIX))
        self._directories.append(directory)
        logger.info("Installing %s into %s", requirement, directory)
        try:
            process = await asyncio.create_subprocess_exec(
                self._python,
                "-m",
                "pip",
                "install",
                "--quiet",
                "--disable-pip-version-check",
                "--target",
                str(directory),
                requirement,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise ExternalToolError(f"Unable to run pip for {requirement}: {exc}") from exc

        _, stderr = await process.communicate()
        if process.returncode != 0:
            raise ExternalToolError(
                f"Installing {requirement} failed with exit code {process.returncode}.",
                stderr=stderr.decode("utf-8", errors="replace"),
            )
        return directory

    async def close(self) -> list[Path]:
        """Remove every install directory; failures are logged, not raised.

        Returns
        -------
        list[Path]
            Directories that were removed.
        """
        removed: list[Path] = []
        for directory in self._directories:
            try:
                await asyncio.to_thread(shutil.rmtree, directory)
            except OSError as exc:
                logger.warning("Could not remove tool directory %s: %s", directory, exc)
                continue
            logger.info("Removed tool directory %s", directory)
            removed.append(directory)
        self._directories.clear()
        self._installs.clear()
        return removed

    async def __aenter__(self) -> ToolCache:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.close()
