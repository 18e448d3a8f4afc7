"""Error hierarchy for workflow conversion and generation."""

from __future__ import annotations

from pathlib import Path


class ConverterError(Exception):
    """Base error for all workflow-converter failures."""

    exit_code: int = 1


class UsageError(ConverterError):
    """Raised for missing or invalid command arguments."""


class MalformedMarkupError(ConverterError):
    """Raised when YAML text cannot be parsed."""

    def __init__(
        self,
        message: str,
        *,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self.line = line
        self.column = column
        if line is not None and column is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)


class FileIOError(ConverterError):
    """Raised when reading, writing or changing permissions of a file fails."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


class ExternalToolError(ConverterError):
    """Raised when an external tool cannot be installed or invoked."""

    def __init__(self, message: str, stderr: str = "") -> None:
        self.stderr = stderr
        if stderr.strip():
            message = f"{message}\n{stderr.strip()}"
        super().__init__(message)


class TemplateError(ConverterError):
    """Raised when a source template is missing or duplicates a placeholder."""
