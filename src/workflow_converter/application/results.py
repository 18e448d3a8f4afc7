"""Application-layer result objects."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path


class FileStatus(enum.Enum):
    """Outcome of processing one file."""

    CONVERTED = "converted"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ConversionResult:
    """Structured outcome for one YAML file."""

    source_path: Path
    status: FileStatus
    output_path: Path | None = None
    removed: bool = False
    error: str | None = None


@dataclass
class ConversionReport:
    """Outcome of a whole conversion run, in input order."""

    results: list[ConversionResult] = field(default_factory=list)
    files_to_remove: list[Path] = field(default_factory=list)
    cleaned_directories: list[Path] = field(default_factory=list)

    @property
    def converted(self) -> list[ConversionResult]:
        return [r for r in self.results if r.status is FileStatus.CONVERTED]

    @property
    def failed(self) -> list[ConversionResult]:
        return [r for r in self.results if r.status is FileStatus.FAILED]


@dataclass(frozen=True)
class BuildResult:
    """Outcome of running one ``.main.py`` workflow module."""

    source_path: Path
    ok: bool
    output: str = ""


@dataclass
class BuildReport:
    """Outcome of a whole generation run."""

    results: list[BuildResult] = field(default_factory=list)

    @property
    def failed(self) -> list[BuildResult]:
        return [r for r in self.results if not r.ok]
