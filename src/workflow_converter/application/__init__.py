"""Application-layer use-cases and option objects."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from workflow_converter.application.options import ConversionOptions
from workflow_converter.application.ports import CommentExtractor, PayloadRenderer
from workflow_converter.application.results import (
    BuildReport,
    BuildResult,
    ConversionReport,
    ConversionResult,
    FileStatus,
)
from workflow_converter.types import ConfirmOverwrite


def build_conversion_options(
    *,
    force: bool = False,
    remove: bool = False,
    use_lines: bool = True,
    extract_comments: bool = True,
    formatter_requirement: str | None = None,
) -> ConversionOptions:
    """Build typed conversion options via lazy use-case import."""
    from workflow_converter.application.use_cases import build_conversion_options as _impl

    return _impl(
        force=force,
        remove=remove,
        use_lines=use_lines,
        extract_comments=extract_comments,
        formatter_requirement=formatter_requirement,
    )


async def convert_workflow_files(
    sources: Sequence[Path],
    options: ConversionOptions,
    *,
    confirm: ConfirmOverwrite | None = None,
    renderer: PayloadRenderer | None = None,
    comment_extractor: CommentExtractor | None = None,
    on_result: Callable[[ConversionResult], None] | None = None,
) -> ConversionReport:
    """Convert YAML workflow files via lazy use-case import."""
    from workflow_converter.application.use_cases import convert_workflow_files as _impl

    return await _impl(
        sources,
        options,
        confirm=confirm,
        renderer=renderer,
        comment_extractor=comment_extractor,
        on_result=on_result,
    )


async def build_workflow_files(
    scripts: Sequence[Path],
    *,
    check: bool = False,
    on_result: Callable[[BuildResult], None] | None = None,
) -> BuildReport:
    """Regenerate YAML from workflow modules via lazy use-case import."""
    from workflow_converter.application.use_cases import build_workflow_files as _impl

    return await _impl(scripts, check=check, on_result=on_result)


def resolve_sources(patterns: Iterable[str]) -> list[Path]:
    """Expand YAML paths/globs via lazy use-case import."""
    from workflow_converter.application.use_cases import resolve_sources as _impl

    return _impl(patterns)


__all__ = [
    "BuildReport",
    "BuildResult",
    "ConversionOptions",
    "ConversionReport",
    "ConversionResult",
    "FileStatus",
    "build_conversion_options",
    "build_workflow_files",
    "convert_workflow_files",
    "resolve_sources",
]
