"""Application use-cases orchestrating conversion and generation runs."""

from __future__ import annotations

import asyncio
import glob
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from pathlib import Path

from pydantic import ValidationError

from workflow_converter.adapters.comment_extractors import (
    DisabledCommentExtractor,
    ScriptCommentExtractor,
)
from workflow_converter.adapters.renderers import ExpressionRenderer, LiteralRenderer
from workflow_converter.application.options import ConversionOptions, default_formatter
from workflow_converter.application.planner import (
    SOURCE_SUFFIX,
    RemovalDecision,
    decide_removal,
    is_markup_file,
    plan_output_path,
    should_overwrite,
)
from workflow_converter.application.ports import CommentExtractor, PayloadRenderer
from workflow_converter.application.results import (
    BuildReport,
    BuildResult,
    ConversionReport,
    ConversionResult,
    FileStatus,
)
from workflow_converter.codec import parse
from workflow_converter.errors import (
    ConverterError,
    FileIOError,
    MalformedMarkupError,
    UsageError,
)
from workflow_converter.infrastructure.runner import ScriptRun, run_workflow_script
from workflow_converter.infrastructure.tool_cache import ToolCache
from workflow_converter.schemas import ConversionTaskConfig, ToolSpec
from workflow_converter.template import synthesize_template
from workflow_converter.types import ConfirmOverwrite

logger = logging.getLogger(__name__)

DEFAULT_WORKFLOWS_DIR = Path(".github/workflows")
EXECUTABLE_MODE = 0o755


async def _never_overwrite(path: Path) -> bool:
    del path
    return False


def build_conversion_options(
    *,
    force: bool = False,
    remove: bool = False,
    use_lines: bool = True,
    extract_comments: bool = True,
    formatter_requirement: str | None = None,
) -> ConversionOptions:
    """Build typed option object from command/API params."""
    formatter = default_formatter()
    if formatter_requirement is not None:
        try:
            formatter = ToolSpec(requirement=formatter_requirement, binary=formatter.binary)
        except ValidationError as exc:
            raise UsageError(f"Invalid formatter requirement: {exc}") from exc
    return ConversionOptions(
        force=force,
        remove=remove,
        use_lines=use_lines,
        extract_comments=extract_comments,
        formatter=formatter,
    )


def resolve_sources(patterns: Iterable[str]) -> list[Path]:
    """Expand paths and glob patterns into YAML files, keeping argument order.

    Raises
    ------
    UsageError
        If no patterns are given or none of them match a YAML file.
    """
    patterns = list(patterns)
    if not patterns:
        raise UsageError("No workflow files given.")

    files: list[Path] = []
    seen: set[Path] = set()
    for pattern in patterns:
        for match in sorted(glob.glob(pattern, recursive=True)):
            path = Path(match)
            if not is_markup_file(path) or not path.is_file() or path in seen:
                continue
            seen.add(path)
            files.append(path)

    if not files:
        raise UsageError(f'No YAML files found matching "{", ".join(patterns)}"')
    return files


def _write_executable(path: Path, content: str) -> None:
    staging = path.with_name(f".{path.name}.tmp")
    try:
        staging.write_text(content, encoding="utf-8")
        staging.chmod(EXECUTABLE_MODE)
        staging.replace(path)
    except OSError:
        staging.unlink(missing_ok=True)
        raise


async def convert_workflow_file(
    source_path: Path,
    options: ConversionOptions,
    *,
    renderer: PayloadRenderer,
    comment_extractor: CommentExtractor,
    confirm: ConfirmOverwrite,
) -> ConversionResult:
    """Use-case: convert one YAML workflow into an executable ``.main.py``.

    Nothing is written unless parsing, comment extraction and rendering all
    succeed. The source is only removed after the output is in place.

    Raises
    ------
    ConverterError
        Any per-file failure (read, parse, external tool, write).
    """
    try:
        config = ConversionTaskConfig(
            source_path=source_path,
            output_path=plan_output_path(source_path),
        )
    except ValidationError as exc:
        raise UsageError(f"Invalid conversion task for {source_path}: {exc}") from exc

    try:
        text = await asyncio.to_thread(config.source_path.read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileIOError(
            f"Unable to read {config.source_path}: {exc}", config.source_path
        ) from exc

    document = parse(text)
    if not isinstance(document, dict):
        raise MalformedMarkupError(
            f"{config.source_path} must contain a mapping at the top level, "
            f"found {type(document).__name__}."
        )
    skeleton = synthesize_template()
    comments = (
        await comment_extractor.extract(config.source_path)
        if options.extract_comments
        else ""
    )
    skeleton = skeleton.with_comments(comments)
    content = await renderer.render(document, skeleton)

    if not await should_overwrite(config.output_path, options.force, confirm):
        logger.info("Skipping %s; existing file kept", config.output_path)
        return ConversionResult(
            source_path=config.source_path,
            status=FileStatus.SKIPPED,
            output_path=config.output_path,
        )

    try:
        await asyncio.to_thread(_write_executable, config.output_path, content)
    except OSError as exc:
        raise FileIOError(
            f"Unable to write {config.output_path}: {exc}", config.output_path
        ) from exc
    logger.info("Wrote %s", config.output_path)

    removed = False
    if decide_removal(options.remove) is RemovalDecision.DELETE:
        try:
            await asyncio.to_thread(config.source_path.unlink)
            removed = True
        except OSError as exc:
            logger.warning("Could not remove %s: %s", config.source_path, exc)

    return ConversionResult(
        source_path=config.source_path,
        status=FileStatus.CONVERTED,
        output_path=config.output_path,
        removed=removed,
    )


async def convert_workflow_files(
    sources: Sequence[Path],
    options: ConversionOptions,
    *,
    confirm: ConfirmOverwrite | None = None,
    renderer: PayloadRenderer | None = None,
    comment_extractor: CommentExtractor | None = None,
    tool_cache: ToolCache | None = None,
    on_result: Callable[[ConversionResult], None] | None = None,
) -> ConversionReport:
    """Use-case: convert files one at a time, in order.

    Per-file ``ConverterError`` failures are recorded and the run moves on.
    A tool cache created here is closed when the run ends; a cache passed
    in belongs to the caller.

    Parameters
    ----------
    sources : Sequence[Path]
        YAML files, usually from :func:`resolve_sources`.
    options : ConversionOptions
        Run-wide flags.
    confirm : ConfirmOverwrite | None, default=None
        Asked before replacing an existing output. Defaults to declining.
    on_result : Callable[[ConversionResult], None] | None, default=None
        Called after each file, for progress output.
    """
    owns_cache = tool_cache is None
    cache = tool_cache or ToolCache()
    if renderer is None:
        renderer = (
            ExpressionRenderer(cache, options.formatter)
            if options.use_lines
            else LiteralRenderer()
        )
    if not options.extract_comments:
        comment_extractor = DisabledCommentExtractor()
    elif comment_extractor is None:
        comment_extractor = ScriptCommentExtractor()

    report = ConversionReport()
    try:
        for source in sources:
            try:
                result = await convert_workflow_file(
                    source,
                    options,
                    renderer=renderer,
                    comment_extractor=comment_extractor,
                    confirm=confirm or _never_overwrite,
                )
            except ConverterError as exc:
                logger.error("Failed to convert %s: %s", source, exc)
                result = ConversionResult(
                    source_path=source,
                    status=FileStatus.FAILED,
                    error=f"{type(exc).__name__}: {exc}",
                )
            report.results.append(result)
            if result.status is FileStatus.CONVERTED and not result.removed:
                report.files_to_remove.append(source)
            if on_result is not None:
                on_result(result)
    finally:
        if owns_cache:
            report.cleaned_directories = await cache.close()
    return report


def discover_workflow_scripts(paths: Iterable[Path]) -> list[Path]:
    """Collect ``.main.py`` modules from files and directories.

    Raises
    ------
    UsageError
        If a path does not exist or nothing is found.
    """
    paths = list(paths) or [DEFAULT_WORKFLOWS_DIR]
    scripts: list[Path] = []
    for path in paths:
        if path.is_dir():
            scripts.extend(sorted(path.glob(f"*{SOURCE_SUFFIX}")))
        elif path.is_file() and path.name.endswith(SOURCE_SUFFIX):
            scripts.append(path)
        elif not path.exists():
            raise UsageError(f"Path does not exist: {path}")
    if not scripts:
        joined = ", ".join(str(path) for path in paths)
        raise UsageError(f"No *{SOURCE_SUFFIX} workflow modules found in {joined}")
    return scripts


async def build_workflow_files(
    scripts: Sequence[Path],
    *,
    check: bool = False,
    runner: Callable[..., Awaitable[ScriptRun]] = run_workflow_script,
    on_result: Callable[[BuildResult], None] | None = None,
) -> BuildReport:
    """Use-case: regenerate YAML from each workflow module, one at a time."""
    report = BuildReport()
    for script in scripts:
        try:
            run = await runner(script, check=check)
            result = BuildResult(source_path=script, ok=run.returncode == 0, output=run.output)
        except ConverterError as exc:
            logger.error("Failed to run %s: %s", script, exc)
            result = BuildResult(source_path=script, ok=False, output=str(exc))
        report.results.append(result)
        if on_result is not None:
            on_result(result)
    return report
