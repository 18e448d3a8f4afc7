"""Public synchronous API (delegates to application use-cases)."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from pathlib import Path

from workflow_converter.application.results import BuildReport, ConversionReport
from workflow_converter.application.use_cases import (
    build_conversion_options,
    build_workflow_files,
    convert_workflow_files,
    discover_workflow_scripts,
    resolve_sources,
)
from workflow_converter.types import ConfirmOverwrite


def convert_workflows(
    patterns: Iterable[str],
    *,
    force: bool = False,
    remove: bool = False,
    use_lines: bool = True,
    extract_comments: bool = True,
    confirm: ConfirmOverwrite | None = None,
) -> ConversionReport:
    """Convert YAML workflows matching ``patterns`` into ``.main.py`` modules."""
    sources = resolve_sources(patterns)
    options = build_conversion_options(
        force=force,
        remove=remove,
        use_lines=use_lines,
        extract_comments=extract_comments,
    )
    return asyncio.run(convert_workflow_files(sources, options, confirm=confirm))


def build_workflows(
    paths: Iterable[Path] = (),
    *,
    check: bool = False,
) -> BuildReport:
    """Run ``.main.py`` workflow modules to (re)generate their YAML."""
    scripts = discover_workflow_scripts(paths)
    return asyncio.run(build_workflow_files(scripts, check=check))
