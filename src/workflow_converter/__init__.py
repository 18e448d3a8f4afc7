"""Convert CI workflow YAML to Python modules and generate YAML back."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from workflow_converter.application.results import BuildReport, ConversionReport
from workflow_converter.authoring import lines, workflow
from workflow_converter.codec import parse, serialize
from workflow_converter.generation import generate_workflow_yaml

__version__ = "0.1.0"


def convert_workflows(
    patterns: Iterable[str],
    *,
    force: bool = False,
    remove: bool = False,
    use_lines: bool = True,
    extract_comments: bool = True,
) -> ConversionReport:
    """Convert YAML workflows into executable ``.main.py`` modules.

    Parameters
    ----------
    patterns : Iterable[str]
        Paths or glob patterns; only ``.yml``/``.yaml`` matches are used.
    force : bool, default=False
        Overwrite existing outputs. Without it existing outputs are kept.
    remove : bool, default=False
        Delete each source after its output is written.
    use_lines : bool, default=True
        Render scripts with ``lines()`` and format the module with ruff.
    extract_comments : bool, default=True
        Copy YAML comments into the generated module.

    Returns
    -------
    ConversionReport
        Per-file results and files left for manual removal.
    """
    from .api import convert_workflows as _impl

    return _impl(
        patterns,
        force=force,
        remove=remove,
        use_lines=use_lines,
        extract_comments=extract_comments,
    )


def build_workflows(paths: Iterable[Path] = (), *, check: bool = False) -> BuildReport:
    """Regenerate YAML by running ``.main.py`` workflow modules."""
    from .api import build_workflows as _impl

    return _impl(paths, check=check)


__all__ = [
    "build_workflows",
    "convert_workflows",
    "generate_workflow_yaml",
    "lines",
    "parse",
    "serialize",
    "workflow",
]
