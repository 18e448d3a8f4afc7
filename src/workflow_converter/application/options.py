"""Typed option objects shared across conversion use-cases."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from workflow_converter.schemas import DEFAULT_FORMATTER, ToolSpec

FORMATTER_ENV_VAR = "WORKFLOW_CONVERTER_FORMATTER"


def default_formatter() -> ToolSpec:
    """Formatter tool, honoring ``WORKFLOW_CONVERTER_FORMATTER`` when set."""
    requirement = os.environ.get(FORMATTER_ENV_VAR)
    if not requirement:
        return DEFAULT_FORMATTER
    return ToolSpec(requirement=requirement, binary=DEFAULT_FORMATTER.binary)


@dataclass(frozen=True)
class ConversionOptions:
    """Flags resolved once per run and applied to every file."""

    force: bool = False
    remove: bool = False
    use_lines: bool = True
    extract_comments: bool = True
    formatter: ToolSpec = field(default_factory=default_formatter)
