"""Application ports for clean architecture boundaries."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from workflow_converter.template import TemplateSkeleton
from workflow_converter.types import StructuredDocument


class PayloadRenderer(Protocol):
    """Render a structured document into a complete source module."""

    async def render(
        self,
        value: StructuredDocument,
        skeleton: TemplateSkeleton,
    ) -> str:
        """Return the skeleton with ``value`` embedded."""


class CommentExtractor(Protocol):
    """Recover comments from a YAML file."""

    async def extract(self, source_path: Path) -> str:
        """Return a newline-terminated comment block, or ``""``."""
