"""Minimal helpers imported by converted workflow modules."""

from __future__ import annotations

import textwrap
from collections.abc import Mapping
from typing import Any


def workflow(definition: Mapping[str, Any]) -> dict[str, Any]:
    """Return the workflow definition as a plain dict."""
    return dict(definition)


def lines(text: str) -> str:
    """Dedent a triple-quoted script block.

    The newline right after the opening quotes is dropped, common
    indentation is removed and indentation before the closing quotes is
    discarded::

        lines(\"\"\"
            npm ci
            npm test
            \"\"\")  # -> "npm ci\\nnpm test\\n"
    """
    return textwrap.dedent(text.removeprefix("\n"))
