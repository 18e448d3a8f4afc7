"""Payload renderers turning a workflow document into Python source."""

from __future__ import annotations

import ast
import json
import math

from workflow_converter.authoring import lines
from workflow_converter.infrastructure.tool_cache import ToolCache
from workflow_converter.schemas import ToolSpec
from workflow_converter.template import TemplateSkeleton
from workflow_converter.types import StructuredDocument

INDENT = "    "
LINE_WIDTH = 88


def format_scalar(value: object) -> str:
    """Return a Python literal for a YAML scalar."""
    if value is None:
        return "None"
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, int):
        return repr(value)
    if isinstance(value, float):
        if math.isnan(value):
            return 'float("nan")'
        if math.isinf(value):
            return 'float("inf")' if value > 0 else '-float("inf")'
        return repr(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    raise TypeError(f"Unsupported scalar type {type(value).__name__}.")


def format_literal(value: StructuredDocument, level: int = 0) -> str:
    """Pretty-print a document with one item per line and a fixed indent."""
    inner = INDENT * (level + 1)
    closing = INDENT * level
    if isinstance(value, dict):
        if not value:
            return "{}"
        items = [
            f"{inner}{format_scalar(key)}: {format_literal(item, level + 1)},"
            for key, item in value.items()
        ]
        return "{\n" + "\n".join(items) + f"\n{closing}}}"
    if isinstance(value, list):
        if not value:
            return "[]"
        items = [f"{inner}{format_literal(item, level + 1)}," for item in value]
        return "[\n" + "\n".join(items) + f"\n{closing}]"
    return format_scalar(value)


def _triple_quoted(value: str, indent: str) -> str:
    body = value.replace("\\", "\\\\").replace('"""', '""\\"')
    block = "\n".join(indent + line if line else "" for line in body.split("\n"))
    if value.endswith("\n"):
        block += indent
    elif block.endswith('"'):
        block = block[:-1] + '\\"'
    return f'"""\n{block}"""'


def format_lines_call(value: str, level: int) -> str | None:
    """Render a multi-line string as a ``lines(...)`` call.

    Returns ``None`` when the helper would not reproduce ``value`` exactly,
    for example with whitespace-only lines or a shared leading indent.
    """
    if "\n" not in value or not all(char.isprintable() or char in "\n\t" for char in value):
        return None
    indent = INDENT * (level + 1)
    literal = _triple_quoted(value, indent)
    try:
        if lines(ast.literal_eval(literal)) != value:
            return None
    except (SyntaxError, ValueError):
        return None
    return f"lines(\n{indent}{literal}\n{INDENT * level})"


class ExpressionPrinter:
    """Print documents compactly where they fit, using ``lines()`` for scripts."""

    def __init__(self, width: int = LINE_WIDTH) -> None:
        self.width = width

    def _flat(self, value: StructuredDocument) -> str | None:
        if isinstance(value, dict):
            parts = []
            for key, item in value.items():
                flat = self._flat(item)
                if flat is None:
                    return None
                parts.append(f"{format_scalar(key)}: {flat}")
            return "{" + ", ".join(parts) + "}"
        if isinstance(value, list):
            parts = []
            for item in value:
                flat = self._flat(item)
                if flat is None:
                    return None
                parts.append(flat)
            return "[" + ", ".join(parts) + "]"
        if isinstance(value, str) and format_lines_call(value, 0) is not None:
            return None
        return format_scalar(value)

    def format(self, value: StructuredDocument, level: int = 0, column: int = 0) -> str:
        """Render ``value`` starting at ``column`` on a line indented ``level`` times."""
        if isinstance(value, str):
            return format_lines_call(value, level) or format_scalar(value)
        if not isinstance(value, (dict, list)):
            return format_scalar(value)

        flat = self._flat(value)
        if flat is not None and column + len(flat) + 1 <= self.width:
            return flat

        inner = INDENT * (level + 1)
        closing = INDENT * level
        if isinstance(value, dict):
            items = []
            for key, item in value.items():
                head = f"{inner}{format_scalar(key)}: "
                items.append(f"{head}{self.format(item, level + 1, len(head))},")
            return "{\n" + "\n".join(items) + f"\n{closing}}}"
        items = [f"{inner}{self.format(item, level + 1, len(inner))}," for item in value]
        return "[\n" + "\n".join(items) + f"\n{closing}]"


class LiteralRenderer:
    """Embed the document as exploded literal data; no external tools."""

    async def render(
        self,
        value: StructuredDocument,
        skeleton: TemplateSkeleton,
    ) -> str:
        """Return the skeleton with the literal payload inserted."""
        return skeleton.assemble(format_literal(value))


class ExpressionRenderer:
    """Embed the document as idiomatic expressions, then run the formatter.

    The formatter is installed through the run's ``ToolCache`` on first use;
    any install or formatting failure propagates as ``ExternalToolError``.
    """

    def __init__(
        self,
        tool_cache: ToolCache,
        formatter: ToolSpec,
        printer: ExpressionPrinter | None = None,
    ) -> None:
        self.tool_cache = tool_cache
        self.formatter = formatter
        self.printer = printer or ExpressionPrinter()

    async def render(
        self,
        value: StructuredDocument,
        skeleton: TemplateSkeleton,
    ) -> str:
        """Return formatted source with the expression payload inserted."""
        column = len(skeleton.prefix.rsplit("\n", 1)[-1])
        source = skeleton.assemble(self.printer.format(value, column=column))
        tool = await self.tool_cache.ensure(self.formatter)
        formatted = await tool.invoke(
            ["format", "--isolated", "--stdin-filename", "workflow.main.py", "-"],
            input_text=source,
        )
        return formatted.stdout
