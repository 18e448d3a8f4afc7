"""YAML codec for workflow documents.

Both directions use YAML 1.2 scalar rules: only ``true``/``false`` are
booleans and timestamps stay strings, so the GitHub Actions ``on`` key
round-trips as a plain string key.
"""

from __future__ import annotations

import re
from typing import Any

import yaml

from workflow_converter.errors import MalformedMarkupError
from workflow_converter.types import QuoteStyle, StructuredDocument

_BOOL_TAG = "tag:yaml.org,2002:bool"
_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"
_BOOL_PATTERN = re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$")


def _core_schema_resolvers(
    base: dict[str, list[tuple[str, re.Pattern[str]]]],
) -> dict[str, list[tuple[str, re.Pattern[str]]]]:
    resolvers = {
        first: [(tag, regexp) for tag, regexp in entries if tag not in {_BOOL_TAG, _TIMESTAMP_TAG}]
        for first, entries in base.items()
    }
    for first in "tTfF":
        resolvers.setdefault(first, []).insert(0, (_BOOL_TAG, _BOOL_PATTERN))
    return resolvers


class WorkflowLoader(yaml.SafeLoader):
    """Safe loader with YAML 1.2 boolean and timestamp handling."""


WorkflowLoader.yaml_implicit_resolvers = _core_schema_resolvers(
    yaml.SafeLoader.yaml_implicit_resolvers
)


class WorkflowDumper(yaml.SafeDumper):
    """Safe dumper producing GitHub-style block YAML."""

    preferred_quote: str = '"'

    def increase_indent(self, flow: bool = False, indentless: bool = False) -> None:
        # Indent sequences nested in mappings ("key:\n  - item").
        return super().increase_indent(flow, False)

    def ignore_aliases(self, data: Any) -> bool:
        return True

    def choose_scalar_style(self) -> str:
        style = super().choose_scalar_style()
        if style == "'" and self.preferred_quote == '"':
            return '"'
        return style


WorkflowDumper.yaml_implicit_resolvers = _core_schema_resolvers(
    yaml.SafeDumper.yaml_implicit_resolvers
)


_UNICODE_BREAKS = frozenset("\x85\u2028\u2029")


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    # Only escapes survive NEL, LS and PS; block and single-quoted styles fold them.
    if not _UNICODE_BREAKS.isdisjoint(data):
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style='"')
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


WorkflowDumper.add_representer(str, _represent_str)


def parse(text: str) -> StructuredDocument:
    """Parse YAML text into a structured document.

    Parameters
    ----------
    text : str
        YAML source text. An empty document parses to ``None``.

    Returns
    -------
    StructuredDocument
        Nested dicts, lists and scalars in document order.

    Raises
    ------
    MalformedMarkupError
        If the text is not a single well-formed YAML document.
    """
    try:
        document = yaml.load(text, Loader=WorkflowLoader)  # noqa: S506 - safe loader subclass
    except yaml.MarkedYAMLError as exc:
        mark = exc.problem_mark or exc.context_mark
        problem = exc.problem or exc.context or "invalid YAML"
        if mark is None:
            raise MalformedMarkupError(problem) from exc
        raise MalformedMarkupError(
            problem, line=mark.line + 1, column=mark.column + 1
        ) from exc
    except yaml.YAMLError as exc:
        raise MalformedMarkupError(str(exc)) from exc
    _check_supported(document)
    return document


def _check_supported(value: object) -> None:
    if isinstance(value, dict):
        for key, item in value.items():
            _check_supported(key)
            _check_supported(item)
    elif isinstance(value, list):
        for item in value:
            _check_supported(item)
    elif value is not None and not isinstance(value, (str, int, float)):
        raise MalformedMarkupError(
            f"Unsupported YAML value of type {type(value).__name__}; "
            "only mappings, sequences and scalars can be converted."
        )


def serialize(
    value: StructuredDocument,
    *,
    quote: QuoteStyle = '"',
    line_width: int | None = None,
) -> str:
    """Serialize a structured document into deterministic YAML text.

    Parameters
    ----------
    value : StructuredDocument
        Document to serialize.
    quote : {'"', "'"}, default='"'
        Quote character used for scalars that cannot be written plain.
    line_width : int | None, default=None
        Preferred line width. ``None`` disables wrapping so embedded
        scripts are never folded.

    Returns
    -------
    str
        YAML text terminated by a newline.
    """
    if quote not in {'"', "'"}:
        raise ValueError(f"Unsupported quote style {quote!r}; use '\"' or \"'\".")

    dumper = type("_ConfiguredDumper", (WorkflowDumper,), {"preferred_quote": quote})
    return yaml.dump(
        value,
        Dumper=dumper,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        indent=2,
        width=float("inf") if line_width is None else line_width,
    )
