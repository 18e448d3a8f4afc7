"""Recover YAML comments that the structured parser discards.

Run as ``python -m workflow_converter.comments FILE`` to print the comment
block for one workflow file.
"""

from __future__ import annotations

import argparse
import bisect
import sys
from pathlib import Path

import yaml

from workflow_converter.codec import WorkflowLoader
from workflow_converter.errors import MalformedMarkupError
from workflow_converter.generation import is_generated_header


def _scalar_spans(text: str) -> list[tuple[int, int]]:
    try:
        tokens = list(yaml.scan(text, Loader=WorkflowLoader))
    except yaml.YAMLError as exc:
        raise MalformedMarkupError(f"Unable to scan YAML for comments: {exc}") from exc
    return sorted(
        (token.start_mark.index, token.end_mark.index)
        for token in tokens
        if isinstance(token, yaml.ScalarToken)
    )


def _inside(spans: list[tuple[int, int]], starts: list[int], index: int) -> bool:
    position = bisect.bisect_right(starts, index) - 1
    if position < 0:
        return False
    start, end = spans[position]
    return start <= index < end


def extract_comments(text: str) -> str:
    """Return every comment in ``text``, one per line, in source order.

    Both full-line and trailing comments are kept, without their leading
    indentation. A ``#`` inside a scalar or directly after a non-space
    character is not a comment. The header written by the generation step
    is skipped.

    Parameters
    ----------
    text : str
        YAML source text.

    Returns
    -------
    str
        Newline-terminated comment lines, or ``""`` when there are none.
    """
    spans = _scalar_spans(text)
    starts = [start for start, _ in spans]

    found: list[str] = []
    offset = 0
    for line in text.splitlines(keepends=True):
        body = line.rstrip("\r\n")
        column = body.find("#")
        while column != -1:
            at_boundary = column == 0 or body[column - 1] in " \t"
            if at_boundary and not _inside(spans, starts, offset + column):
                comment = body[column:].rstrip()
                if not is_generated_header(comment):
                    found.append(comment)
                break
            column = body.find("#", column + 1)
        offset += len(line)

    return "".join(f"{comment}\n" for comment in found)


def main(argv: list[str] | None = None) -> int:
    """Print the comment block of one YAML file to stdout as UTF-8."""
    parser = argparse.ArgumentParser(
        description="Print comments found in a YAML workflow file."
    )
    parser.add_argument("path", type=Path, help="YAML file to scan.")
    args = parser.parse_args(argv)

    try:
        text = args.path.read_text(encoding="utf-8")
        comments = extract_comments(text)
    except (OSError, UnicodeDecodeError, MalformedMarkupError) as exc:
        print(f"{type(exc).__name__}: {exc}", file=sys.stderr)
        return 1
    sys.stdout.buffer.write(comments.encode("utf-8"))
    sys.stdout.buffer.flush()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
