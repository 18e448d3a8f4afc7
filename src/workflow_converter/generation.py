"""Generation entrypoint called from converted ``.main.py`` workflow modules.

A converted module ends with::

    if __name__ == "__main__":
        generate_workflow_yaml(wf, __file__)

so executing it writes ``<name>.generated.yml`` next to the module.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from workflow_converter.application.planner import plan_markup_path
from workflow_converter.codec import serialize

logger = logging.getLogger(__name__)

CHECK_ENV_VAR = "WORKFLOW_CONVERTER_CHECK"
_HEADER_PREFIX = "# Generated from "
_HEADER_SUFFIX = " by workflow-converter. Do not edit."


def generated_header(module_file: Path) -> str:
    """Return the comment line placed at the top of generated YAML."""
    return f"{_HEADER_PREFIX}{module_file.name}{_HEADER_SUFFIX}"


def is_generated_header(comment: str) -> bool:
    """Check whether a comment line is a generation header."""
    return comment.startswith(_HEADER_PREFIX) and comment.endswith(_HEADER_SUFFIX)


def render_workflow_yaml(workflow: Mapping[str, Any], module_file: Path) -> str:
    """Serialize a workflow definition with its generation header."""
    return f"{generated_header(module_file)}\n{serialize(dict(workflow))}"


def generate_workflow_yaml(
    workflow: Mapping[str, Any],
    module_file: str | os.PathLike[str],
    *,
    check: bool | None = None,
) -> Path:
    """Write the YAML file for a workflow defined in ``module_file``.

    Parameters
    ----------
    workflow : Mapping[str, Any]
        Structured workflow definition.
    module_file : str | os.PathLike[str]
        Path of the defining module, usually ``__file__``.
    check : bool | None, default=None
        Compare instead of writing. Defaults to the
        ``WORKFLOW_CONVERTER_CHECK=1`` environment variable.

    Returns
    -------
    Path
        Path of the generated YAML file.

    Raises
    ------
    SystemExit
        In check mode, when the file on disk is missing or out of date.
    """
    source = Path(module_file).resolve()
    target = plan_markup_path(source)
    text = render_workflow_yaml(workflow, source)
    if check is None:
        check = os.environ.get(CHECK_ENV_VAR) == "1"

    if check:
        current = target.read_text(encoding="utf-8") if target.exists() else None
        if current != text:
            print(f"Out of date: {target}", file=sys.stderr)
            raise SystemExit(1)
        return target

    target.write_text(text, encoding="utf-8")
    logger.info("Generated %s from %s", target, source)
    return target
