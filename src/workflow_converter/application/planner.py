"""Output file naming, overwrite and removal decisions."""

from __future__ import annotations

import enum
from pathlib import Path

from workflow_converter.types import ConfirmOverwrite

MARKUP_SUFFIXES = (".yml", ".yaml")
SOURCE_SUFFIX = ".main.py"
GENERATED_MARKER = ".generated"
GENERATED_MARKUP_SUFFIX = f"{GENERATED_MARKER}.yml"


class RemovalDecision(enum.Enum):
    """What happens to a source YAML file after a successful write."""

    DELETE = "delete"
    REPORT = "report"


def is_markup_file(path: Path | str) -> bool:
    """Return ``True`` for ``.yml``/``.yaml`` paths."""
    return str(path).endswith(MARKUP_SUFFIXES)


def plan_output_path(path: Path) -> Path:
    """Map a YAML path to its ``.main.py`` counterpart.

    ``ci.yml`` and ``ci.generated.yml`` both map to ``ci.main.py``.
    Paths without a YAML suffix are returned unchanged, so the mapping is
    idempotent.
    """
    name = path.name
    for suffix in MARKUP_SUFFIXES:
        if name.endswith(suffix):
            name = name[: -len(suffix)] + SOURCE_SUFFIX
            break
    generated = f"{GENERATED_MARKER}{SOURCE_SUFFIX}"
    if name.endswith(generated):
        name = name[: -len(generated)] + SOURCE_SUFFIX
    return path.with_name(name)


def plan_markup_path(path: Path) -> Path:
    """Map a ``.main.py`` path to the YAML file its generation step writes."""
    name = path.name
    if name.endswith(SOURCE_SUFFIX):
        stem = name[: -len(SOURCE_SUFFIX)]
    else:
        stem = path.stem
    return path.with_name(stem + GENERATED_MARKUP_SUFFIX)


async def should_overwrite(
    output_path: Path,
    force: bool,
    confirm: ConfirmOverwrite,
) -> bool:
    """Decide whether ``output_path`` may be written.

    Prompts through ``confirm`` only when the file exists and ``force`` is
    not set.
    """
    if force or not output_path.exists():
        return True
    return await confirm(output_path)


def decide_removal(remove: bool) -> RemovalDecision:
    """Return whether the source is deleted now or reported for manual removal."""
    return RemovalDecision.DELETE if remove else RemovalDecision.REPORT
