#!/usr/bin/env python3
"""
workflow_converter.cli.cli

Typer-based CLI for onboarding GitHub Actions workflows to Python modules
and regenerating their YAML.

Examples
--------
Convert every workflow of a repository:

    workflow-converter convert '.github/workflows/*.yml'

Regenerate YAML from the converted modules:

    workflow-converter build
"""

from __future__ import annotations

import asyncio
import logging
import shlex
import sys
import traceback
from collections.abc import Sequence
from pathlib import Path

import click
import typer

from workflow_converter.application.results import (
    BuildResult,
    ConversionResult,
    FileStatus,
)
from workflow_converter.errors import UsageError

app = typer.Typer(
    name="workflow-converter",
    help="Convert GitHub Actions workflow YAML to Python modules and back.",
    no_args_is_help=True,
)

CONVERT_USAGE = (
    "Usage: workflow-converter convert <workflow-files> "
    "[--force] [--remove] [--no-lines] [--no-comments]"
)
CONVERT_EXAMPLE = "Example: workflow-converter convert '.github/workflows/*.yml'"
BUILD_COMMAND = "workflow-converter build"


# -----------------------------
# Utilities
# -----------------------------
def _is_importable(module: str) -> bool:
    """Check whether a module can be resolved."""
    try:
        import importlib.util

        return importlib.util.find_spec(module) is not None
    except Exception:
        return False


def _print_conversion_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly error.

    Parameters
    ----------
    exc : Exception
        Exception raised by a command.
    debug : bool
        Whether to include traceback details.

    Returns
    -------
    int
        Process exit code.
    """
    typer.echo(f"[red]✗ {type(exc).__name__}:[/red] {exc}", err=True)
    if debug:
        typer.echo("\n[dim]Traceback:[/dim]", err=True)
        typer.echo("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)), err=True)
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


async def _confirm_overwrite(path: Path) -> bool:
    """Ask once whether an existing output may be replaced (default: no)."""
    return await asyncio.to_thread(
        typer.confirm,
        f'File "{path}" already exists. Overwrite?',
        default=False,
    )


def _echo_conversion_result(result: ConversionResult) -> None:
    if result.status is FileStatus.CONVERTED:
        typer.echo(f"[green]✓ Wrote:[/green] {result.output_path}")
        if result.removed:
            typer.echo(f"Removed {result.source_path}")
    elif result.status is FileStatus.SKIPPED:
        typer.echo(f"Skipping {result.output_path}")
    else:
        typer.echo(f"[red]✗ {result.source_path}:[/red] {result.error}", err=True)


def _echo_build_result(result: BuildResult) -> None:
    if result.ok:
        typer.echo(f"[green]✓ Built:[/green] {result.source_path}")
        return
    typer.echo(f"[red]✗ {result.source_path}[/red]", err=True)
    if result.output.strip():
        typer.echo(result.output.rstrip(), err=True)


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Show full tracebacks and debug logs."),
) -> None:
    """Initialize shared CLI state and logging."""
    ctx.obj = {"debug": debug}
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# -----------------------------
# Commands
# -----------------------------
@app.command("convert")
def convert_cmd(
    ctx: typer.Context,
    patterns: list[str] | None = typer.Argument(
        None,
        help="YAML workflow files or glob patterns.",
        show_default=False,
    ),
    force: bool = typer.Option(
        False, "--force", help="Overwrite existing Python files without prompting."
    ),
    remove: bool = typer.Option(
        False, "--remove", help="Remove original YAML files after conversion."
    ),
    no_lines: bool = typer.Option(
        False,
        "--no-lines",
        help="Embed plain literal data instead of lines() helpers (faster, no formatter).",
    ),
    no_comments: bool = typer.Option(
        False, "--no-comments", help="Do not copy comments from the YAML files."
    ),
) -> None:
    """Convert YAML workflows into executable ``.main.py`` modules.

    Notes
    -----
    - Without ``--no-lines`` the formatter (ruff) is installed into a
      temporary directory on first use and removed at the end of the run.
    - Without ``--remove`` the original YAML files are kept and listed at
      the end.
    """
    debug: bool = bool(ctx.obj.get("debug", False))

    from workflow_converter.application.use_cases import (
        build_conversion_options,
        convert_workflow_files,
        resolve_sources,
    )

    try:
        sources = resolve_sources(patterns or [])
        options = build_conversion_options(
            force=force,
            remove=remove,
            use_lines=not no_lines,
            extract_comments=not no_comments,
        )
    except UsageError as exc:
        typer.echo(CONVERT_USAGE, err=True)
        typer.echo(CONVERT_EXAMPLE, err=True)
        raise typer.Exit(code=_print_conversion_error(exc, debug))

    typer.echo("Converting the following files:")
    for source in sources:
        typer.echo(f"- {source}")
    typer.echo()

    try:
        report = asyncio.run(
            convert_workflow_files(
                sources,
                options,
                confirm=_confirm_overwrite,
                on_result=_echo_conversion_result,
            )
        )
    except Exception as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))

    for directory in report.cleaned_directories:
        typer.echo(f"Cleaned up {directory}")

    typer.echo()
    if report.converted:
        typer.echo("To generate YAML files from the new Python modules, run:")
        typer.echo(f"  {BUILD_COMMAND}")
        typer.echo()
    if report.files_to_remove:
        typer.echo(
            "IMPORTANT: you are now responsible for generating the YAML from "
            "Python AND removing the original YAML files."
        )
        typer.echo("To remove old YAML files, run:")
        typer.echo(f"  rm {shlex.join(str(path) for path in report.files_to_remove)}")
        typer.echo()

    if report.failed:
        typer.echo(f"{len(report.failed)} file(s) failed to convert.", err=True)
        raise typer.Exit(code=1)


@app.command("build")
def build_cmd(
    ctx: typer.Context,
    paths: list[Path] | None = typer.Argument(
        None,
        help="Workflow modules or directories (default: .github/workflows).",
        show_default=False,
    ),
    check: bool = typer.Option(
        False, "--check", help="Fail if generated YAML is missing or out of date."
    ),
) -> None:
    """Run ``.main.py`` workflow modules to regenerate their YAML."""
    debug: bool = bool(ctx.obj.get("debug", False))

    from workflow_converter.application.use_cases import (
        build_workflow_files,
        discover_workflow_scripts,
    )

    try:
        scripts = discover_workflow_scripts(paths or [])
        report = asyncio.run(
            build_workflow_files(scripts, check=check, on_result=_echo_build_result)
        )
    except Exception as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))

    if report.failed:
        raise typer.Exit(code=1)


@app.command("doctor")
def doctor_cmd() -> None:
    """Print installed toolchain versions."""
    import importlib.metadata as metadata

    from workflow_converter.application.options import default_formatter

    typer.echo(f"Python: {sys.version.split()[0]}")
    for module in ["workflow-converter", "pyyaml", "pydantic", "typer"]:
        try:
            typer.echo(f"{module}: {metadata.version(module)}")
        except metadata.PackageNotFoundError:
            typer.echo(f"{module}: <not installed>")

    typer.echo(f"pip: {'available' if _is_importable('pip') else '<not installed>'}")
    typer.echo(f"formatter: {default_formatter().requirement}")


def main(argv: Sequence[str] | None = None) -> None:
    """Console entrypoint; invalid arguments exit with code 1."""
    try:
        code = app(
            args=list(argv) if argv is not None else None,
            prog_name="workflow-converter",
            standalone_mode=False,
        )
    except click.UsageError as exc:
        exc.show()
        raise SystemExit(1) from exc
    except click.Abort as exc:
        typer.echo("Aborted!", err=True)
        raise SystemExit(1) from exc
    raise SystemExit(code if isinstance(code, int) else 0)


if __name__ == "__main__":
    main()
