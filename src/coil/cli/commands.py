"""CLI command implementations"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from coil.config import Settings, load_config
from coil.core.errors import CoilError
from coil.core.models import Diagnostic, EmitStatus
from coil.core.pipeline import run_check, run_extract


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None, verbose: bool = False) -> Settings:
    """Load config with standard CLI error handling and configure logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, settings.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )
    return settings


def _read_input(path: Path, encoding: str) -> str:
    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        _fail(f"Unable to read {path}", e)


def _echo_diagnostics(diagnostics: list[Diagnostic]) -> None:
    for d in diagnostics:
        typer.echo(f"  {d}", err=True)


InputFile = Annotated[Path, typer.Option("--input-file", "-i", help="Markdown document to extract from")]
Verbose = Annotated[bool, typer.Option("--verbose", "-v", help="Log every pipeline stage")]
Strict = Annotated[bool, typer.Option("--strict", help="Exit 1 when any diagnostic is reported")]


def extract_cmd(
    input_file: InputFile,
    out: Annotated[Optional[str], typer.Option("--output-dir", "-o", help="Output root directory")] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Report what would be written without writing")] = False,
    strict: Strict = False,
    verbose: Verbose = False,
    ):
    """Write every code block bound in the frontmatter to its configured file."""
    settings = _settings(overrides={"output_dir": out}, verbose=verbose)
    text = _read_input(input_file, settings.encoding)
    output_root = Path(settings.output_dir)

    try:
        result = run_extract(text, output_root, dry_run=dry_run)
    except CoilError as e:
        _fail(str(e))

    for r in result.emitted:
        typer.echo(f"  {r.status.value}: {r.key} -> {r.path}")
    _echo_diagnostics(result.diagnostics)
    written = sum(1 for r in result.emitted if r.status != EmitStatus.unchanged)
    verb = "Would write" if dry_run else "Wrote"
    typer.echo(
        f"{verb} {written} file(s) to {output_root}/ - "
        f"{len(result.emitted) - written} unchanged, "
        f"{len(result.diagnostics)} diagnostic(s)"
    )

    if not result.ok or (strict and result.diagnostics):
        raise typer.Exit(1)


def check_cmd(
    input_file: InputFile,
    strict: Strict = False,
    verbose: Verbose = False,
    ):
    """Parse the document and report bindings and diagnostics without writing."""
    settings = _settings(verbose=verbose)
    text = _read_input(input_file, settings.encoding)

    try:
        report = run_check(text)
    except CoilError as e:
        _fail(str(e))

    typer.echo(f"Blocks found: {len(report.blocks)}")
    for e in report.emissions:
        typer.echo(f"  {e.key} -> {e.path}")
    _echo_diagnostics(report.diagnostics)
    typer.echo(
        f"Check complete - "
        f"{len(report.emissions)} bound, "
        f"{len(report.diagnostics)} diagnostic(s), "
        f"keep_indentation={report.config.options.keep_indentation}"
    )

    if strict and report.diagnostics:
        raise typer.Exit(1)
