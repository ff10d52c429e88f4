"""CLI command implementations"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdslots.config import Settings, load_config
from mdslots.core.minimal import DocumentData
from mdslots.core.parse import discover_files, parse_file
from mdslots.core.pipeline import run_build, run_extract, transform_tree


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
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    return settings


def build_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file or directory to transform")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log each rewrite and extracted slot")] = False,
    ):
    """Rewrite music blocks, extract meta slots, and write one JSON result per document."""
    settings = _settings(overrides={"output_dir": out, "parser_config": parser}, verbose=verbose)
    output_dir = Path(settings.output_dir)
    try:
        results = run_build(path, settings, output_dir)
    except RuntimeError as e:
        _fail(str(e))
    if not results:
        typer.echo(f"No .md/.mdx files found at {path}.")
        raise typer.Exit(1)
    for src, out_file in results:
        typer.echo(f"  {src} -> {out_file}")
    typer.echo(f"Transformed {len(results)} document(s) to {output_dir}/")


def extract_cmd(
    tree: Annotated[Path, typer.Argument(help="hast JSON file (a 'root' node)")],
    prefix: Annotated[Optional[str], typer.Option("--prefix", help="Slot element tag prefix")] = None,
    out: Annotated[Optional[Path], typer.Option("--out", help="Write the result here instead of stdout")] = None,
    ):
    """Extract meta slots from an already-parsed hast tree."""
    settings = _settings(overrides={"slot_prefix": prefix})
    try:
        result = run_extract(tree, settings.slot_prefix)
    except (OSError, ValueError) as e:
        _fail(f"Cannot extract slots from {tree}", e)

    payload = result.model_dump_json(indent=settings.indent or None)
    if out:
        out.write_text(payload, encoding="utf-8")
        typer.echo(f"  {tree} -> {out} ({len(result.slots)} slot(s))")
    else:
        typer.echo(payload)


def slots_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file or directory to scan")],
    ):
    """List the slot names each document defines."""
    settings = _settings()
    files = discover_files(Path(path))
    if not files:
        typer.echo(f"No .md/.mdx files found at {path}.")
        raise typer.Exit(1)
    for p in files:
        try:
            parsed = parse_file(p, settings.parser_config)
        except (OSError, ValueError) as e:
            _fail(f"Cannot parse {p}", e)
        _, data = transform_tree(parsed.tree, DocumentData(), settings)
        names = ", ".join(data.slots) or "-"
        typer.echo(f"{parsed.slug}: {names}")
