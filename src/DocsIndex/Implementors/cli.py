"""Typer CLI for inspecting, checking, and emitting implementor tables.

Example:
    $ docsindex-implementors show --format json
    $ docsindex-implementors emit --out site/implementors/snafu/trait.ErrorCompat.js
    $ docsindex-implementors check site/implementors/snafu/trait.ErrorCompat.js
    $ docsindex-implementors load --consumer
"""

import json
from pathlib import Path
from typing import List, Optional

import typer
import yaml
from rich.console import Console
from rich.table import Table

from DocsIndex.Implementors.codec import (
    implementors_relpath,
    read_implementors_file,
    table_to_json,
    write_implementors_file,
)
from DocsIndex.Implementors.errors import ImplementorIndexError
from DocsIndex.Implementors.loader import ImplementorTableLoader
from DocsIndex.Implementors.logging import StructuredLogger, get_logger
from DocsIndex.Implementors.registry import HandoffRegistry
from DocsIndex.Implementors.settings import get_settings
from DocsIndex.Implementors.table import build_error_compat_table
from DocsIndex.Implementors.types import GroupMapping, ImplementorTable

console = Console()
app = typer.Typer(help="DocsIndex implementor tables", no_args_is_help=True)

# ============================================================================
# Setup
# ============================================================================


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose"),
) -> None:
    """Configure logging from settings before any command runs."""
    settings = get_settings()
    level = "DEBUG" if verbose else settings.log_level.value
    ctx.obj = get_logger("DocsIndex", level, fmt=settings.log_format.value)


def _command_log(ctx: typer.Context, **fields: object) -> StructuredLogger:
    """Bind the running subcommand name (and ``fields``) onto the CLI logger."""
    return ctx.obj.bind(command=ctx.command.name, **fields)


def _load_table(file: Optional[Path], log: StructuredLogger) -> ImplementorTable:
    if file is None:
        return build_error_compat_table()
    return read_implementors_file(file, strict=get_settings().strict, log=log)


def _render_table(table: ImplementorTable) -> None:
    grid = Table(title=f"Implementors of {table.trait or '(unknown trait)'}")
    grid.add_column("Crate", style="cyan")
    grid.add_column("Implementor")
    grid.add_column("Synthetic", justify="center")
    grid.add_column("Link", style="dim")
    for name, descriptor in table.iter_descriptors():
        grid.add_row(name, descriptor.label, "yes" if descriptor.synthetic else "no", descriptor.href or "")
    console.print(grid)


# ============================================================================
# Commands
# ============================================================================


@app.command()
def show(
    ctx: typer.Context,
    file: Optional[Path] = typer.Option(
        None,
        "--file",
        "-f",
        exists=True,
        dir_okay=False,
        help="Implementors script to show instead of the built-in table",
    ),
    format_output: str = typer.Option(
        "table",
        "--format",
        help="Output format: table, json, or yaml",
    ),
) -> None:
    """Print an implementors table."""
    try:
        table = _load_table(file, _command_log(ctx))
    except ImplementorIndexError as exc:
        console.print(f"[red]✗ Error: {exc}[/red]")
        raise typer.Exit(code=1)

    if format_output == "json":
        typer.echo(json.dumps(table_to_json(table), indent=2))
    elif format_output == "yaml":
        typer.echo(yaml.safe_dump(table_to_json(table), sort_keys=False, default_flow_style=False))
    elif format_output == "table":
        _render_table(table)
    else:
        console.print(f"[red]Unknown format: {format_output}[/red]")
        raise typer.Exit(code=2)


@app.command()
def emit(
    ctx: typer.Context,
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Destination script (default: <output_dir>/implementors/snafu/trait.ErrorCompat.js)",
    ),
) -> None:
    """Write the built-in table as a rustdoc implementors script."""
    table = build_error_compat_table()
    target = out if out is not None else get_settings().output_dir / implementors_relpath(table.trait)
    path = write_implementors_file(table, target, log=_command_log(ctx))
    console.print(f"[green]✓ Wrote {len(table)} implementors in {len(table.groups)} crates[/green]")
    typer.echo(str(path))


@app.command()
def check(
    ctx: typer.Context,
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Implementors script"),
    strict: Optional[bool] = typer.Option(
        None,
        "--strict/--lenient",
        help="Reject empty groups (default from DOCSINDEX_STRICT)",
    ),
) -> None:
    """Parse and validate an implementors script."""
    effective = get_settings().strict if strict is None else strict
    try:
        table = read_implementors_file(path, strict=effective, log=_command_log(ctx, path=str(path)))
    except ImplementorIndexError as exc:
        console.print(f"[red]✗ {path}: {exc}[/red]")
        raise typer.Exit(code=1)
    console.print(
        f"[green]✓ {table.trait or path.name}: "
        f"{len(table.groups)} groups, {len(table)} implementors[/green]"
    )


@app.command()
def load(
    ctx: typer.Context,
    consumer: bool = typer.Option(
        False,
        "--consumer/--no-consumer",
        help="Register a consumer before the loader runs",
    ),
) -> None:
    """Run the loader against a fresh registry and report where the table went."""
    registry = HandoffRegistry()
    received: List[GroupMapping] = []
    if consumer:
        registry.try_set_consumer(received.append)

    outcome = ImplementorTableLoader(registry=registry, log=_command_log(ctx)).load()

    delivered = received[0] if received else registry.pending
    console.print(f"Outcome: [bold]{outcome.value}[/bold]")
    if delivered is not None:
        for name, descriptors in delivered.items():
            typer.echo(f"{name}\t{len(descriptors)}")


if __name__ == "__main__":
    app()
