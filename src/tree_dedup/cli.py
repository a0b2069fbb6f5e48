# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tree-dedup/src/tree_dedup/cli.py

"""Command line interface for tree-dedup."""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import (
    CONFIRMATION_WORD,
    DEFAULT_EXACT_PATH,
    ENV_EXACT_PATH,
    ENV_PARALLELISM,
    default_parallelism,
)
from .errors import DeletionError, TreeDedupError
from .matcher import find_duplicates
from .planner import execute_plan, plan_deletions, render_plan
from .scanner import TreeScanner, load_or_scan
from .snapshot import format_entry, format_header, load_snapshot
from .types import FileRecord, TreeSnapshot
from .validator import validate_snapshot

app = typer.Typer(help="Find files in a target tree that duplicate a reference tree")
console = Console(stderr=True)


def _configure_logging(verbose: bool, debug: bool) -> None:
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logger = logging.getLogger("tree_dedup")
    logger.handlers[:] = [RichHandler(console=console, show_path=False)]
    logger.setLevel(level)


def _parallelism_option():
    return typer.Option(default_parallelism(), "--parallelism", "-p", min=1,
                        envvar=ENV_PARALLELISM,
                        help="Number of parallel hashing workers")


def _exact_path_option():
    return typer.Option(DEFAULT_EXACT_PATH, "--exact-path/--name-only",
                        envvar=ENV_EXACT_PATH,
                        help="Match on relative path, or on file name only")


@app.callback()
def main_options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output")
) -> None:
    """Verify and remove target files that duplicate a reference tree."""
    _configure_logging(verbose, debug)


@app.command()
def scan(
    root: Path = typer.Argument(..., help="Directory to scan"),
    output: Optional[Path] = typer.Option(None, "--output", "-o",
                                          help="Write the snapshot here instead of stdout"),
    parallelism: int = _parallelism_option()
) -> None:
    """Hash every file under ROOT and emit its snapshot as YAML.

    With --output the snapshot is streamed to a hidden file beside OUTPUT
    and renamed over it only once the scan has finished, so a failed scan
    never leaves a loadable but incomplete snapshot behind.
    """
    stream = sys.stdout
    partial = None
    if output:
        partial = output.with_name(f".{output.name}.partial")
        try:
            stream = open(partial, "w", encoding="utf-8")
        except OSError as e:
            typer.echo(f"Error: cannot write {output}: {e.strerror or e}", err=True)
            raise typer.Exit(1)

    snapshot = None
    try:
        scanner = TreeScanner(root, parallelism,
                              on_record=lambda record: stream.write(format_entry(record)))
        stream.write(format_header(scanner.root))
        snapshot = scanner.scan()
        if partial:
            stream.close()
            os.replace(partial, output)
    except TreeDedupError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    except OSError as e:
        snapshot = None
        typer.echo(f"Error: cannot write {output or 'snapshot'}: {e.strerror or e}", err=True)
        raise typer.Exit(1)
    finally:
        if partial:
            stream.close()
            if snapshot is None:
                partial.unlink(missing_ok=True)

    console.print(f"[blue]Scanned[/blue] {len(snapshot)} files under {snapshot.base_dir}")


@app.command()
def compare(
    ref_dir: Optional[Path] = typer.Option(None, "--ref-dir",
                                           help="Reference directory to scan"),
    ref_snapshot: Optional[Path] = typer.Option(None, "--ref-snapshot",
                                                help="Reference snapshot YAML to load"),
    target_dir: Optional[Path] = typer.Option(None, "--target-dir",
                                              help="Target directory to scan"),
    target_snapshot: Optional[Path] = typer.Option(None, "--target-snapshot",
                                                   help="Target snapshot YAML to load"),
    exact_path: bool = _exact_path_option(),
    delete: bool = typer.Option(False, "--delete",
                                help="Delete duplicates after confirmation"),
    best_effort: bool = typer.Option(False, "--best-effort",
                                     help="Keep deleting after a failure and report all failures"),
    reverify: bool = typer.Option(False, "--reverify",
                                  help="Re-hash each file right before deleting it"),
    summary: bool = typer.Option(False, "--summary", "-s",
                                 help="Print a summary table to stderr"),
    parallelism: int = _parallelism_option()
) -> None:
    """Print (or carry out) the removal of target files found in the reference."""
    if (ref_dir is None) == (ref_snapshot is None):
        typer.echo("Error: give exactly one of --ref-dir or --ref-snapshot", err=True)
        raise typer.Exit(1)
    if (target_dir is None) == (target_snapshot is None):
        typer.echo("Error: give exactly one of --target-dir or --target-snapshot", err=True)
        raise typer.Exit(1)

    try:
        reference = load_or_scan(ref_dir, ref_snapshot, parallelism)
        target = load_or_scan(target_dir, target_snapshot, parallelism)
        duplicates = find_duplicates(reference, target, exact_path)

        if summary:
            _print_summary(reference, target, duplicates)

        confirmed = False
        if delete and duplicates:
            console.print(f"A total of {len(duplicates)} duplicate files found.")
            answer = typer.prompt(
                f"Are you sure you want to delete the files? "
                f"Type '{CONFIRMATION_WORD}' to confirm",
                default="", show_default=False)
            confirmed = answer.strip() == CONFIRMATION_WORD
            if not confirmed:
                console.print("File deletion aborted.")

        result = execute_plan(duplicates, reference, confirmed,
                              best_effort=best_effort, reverify=reverify)

    except DeletionError as e:
        typer.echo(f"Error: {e}", err=True)
        for path, reason in list(e.failures.items())[1:]:
            typer.echo(f"Error: cannot delete {path}: {reason}", err=True)
        _print_unfinished(e, duplicates, reference)
        raise typer.Exit(1)
    except TreeDedupError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if result.confirmed:
        console.print(f"[green]Deleted[/green] {len(result.deleted)} files.")
        return
    for line in render_plan(result.plan):
        typer.echo(line)


@app.command()
def validate(
    snapshot_file: Path = typer.Argument(..., help="Snapshot YAML of the tree"),
    exact_path: bool = _exact_path_option(),
    parallelism: int = _parallelism_option()
) -> None:
    """Re-scan the snapshot's base directory and check every file is recorded.

    A file counts as validated only when the snapshot holds the same digest
    at the same relative path (--exact-path) or under the same file name
    (--name-only). A matching digest alone is not enough.
    """
    try:
        snapshot = load_snapshot(snapshot_file)
        console.print(f"[blue]Validating[/blue] {snapshot.base_dir} against {snapshot_file}")
        result = validate_snapshot(snapshot, parallelism, exact_path)
    except TreeDedupError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    for record in result.missing:
        typer.echo(f"File {record.path} not found in snapshot", err=True)

    console.print(f"  Validated: {result.validated}")
    console.print(f"  Missing: {len(result.missing)}")
    if not result.ok:
        raise typer.Exit(1)


def _print_unfinished(error: DeletionError, duplicates: list[FileRecord],
                      reference: TreeSnapshot) -> None:
    """Print the plan lines for files a failed deletion left behind."""
    left = set(error.failures) | set(error.remaining)
    unfinished = [record for record in duplicates if record.path in left]
    if not unfinished:
        return
    console.print(f"[yellow]{len(unfinished)} files were not deleted:[/yellow]")
    for line in render_plan(plan_deletions(unfinished, reference)):
        typer.echo(line)


def _print_summary(reference: TreeSnapshot, target: TreeSnapshot,
                   duplicates: list[FileRecord]) -> None:
    """Print file counts for both trees."""
    table = Table(title="Duplicate Summary")
    table.add_column("Tree", style="cyan")
    table.add_column("Base directory", style="green")
    table.add_column("Files", style="white", justify="right")
    table.add_column("Duplicates", style="red", justify="right")

    table.add_row("reference", reference.base_dir, str(len(reference)), "")
    table.add_row("target", target.base_dir, str(len(target)), str(len(duplicates)))

    console.print(table)


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
