"""``changegate fingerprint DIR`` — fingerprint an existing output directory.

Useful for comparing two build outputs by hand or in a script without
running the build tool.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from changegate.config import ChangegateSettings
from changegate.core.errors import ComparisonError
from changegate.core.scanner import scan_artifacts
from changegate.models.decision import EXIT_CONFIGURATION_ERROR
from changegate.report.renderer import DecisionRenderer

console = Console()


def fingerprint_cmd(
    ctx: typer.Context,
    directory: Path = typer.Argument(
        ...,
        help="Build output directory to fingerprint.",
    ),
    exclude: Optional[List[str]] = typer.Option(
        None,
        "--exclude",
        "-x",
        help="Additional glob of artifacts to ignore (repeatable).",
    ),
    no_default_excludes: bool = typer.Option(
        False,
        "--no-default-excludes",
        help="Digest every file, including packaging metadata and caches.",
    ),
    show_list: bool = typer.Option(
        False,
        "--list",
        "-l",
        help="Also print each artifact and its digest.",
    ),
) -> None:
    """Print the content fingerprint of a build output directory."""
    settings: ChangegateSettings = ctx.obj or ChangegateSettings()
    if not directory.is_dir():
        console.print(f"[bold red]Not a directory:[/bold red] {directory}")
        raise typer.Exit(code=EXIT_CONFIGURATION_ERROR)

    patterns = [] if no_default_excludes else list(settings.exclude_patterns)
    patterns.extend(exclude or [])

    try:
        artifacts = scan_artifacts(directory, patterns)
    except ComparisonError as exc:
        console.print(f"[bold red]Fingerprint failed:[/bold red] {exc}")
        raise typer.Exit(code=1)

    if artifacts.file_count == 0:
        console.print(f"[bold red]No eligible artifacts in[/bold red] {directory}")
        raise typer.Exit(code=1)

    DecisionRenderer(console=console).print_artifacts(artifacts, show_digests=show_list)
