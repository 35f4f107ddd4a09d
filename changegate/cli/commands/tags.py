"""``changegate reference`` and ``changegate next-tag`` — release tag helpers.

``reference`` prints the tag a ``check`` would compare against, or
``none`` before the first release. ``next-tag`` prints the tag the next
release should carry.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from changegate.config import ChangegateSettings
from changegate.core.tagging import BumpKind, latest_version_tag, next_tag
from changegate.core.vcs import GitCommandError, GitRepository
from changegate.models.decision import EXIT_CONFIGURATION_ERROR

console = Console()


def _open_repo(repo: Path, settings: ChangegateSettings) -> GitRepository:
    repository = GitRepository(repo, timeout_seconds=settings.git_timeout_seconds)
    if not repository.is_work_tree():
        console.print(f"[bold red]Not a git working tree:[/bold red] {repo}")
        raise typer.Exit(code=EXIT_CONFIGURATION_ERROR)
    return repository


def reference_cmd(
    ctx: typer.Context,
    repo: Path = typer.Option(
        Path("."),
        "--repo",
        "-r",
        help="Any directory inside the git working tree.",
    ),
    match: Optional[str] = typer.Option(
        None,
        "--match",
        help="Only consider tags matching this glob.",
    ),
) -> None:
    """Print the most recent tag reachable from HEAD, or ``none``."""
    settings: ChangegateSettings = ctx.obj or ChangegateSettings()
    repository = _open_repo(repo, settings)
    try:
        tag = repository.latest_tag(match if match is not None else settings.tag_match)
    except GitCommandError as exc:
        console.print(f"[bold red]Tag lookup failed:[/bold red] {exc}")
        raise typer.Exit(code=1)
    typer.echo(tag or "none")


def next_tag_cmd(
    ctx: typer.Context,
    bump: BumpKind = typer.Option(
        BumpKind.PATCH,
        "--bump",
        "-b",
        help="Which version component to increment.",
        case_sensitive=False,
    ),
    repo: Path = typer.Option(
        Path("."),
        "--repo",
        "-r",
        help="Any directory inside the git working tree.",
    ),
    prefix: Optional[str] = typer.Option(
        None,
        "--prefix",
        help="Tag prefix (default from CHANGEGATE_TAG_PREFIX or 'v').",
    ),
) -> None:
    """Print the release tag following the highest existing release tag."""
    settings: ChangegateSettings = ctx.obj or ChangegateSettings()
    tag_prefix = settings.tag_prefix if prefix is None else prefix
    repository = _open_repo(repo, settings)
    try:
        tags = repository.list_tags()
    except GitCommandError as exc:
        console.print(f"[bold red]Tag listing failed:[/bold red] {exc}")
        raise typer.Exit(code=1)
    latest = latest_version_tag(tags, tag_prefix)
    typer.echo(next_tag(latest, bump, prefix=tag_prefix))
