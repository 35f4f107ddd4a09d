"""``changegate check PROJECT`` — decide whether to publish a new package.

Builds the project as it is now and as it was at the reference tag,
compares the content fingerprints of both outputs, and exits with:

- 0: Skip (no changes)
- 1: Publish (changes detected, first release, or safety fallback)
- 2: configuration error (no decision made)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional

import typer
from rich.console import Console

from changegate.config import ChangegateSettings
from changegate.core.detector import ChangeDetector
from changegate.core.errors import ConfigurationError
from changegate.models.decision import EXIT_CONFIGURATION_ERROR, Decision
from changegate.report.outputs import annotation, write_json_report, write_step_outputs
from changegate.report.renderer import DecisionRenderer

console = Console()
logger = logging.getLogger(__name__)


def check_cmd(
    ctx: typer.Context,
    project: Path = typer.Argument(
        ...,
        help="Project file or directory to build, inside the repository.",
    ),
    tag: Optional[str] = typer.Option(
        None,
        "--tag",
        "-t",
        help="Reference tag to compare against (default: most recent tag).",
    ),
    repo: Path = typer.Option(
        Path("."),
        "--repo",
        "-r",
        help="Any directory inside the git working tree.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Staging directory for build output and the reference checkout.",
    ),
    exclude: Optional[List[str]] = typer.Option(
        None,
        "--exclude",
        "-x",
        help="Additional glob of artifacts to ignore (repeatable).",
    ),
    match: Optional[str] = typer.Option(
        None,
        "--match",
        help="Only consider tags matching this glob when resolving the reference.",
    ),
    report: Optional[Path] = typer.Option(
        None,
        "--report",
        help="Write the decision and change list as JSON to this file.",
    ),
    ci: Optional[bool] = typer.Option(
        None,
        "--ci/--no-ci",
        help="Emit CI annotations and step outputs (default: detect from CI).",
    ),
) -> None:
    """Decide whether the project's build output changed since the last release.

    Any failure while building or comparing results in a publish, never
    a skip. Only invalid inputs stop the command without a decision.
    """
    settings: ChangegateSettings = ctx.obj or ChangegateSettings()
    config = settings.detector_config(
        project,
        repo_root=repo,
        reference_tag=tag,
        staging_dir=output,
        extra_excludes=exclude,
        tag_match=match,
        ci=ci,
    )

    detector = ChangeDetector(config)
    try:
        decision = detector.decide()
    except ConfigurationError as exc:
        console.print(f"[bold red]Configuration error:[/bold red] {exc}")
        raise typer.Exit(code=EXIT_CONFIGURATION_ERROR)

    DecisionRenderer(console=console).print_decision(decision)

    # The decision stands even when a report file cannot be written.
    if report is not None:
        _write_output(write_json_report, decision, report)
    if config.ci:
        typer.echo(annotation(decision))
        if settings.github_output is not None:
            _write_output(write_step_outputs, decision, settings.github_output)

    raise typer.Exit(code=decision.exit_code)


def _write_output(
    writer: Callable[[Decision, Path], None], decision: Decision, path: Path
) -> None:
    try:
        writer(decision, path)
    except OSError as exc:
        logger.error("Could not write %s: %s", path, exc)
