"""Main Typer application — imports and registers all CLI commands.

Entry point: ``changegate`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

from typing import Optional

import typer

from changegate.cli.commands.check import check_cmd
from changegate.cli.commands.fingerprint import fingerprint_cmd
from changegate.cli.commands.tags import next_tag_cmd, reference_cmd
from changegate.config import ChangegateSettings
from changegate.observability import configure_logging

app = typer.Typer(
    name="changegate",
    help="changegate: publish only when the build output actually changed.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (default from CHANGEGATE_LOG_LEVEL or INFO).",
    ),
) -> None:
    """Load settings once and configure logging for every command."""
    settings = ChangegateSettings()
    if log_level:
        settings = settings.model_copy(update={"log_level": log_level})
    configure_logging(settings.log_level, ci=settings.ci)
    ctx.obj = settings


# Register subcommands
app.command(name="check", help="Decide whether the project changed since the last release.")(check_cmd)
app.command(name="fingerprint", help="Fingerprint an existing build output directory.")(fingerprint_cmd)
app.command(name="reference", help="Print the reference tag a check would compare against.")(reference_cmd)
app.command(name="next-tag", help="Compute the next release tag.")(next_tag_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
