"""Logging setup for the CLI.

Library modules only create ``logging.getLogger(__name__)`` loggers; the
CLI calls ``configure_logging`` once. Records go to stderr through Rich so
stdout carries only the decision report and CI annotations.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_LOG_FORMAT = "%(message)s"


def configure_logging(level: str = "INFO", *, ci: bool = False) -> None:
    """Install a single stderr handler on the root logger.

    In CI mode timestamps and paths are shown on every line, since the log
    is read after the fact rather than live.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=ci,
        show_path=ci,
        markup=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=numeric_level,
        format=_LOG_FORMAT,
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
