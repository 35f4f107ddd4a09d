"""Build tool backends.

Defines the ``BuildTool`` Protocol the detector compiles through, and
``CommandBuildTool``, which runs an argument template as a subprocess.

Placeholders in the template
----------------------------
``{source}``
    Absolute path of the source tree being built (working tree or
    reference checkout).
``{project}``
    Absolute path of the project inside that source tree.
``{output}``
    Absolute path of the fresh, empty output directory.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from changegate.core.errors import BuildFailure
from changegate.models.config import DEFAULT_BUILD_COMMAND

logger = logging.getLogger(__name__)

_OUTPUT_TAIL_LINES = 40


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class BuildTool(Protocol):
    """Protocol for build backends.

    Any object with a ``build(source_root, project_path, output_dir)``
    method satisfies this protocol.
    """

    def build(self, source_root: Path, project_path: Path, output_dir: Path) -> None:
        """Compile ``project_path`` into ``output_dir``.

        Raises
        ------
        BuildFailure
            If compilation fails or the tool cannot be run.
        """
        ...


# ---------------------------------------------------------------------------
# Subprocess implementation
# ---------------------------------------------------------------------------


def _tail(text: str, lines: int = _OUTPUT_TAIL_LINES) -> str:
    return "\n".join(text.splitlines()[-lines:])


class CommandBuildTool:
    """Runs a build command template in the source tree.

    Parameters
    ----------
    command:
        Argument list with ``{source}``, ``{project}`` and ``{output}``
        placeholders. Defaults to a deterministic ``dotnet build``.
    timeout_seconds:
        Hard limit for one build invocation.
    """

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_BUILD_COMMAND,
        *,
        timeout_seconds: int = 900,
    ) -> None:
        if not command:
            raise ValueError("Build command must not be empty")
        self._command = tuple(command)
        self._timeout = timeout_seconds

    @property
    def command(self) -> tuple[str, ...]:
        return self._command

    def render(self, source_root: Path, project_path: Path, output_dir: Path) -> list[str]:
        """Substitute placeholders into the command template."""
        values = {
            "source": str(source_root),
            "project": str(project_path),
            "output": str(output_dir),
        }
        return [arg.format(**values) for arg in self._command]

    def build(self, source_root: Path, project_path: Path, output_dir: Path) -> None:
        argv = self.render(source_root, project_path, output_dir)
        logger.info("Building %s", project_path)
        logger.debug("Build command: %s", " ".join(argv))
        try:
            result = subprocess.run(
                argv,
                cwd=source_root,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except FileNotFoundError as exc:
            raise BuildFailure(f"Build tool not found: {argv[0]}") from exc
        except subprocess.TimeoutExpired as exc:
            raise BuildFailure(
                f"Build of {project_path} timed out after {self._timeout}s"
            ) from exc
        except OSError as exc:
            raise BuildFailure(f"Build tool could not be started: {exc}") from exc

        output = (result.stdout or "") + (result.stderr or "")
        if output.strip():
            logger.debug("Build output:\n%s", output.rstrip())

        if result.returncode != 0:
            raise BuildFailure(
                f"Build of {project_path} failed with exit code {result.returncode}",
                returncode=result.returncode,
                output=_tail(output),
            )
