"""Machine-readable decision outputs: JSON report, CI step outputs, annotations."""

from __future__ import annotations

import logging
from pathlib import Path

from changegate.models.decision import Decision, DecisionAction, DecisionReason

logger = logging.getLogger(__name__)


def write_json_report(decision: Decision, path: Path) -> None:
    """Write the full decision, including the change list, as JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(decision.model_dump_json(indent=2) + "\n", encoding="utf-8")
    logger.debug("Wrote decision report to %s", path)


def step_outputs(decision: Decision) -> dict[str, str]:
    """Key/value outputs for a CI step."""
    return {
        "publish": "true" if decision.should_publish else "false",
        "reason": decision.reason.value,
        "reference": decision.reference.tag if decision.reference else "none",
        "changes": str(len(decision.change_lines())),
    }


def write_step_outputs(decision: Decision, path: Path) -> None:
    """Append ``key=value`` lines to a GitHub Actions output file."""
    with Path(path).open("a", encoding="utf-8", newline="\n") as fh:
        for key, value in step_outputs(decision).items():
            fh.write(f"{key}={value}\n")
    logger.debug("Appended step outputs to %s", path)


def annotation(decision: Decision) -> str:
    """A GitHub Actions workflow command summarizing the decision."""
    if decision.reason == DecisionReason.SAFETY_FALLBACK:
        level = "warning"
        message = f"{decision.summary_line()}: {decision.error}"
    else:
        level = "notice"
        message = decision.summary_line()
    if decision.action == DecisionAction.PUBLISH and decision.comparison is not None:
        message += f" - {len(decision.comparison.changes)} artifact(s) differ"
    # Workflow commands are single-line; escape as the runner expects.
    message = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    return f"::{level} title=changegate::{message}"
