"""Rich terminal renderer for change detection decisions.

Color scheme
------------
- green   : SKIP, unchanged
- yellow  : PUBLISH, changed
- cyan    : new artifacts
- red     : removed artifacts, safety fallback
"""

from __future__ import annotations

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from changegate.models.artifacts import BuildArtifactSet
from changegate.models.comparison import ChangeKind
from changegate.models.decision import Decision, DecisionAction, DecisionReason

_KIND_STYLES: dict[ChangeKind, str] = {
    ChangeKind.NEW: "cyan",
    ChangeKind.CHANGED: "yellow",
    ChangeKind.REMOVED: "red",
    ChangeKind.UNCHANGED: "dim",
}


def _decision_style(decision: Decision) -> str:
    if decision.action == DecisionAction.SKIP:
        return "bold green"
    if decision.reason == DecisionReason.SAFETY_FALLBACK:
        return "bold red"
    return "bold yellow"


class DecisionRenderer:
    """Renders a ``Decision`` as Rich terminal output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    # ------------------------------------------------------------------
    # Renderables
    # ------------------------------------------------------------------

    def render_summary(self, decision: Decision) -> Panel:
        """Summary panel: reference, fingerprints and file counts."""
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()

        reference = decision.reference.tag if decision.reference else "none"
        table.add_row("Reference", reference)
        comparison = decision.comparison
        if comparison is not None:
            table.add_row("Current", comparison.current_fingerprint)
            table.add_row("Previous", comparison.reference_fingerprint)
            table.add_row(
                "Files",
                f"{comparison.current_file_count} current / "
                f"{comparison.reference_file_count} reference / "
                f"{comparison.unchanged_count} unchanged",
            )
        if decision.error:
            table.add_row("Error", Text(decision.error, style="red"))

        return Panel(
            table,
            title="[bold]Build Output Comparison[/bold]",
            border_style=_decision_style(decision).replace("bold ", ""),
            padding=(1, 2),
        )

    def render_changes(self, decision: Decision) -> Group:
        """One ``KIND: identifier`` line per classified change."""
        lines: list[Text] = []
        if decision.comparison is not None:
            for change in decision.comparison.changes:
                lines.append(Text(change.describe(), style=_KIND_STYLES[change.kind]))
        return Group(*lines)

    # ------------------------------------------------------------------
    # Standalone print
    # ------------------------------------------------------------------

    def print_decision(self, decision: Decision) -> None:
        """Print summary, change list, then exactly one decision line."""
        self.console.print(self.render_summary(decision))
        if decision.comparison is not None and decision.comparison.changes:
            self.console.print(self.render_changes(decision), soft_wrap=True)
        self.console.print(
            Text(decision.summary_line(), style=_decision_style(decision)), soft_wrap=True
        )

    def print_artifacts(self, artifacts: BuildArtifactSet, *, show_digests: bool = False) -> None:
        """Print the fingerprint of an artifact set, optionally per file."""
        if show_digests:
            table = Table(
                show_header=True,
                header_style="bold cyan",
                caption=f"{artifacts.file_count} files, {artifacts.total_bytes} bytes",
            )
            table.add_column("Artifact")
            table.add_column("SHA-256", style="dim")
            table.add_column("Bytes", justify="right")
            for artifact in artifacts.sorted_artifacts():
                table.add_row(artifact.identifier, artifact.digest, str(artifact.size_bytes))
            self.console.print(table)
        self.console.print(Text(artifacts.fingerprint), soft_wrap=True)
