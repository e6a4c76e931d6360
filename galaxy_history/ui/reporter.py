"""Reporter for archive output and diagnostics."""

from rich.console import Console
from rich.markup import escape

from galaxy_history.domain.models import ExportVersion, HistoryTree
from galaxy_history.ui.tables import create_contents_table, format_state_summary


class Reporter:
    """Reporter with formatted rich output."""

    def __init__(self, silent: bool = False, stderr: bool = False) -> None:
        """Initialize reporter.

        Args:
            silent: If True, suppress all output (for testing/automation).
            stderr: If True, write to stderr so stdout stays free for payload data.
        """
        self.silent = silent
        self.console = Console(quiet=silent, stderr=stderr)

    def report_version(self, version: ExportVersion) -> None:
        """Report the detected export format version."""
        color = "green" if version is ExportVersion.CURRENT else "yellow"
        self.console.print(
            f"Galaxy History Archive Format Version: [{color}]{version.value}[/{color}] "
            f"({version.label})"
        )

    def report_history(self, tree: HistoryTree) -> None:
        """Render the history contents with a state summary."""
        self.console.print(create_contents_table(tree))
        size = tree.metadata.get("history_size")
        if size:
            self.console.print(f"[dim]History size: {size}[/dim]")
        if tree.contents:
            self.console.print(f"\n[bold]Summary:[/bold] {format_state_summary(tree.contents)}")

    def report_written(self, count: int, destination: str) -> None:
        """Report how many bytes were written to a file."""
        self.console.print(f"Wrote {count:,} bytes to {escape(destination)}")

    def report_warning(self, message: str) -> None:
        """Report a warning message."""
        self.console.print(f"\n[yellow]Warning:[/yellow] {escape(message)}")

    def report_error(self, message: str) -> None:
        """Report an error message."""
        self.console.print(f"[red]Error:[/red] {escape(message)}")
