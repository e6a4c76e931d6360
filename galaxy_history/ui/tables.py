"""Table rendering utilities for CLI output."""

from collections import Counter

from rich.markup import escape
from rich.table import Table

from galaxy_history.domain.models import HistoryTree

STATE_COLORS = {
    "ok": "green",
    "error": "red",
    "running": "yellow",
    "waiting": "dim",
    "queued": "dim",
    "new": "dim",
    "paused": "cyan",
    "deleted": "strike dim",
}


def create_contents_table(tree: HistoryTree) -> Table:
    """Create a table for the top-level contents of a history.

    Args:
        tree: Reconstructed history tree

    Returns:
        Rich Table object ready for display
    """
    name = tree.metadata.get("name") or "Unnamed history"
    table = Table(title=f"{escape(str(name))} ({len(tree.contents)} items)")
    table.add_column("HID", justify="right", style="cyan")
    table.add_column("Class", style="magenta")
    table.add_column("Name", style="white")
    table.add_column("State")
    table.add_column("Size", justify="right", style="dim")

    for item in tree.contents:
        state = str(item.get("state") or "-")
        color = STATE_COLORS.get(state, "white")
        if item.get("class") == "dataset":
            size = item.get("size") or "-"
        else:
            size = f"{(item.get('collection') or {}).get('collection_size', 0)} elements"
        table.add_row(
            str(item.get("hid")),
            str(item.get("class")),
            escape(str(item.get("name"))),
            f"[{color}]{state}[/{color}]",
            str(size),
        )

    return table


def format_state_summary(contents: list[dict]) -> str:
    """Create a summary string of item counts by state.

    Args:
        contents: History items with a 'state' key

    Returns:
        Formatted summary string like "3 ok, 1 error"
    """
    state_counts = Counter(str(item.get("state")) for item in contents)
    return ", ".join(f"{count} {state}" for state, count in sorted(state_counts.items()))
