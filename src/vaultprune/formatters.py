"""Rich-based formatters for vaultprune output."""

from __future__ import annotations

from rich.table import Table
from rich.text import Text

from vaultprune.models import DeleteReport


def _relative(path: str, root: str) -> str:
    """Strip *root* from *path* to get the relative segment."""
    root = root.rstrip("/")
    if path.startswith(root + "/"):
        return path[len(root) + 1 :]
    return path


def render_delete_plan(leaves: list[str], root: str) -> Table:
    """Render the numbered list of keys about to be deleted.

    Rows keep discovery order; they are never sorted.

    Args:
        leaves: Full leaf paths as returned by the recursive lister.
        root:   The root the leaves were collected under.

    Returns:
        A :class:`rich.table.Table`.
    """
    table = Table(title=f"[bold]Found keys:[/] {root}", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Key", style="bold red")
    table.add_column("Relative Path", style="cyan")

    for index, path in enumerate(leaves):
        table.add_row(str(index), path, _relative(path, root))

    return table


def render_delete_report(report: DeleteReport) -> Text:
    """Render a one-line summary plus one line per failed key."""
    text = Text()
    if not report.confirmed:
        text.append("Aborted. ", style="dim")
        text.append(f"{len(report.leaves)} key(s) left untouched.", style="dim")
        return text

    text.append(f"Deleted {report.succeeded} key(s)", style="bold green")
    text.append(f" under {report.root}")
    if report.failed:
        text.append(f"\nFailed {len(report.failed)} key(s):", style="bold red")
        for failure in report.failed:
            text.append(f"\n  {failure.path}: ", style="yellow")
            text.append(failure.error)
    return text
