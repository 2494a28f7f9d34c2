"""Confirm and delete every leaf under a root, one at a time."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn

from vaultprune.exceptions import EmptyResultError, SecretStoreError
from vaultprune.formatters import render_delete_plan
from vaultprune.lister import list_recursive
from vaultprune.models import DeleteFailure, DeleteReport

if TYPE_CHECKING:
    from vaultprune.store import VaultStore

logger = logging.getLogger(__name__)

AFFIRMATIVE = ("yes", "y")


class ConfirmationGate(Protocol):
    """Anything that can ask the operator a yes/no question."""

    def ask(self, prompt: str) -> bool:
        ...  # pragma: no cover


class ConsoleGate:
    """Blocking prompt on the terminal; waits indefinitely for an answer."""

    def ask(self, prompt: str) -> bool:
        try:
            answer = click.prompt(f"{prompt} (yes/no)", default="", show_default=False)
        except click.Abort:
            # stdin closed without an answer
            return False
        return answer.strip().lower() in AFFIRMATIVE


class ScriptedGate:
    """Replays pre-recorded answers and remembers every prompt it was shown."""

    def __init__(self, answers: Iterable[str | bool]) -> None:
        self._answers = list(answers)
        self.prompts: list[str] = []

    def ask(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        answer = self._answers.pop(0) if self._answers else ""
        if isinstance(answer, bool):
            return answer
        return answer.strip().lower() in AFFIRMATIVE


class BatchDeleter:
    """Enumerate a root, ask once, then delete each leaf independently.

    A failed delete is logged as a warning and recorded on the report; it
    never stops the remaining deletes.  Nothing is deleted unless the gate
    answers yes.
    """

    def __init__(
        self,
        store: VaultStore,
        gate: ConfirmationGate,
        console: Console | None = None,
    ) -> None:
        self.store = store
        self.gate = gate
        self.console = console or Console()

    def collect(self, root: str) -> list[str]:
        logger.info("Collecting information: %s", root)
        return list_recursive(self.store, root)

    def delete_all(self, root: str) -> DeleteReport:
        """Recursively delete everything under *root*.

        Raises:
            EmptyResultError: No leaves were found; the operator is not asked.
            DepthExceededError: The hierarchy is deeper than the walk allows.
            TransportError: Listing failed somewhere in the hierarchy.
        """
        start = time.monotonic()
        report = DeleteReport(root=root)
        try:
            report.leaves = self.collect(root)
            if not report.leaves:
                raise EmptyResultError(root)

            self.console.print(render_delete_plan(report.leaves, root))
            if not self.gate.ask(f"Delete all {len(report.leaves)} keys?"):
                logger.info("DeleteAll: not confirmed, nothing deleted")
                return report

            report.confirmed = True
            logger.info("DeleteAll: deleting %d keys", len(report.leaves))
            self._delete_each(report)
            return report
        finally:
            report.elapsed = time.monotonic() - start
            self.console.print(f"Spent: {report.elapsed:.2f}s")

    def _delete_each(self, report: DeleteReport) -> None:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total}"),
            console=self.console,
            transient=True,
        ) as progress:
            task = progress.add_task("Deleting keys…", total=len(report.leaves))

            for path in report.leaves:
                try:
                    self.store.delete(path)
                    report.deleted.append(path)
                except SecretStoreError as exc:
                    logger.warning("failed to delete %s: %s", path, exc)
                    report.failed.append(DeleteFailure(path=path, error=str(exc)))
                progress.advance(task)
