"""Data models for vaultprune."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DeleteFailure:
    """A leaf that could not be deleted and why."""

    path: str
    error: str


@dataclass
class DeleteReport:
    """Outcome of one recursive delete.

    Leaves not listed in *failed* were deleted when *confirmed* is True.
    """

    root: str
    leaves: list[str] = field(default_factory=list)  # discovery order
    confirmed: bool = False
    deleted: list[str] = field(default_factory=list)
    failed: list[DeleteFailure] = field(default_factory=list)
    elapsed: float = 0.0  # seconds, enumerate + delete

    @property
    def attempted(self) -> int:
        return len(self.deleted) + len(self.failed)

    @property
    def succeeded(self) -> int:
        return len(self.deleted)

    @property
    def ok(self) -> bool:
        """True when every attempted delete went through."""
        return not self.failed
