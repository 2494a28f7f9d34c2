"""Depth-bounded recursive listing of a secret hierarchy."""

from __future__ import annotations

from typing import TYPE_CHECKING

from vaultprune.exceptions import DepthExceededError
from vaultprune.paths import as_directory, is_directory

if TYPE_CHECKING:
    from vaultprune.store import VaultStore

MAX_DEPTH = 10


def list_recursive(store: VaultStore, path: str, depth: int = 0) -> list[str]:
    """Flatten every leaf under *path* into a list of full paths.

    Directories are walked depth-first in the order the store lists them, so
    the result is in discovery order.  No deduplication is done; the
    hierarchy is assumed to be a tree.

    Args:
        store: Store used for listing (read-only).
        path: Directory to walk.  A missing trailing ``/`` is added.
        depth: Nesting level of *path*; the root is 0.

    Returns:
        Full leaf paths, e.g. ``["secret/app/token", "secret/app/nested/key"]``.

    Raises:
        DepthExceededError: A directory deeper than :data:`MAX_DEPTH` was reached.
        TransportError: Any list call failed.  No partial result is returned.
    """
    if depth > MAX_DEPTH:
        raise DepthExceededError(path, depth, MAX_DEPTH)

    path = as_directory(path)
    leaves: list[str] = []
    for child in store.list_raw(path):
        full_path = f"{path}{child}"
        if is_directory(child):
            leaves.extend(list_recursive(store, full_path, depth + 1))
        else:
            leaves.append(full_path)
    return leaves
