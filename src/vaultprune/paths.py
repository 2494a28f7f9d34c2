"""Path helpers and the primary/metadata path rewrite for versioned KV mounts."""

from __future__ import annotations

import re

SEPARATOR = "/"


class PathNormalizer:
    """Rewrite a primary-form path into its KV v2 metadata form.

    ``kv/foo/bar`` becomes ``kv/metadata/foo/bar``.  Paths without a
    separator after a non-empty first segment are returned unchanged.

    The rewrite is not idempotent; apply it at most once per path.
    """

    def __init__(self, marker: str = "metadata") -> None:
        self.marker = marker
        self._pattern = re.compile(r"^([A-Za-z0-9_.-]+)/")

    def to_metadata(self, path: str) -> str:
        return self._pattern.sub(rf"\1/{self.marker}/", path, count=1)

    def applies_to(self, path: str) -> bool:
        return self._pattern.match(path) is not None

    __call__ = to_metadata


def is_directory(name: str) -> bool:
    return name.endswith(SEPARATOR)


def as_directory(path: str) -> str:
    """Return *path* with exactly one trailing separator."""
    return path.rstrip(SEPARATOR) + SEPARATOR


def strip_leading(path: str) -> str:
    """Drop leading separators (``/secret/app`` -> ``secret/app``)."""
    return path.lstrip(SEPARATOR)
