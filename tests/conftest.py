"""Shared pytest fixtures for vaultprune tests."""

from __future__ import annotations

import io

import pytest
from hvac.exceptions import Forbidden, InternalServerError, InvalidPath
from rich.console import Console

from vaultprune.envelope import encode
from vaultprune.store import VaultStore


class FakeVaultClient:
    """In-memory stand-in for the raw logical API of :class:`hvac.Client`.

    Mounts named in *versioned_mounts* behave like KV v2: list and delete
    only work under ``<mount>/metadata/...``.  Listing keeps insertion order
    so tests control discovery order.
    """

    def __init__(self, url: str = "http://vault.test:8200", versioned_mounts=()):
        self.url = url
        self.versioned = set(versioned_mounts)
        self.secrets: dict[str, dict] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_list: set[str] = set()
        self.fail_delete: set[str] = set()

    def _split(self, path: str) -> tuple[str, str, bool]:
        mount, _, rest = path.partition("/")
        if rest.startswith("metadata/") or rest == "metadata":
            return mount, rest[len("metadata/") :], True
        return mount, rest, False

    def _primary(self, path: str) -> tuple[str, bool]:
        mount, rest, is_metadata = self._split(path)
        return f"{mount}/{rest}", is_metadata

    @property
    def deleted(self) -> list[str]:
        return [path for action, path in self.calls if action == "delete"]

    def seed(self, *paths: str, payload: bytes = b"s3cret") -> None:
        for path in paths:
            self.secrets[path] = encode(payload)

    def read(self, path):
        self.calls.append(("read", path))
        if path not in self.secrets:
            return None
        return {"data": self.secrets[path], "lease_duration": 0}

    def write_data(self, path, *, data=None, wrap_ttl=None):
        self.calls.append(("write", path))
        self.secrets[path] = dict(data or {})

    def list(self, path):
        self.calls.append(("list", path))
        if path in self.fail_list:
            raise InternalServerError(f"backend error listing {path}")

        primary, is_metadata = self._primary(path)
        mount = primary.split("/", 1)[0]
        if mount in self.versioned and not is_metadata:
            return None

        prefix = primary if primary.endswith("/") else primary + "/"
        children: list[str] = []
        for key in self.secrets:
            if not key.startswith(prefix):
                continue
            rest = key[len(prefix) :]
            head, sep, _ = rest.partition("/")
            child = head + sep
            if child not in children:
                children.append(child)
        if not children:
            return None
        return {"data": {"keys": children}}

    def delete(self, path):
        self.calls.append(("delete", path))
        primary, is_metadata = self._primary(path)
        if primary in self.fail_delete:
            raise Forbidden(f"permission denied on {path}")
        mount = primary.split("/", 1)[0]
        if mount in self.versioned and not is_metadata:
            raise InvalidPath(f"no handler for route '{path}'")
        self.secrets.pop(primary, None)


@pytest.fixture()
def fake_client():
    return FakeVaultClient()


@pytest.fixture()
def store(fake_client):
    return VaultStore(fake_client)


@pytest.fixture()
def app_tree(fake_client):
    """``secret/app/token`` and ``secret/app/nested/key``, listed in that order."""
    fake_client.seed("secret/app/token", "secret/app/nested/key")
    return fake_client


@pytest.fixture()
def versioned_client():
    client = FakeVaultClient(versioned_mounts={"kv"})
    client.seed("kv/team/db/password", "kv/team/db/user", "kv/team/api-key")
    return client


@pytest.fixture()
def quiet_console():
    return Console(file=io.StringIO(), width=120)
