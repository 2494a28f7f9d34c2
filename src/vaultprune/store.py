"""Thin wrapper over the Vault logical API with primary/metadata path fallback."""

from __future__ import annotations

import logging
import re
from typing import Any

import hvac
import requests
from hvac.exceptions import VaultError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from vaultprune.envelope import decode, encode
from vaultprune.exceptions import (
    DecodeFailureError,
    MalformedValueError,
    NotFoundError,
    TransportError,
)
from vaultprune.paths import PathNormalizer

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"\b(?:hvs|hvb|hvr|s)\.[A-Za-z0-9_-]{8,}")

_STORE_ERRORS = (VaultError, requests.exceptions.RequestException)

DEFAULT_NORMALIZER = PathNormalizer()


def _sanitize_error(msg: str) -> str:
    """Strip Vault tokens from error messages."""
    return _TOKEN_RE.sub("***", msg)


# Only connection establishment is retried; a request that reached the
# server is never replayed.
_RETRY_CONFIG = Retry(total=5, connect=5, read=0, status=0, other=0, backoff_factor=0.5)


def make_client(
    addr: str | None = None,
    token: str | None = None,
    namespace: str | None = None,
) -> hvac.Client:
    """Build an :class:`hvac.Client`.

    Unset arguments fall back to hvac's own environment handling
    (``VAULT_ADDR``, ``VAULT_TOKEN``, ``~/.vault-token``).
    """
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=_RETRY_CONFIG)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return hvac.Client(url=addr, token=token, namespace=namespace, session=session)


class VaultStore:
    """Read, write, list and delete secrets at raw logical paths.

    Every call logs the attempt.  hvac and requests exceptions are wrapped
    in :class:`~vaultprune.exceptions.TransportError` carrying the action,
    the path and this store's name.
    """

    def __init__(
        self,
        client: Any,
        normalizer: PathNormalizer = DEFAULT_NORMALIZER,
        name: str | None = None,
    ) -> None:
        self.client = client
        self.normalizer = normalizer
        self.name = name or getattr(client, "url", None) or "vault"

    def __str__(self) -> str:
        return f"VaultStore({self.name})"

    def _error(self, action: str, path: str, exc: Exception) -> TransportError:
        return TransportError(action, path, str(self), _sanitize_error(str(exc)))

    def exists(self, path: str) -> bool:
        logger.info("Head key %s", path)
        try:
            response = self.client.read(path)
        except _STORE_ERRORS as exc:
            raise self._error("head", path, exc) from exc
        return response is not None

    def get(self, path: str) -> bytes:
        """Read the value at *path* and return its decoded payload.

        Raises:
            NotFoundError: Nothing is stored at *path*.
            MalformedValueError: The value has no text ``data`` field.
            DecodeFailureError: The ``data`` field is not valid base64.
            TransportError: The read call failed.
        """
        logger.info("Get key %s", path)
        try:
            response = self.client.read(path)
        except _STORE_ERRORS as exc:
            raise self._error("get", path, exc) from exc
        if response is None:
            raise NotFoundError(
                f"failed to get key '{path}' from {self}: key does not exist",
                action="get",
                path=path,
            )

        try:
            return decode(response.get("data"))
        except (MalformedValueError, DecodeFailureError) as exc:
            raise type(exc)(
                f"failed to get key '{path}' from {self}: {exc}", action="get", path=path
            ) from exc

    def set(self, path: str, payload: bytes) -> None:
        envelope = encode(payload)
        logger.info("Set key %s (len: %d bytes)", path, len(envelope["data"]))
        try:
            self.client.write_data(path, data=envelope)
        except _STORE_ERRORS as exc:
            raise self._error("set", path, exc) from exc

    def list(self, path: str) -> list[str]:
        """List child names under *path* with one trailing separator removed."""
        return [key.removesuffix("/") for key in self.list_raw(path)]

    def list_raw(self, path: str) -> list[str]:
        """List child names under *path*, directories keeping their trailing ``/``.

        When the primary form yields nothing usable the list is re-issued
        once under the metadata form.  An empty directory is therefore
        queried twice.
        """
        logger.info("List key %s", path)
        keys = self._list_keys(path)
        if not keys:
            metadata_path = self.normalizer.to_metadata(path)
            if metadata_path != path:
                logger.info("List key %s", metadata_path)
                keys = self._list_keys(metadata_path)
        return keys or []

    def _list_keys(self, path: str) -> list[str] | None:
        try:
            response = self.client.list(path)
        except _STORE_ERRORS as exc:
            raise self._error("list", path, exc) from exc
        if not response:
            return None

        data = response.get("data") or {}
        keys = data.get("keys")
        if keys is None:
            return None
        if not isinstance(keys, list) or not all(isinstance(k, str) for k in keys):
            raise MalformedValueError(
                f"failed to list key '{path}' from {self}: keys is not a list of strings",
                action="list",
                path=path,
            )
        return keys

    def delete(self, path: str) -> None:
        """Delete *path*, retrying once under the metadata form on failure.

        Raises:
            TransportError: Both attempts failed (or the metadata form does
                not apply and the single attempt failed).
        """
        logger.info("Delete key %s", path)
        try:
            self.client.delete(path)
        except _STORE_ERRORS as exc:
            metadata_path = self.normalizer.to_metadata(path)
            if metadata_path == path:
                raise self._error("delete", path, exc) from exc
            logger.info("Delete key %s (retrying after: %s)", metadata_path, _sanitize_error(str(exc)))
            try:
                self.client.delete(metadata_path)
            except _STORE_ERRORS as retry_exc:
                raise self._error("delete", metadata_path, retry_exc) from retry_exc
