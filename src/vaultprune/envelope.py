"""Encode and decode byte payloads to the store's ``{"data": <base64>}`` envelope."""

from __future__ import annotations

import base64
import binascii
from collections.abc import Mapping
from typing import Any

from vaultprune.exceptions import DecodeFailureError, MalformedValueError

DATA_FIELD = "data"


def encode(payload: bytes) -> dict[str, str]:
    """Wrap *payload* as base64 text under :data:`DATA_FIELD`."""
    return {DATA_FIELD: base64.b64encode(payload).decode("ascii")}


def decode(envelope: Any) -> bytes:
    """Return the byte payload carried by *envelope*.

    Args:
        envelope: The value mapping read from the store.

    Returns:
        The decoded bytes.

    Raises:
        MalformedValueError: *envelope* is not a mapping, or the data field
            is absent or not a string.
        DecodeFailureError: The data field is a string but not valid base64.
    """
    if not isinstance(envelope, Mapping):
        raise MalformedValueError("value is malformed: not a mapping")

    encoded = envelope.get(DATA_FIELD)
    if encoded is None:
        raise MalformedValueError(f"value is malformed: missing {DATA_FIELD!r} field")
    if not isinstance(encoded, str):
        raise MalformedValueError(
            f"value is malformed: {DATA_FIELD!r} field is {type(encoded).__name__}, not str"
        )

    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeFailureError(f"failed to decode data: {exc}") from exc
