"""API credentials and access to the decoded secret."""

from __future__ import annotations

import base64
import binascii
import hashlib
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

from kraken_client.errors import DecodeError


def decode_secret(secret: str) -> bytearray:
    """Strictly base64-decode an API secret into a mutable buffer."""
    try:
        raw = base64.b64decode(secret.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"API secret is not valid base64: {e}") from e
    return bytearray(raw)


@dataclass(frozen=True)
class Credentials:
    """
    API key plus base64-encoded secret.

    The secret stays opaque text until `decoded_secret()` is entered; the
    decoded bytes live in a buffer that is zeroed when the block exits.
    """

    api_key: str
    secret: str = field(repr=False)

    @contextmanager
    def decoded_secret(self) -> Iterator[bytearray]:
        key = decode_secret(self.secret)
        try:
            yield key
        finally:
            for i in range(len(key)):
                key[i] = 0

    def validate(self) -> None:
        """Fail fast with DecodeError if the secret is unusable."""
        with self.decoded_secret():
            pass

    @property
    def fingerprint(self) -> str:
        """Short stable id for this credential set, safe to log or use in file names."""
        return hashlib.sha256(self.api_key.encode("utf-8")).hexdigest()[:16]
