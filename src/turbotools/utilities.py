"""Base64, digest and UUID helpers behind the ``b64``, ``hash`` and ``uuid`` commands."""

from __future__ import annotations

import base64
import binascii
import hashlib
import uuid
from collections.abc import Callable

import blake3

from .errors import MalformedInput


def b64_encode(data: bytes) -> bytes:
    return base64.b64encode(data)


def b64_decode(data: bytes) -> bytes:
    """Decode standard, padded base64. Surrounding whitespace is ignored."""
    try:
        return base64.b64decode(data.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedInput("invalid-base64", str(exc)) from exc


HASH_ALGORITHMS: dict[str, Callable[[bytes], str]] = {
    "md5": lambda data: hashlib.md5(data).hexdigest(),
    "sha1": lambda data: hashlib.sha1(data).hexdigest(),
    "sha256": lambda data: hashlib.sha256(data).hexdigest(),
    "sha512": lambda data: hashlib.sha512(data).hexdigest(),
    "blake3": lambda data: blake3.blake3(data).hexdigest(),
}


def hash_digest(algorithm: str, data: bytes) -> str:
    """Lowercase hex digest of ``data``."""
    try:
        digest = HASH_ALGORITHMS[algorithm.lower()]
    except KeyError:
        raise ValueError(f"Unknown hash algorithm: {algorithm}") from None
    return digest(data)


def generate_uuid() -> uuid.UUID:
    return uuid.uuid4()
