"""Hash utilities for the local object database."""

import hashlib


def hash_object(data: bytes) -> str:
    """
    Compute the SHA-1 id of a full loose object (header included).

    Returns:
        40-character hex string
    """
    return hashlib.sha1(data).hexdigest()


def hash_raw(kind: str, body: bytes) -> str:
    """Compute the id an object of `kind` with `body` is stored under."""
    return hash_object(f"{kind} {len(body)}\0".encode() + body)
