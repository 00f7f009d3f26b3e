from __future__ import annotations

import hashlib

from .bytes import BytesLike


def blake2b_256(data: BytesLike) -> bytes:
    """32-byte BLAKE2b digest: addresses, intent messages and transaction digests all use it."""
    return hashlib.blake2b(bytes(data), digest_size=32).digest()


__all__ = ["blake2b_256"]
