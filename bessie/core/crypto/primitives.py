"""
External Primitives
===================

Adapters for the three collaborators the engine relies on:

    1. Keyed BLAKE3 as PRF / MAC / XOF
    2. OS CSPRNG for public nonces
    3. Constant-time buffer comparison

Every keyed_hash() call builds a fresh hasher, so calls share no
mutable state and are safe to run from several threads at once.
"""

from __future__ import annotations

import secrets
from typing import Final

from blake3 import blake3
from cryptography.hazmat.primitives import constant_time

HASH_DIGEST_SIZE: Final[int] = blake3.digest_size  # 32


def keyed_hash(key: bytes, data: bytes | bytearray | memoryview, length: int = HASH_DIGEST_SIZE) -> bytes:
    """
    Run keyed BLAKE3 over data with an extendable output length.

    Args:
        key: 32-byte hash key
        data: Message input (any buffer)
        length: Number of output bytes (may be 0)

    Returns:
        length bytes of output
    """
    if length == 0:
        return b""
    return blake3(data, key=bytes(key)).digest(length=length)


def random_nonce(size: int) -> bytes:
    """Generate a fresh public nonce from the OS CSPRNG."""
    return secrets.token_bytes(size)


def constant_time_equal(a: bytes | bytearray, b: bytes | bytearray) -> bool:
    """Compare two byte strings without early exit."""
    return constant_time.bytes_eq(bytes(a), bytes(b))
