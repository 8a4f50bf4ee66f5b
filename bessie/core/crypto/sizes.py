"""
Message Size Calculator
=======================

Maps plaintext lengths to ciphertext lengths and back.

Wire Layout:
    NONCE (24) | C_0 | T_0 | C_1 | T_1 | ... | C_n-1 | T_n-1

    Every chunk but the last carries CHUNK_SIZE bytes of ciphertext.
    The last carries the remainder (0..CHUNK_SIZE bytes). An empty
    plaintext still produces one (empty) chunk and one tag.
"""

from __future__ import annotations

from typing import Final

from bessie.core.exceptions import InvalidLength

KEY_SIZE: Final[int] = 32
TAG_SIZE: Final[int] = 32
NONCE_SIZE: Final[int] = 24
CHUNK_SIZE: Final[int] = 16384
CIPHERTEXT_CHUNK_SIZE: Final[int] = CHUNK_SIZE + TAG_SIZE  # 16416

MIN_CIPHERTEXT_SIZE: Final[int] = NONCE_SIZE + TAG_SIZE


def _ceil_div(n: int, d: int) -> int:
    return -(-n // d)


def chunk_count(plaintext_len: int) -> int:
    """Number of chunks for a plaintext of the given length (always >= 1)."""
    if plaintext_len < 0:
        raise InvalidLength(f"plaintext length must be >= 0, got {plaintext_len}")
    return _ceil_div(max(plaintext_len, 1), CHUNK_SIZE)


def ciphertext_size(plaintext_len: int) -> int:
    """
    Compute the exact ciphertext length for a plaintext length.

    Args:
        plaintext_len: Plaintext length in bytes

    Returns:
        NONCE_SIZE + plaintext_len + chunk_count * TAG_SIZE

    Raises:
        InvalidLength: If plaintext_len is negative
    """
    return NONCE_SIZE + plaintext_len + chunk_count(plaintext_len) * TAG_SIZE


def plaintext_size(ciphertext_len: int) -> int:
    """
    Compute the exact plaintext length for a ciphertext length.

    Args:
        ciphertext_len: Ciphertext length in bytes, nonce included

    Returns:
        ciphertext_len - NONCE_SIZE - chunk_count * TAG_SIZE

    Raises:
        InvalidLength: If shorter than NONCE_SIZE + TAG_SIZE, or if no
            plaintext length encrypts to exactly this size
    """
    if ciphertext_len < MIN_CIPHERTEXT_SIZE:
        raise InvalidLength(
            f"ciphertext must be at least {MIN_CIPHERTEXT_SIZE} bytes, got {ciphertext_len}"
        )

    body_len = ciphertext_len - NONCE_SIZE
    count = _ceil_div(body_len, CIPHERTEXT_CHUNK_SIZE)

    # The last segment is a tag plus 0..CHUNK_SIZE bytes, and may only be
    # empty when it is the sole chunk.
    last_chunk_len = body_len - (count - 1) * CIPHERTEXT_CHUNK_SIZE - TAG_SIZE
    if last_chunk_len < 0 or (last_chunk_len == 0 and count > 1):
        raise InvalidLength(
            f"ciphertext length {ciphertext_len} does not match any plaintext length"
        )

    return body_len - count * TAG_SIZE
