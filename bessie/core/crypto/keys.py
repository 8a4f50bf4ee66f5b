"""
Per-Chunk Key Derivation
========================

    secret = H(key=long_term_key, data=nonce_state, length=64)
    mac_key = secret[0:32]
    enc_key = secret[32:64]

The final flag is part of nonce_state, so the last chunk's keys differ
from the keys the same index would get as a non-final chunk.
"""

from __future__ import annotations

from typing import Final

from bessie.core.crypto.nonce_state import NonceState
from bessie.core.crypto.primitives import keyed_hash
from bessie.core.crypto.sizes import KEY_SIZE
from bessie.core.memory import SecureBuffer

CHUNK_SECRET_SIZE: Final[int] = 2 * KEY_SIZE


class ChunkKeys:
    """
    The 64-byte per-chunk secret, split into MAC and encryption keys.

    Both keys are views into one SecureBuffer; wipe() erases them
    together. Use as a context manager so every exit path wipes.
    """

    __slots__ = ("_secret",)

    def __init__(self, secret: SecureBuffer) -> None:
        if secret.size != CHUNK_SECRET_SIZE:
            raise ValueError(f"Chunk secret must be {CHUNK_SECRET_SIZE} bytes")
        self._secret = secret

    @property
    def mac_key(self) -> memoryview:
        return self._secret.view(0, KEY_SIZE)

    @property
    def enc_key(self) -> memoryview:
        return self._secret.view(KEY_SIZE, CHUNK_SECRET_SIZE)

    @property
    def is_wiped(self) -> bool:
        return self._secret.is_wiped

    def wipe(self) -> None:
        self._secret.wipe()

    def __enter__(self) -> "ChunkKeys":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.wipe()

    def __repr__(self) -> str:
        return "ChunkKeys(WIPED)" if self.is_wiped else "ChunkKeys(mac_key=..., enc_key=...)"


def derive_chunk_keys(key: bytes | bytearray | memoryview, nonce_state: NonceState | bytes) -> ChunkKeys:
    """
    Derive one chunk's MAC and encryption keys.

    Args:
        key: 32-byte long-term key
        nonce_state: The 33-byte state for this chunk

    Returns:
        ChunkKeys; the caller must wipe it once the chunk is processed
    """
    state = nonce_state.to_bytes() if isinstance(nonce_state, NonceState) else nonce_state
    secret = SecureBuffer(CHUNK_SECRET_SIZE, lock_memory=False)
    secret.write(keyed_hash(key, state, CHUNK_SECRET_SIZE))
    return ChunkKeys(secret)
