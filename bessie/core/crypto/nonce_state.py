"""
Nonce-State Manager
===================

Builds and advances the 33-byte key-derivation input:

    NONCE (24) | CHUNK_INDEX (8, little-endian) | FINAL_FLAG (1)

The state is public (the nonce travels in the clear) but its exact
byte sequence is part of the wire contract.
"""

from __future__ import annotations

import struct
from typing import Final

from bessie.core.crypto.sizes import NONCE_SIZE

CHUNK_INDEX_SIZE: Final[int] = 8
FINAL_FLAG_SIZE: Final[int] = 1
NONCE_STATE_SIZE: Final[int] = NONCE_SIZE + CHUNK_INDEX_SIZE + FINAL_FLAG_SIZE  # 33

_INDEX_OFFSET: Final[int] = NONCE_SIZE
_FLAG_OFFSET: Final[int] = NONCE_SIZE + CHUNK_INDEX_SIZE
_MAX_INDEX: Final[int] = 2 ** (CHUNK_INDEX_SIZE * 8) - 1


class NonceState:
    """
    Mutable derivation state for one message.

    Starts as (nonce, index=0, final=0). The chunk loop sets the final
    flag before deriving the last chunk's keys and calls advance(i)
    once chunk i is done.
    """

    __slots__ = ("_state",)

    def __init__(self, nonce: bytes | bytearray | memoryview) -> None:
        if len(nonce) != NONCE_SIZE:
            raise ValueError(f"Nonce must be exactly {NONCE_SIZE} bytes")
        self._state = bytearray(NONCE_STATE_SIZE)
        self._state[:NONCE_SIZE] = nonce

    @classmethod
    def for_chunk(cls, nonce: bytes | bytearray | memoryview, index: int, is_final: bool) -> "NonceState":
        """Build the state a given chunk derives its keys from."""
        state = cls(nonce)
        state.set_index(index)
        state.set_final(is_final)
        return state

    @property
    def chunk_index(self) -> int:
        return struct.unpack_from("<Q", self._state, _INDEX_OFFSET)[0]

    @property
    def is_final(self) -> bool:
        return self._state[_FLAG_OFFSET] == 1

    def set_index(self, index: int) -> None:
        if not 0 <= index <= _MAX_INDEX:
            raise ValueError(f"Chunk index out of range: {index}")
        struct.pack_into("<Q", self._state, _INDEX_OFFSET, index)

    def set_final(self, is_final: bool) -> None:
        self._state[_FLAG_OFFSET] = 1 if is_final else 0

    def prepare(self, index: int, count: int) -> None:
        """Set the final flag for chunk `index` of a `count`-chunk message."""
        self.set_final(index == count - 1)

    def advance(self, completed_index: int) -> None:
        """Record that chunk `completed_index` finished; index becomes i+1."""
        self.set_index(completed_index + 1)

    def to_bytes(self) -> bytes:
        return bytes(self._state)

    def __len__(self) -> int:
        return NONCE_STATE_SIZE

    def __repr__(self) -> str:
        return f"NonceState(index={self.chunk_index}, final={self.is_final})"
