"""
Chunked AEAD Engine
===================

Encrypts and decrypts whole in-memory buffers chunk by chunk.

Encryption Flow (per chunk i of n):
    nonce_state(nonce, i, final = i == n-1)
        ↓ H(key)            → mac_key | enc_key
    plaintext_chunk
        ↓ H(mac_key)        → tag
        ↓ H(enc_key, tag)   → keystream
        ↓ XOR               → ciphertext_chunk
    output: ... | ciphertext_chunk | tag | ...

Decryption Flow:
    keystream from the stored tag → candidate plaintext →
    recomputed tag → constant-time compare. Any mismatch erases the
    whole output buffer and raises AuthenticationFailure.

Scheduling:
    Chunk keys depend only on (key, nonce, index, final flag), so
    chunks can run on a thread pool. Each chunk writes only its own
    output slice and all chunks are joined before returning.

WARNING:
    - The engine keeps no state between calls
    - Output buffers are borrowed for the duration of one call
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Final, Optional

from bessie.core.config import BessieConfig
from bessie.core.crypto.chunk import Buffer, open_chunk, seal_chunk
from bessie.core.crypto.nonce_state import NonceState
from bessie.core.crypto.primitives import random_nonce
from bessie.core.crypto.sizes import (
    CHUNK_SIZE,
    CIPHERTEXT_CHUNK_SIZE,
    NONCE_SIZE,
    TAG_SIZE,
    chunk_count,
    ciphertext_size,
    plaintext_size,
)
from bessie.core.exceptions import AuthenticationFailure
from bessie.core.memory import ZeroizeContext, secure_zero
from bessie.utils.validators import (
    as_readable,
    as_writable,
    validate_exact_length,
    validate_key,
)

NonceSource = Callable[[int], bytes]

_SEQUENTIAL: Final[str] = "sequential"
_PARALLEL: Final[str] = "parallel"


def _chunk_slices(index: int, plaintext_len: int) -> tuple[slice, slice, slice]:
    """(plaintext, ciphertext, tag) slices for one chunk."""
    pt_start = index * CHUNK_SIZE
    pt_end = min(pt_start + CHUNK_SIZE, plaintext_len)
    ct_start = NONCE_SIZE + index * CIPHERTEXT_CHUNK_SIZE
    ct_end = ct_start + (pt_end - pt_start)
    return slice(pt_start, pt_end), slice(ct_start, ct_end), slice(ct_end, ct_end + TAG_SIZE)


class ChunkedAeadEngine:
    """
    Chunked authenticated encryption over keyed BLAKE3.

    Usage:
        engine = ChunkedAeadEngine()
        ciphertext = engine.encrypt(plaintext, key)
        plaintext = engine.decrypt(ciphertext, key)

        # Caller-owned buffers
        out = bytearray(ciphertext_size(len(plaintext)))
        engine.encrypt_into(out, plaintext, key)

    Security Notes:
        - A fresh random nonce is drawn for every message
        - Decrypted bytes are only left in the output once every
          chunk has verified
    """

    __slots__ = ("_max_workers", "_parallel_min_chunks", "_nonce_source", "_log")

    def __init__(
        self,
        max_workers: int = 1,
        parallel_min_chunks: int = 4,
        nonce_source: Optional[NonceSource] = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            max_workers: Threads used for chunk processing (1 = sequential)
            parallel_min_chunks: Smallest chunk count that uses the pool
            nonce_source: Callable returning n random bytes (CSPRNG by default)
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._max_workers = max_workers
        self._parallel_min_chunks = parallel_min_chunks
        self._nonce_source = nonce_source or random_nonce
        self._log = logging.getLogger("bessie.engine")

    @classmethod
    def from_config(cls, config: Optional[BessieConfig] = None) -> "ChunkedAeadEngine":
        """Build an engine from configuration (the global instance by default)."""
        config = config or BessieConfig.get_instance()
        return cls(
            max_workers=config.engine.max_workers,
            parallel_min_chunks=config.engine.parallel_min_chunks,
        )

    def _mode(self, count: int) -> str:
        if self._max_workers > 1 and count >= self._parallel_min_chunks:
            return _PARALLEL
        return _SEQUENTIAL

    def encrypt_into(self, out: Buffer, plaintext: Buffer, key: Buffer) -> None:
        """
        Encrypt plaintext into a caller-supplied ciphertext buffer.

        Args:
            out: Writable buffer of exactly ciphertext_size(len(plaintext)) bytes
            plaintext: Data to encrypt (may be empty)
            key: 32-byte key

        Raises:
            InvalidLength: If out has the wrong size
            InvalidKeyLength: If key is not 32 bytes
        """
        pt = as_readable(plaintext, "plaintext")
        dst = as_writable(out, "ciphertext output")
        k = as_readable(key, "key")
        validate_exact_length(dst, ciphertext_size(len(pt)), "ciphertext output")
        validate_key(k)

        nonce = self._nonce_source(NONCE_SIZE)
        if len(nonce) != NONCE_SIZE:
            raise ValueError(f"nonce source must return {NONCE_SIZE} bytes")
        dst[:NONCE_SIZE] = nonce

        count = chunk_count(len(pt))
        mode = self._mode(count)
        self._log.debug("encrypt: %d bytes in %d chunk(s), %s", len(pt), count, mode)

        key_copy = bytearray(k)
        with ZeroizeContext(key_copy):
            if mode == _PARALLEL:
                def seal(index: int) -> None:
                    p, c, t = _chunk_slices(index, len(pt))
                    state = NonceState.for_chunk(nonce, index, index == count - 1)
                    seal_chunk(key_copy, state, pt[p], dst[c], dst[t])

                self._run_parallel(seal, count)
                return

            state = NonceState(nonce)
            for index in range(count):
                state.prepare(index, count)
                p, c, t = _chunk_slices(index, len(pt))
                seal_chunk(key_copy, state, pt[p], dst[c], dst[t])
                state.advance(index)

    def decrypt_into(self, out: Buffer, ciphertext: Buffer, key: Buffer) -> None:
        """
        Decrypt and verify ciphertext into a caller-supplied buffer.

        Args:
            out: Writable buffer of exactly plaintext_size(len(ciphertext)) bytes
            ciphertext: Nonce-prefixed ciphertext
            key: 32-byte key

        Raises:
            InvalidLength: If ciphertext is malformed or out has the wrong size
            InvalidKeyLength: If key is not 32 bytes
            AuthenticationFailure: If any chunk fails verification; out is
                then entirely zeroed
        """
        ct = as_readable(ciphertext, "ciphertext")
        dst = as_writable(out, "plaintext output")
        k = as_readable(key, "key")
        validate_exact_length(dst, plaintext_size(len(ct)), "plaintext output")
        validate_key(k)

        nonce = bytes(ct[:NONCE_SIZE])
        count = chunk_count(len(dst))
        mode = self._mode(count)
        self._log.debug("decrypt: %d bytes in %d chunk(s), %s", len(dst), count, mode)

        key_copy = bytearray(k)
        try:
            with ZeroizeContext(key_copy):
                if mode == _PARALLEL:
                    self._open_parallel(key_copy, nonce, ct, dst, count)
                else:
                    self._open_sequential(key_copy, nonce, ct, dst, count)
        except BaseException as exc:
            secure_zero(dst)
            if isinstance(exc, AuthenticationFailure):
                self._log.warning("decrypt: authentication failed, output erased")
            raise

    def _open_sequential(
        self, key: bytearray, nonce: bytes, ct: memoryview, dst: memoryview, count: int
    ) -> None:
        state = NonceState(nonce)
        for index in range(count):
            state.prepare(index, count)
            p, c, t = _chunk_slices(index, len(dst))
            if not open_chunk(key, state, ct[c], ct[t], dst[p]):
                raise AuthenticationFailure()
            state.advance(index)

    def _open_parallel(
        self, key: bytearray, nonce: bytes, ct: memoryview, dst: memoryview, count: int
    ) -> None:
        def open_one(index: int) -> bool:
            p, c, t = _chunk_slices(index, len(dst))
            state = NonceState.for_chunk(nonce, index, index == count - 1)
            return open_chunk(key, state, ct[c], ct[t], dst[p])

        if not all(self._run_parallel(open_one, count)):
            raise AuthenticationFailure()

    def _run_parallel(self, fn: Callable[[int], object], count: int) -> list:
        """Run fn over every chunk index and join before returning."""
        with ThreadPoolExecutor(
            max_workers=min(self._max_workers, count),
            thread_name_prefix="bessie-chunk",
        ) as pool:
            return list(pool.map(fn, range(count)))

    def encrypt(self, plaintext: Buffer, key: Buffer) -> bytes:
        """
        Encrypt plaintext into a newly allocated ciphertext.

        Raises:
            InvalidKeyLength: If key is not 32 bytes
        """
        out = bytearray(ciphertext_size(len(as_readable(plaintext, "plaintext"))))
        self.encrypt_into(out, plaintext, key)
        return bytes(out)

    def decrypt(self, ciphertext: Buffer, key: Buffer) -> bytes:
        """
        Decrypt and verify ciphertext into a newly allocated plaintext.

        Raises:
            InvalidLength: If ciphertext is malformed
            InvalidKeyLength: If key is not 32 bytes
            AuthenticationFailure: If verification fails
        """
        out = bytearray(plaintext_size(len(as_readable(ciphertext, "ciphertext"))))
        self.decrypt_into(out, ciphertext, key)
        return bytes(out)

    def __repr__(self) -> str:
        return f"ChunkedAeadEngine(max_workers={self._max_workers})"


_default_engine = ChunkedAeadEngine()


def encrypt(plaintext: Buffer, key: Buffer) -> bytes:
    """Encrypt with the default sequential engine."""
    return _default_engine.encrypt(plaintext, key)


def decrypt(ciphertext: Buffer, key: Buffer) -> bytes:
    """Decrypt with the default sequential engine."""
    return _default_engine.decrypt(ciphertext, key)


def encrypt_into(out: Buffer, plaintext: Buffer, key: Buffer) -> None:
    """Encrypt into a caller-provided buffer with the default sequential engine."""
    _default_engine.encrypt_into(out, plaintext, key)


def decrypt_into(out: Buffer, ciphertext: Buffer, key: Buffer) -> None:
    """Decrypt into a caller-provided buffer with the default sequential engine."""
    _default_engine.decrypt_into(out, ciphertext, key)
