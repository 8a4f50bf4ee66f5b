"""
Chunk Authenticator and Keystream Generator
===========================================

Per-chunk construction (SIV-like):

    tag       = H(key=mac_key, data=plaintext_chunk, length=32)
    keystream = H(key=enc_key, data=tag, length=len(chunk))
    ct_chunk  = plaintext_chunk XOR keystream

The keystream depends on the tag, so a forged tag also yields a
different keystream. Decryption recomputes the tag over the recovered
plaintext and compares it to the stored one in constant time.
"""

from __future__ import annotations

from bessie.core.crypto.keys import derive_chunk_keys
from bessie.core.crypto.nonce_state import NonceState
from bessie.core.crypto.primitives import constant_time_equal, keyed_hash
from bessie.core.crypto.sizes import TAG_SIZE
from bessie.core.memory import MemoryGuard, SecureBuffer

Buffer = bytes | bytearray | memoryview


def compute_tag(mac_key: Buffer, chunk_plaintext: Buffer) -> bytes:
    """Authentication tag over one chunk's plaintext."""
    return keyed_hash(mac_key, chunk_plaintext, TAG_SIZE)


def compute_keystream(enc_key: Buffer, tag: Buffer, out_len: int) -> bytes:
    """Keystream of exactly out_len bytes, seeded by the chunk's tag."""
    return keyed_hash(enc_key, tag, out_len)


def xor_into(out: memoryview, a: Buffer, b: Buffer) -> None:
    """Write a XOR b into out. All three must have the same length."""
    n = len(out)
    if len(a) != n or len(b) != n:
        raise ValueError("XOR operands must have equal length")
    if n == 0:
        return
    out[:] = (int.from_bytes(a, "little") ^ int.from_bytes(b, "little")).to_bytes(n, "little")


def seal_chunk(
    key: Buffer,
    state: NonceState,
    plaintext_chunk: Buffer,
    out_chunk: memoryview,
    out_tag: memoryview,
) -> None:
    """
    Encrypt one chunk into its ciphertext slot and tag slot.

    The state must already carry this chunk's index and final flag.
    """
    with derive_chunk_keys(key, state) as keys:
        tag = compute_tag(keys.mac_key, plaintext_chunk)
        out_tag[:] = tag
        keystream = compute_keystream(keys.enc_key, tag, len(plaintext_chunk))
        xor_into(out_chunk, plaintext_chunk, keystream)


def open_chunk(
    key: Buffer,
    state: NonceState,
    ciphertext_chunk: Buffer,
    tag: Buffer,
    out_chunk: memoryview,
) -> bool:
    """
    Decrypt one chunk into out_chunk and verify its tag.

    Returns:
        True if the tag verified. On False, out_chunk holds unverified
        bytes and the caller must erase its whole output.
    """
    with MemoryGuard() as guard:
        keys = guard.track(derive_chunk_keys(key, state))
        keystream = compute_keystream(keys.enc_key, tag, len(ciphertext_chunk))
        xor_into(out_chunk, ciphertext_chunk, keystream)

        computed = guard.track(SecureBuffer(TAG_SIZE, lock_memory=False))
        computed.write(compute_tag(keys.mac_key, out_chunk))
        return constant_time_equal(computed.view(), tag)
