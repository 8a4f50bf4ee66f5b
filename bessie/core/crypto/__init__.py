"""
Bessie Cryptographic Core
=========================

Chunked authenticated encryption built on keyed BLAKE3.

Architecture:
    1. Size calculator: plaintext <-> ciphertext lengths
    2. Nonce-state manager: nonce | chunk index | final flag
    3. Key deriver: per-chunk MAC and encryption keys
    4. Chunk authenticator and keystream generator
    5. Chunk cipher loop (sequential or thread pool)

Security Properties:
    - Every chunk is authenticated; tags bind keystreams to content
    - The final chunk's keys encode the final flag (truncation-proof)
    - Constant-time tag comparison
    - Secure RNG for all nonces

WARNING: This module handles sensitive cryptographic material.
         No associated data is supported.
"""

from bessie.core.crypto.engine import (
    ChunkedAeadEngine,
    decrypt,
    decrypt_into,
    encrypt,
    encrypt_into,
)
from bessie.core.crypto.sizes import (
    CHUNK_SIZE,
    CIPHERTEXT_CHUNK_SIZE,
    KEY_SIZE,
    NONCE_SIZE,
    TAG_SIZE,
    ciphertext_size,
    plaintext_size,
)

__all__ = [
    "ChunkedAeadEngine",
    "encrypt",
    "decrypt",
    "encrypt_into",
    "decrypt_into",
    "ciphertext_size",
    "plaintext_size",
    "KEY_SIZE",
    "TAG_SIZE",
    "NONCE_SIZE",
    "CHUNK_SIZE",
    "CIPHERTEXT_CHUNK_SIZE",
]
