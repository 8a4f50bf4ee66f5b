"""
Bessie - Chunked Authenticated Encryption
=========================================

Authenticated encryption for in-memory byte buffers, built entirely
on keyed BLAKE3.

Wire format:
    NONCE (24) | (CIPHERTEXT_CHUNK (<=16384) | TAG (32))+

Security Notice:
- No associated data
- Fail-closed decryption (output erased on any tag mismatch)
- No secrets are logged
"""

from bessie.core.config import BessieConfig
from bessie.core.crypto import (
    CHUNK_SIZE,
    CIPHERTEXT_CHUNK_SIZE,
    KEY_SIZE,
    NONCE_SIZE,
    TAG_SIZE,
    ChunkedAeadEngine,
    ciphertext_size,
    decrypt,
    decrypt_into,
    encrypt,
    encrypt_into,
    plaintext_size,
)
from bessie.core.exceptions import (
    AuthenticationFailure,
    BessieError,
    InvalidKeyLength,
    InvalidLength,
)
from bessie.core.logging import configure_logging

__version__ = "0.1.0"

__all__ = [
    "ChunkedAeadEngine",
    "BessieConfig",
    "configure_logging",
    "encrypt",
    "decrypt",
    "encrypt_into",
    "decrypt_into",
    "ciphertext_size",
    "plaintext_size",
    "BessieError",
    "InvalidLength",
    "InvalidKeyLength",
    "AuthenticationFailure",
    "KEY_SIZE",
    "TAG_SIZE",
    "NONCE_SIZE",
    "CHUNK_SIZE",
    "CIPHERTEXT_CHUNK_SIZE",
    "__version__",
]
