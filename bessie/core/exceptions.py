"""
Exception Hierarchy
===================

All engine failures derive from BessieError.

- InvalidLength: a buffer size does not match the size formulas.
  Raised before any cryptographic work.
- InvalidKeyLength: the key is not exactly KEY_SIZE bytes.
- AuthenticationFailure: a tag did not verify during decryption.
  The message is fixed and never names the failing chunk.
"""

from __future__ import annotations


class BessieError(Exception):
    """Base exception for all engine failures."""


class InvalidLength(BessieError, ValueError):
    """Raised when an input or output buffer has the wrong size."""


class InvalidKeyLength(BessieError, ValueError):
    """Raised when a key is not exactly 32 bytes."""


class AuthenticationFailure(BessieError):
    """Raised when ciphertext, key or nonce fails authentication."""

    def __init__(self) -> None:
        super().__init__("ciphertext failed authentication")
