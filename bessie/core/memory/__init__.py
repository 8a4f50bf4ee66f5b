"""
Memory Security Module
======================

Secure buffers and zeroization helpers for per-chunk secrets.

WARNING:
- Python's memory model doesn't guarantee secure erasure
- These are best-effort mitigations
"""

from bessie.core.memory.secure_memory import SecureBuffer, MemoryGuard
from bessie.core.memory.zeroization import (
    secure_zero,
    ZeroizeContext,
)

__all__ = [
    "SecureBuffer",
    "MemoryGuard",
    "secure_zero",
    "ZeroizeContext",
]
