"""
Memory Zeroization Utilities
============================

Best-effort erasure of sensitive buffers.

Key Concepts:
- Zeroization: overwriting a buffer in place before it is released
- Context: automatic zeroization on scope exit, normal or exceptional

Limitations:
- Immutable bytes objects cannot be erased; only bytearray and
  writable memoryview buffers are handled
- The interpreter may hold copies this module cannot reach
"""

from __future__ import annotations

import ctypes
from contextlib import contextmanager
from typing import Iterator

Zeroizable = bytearray | memoryview


def secure_zero(data: Zeroizable) -> None:
    """
    Overwrite a mutable buffer with zeros.

    Uses ctypes.memset on the underlying memory where the buffer
    exports it, with a slice-assignment fallback.

    Args:
        data: bytearray or writable memoryview to clear

    Raises:
        TypeError: If the buffer is read-only
    """
    if isinstance(data, memoryview) and data.readonly:
        raise TypeError("cannot zero a read-only buffer")

    size = len(data) if not isinstance(data, memoryview) else data.nbytes
    if size == 0:
        return

    try:
        addr = ctypes.addressof((ctypes.c_char * size).from_buffer(data))
        # Zeros, ones, zeros
        ctypes.memset(addr, 0, size)
        ctypes.memset(addr, 0xFF, size)
        ctypes.memset(addr, 0, size)
    except (TypeError, ValueError, BufferError):
        # Non-contiguous or otherwise unmappable views
        if not isinstance(data, memoryview):
            data[:] = bytes(len(data))
        elif data.c_contiguous:
            view = data.cast("B")
            view[:] = bytes(len(view))
        elif data.ndim == 1:
            data[:] = memoryview(bytes(data.nbytes)).cast(data.format)
        else:
            raise TypeError("cannot zero a multi-dimensional non-contiguous buffer")


@contextmanager
def ZeroizeContext(*buffers: Zeroizable) -> Iterator[None]:
    """
    Context manager that zeroizes buffers on exit.

    Always zeroizes, whether exit is normal or exceptional.

    Usage:
        secret = bytearray(64)

        with ZeroizeContext(secret):
            derive_into(secret)
            use(secret)
        # secret is now zeroed
    """
    try:
        yield
    finally:
        for buf in buffers:
            secure_zero(buf)
