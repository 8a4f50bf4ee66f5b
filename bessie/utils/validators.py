"""
Validation Utilities
====================

Argument checks run before any cryptographic work.
"""

from __future__ import annotations

from bessie.core.crypto.sizes import KEY_SIZE
from bessie.core.exceptions import InvalidKeyLength, InvalidLength


def as_readable(value: object, field_name: str) -> memoryview:
    """
    Return a flat byte view over a bytes-like input.

    Raises:
        TypeError: If value does not support the buffer protocol or is
            not contiguous
    """
    if isinstance(value, str):
        raise TypeError(f"{field_name} must be bytes-like, not str")
    try:
        view = memoryview(value)  # type: ignore[arg-type]
    except TypeError as e:
        raise TypeError(f"{field_name} must be bytes-like") from e
    if not view.c_contiguous:
        raise TypeError(f"{field_name} must be a contiguous buffer")
    return view.cast("B") if view.format != "B" or view.ndim != 1 else view


def as_writable(value: object, field_name: str) -> memoryview:
    """
    Return a flat writable byte view over an output buffer.

    Raises:
        TypeError: If value is not a writable buffer
    """
    view = as_readable(value, field_name)
    if view.readonly:
        raise TypeError(f"{field_name} must be a writable buffer (e.g. bytearray)")
    return view


def validate_key(key: memoryview) -> None:
    """
    Raises:
        InvalidKeyLength: If the key is not exactly KEY_SIZE bytes
    """
    if len(key) != KEY_SIZE:
        raise InvalidKeyLength(f"key must be {KEY_SIZE} bytes, got {len(key)}")


def validate_exact_length(buffer: memoryview, expected: int, field_name: str) -> None:
    """
    Raises:
        InvalidLength: If the buffer is not exactly `expected` bytes
    """
    if len(buffer) != expected:
        raise InvalidLength(f"{field_name} must be {expected} bytes, got {len(buffer)}")
