"""
Secure Memory Buffers
=====================

Fixed-size buffers for short-lived secret material.

Security Properties:
- Explicit zeroization (don't rely on Python GC)
- Memory locking where supported (prevent swapping)
- Automatic cleanup on context exit
- Exception-safe operation

Limitations:
- Python's memory model copies data internally
- Best-effort security, not guaranteed
"""

from __future__ import annotations

import ctypes
import platform
from typing import Final, List, Protocol, TypeVar

from bessie.core.memory.zeroization import secure_zero

IS_WINDOWS: Final[bool] = platform.system() == "Windows"
IS_LINUX: Final[bool] = platform.system() == "Linux"
IS_MACOS: Final[bool] = platform.system() == "Darwin"

MAX_BUFFER_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB


def _libc() -> ctypes.CDLL:
    return ctypes.CDLL("libc.so.6" if IS_LINUX else "libc.dylib", use_errno=True)


def _mlock(address: int, size: int) -> bool:
    """
    Lock memory pages to prevent swapping.

    Returns True if successful, False otherwise.
    """
    try:
        if IS_WINDOWS:
            kernel32 = ctypes.windll.kernel32
            return bool(kernel32.VirtualLock(ctypes.c_void_p(address), ctypes.c_size_t(size)))
        if IS_LINUX or IS_MACOS:
            return _libc().mlock(ctypes.c_void_p(address), ctypes.c_size_t(size)) == 0
    except (OSError, AttributeError):
        pass
    return False


def _munlock(address: int, size: int) -> bool:
    """Unlock memory pages."""
    try:
        if IS_WINDOWS:
            kernel32 = ctypes.windll.kernel32
            return bool(kernel32.VirtualUnlock(ctypes.c_void_p(address), ctypes.c_size_t(size)))
        if IS_LINUX or IS_MACOS:
            return _libc().munlock(ctypes.c_void_p(address), ctypes.c_size_t(size)) == 0
    except (OSError, AttributeError):
        pass
    return False


class SecureBuffer:
    """
    Fixed-size secret buffer with explicit zeroization.

    Features:
    - Explicit zeroization via wipe()
    - Automatic cleanup on context exit
    - Optional memory locking (prevents swapping)
    - Zero-copy sub-views via view()

    Usage:
        with SecureBuffer(64) as secret:
            secret.write(derive(...))
            mac_key = secret.view(0, 32)
            ...
        # Buffer is now zeroed
    """

    __slots__ = ("_buffer", "_size", "_wiped", "_locked", "__weakref__")

    def __init__(self, size: int, lock_memory: bool = True) -> None:
        """
        Initialize a secure buffer.

        Args:
            size: Buffer size in bytes
            lock_memory: Try to lock memory (prevent swapping)
        """
        if size < 0 or size > MAX_BUFFER_SIZE:
            raise ValueError(f"Buffer size must be within 0..{MAX_BUFFER_SIZE}")

        self._size = size
        self._buffer = bytearray(size)
        self._wiped = False
        self._locked = False

        if lock_memory and size:
            self._locked = _mlock(self._address(), size)

    def _address(self) -> int:
        return ctypes.addressof((ctypes.c_char * self._size).from_buffer(self._buffer))

    @property
    def size(self) -> int:
        """Get buffer size."""
        return self._size

    @property
    def is_wiped(self) -> bool:
        """Check if buffer has been wiped."""
        return self._wiped

    @property
    def is_locked(self) -> bool:
        """Check if memory is locked."""
        return self._locked

    def write(self, data: bytes | bytearray | memoryview, offset: int = 0) -> None:
        """
        Copy data into the buffer at offset.

        Raises:
            ValueError: If wiped or if data does not fit
        """
        if self._wiped:
            raise ValueError("Buffer has been wiped")
        end = offset + len(data)
        if offset < 0 or end > self._size:
            raise ValueError(f"Write of {len(data)} bytes at {offset} exceeds buffer size")
        self._buffer[offset:end] = data

    def view(self, start: int = 0, stop: int | None = None) -> memoryview:
        """Return a writable view over part of the buffer without copying."""
        if self._wiped:
            raise ValueError("Buffer has been wiped")
        return memoryview(self._buffer)[start:stop]

    def wipe(self) -> None:
        """Zero the buffer and release any memory lock."""
        if self._wiped:
            return

        secure_zero(self._buffer)

        if self._locked:
            _munlock(self._address(), self._size)
            self._locked = False

        self._wiped = True

    def __enter__(self) -> "SecureBuffer":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - always wipe."""
        self.wipe()

    def __del__(self) -> None:
        try:
            self.wipe()
        except Exception:
            pass

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        """Safe representation."""
        if self._wiped:
            return "SecureBuffer(WIPED)"
        return f"SecureBuffer(size={self._size}, locked={self._locked})"


class Wipeable(Protocol):
    def wipe(self) -> None: ...


W = TypeVar("W", bound=Wipeable)


class MemoryGuard:
    """
    RAII-style guard for secure memory operations.

    Ensures that tracked secrets are wiped even if an exception occurs.
    Anything with a wipe() method can be tracked.

    Usage:
        with MemoryGuard() as guard:
            secret = guard.track(SecureBuffer(64))
            tag = guard.track(SecureBuffer(32))
            # All tracked buffers wiped on exit
    """

    __slots__ = ("_tracked",)

    def __init__(self) -> None:
        self._tracked: List[Wipeable] = []

    def track(self, buffer: W) -> W:
        """
        Track a buffer for automatic cleanup.

        Returns the buffer for convenience.
        """
        self._tracked.append(buffer)
        return buffer

    def wipe_all(self) -> None:
        """Wipe all tracked buffers."""
        for buf in self._tracked:
            buf.wipe()
        self._tracked.clear()

    def __enter__(self) -> "MemoryGuard":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.wipe_all()
