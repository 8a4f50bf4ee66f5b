import pytest

from bessie.core.memory import MemoryGuard, SecureBuffer, ZeroizeContext, secure_zero


def test_secure_zero_bytearray():
    buf = bytearray(b"secret material")
    secure_zero(buf)
    assert buf == bytes(len(buf))


def test_secure_zero_memoryview_slice_only():
    backing = bytearray(b"A" * 16)
    secure_zero(memoryview(backing)[4:8])
    assert backing == b"AAAA" + bytes(4) + b"A" * 8


def test_secure_zero_strided_view():
    backing = bytearray(b"A" * 8)
    secure_zero(memoryview(backing)[::2])
    assert backing == b"\x00A\x00A\x00A\x00A"


def test_secure_zero_empty_buffer():
    secure_zero(bytearray())


def test_secure_zero_rejects_read_only_view():
    with pytest.raises(TypeError):
        secure_zero(memoryview(b"immutable"))


def test_zeroize_context_clears_on_error():
    buf = bytearray(b"k" * 32)
    with pytest.raises(RuntimeError):
        with ZeroizeContext(buf):
            raise RuntimeError("boom")
    assert buf == bytes(32)


def test_secure_buffer_lifecycle():
    with SecureBuffer(8, lock_memory=False) as buf:
        buf.write(b"\x01\x02", offset=6)
        assert bytes(buf.view()) == bytes(6) + b"\x01\x02"
        assert len(buf) == 8
    assert buf.is_wiped
    assert repr(buf) == "SecureBuffer(WIPED)"
    with pytest.raises(ValueError):
        buf.view()
    with pytest.raises(ValueError):
        buf.write(b"x")


def test_secure_buffer_view_sees_wipe():
    buf = SecureBuffer(4, lock_memory=False)
    buf.write(b"\xff" * 4)
    view = buf.view()
    buf.wipe()
    assert bytes(view) == bytes(4)


def test_secure_buffer_write_bounds():
    buf = SecureBuffer(4, lock_memory=False)
    with pytest.raises(ValueError):
        buf.write(b"12345")
    with pytest.raises(ValueError):
        buf.write(b"1", offset=-1)


def test_secure_buffer_with_memory_lock():
    # Locking may be refused (RLIMIT_MEMLOCK); either way wipe must succeed.
    buf = SecureBuffer(64)
    buf.write(b"z" * 64)
    buf.wipe()
    assert not buf.is_locked


def test_memory_guard_wipes_everything():
    with MemoryGuard() as guard:
        a = guard.track(SecureBuffer(16, lock_memory=False))
        b = guard.track(SecureBuffer(32, lock_memory=False))
        a.write(b"a" * 16)
        b.write(b"b" * 32)
    assert a.is_wiped and b.is_wiped
