import pytest

from bessie.core.crypto.nonce_state import NONCE_STATE_SIZE, NonceState

from tests.conftest import FIXED_NONCE


def test_initial_state_layout():
    state = NonceState(FIXED_NONCE)
    assert len(state) == NONCE_STATE_SIZE == 33
    assert state.to_bytes() == FIXED_NONCE + bytes(9)
    assert state.chunk_index == 0
    assert not state.is_final


def test_sequence_for_three_chunks():
    state = NonceState(FIXED_NONCE)
    seen = []
    for index in range(3):
        state.prepare(index, 3)
        seen.append(state.to_bytes())
        state.advance(index)

    assert seen == [
        FIXED_NONCE + (0).to_bytes(8, "little") + b"\x00",
        FIXED_NONCE + (1).to_bytes(8, "little") + b"\x00",
        FIXED_NONCE + (2).to_bytes(8, "little") + b"\x01",
    ]
    assert state.chunk_index == 3


def test_single_chunk_is_final():
    state = NonceState(FIXED_NONCE)
    state.prepare(0, 1)
    assert state.to_bytes()[-1] == 1


def test_index_is_little_endian():
    state = NonceState.for_chunk(FIXED_NONCE, 0x0102030405060708, False)
    assert state.to_bytes()[24:32] == bytes([8, 7, 6, 5, 4, 3, 2, 1])


def test_for_chunk_matches_sequential_state():
    state = NonceState(FIXED_NONCE)
    for index in range(4):
        state.prepare(index, 4)
        assert state.to_bytes() == NonceState.for_chunk(FIXED_NONCE, index, index == 3).to_bytes()
        state.advance(index)


def test_rejects_wrong_nonce_length():
    with pytest.raises(ValueError):
        NonceState(bytes(23))


def test_rejects_out_of_range_index():
    state = NonceState(FIXED_NONCE)
    with pytest.raises(ValueError):
        state.set_index(2**64)
    with pytest.raises(ValueError):
        state.set_index(-1)
