import pytest
from hypothesis import given, strategies as st

from bessie import (
    CHUNK_SIZE,
    CIPHERTEXT_CHUNK_SIZE,
    KEY_SIZE,
    NONCE_SIZE,
    TAG_SIZE,
    InvalidLength,
    ciphertext_size,
    plaintext_size,
)
from bessie.core.crypto.sizes import chunk_count


def test_constants():
    assert KEY_SIZE == 32
    assert TAG_SIZE == 32
    assert NONCE_SIZE == 24
    assert CHUNK_SIZE == 16384
    assert CIPHERTEXT_CHUNK_SIZE == 16416


def test_empty_plaintext_has_one_chunk():
    assert chunk_count(0) == 1
    assert ciphertext_size(0) == 56
    assert plaintext_size(56) == 0


@pytest.mark.parametrize(
    "plaintext_len, chunks",
    [
        (1, 1),
        (CHUNK_SIZE - 1, 1),
        (CHUNK_SIZE, 1),
        (CHUNK_SIZE + 1, 2),
        (2 * CHUNK_SIZE, 2),
        (2 * CHUNK_SIZE + 1, 3),
        (50000, 4),
    ],
)
def test_chunk_boundaries(plaintext_len, chunks):
    assert chunk_count(plaintext_len) == chunks
    assert ciphertext_size(plaintext_len) == NONCE_SIZE + plaintext_len + chunks * TAG_SIZE


def test_negative_plaintext_length_rejected():
    with pytest.raises(InvalidLength):
        ciphertext_size(-1)
    with pytest.raises(InvalidLength):
        chunk_count(-CHUNK_SIZE)


@pytest.mark.parametrize("ciphertext_len", [-1, 0, NONCE_SIZE, NONCE_SIZE + TAG_SIZE - 1])
def test_short_ciphertext_rejected(ciphertext_len):
    with pytest.raises(InvalidLength):
        plaintext_size(ciphertext_len)


@pytest.mark.parametrize(
    "ciphertext_len",
    [
        # trailing segment too short to hold a tag
        NONCE_SIZE + CIPHERTEXT_CHUNK_SIZE + 1,
        NONCE_SIZE + CIPHERTEXT_CHUNK_SIZE + TAG_SIZE - 1,
        # trailing chunk that holds only a tag after a full chunk
        NONCE_SIZE + CIPHERTEXT_CHUNK_SIZE + TAG_SIZE,
    ],
)
def test_ciphertext_length_outside_image_rejected(ciphertext_len):
    with pytest.raises(InvalidLength):
        plaintext_size(ciphertext_len)


@given(st.integers(min_value=0, max_value=2**40))
def test_plaintext_size_inverts_ciphertext_size(n):
    assert plaintext_size(ciphertext_size(n)) == n


@given(st.integers(min_value=NONCE_SIZE + TAG_SIZE, max_value=2**32))
def test_every_accepted_ciphertext_length_is_canonical(m):
    try:
        n = plaintext_size(m)
    except InvalidLength:
        return
    assert ciphertext_size(n) == m
