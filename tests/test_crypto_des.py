from __future__ import annotations

import pytest

from libhtpasswd.crypto.des import des_crypt_block


def test_salt_changes_result() -> None:
    assert des_crypt_block(b"password", 0) != des_crypt_block(b"password", 1)


def test_high_bit_and_tail_ignored() -> None:
    # only the low 7 bits of the first 8 bytes make up the key
    assert des_crypt_block(b"\xc1bcdefgh", 5) == des_crypt_block(b"Abcdefgh", 5)
    assert des_crypt_block(b"abcdefghij", 5) == des_crypt_block(b"abcdefgh", 5)


def test_result_is_64_bits() -> None:
    assert 0 <= des_crypt_block(b"", 0) < 1 << 64


@pytest.mark.parametrize("salt", [-1, 0x1000])
def test_invalid_salt(salt: int) -> None:
    with pytest.raises(ValueError):
        des_crypt_block(b"password", salt)
