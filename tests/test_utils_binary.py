from __future__ import annotations

import pytest

from libhtpasswd._utils.binary import HASH64_CHARS, Base64Engine, h64, h64big


def test_charmap() -> None:
    assert len(HASH64_CHARS) == len(set(HASH64_CHARS)) == 64
    assert h64.charmap == HASH64_CHARS
    assert not h64.big
    assert h64big.big


@pytest.mark.parametrize("charmap", ["abc", HASH64_CHARS[:-1] + "."])
def test_invalid_charmap(charmap: str) -> None:
    with pytest.raises(ValueError):
        Base64Engine(charmap, big=False)


@pytest.mark.parametrize(
    ("engine", "source", "expected"),
    [
        (h64, b"", b""),
        (h64, b"\x00\x00\x00", b"...."),
        (h64, b"\xff", b"z1"),
        (h64big, b"\xff", b"zk"),
        (h64, b"\xff\xff\xff", b"zzzz"),
    ],
)
def test_encode_bytes(engine: Base64Engine, source: bytes, expected: bytes) -> None:
    assert engine.encode_bytes(source) == expected


def test_encode_transposed_bytes() -> None:
    assert h64.encode_transposed_bytes(b"\x00\xff\x00", (1, 0, 2)) == h64.encode_bytes(
        b"\xff\x00\x00"
    )


@pytest.mark.parametrize(
    ("source", "value"), [(b"..", 0), (b"/.", 1), (b"./", 64), (b"zz", 0xFFF)]
)
def test_decode_int12(source: bytes, value: int) -> None:
    assert h64.decode_int12(source) == value


@pytest.mark.parametrize("source", [b".", b"...", b"!!"])
def test_decode_int12_invalid(source: bytes) -> None:
    with pytest.raises(ValueError):
        h64.decode_int12(source)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0, b"..........."),
        (0xFFFFFFFFFFFFFFFF, b"zzzzzzzzzzw"),
        (1, b"..........2"),
    ],
)
def test_encode_int64_big(value: int, expected: bytes) -> None:
    assert h64big.encode_int64(value) == expected


@pytest.mark.parametrize("value", [-1, 1 << 64])
def test_encode_int64_out_of_range(value: int) -> None:
    with pytest.raises(ValueError):
        h64big.encode_int64(value)
