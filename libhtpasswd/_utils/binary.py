from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterator

#: charmap used by des-crypt, md5-crypt and friends ("hash64")
HASH64_CHARS = "./0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"


class EncodeBytes(Protocol):
    def __call__(
        self, next_value: Callable[[], int], chunks: int, tail: int
    ) -> Iterator[int]: ...


def _encode_bytes_big(
    next_value: Callable[[], int], chunks: int, tail: int
) -> Iterator[int]:
    """helper used by encode_bytes() to handle big-endian encoding"""
    #
    # output bit layout:
    #
    # first byte:   v1 765432
    #
    # second byte:  v1 10....
    #              +v2 ..7654
    #
    # third byte:   v2 3210..
    #              +v3 ....76
    #
    # fourth byte:  v3 543210
    #
    idx = 0
    while idx < chunks:
        v1 = next_value()
        v2 = next_value()
        v3 = next_value()
        yield v1 >> 2
        yield ((v1 & 0x03) << 4) | (v2 >> 4)
        yield ((v2 & 0x0F) << 2) | (v3 >> 6)
        yield v3 & 0x3F
        idx += 1
    if tail:
        v1 = next_value()
        if tail == 1:
            # note: 4 lsb of last byte are padding
            yield v1 >> 2
            yield (v1 & 0x03) << 4
        else:
            assert tail == 2
            # note: 2 lsb of last byte are padding
            v2 = next_value()
            yield v1 >> 2
            yield ((v1 & 0x03) << 4) | (v2 >> 4)
            yield ((v2 & 0x0F) << 2)


def _encode_bytes_little(
    next_value: Callable[[], int], chunks: int, tail: int
) -> Iterator[int]:
    """helper used by encode_bytes() to handle little-endian encoding"""
    #
    # output bit layout:
    #
    # first byte:   v1 543210
    #
    # second byte:  v1 ....76
    #              +v2 3210..
    #
    # third byte:   v2 ..7654
    #              +v3 10....
    #
    # fourth byte:  v3 765432
    #
    idx = 0
    while idx < chunks:
        v1 = next_value()
        v2 = next_value()
        v3 = next_value()
        yield v1 & 0x3F
        yield ((v2 & 0x0F) << 2) | (v1 >> 6)
        yield ((v3 & 0x03) << 4) | (v2 >> 4)
        yield v3 >> 2
        idx += 1
    if tail:
        v1 = next_value()
        if tail == 1:
            # note: 4 msb of last byte are padding
            yield v1 & 0x3F
            yield v1 >> 6
        else:
            assert tail == 2
            # note: 2 msb of last byte are padding
            v2 = next_value()
            yield v1 & 0x3F
            yield ((v2 & 0x0F) << 2) | (v1 >> 6)
            yield v2 >> 4


class Base64Engine:
    """Encodes data using an arbitrary 64-character map, with selectable endianness.

    Unlike :mod:`base64`, no padding characters are ever emitted.
    """

    def __init__(
        self,
        charmap: str,
        big: bool,
    ) -> None:
        if len(charmap) != 64:
            raise ValueError("charmap must be 64 characters in length")
        if len(set(charmap)) != 64:
            raise ValueError("charmap must not contain duplicate characters")

        self._charmap = charmap.encode("latin-1")
        self._lookup = {value: idx for idx, value in enumerate(self._charmap)}
        self._big = big

    @property
    def charmap(self) -> str:
        return self._charmap.decode("latin-1")

    @property
    def big(self) -> bool:
        return self._big

    def _encode64(self, i: int) -> int:
        return self._charmap[i]

    def _decode64(self, c: int) -> int:
        try:
            return self._lookup[c]
        except KeyError:
            raise ValueError(f"invalid character: {chr(c)!r}") from None

    @property
    def _encode_bytes(self) -> EncodeBytes:
        if self._big:
            return _encode_bytes_big
        return _encode_bytes_little

    def encode_bytes(self, source: bytes) -> bytes:
        """encode bytes to base64 string.

        :arg source: byte string to encode.
        :returns: byte string containing encoded data.
        """
        chunks, tail = divmod(len(source), 3)
        next_value = iter(source).__next__
        gen = self._encode_bytes(next_value, chunks, tail)
        return bytes(map(self._encode64, gen))

    def encode_transposed_bytes(self, source: bytes, offsets: tuple[int, ...]) -> bytes:
        """encode byte string, first transposing source using offset list"""
        tmp = bytes(source[off] for off in offsets)
        return self.encode_bytes(tmp)

    # =========================================================================
    # integers <-> encoded bytes
    # =========================================================================

    def _encode_int(self, value: int, count: int) -> bytes:
        """encode integer into ``count`` six-bit characters"""
        if self._big:
            offsets = range(6 * count - 6, -6, -6)
        else:
            offsets = range(0, 6 * count, 6)
        return bytes(self._encode64((value >> off) & 0x3F) for off in offsets)

    def _decode_int(self, source: bytes, bits: int) -> int:
        """decode base64 string into integer of ``bits`` size"""
        if len(source) * 6 != bits:
            raise ValueError(f"source must be {bits // 6} chars")
        if not self._big:
            source = source[::-1]
        value = 0
        for c in source:
            value = (value << 6) | self._decode64(c)
        return value

    def decode_int12(self, source: bytes) -> int:
        """decodes 2 char string -> 12-bit integer"""
        return self._decode_int(source, 12)

    def encode_int64(self, value: int) -> bytes:
        """encode 64-bit integer -> 11 char hash64 string

        this format is used primarily by des-crypt & variants to encode
        the DES output value used as a checksum.
        """
        if value < 0 or value > 0xFFFFFFFFFFFFFFFF:
            raise ValueError("value out of range")
        if self._big:
            # pad the 64 bits out to 66, so the last char carries the 2 lsb
            value <<= 2
        return self._encode_int(value, 11)


h64 = Base64Engine(HASH64_CHARS, big=False)
h64big = Base64Engine(HASH64_CHARS, big=True)
