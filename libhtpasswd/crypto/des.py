"""
libhtpasswd.crypto.des - pure-python DES, tailored for des-crypt.

This implements the DES block cipher the way the historic unix ``crypt(3)``
drives it: the key is built from the low 7 bits of each password byte, the
E-box expansion is perturbed by a 12-bit salt, and an all-zero block is
encrypted 25 times in a row.

Everything operates on lists of bits (msb first), mirroring the tables as
they are printed in FIPS 46. It's slow, but des-crypt only needs one key
schedule and 400 rounds per hash.
"""

from __future__ import annotations

__all__ = [
    "des_crypt_block",
]

# initial permutation
_IP = (
    58, 50, 42, 34, 26, 18, 10, 2,
    60, 52, 44, 36, 28, 20, 12, 4,
    62, 54, 46, 38, 30, 22, 14, 6,
    64, 56, 48, 40, 32, 24, 16, 8,
    57, 49, 41, 33, 25, 17, 9, 1,
    59, 51, 43, 35, 27, 19, 11, 3,
    61, 53, 45, 37, 29, 21, 13, 5,
    63, 55, 47, 39, 31, 23, 15, 7,
)  # fmt: skip

# final permutation (inverse of _IP)
_FP = (
    40, 8, 48, 16, 56, 24, 64, 32,
    39, 7, 47, 15, 55, 23, 63, 31,
    38, 6, 46, 14, 54, 22, 62, 30,
    37, 5, 45, 13, 53, 21, 61, 29,
    36, 4, 44, 12, 52, 20, 60, 28,
    35, 3, 43, 11, 51, 19, 59, 27,
    34, 2, 42, 10, 50, 18, 58, 26,
    33, 1, 41, 9, 49, 17, 57, 25,
)  # fmt: skip

# permuted choice 1, split into the C & D halves
_PC1_C = (
    57, 49, 41, 33, 25, 17, 9,
    1, 58, 50, 42, 34, 26, 18,
    10, 2, 59, 51, 43, 35, 27,
    19, 11, 3, 60, 52, 44, 36,
)  # fmt: skip
_PC1_D = (
    63, 55, 47, 39, 31, 23, 15,
    7, 62, 54, 46, 38, 30, 22,
    14, 6, 61, 53, 45, 37, 29,
    21, 13, 5, 28, 20, 12, 4,
)  # fmt: skip

# left rotations applied to C & D before each round
_SHIFTS = (1, 1, 2, 2, 2, 2, 2, 2, 1, 2, 2, 2, 2, 2, 2, 1)

# permuted choice 2; _PC2_D is numbered relative to the full 56 bit C+D register
_PC2_C = (
    14, 17, 11, 24, 1, 5,
    3, 28, 15, 6, 21, 10,
    23, 19, 12, 4, 26, 8,
    16, 7, 27, 20, 13, 2,
)  # fmt: skip
_PC2_D = (
    41, 52, 31, 37, 47, 55,
    30, 40, 51, 45, 33, 48,
    44, 49, 39, 56, 34, 53,
    46, 42, 50, 36, 29, 32,
)  # fmt: skip

# E-box expansion of the 32 bit R half to 48 bits
_E = (
    32, 1, 2, 3, 4, 5,
    4, 5, 6, 7, 8, 9,
    8, 9, 10, 11, 12, 13,
    12, 13, 14, 15, 16, 17,
    16, 17, 18, 19, 20, 21,
    20, 21, 22, 23, 24, 25,
    24, 25, 26, 27, 28, 29,
    28, 29, 30, 31, 32, 1,
)  # fmt: skip

# S-boxes, each stored row-major as 4 rows of 16 columns
_SBOXES = (
    (
        14, 4, 13, 1, 2, 15, 11, 8, 3, 10, 6, 12, 5, 9, 0, 7,
        0, 15, 7, 4, 14, 2, 13, 1, 10, 6, 12, 11, 9, 5, 3, 8,
        4, 1, 14, 8, 13, 6, 2, 11, 15, 12, 9, 7, 3, 10, 5, 0,
        15, 12, 8, 2, 4, 9, 1, 7, 5, 11, 3, 14, 10, 0, 6, 13,
    ),
    (
        15, 1, 8, 14, 6, 11, 3, 4, 9, 7, 2, 13, 12, 0, 5, 10,
        3, 13, 4, 7, 15, 2, 8, 14, 12, 0, 1, 10, 6, 9, 11, 5,
        0, 14, 7, 11, 10, 4, 13, 1, 5, 8, 12, 6, 9, 3, 2, 15,
        13, 8, 10, 1, 3, 15, 4, 2, 11, 6, 7, 12, 0, 5, 14, 9,
    ),
    (
        10, 0, 9, 14, 6, 3, 15, 5, 1, 13, 12, 7, 11, 4, 2, 8,
        13, 7, 0, 9, 3, 4, 6, 10, 2, 8, 5, 14, 12, 11, 15, 1,
        13, 6, 4, 9, 8, 15, 3, 0, 11, 1, 2, 12, 5, 10, 14, 7,
        1, 10, 13, 0, 6, 9, 8, 7, 4, 15, 14, 3, 11, 5, 2, 12,
    ),
    (
        7, 13, 14, 3, 0, 6, 9, 10, 1, 2, 8, 5, 11, 12, 4, 15,
        13, 8, 11, 5, 6, 15, 0, 3, 4, 7, 2, 12, 1, 10, 14, 9,
        10, 6, 9, 0, 12, 11, 7, 13, 15, 1, 3, 14, 5, 2, 8, 4,
        3, 15, 0, 6, 10, 1, 13, 8, 9, 4, 5, 11, 12, 7, 2, 14,
    ),
    (
        2, 12, 4, 1, 7, 10, 11, 6, 8, 5, 3, 15, 13, 0, 14, 9,
        14, 11, 2, 12, 4, 7, 13, 1, 5, 0, 15, 10, 3, 9, 8, 6,
        4, 2, 1, 11, 10, 13, 7, 8, 15, 9, 12, 5, 6, 3, 0, 14,
        11, 8, 12, 7, 1, 14, 2, 13, 6, 15, 0, 9, 10, 4, 5, 3,
    ),
    (
        12, 1, 10, 15, 9, 2, 6, 8, 0, 13, 3, 4, 14, 7, 5, 11,
        10, 15, 4, 2, 7, 12, 9, 5, 6, 1, 13, 14, 0, 11, 3, 8,
        9, 14, 15, 5, 2, 8, 12, 3, 7, 0, 4, 10, 1, 13, 11, 6,
        4, 3, 2, 12, 9, 5, 15, 10, 11, 14, 1, 7, 6, 0, 8, 13,
    ),
    (
        4, 11, 2, 14, 15, 0, 8, 13, 3, 12, 9, 7, 5, 10, 6, 1,
        13, 0, 11, 7, 4, 9, 1, 10, 14, 3, 5, 12, 2, 15, 8, 6,
        1, 4, 11, 13, 12, 3, 7, 14, 10, 15, 6, 8, 0, 5, 9, 2,
        6, 11, 13, 8, 1, 4, 10, 7, 9, 5, 0, 15, 14, 2, 3, 12,
    ),
    (
        13, 2, 8, 4, 6, 15, 11, 1, 10, 9, 3, 14, 5, 0, 12, 7,
        1, 15, 13, 8, 10, 3, 7, 4, 12, 5, 6, 11, 0, 14, 9, 2,
        7, 11, 4, 1, 9, 12, 14, 2, 0, 6, 10, 13, 15, 3, 5, 8,
        2, 1, 14, 7, 4, 10, 8, 13, 15, 12, 9, 0, 3, 5, 6, 11,
    ),
)  # fmt: skip

# P-box permutation applied to the S-box output
_P = (
    16, 7, 20, 21,
    29, 12, 28, 17,
    1, 15, 23, 26,
    5, 18, 31, 10,
    2, 8, 24, 14,
    32, 27, 3, 9,
    19, 13, 30, 6,
    22, 11, 4, 25,
)  # fmt: skip


def _permute(bits: list[int], table: tuple[int, ...]) -> list[int]:
    return [bits[pos - 1] for pos in table]


def _key_bits(secret: bytes) -> list[int]:
    """
    build the 64 bit DES key from the first 8 bytes of the password:
    each byte contributes its low 7 bits, the 8th (parity) bit is left clear.
    """
    bits = []
    for c in secret[:8].ljust(8, b"\x00"):
        bits.extend((c >> shift) & 1 for shift in range(6, -1, -1))
        bits.append(0)
    return bits


def _key_schedule(key: list[int]) -> list[list[int]]:
    """generate the 16 48-bit round keys"""
    c = _permute(key, _PC1_C)
    d = _permute(key, _PC1_D)
    schedule = []
    for shift in _SHIFTS:
        c = c[shift:] + c[:shift]
        d = d[shift:] + d[:shift]
        schedule.append(
            [c[pos - 1] for pos in _PC2_C] + [d[pos - 29] for pos in _PC2_D]
        )
    return schedule


def _salted_expansion(salt: int) -> tuple[int, ...]:
    """
    return copy of the E-box, with entries ``i`` and ``i+24`` swapped
    for every bit ``i`` set in the 12-bit salt.
    """
    table = list(_E)
    for bit in range(12):
        if (salt >> bit) & 1:
            table[bit], table[bit + 24] = table[bit + 24], table[bit]
    return tuple(table)


def _encrypt_block(
    block: list[int], schedule: list[list[int]], expansion: tuple[int, ...]
) -> list[int]:
    """encrypt a single 64-bit block (given as list of bits)"""
    state = _permute(block, _IP)
    left, right = state[:32], state[32:]
    for subkey in schedule:
        pre = [right[pos - 1] ^ k for pos, k in zip(expansion, subkey)]
        f = []
        for idx, sbox in enumerate(_SBOXES):
            b0, b1, b2, b3, b4, b5 = pre[6 * idx : 6 * idx + 6]
            # outer bits select the row, inner four bits the column
            value = sbox[(b0 << 5) | (b5 << 4) | (b1 << 3) | (b2 << 2) | (b3 << 1) | b4]
            f.extend(((value >> 3) & 1, (value >> 2) & 1, (value >> 1) & 1, value & 1))
        left, right = right, [bit ^ f[pos - 1] for bit, pos in zip(left, _P)]
    # halves are swapped once more before the final permutation
    return _permute(right + left, _FP)


def des_crypt_block(secret: bytes, salt: int, rounds: int = 25) -> int:
    """
    encrypt an all-zero block ``rounds`` times, keyed by ``secret``
    and perturbed by the 12-bit ``salt``.

    :arg secret: password bytes; only the first 8 are used.
    :arg salt: salt as 12-bit integer.
    :returns: resulting 64-bit block as integer.
    """
    if salt < 0 or salt > 0xFFF:
        raise ValueError("salt must be a 12-bit integer")
    schedule = _key_schedule(_key_bits(secret))
    expansion = _salted_expansion(salt)
    block = [0] * 64
    for _ in range(rounds):
        block = _encrypt_block(block, schedule, expansion)
    result = 0
    for bit in block:
        result = (result << 1) | bit
    return result
