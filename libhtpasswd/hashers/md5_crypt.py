from __future__ import annotations

import hashlib
import hmac

from libhtpasswd._salt import generate_salt
from libhtpasswd._utils.binary import HASH64_CHARS, h64
from libhtpasswd._utils.bytes import StrOrBytes, as_bytes, as_str
from libhtpasswd.hashers.abc import PasswordHasher
from libhtpasswd.inspect.md5_crypt import AprMd5CryptInfo, inspect_apr_md5_crypt

__all__ = ["AprMd5CryptHasher"]

MAX_SALT_SIZE = 8
ROUNDS = 1000

_APR_MAGIC = b"$apr1$"

# map used to transpose bytes when encoding final md5 digest
_transpose_map = (12, 6, 0, 13, 7, 1, 14, 8, 2, 15, 9, 3, 5, 10, 4, 11)


def _md5_crypt(secret: bytes, salt: bytes, magic: bytes = _APR_MAGIC) -> str:
    """perform raw md5-crypt, returning the 22 char checksum

    this is the algorithm from FreeBSD's ``crypt-md5.c``, which Apache reuses
    unchanged apart from swapping the ``$1$`` magic for ``$apr1$``.
    """
    secret_len = len(secret)

    # digest B - used as filler for digest A
    db = hashlib.md5(secret + salt + secret).digest()

    # digest A - secret, magic, salt, then a length-dependant mix of B
    # and an odd selection of bytes controlled by the bits of secret_len.
    a_ctx = hashlib.md5(secret + magic + salt)
    i = secret_len
    while i > 16:
        a_ctx.update(db)
        i -= 16
    a_ctx.update(db[:i])
    i = secret_len
    while i:
        # NOTE: set bits add a NUL byte, clear bits the first byte of the secret.
        a_ctx.update(b"\x00" if i & 1 else secret[:1])
        i >>= 1
    dc = a_ctx.digest()

    # digest C - 1000 rounds combining the previous digest
    # with secret and salt, as selected by i%2, i%3 and i%7.
    for i in range(ROUNDS):
        c_ctx = hashlib.md5(secret if i & 1 else dc)
        if i % 3:
            c_ctx.update(salt)
        if i % 7:
            c_ctx.update(secret)
        c_ctx.update(dc if i & 1 else secret)
        dc = c_ctx.digest()

    return h64.encode_transposed_bytes(dc, _transpose_map).decode("ascii")


def _validate_salt(salt: str) -> None:
    if len(salt) > MAX_SALT_SIZE:
        raise ValueError(f"apr_md5_crypt salt must be at most {MAX_SALT_SIZE} chars")
    if any(c not in HASH64_CHARS for c in salt):
        raise ValueError(f"invalid characters in apr_md5_crypt salt: {salt!r}")


class AprMd5CryptHasher(PasswordHasher):
    """Apache's variant of md5-crypt (``$apr1$``), the default of ``htpasswd -m``."""

    def hash(self, secret: StrOrBytes, *, salt: StrOrBytes | None = None) -> str:
        salt = as_str(salt) if salt is not None else generate_salt(MAX_SALT_SIZE)
        _validate_salt(salt)
        checksum = _md5_crypt(as_bytes(secret), salt.encode("ascii"))
        return AprMd5CryptInfo(salt=salt, hash=checksum).as_str()

    def verify(self, hash: StrOrBytes, secret: StrOrBytes) -> bool:
        info = inspect_apr_md5_crypt(as_str(hash))
        if info is None:
            return False
        hashed = _md5_crypt(as_bytes(secret), info.salt.encode("ascii"))
        return hmac.compare_digest(info.hash, hashed)

    def identify(self, hash: StrOrBytes) -> bool:
        return inspect_apr_md5_crypt(as_str(hash)) is not None
