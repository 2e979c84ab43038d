from __future__ import annotations

import hmac

from libhtpasswd._salt import generate_salt
from libhtpasswd._utils.binary import h64, h64big
from libhtpasswd._utils.bytes import StrOrBytes, as_bytes, as_str
from libhtpasswd.crypto.des import des_crypt_block
from libhtpasswd.hashers.abc import PasswordHasher
from libhtpasswd.inspect.des_crypt import DesCryptInfo, inspect_des_crypt

__all__ = ["DesCryptHasher"]

SALT_SIZE = 2
#: number of password bytes des-crypt looks at, the rest is ignored.
TRUNCATE_SIZE = 8


def _des_crypt(secret: bytes, salt: str) -> str:
    """perform raw des-crypt, returning the 11 char checksum"""
    if b"\x00" in secret:
        raise ValueError("des_crypt does not allow NUL bytes in password")
    try:
        salt_value = h64.decode_int12(salt.encode("ascii"))
    except (UnicodeEncodeError, ValueError):
        raise ValueError(f"invalid des_crypt salt: {salt!r}") from None
    result = des_crypt_block(secret, salt_value)
    return h64big.encode_int64(result).decode("ascii")


class DesCryptHasher(PasswordHasher):
    """
    Traditional unix ``crypt(3)``: 12-bit salt, 25 rounds of DES,
    only the first 8 bytes of the password are significant.
    """

    def hash(self, secret: StrOrBytes, *, salt: StrOrBytes | None = None) -> str:
        salt = as_str(salt) if salt is not None else generate_salt(SALT_SIZE)
        if len(salt) != SALT_SIZE:
            raise ValueError(f"des_crypt salt must be {SALT_SIZE} chars")
        checksum = _des_crypt(as_bytes(secret), salt)
        return DesCryptInfo(salt=salt, hash=checksum).as_str()

    def verify(self, hash: StrOrBytes, secret: StrOrBytes) -> bool:
        info = inspect_des_crypt(as_str(hash))
        if info is None:
            return False
        hashed = _des_crypt(as_bytes(secret), info.salt)
        return hmac.compare_digest(info.hash, hashed)

    def identify(self, hash: StrOrBytes) -> bool:
        return inspect_des_crypt(as_str(hash)) is not None
