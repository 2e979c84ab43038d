from __future__ import annotations

import base64
import hashlib
import hmac

from libhtpasswd._utils.bytes import StrOrBytes, as_bytes, as_str
from libhtpasswd.hashers.abc import PasswordHasher
from libhtpasswd.inspect.ldap import LdapSha1Info, inspect_ldap_sha1

__all__ = ["LdapSha1Hasher"]


def _sha1_digest(secret: bytes) -> str:
    return base64.b64encode(hashlib.sha1(secret).digest()).decode("ascii")


class LdapSha1Hasher(PasswordHasher):
    """
    Unsalted SHA-1, in the ``{SHA}<base64 digest>`` format shared by LDAP
    and Apache's ``htpasswd -s``.
    """

    def hash(self, secret: StrOrBytes) -> str:
        return LdapSha1Info(hash=_sha1_digest(as_bytes(secret))).as_str()

    def verify(self, hash: StrOrBytes, secret: StrOrBytes) -> bool:
        info = inspect_ldap_sha1(as_str(hash))
        if info is None:
            return False
        return hmac.compare_digest(info.hash, _sha1_digest(as_bytes(secret)))

    def identify(self, hash: StrOrBytes) -> bool:
        return inspect_ldap_sha1(as_str(hash)) is not None
