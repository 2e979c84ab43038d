"""libhtpasswd.encoder - hash passwords in the formats allowed in an htpasswd file"""

from __future__ import annotations

import enum
import warnings
from typing import TYPE_CHECKING

import typing_extensions

from libhtpasswd import exc
from libhtpasswd._utils.bytes import StrOrBytes, as_bytes
from libhtpasswd.hashers.des_crypt import TRUNCATE_SIZE, DesCryptHasher
from libhtpasswd.hashers.ldap_sha1 import LdapSha1Hasher
from libhtpasswd.hashers.md5_crypt import AprMd5CryptHasher

if TYPE_CHECKING:
    from libhtpasswd.hashers.abc import PasswordHasher

__all__ = [
    "EncodingScheme",
    "encode",
    "identify",
    "verify",
]

CRYPT_TRUNCATION_MESSAGE = (
    "Only the first 8 characters are taken into account "
    "when 'crypt' algorithm is used."
)


class EncodingScheme(str, enum.Enum):
    """password hashing schemes which can be written to an htpasswd file"""

    #: traditional des-crypt, ``htpasswd -d``
    CRYPT = "crypt"
    #: apache md5-crypt, ``htpasswd -m``
    APR_MD5 = "apr_md5"
    #: base64 encoded sha1 digest, ``htpasswd -s``
    SHA1 = "sha1"

    @classmethod
    def parse(cls, value: EncodingScheme | str) -> EncodingScheme:
        """
        Look up scheme by enum member or name.

        :raises libhtpasswd.exc.UnknownSchemeError: if value isn't a known scheme.
        """
        try:
            return cls(value)
        except ValueError:
            raise exc.UnknownSchemeError(value) from None


_des_crypt = DesCryptHasher()
_apr_md5_crypt = AprMd5CryptHasher()
_ldap_sha1 = LdapSha1Hasher()


def _get_hasher(scheme: EncodingScheme) -> PasswordHasher:
    if scheme is EncodingScheme.CRYPT:
        return _des_crypt
    if scheme is EncodingScheme.APR_MD5:
        return _apr_md5_crypt
    if scheme is EncodingScheme.SHA1:
        return _ldap_sha1
    typing_extensions.assert_never(scheme)


def encode(
    plaintext: StrOrBytes,
    scheme: EncodingScheme | str = EncodingScheme.CRYPT,
    salt: StrOrBytes | None = None,
    *,
    stacklevel: int = 1,
) -> str:
    """Hash password using specified scheme.

    :arg plaintext:
        password to hash, unicode strings are encoded as utf-8.

    :arg scheme:
        one of :class:`EncodingScheme` (or its string value).

    :param salt:
        optional salt for ``crypt`` (2 chars) and ``apr_md5`` (up to 8 chars),
        drawn from ``./0-9A-Za-z``. Randomly generated if omitted.
        ``sha1`` is unsalted and rejects this argument.

    :param stacklevel:
        frame the truncation warning is attributed to:
        ``1`` is the caller of this function, ``2`` its caller, and so on.

    :raises libhtpasswd.exc.UnknownSchemeError: if scheme isn't supported.

    :returns: encoded hash string

    A :class:`~libhtpasswd.exc.CryptTruncationWarning` is issued when a password
    longer than 8 bytes is hashed with ``crypt``; the hash is still returned.
    """
    scheme = EncodingScheme.parse(scheme)
    secret = as_bytes(plaintext)
    if scheme is EncodingScheme.CRYPT:
        if len(secret) > TRUNCATE_SIZE:
            warnings.warn(
                CRYPT_TRUNCATION_MESSAGE,
                exc.CryptTruncationWarning,
                stacklevel=stacklevel + 1,
            )
        return _des_crypt.hash(secret, salt=salt)
    if scheme is EncodingScheme.APR_MD5:
        return _apr_md5_crypt.hash(secret, salt=salt)
    if scheme is EncodingScheme.SHA1:
        if salt is not None:
            raise TypeError("the sha1 scheme does not accept a salt")
        return _ldap_sha1.hash(secret)
    typing_extensions.assert_never(scheme)


def identify(encoded: StrOrBytes) -> EncodingScheme | None:
    """Return scheme which produced the encoded hash, or ``None`` if unrecognized"""
    for scheme in EncodingScheme:
        if _get_hasher(scheme).identify(encoded):
            return scheme
    return None


def verify(plaintext: StrOrBytes, encoded: StrOrBytes) -> bool:
    """Check password against encoded hash; unrecognized hashes never match"""
    scheme = identify(encoded)
    if scheme is None:
        return False
    return _get_hasher(scheme).verify(hash=encoded, secret=plaintext)
