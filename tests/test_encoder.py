from __future__ import annotations

import re
import sys

import pytest

from libhtpasswd import encoder, exc
from libhtpasswd.encoder import CRYPT_TRUNCATION_MESSAGE, EncodingScheme
from tests.utils_ import no_warnings


@pytest.mark.parametrize(
    ("scheme", "salt", "expected"),
    [
        (EncodingScheme.CRYPT, "CC", "CCNf8Sbh3HDfQ"),
        ("crypt", "CC", "CCNf8Sbh3HDfQ"),
        (EncodingScheme.APR_MD5, "r31.....", "$apr1$r31.....$HqJZimcKQFAMYayBlzkrA/"),
    ],
)
def test_encode_with_salt(scheme, salt: str, expected: str) -> None:
    secret = "myPassword" if expected.startswith("$apr1$") else "U*U*U*U*"
    assert encoder.encode(secret, scheme, salt=salt) == expected


def test_encode_sha1() -> None:
    assert (
        encoder.encode("password", EncodingScheme.SHA1)
        == "{SHA}W6ph5Mm5Pz8GgiULbPgzG37mj9g="
    )


def test_encode_sha1_rejects_salt() -> None:
    with pytest.raises(TypeError):
        encoder.encode("password", EncodingScheme.SHA1, salt="ab")


def test_default_scheme_is_crypt() -> None:
    hash = encoder.encode("password")
    assert encoder.identify(hash) is EncodingScheme.CRYPT


@pytest.mark.parametrize("scheme", list(EncodingScheme))
def test_encode_random_salt(scheme: EncodingScheme) -> None:
    first = encoder.encode("password", scheme)
    assert encoder.identify(first) is scheme
    assert encoder.verify("password", first)
    assert not encoder.verify("wrong", first)


def test_random_salts_differ() -> None:
    hashes = {encoder.encode("password", EncodingScheme.APR_MD5) for _ in range(5)}
    assert len(hashes) == 5


@pytest.mark.parametrize("scheme", ["invalid", "bcrypt", "", "CRYPT"])
def test_unknown_scheme(scheme: str) -> None:
    with pytest.raises(exc.UnknownSchemeError) as exc_info:
        encoder.encode("password", scheme)
    assert str(exc_info.value) == "Invalid encryption type"
    assert exc_info.value.scheme == scheme


def test_parse_scheme() -> None:
    assert EncodingScheme.parse("apr_md5") is EncodingScheme.APR_MD5
    assert EncodingScheme.parse(EncodingScheme.SHA1) is EncodingScheme.SHA1


def test_crypt_truncation_warning() -> None:
    with pytest.warns(
        exc.CryptTruncationWarning, match=re.escape(CRYPT_TRUNCATION_MESSAGE)
    ):
        hash = encoder.encode("1234567812345678", EncodingScheme.CRYPT, salt="ab")
    assert hash == encoder.encode("12345678", EncodingScheme.CRYPT, salt="ab")


def test_crypt_truncation_warning_stacklevel() -> None:
    def wrapper() -> str:
        return encoder.encode("1234567812345678", EncodingScheme.CRYPT, stacklevel=2)

    with pytest.warns(exc.CryptTruncationWarning) as record:
        wrapper()
    assert record[0].lineno == sys._getframe().f_lineno - 1


def test_crypt_truncation_counts_bytes() -> None:
    # 5 chars, but 10 bytes once utf-8 encoded
    with pytest.warns(exc.CryptTruncationWarning):
        encoder.encode("æææææ", EncodingScheme.CRYPT)


@pytest.mark.parametrize("scheme", [EncodingScheme.APR_MD5, EncodingScheme.SHA1])
def test_no_truncation_warning_for_other_schemes(scheme: EncodingScheme) -> None:
    with no_warnings():
        encoder.encode("1234567812345678", scheme)


def test_no_truncation_warning_for_8_bytes() -> None:
    with no_warnings():
        encoder.encode(b"12345678", EncodingScheme.CRYPT)


@pytest.mark.parametrize(
    ("hash", "scheme"),
    [
        ("2CHkkwa2AtqGs", EncodingScheme.CRYPT),
        ("{SHA}3ipNV1GrBtxPmHFC21fCbVCSXIo=", EncodingScheme.SHA1),
        ("$apr1$t4tc7jTh$GPIWVUo8sQKJlUdV8V5vu0", EncodingScheme.APR_MD5),
        ("pass4", None),
        ("$2y$05$bvIG6Nmid91Mu9RcmmWZfO5HJIMCT8riNW0hEp8f6/FuA2/mHZFpe", None),
    ],
)
def test_identify(hash: str, scheme: EncodingScheme | None) -> None:
    assert encoder.identify(hash) is scheme


def test_verify_unknown_format() -> None:
    assert encoder.verify("pass4", "pass4") is False
