from __future__ import annotations

import dataclasses
import re
from typing import ClassVar


@dataclasses.dataclass
class AprMd5CryptInfo:
    salt: str
    hash: str

    PREFIX: ClassVar[str] = "$apr1$"
    REGEX: ClassVar[re.Pattern[str]] = re.compile(
        r"^\$apr1\$(?P<salt>[./0-9A-Za-z]{0,8})\$(?P<hash>[./0-9A-Za-z]{22})$"
    )

    def as_str(self) -> str:
        return f"{self.PREFIX}{self.salt}${self.hash}"


def inspect_apr_md5_crypt(hash: str) -> AprMd5CryptInfo | None:
    match = AprMd5CryptInfo.REGEX.fullmatch(hash)
    if match is None:
        return None
    return AprMd5CryptInfo(salt=match.group("salt"), hash=match.group("hash"))
