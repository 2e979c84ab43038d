from __future__ import annotations

import dataclasses
import re
from typing import ClassVar


@dataclasses.dataclass
class LdapSha1Info:
    hash: str

    PREFIX: ClassVar[str] = "{SHA}"
    REGEX: ClassVar[re.Pattern[str]] = re.compile(
        r"^\{SHA\}(?P<hash>[A-Za-z0-9+/]{27}=)$"
    )

    def as_str(self) -> str:
        return f"{self.PREFIX}{self.hash}"


def inspect_ldap_sha1(hash: str) -> LdapSha1Info | None:
    match = LdapSha1Info.REGEX.fullmatch(hash)
    if match is None:
        return None
    return LdapSha1Info(hash=match.group("hash"))
