from __future__ import annotations

import dataclasses
import re
from typing import ClassVar


@dataclasses.dataclass
class DesCryptInfo:
    salt: str
    hash: str

    REGEX: ClassVar[re.Pattern[str]] = re.compile(
        r"^(?P<salt>[./0-9A-Za-z]{2})(?P<hash>[./0-9A-Za-z]{11})$"
    )

    def as_str(self) -> str:
        return f"{self.salt}{self.hash}"


def inspect_des_crypt(hash: str) -> DesCryptInfo | None:
    match = DesCryptInfo.REGEX.fullmatch(hash)
    if match is None:
        return None
    return DesCryptInfo(salt=match.group("salt"), hash=match.group("hash"))
