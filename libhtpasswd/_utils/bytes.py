from typing import Union

StrOrBytes = Union[str, bytes]


def as_bytes(value: StrOrBytes, encoding: str = "utf8") -> bytes:
    return value.encode(encoding) if isinstance(value, str) else value


def as_str(value: StrOrBytes, encoding: str = "utf8") -> str:
    return value.decode(encoding) if isinstance(value, bytes) else value
