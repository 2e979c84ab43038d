import secrets

from libhtpasswd._utils.binary import HASH64_CHARS

DEFAULT_CHARS = HASH64_CHARS


def generate_salt(length: int, chars: str = DEFAULT_CHARS) -> str:
    return "".join(secrets.choice(chars) for _ in range(length))
