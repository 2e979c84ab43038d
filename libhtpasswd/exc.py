"""libhtpasswd.exc - exceptions & warnings raised by libhtpasswd"""

__all__ = [
    "HtpasswdError",
    "InvalidUsernameError",
    "UnknownSchemeError",
    "MalformedFileError",
    "PasswordFileNotFoundError",
    "UserNotFoundError",
    "HtpasswdWarning",
    "CryptTruncationWarning",
]


class HtpasswdError(Exception):
    """base class for all errors raised by libhtpasswd"""


class InvalidUsernameError(HtpasswdError, ValueError):
    """
    Error raised when a username can't be stored in an htpasswd file:
    it is empty, longer than 256 bytes, or contains ``:`` or a line break.
    """


class UnknownSchemeError(HtpasswdError, ValueError):
    """Error raised when an encryption type other than crypt, apr_md5 or sha1 is requested"""

    def __init__(self, scheme: object = None) -> None:
        self.scheme = scheme
        super().__init__("Invalid encryption type")


class MalformedFileError(HtpasswdError, ValueError):
    """Error raised when a line of the htpasswd file can't be parsed"""

    def __init__(self, lineno: int) -> None:
        self.lineno = lineno
        super().__init__(f"malformed htpasswd file (error reading line {lineno})")


class PasswordFileNotFoundError(HtpasswdError, FileNotFoundError):
    """Error raised when the htpasswd file doesn't exist"""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__("Password file could not be found")


class UserNotFoundError(HtpasswdError, LookupError):
    """Error raised when deleting a user that isn't in the file"""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__("User not found")


class HtpasswdWarning(UserWarning):
    """base class for all warnings issued by libhtpasswd"""


class CryptTruncationWarning(HtpasswdWarning):
    """
    Warning issued when a password longer than 8 bytes is hashed with
    the crypt scheme, which silently ignores everything past the 8th byte.
    """
