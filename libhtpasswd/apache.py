"""Apache htpasswd file support"""

from __future__ import annotations

import contextlib
import os
import stat
import tempfile
import types
from typing import TYPE_CHECKING, Literal, Union

from libhtpasswd import exc
from libhtpasswd._logging import logger
from libhtpasswd._utils.bytes import StrOrBytes, as_bytes
from libhtpasswd._utils.codecs import is_ascii_codec
from libhtpasswd.encoder import EncodingScheme, encode, verify

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping
    from os import PathLike

__all__ = [
    "HtpasswdFile",
]

_BCOLON = b":"
_BHASH = b"#"

#: usernames are limited to this many bytes, once encoded
MAX_USERNAME_SIZE = 256

# bytes that would break the line structure of the file
_INVALID_USERNAME_CHARS = "\r\n\x00"

#: HtpasswdFile._source token types
_SKIPPED: Literal["skipped"] = "skipped"
_RECORD: Literal["record"] = "record"

if TYPE_CHECKING:
    _SourceTypes = Union[
        tuple[Literal["skipped"], bytes],
        tuple[Literal["record"], str],
    ]
else:
    _SourceTypes = None


class HtpasswdFile:
    """class for reading & writing Htpasswd files.

    The class constructor accepts the following arguments:

    :type path: filepath
    :param path:

        Path to the htpasswd file. The file must already exist;
        it is loaded when the object is created, and rewritten in full
        after every successful change.

    :type default_scheme: str
    :param default_scheme:

        Scheme used by :meth:`add_user` and :meth:`update_user` when none
        is passed explicitly. One of ``"crypt"`` (the default), ``"apr_md5"``
        or ``"sha1"``, see :class:`~libhtpasswd.encoder.EncodingScheme`.

    :type encoding: str
    :param encoding:

        Optionally specify character encoding used to read/write file
        and hash passwords. Defaults to ``utf-8``, though ``latin-1``
        is the only other commonly encountered encoding.

    Inspection
    ==========
    .. automethod:: get_users
    .. automethod:: user_exists
    .. automethod:: get_hash
    .. automethod:: check_password

    Modification
    ============
    .. automethod:: add_user
    .. automethod:: update_user
    .. automethod:: delete_user

    Loading & Saving
    ================
    .. automethod:: load
    .. automethod:: load_if_changed
    .. automethod:: to_string

    Errors
    ======
    :raises ValueError:
        if *path* is empty.

    :raises libhtpasswd.exc.PasswordFileNotFoundError:
        if *path* doesn't exist.

    :raises libhtpasswd.exc.MalformedFileError:
        if a line of the file isn't a ``user:hash`` record,
        a comment, or whitespace.

    :raises libhtpasswd.exc.InvalidUsernameError:
        if a username passed to :meth:`update_user` is empty, longer than
        256 bytes, or contains ``:`` or a line break.

    .. note::

        Blank lines and ``#`` comments are kept in place when the file is
        rewritten. If a username occurs more than once, the last entry wins,
        and only its first position is kept.
    """

    def __init__(
        self,
        path: str | PathLike[str],
        default_scheme: EncodingScheme | str = EncodingScheme.CRYPT,
        encoding: str = "utf-8",
    ) -> None:
        if path is None or not os.fspath(path):
            raise ValueError("password file path is required")

        if not encoding:
            raise TypeError("'encoding' is required")
        if not is_ascii_codec(encoding):
            # htpasswd files assumes 1-byte chars, and use ":" separator,
            # so only ascii-compatible encodings are allowed.
            raise ValueError("encoding must be 7-bit ascii compatible")

        self._path = path
        self._encoding = encoding
        self._default_scheme = EncodingScheme.parse(default_scheme)
        self._mtime: float = 0  # mtime when last loaded / saved

        # dict mapping user -> hash for all records in the file.
        self._records: dict[str, str] = {}
        #: list of tokens for recreating original file contents when saving.
        #: sequence of (_SKIPPED, b"whitespace/comments") and (_RECORD, <user>) tuples.
        self._source: list[_SourceTypes] = []

        self.load()

    def __repr__(self) -> str:
        tail = f" path={self._path!r}"
        if self._encoding != "utf-8":
            tail += f" encoding={self._encoding!r}"
        return f"<{self.__class__.__name__} 0x{id(self):0x}{tail}>"

    @property
    def path(self) -> str | PathLike[str]:
        return self._path

    @property
    def encoding(self) -> str:
        return self._encoding

    @property
    def default_scheme(self) -> EncodingScheme:
        return self._default_scheme

    @property
    def mtime(self) -> float:
        """modify time when last loaded or saved"""
        return self._mtime

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, username: object) -> bool:
        return username in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    # =========================================================================
    # loading
    # =========================================================================

    def load(self) -> None:
        """Load state from ``self.path``, discarding any in-memory state."""
        try:
            with open(self._path, "rb") as fh:
                mtime = os.fstat(fh.fileno()).st_mtime
                self._load_lines(fh)
        except FileNotFoundError as err:
            raise exc.PasswordFileNotFoundError(os.fspath(self._path)) from err
        self._mtime = mtime
        logger.debug("loaded %d users from %r", len(self._records), self._path)

    def load_if_changed(self) -> bool:
        """Reload from ``self.path`` only if file has changed since last load"""
        try:
            mtime = os.path.getmtime(self._path)
        except FileNotFoundError as err:
            raise exc.PasswordFileNotFoundError(os.fspath(self._path)) from err
        if self._mtime and self._mtime == mtime:
            return False
        self.load()
        return True

    def _load_lines(self, lines: Iterable[bytes]) -> None:
        """load from sequence of lines"""
        records: dict[str, str] = {}
        source: list[_SourceTypes] = []
        skipped = b""
        for idx, line in enumerate(lines):
            # NOTE: per htpasswd source (https://github.com/apache/httpd/blob/trunk/support/htpasswd.c),
            #       lines with only whitespace, or with "#" as first non-whitespace char,
            #       are left alone / ignored.
            tmp = line.lstrip()
            if not tmp or tmp.startswith(_BHASH):
                skipped += line
                continue

            # parse valid line
            user, hash = self._parse_record(line, idx + 1)

            # NOTE: if multiple entries for a user, the last one wins,
            #       but the user keeps the position of their first entry.
            if user in records:
                logger.warning(
                    "username occurs multiple times in source file: %r",
                    user,
                )
                records[user] = hash
                continue

            # flush buffer of skipped whitespace lines
            if skipped:
                source.append((_SKIPPED, skipped))
                skipped = b""

            # store new user line
            records[user] = hash
            source.append((_RECORD, user))

        # don't bother preserving trailing whitespace, but do preserve trailing comments
        if skipped.rstrip():
            source.append((_SKIPPED, skipped))

        # NOTE: not replacing ._records until parsing succeeds, so loading is atomic.
        self._records = records
        self._source = source

    def _parse_record(self, record: bytes, lineno: int) -> tuple[str, str]:
        """parse line of file into (user, hash) pair"""
        user, sep, hash = record.rstrip().partition(_BCOLON)
        if not sep:
            raise exc.MalformedFileError(lineno)
        return user.decode(self._encoding), hash.decode(self._encoding)

    # =========================================================================
    # saving
    # =========================================================================

    def to_string(self) -> bytes:
        """Export current state as a string of bytes"""
        return b"".join(self._iter_lines(self._records, self._source))

    def _iter_lines(
        self, records: Mapping[str, str], source: list[_SourceTypes]
    ) -> Iterator[bytes]:
        """iterator yielding lines of database"""
        # NOTE: this relies on dicts preserving insertion order,
        #       so that records are written in a deterministic order.
        if __debug__:
            pending = set(records)
        for action, content in source:
            if action == _SKIPPED:
                # 'content' is whitespace/comments to write
                yield content
            else:
                assert action == _RECORD
                # 'content' is username
                yield self._render_record(content, records[content])
                if __debug__:
                    pending.remove(content)
        if __debug__:
            # sanity check that we actually wrote all the records
            # (otherwise _source & _records are somehow out of sync)
            assert not pending, f"failed to write all records: missing={pending!r}"

    def _render_record(self, user: str, hash: str) -> bytes:
        return f"{user}:{hash}\n".encode(self._encoding)

    def _commit(self, records: dict[str, str], source: list[_SourceTypes]) -> None:
        """
        write new state to ``self.path``, and only then make it the in-memory state.

        the file is replaced atomically: a failed write leaves both
        the old file and the in-memory state untouched.
        """
        data = b"".join(self._iter_lines(records, source))
        # replace the file a symlink points to, not the symlink itself
        path = os.path.realpath(os.fspath(self._path))
        fd, tmp_path = tempfile.mkstemp(
            prefix=".htpasswd-", dir=os.path.dirname(os.path.abspath(path))
        )
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            # mkstemp creates files as 0600, keep the original file's permissions
            with contextlib.suppress(FileNotFoundError):
                os.chmod(tmp_path, stat.S_IMODE(os.stat(path).st_mode))
            os.replace(tmp_path, path)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_path)
            raise
        self._records = records
        self._source = source
        self._mtime = os.path.getmtime(path)
        logger.debug("saved %d users to %r", len(records), self._path)

    # =========================================================================
    # inspection
    # =========================================================================

    def get_users(self) -> Mapping[str, str]:
        """Return read-only snapshot mapping each username to its encoded hash, in file order"""
        return types.MappingProxyType(dict(self._records))

    def user_exists(self, username: str) -> bool:
        """Check whether there's an entry for the user"""
        return username in self._records

    def get_hash(self, username: str) -> str | None:
        """Return hash stored for user, or ``None`` if user not found."""
        return self._records.get(username)

    def check_password(self, username: str, password: StrOrBytes) -> bool | None:
        """
        Verify password for specified user.

        :returns:
            * ``None`` if user not found.
            * ``False`` if user found, but password does not match
              (or the stored hash is in a format libhtpasswd doesn't support).
            * ``True`` if user found and password matches.
        """
        hash = self._records.get(username)
        if hash is None:
            return None
        return verify(as_bytes(password, self._encoding), hash)

    # =========================================================================
    # modification
    # =========================================================================

    def _validate_username(self, username: str) -> None:
        if ":" in username:
            raise exc.InvalidUsernameError(
                "Invalid username. Username cannot contain colon (:) character"
            )
        if len(username.encode(self._encoding)) > MAX_USERNAME_SIZE:
            raise exc.InvalidUsernameError(
                f"Usernames cannot be longer than {MAX_USERNAME_SIZE} bytes"
            )
        if not username:
            raise exc.InvalidUsernameError("Invalid username. Username cannot be empty")
        if any(c in _INVALID_USERNAME_CHARS for c in username):
            raise exc.InvalidUsernameError(
                "Invalid username. Username cannot contain line breaks or NUL characters"
            )
        # such lines are read back as comments
        if username.lstrip().startswith("#"):
            raise exc.InvalidUsernameError(
                "Invalid username. Username cannot start with hash (#) character"
            )

    def add_user(
        self,
        username: str,
        password: StrOrBytes,
        scheme: EncodingScheme | str | None = None,
    ) -> bool:
        """Add new user, never touching an existing one.

        :returns:
            * ``True`` if the user was added.
            * ``False`` if the user already exists (nothing is written).
        """
        if self.user_exists(username):
            return False
        return self.update_user(username, password, scheme)

    def update_user(
        self,
        username: str,
        password: StrOrBytes,
        scheme: EncodingScheme | str | None = None,
    ) -> bool:
        """Set password for user; adds user if needed, and saves the file.

        New users are appended to the end of the file,
        existing users are updated in place.

        :param scheme:
            scheme to hash the password with, defaults to ``self.default_scheme``.

        :raises libhtpasswd.exc.InvalidUsernameError: if username can't be stored.
        :raises libhtpasswd.exc.UnknownSchemeError: if scheme isn't supported.
        :raises OSError: if the file can't be written; nothing is changed in that case.

        :returns: ``True``
        """
        self._validate_username(username)
        scheme = self._default_scheme if scheme is None else EncodingScheme.parse(scheme)
        hash = encode(as_bytes(password, self._encoding), scheme, stacklevel=2)

        records = dict(self._records)
        source = list(self._source)
        if username not in records:
            source.append((_RECORD, username))
        records[username] = hash
        self._commit(records, source)
        return True

    def delete_user(self, username: str) -> None:
        """Delete user's entry, and save the file.

        :raises libhtpasswd.exc.UserNotFoundError: if user isn't present.
        """
        if username not in self._records:
            raise exc.UserNotFoundError(username)
        records = dict(self._records)
        del records[username]
        source = [token for token in self._source if token != (_RECORD, username)]
        self._commit(records, source)
