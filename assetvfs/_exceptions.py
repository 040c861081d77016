import errno
from enum import Enum


class ErrorKind(Enum):
    """Classification used to dispatch on failures without an except hierarchy."""

    NOT_EXIST = "not_exist"
    IS_DIRECTORY = "is_directory"
    IS_FILE = "is_file"
    EXIST = "exist"
    LIMIT = "limit"
    HOST = "host"


class VFSError(OSError):
    """Base error raised by assetvfs backends. Subclass of OSError.

    ``op`` names the operation that failed and ``filename`` holds the
    backend-relative path it failed on.
    """

    kind: ErrorKind = ErrorKind.HOST
    errno_value: int = errno.EIO
    default_reason: str = "input/output error"

    def __init__(self, op: str, path: str, reason: str | None = None) -> None:
        self.op = op
        super().__init__(self.errno_value, reason or self.default_reason, path)

    def __str__(self) -> str:
        return f"{self.op} {self.filename}: {self.strerror}"

    def __reduce__(self):
        return (type(self), (self.op, self.filename, self.strerror), self.__dict__)


class VFSNotExistError(VFSError, FileNotFoundError):
    """Raised when a path does not resolve to any entry."""

    kind = ErrorKind.NOT_EXIST
    errno_value = errno.ENOENT
    default_reason = "file does not exist"


class VFSIsDirectoryError(VFSError, IsADirectoryError):
    """Raised when file content is requested from a directory."""

    kind = ErrorKind.IS_DIRECTORY
    errno_value = errno.EISDIR
    default_reason = "is a directory"


class VFSIsFileError(VFSError, NotADirectoryError):
    """Raised when a file is listed or walked."""

    kind = ErrorKind.IS_FILE
    errno_value = errno.ENOTDIR
    default_reason = "is a file"


class VFSNameConflictError(VFSError, FileExistsError):
    """Raised when a registration would give a file and a directory the same name."""

    kind = ErrorKind.EXIST
    errno_value = errno.EEXIST
    default_reason = "name already taken by a different entry type"


class VFSNodeLimitExceededError(VFSError):
    """Raised when registering would exceed the builder's node limit."""

    kind = ErrorKind.LIMIT
    errno_value = errno.ENOSPC

    def __init__(self, path: str, current: int, limit: int) -> None:
        self.current = current
        self.limit = limit
        super().__init__(
            "register",
            path,
            f"node limit exceeded: current {current} nodes, limit is {limit}",
        )

    def __reduce__(self):
        return (type(self), (self.filename, self.current, self.limit))


class VFSFrozenError(RuntimeError):
    """Raised when registering into a builder that has already been frozen."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            f"Cannot register '{path}': the memory tree has already been frozen."
        )

    def __reduce__(self):
        return (type(self), (self.path,))


def error_kind(exc: BaseException) -> ErrorKind:
    if isinstance(exc, VFSError):
        return exc.kind
    if isinstance(exc, FileNotFoundError):
        return ErrorKind.NOT_EXIST
    if isinstance(exc, IsADirectoryError):
        return ErrorKind.IS_DIRECTORY
    if isinstance(exc, NotADirectoryError):
        return ErrorKind.IS_FILE
    if isinstance(exc, FileExistsError):
        return ErrorKind.EXIST
    return ErrorKind.HOST
