"""
Error kinds reported by filesystem operations and the errno each maps to.
"""
import errno
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    INVALID_PATH = "invalid path"
    NOT_FOUND = "not found"
    PERMISSION_DENIED = "permission denied"
    NOT_A_DIRECTORY = "not a directory"
    INTERNAL = "internal"

    @property
    def errno(self) -> int:
        return _ERRNO[self]


# Filesystems have no errno for a malformed path; it is reported as a missing entry.
_ERRNO = {
    ErrorKind.INVALID_PATH: errno.ENOENT,
    ErrorKind.NOT_FOUND: errno.ENOENT,
    ErrorKind.PERMISSION_DENIED: errno.EACCES,
    ErrorKind.NOT_A_DIRECTORY: errno.ENOTDIR,
    ErrorKind.INTERNAL: errno.EIO,
}


class FSError(Exception):
    """An operation failed; kind says how it is reported to the kernel."""
    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.message} (path={self.path})"
        return self.message


class InvalidPath(FSError):
    kind = ErrorKind.INVALID_PATH


class NotFound(FSError):
    kind = ErrorKind.NOT_FOUND


class PermissionDenied(FSError):
    kind = ErrorKind.PERMISSION_DENIED


class NotADirectory(FSError):
    kind = ErrorKind.NOT_A_DIRECTORY


class InternalError(FSError):
    kind = ErrorKind.INTERNAL
