"""
FUSE interface that translates FUSE operations to dispatcher calls.
"""
import contextlib
import logging
from typing import Any, Dict, Iterator

from fuse import FUSE, FuseOSError, LoggingMixIn, Operations

from seafobj import SeafileSession

from .dispatcher import OperationDispatcher
from .errors import FSError

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def fs_errors() -> Iterator[None]:
    """Re-raise FSError as the FuseOSError carrying its errno."""
    try:
        yield
    except FSError as e:
        logger.debug("%s: %s", e.kind.name, e)
        raise FuseOSError(e.kind.errno) from e


class FuseInterface(LoggingMixIn, Operations):
    """
    Read-only FUSE operations. Anything that would modify the mount is left
    to the Operations defaults, which refuse it.
    """
    def __init__(self, session: SeafileSession):
        self.dispatcher = OperationDispatcher(session)

    def getattr(self, path: str, fh: Any = None) -> Dict[str, Any]:
        """Get file attributes."""
        with fs_errors():
            return self.dispatcher.get_attributes(path).as_dict()

    def readdir(self, path: str, fh: Any) -> Iterator[str]:
        """Read directory entries."""
        with fs_errors():
            yield from self.dispatcher.list_directory(path)

    def open(self, path: str, flags: int) -> int:
        """Open a file for reading."""
        with fs_errors():
            self.dispatcher.open_file(path, flags)
        return 0

    def read(self, path: str, size: int, offset: int, fh: Any) -> bytes:
        """Read from a file."""
        with fs_errors():
            return self.dispatcher.read_file(path, offset, size)


def mount(session: SeafileSession, mountpoint: str, **kwargs: Any) -> None:
    """
    Mount the repositories of session at mountpoint. Returns once unmounted.

    Args:
        session: Initialized session with its connection pool established
        mountpoint: Directory to mount the filesystem at
        **kwargs: Additional arguments to pass to FUSE
    """
    kwargs.setdefault('foreground', True)
    kwargs['ro'] = True
    FUSE(
        FuseInterface(session),
        mountpoint,
        **kwargs
    )
