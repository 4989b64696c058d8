"""
The mount root: a synthetic directory with one entry per repository.
"""
import logging
import os
from typing import Iterator

from seafobj import SeafileSession, StoreError

from .attributes import FileAttributes
from .errors import InternalError, NotFound, PermissionDenied

logger = logging.getLogger(__name__)

ROOT = "/"


class RootView:
    session: SeafileSession

    def __init__(self, session: SeafileSession):
        self.session = session

    def get_attributes(self) -> FileAttributes:
        return FileAttributes(is_directory=True, owned=False)

    def list_directory(self) -> Iterator[str]:
        """Yield '.', '..' and then the id of every repository the registry knows right now."""
        yield "."
        yield ".."
        try:
            yield from self.session.repo_store.list_repositories()
        except StoreError as e:
            logger.error("Failed to list repositories: %s", e)
            raise InternalError(str(e), ROOT) from e

    def open_file(self, flags: int) -> None:
        if flags & os.O_ACCMODE != os.O_RDONLY:
            raise PermissionDenied("Only read-only access is supported", ROOT)
        raise PermissionDenied("Not a regular file", ROOT)

    def read_file(self, offset: int, size: int) -> bytes:
        raise NotFound("Not a regular file", ROOT)
