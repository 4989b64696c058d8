"""
Operations on paths inside a repository.

Every operation resolves its path from scratch: repository -> head commit ->
object. Nothing is kept between calls, so a read after an open sees whatever
the repository's head is at the time of the read.
"""
import logging
import os
from typing import Iterator, Tuple

from seafobj import Commit, ObjectNotFound, ResolvedObject, SeafileSession, StoreError

from .attributes import FileAttributes
from .errors import InternalError, NotADirectory, NotFound, PermissionDenied
from .path_resolver import VirtualPath, parse

logger = logging.getLogger(__name__)


class RepoView:
    session: SeafileSession

    def __init__(self, session: SeafileSession):
        self.session = session

    def resolve(self, path: str) -> Tuple[VirtualPath, Commit, ResolvedObject]:
        """
        Find the object path names in its repository's current head.

        Args:
            path: "<repo id>[/<path>]", with or without a leading separator

        Returns:
            The parsed path, the head commit and the resolved object

        Raises:
            InvalidPath: if the repository id segment is malformed
            NotFound: if the repository, its head commit or any path component is missing
            InternalError: if a store fails
        """
        vpath = parse(path)
        try:
            repo = self.session.repo_store.get_repository(vpath.repo_id)
            if repo is None:
                logger.warning("Failed to get repo %s.", vpath.repo_id)
                raise NotFound("No such repository", path)

            commit = None
            if repo.head_commit_id:
                commit = self.session.commit_store.get_commit(repo.head_commit_id)
            if commit is None:
                logger.warning("Failed to get commit %.8s.", repo.head_commit_id or "")
                raise NotFound("Head commit is missing", path)

            obj = self.session.fs_store.resolve_path(commit.root_id, vpath.repo_path)
        except StoreError as e:
            logger.error("Failed to resolve %s: %s", path, e)
            raise InternalError(str(e), path) from e

        if obj is None:
            logger.warning("Path %s doesn't exist in repo %s.", vpath.repo_path, vpath.repo_id)
            raise NotFound("No such file or directory", path)
        return vpath, commit, obj

    def get_attributes(self, path: str) -> FileAttributes:
        _, commit, obj = self.resolve(path)
        mtime = obj.mtime if obj.mtime is not None else commit.ctime
        if obj.is_dir:
            return FileAttributes(is_directory=True, mtime=mtime)
        return FileAttributes(is_directory=False, size=obj.size, mtime=mtime)

    def list_directory(self, path: str) -> Iterator[str]:
        _, _, obj = self.resolve(path)
        if not obj.is_dir:
            raise NotADirectory("Not a directory", path)
        try:
            dirents = self.session.fs_store.list_dir(obj.obj_id)
        except ObjectNotFound as e:
            logger.warning("Directory object %s is missing.", obj.obj_id)
            raise NotFound("Directory object is missing", path) from e
        except StoreError as e:
            logger.error("Failed to list %s: %s", path, e)
            raise InternalError(str(e), path) from e
        return self._entries([dirent.name for dirent in dirents])

    @staticmethod
    def _entries(names: list) -> Iterator[str]:
        yield "."
        yield ".."
        yield from names

    def open_file(self, path: str, flags: int) -> None:
        # Only read-only opens are supported.
        if flags & os.O_ACCMODE != os.O_RDONLY:
            raise PermissionDenied("Only read-only access is supported", path)
        _, _, obj = self.resolve(path)
        if not obj.is_file:
            raise PermissionDenied("Not a regular file", path)

    def read_file(self, path: str, offset: int, size: int) -> bytes:
        _, _, obj = self.resolve(path)
        if not obj.is_file:
            raise NotFound("Not a regular file", path)
        try:
            with self.session.fs_store.open_content(obj.obj_id) as content:
                return content.read_at(offset, size)
        except ObjectNotFound as e:
            if e.kind != "fs":
                logger.error("Failed to read %s: %s", path, e)
                raise InternalError(str(e), path) from e
            raise NotFound("File object is missing", path) from e
        except StoreError as e:
            logger.error("Failed to read %s: %s", path, e)
            raise InternalError(str(e), path) from e
