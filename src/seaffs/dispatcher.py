"""
Routing of filesystem calls to the mount root or to a repository.
"""
from typing import Iterator

from seafobj import SeafileSession

from .attributes import FileAttributes
from .repo_view import RepoView
from .root_view import ROOT, RootView


class OperationDispatcher:
    """
    Entry point for every filesystem call. The mount root is served by
    RootView; any other path loses its leading separator and goes to RepoView.
    """
    def __init__(self, session: SeafileSession):
        self.root = RootView(session)
        self.repos = RepoView(session)

    @staticmethod
    def _repo_path(path: str) -> str:
        return path[1:] if path.startswith(ROOT) else path

    def get_attributes(self, path: str) -> FileAttributes:
        if path == ROOT:
            return self.root.get_attributes()
        return self.repos.get_attributes(self._repo_path(path))

    def list_directory(self, path: str) -> Iterator[str]:
        if path == ROOT:
            return self.root.list_directory()
        return self.repos.list_directory(self._repo_path(path))

    def open_file(self, path: str, flags: int) -> None:
        if path == ROOT:
            return self.root.open_file(flags)
        return self.repos.open_file(self._repo_path(path), flags)

    def read_file(self, path: str, offset: int, size: int) -> bytes:
        if path == ROOT:
            return self.root.read_file(offset, size)
        return self.repos.read_file(self._repo_path(path), offset, size)
