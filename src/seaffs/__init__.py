"""
Read-only FUSE filesystem over seafile repositories.
The mount root lists repositories by id; each repository directory shows the
tree of its current head commit.
"""

__version__ = "0.1.0"

from .attributes import FileAttributes
from .dispatcher import OperationDispatcher
from .errors import (ErrorKind, FSError, InternalError, InvalidPath, NotADirectory, NotFound,
                     PermissionDenied)
from .path_resolver import VirtualPath, parse
from .repo_view import RepoView
from .root_view import RootView

__all__ = ['OperationDispatcher', 'RootView', 'RepoView', 'VirtualPath', 'parse',
           'FileAttributes', 'ErrorKind', 'FSError', 'InvalidPath', 'NotFound',
           'PermissionDenied', 'NotADirectory', 'InternalError']
