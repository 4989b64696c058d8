"""
Read-only access to content-addressed repositories: the repository registry,
commits, directory trees and file blocks.
"""

from .commit_store import CommitStore
from .errors import ConfigError, ObjectCorrupt, ObjectNotFound, SessionError, StoreError
from .fs_store import FileContent, FSStore
from .objects import EMPTY_SHA1, Commit, Repository, ResolvedObject, SeafDir, SeafDirent, Seafile
from .repo_store import RepoStore
from .session import SeafileSession

__all__ = ['CommitStore', 'FSStore', 'FileContent', 'RepoStore', 'SeafileSession',
           'Commit', 'Repository', 'ResolvedObject', 'SeafDir', 'SeafDirent', 'Seafile',
           'EMPTY_SHA1', 'StoreError', 'ObjectNotFound', 'ObjectCorrupt', 'ConfigError',
           'SessionError']
