"""
Object models for the repository stores.
Commits and fs objects are stored as JSON and mapped onto these classes with serde.
"""
import stat
from dataclasses import dataclass
from typing import Optional

from serde import field, serde

EMPTY_SHA1 = "0" * 40

SEAF_METADATA_TYPE_FILE = 1
SEAF_METADATA_TYPE_DIR = 3


@serde
class SeafDirent:
    id: str
    mode: int
    name: str
    mtime: int = 0
    size: int = 0
    modifier: str = ""

    @property
    def is_dir(self) -> bool:
        return stat.S_ISDIR(self.mode)


@serde
class SeafDir:
    dirents: list[SeafDirent] = field(default_factory=list)
    type: int = SEAF_METADATA_TYPE_DIR
    version: int = 1


@serde
class Seafile:
    block_ids: list[str] = field(default_factory=list)
    size: int = 0
    type: int = SEAF_METADATA_TYPE_FILE
    version: int = 1


@serde
class Commit:
    commit_id: str
    repo_id: str
    root_id: str
    parent_id: Optional[str] = None
    creator_name: str = ""
    description: str = ""
    ctime: int = 0
    version: int = 1


@dataclass
class Repository:
    """A registry row: the repository id and the commit its master branch points to."""
    id: str
    head_commit_id: Optional[str] = None


@dataclass
class ResolvedObject:
    """An object found by walking a path from a commit's root directory."""
    obj_id: str
    mode: int
    size: int = 0
    mtime: Optional[int] = None

    @property
    def is_dir(self) -> bool:
        return stat.S_ISDIR(self.mode)

    @property
    def is_file(self) -> bool:
        return stat.S_ISREG(self.mode)
