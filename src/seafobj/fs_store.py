"""
Implementation of the fs object store: directory trees and file contents.
Directories and files are zlib-compressed JSON objects; file contents are split
into blocks addressed by the SHA-1 of their bytes.
"""
import hashlib
import json
import logging
import os
import stat
import zlib
from typing import BinaryIO, List, Optional, Tuple, Type, TypeVar

from serde import SerdeError, from_dict

from .backend import ObjectBackend
from .errors import ObjectCorrupt, ObjectNotFound
from .objects import (EMPTY_SHA1, SEAF_METADATA_TYPE_DIR, SEAF_METADATA_TYPE_FILE,
                      ResolvedObject, SeafDir, SeafDirent, Seafile)

logger = logging.getLogger(__name__)

T = TypeVar("T", SeafDir, Seafile)


class FSStore:
    """
    Read-only view of the fs objects and blocks under a storage directory.
    """
    fs: ObjectBackend
    blocks: ObjectBackend
    verify_blocks: bool

    def __init__(self, storage_dir: str, verify_blocks: bool = False):
        self.fs = ObjectBackend(os.path.join(storage_dir, "fs"), "fs")
        self.blocks = ObjectBackend(os.path.join(storage_dir, "blocks"), "block")
        self.verify_blocks = verify_blocks

    def _load(self, obj_id: str, cls: Type[T], obj_type: int) -> T:
        raw = self.fs.read(obj_id)
        try:
            payload = json.loads(zlib.decompress(raw))
            if payload.get("type") != obj_type:
                raise ObjectCorrupt("fs", obj_id, f"expected type {obj_type}, got {payload.get('type')}")
            return from_dict(cls, payload)
        except (zlib.error, ValueError, AttributeError, KeyError, TypeError, SerdeError) as e:
            raise ObjectCorrupt("fs", obj_id, str(e)) from e

    def get_dir(self, dir_id: str) -> SeafDir:
        if dir_id == EMPTY_SHA1:
            return SeafDir()
        return self._load(dir_id, SeafDir, SEAF_METADATA_TYPE_DIR)

    def get_seafile(self, file_id: str) -> Seafile:
        if file_id == EMPTY_SHA1:
            return Seafile()
        return self._load(file_id, Seafile, SEAF_METADATA_TYPE_FILE)

    def list_dir(self, dir_id: str) -> List[SeafDirent]:
        return self.get_dir(dir_id).dirents

    def lookup(self, dir_id: str, name: str) -> Optional[SeafDirent]:
        for dirent in self.get_dir(dir_id).dirents:
            if dirent.name == name:
                return dirent
        return None

    def resolve_path(self, root_id: str, path: str) -> Optional[ResolvedObject]:
        """
        Walk path from the directory root_id.

        Args:
            root_id: Id of the directory to start from (a commit's root)
            path: Slash separated path; empty components are ignored

        Returns:
            The object the path names, or None if any component is absent
        """
        parts = [p for p in path.split("/") if p]
        if not parts:
            return ResolvedObject(root_id, stat.S_IFDIR)

        current = root_id
        for i, name in enumerate(parts):
            try:
                dirent = self.lookup(current, name)
            except ObjectNotFound:
                logger.warning("Directory object %s is missing.", current)
                return None
            if dirent is None:
                return None
            if i == len(parts) - 1:
                try:
                    return self._resolved(dirent)
                except ObjectNotFound:
                    logger.warning("File object %s is missing.", dirent.id)
                    return None
            if not dirent.is_dir:
                return None
            current = dirent.id
        return None

    def _resolved(self, dirent: SeafDirent) -> ResolvedObject:
        if dirent.is_dir:
            return ResolvedObject(dirent.id, dirent.mode, 0, dirent.mtime)
        size = self.get_seafile(dirent.id).size
        return ResolvedObject(dirent.id, dirent.mode, size, dirent.mtime)

    def open_content(self, file_id: str) -> "FileContent":
        return FileContent(self.blocks, self.get_seafile(file_id), self.verify_blocks)


class FileContent:
    """
    Handle on the contents of one file. Blocks are opened only when a read
    overlaps them; use as a context manager so the open block is closed.
    """
    seafile: Seafile

    def __init__(self, blocks: ObjectBackend, seafile: Seafile, verify: bool = False):
        self.blocks = blocks
        self.seafile = seafile
        self.verify = verify
        self._current: Optional[Tuple[str, BinaryIO]] = None

    @property
    def size(self) -> int:
        return self.seafile.size

    def read_at(self, offset: int, size: int) -> bytes:
        """Read up to size bytes at offset. Reads at or past the end return b''."""
        end = min(offset + size, self.size)
        if offset < 0 or offset >= end:
            return b""

        out = []
        block_start = 0
        for block_id in self.seafile.block_ids:
            block_end = block_start + self.blocks.size(block_id)
            if block_end > offset:
                lo = max(offset, block_start) - block_start
                hi = min(end, block_end) - block_start
                out.append(self._read_block(block_id, lo, hi - lo))
            if block_end >= end:
                break
            block_start = block_end
        return b"".join(out)

    def _read_block(self, block_id: str, off: int, size: int) -> bytes:
        if self.verify:
            data = self.blocks.read(block_id)
            if hashlib.sha1(data).hexdigest() != block_id:
                raise ObjectCorrupt("block", block_id, "checksum mismatch")
            return data[off:off + size]
        f = self._open_block(block_id)
        f.seek(off)
        return f.read(size)

    def _open_block(self, block_id: str) -> BinaryIO:
        if self._current is not None:
            if self._current[0] == block_id:
                return self._current[1]
            self._current[1].close()
            self._current = None
        f = self.blocks.open(block_id)
        self._current = (block_id, f)
        return f

    def close(self) -> None:
        if self._current is not None:
            self._current[1].close()
            self._current = None

    def __enter__(self) -> "FileContent":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
