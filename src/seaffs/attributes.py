"""
File attributes as reported to FUSE.
"""
import os
import stat
from dataclasses import dataclass
from typing import Any, Dict, Optional

DIR_PERMS = 0o755
FILE_PERMS = 0o444


@dataclass
class FileAttributes:
    """Attributes of a directory or regular file in the mount."""
    is_directory: bool
    size: int = 0
    mtime: Optional[float] = None
    owned: bool = True

    def as_dict(self) -> Dict[str, Any]:
        if self.is_directory:
            attrs = {'st_mode': stat.S_IFDIR | DIR_PERMS, 'st_nlink': 2, 'st_size': 0}
        else:
            attrs = {'st_mode': stat.S_IFREG | FILE_PERMS, 'st_nlink': 1, 'st_size': self.size}
        if self.mtime is not None:
            attrs['st_atime'] = self.mtime
            attrs['st_mtime'] = self.mtime
            attrs['st_ctime'] = self.mtime
        if self.owned:
            attrs['st_uid'] = os.getuid()
            attrs['st_gid'] = os.getgid()
        return attrs
