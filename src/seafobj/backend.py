"""
Content-addressed object files on disk.
Objects live at <root>/<id[:2]>/<id[2:]>, addressed by a 40 character hex id.
"""
import os
import re
from typing import BinaryIO

from .errors import ObjectNotFound

_OBJ_ID = re.compile(r"^[0-9a-f]{40}$")


def valid_obj_id(obj_id: str) -> bool:
    return bool(_OBJ_ID.match(obj_id))


class ObjectBackend:
    """
    Read-only access to one kind of object (commits, fs objects or blocks).
    Malformed ids are reported as missing objects.
    """
    root: str
    kind: str

    def __init__(self, root: str, kind: str):
        self.root = root
        self.kind = kind

    def path(self, obj_id: str) -> str:
        if not valid_obj_id(obj_id):
            raise ObjectNotFound(self.kind, obj_id)
        return os.path.join(self.root, obj_id[:2], obj_id[2:])

    def exists(self, obj_id: str) -> bool:
        return valid_obj_id(obj_id) and os.path.isfile(self.path(obj_id))

    def read(self, obj_id: str) -> bytes:
        try:
            with open(self.path(obj_id), "rb") as f:
                return f.read()
        except FileNotFoundError:
            raise ObjectNotFound(self.kind, obj_id) from None

    def size(self, obj_id: str) -> int:
        try:
            return os.path.getsize(self.path(obj_id))
        except FileNotFoundError:
            raise ObjectNotFound(self.kind, obj_id) from None

    def open(self, obj_id: str) -> BinaryIO:
        try:
            return open(self.path(obj_id), "rb")
        except FileNotFoundError:
            raise ObjectNotFound(self.kind, obj_id) from None
