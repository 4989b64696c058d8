"""
Errors raised by the storage layer and by session startup.
"""
from typing import Optional


class StoreError(Exception):
    """Base class for failures reading the repository stores."""


class ObjectNotFound(StoreError):
    """A referenced object is not present in the store."""
    def __init__(self, kind: str, obj_id: str):
        super().__init__(f"{kind} object {obj_id} not found")
        self.kind = kind
        self.obj_id = obj_id


class ObjectCorrupt(StoreError):
    """An object exists but could not be decoded or failed verification."""
    def __init__(self, kind: str, obj_id: str, reason: Optional[str] = None):
        message = f"{kind} object {obj_id} is corrupt"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.kind = kind
        self.obj_id = obj_id


class ConfigError(Exception):
    """The configuration directory or file could not be loaded."""


class SessionError(Exception):
    """The session or its connection pool could not be established."""
