"""
Commit objects: plain JSON files keyed by commit id.
"""
import json
import os
from typing import Optional

from serde import SerdeError, from_dict

from .backend import ObjectBackend
from .errors import ObjectCorrupt, ObjectNotFound
from .objects import Commit


class CommitStore:
    commits: ObjectBackend

    def __init__(self, storage_dir: str):
        self.commits = ObjectBackend(os.path.join(storage_dir, "commits"), "commit")

    def get_commit(self, commit_id: str) -> Optional[Commit]:
        """Load a commit, or None if no such commit is stored."""
        try:
            raw = self.commits.read(commit_id)
        except ObjectNotFound:
            return None
        try:
            return from_dict(Commit, json.loads(raw))
        except (ValueError, AttributeError, KeyError, TypeError, SerdeError) as e:
            raise ObjectCorrupt("commit", commit_id, str(e)) from e
