"""
Parsing of virtual paths into a repository id and a path inside that repository.
"""
from dataclasses import dataclass

from .errors import InvalidPath

REPO_ID_LEN = 36
SEP = "/"


@dataclass(frozen=True)
class VirtualPath:
    repo_id: str
    repo_path: str


def parse(path: str) -> VirtualPath:
    """
    Split "/<repo id>[/<path>]" into its parts.

    The leading separator is optional. The first segment must be at least
    REPO_ID_LEN characters long; only its first REPO_ID_LEN characters are kept.
    The repository path keeps its leading separator and is "/" when absent.

    Raises:
        InvalidPath: if the first segment is too short
    """
    if path.startswith(SEP):
        path = path[1:]

    sep = path.find(SEP)
    if sep < 0:
        if len(path) < REPO_ID_LEN:
            raise InvalidPath("Invalid input path", path)
        return VirtualPath(path[:REPO_ID_LEN], SEP)

    if sep < REPO_ID_LEN:
        raise InvalidPath("Invalid input path", path)
    return VirtualPath(path[:REPO_ID_LEN], path[sep:])
