"""Shared fixtures: a data directory with repositories and a session over it."""

import pytest

from seafdir_builder import SeafDirBuilder
from seaffs import OperationDispatcher
from seafobj import SeafileSession

REPO_ID = "1" * 36
OTHER_REPO_ID = "5f1c2ab0-3f0e-4a8c-9d57-0c1c2e8b9a11"

README = b"hello world!"

REPO_TREE = {
    "docs": {
        "readme.txt": README,
        "empty.txt": b"",
        "nested": {"deep.bin": bytes(range(256)) * 20},
    },
    "top.txt": b"top level\n",
    "emptydir": {},
}


@pytest.fixture
def builder(tmp_path):
    b = SeafDirBuilder(tmp_path / "seafile")
    yield b
    b.close()


@pytest.fixture
def populated(builder):
    builder.add_repo(REPO_ID, REPO_TREE)
    builder.add_repo(OTHER_REPO_ID, {"a.txt": b"a"})
    return builder


@pytest.fixture
def session(populated):
    s = SeafileSession(str(populated.seaf_dir), pool_size=2)
    s.init()
    s.connect_pool()
    yield s
    s.close()


@pytest.fixture
def dispatcher(session):
    return OperationDispatcher(session)
