import os
import stat

import pytest
from sqlalchemy import text

from conftest import OTHER_REPO_ID, README, REPO_ID, REPO_TREE
from seafobj import ObjectNotFound
from seaffs.errors import (ErrorKind, InternalError, InvalidPath, NotADirectory, NotFound,
                           PermissionDenied)

WRITE_MODES = [os.O_WRONLY, os.O_RDWR, os.O_WRONLY | os.O_APPEND, os.O_RDWR | os.O_CREAT,
               os.O_ACCMODE]


def repo_path(path=""):
    return f"/{REPO_ID}{path}"


def head_root(session):
    head = session.repo_store.get_repository(REPO_ID).head_commit_id
    return session.commit_store.get_commit(head).root_id


def remove_fs_object(populated, obj_id):
    (populated.storage / "fs" / obj_id[:2] / obj_id[2:]).unlink()


class TestRoot:
    def test_getattr(self, dispatcher):
        attrs = dispatcher.get_attributes("/")
        assert attrs.is_directory
        assert stat.S_ISDIR(attrs.as_dict()["st_mode"])
        assert "st_uid" not in attrs.as_dict()

    def test_getattr_without_registry(self, dispatcher, session):
        session.repo_store = None
        assert dispatcher.get_attributes("/").is_directory

    def test_readdir_lists_repositories(self, dispatcher):
        entries = list(dispatcher.list_directory("/"))
        assert entries[:2] == [".", ".."]
        assert sorted(entries[2:]) == sorted([REPO_ID, OTHER_REPO_ID])

    def test_readdir_sees_new_repositories(self, dispatcher, populated):
        new_id = "9" * 36
        populated.add_repo(new_id)
        assert new_id in list(dispatcher.list_directory("/"))

    def test_readdir_registry_failure(self, dispatcher, populated):
        with populated.engine.begin() as conn:
            conn.execute(text("DROP TABLE Repo"))
        with pytest.raises(InternalError):
            list(dispatcher.list_directory("/"))

    def test_open_and_read_root(self, dispatcher):
        with pytest.raises(PermissionDenied):
            dispatcher.open_file("/", os.O_RDONLY)
        with pytest.raises(NotFound):
            dispatcher.read_file("/", 0, 10)


class TestGetattr:
    def test_file(self, dispatcher):
        attrs = dispatcher.get_attributes(repo_path("/docs/readme.txt"))
        assert not attrs.is_directory
        assert attrs.size == len(README) == 12
        st = attrs.as_dict()
        assert stat.S_ISREG(st["st_mode"])
        assert st["st_size"] == 12
        assert st["st_uid"] == os.getuid()

    def test_directory(self, dispatcher):
        attrs = dispatcher.get_attributes(repo_path("/docs"))
        assert attrs.is_directory
        assert attrs.mtime is not None

    def test_repo_root(self, dispatcher, session):
        attrs = dispatcher.get_attributes(repo_path())
        assert attrs.is_directory
        head = session.repo_store.get_repository(REPO_ID).head_commit_id
        assert attrs.mtime == session.commit_store.get_commit(head).ctime

    def test_missing_path(self, dispatcher):
        with pytest.raises(NotFound):
            dispatcher.get_attributes(repo_path("/docs/missing.txt"))

    def test_missing_repository(self, dispatcher):
        with pytest.raises(NotFound):
            dispatcher.get_attributes("/" + "7" * 36 + "/docs")

    def test_short_repository_segment(self, dispatcher):
        with pytest.raises(InvalidPath) as exc_info:
            dispatcher.get_attributes("/short/whatever")
        assert exc_info.value.kind is ErrorKind.INVALID_PATH

    def test_dangling_head(self, dispatcher, populated):
        populated.set_head(REPO_ID, "ab" * 20)
        with pytest.raises(NotFound):
            dispatcher.get_attributes(repo_path("/docs"))

    def test_repository_without_branch(self, dispatcher, populated):
        populated.add_bare_repo("8" * 36)
        with pytest.raises(NotFound):
            dispatcher.get_attributes("/" + "8" * 36)

    def test_corrupt_tree(self, dispatcher, populated, session):
        head = session.repo_store.get_repository(REPO_ID).head_commit_id
        root = session.commit_store.get_commit(head).root_id
        populated.write_object("fs", root, b"garbage")
        with pytest.raises(InternalError) as exc_info:
            dispatcher.get_attributes(repo_path("/docs"))
        assert exc_info.value.kind is ErrorKind.INTERNAL


class TestReaddir:
    def test_repo_root(self, dispatcher):
        entries = list(dispatcher.list_directory(repo_path()))
        assert entries[:2] == [".", ".."]
        assert sorted(entries[2:]) == sorted(REPO_TREE)

    def test_subdirectory(self, dispatcher):
        entries = list(dispatcher.list_directory(repo_path("/docs")))
        assert sorted(entries[2:]) == ["empty.txt", "nested", "readme.txt"]

    def test_empty_directory(self, dispatcher):
        assert list(dispatcher.list_directory(repo_path("/emptydir"))) == [".", ".."]

    def test_file_is_not_a_directory(self, dispatcher):
        with pytest.raises(NotADirectory):
            dispatcher.list_directory(repo_path("/top.txt"))

    def test_missing(self, dispatcher):
        with pytest.raises(NotFound):
            dispatcher.list_directory(repo_path("/nope"))

    def test_missing_root_object(self, dispatcher, populated, session):
        remove_fs_object(populated, head_root(session))
        with pytest.raises(NotFound):
            dispatcher.list_directory(repo_path())

    def test_missing_subdirectory_object(self, dispatcher, populated, session):
        remove_fs_object(populated, session.fs_store.lookup(head_root(session), "docs").id)
        with pytest.raises(NotFound):
            dispatcher.list_directory(repo_path("/docs"))


class TestOpen:
    def test_open_file_read_only(self, dispatcher):
        assert dispatcher.open_file(repo_path("/docs/readme.txt"), os.O_RDONLY) is None

    def test_open_ignores_non_access_flags(self, dispatcher):
        dispatcher.open_file(repo_path("/docs/readme.txt"), os.O_RDONLY | os.O_NONBLOCK)

    @pytest.mark.parametrize("flags", WRITE_MODES)
    @pytest.mark.parametrize("path", ["/docs/readme.txt", "/docs", "", "/missing"])
    def test_open_for_writing_is_denied(self, dispatcher, flags, path):
        with pytest.raises(PermissionDenied):
            dispatcher.open_file(repo_path(path), flags)

    @pytest.mark.parametrize("flags", WRITE_MODES)
    def test_open_invalid_path_for_writing_is_denied(self, dispatcher, flags):
        with pytest.raises(PermissionDenied):
            dispatcher.open_file("/short/whatever", flags)

    def test_open_directory_is_denied(self, dispatcher):
        with pytest.raises(PermissionDenied):
            dispatcher.open_file(repo_path("/docs"), os.O_RDONLY)

    def test_open_missing(self, dispatcher):
        with pytest.raises(NotFound):
            dispatcher.open_file(repo_path("/docs/none"), os.O_RDONLY)


class TestRead:
    def test_read_tail(self, dispatcher):
        data = dispatcher.read_file(repo_path("/docs/readme.txt"), 6, 20)
        assert data == b"world!"
        assert len(data) == 6

    def test_read_whole(self, dispatcher):
        assert dispatcher.read_file(repo_path("/docs/readme.txt"), 0, 4096) == README

    @pytest.mark.parametrize("offset", [12, 13, 1 << 20])
    def test_read_past_end(self, dispatcher, offset):
        assert dispatcher.read_file(repo_path("/docs/readme.txt"), offset, 10) == b""

    def test_read_empty_file(self, dispatcher):
        assert dispatcher.read_file(repo_path("/docs/empty.txt"), 0, 10) == b""

    def test_read_multi_block(self, dispatcher):
        expected = REPO_TREE["docs"]["nested"]["deep.bin"]
        assert dispatcher.read_file(repo_path("/docs/nested/deep.bin"), 1000, 2000) == expected[1000:3000]

    def test_read_directory(self, dispatcher):
        with pytest.raises(NotFound):
            dispatcher.read_file(repo_path("/docs"), 0, 10)

    def test_read_missing_block(self, dispatcher, populated):
        block_dir = populated.storage / "blocks"
        for block in block_dir.glob("*/*"):
            block.unlink()
        with pytest.raises(InternalError):
            dispatcher.read_file(repo_path("/docs/readme.txt"), 0, 10)


    def test_read_missing_file_object(self, dispatcher, populated, session):
        docs = session.fs_store.lookup(head_root(session), "docs").id
        remove_fs_object(populated, session.fs_store.lookup(docs, "readme.txt").id)
        with pytest.raises(NotFound):
            dispatcher.read_file(repo_path("/docs/readme.txt"), 0, 10)
        with pytest.raises(NotFound):
            dispatcher.get_attributes(repo_path("/docs/readme.txt"))

    def test_file_object_removed_after_resolution(self, dispatcher, session, monkeypatch):
        def missing(file_id):
            raise ObjectNotFound("fs", file_id)

        monkeypatch.setattr(session.fs_store, "open_content", missing)
        with pytest.raises(NotFound):
            dispatcher.read_file(repo_path("/docs/readme.txt"), 0, 10)


class TestSnapshotPerCall:
    def test_read_sees_new_head(self, dispatcher, populated):
        path = repo_path("/docs/readme.txt")
        dispatcher.open_file(path, os.O_RDONLY)
        populated.advance(REPO_ID, {"docs": {"readme.txt": b"goodbye"}})
        assert dispatcher.read_file(path, 0, 100) == b"goodbye"

    def test_read_after_path_vanishes(self, dispatcher, populated):
        path = repo_path("/docs/readme.txt")
        dispatcher.open_file(path, os.O_RDONLY)
        populated.advance(REPO_ID, {"other.txt": b"x"})
        with pytest.raises(NotFound):
            dispatcher.read_file(path, 0, 100)

    def test_getattr_follows_head(self, dispatcher, populated):
        path = repo_path("/docs/readme.txt")
        assert dispatcher.get_attributes(path).size == 12
        populated.advance(REPO_ID, {"docs": {"readme.txt": b"longer content"}})
        assert dispatcher.get_attributes(path).size == len(b"longer content")
