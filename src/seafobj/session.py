"""
The session: every store the filesystem reads from, built once at startup.
"""
import logging
import os
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .commit_store import CommitStore
from .errors import SessionError
from .fs_store import FSStore
from .repo_store import RepoStore, create_pool

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "seafile.db"


class SeafileSession:
    """
    Application context passed to every filesystem operation.
    init() opens the object stores, connect_pool() the repository registry;
    close() disposes the pool. A session is never reinitialized.
    """
    seaf_dir: str
    commit_store: Optional[CommitStore]
    fs_store: Optional[FSStore]
    repo_store: Optional[RepoStore]
    engine: Optional[Engine]

    def __init__(self, seaf_dir: str, database_url: Optional[str] = None,
                 pool_size: int = 5, verify_blocks: bool = False):
        self.seaf_dir = seaf_dir
        self.database_url = database_url
        self.pool_size = pool_size
        self.verify_blocks = verify_blocks
        self.commit_store = None
        self.fs_store = None
        self.repo_store = None
        self.engine = None

    @property
    def storage_dir(self) -> str:
        return os.path.join(self.seaf_dir, "storage")

    def init(self) -> None:
        if self.fs_store is not None:
            raise SessionError("Session is already initialized")
        if not os.path.isdir(self.storage_dir):
            raise SessionError(f"Storage directory {self.storage_dir} does not exist")
        self.commit_store = CommitStore(self.storage_dir)
        self.fs_store = FSStore(self.storage_dir, self.verify_blocks)
        logger.info("Opened storage at %s", self.storage_dir)

    def connect_pool(self) -> None:
        if self.engine is not None:
            raise SessionError("Connection pool is already established")
        url = self.database_url
        if url is None:
            db_path = os.path.join(self.seaf_dir, DEFAULT_DB_NAME)
            if not os.path.isfile(db_path):
                raise SessionError(f"Repository database {db_path} does not exist")
            url = f"sqlite:///{db_path}"
        try:
            engine = create_pool(url, self.pool_size)
        except (SQLAlchemyError, ImportError) as e:
            raise SessionError(f"Cannot create connection pool: {e}") from e
        repo_store = RepoStore(engine)
        try:
            repo_store.check()
        except SessionError:
            engine.dispose()
            raise
        self.engine = engine
        self.repo_store = repo_store
        logger.info("Connection pool ready (size %d)", self.pool_size)

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None
            self.repo_store = None

    def __enter__(self) -> "SeafileSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
