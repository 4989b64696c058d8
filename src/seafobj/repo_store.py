"""
The repository registry, kept in a SQL database.
Each repository has a row in Repo; its head is the commit of its master branch.
"""
import logging
from typing import Iterator, Optional

from sqlalchemy import (Column, MetaData, PrimaryKeyConstraint, String, Table, and_,
                        create_engine, inspect, select)
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

from .errors import SessionError, StoreError
from .objects import Repository

logger = logging.getLogger(__name__)

HEAD_BRANCH = "master"

metadata = MetaData()

repo_table = Table(
    "Repo", metadata,
    Column("repo_id", String(37), primary_key=True),
)

branch_table = Table(
    "Branch", metadata,
    Column("name", String(10), nullable=False),
    Column("repo_id", String(41), nullable=False),
    Column("commit_id", String(41)),
    PrimaryKeyConstraint("repo_id", "name"),
)


def create_pool(url: str, pool_size: int) -> Engine:
    """Create the engine whose connection pool serves every registry lookup."""
    connect_args = {}
    if make_url(url).get_backend_name() == "sqlite":
        # Pooled connections are shared between FUSE worker threads.
        connect_args["check_same_thread"] = False
    return create_engine(url, pool_size=pool_size, pool_pre_ping=True, connect_args=connect_args)


class RepoStore:
    engine: Engine

    def __init__(self, engine: Engine):
        self.engine = engine

    def check(self) -> None:
        """Fail with SessionError unless the registry tables can be reached."""
        try:
            with self.engine.connect() as conn:
                tables = inspect(conn)
                missing = [t.name for t in (repo_table, branch_table) if not tables.has_table(t.name)]
        except SQLAlchemyError as e:
            raise SessionError(f"Cannot connect to repository database: {e}") from e
        if missing:
            raise SessionError(f"Repository database lacks tables: {', '.join(missing)}")

    def get_repository(self, repo_id: str) -> Optional[Repository]:
        """Look up a repository and its head commit id. None if it isn't registered."""
        stmt = (
            select(repo_table.c.repo_id, branch_table.c.commit_id)
            .select_from(repo_table.outerjoin(
                branch_table,
                and_(branch_table.c.repo_id == repo_table.c.repo_id,
                     branch_table.c.name == HEAD_BRANCH)))
            .where(repo_table.c.repo_id == repo_id)
        )
        try:
            with self.engine.connect() as conn:
                row = conn.execute(stmt).first()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to look up repo {repo_id}: {e}") from e
        if row is None:
            return None
        return Repository(row.repo_id, row.commit_id)

    def list_repositories(self) -> Iterator[str]:
        """Yield the id of every registered repository, in database order."""
        try:
            with self.engine.connect() as conn:
                for row in conn.execute(select(repo_table.c.repo_id)):
                    yield row.repo_id
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to list repos: {e}") from e
