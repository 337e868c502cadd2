from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from fastapi import Request
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine


logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> Engine:
    """Create the process-wide connection pool for ``database_url``."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(database_url, pool_pre_ping=True)

    kwargs = {"connect_args": {"check_same_thread": False}}
    if not url.database or url.database == ":memory:":
        # one shared connection, otherwise every checkout sees an empty database
        kwargs["poolclass"] = StaticPool
    else:
        Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)
    return create_engine(database_url, **kwargs)


def init_db(engine: Engine) -> None:
    """Create the comments table when it does not exist yet."""
    from blog.models.comment import Comment  # noqa: F401  registers the table

    SQLModel.metadata.create_all(engine)
    logger.info("Database ready at %s", engine.url.render_as_string(hide_password=True))


def get_session(request: Request) -> Iterator[Session]:
    with Session(request.app.state.engine) as session:
        yield session
