"""Database engine and session helpers."""
from typing import Iterator

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create the SQLAlchemy engine for the configured database.

    SQLite connections are shared across the FastAPI threadpool, so the
    same-thread check is disabled for them.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    return create_engine(
        database_url,
        echo=echo,
        connect_args=connect_args,
        pool_pre_ping=True,
    )


def init_db(engine: Engine) -> None:
    """Create all tables registered on the SQLModel metadata."""
    # Register table models on the metadata
    from studyhub.models import assignment, conversation, user  # noqa: F401

    SQLModel.metadata.create_all(engine)


def session_scope(engine: Engine) -> Iterator[Session]:
    """Yield a session bound to ``engine`` and close it afterwards."""
    with Session(engine) as session:
        yield session
