"""Database engine construction for the SQL task repository."""

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine


def build_engine(database_url: str) -> Engine:
    """Create an engine for PostgreSQL or SQLite.

    ``sqlite://`` (no path) yields a single shared in-memory database.
    """
    if database_url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=False, **kwargs)

    # Convert postgresql:// to postgresql+psycopg:// for psycopg v3 driver
    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+psycopg://", 1)

    return create_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,
        connect_args={"sslmode": "require"},
    )


def create_tables(engine: Engine) -> None:
    """Create the task table if it does not exist."""
    # Import models to register them with SQLModel
    from app.models.task import TaskRecord  # noqa: F401

    SQLModel.metadata.create_all(engine)
