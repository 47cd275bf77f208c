# ABOUTME: SQLModel Dream and Step tables and SQLite session factory.
# ABOUTME: Rows are owned by the auth provider's user id; steps are ordered by order_index.

import os
from contextlib import contextmanager
from datetime import datetime, timezone
from uuid import UUID, uuid4

from sqlmodel import Field, Session, SQLModel, create_engine

_db_path = os.environ.get("DREAMS_DB_PATH", "dreams.db")


class Dream(SQLModel, table=True):
    """A user's ambitious goal, tagged with a domain."""

    __tablename__ = "dreams"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(index=True)
    title: str
    description: str
    domain: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Step(SQLModel, table=True):
    """One action step of a dream. order_index is the position returned by the generator."""

    __tablename__ = "steps"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    dream_id: UUID = Field(foreign_key="dreams.id", index=True)
    title: str
    description: str
    order_index: int
    completed: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


_engine = create_engine(
    f"sqlite:///{_db_path}",
    connect_args={"check_same_thread": False},
)


def init_db() -> None:
    """Create all tables if they do not exist."""
    SQLModel.metadata.create_all(_engine)


@contextmanager
def get_session():
    """Yield an SQLite session for the default engine."""
    init_db()
    with Session(_engine) as session:
        yield session
