"""Database engine and helpers.

This module configures the SQLModel/SQLAlchemy engine that stands in
for the document store. The four collections (`users`, `lessons`,
`words`, `tutorials`) are plain tables; the URL comes from
`settings.DATABASE_URL` and defaults to a local SQLite file `app.db`.
"""

from sqlmodel import SQLModel, create_engine, Session
from .config import settings

# SQLite needs check_same_thread, other backends must not get it
connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(settings.DATABASE_URL, echo=False, connect_args=connect_args)


def create_db_and_tables():
    """Create the collection tables using SQLModel metadata.

    Tables that already exist are left untouched, so calling this on
    every startup is safe.
    """
    # register table metadata before create_all
    from . import models  # noqa: F401
    SQLModel.metadata.create_all(engine)


def get_session():
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session and ensures it is closed when the
    request scope finishes.
    """
    with Session(engine) as session:
        yield session
