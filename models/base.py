"""
Database configuration and base model.

Uses SQLAlchemy 2.0 declarative style with SQLite. Engines and session
factories are created by the caller and passed into the repository; nothing
connects at import time.
"""

from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from config import Paths, PATHS


def get_database_url(paths: Paths = PATHS) -> str:
    """SQLite URL of the application database file."""
    paths.data_dir.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{paths.database}"


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


def create_db_engine(database_url: Optional[str] = None, echo: bool = False) -> Engine:
    """Create an engine; defaults to the application SQLite file."""
    return create_engine(
        database_url or get_database_url(),
        echo=echo,
        connect_args={"check_same_thread": False},  # Allow multi-threaded access
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to an engine."""
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@contextmanager
def get_session(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """Context manager for database sessions."""
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine) -> None:
    """Initialize the database, creating all tables."""
    # Import models so they register on the metadata
    import models  # noqa: F401
    Base.metadata.create_all(bind=engine)


def reset_db(engine: Engine) -> None:
    """Drop and recreate all tables. USE WITH CAUTION."""
    import models  # noqa: F401
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
