from contextlib import contextmanager

from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from sqlmodel import Session, SQLModel, create_engine

from .config import DATABASE_URL

# Import all models to ensure they are registered with SQLModel metadata
from .models import Comment, Task  # noqa: F401


def make_engine(url: str):
    if url.startswith("sqlite"):
        return create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
        )

    # Hosted Postgres: disable pooling for serverless and enable pre-ping
    return create_engine(
        url,
        echo=False,
        pool_pre_ping=True,
        poolclass=NullPool,
    )


def make_session_factory(bind):
    """Build a ``get_session``-style context manager bound to an engine."""
    factory = sessionmaker(
        class_=Session,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=bind,
    )

    @contextmanager
    def session_scope():
        """Usage:
            with get_session() as session:
                # do something with session
        """
        session = factory()
        try:
            yield session
        finally:
            session.close()

    return session_scope


engine = make_engine(DATABASE_URL)

get_session = make_session_factory(engine)


def create_tables(bind=None):
    """Create all database tables."""
    SQLModel.metadata.create_all(bind=bind or engine)
