# tests/conftest.py

from __future__ import annotations

import os

# Must be set before tarefas.config is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PUBLIC_URL"] = "http://testserver"
os.environ["SECRET_KEY"] = "test-secret"

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from tarefas.database import create_tables, make_engine, make_session_factory
from tarefas.dependencies import get_comment_store, get_landing_aggregator, get_task_store
from tarefas.identity import get_identity_provider
from tarefas.landing import LandingAggregator
from tarefas.main import app
from tarefas.schemas.user import Identity
from tarefas.store.comments import CommentStore
from tarefas.store.feed import ChangeFeed
from tarefas.store.tasks import TaskStore

from .fakes import FakeIdentityProvider


@pytest.fixture()
def alice() -> Identity:
    return Identity(name="Alice", email="alice@example.com", image="https://img.test/alice.png")


@pytest.fixture()
def bob() -> Identity:
    return Identity(name="Bob", email="bob@example.com", image=None)


@pytest.fixture()
def carol() -> Identity:
    return Identity(name="Carol", email="carol@example.com", image=None)


@pytest.fixture()
def session_factory(tmp_path: Path):
    """Session factory over a fresh SQLite file per test."""
    engine = make_engine(f"sqlite:///{tmp_path / 'tarefas.sqlite3'}")
    create_tables(engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture()
def broken_session_factory(tmp_path: Path):
    """Session factory over a database without tables: every query fails."""
    engine = make_engine(f"sqlite:///{tmp_path / 'empty.sqlite3'}")
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture()
def task_store(session_factory) -> TaskStore:
    return TaskStore(session_factory, feed=ChangeFeed())


@pytest.fixture()
def comment_store(session_factory) -> CommentStore:
    return CommentStore(session_factory)


@pytest.fixture()
def aggregator(task_store: TaskStore, comment_store: CommentStore) -> LandingAggregator:
    # Zero window: every landing render sees fresh counts.
    return LandingAggregator(task_store, comment_store, revalidate_seconds=0)


@pytest.fixture()
def identity_provider(alice: Identity) -> FakeIdentityProvider:
    return FakeIdentityProvider(alice)


@pytest.fixture()
def client(task_store, comment_store, aggregator, identity_provider):
    """
    TestClient with stores and identity provider overridden.

    Startup events are not run, so the configured database is never touched.
    """
    app.dependency_overrides[get_task_store] = lambda: task_store
    app.dependency_overrides[get_comment_store] = lambda: comment_store
    app.dependency_overrides[get_landing_aggregator] = lambda: aggregator
    app.dependency_overrides[get_identity_provider] = lambda: identity_provider
    yield TestClient(app)
    app.dependency_overrides.clear()
