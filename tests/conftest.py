from __future__ import annotations

import asyncio
import os
from collections.abc import AsyncIterator, Iterator
from pathlib import Path

import pytest

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("SESSION_SECRET", "test-session-secret-that-is-long-enough-for-hs256")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import pool  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from alliswell.api.deps import get_chat_relay, get_db_session  # noqa: E402
from alliswell.api.main import app  # noqa: E402
from alliswell.domain.services.chat_relay import ChatRelay  # noqa: E402
from alliswell.infrastructure.db.base import Base  # noqa: E402
from alliswell.infrastructure.repositories.session_store import DatabaseSessionStore  # noqa: E402
from tests.utils import MockCompletionClient  # noqa: E402


def _make_engine(path: Path) -> AsyncEngine:
    # NullPool: connections are opened on whichever event loop uses them
    return create_async_engine(f"sqlite+aiosqlite:///{path}", poolclass=pool.NullPool)


async def _create_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture()
def mock_llm() -> MockCompletionClient:
    return MockCompletionClient()


@pytest.fixture()
def test_client(tmp_path: Path, mock_llm: MockCompletionClient) -> Iterator[TestClient]:
    engine = _make_engine(tmp_path / "app.db")
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    asyncio.run(_create_schema(engine))

    async def override_db_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_chat_relay] = lambda: ChatRelay(
        mock_llm, system_prompt="You are a test assistant."
    )
    with TestClient(app) as client:
        client.session_factory = session_factory  # type: ignore[attr-defined]
        yield client
    app.dependency_overrides.clear()
    asyncio.run(engine.dispose())


@pytest.fixture()
async def db_session(tmp_path: Path) -> AsyncIterator[AsyncSession]:
    """Standalone database session for service-level tests."""
    engine = _make_engine(tmp_path / "unit.db")
    await _create_schema(engine)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture()
def session_store(db_session: AsyncSession) -> DatabaseSessionStore:
    return DatabaseSessionStore(db_session)
