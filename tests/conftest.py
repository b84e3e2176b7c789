"""Root conftest: sets env vars BEFORE any app module is imported.

app/core/config.py requires DATABASE_URL at import time, so it must be set
before pytest collects a test that transitively imports the app.
"""

import os

# Force-set (not setdefault) so a real database URL never leaks into tests
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SQL_ECHO"] = "false"

import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.models import Base, Workspace  # noqa: E402


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


async def make_workspace(session_factory, name: str) -> str:
    async with session_factory() as session:
        workspace = Workspace(name=name)
        session.add(workspace)
        await session.commit()
        return workspace.id


@pytest_asyncio.fixture
async def workspace_id(session_factory) -> str:
    return await make_workspace(session_factory, "W")


@pytest_asyncio.fixture
async def other_workspace_id(session_factory) -> str:
    return await make_workspace(session_factory, "W2")
