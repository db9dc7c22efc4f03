from __future__ import annotations

from typing import AsyncIterator, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from ..application import create_app
from ..db.base import Base
from ..db.session import get_db
from ..services.llm import get_completion
from ..services.scheduler import ExecutionScheduler
from .factories import FixedRandom


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", future=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> Callable[[], AsyncSession]:
    return sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def session(session_factory) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def make_scheduler(session_factory):
    created = []

    def factory(**kwargs) -> ExecutionScheduler:
        kwargs.setdefault("min_delay_ms", 5)
        kwargs.setdefault("max_delay_ms", 5)
        kwargs.setdefault("rng", FixedRandom())
        scheduler = ExecutionScheduler(session_factory, **kwargs)
        created.append(scheduler)
        return scheduler

    yield factory
    for scheduler in created:
        await scheduler.shutdown()


@pytest.fixture
def scheduler(make_scheduler) -> ExecutionScheduler:
    return make_scheduler()


@pytest.fixture
def completions():
    """Canned LLM replies, consumed in order; prompts are recorded."""

    class FakeCompletion:
        def __init__(self) -> None:
            self.replies = []
            self.prompts = []

        async def __call__(self, prompt: str) -> str:
            self.prompts.append(prompt)
            return self.replies.pop(0)

    return FakeCompletion()


@pytest.fixture
def app(session_factory, scheduler, completions):
    app = create_app(scheduler=scheduler)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_completion] = lambda: completions
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
