import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from catalog.db import Base
from catalog import models

@pytest_asyncio.fixture
async def async_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, future=True, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()

@pytest.fixture
def session_factory(async_engine):
    return async_sessionmaker(async_engine, expire_on_commit=False, class_=AsyncSession)

@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as s:
        try:
            yield s
        finally:
            await s.rollback()

@pytest_asyncio.fixture
async def books(session):
    rows = [
        models.Book(title="The Name of the Wind", author="Patrick Rothfuss"),
        models.Book(title="Apes and Angels", author="John Ringo"),
        models.Book(title="Death Wave", author="Ben Bova"),
    ]
    session.add_all(rows)
    await session.commit()
    return {b.title: b.id for b in rows}
