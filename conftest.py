# conftest.py
import logging
from typing import AsyncGenerator, List, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from app.main import app
from app.core.database.base import Base
from app.core.database.db import enable_sqlite_foreign_keys, get_session
from catalog.domain.models import Category
from catalog.domain.repositories import CategoryRepository, ProductRepository


# ---- Async engine + session --------------------------------------------------

@pytest_asyncio.fixture(scope="function")
async def async_engine(tmp_path):
    # file-backed so the app and the test each get their own connection
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()

@pytest_asyncio.fixture(scope="function")
async def SessionMaker(async_engine):
    return async_sessionmaker(bind=async_engine, expire_on_commit=False, class_=AsyncSession)

@pytest_asyncio.fixture(autouse=True, scope="function")
async def override_get_session(SessionMaker):
    async def _dep():
        async with SessionMaker() as s:
            yield s
    app.dependency_overrides[get_session] = _dep
    yield
    app.dependency_overrides.pop(get_session, None)

@pytest_asyncio.fixture
async def db_session(SessionMaker):
    async with SessionMaker() as s:
        yield s


# ---- SQL spy -----------------------------------------------------------------

@pytest.fixture
def sql_log(async_engine) -> List[Tuple[str, object]]:
    """Every (statement, parameters) pair sent to the database during the test."""
    calls: List[Tuple[str, object]] = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        calls.append((statement, parameters))

    event.listen(async_engine.sync_engine, "before_cursor_execute", _record)
    yield calls
    event.remove(async_engine.sync_engine, "before_cursor_execute", _record)


# ---- Repositories + seed data --------------------------------------------------

@pytest_asyncio.fixture
async def category_repo(db_session) -> CategoryRepository:
    return CategoryRepository(db_session, logger=logging.getLogger("tests.categories"))

@pytest_asyncio.fixture
async def product_repo(db_session) -> ProductRepository:
    return ProductRepository(db_session, logger=logging.getLogger("tests.products"))

@pytest_asyncio.fixture
async def make_categories(db_session):
    """Insert ``n`` categories named "Category 1".."Category n"; ids follow insertion order."""
    async def _make(n: int) -> List[Category]:
        rows = [Category(name=f"Category {i}") for i in range(1, n + 1)]
        db_session.add_all(rows)
        await db_session.commit()
        return rows
    return _make


# ---- HTTP client -------------------------------------------------------------

@pytest_asyncio.fixture(scope="function")
async def client(override_get_session) -> AsyncGenerator[AsyncClient, None]:
    # unhandled errors come back as the 500 response instead of being re-raised here
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
