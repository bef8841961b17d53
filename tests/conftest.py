import os
from datetime import date
from itertools import count

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./librarium_test.db")
os.environ.setdefault("SEED_SAMPLE_DATA", "false")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from librarium.dependencies.database import (
    Base,
    build_engine,
    build_session_factory,
    get_db,
)
from librarium.main import app
from librarium.models import Book, BookCopy, CopyStatus, Member, Staff, StaffRole
from librarium.services.crud_service import create_entity

_sequence = count(1)


@pytest_asyncio.fixture
async def engine(tmp_path):
    # Окрема база на кожен тест
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'librarium.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_member(db):
    async def _make_member(**overrides):
        n = next(_sequence)
        data = {
            "first_name": "Ada",
            "last_name": f"Reader{n}",
            "email": f"reader{n}@example.com",
            **overrides,
        }
        return await create_entity(db, Member, data)

    return _make_member


@pytest.fixture
def make_book(db):
    async def _make_book(**overrides):
        n = next(_sequence)
        data = {"isbn": f"978-{n:09d}", "title": f"Book {n}", **overrides}
        return await create_entity(db, Book, data)

    return _make_book


@pytest.fixture
def make_copy(db, make_book):
    async def _make_copy(book=None, status=CopyStatus.AVAILABLE, **overrides):
        book = book or await make_book()
        n = next(_sequence)
        data = {
            "book_id": book.book_id,
            "barcode": f"BC-{n:06d}",
            "status": status,
            **overrides,
        }
        return await create_entity(db, BookCopy, data)

    return _make_copy


@pytest.fixture
def make_staff(db):
    async def _make_staff(**overrides):
        n = next(_sequence)
        data = {
            "first_name": "Sam",
            "last_name": f"Staff{n}",
            "email": f"staff{n}@library.org",
            "role": StaffRole.LIBRARIAN,
            **overrides,
        }
        return await create_entity(db, Staff, data)

    return _make_staff


@pytest.fixture
def jan():
    """Dates inside January 2024 used by the loan and reservation tests."""
    return lambda day: date(2024, 1, day)
