from sqlalchemy import func, select

from librarium.models import Project, Task, User
from librarium.seed import SAMPLE_PASSWORD, insert_sample_data
from librarium.services.user_service import get_user_by_username, pwd_context


async def count_rows(db, model):
    return await db.scalar(select(func.count()).select_from(model))


async def test_sample_data_fills_empty_database(db):
    assert await insert_sample_data(db) is True

    assert await count_rows(db, User) == 3
    assert await count_rows(db, Project) == 3
    assert await count_rows(db, Task) == 5

    admin = await get_user_by_username(db, "admin")
    assert pwd_context.verify(SAMPLE_PASSWORD, admin.password_hash)
    assert not pwd_context.verify("wrong-password", admin.password_hash)


async def test_sample_data_is_inserted_once(db):
    await insert_sample_data(db)

    assert await insert_sample_data(db) is False
    assert await count_rows(db, User) == 3
