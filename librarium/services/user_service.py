from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from librarium.dependencies.database import atomic
from librarium.exceptions.errors import NotFound, UniqueViolation
from librarium.models.user import User
from librarium.schemas.tasks import UserCreate

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


async def get_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise NotFound("User", user_id)
    return user


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, user_data: UserCreate) -> User:
    """Пароль зберігається лише як bcrypt-хеш."""
    if await get_user_by_username(db, user_data.username) is not None:
        raise UniqueViolation(
            "username",
            "uq_users_username",
            f"Username {user_data.username} is already taken",
        )

    user = User(
        username=user_data.username,
        email=user_data.email.lower(),
        password_hash=pwd_context.hash(user_data.password),
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        role=user_data.role,
    )

    async with atomic(db):
        db.add(user)
    await db.refresh(user)
    return user
