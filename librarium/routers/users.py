import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from librarium.dependencies.database import get_db
from librarium.models.user import User
from librarium.schemas.tasks import UserCreate, UserResponse, UserUpdate
from librarium.services.crud_service import delete_entity
from librarium.services.task_service import apply_changes
from librarium.services.user_service import create_user, get_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
):
    user = await create_user(db, user_data)
    logger.info(f"🆕 User {user.username} created with id {user.user_id}")
    return user


@router.get("", response_model=List[UserResponse])
async def list_users(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).order_by(User.user_id))
    return result.scalars().all()


@router.get("/{user_id}", response_model=UserResponse)
async def read_user(user_id: int, db: AsyncSession = Depends(get_db)):
    return await get_user(db, user_id)


@router.api_route("/{user_id}", methods=["PUT", "PATCH"], response_model=UserResponse)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Оновлює лише ті поля, що прийшли в запиті."""
    user = await get_user(db, user_id)
    changes = user_data.model_dump(exclude_unset=True)
    if "email" in changes and changes["email"]:
        changes["email"] = changes["email"].lower()
    return await apply_changes(db, user, changes)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: int, db: AsyncSession = Depends(get_db)):
    await delete_entity(db, User, user_id)
    logger.info(f"User {user_id} deleted")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
