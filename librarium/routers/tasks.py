from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from librarium.dependencies.database import get_db
from librarium.models.task import Task, TaskStatus
from librarium.schemas.tasks import TaskCreate, TaskResponse, TaskUpdate
from librarium.services.crud_service import delete_entity
from librarium.services.task_service import (
    apply_changes,
    create_record,
    get_task,
    list_tasks,
)

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(task_data: TaskCreate, db: AsyncSession = Depends(get_db)):
    return await create_record(db, Task, task_data.model_dump())


@router.get("", response_model=List[TaskResponse])
async def get_tasks(
    db: AsyncSession = Depends(get_db),
    project_id: Optional[int] = None,
    assigned_to: Optional[int] = None,
    status: Optional[TaskStatus] = None,
):
    return await list_tasks(db, project_id, assigned_to, status)


@router.get("/{task_id}", response_model=TaskResponse)
async def read_task(task_id: int, db: AsyncSession = Depends(get_db)):
    return await get_task(db, task_id)


@router.api_route("/{task_id}", methods=["PUT", "PATCH"], response_model=TaskResponse)
async def update_task(
    task_id: int,
    task_data: TaskUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Часткове оновлення: поля, яких немає в запиті, лишаються як були."""
    task = await get_task(db, task_id)
    return await apply_changes(db, task, task_data.model_dump(exclude_unset=True))


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: int, db: AsyncSession = Depends(get_db)):
    await delete_entity(db, Task, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
