"""Projects and tasks of the task-management schema.

Referenced users and projects are looked up before every write and a
missing one is reported as NotFound naming the reference, so the caller
gets a 404 rather than an opaque integrity error.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from librarium.dependencies.database import atomic
from librarium.exceptions.errors import NotFound
from librarium.models.project import Project
from librarium.models.task import Task, TaskStatus
from librarium.models.user import User

logger = logging.getLogger(__name__)

# поле запиту -> (модель, назва для повідомлення)
REFERENCES = {
    "owner_id": (User, "Owner"),
    "project_id": (Project, "Project"),
    "assigned_to": (User, "Assignee"),
    "created_by": (User, "Creator"),
}


async def ensure_exists(db: AsyncSession, data: dict):
    for field, (model, label) in REFERENCES.items():
        value = data.get(field)
        if value is not None and await db.get(model, value) is None:
            raise NotFound(label, value)


async def get_project(db: AsyncSession, project_id: int) -> Project:
    project = await db.get(Project, project_id)
    if not project:
        raise NotFound("Project", project_id)
    return project


async def get_task(db: AsyncSession, task_id: int) -> Task:
    task = await db.get(Task, task_id)
    if not task:
        raise NotFound("Task", task_id)
    return task


async def create_record(db: AsyncSession, model, data: dict):
    instance = model(**data)

    async with atomic(db):
        await ensure_exists(db, data)
        db.add(instance)

    await db.refresh(instance)
    return instance


async def apply_changes(db: AsyncSession, instance, changes: dict):
    """Write only the supplied fields; an empty payload is a no-op."""
    if not changes:
        return instance

    async with atomic(db):
        await ensure_exists(db, changes)
        for key, value in changes.items():
            setattr(instance, key, value)

    await db.refresh(instance)
    return instance


async def list_tasks(
    db: AsyncSession,
    project_id: Optional[int] = None,
    assigned_to: Optional[int] = None,
    status: Optional[TaskStatus] = None,
) -> list[Task]:
    query = select(Task)
    if project_id is not None:
        query = query.where(Task.project_id == project_id)
    if assigned_to is not None:
        query = query.where(Task.assigned_to == assigned_to)
    if status is not None:
        query = query.where(Task.status == status)

    result = await db.execute(query.order_by(Task.task_id))
    return result.scalars().all()
