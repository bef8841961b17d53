from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from librarium.dependencies.database import get_db
from librarium.models.project import Project, ProjectStatus
from librarium.schemas.tasks import ProjectCreate, ProjectResponse, ProjectUpdate
from librarium.services.crud_service import delete_entity
from librarium.services.task_service import apply_changes, create_record, get_project

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_data: ProjectCreate,
    db: AsyncSession = Depends(get_db),
):
    """Створює проєкт; власник має існувати."""
    return await create_record(db, Project, project_data.model_dump())


@router.get("", response_model=List[ProjectResponse])
async def list_projects(
    db: AsyncSession = Depends(get_db),
    owner_id: Optional[int] = None,
    status: Optional[ProjectStatus] = None,
):
    query = select(Project)
    if owner_id is not None:
        query = query.where(Project.owner_id == owner_id)
    if status is not None:
        query = query.where(Project.status == status)

    result = await db.execute(query.order_by(Project.project_id))
    return result.scalars().all()


@router.get("/{project_id}", response_model=ProjectResponse)
async def read_project(project_id: int, db: AsyncSession = Depends(get_db)):
    return await get_project(db, project_id)


@router.api_route(
    "/{project_id}",
    methods=["PUT", "PATCH"],
    response_model=ProjectResponse,
)
async def update_project(
    project_id: int,
    project_data: ProjectUpdate,
    db: AsyncSession = Depends(get_db),
):
    project = await get_project(db, project_id)
    return await apply_changes(db, project, project_data.model_dump(exclude_unset=True))


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(project_id: int, db: AsyncSession = Depends(get_db)):
    await delete_entity(db, Project, project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
