from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from librarium.models.project import ProjectStatus
from librarium.models.task import TaskPriority, TaskStatus
from librarium.models.user import UserRole


class BaseSchema(BaseModel):
    class Config:
        from_attributes = True


# User models
class UserBase(BaseSchema):
    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)
    role: UserRole = UserRole.USER


class UserCreate(UserBase):
    password: str = Field(..., min_length=8, max_length=100)


class UserUpdate(BaseSchema):
    username: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)
    role: Optional[UserRole] = None


class UserResponse(UserBase):
    user_id: int
    created_at: Optional[datetime] = None


# Project models
class ProjectBase(BaseSchema):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    owner_id: int
    deadline: Optional[date] = None
    status: ProjectStatus = ProjectStatus.ACTIVE


class ProjectCreate(ProjectBase):
    pass


class ProjectUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    owner_id: Optional[int] = None
    deadline: Optional[date] = None
    status: Optional[ProjectStatus] = None


class ProjectResponse(ProjectBase):
    project_id: int
    created_at: Optional[datetime] = None


# Task models
class TaskBase(BaseSchema):
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    project_id: Optional[int] = None
    assigned_to: Optional[int] = None
    created_by: int
    due_date: Optional[date] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.TODO


class TaskCreate(TaskBase):
    pass


class TaskUpdate(BaseSchema):
    """Only the fields present in the request body are written."""

    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    project_id: Optional[int] = None
    assigned_to: Optional[int] = None
    due_date: Optional[date] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None


class TaskResponse(TaskBase):
    task_id: int
    created_at: Optional[datetime] = None
