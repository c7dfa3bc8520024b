from sqlmodel import SQLModel
from pydantic import ConfigDict, field_serializer
from typing import List, Optional
from datetime import date, datetime

from ..models.task import TaskStatus, TaskPriority
from .common import format_timestamp


class UserCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    email: Optional[str] = None


class UserUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    email: Optional[str] = None


class UserRead(SQLModel):
    id: int
    name: str
    email: str
    created_at: datetime

    # Present in listings
    total_projects: Optional[int] = None
    total_tasks: Optional[int] = None

    @field_serializer("created_at")
    def _timestamp(self, value: datetime) -> str:
        return format_timestamp(value)


class UserProjectSummary(SQLModel):
    id: int
    title: str
    status: str
    deadline: Optional[date] = None


class UserTaskSummary(SQLModel):
    id: int
    title: str
    status: TaskStatus
    priority: TaskPriority
    deadline: Optional[date] = None
    project_title: Optional[str] = None


class UserDetail(UserRead):
    total_tasks_assigned: int = 0
    total_tasks_created: int = 0
    projects: List[UserProjectSummary] = []
    tasks_assigned: List[UserTaskSummary] = []
