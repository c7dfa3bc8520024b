from sqlmodel import SQLModel, Field
from sqlalchemy import DateTime
from typing import Optional
from datetime import date, datetime
from enum import Enum


class ProjectStatus(str, Enum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


# A project in one of these accepts no new tasks
TERMINAL_PROJECT_STATUSES = frozenset({ProjectStatus.completed.value, ProjectStatus.cancelled.value})


class Project(SQLModel, table=True):
    __tablename__ = "projects"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(nullable=False)
    description: str = Field(nullable=False)
    deadline: Optional[date] = Field(default=None)

    # Free-form: unknown tokens are stored as given
    status: str = Field(default=ProjectStatus.pending.value, nullable=False)

    created_by: int = Field(index=True, nullable=False)
    created_at: datetime = Field(sa_type=DateTime, nullable=False)
