from sqlmodel import SQLModel, Field
from sqlalchemy import DateTime
from typing import Optional
from datetime import date, datetime
from enum import Enum


class TaskStatus(str, Enum):
    pending = "pending"
    in_progress = "in_progress"
    done = "done"


class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class Task(SQLModel, table=True):
    __tablename__ = "tasks"

    # Assigned by the record store (max(id) + 1)
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(nullable=False)
    description: Optional[str] = Field(default=None)
    status: TaskStatus = Field(default=TaskStatus.pending)
    priority: TaskPriority = Field(default=TaskPriority.medium)
    deadline: Optional[date] = Field(default=None)

    # Plain ids, resolved by lookup. No FK constraints: project deletes do not cascade.
    project_id: int = Field(index=True, nullable=False)
    assigned_to: Optional[int] = Field(default=None, index=True)
    created_by: int = Field(index=True, nullable=False)

    # Naive local wall-clock time, stored without a zone
    created_at: datetime = Field(sa_type=DateTime, nullable=False)
    completed_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
