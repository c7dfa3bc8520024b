from sqlmodel import SQLModel
from pydantic import ConfigDict, field_serializer
from typing import Optional
from datetime import date, datetime

from .common import format_timestamp


class ProjectCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    deadline: Optional[str] = None
    status: Optional[str] = None
    created_by: Optional[int] = None


class ProjectUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    deadline: Optional[str] = None
    status: Optional[str] = None


class ProjectRead(SQLModel):
    id: int
    title: str
    description: str
    deadline: Optional[date] = None
    status: str
    created_by: int
    created_at: datetime

    created_by_name: Optional[str] = None
    created_by_email: Optional[str] = None

    # --- PROGRESS ---
    total_tasks: int = 0
    completed_tasks: int = 0
    pending_tasks: int = 0
    in_progress_tasks: int = 0
    progress_percentage: float = 0

    is_overdue: bool = False
    days_until_deadline: Optional[int] = None

    @field_serializer("created_at")
    def _timestamp(self, value: datetime) -> str:
        return format_timestamp(value)
