from sqlmodel import SQLModel
from pydantic import ConfigDict, field_serializer, model_serializer
from typing import Optional
from datetime import date, datetime

from ..models.task import TaskStatus, TaskPriority
from .common import format_timestamp


# Raw input: enum tokens and dates are checked by the validation layer so
# the caller gets a precise error instead of a generic type failure.
class TaskCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    deadline: Optional[str] = None
    project_id: Optional[int] = None
    assigned_to: Optional[int] = None
    created_by: Optional[int] = None


class TaskUpdate(SQLModel):
    """Patch: unset fields keep their value, null clears description/deadline/assigned_to."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    deadline: Optional[str] = None
    assigned_to: Optional[int] = None


class TaskRead(SQLModel):
    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    deadline: Optional[date] = None
    project_id: int
    assigned_to: Optional[int] = None
    created_by: int
    created_at: datetime
    completed_at: Optional[datetime] = None

    # --- DERIVED STATE ---
    is_overdue: bool = False
    days_until_deadline: Optional[int] = None
    days_since_created: int = 0
    days_to_complete: Optional[int] = None

    # --- RESOLVED REFERENCES ---
    project_title: Optional[str] = None
    project_status: Optional[str] = None
    assigned_to_name: Optional[str] = None
    assigned_to_email: Optional[str] = None
    created_by_name: Optional[str] = None
    created_by_email: Optional[str] = None

    @field_serializer("created_at", "completed_at")
    def _timestamp(self, value: Optional[datetime]) -> Optional[str]:
        return format_timestamp(value)

    @model_serializer(mode="wrap")
    def _drop_unfinished(self, handler):
        data = handler(self)
        # days_to_complete only exists for finished tasks
        if data.get("days_to_complete") is None:
            data.pop("days_to_complete", None)
        return data
