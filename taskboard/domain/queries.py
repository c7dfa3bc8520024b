from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..core.errors import InvalidNumber
from ..models import Task

PRIORITY_RANK = {"high": 1, "medium": 2, "low": 3}
UNKNOWN_PRIORITY_RANK = len(PRIORITY_RANK) + 1


def _token(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _blank_to_none(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    return raw.strip() or None


def _id_filter(raw: Optional[str], field: str) -> Optional[int]:
    value = _blank_to_none(raw)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise InvalidNumber(field, raw)


@dataclass(frozen=True)
class TaskFilters:
    """Exact-match predicates for task listing. ``None`` matches everything."""

    project_id: Optional[int] = None
    assigned_to: Optional[int] = None
    status: Optional[str] = None
    priority: Optional[str] = None

    @classmethod
    def from_query(
        cls,
        project_id: Optional[str] = None,
        assigned_to: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> "TaskFilters":
        """Build filters from raw query strings. Blank values mean no filter."""
        return cls(
            project_id=_id_filter(project_id, "project_id"),
            assigned_to=_id_filter(assigned_to, "assigned_to"),
            status=_blank_to_none(status),
            priority=_blank_to_none(priority),
        )

    def matches(self, task: Task) -> bool:
        if self.project_id is not None and task.project_id != self.project_id:
            return False
        if self.assigned_to is not None and task.assigned_to != self.assigned_to:
            return False
        if self.status is not None and _token(task.status) != self.status:
            return False
        if self.priority is not None and _token(task.priority) != self.priority:
            return False
        return True

    def applied(self) -> Dict[str, Any]:
        return {
            "project_id": self.project_id,
            "assigned_to": self.assigned_to,
            "status": self.status,
            "priority": self.priority,
        }


def task_sort_key(task: Task) -> Tuple[int, bool, date, Any, int]:
    """Priority (high first), deadline (soonest first, none last), newest first, then id."""
    rank = PRIORITY_RANK.get(_token(task.priority), UNKNOWN_PRIORITY_RANK)
    # datetime.max - created_at grows as created_at shrinks: newest sorts first
    return (
        rank,
        task.deadline is None,
        task.deadline or date.max,
        datetime.max - task.created_at,
        task.id,
    )


def compose_task_listing(tasks: Iterable[Task], filters: TaskFilters) -> List[Task]:
    return sorted((task for task in tasks if filters.matches(task)), key=task_sort_key)
