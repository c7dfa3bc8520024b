"""Read-time state computed from stored records and the current instant.

Nothing here is persisted; every request recomputes against the clock.
Day counts are whole days (the fractional part of the interval is dropped).
"""

from datetime import date, datetime, time
from typing import Dict, Iterable, Optional, Tuple

from ..models import Project, ProjectStatus, Task, TaskStatus, User
from ..schemas.project import ProjectRead
from ..schemas.task import TaskRead


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def whole_days_between(a: datetime, b: datetime) -> int:
    return abs(a - b).days


def deadline_state(deadline: Optional[date], now: datetime, finished: bool) -> Tuple[bool, Optional[int]]:
    """(is_overdue, days_until_deadline) for a deadline evaluated at ``now``.

    A deadline counts from the start of its day, so it is already passed
    during the day itself. The day count is negative once passed, whatever
    the status; only the overdue flag depends on ``finished``.
    """
    if deadline is None:
        return False, None
    due = start_of_day(deadline)
    passed = due < now
    days = whole_days_between(now, due)
    return passed and not finished, -days if passed else days


def derive_task_view(
    task: Task,
    now: datetime,
    project: Optional[Project] = None,
    assignee: Optional[User] = None,
    creator: Optional[User] = None,
) -> TaskRead:
    is_overdue, days_until_deadline = deadline_state(task.deadline, now, task.status == TaskStatus.done)

    days_to_complete = None
    if task.completed_at is not None:
        days_to_complete = whole_days_between(task.completed_at, task.created_at)

    return TaskRead(
        id=task.id,
        title=task.title,
        description=task.description,
        status=task.status,
        priority=task.priority,
        deadline=task.deadline,
        project_id=task.project_id,
        assigned_to=task.assigned_to,
        created_by=task.created_by,
        created_at=task.created_at,
        completed_at=task.completed_at,
        is_overdue=is_overdue,
        days_until_deadline=days_until_deadline,
        days_since_created=whole_days_between(now, task.created_at),
        days_to_complete=days_to_complete,
        project_title=project.title if project else None,
        project_status=project.status if project else None,
        assigned_to_name=assignee.name if assignee else None,
        assigned_to_email=assignee.email if assignee else None,
        created_by_name=creator.name if creator else None,
        created_by_email=creator.email if creator else None,
    )


def count_tasks_by_status(tasks: Iterable[Task]) -> Dict[str, int]:
    counts = {status.value: 0 for status in TaskStatus}
    for task in tasks:
        key = task.status.value if isinstance(task.status, TaskStatus) else task.status
        counts[key] = counts.get(key, 0) + 1
    return counts


def progress_percentage(completed: int, total: int) -> float:
    if total <= 0:
        return 0
    return round(completed / total * 100, 1)


def derive_project_view(
    project: Project,
    tasks: Iterable[Task],
    now: datetime,
    creator: Optional[User] = None,
) -> ProjectRead:
    tasks = [task for task in tasks if task.project_id == project.id]
    counts = count_tasks_by_status(tasks)
    total = len(tasks)
    completed = counts[TaskStatus.done.value]

    is_overdue, days_until_deadline = deadline_state(
        project.deadline, now, project.status == ProjectStatus.completed.value
    )

    return ProjectRead(
        id=project.id,
        title=project.title,
        description=project.description,
        deadline=project.deadline,
        status=project.status,
        created_by=project.created_by,
        created_at=project.created_at,
        created_by_name=creator.name if creator else "Unknown user",
        created_by_email=creator.email if creator else "",
        total_tasks=total,
        completed_tasks=completed,
        pending_tasks=counts[TaskStatus.pending.value],
        in_progress_tasks=counts[TaskStatus.in_progress.value],
        progress_percentage=progress_percentage(completed, total),
        is_overdue=is_overdue,
        days_until_deadline=days_until_deadline,
    )
