from datetime import datetime
from typing import Optional

from ..core.errors import TerminalProject
from ..models import Project, TaskStatus, TERMINAL_PROJECT_STATUSES


def apply_status_transition(
    previous_status: Optional[str],
    previous_completed_at: Optional[datetime],
    new_status: str,
    now: datetime,
) -> Optional[datetime]:
    """Completion timestamp for a task moving from ``previous_status`` to ``new_status``.

    Entering ``done`` stamps ``now``, leaving it clears the stamp, anything
    else keeps whatever was there. A new task has no previous status.
    """
    was_done = previous_status == TaskStatus.done
    is_done = new_status == TaskStatus.done

    if is_done and not was_done:
        return now
    if was_done and not is_done:
        return None
    return previous_completed_at


def is_terminal_project(status: Optional[str]) -> bool:
    return status in TERMINAL_PROJECT_STATUSES


def ensure_project_accepts_tasks(project: Project) -> None:
    if is_terminal_project(project.status):
        raise TerminalProject(project.id, project.status)
