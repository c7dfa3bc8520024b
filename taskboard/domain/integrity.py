from typing import Tuple

import structlog

from ..core.errors import Conflict
from ..db.store import RecordStore
from ..models import Project, Task

logger = structlog.get_logger(__name__)


def count_user_links(store: RecordStore, user_id: int) -> Tuple[int, int]:
    """(projects created by the user, tasks assigned to or created by the user)."""
    projects = store.count(Project, {"created_by": user_id})
    tasks = store.count(Task, {"assigned_to": user_id, "created_by": user_id}, match_any=True)
    return projects, tasks


def can_delete_user(store: RecordStore, user_id: int) -> bool:
    projects, tasks = count_user_links(store, user_id)
    return projects == 0 and tasks == 0


def ensure_user_deletable(store: RecordStore, user_id: int) -> None:
    projects, tasks = count_user_links(store, user_id)
    if projects or tasks:
        logger.warning("user_delete_blocked", user_id=user_id, projects=projects, tasks=tasks)
        raise Conflict(projects=projects, tasks=tasks)
