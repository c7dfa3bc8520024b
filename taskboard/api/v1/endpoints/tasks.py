from fastapi import APIRouter, Depends, Query, status
from typing import Dict, Iterable, List, Optional
from datetime import datetime
import structlog

from taskboard.api.deps import get_clock, get_store
from taskboard.api.responses import success
from taskboard.core.clock import Clock
from taskboard.core.errors import NotFound
from taskboard.db.store import RecordStore
from taskboard.domain.derived import derive_task_view
from taskboard.domain.lifecycle import apply_status_transition
from taskboard.domain.queries import TaskFilters, compose_task_listing
from taskboard.domain.validation import validate_task_create, validate_task_update
from taskboard.models import Project, Task, User
from taskboard.schemas.task import TaskCreate, TaskRead, TaskUpdate

router = APIRouter()
logger = structlog.get_logger(__name__)


def _render_many(store: RecordStore, tasks: Iterable[Task], now: datetime) -> List[TaskRead]:
    projects: Dict[int, Project] = {p.id: p for p in store.list_all(Project)}
    users: Dict[int, User] = {u.id: u for u in store.list_all(User)}
    return [
        derive_task_view(
            task,
            now,
            project=projects.get(task.project_id),
            assignee=users.get(task.assigned_to) if task.assigned_to else None,
            creator=users.get(task.created_by),
        )
        for task in tasks
    ]


def _render(store: RecordStore, task: Task, now: datetime) -> TaskRead:
    return derive_task_view(
        task,
        now,
        project=store.get(Project, task.project_id),
        assignee=store.get(User, task.assigned_to) if task.assigned_to else None,
        creator=store.get(User, task.created_by),
    )


def _get_task_or_404(store: RecordStore, task_id: int) -> Task:
    task = store.get(Task, task_id)
    if task is None:
        raise NotFound("task", task_id)
    return task


@router.get("/")
def list_tasks(
    project_id: Optional[str] = None,
    assigned_to: Optional[str] = None,
    task_status: Optional[str] = Query(None, alias="status"),
    priority: Optional[str] = None,
    store: RecordStore = Depends(get_store),
    clock: Clock = Depends(get_clock)
):
    filters = TaskFilters.from_query(project_id, assigned_to, task_status, priority)
    tasks = compose_task_listing(store.list_all(Task), filters)
    views = _render_many(store, tasks, clock.now())
    return success(
        views,
        "Tasks listed successfully",
        total=len(views),
        filters_applied=filters.applied(),
    )


@router.get("/{task_id}")
def get_task(
    task_id: int,
    store: RecordStore = Depends(get_store),
    clock: Clock = Depends(get_clock)
):
    task = _get_task_or_404(store, task_id)
    return success(_render(store, task, clock.now()), "Task found")


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_task(
    task_create: TaskCreate,
    store: RecordStore = Depends(get_store),
    clock: Clock = Depends(get_clock)
):
    fields = validate_task_create(task_create, store)
    now = clock.now()

    db_task = Task(
        **fields,
        created_at=now,
        completed_at=apply_status_transition(None, None, fields["status"], now),
    )
    db_task = store.insert(db_task)
    logger.info("task_created", task_id=db_task.id, project_id=db_task.project_id, status=fields["status"].value)
    return success(_render(store, db_task, now), "Task created successfully")


@router.put("/{task_id}")
def update_task(
    task_id: int,
    task_update: TaskUpdate,
    store: RecordStore = Depends(get_store),
    clock: Clock = Depends(get_clock)
):
    existing = _get_task_or_404(store, task_id)
    fields = validate_task_update(existing, task_update, store)
    now = clock.now()

    # Recomputed on every update, even when the patch leaves status alone
    fields["completed_at"] = apply_status_transition(
        existing.status, existing.completed_at, fields["status"], now
    )

    task = store.update(Task, task_id, fields)
    if task is None:
        raise NotFound("task", task_id)
    logger.info("task_updated", task_id=task_id, status=fields["status"].value)
    return success(_render(store, task, now), "Task updated successfully")


@router.delete("/{task_id}")
def delete_task(
    task_id: int,
    store: RecordStore = Depends(get_store)
):
    task = _get_task_or_404(store, task_id)
    project = store.get(Project, task.project_id)
    project_title = project.title if project else "unknown project"

    if not store.delete(Task, task_id):
        raise NotFound("task", task_id)
    logger.info("task_deleted", task_id=task_id, project_id=task.project_id)
    return success(message=f"Task '{task.title}' from project '{project_title}' was deleted successfully")
