from fastapi import APIRouter, Depends, status
from datetime import datetime
import structlog

from taskboard.api.deps import get_clock, get_store
from taskboard.api.responses import success
from taskboard.core.clock import Clock
from taskboard.core.errors import NotFound
from taskboard.db.store import RecordStore
from taskboard.domain.derived import derive_project_view
from taskboard.domain.validation import validate_project_create, validate_project_update
from taskboard.models import Project, Task, User
from taskboard.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate

router = APIRouter()
logger = structlog.get_logger(__name__)


def _render(store: RecordStore, project: Project, now: datetime) -> ProjectRead:
    return derive_project_view(
        project,
        store.find(Task, project_id=project.id),
        now,
        creator=store.get(User, project.created_by),
    )


def _get_project_or_404(store: RecordStore, project_id: int) -> Project:
    project = store.get(Project, project_id)
    if project is None:
        raise NotFound("project", project_id)
    return project


@router.get("/")
def list_projects(
    store: RecordStore = Depends(get_store),
    clock: Clock = Depends(get_clock)
):
    now = clock.now()
    tasks = store.list_all(Task)
    users = {u.id: u for u in store.list_all(User)}
    views = [
        derive_project_view(project, tasks, now, creator=users.get(project.created_by))
        for project in store.list_all(Project)
    ]
    return success(views, "Projects listed successfully", total=len(views))


@router.get("/{project_id}")
def get_project(
    project_id: int,
    store: RecordStore = Depends(get_store),
    clock: Clock = Depends(get_clock)
):
    project = _get_project_or_404(store, project_id)
    return success(_render(store, project, clock.now()), "Project found")


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_project(
    project_create: ProjectCreate,
    store: RecordStore = Depends(get_store),
    clock: Clock = Depends(get_clock)
):
    fields = validate_project_create(project_create, store)
    now = clock.now()

    db_project = store.insert(Project(**fields, created_at=now))
    logger.info("project_created", project_id=db_project.id, created_by=db_project.created_by)
    return success(_render(store, db_project, now), "Project created successfully")


@router.put("/{project_id}")
def update_project(
    project_id: int,
    project_update: ProjectUpdate,
    store: RecordStore = Depends(get_store),
    clock: Clock = Depends(get_clock)
):
    project = _get_project_or_404(store, project_id)
    fields = validate_project_update(project_update)

    if fields:
        project = store.update(Project, project_id, fields)
        if project is None:
            raise NotFound("project", project_id)
        logger.info("project_updated", project_id=project_id, fields=sorted(fields))
    return success(_render(store, project, clock.now()), "Project updated successfully")


# No guard and no cascade: tasks of a deleted project are left in place.
@router.delete("/{project_id}")
def delete_project(
    project_id: int,
    store: RecordStore = Depends(get_store)
):
    if not store.delete(Project, project_id):
        raise NotFound("project", project_id)
    logger.info("project_deleted", project_id=project_id)
    return success(message="Project deleted successfully")
