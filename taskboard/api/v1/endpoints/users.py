from fastapi import APIRouter, Depends, status
from collections import Counter
from datetime import date
import structlog

from taskboard.api.deps import get_clock, get_store
from taskboard.api.responses import success
from taskboard.core.clock import Clock
from taskboard.core.errors import ConstraintViolation, DuplicateEmail, NotFound
from taskboard.db.store import RecordStore
from taskboard.domain.integrity import ensure_user_deletable
from taskboard.domain.validation import validate_user_create, validate_user_update
from taskboard.models import Project, Task, User
from taskboard.schemas.user import (
    UserCreate,
    UserDetail,
    UserProjectSummary,
    UserRead,
    UserTaskSummary,
    UserUpdate,
)

router = APIRouter()
logger = structlog.get_logger(__name__)


def _get_user_or_404(store: RecordStore, user_id: int) -> User:
    user = store.get(User, user_id)
    if user is None:
        raise NotFound("user", user_id)
    return user


def _read(user: User) -> UserRead:
    return UserRead(id=user.id, name=user.name, email=user.email, created_at=user.created_at)


@router.get("/")
def list_users(store: RecordStore = Depends(get_store)):
    projects_per_user = Counter(p.created_by for p in store.list_all(Project))
    tasks_per_user = Counter(t.assigned_to for t in store.list_all(Task) if t.assigned_to)

    users = sorted(store.list_all(User), key=lambda u: (u.name, u.id))
    views = [
        UserRead(
            id=u.id,
            name=u.name,
            email=u.email,
            created_at=u.created_at,
            total_projects=projects_per_user[u.id],
            total_tasks=tasks_per_user[u.id],
        )
        for u in users
    ]
    return success(views, "Users listed successfully", total=len(views))


@router.get("/{user_id}")
def get_user(
    user_id: int,
    store: RecordStore = Depends(get_store)
):
    user = _get_user_or_404(store, user_id)

    projects = sorted(store.find(Project, created_by=user_id), key=lambda p: (p.created_at, p.id), reverse=True)
    assigned = store.find(Task, assigned_to=user_id)
    assigned.sort(key=lambda t: (t.deadline is None, t.deadline or date.max, t.id))
    project_titles = {p.id: p.title for p in store.list_all(Project)}

    detail = UserDetail(
        id=user.id,
        name=user.name,
        email=user.email,
        created_at=user.created_at,
        total_projects=len(projects),
        total_tasks=len(assigned),
        total_tasks_assigned=len(assigned),
        total_tasks_created=store.count(Task, {"created_by": user_id}),
        projects=[
            UserProjectSummary(id=p.id, title=p.title, status=p.status, deadline=p.deadline)
            for p in projects
        ],
        tasks_assigned=[
            UserTaskSummary(
                id=t.id,
                title=t.title,
                status=t.status,
                priority=t.priority,
                deadline=t.deadline,
                project_title=project_titles.get(t.project_id),
            )
            for t in assigned
        ],
    )
    return success(detail, "User found")


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_user(
    user_create: UserCreate,
    store: RecordStore = Depends(get_store),
    clock: Clock = Depends(get_clock)
):
    fields = validate_user_create(user_create, store)
    try:
        db_user = store.insert(User(**fields, created_at=clock.now()))
    except ConstraintViolation:
        # Lost a race with a concurrent create for the same email
        raise DuplicateEmail(fields["email"])
    logger.info("user_created", user_id=db_user.id)
    return success(_read(db_user), "User created successfully")


@router.put("/{user_id}")
def update_user(
    user_id: int,
    user_update: UserUpdate,
    store: RecordStore = Depends(get_store)
):
    user = _get_user_or_404(store, user_id)
    fields = validate_user_update(user, user_update, store)

    if fields:
        try:
            user = store.update(User, user_id, fields)
        except ConstraintViolation:
            raise DuplicateEmail(fields.get("email", user.email))
        if user is None:
            raise NotFound("user", user_id)
        logger.info("user_updated", user_id=user_id, fields=sorted(fields))
    return success(_read(user), "User updated successfully")


@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    store: RecordStore = Depends(get_store)
):
    _get_user_or_404(store, user_id)
    ensure_user_deletable(store, user_id)

    if not store.delete(User, user_id):
        raise NotFound("user", user_id)
    logger.info("user_deleted", user_id=user_id)
    return success(message="User deleted successfully")
