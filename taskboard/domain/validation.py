"""Input checks run before any mutation.

Every ``validate_*`` function either returns the normalized fields ready to
be written to the store or raises one of the ``TaskboardError`` subclasses.
Checks run in a fixed order so the same bad payload always reports the same
error.
"""

import re
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar

from email_validator import EmailNotValidError, validate_email

from ..core.errors import DuplicateEmail, InvalidDate, InvalidEmail, InvalidEnum, MissingField, NotFound
from ..db.store import RecordStore
from ..models import Project, ProjectStatus, Task, TaskPriority, TaskStatus, User
from ..schemas.project import ProjectCreate, ProjectUpdate
from ..schemas.task import TaskCreate, TaskUpdate
from ..schemas.user import UserCreate, UserUpdate
from .lifecycle import ensure_project_accepts_tasks

E = TypeVar("E", bound=Enum)

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


# --- FIELD HELPERS ---

def require_text(value: Optional[str], field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise MissingField(field)
    return text


def optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip()


def parse_deadline(value: Optional[str], field: str = "deadline") -> Optional[date]:
    """Empty means no deadline; anything else must be a real calendar date."""
    if value is None or not value.strip():
        return None
    raw = value.strip()
    if not _DATE_RE.match(raw):
        raise InvalidDate(field, value)
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise InvalidDate(field, value)


def parse_choice(value: Optional[str], enum_cls: Type[E], field: str, default: E) -> E:
    if value is None:
        return default
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidEnum(field, value, [member.value for member in enum_cls])


def normalize_email(value: Optional[str]) -> str:
    email = require_text(value, "email").lower()
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        raise InvalidEmail(email)
    return email


# --- REFERENCE HELPERS ---

def resolve_user(store: RecordStore, user_id: int) -> User:
    user = store.get(User, user_id)
    if user is None:
        raise NotFound("user", user_id)
    return user


def resolve_project(store: RecordStore, project_id: int) -> Project:
    project = store.get(Project, project_id)
    if project is None:
        raise NotFound("project", project_id)
    return project


def ensure_email_available(store: RecordStore, email: str, exclude_id: Optional[int] = None) -> None:
    for user in store.find(User, email=email):
        if user.id != exclude_id:
            raise DuplicateEmail(email)


# --- TASKS ---

def validate_task_create(payload: TaskCreate, store: RecordStore) -> Dict[str, Any]:
    title = require_text(payload.title, "title")
    if not payload.project_id:
        raise MissingField("project_id")
    if not payload.created_by:
        raise MissingField("created_by")

    project = resolve_project(store, payload.project_id)
    ensure_project_accepts_tasks(project)

    resolve_user(store, payload.created_by)
    assigned_to = None
    if payload.assigned_to:
        assigned_to = resolve_user(store, payload.assigned_to).id

    priority = parse_choice(payload.priority, TaskPriority, "priority", TaskPriority.medium)
    status = parse_choice(payload.status, TaskStatus, "status", TaskStatus.pending)
    deadline = parse_deadline(payload.deadline)

    return {
        "title": title,
        "description": optional_text(payload.description),
        "status": status,
        "priority": priority,
        "deadline": deadline,
        "project_id": project.id,
        "assigned_to": assigned_to,
        "created_by": payload.created_by,
    }


def validate_task_update(existing: Task, patch: TaskUpdate, store: RecordStore) -> Dict[str, Any]:
    """Return the full set of patchable fields, defaulting to ``existing``.

    ``status`` is always present so the completion timestamp can be
    recomputed against the effective status.
    """
    provided = patch.model_dump(exclude_unset=True)

    title = existing.title
    if "title" in provided:
        title = require_text(provided["title"], "title")

    assigned_to = existing.assigned_to
    if "assigned_to" in provided:
        assigned_to = None
        if provided["assigned_to"]:
            assigned_to = resolve_user(store, provided["assigned_to"]).id

    priority = parse_choice(provided.get("priority"), TaskPriority, "priority", TaskPriority(existing.priority))
    status = parse_choice(provided.get("status"), TaskStatus, "status", TaskStatus(existing.status))

    deadline = existing.deadline
    if "deadline" in provided:
        deadline = parse_deadline(provided["deadline"])

    description = existing.description
    if "description" in provided:
        description = optional_text(provided["description"])

    return {
        "title": title,
        "description": description,
        "status": status,
        "priority": priority,
        "deadline": deadline,
        "assigned_to": assigned_to,
    }


# --- PROJECTS ---

def validate_project_create(payload: ProjectCreate, store: RecordStore) -> Dict[str, Any]:
    title = require_text(payload.title, "title")
    description = require_text(payload.description, "description")
    if not payload.created_by:
        raise MissingField("created_by")
    creator = resolve_user(store, payload.created_by)

    return {
        "title": title,
        "description": description,
        "deadline": parse_deadline(payload.deadline),
        "status": payload.status if payload.status else ProjectStatus.pending.value,
        "created_by": creator.id,
    }


def validate_project_update(patch: ProjectUpdate) -> Dict[str, Any]:
    """Only the fields present in the patch are returned."""
    provided = patch.model_dump(exclude_unset=True)
    fields: Dict[str, Any] = {}

    if "title" in provided:
        fields["title"] = require_text(provided["title"], "title")
    if "description" in provided:
        fields["description"] = require_text(provided["description"], "description")
    if "deadline" in provided:
        fields["deadline"] = parse_deadline(provided["deadline"])
    # Status is free-form; null leaves it alone
    if provided.get("status"):
        fields["status"] = provided["status"]

    return fields


# --- USERS ---

def validate_user_create(payload: UserCreate, store: RecordStore) -> Dict[str, Any]:
    name = require_text(payload.name, "name")
    email = normalize_email(payload.email)
    ensure_email_available(store, email)
    return {"name": name, "email": email}


def validate_user_update(existing: User, patch: UserUpdate, store: RecordStore) -> Dict[str, Any]:
    provided = patch.model_dump(exclude_unset=True)
    fields: Dict[str, Any] = {}

    if "name" in provided:
        fields["name"] = require_text(provided["name"], "name")
    if "email" in provided:
        email = normalize_email(provided["email"])
        ensure_email_available(store, email, exclude_id=existing.id)
        fields["email"] = email

    return fields
