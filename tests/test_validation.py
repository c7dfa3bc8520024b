# tests/test_validation.py

from __future__ import annotations

from datetime import date, datetime
from types import SimpleNamespace

import pytest

from taskboard.core.errors import (
    DuplicateEmail,
    InvalidDate,
    InvalidEmail,
    InvalidEnum,
    MissingField,
    NotFound,
    TerminalProject,
)
from taskboard.db.store import SQLRecordStore
from taskboard.domain.validation import (
    parse_deadline,
    validate_project_create,
    validate_project_update,
    validate_task_create,
    validate_task_update,
    validate_user_create,
    validate_user_update,
)
from taskboard.models import Task, TaskPriority, TaskStatus
from taskboard.schemas.project import ProjectCreate, ProjectUpdate
from taskboard.schemas.task import TaskCreate, TaskUpdate
from taskboard.schemas.user import UserCreate, UserUpdate


def _task_payload(records: SimpleNamespace, **overrides) -> TaskCreate:
    fields = dict(title="  Write copy  ", project_id=records.open_project.id, created_by=records.ana.id)
    fields.update(overrides)
    return TaskCreate(**fields)


# --- TASK CREATE ---

def test_task_defaults_and_trimming(store: SQLRecordStore, records: SimpleNamespace) -> None:
    fields = validate_task_create(_task_payload(records, description="  body "), store)
    assert fields["title"] == "Write copy"
    assert fields["description"] == "body"
    assert fields["status"] == TaskStatus.pending
    assert fields["priority"] == TaskPriority.medium
    assert fields["deadline"] is None
    assert fields["assigned_to"] is None


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"title": "   "}, "title"),
        ({"project_id": None}, "project_id"),
        ({"created_by": None}, "created_by"),
    ],
)
def test_task_missing_fields(store, records, overrides, field) -> None:
    with pytest.raises(MissingField) as exc:
        validate_task_create(_task_payload(records, **overrides), store)
    assert exc.value.field == field


def test_task_unknown_project(store, records) -> None:
    with pytest.raises(NotFound) as exc:
        validate_task_create(_task_payload(records, project_id=999), store)
    assert exc.value.entity == "project"


def test_task_terminal_project(store, records) -> None:
    with pytest.raises(TerminalProject):
        validate_task_create(_task_payload(records, project_id=records.closed_project.id), store)


@pytest.mark.parametrize("field", ["created_by", "assigned_to"])
def test_task_unknown_user(store, records, field) -> None:
    with pytest.raises(NotFound) as exc:
        validate_task_create(_task_payload(records, **{field: 999}), store)
    assert exc.value.entity == "user"


def test_task_bad_enums(store, records) -> None:
    with pytest.raises(InvalidEnum) as exc:
        validate_task_create(_task_payload(records, priority="urgent"), store)
    assert exc.value.field == "priority"

    with pytest.raises(InvalidEnum) as exc:
        validate_task_create(_task_payload(records, status="concluida"), store)
    assert exc.value.field == "status"


@pytest.mark.parametrize("raw", ["2024-02-30", "01/02/2024", "2024-1-5", "tomorrow"])
def test_bad_deadlines(raw: str) -> None:
    with pytest.raises(InvalidDate):
        parse_deadline(raw)


def test_good_and_empty_deadlines() -> None:
    assert parse_deadline("2024-02-29") == date(2024, 2, 29)
    assert parse_deadline("") is None
    assert parse_deadline(None) is None


# --- TASK UPDATE ---

def _existing_task(records: SimpleNamespace, **overrides) -> Task:
    fields = dict(
        id=1,
        title="Old",
        description="desc",
        status=TaskStatus.in_progress,
        priority=TaskPriority.high,
        deadline=date(2024, 7, 1),
        project_id=records.open_project.id,
        assigned_to=records.bruno.id,
        created_by=records.ana.id,
        created_at=datetime(2024, 5, 1, 9, 0, 0),
    )
    fields.update(overrides)
    return Task(**fields)


def test_task_update_keeps_omitted_fields(store, records) -> None:
    fields = validate_task_update(_existing_task(records), TaskUpdate(priority="low"), store)
    assert fields["title"] == "Old"
    assert fields["description"] == "desc"
    assert fields["status"] == TaskStatus.in_progress
    assert fields["priority"] == TaskPriority.low
    assert fields["deadline"] == date(2024, 7, 1)
    assert fields["assigned_to"] == records.bruno.id


def test_task_update_null_clears_nullable_fields(store, records) -> None:
    patch = TaskUpdate(assigned_to=None, deadline=None, description=None)
    fields = validate_task_update(_existing_task(records), patch, store)
    assert fields["assigned_to"] is None
    assert fields["deadline"] is None
    assert fields["description"] is None


def test_task_update_rejects_empty_title(store, records) -> None:
    with pytest.raises(MissingField):
        validate_task_update(_existing_task(records), TaskUpdate(title=""), store)


def test_task_update_checks_assignee(store, records) -> None:
    with pytest.raises(NotFound):
        validate_task_update(_existing_task(records), TaskUpdate(assigned_to=404), store)


def test_task_update_allowed_on_terminal_project(store, records) -> None:
    task = _existing_task(records, project_id=records.closed_project.id)
    fields = validate_task_update(task, TaskUpdate(status="done"), store)
    assert fields["status"] == TaskStatus.done


# --- PROJECTS ---

def test_project_requires_title_description_and_creator(store, records) -> None:
    with pytest.raises(MissingField):
        validate_project_create(ProjectCreate(title="x", created_by=records.ana.id), store)
    with pytest.raises(MissingField):
        validate_project_create(ProjectCreate(description="x", created_by=records.ana.id), store)
    with pytest.raises(MissingField):
        validate_project_create(ProjectCreate(title="x", description="y"), store)
    with pytest.raises(NotFound):
        validate_project_create(ProjectCreate(title="x", description="y", created_by=404), store)


def test_project_status_is_free_form(store, records) -> None:
    fields = validate_project_create(
        ProjectCreate(title="x", description="y", created_by=records.ana.id, status="on_hold"), store
    )
    assert fields["status"] == "on_hold"

    default = validate_project_create(ProjectCreate(title="x", description="y", created_by=records.ana.id), store)
    assert default["status"] == "pending"


def test_project_update_only_returns_patched_fields() -> None:
    assert validate_project_update(ProjectUpdate(status="completed")) == {"status": "completed"}
    assert validate_project_update(ProjectUpdate(deadline=None)) == {"deadline": None}
    with pytest.raises(InvalidDate):
        validate_project_update(ProjectUpdate(deadline="2024-13-01"))


# --- USERS ---

def test_user_email_is_normalized(store) -> None:
    fields = validate_user_create(UserCreate(name=" João ", email=" Joao@Email.com "), store)
    assert fields == {"name": "João", "email": "joao@email.com"}


def test_user_rejects_bad_email(store) -> None:
    with pytest.raises(InvalidEmail):
        validate_user_create(UserCreate(name="x", email="not-an-email"), store)


def test_user_duplicate_email_ignores_case(store, records) -> None:
    with pytest.raises(DuplicateEmail):
        validate_user_create(UserCreate(name="x", email="ANA@email.com"), store)


def test_user_update_may_keep_own_email(store, records) -> None:
    fields = validate_user_update(records.ana, UserUpdate(email="Ana@Email.com"), store)
    assert fields == {"email": "ana@email.com"}
    with pytest.raises(DuplicateEmail):
        validate_user_update(records.ana, UserUpdate(email="bruno@email.com"), store)
