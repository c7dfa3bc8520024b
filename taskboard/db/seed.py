from datetime import date, datetime

import structlog

from ..domain.lifecycle import apply_status_transition
from ..models import Project, ProjectStatus, Task, TaskPriority, TaskStatus, User
from .store import RecordStore

logger = structlog.get_logger(__name__)


def seed_sample_data(store: RecordStore, now: datetime) -> bool:
    """Insert a few demo records when the database is completely empty.

    Returns True when anything was written.
    """
    if store.list_all(User) or store.list_all(Project) or store.list_all(Task):
        return False

    joao = store.insert(User(name="João Silva", email="joao@email.com", created_at=now))
    maria = store.insert(User(name="Maria Santos", email="maria@email.com", created_at=now))
    store.insert(User(name="Pedro Oliveira", email="pedro@email.com", created_at=now))

    website = store.insert(Project(
        title="Company Website",
        description="Build the new corporate website",
        deadline=date(2024, 3, 15),
        status=ProjectStatus.pending.value,
        created_by=joao.id,
        created_at=now,
    ))
    store.insert(Project(
        title="Mobile App",
        description="Task management app for phones",
        deadline=date(2024, 4, 20),
        status=ProjectStatus.in_progress.value,
        created_by=maria.id,
        created_at=now,
    ))

    for title, description, status, deadline, assignee in (
        ("Create initial layout", "Design the main pages", TaskStatus.in_progress, date(2024, 2, 15), maria),
        ("Set up database", "Define tables and relationships", TaskStatus.done, date(2024, 2, 10), joao),
    ):
        store.insert(Task(
            title=title,
            description=description,
            status=status,
            priority=TaskPriority.high,
            deadline=deadline,
            project_id=website.id,
            assigned_to=assignee.id,
            created_by=joao.id,
            created_at=now,
            completed_at=apply_status_transition(None, None, status, now),
        ))

    logger.info("sample_data_seeded", users=3, projects=2, tasks=2)
    return True
