# tests/test_lifecycle.py

from __future__ import annotations

from datetime import datetime

import pytest

from taskboard.core.errors import TerminalProject
from taskboard.domain.lifecycle import apply_status_transition, ensure_project_accepts_tasks
from taskboard.models import Project

NOW = datetime(2024, 6, 1, 12, 0, 0)
EARLIER = datetime(2024, 5, 20, 8, 30, 0)


def test_entering_done_stamps_now() -> None:
    assert apply_status_transition("in_progress", None, "done", NOW) == NOW


def test_new_task_created_done_is_stamped() -> None:
    assert apply_status_transition(None, None, "done", NOW) == NOW


def test_leaving_done_clears_stamp() -> None:
    assert apply_status_transition("done", EARLIER, "pending", NOW) is None


def test_staying_done_keeps_original_stamp() -> None:
    assert apply_status_transition("done", EARLIER, "done", NOW) == EARLIER


def test_moving_between_open_statuses_keeps_none() -> None:
    assert apply_status_transition("pending", None, "in_progress", NOW) is None


@pytest.mark.parametrize("status", ["completed", "cancelled"])
def test_terminal_project_rejects_tasks(status: str) -> None:
    project = Project(id=7, title="p", description="d", status=status, created_by=1, created_at=NOW)
    with pytest.raises(TerminalProject):
        ensure_project_accepts_tasks(project)


@pytest.mark.parametrize("status", ["pending", "in_progress", "on_hold"])
def test_open_project_accepts_tasks(status: str) -> None:
    project = Project(id=7, title="p", description="d", status=status, created_by=1, created_at=NOW)
    ensure_project_accepts_tasks(project)
