# Importing every table here registers them all on SQLModel.metadata
from .user import User
from .project import Project, ProjectStatus, TERMINAL_PROJECT_STATUSES
from .task import Task, TaskStatus, TaskPriority

__all__ = [
    "User",
    "Project",
    "ProjectStatus",
    "TERMINAL_PROJECT_STATUSES",
    "Task",
    "TaskStatus",
    "TaskPriority",
]
