from typing import Iterable, Optional


class TaskboardError(Exception):
    """Base class for every failure the API reports to its callers.

    ``status_code`` is the HTTP status the exception handler answers with.
    """

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingField(TaskboardError):
    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"Field '{field}' is required")
        self.field = field


class InvalidEnum(TaskboardError):
    def __init__(self, field: str, value: object, allowed: Iterable[str]):
        self.field = field
        self.value = value
        self.allowed = list(allowed)
        super().__init__(f"{field.capitalize()} must be one of: {', '.join(self.allowed)}")


class InvalidDate(TaskboardError):
    def __init__(self, field: str, value: object):
        super().__init__(f"{field.capitalize()} must be a valid date in YYYY-MM-DD format")
        self.field = field
        self.value = value


class InvalidEmail(TaskboardError):
    def __init__(self, email: str):
        super().__init__("Invalid email address")
        self.email = email


class NotFound(TaskboardError):
    status_code = 404

    def __init__(self, entity: str, entity_id: object):
        super().__init__(f"{entity.capitalize()} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class TerminalProject(TaskboardError):
    def __init__(self, project_id: int, status: str):
        super().__init__("Cannot add tasks to a completed or cancelled project")
        self.project_id = project_id
        self.status = status


class InvalidNumber(TaskboardError):
    def __init__(self, field: str, value: object):
        super().__init__(f"{field.capitalize()} must be an integer")
        self.field = field
        self.value = value


class DuplicateEmail(TaskboardError):
    def __init__(self, email: str):
        super().__init__("This email is already in use")
        self.email = email


class Conflict(TaskboardError):
    status_code = 409

    def __init__(self, projects: int, tasks: int):
        super().__init__(
            "Cannot delete this user because they have linked projects or tasks. "
            f"Projects: {projects}, Tasks: {tasks}"
        )
        self.projects = projects
        self.tasks = tasks


class Unexpected(TaskboardError):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(f"Internal server error: {message}")


class ConstraintViolation(Unexpected):
    """A write broke a table constraint. Callers that know the column translate it."""
