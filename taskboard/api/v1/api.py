from fastapi import APIRouter
from .endpoints import users, projects, tasks

router = APIRouter()

# Include all API endpoints
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(projects.router, prefix="/projects", tags=["projects"])
router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
