from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from .api.responses import failure
from .api.v1.api import router as api_router
from .core.clock import Clock, SystemClock
from .core.config import Settings, get_settings
from .core.errors import TaskboardError
from .core.logging import configure_structlog
from .db.seed import seed_sample_data
from .db.session import build_engine
from .db.store import SQLRecordStore

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info("startup", project=settings.PROJECT_NAME)
    # Create tables on startup
    app.state.store.create_tables()
    if settings.SEED_SAMPLE_DATA:
        seed_sample_data(app.state.store, app.state.clock.now())
    yield
    logger.info("shutdown")


def _describe_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "Invalid request data: " + "; ".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(TaskboardError)
    async def taskboard_error_handler(request: Request, exc: TaskboardError):
        if exc.status_code >= 500:
            logger.error("request_failed", path=request.url.path, error=exc.message)
        else:
            logger.warning("request_rejected", path=request.url.path, error=exc.message, kind=type(exc).__name__)
        return JSONResponse(status_code=exc.status_code, content=failure(exc.message))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content=failure(_describe_validation_error(exc)))

    # Unknown routes (404) and wrong methods (405) use the same envelope
    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        messages = {404: "Endpoint not found", 405: "Method not allowed"}
        message = messages.get(exc.status_code, str(exc.detail))
        return JSONResponse(status_code=exc.status_code, content=failure(message), headers=exc.headers)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("unhandled_error", path=request.url.path)
        return JSONResponse(status_code=500, content=failure(f"Internal server error: {exc}"))


def create_app(
    settings: Optional[Settings] = None,
    clock: Optional[Clock] = None,
    configure_logging: bool = True,
) -> FastAPI:
    settings = settings or get_settings()
    if configure_logging:
        configure_structlog(log_level=settings.LOG_LEVEL, json_logs=settings.JSON_LOGS)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Users, projects and tasks with derived scheduling state",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.clock = clock or SystemClock()
    app.state.store = SQLRecordStore(build_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO))

    # CORS middleware so the frontend can call the API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API routers
    app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.get("/")
    def read_root():
        prefix = settings.API_V1_STR
        endpoints = {}
        for resource in ("users", "projects", "tasks"):
            endpoints.update({
                f"GET {prefix}/{resource}": f"List {resource}",
                f"POST {prefix}/{resource}": f"Create a {resource[:-1]}",
                f"GET {prefix}/{resource}/{{id}}": f"Get one {resource[:-1]}",
                f"PUT {prefix}/{resource}/{{id}}": f"Update a {resource[:-1]}",
                f"DELETE {prefix}/{resource}/{{id}}": f"Delete a {resource[:-1]}",
            })
        return {"message": settings.PROJECT_NAME, "version": app.version, "endpoints": endpoints}

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    return app


app = create_app()
