"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from task_manager.api import auth, tasks
from task_manager.config import Settings, get_settings
from task_manager.database import create_engine_for, create_session_factory, init_db
from task_manager.exceptions import TaskManagerError
from task_manager.services.tokens import TokenService

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure root logging once per process."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def describe_validation_error(exc: RequestValidationError) -> str:
    """Collapse FastAPI validation errors into one message."""
    missing = []
    invalid = []
    for error in exc.errors():
        loc = [str(part) for part in error["loc"] if part not in ("body", "query", "path")]
        field = ".".join(loc)
        if error["type"] == "missing":
            missing.append(field or "body")
        else:
            invalid.append(f"{field or 'body'} ({error['msg']})")

    parts = []
    if missing:
        parts.append(f"Missing required fields: {', '.join(missing)}")
    if invalid:
        parts.append(f"Invalid fields: {'; '.join(invalid)}")
    return ". ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors to JSON responses with a single detail message."""

    @app.exception_handler(TaskManagerError)
    async def handle_task_manager_error(request: Request, exc: TaskManagerError):
        headers = None
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=exc.status_code, content={"detail": exc.message}, headers=headers
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": describe_validation_error(exc)},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application with its database and token service."""
    settings = settings or get_settings()
    configure_logging(settings)

    engine = create_engine_for(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Handle application startup and shutdown events."""
        if settings.is_development:
            init_db(engine)
        yield
        engine.dispose()

    app = FastAPI(
        title="Task Manager API",
        description="Personal task management with token authentication",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.token_service = TokenService.from_settings(settings)

    # CORS middleware for development
    if settings.is_development:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["http://localhost:3000", "http://localhost:5173"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    # Register routers
    app.include_router(auth.router)
    app.include_router(tasks.router)

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "environment": settings.environment}

    return app
