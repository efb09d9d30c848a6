from __future__ import annotations

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .logging_setup import setup_logging
from .repositories import TaskStore
from .routers import tasks as tasks_router
from .routers.tasks import INVALID_REQUEST_BODY, INVALID_TASK_ID
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Welcome to the Task List API! Use /api/tasks to access the API."

openapi_tags = [
    {"name": "root", "description": "Service welcome endpoint."},
    {"name": "tasks", "description": "Create, list, update, complete and delete tasks."},
]


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None, store: Optional[TaskStore] = None) -> FastAPI:
    """
    Build the FastAPI application around a single task store.

    Args:
        settings: Application settings; loaded from the environment when omitted.
        store: The store shared by every request; a fresh empty one when omitted.

    Returns:
        The configured FastAPI app. The store is reachable as app.state.store.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Task List API",
        description="In-memory task list service.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        redirect_slashes=False,
    )
    app.state.store = store if store is not None else TaskStore()

    # Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
        """
        Render every HTTP error as a plain-text message, keeping headers such as Allow on 405.
        """
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> PlainTextResponse:
        """
        Map request parsing failures to 400. Anything wrong with the path is a
        bad task id, which wins over a bad body when both are wrong.
        """
        errors = exc.errors()
        if any(err.get("loc", ())[:1] == ("path",) for err in errors):
            message = INVALID_TASK_ID
        else:
            message = INVALID_REQUEST_BODY
        logger.warning("Rejected %s %s: %s %s", request.method, request.url.path, message, errors)
        return PlainTextResponse(message, status_code=status.HTTP_400_BAD_REQUEST)

    # PUBLIC_INTERFACE
    @app.get("/", response_class=PlainTextResponse, summary="Welcome", tags=["root"])
    def root() -> str:
        """
        Plain-text welcome message pointing at the tasks API.
        """
        return WELCOME_MESSAGE

    app.include_router(tasks_router.router)

    logger.info("Application created with %s task(s) in store", app.state.store.count())
    return app


# PUBLIC_INTERFACE
def run() -> None:
    """
    Serve the application with uvicorn on the configured host and port.

    uvicorn exits the process with a non-zero status if the port cannot be bound.
    """
    settings = get_settings()
    setup_logging(settings.log_level)
    application = create_app(settings)
    logger.info("Starting server on http://%s:%s", settings.host, settings.port)
    uvicorn.run(
        application,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


# Instantiate global app for ASGI servers (uvicorn task_api.main:app)
app = create_app()


if __name__ == "__main__":
    run()
