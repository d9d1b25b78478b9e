from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import BoardError
from .repositories import DocumentStore, get_document_store
from .routers import board as board_router
from .routers import tasks as tasks_router
from .service import BoardService
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "board", "description": "Read the whole board document and its recent history."},
    {
        "name": "tasks",
        "description": "Create, update, delete and move tasks between columns.",
    },
]


async def board_error_handler(request: Request, exc: BoardError) -> JSONResponse:
    """
    Map board failures onto their HTTP status.

    Response format:
        {"error": "<ErrorKind>", "detail": "<message>"}
    """
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "detail": exc.message},
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for request validation errors.

    Response format:
        {
            "error": "ValidationError",
            "detail": [... pydantic/fastapi error details ...],
            "message": "Request validation failed"
        }
    """
    return JSONResponse(
        status_code=422,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": exc.errors(),
        },
    )


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None, store: Optional[DocumentStore] = None) -> FastAPI:
    """
    Build the FastAPI application.

    One BoardService is constructed here and shared by every request through
    ``app.state``; pass ``store`` to run against a specific document store
    (tests use InMemoryDocumentStore).
    """
    settings = settings or get_settings()
    document_store = store or get_document_store(settings)

    app = FastAPI(
        title="Kanban Board Backend",
        description="Authoritative board store: tasks, ordered columns, moves and recent history.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )
    app.state.settings = settings
    app.state.board_service = BoardService(document_store)

    # Configure CORS based on settings (CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(BoardError, board_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]

    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health and the persistence backend.
        """
        return {"message": "Healthy", "backend": document_store.name}

    @app.get("/api/health", summary="API Health", tags=["health"])
    def api_health():
        return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}

    app.include_router(board_router.router)
    app.include_router(tasks_router.router)
    return app


app = create_app()
