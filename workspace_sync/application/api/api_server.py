from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from workspace_sync.config import Settings, get_settings
from workspace_sync.domain.errors import (
    WorkspaceSyncError, GenerationFailed, FollowUpLimitExceeded, NotFound
)
from workspace_sync.domain.workspace.workspace_service import WorkspaceService
from workspace_sync.infrastructure.generation.llm_generator import LLMContentGenerator
from workspace_sync.infrastructure.storage.memory_store import InMemoryStore
from .route.workspace import router
from .schema import ErrorResponse

logger = structlog.get_logger(__name__)

STATUS_CODES = {
    NotFound: 404,
    FollowUpLimitExceeded: 409,
    GenerationFailed: 502,
}


def create_app(service: WorkspaceService) -> FastAPI:
    """Build the HTTP surface around a wired service"""

    app = FastAPI(title="Workspace Sync")
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(WorkspaceSyncError)
    async def workspace_error_handler(request: Request, exc: WorkspaceSyncError):
        status_code = next(
            (code for error_type, code in STATUS_CODES.items() if isinstance(exc, error_type)),
            400
        )
        logger.warning("Request failed",
                       path=request.url.path,
                       error=type(exc).__name__,
                       status_code=status_code)
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=type(exc).__name__,
                detail=str(exc),
                data=_error_data(exc)
            ).model_dump()
        )

    app.include_router(router)
    return app


def _error_data(exc: WorkspaceSyncError) -> dict:
    if isinstance(exc, NotFound):
        return {"kind": exc.kind, "id": exc.identifier}
    if isinstance(exc, FollowUpLimitExceeded):
        return {"parent_id": exc.parent_id, "limit": exc.limit}
    if isinstance(exc, GenerationFailed):
        return {"workspace_id": exc.workspace_id}
    return {}


def create_default_app(settings: Optional[Settings] = None) -> FastAPI:
    """App backed by the in-memory store and the configured chat model"""

    from langchain.chat_models import init_chat_model

    settings = settings or get_settings()
    llm = init_chat_model(
        settings.llm_model,
        model_provider=settings.llm_provider,
        temperature=settings.llm_temperature
    )
    service = WorkspaceService.build(
        InMemoryStore(),
        LLMContentGenerator(llm),
        settings=settings
    )
    logger.info("Workspace service ready",
                llm_provider=settings.llm_provider,
                llm_model=settings.llm_model)
    return create_app(service)
