"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware

from highway_assist.api.routes import router as documents_router
from highway_assist.documents import DocumentIngestionTracker
from highway_assist.errors import AssistError
from highway_assist.llm import OllamaClient
from highway_assist.llm.model_catalog import to_option
from highway_assist.models import HealthResponse, ModelOption
from highway_assist.services import close_services, get_ollama_client, get_tracker

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    logger.info("Starting Highway Assist API...")
    yield
    logger.info("Shutting down Highway Assist API...")
    await close_services()


def create_app(
    ollama: OllamaClient | None = None,
    tracker: DocumentIngestionTracker | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        ollama: Ollama client; the shared one if omitted.
        tracker: Document tracker; the shared one if omitted.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Highway Assist API",
        description=(
            "Local LLM chat and AI compliance analysis of Schedule B & C highway "
            "engineering documents. Uploaded PDFs are analyzed in the background "
            "and can be polled for progress and findings."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.state.ollama = ollama or get_ollama_client()
    application.state.tracker = tracker or get_tracker()

    application.include_router(documents_router)

    @application.get("/health", response_model=HealthResponse)
    async def health_check(request: Request) -> HealthResponse:
        """Check service health, including whether Ollama is reachable."""
        ollama_ok = await request.app.state.ollama.check_health()
        return HealthResponse(status="healthy", service="highway-assist", ollama=ollama_ok)

    @application.get("/models", response_model=list[ModelOption])
    async def list_models(request: Request) -> list[ModelOption]:
        """List installed Ollama models with display names."""
        try:
            models = await request.app.state.ollama.list_models()
        except AssistError as e:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=str(e),
            ) from e
        return [to_option(m) for m in models]

    return application
