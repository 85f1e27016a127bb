"""FastAPI application entry point with global error handling."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pharmacy_assistant import __version__
from pharmacy_assistant.core.config import get_settings
from pharmacy_assistant.core.exceptions import PharmacyAssistantError
from pharmacy_assistant.core.logging_config import get_logger, setup_logging
from pharmacy_assistant.api.routes import chatbot, health

LOGGER = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Set up logging and log startup/shutdown events."""
    settings = get_settings()
    setup_logging(level=settings.log_level, json_format=settings.log_format == "json")

    if not settings.is_llm_enabled():
        LOGGER.warning("No LLM provider configured - replies will fail until an API key is set")

    LOGGER.info(
        "API application starting",
        extra={"extra_data": {
            "environment": settings.environment,
            "enabled_services": settings.get_enabled_services(),
            "pharmacy_api_url": settings.pharmacy_api_url,
        }}
    )
    yield
    LOGGER.info("API application shutting down")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance with:
        - CORS middleware
        - Application error handler
        - Health and chatbot routes
    """
    settings = get_settings()
    application = FastAPI(
        title="Pharmacy Sales Assistant",
        description="Inbound-call sales assistant for high prescription volume pharmacies",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------------------
    # Global Exception Handler
    # -------------------------------------------------------------------------
    # Orchestrator operations report failures in their result body; this only
    # catches application errors raised outside of it.

    @application.exception_handler(PharmacyAssistantError)
    async def app_error_handler(
        request: Request, exc: PharmacyAssistantError
    ) -> JSONResponse:
        """Turn a stray application error into a JSON 500."""
        LOGGER.error(f"Application error: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "application_error",
                "message": str(exc),
            },
        )

    # -------------------------------------------------------------------------
    # Include Routers
    # -------------------------------------------------------------------------
    application.include_router(health.router, tags=["Health"])
    application.include_router(chatbot.router, prefix="/api/chatbot", tags=["Chatbot"])

    return application


# Create the application instance
app = create_app()
