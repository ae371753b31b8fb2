"""
Ivy API application factory and server entry point.

create_app() wires middleware and routers around a ServiceCache. The
lifespan starts the idle-session sweeper and closes database
connections on shutdown. `ivy-api` (see pyproject) runs it under uvicorn.

Dependencies: fastapi, uvicorn, python-dotenv, ivy.api.routers
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ivy.api.deps.dependencies import ServiceCache
from ivy.configs import Settings, get_settings
from ivy.observability import CORRELATION_HEADER, configure_logging
from ivy.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware
from .routers import chat_router, health_router, rag_router, search_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    services: ServiceCache = app.state.services
    await services.startup()
    logger.info(f"{__name__}:lifespan - Ivy API ready ({services.settings.environment})")
    try:
        yield
    finally:
        await services.shutdown()
        logger.info(f"{__name__}:lifespan - Ivy API stopped")


def _add_middleware(app: FastAPI, settings: Settings) -> None:
    # Starlette runs the last one added first: correlation wraps logging
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        # Cookies only travel to explicitly listed origins
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["Content-Type", "X-Reindex-Token", CORRELATION_HEADER],
        expose_headers=[CORRELATION_HEADER],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)


def create_app(services: ServiceCache | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        services: Prebuilt service container; when omitted one is built
            from environment settings on first use

    Returns:
        FastAPI: Application with chat, RAG, search and health routes
    """
    services = services or ServiceCache()
    app = FastAPI(
        title="Ivy Assistant API",
        description="Conversational assistant grounded in a published writing archive",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.services = services

    _add_middleware(app, services.settings)
    for router in (health_router, chat_router, rag_router, search_router):
        app.include_router(router)
    return app


def main() -> None:
    load_dotenv()
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run("ivy.api.main:create_app", factory=True, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
