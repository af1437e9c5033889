"""
Application factory for the Metro DocVault API.
"""
from typing import Optional

from fastapi import FastAPI

from . import __version__
from .gateway import APIGateway
from .routers import auth, documents
from .routers.dependencies import ServiceContainer
from .core.config import AI_PROVIDER, DATABASE_TYPE, ENVIRONMENT, UPLOAD_DIR
from .core.logging_config import get_logger

logger = get_logger(__name__)


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        container: Pre-wired services (tests); built from configuration at
            start-up when None

    Returns:
        FastAPI application
    """
    gateway = APIGateway(version=__version__)
    gateway.setup_middleware()
    gateway.register_router(documents.router, prefix="/api/documents", tags=["Documents"])
    gateway.register_router(auth.router, prefix="/api/auth", tags=["Auth"])
    gateway.register_health_endpoints()

    app = gateway.get_app()
    app.state.container = container

    @app.on_event("startup")
    async def startup_event():
        logger.info("=" * 60)
        logger.info("Starting Metro DocVault backend...")
        logger.info("=" * 60)
        logger.info(f"  → Environment: {ENVIRONMENT}")
        logger.info(f"  → Database type: {DATABASE_TYPE}")
        logger.info(f"  → AI provider: {AI_PROVIDER}")
        logger.info(f"  → Upload directory: {UPLOAD_DIR}")

        if app.state.container is None:
            app.state.container = ServiceContainer.build()
        await app.state.container.initialize()
        logger.info("✅ Metro DocVault backend ready")

    @app.on_event("shutdown")
    async def shutdown_event():
        if app.state.container is not None:
            await app.state.container.close()
        logger.info("Metro DocVault backend stopped")

    return app
