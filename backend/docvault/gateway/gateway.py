"""
API Gateway

Builds the FastAPI application: middleware, rate limiting, exception
handlers, routers and the unauthenticated health endpoints.
"""
from typing import List, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.middleware import SlowAPIMiddleware

from .errors import register_exception_handlers
from .middleware import ErrorHandlingMiddleware, RequestIDMiddleware, RequestLoggingMiddleware
from ..core.config import CORS_ORIGINS, ENVIRONMENT, IS_PRODUCTION
from ..core.logging_config import get_logger
from ..domain.entities import utc_now
from ..middleware.rate_limit import limiter

logger = get_logger(__name__)


class APIGateway:
    """
    API Gateway that manages routing, middleware and health checks.

    Responsibilities:
    - Initialize FastAPI application
    - Register middleware (CORS, rate limiting, logging, error handling)
    - Register exception handlers rendering the error envelope
    - Register routers and health check endpoints
    """

    def __init__(
        self,
        title: str = "Metro DocVault API",
        description: str = "Document management for metro rail operations with AI classification",
        version: str = "1.0.0",
        enable_docs: Optional[bool] = None
    ):
        """
        Initialize API Gateway.

        Args:
            title: API title
            description: API description
            version: API version
            enable_docs: Enable API docs (disabled in production if None)
        """
        self.title = title
        self.description = description
        self.version = version
        self.enable_docs = enable_docs if enable_docs is not None else not IS_PRODUCTION

        self.app = FastAPI(
            title=self.title,
            description=self.description,
            version=self.version,
            docs_url="/docs" if self.enable_docs else None,
            redoc_url="/redoc" if self.enable_docs else None
        )

        self.limiter = limiter
        self.app.state.limiter = self.limiter
        register_exception_handlers(self.app)

        logger.info("API Gateway initialized")

    def setup_middleware(self):
        """Configure all middleware. The last one added runs first."""
        logger.info("Setting up middleware...")

        self.app.add_middleware(ErrorHandlingMiddleware)
        logger.debug("  → Error handling middleware added")

        self.app.add_middleware(SlowAPIMiddleware)
        logger.debug("  → Rate limiting middleware added")

        self.app.add_middleware(
            RequestLoggingMiddleware,
            skip_paths=["/health", "/ready", "/docs", "/redoc", "/openapi.json"]
        )
        logger.debug("  → Request logging middleware added")

        self.app.add_middleware(RequestIDMiddleware)
        logger.debug("  → Request ID middleware added")

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
        logger.debug(f"  → CORS middleware added (origins: {', '.join(CORS_ORIGINS)})")

        logger.info("✅ All middleware configured")

    def register_router(self, router: APIRouter, prefix: str = "", tags: Optional[List[str]] = None):
        self.app.include_router(router, prefix=prefix, tags=tags or [])
        logger.info(f"Registered router at prefix '{prefix}'")

    def register_health_endpoints(self):
        """Register health check endpoints."""

        @self.app.get("/")
        async def root():
            """Root endpoint - API information."""
            return {
                "success": True,
                "message": f"{self.title} is running",
                "version": self.version,
                "environment": ENVIRONMENT,
                "timestamp": utc_now().isoformat(),
            }

        @self.app.get("/health")
        async def health_check(request: Request):
            """
            Health check endpoint for container orchestration.

            503 when the record store is unreachable. The ML service is
            reported but never makes the API unhealthy, because enrichment
            falls back to local heuristics.
            """
            container = getattr(request.app.state, "container", None)
            if container is None:
                return JSONResponse(
                    status_code=503,
                    content={"success": False, "status": "unhealthy", "reason": "Services not initialized",
                             "timestamp": utc_now().isoformat()},
                )

            try:
                database_ok = await container.store.ping()
            except Exception as e:
                logger.error(f"Health check: record store unreachable: {e}")
                database_ok = False
            ml_ok = await container.enrichment.health_check()

            body = {
                "success": database_ok,
                "status": "healthy" if database_ok else "unhealthy",
                "database": "connected" if database_ok else "unreachable",
                "ml_service": "available" if ml_ok else "unavailable (heuristic fallback active)",
                "ai_provider": container.enrichment.provider.name,
                "timestamp": utc_now().isoformat(),
            }
            if not database_ok:
                return JSONResponse(status_code=503, content=body)
            return body

        @self.app.get("/ready")
        async def readiness_check(request: Request):
            """Readiness probe: services constructed and the store answers."""
            container = getattr(request.app.state, "container", None)
            ready = False
            if container is not None:
                try:
                    ready = await container.store.ping()
                except Exception as e:
                    logger.warning(f"Readiness check failed: {e}")
            if not ready:
                return JSONResponse(status_code=503, content={"ready": False})
            return {"ready": True}

        logger.info("Health check endpoints registered")

    def get_app(self) -> FastAPI:
        return self.app
