"""
Shared dependencies for routers.

Services are built once at start-up into a ServiceContainer held on
app.state; routes receive them through FastAPI dependencies.
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from ..services.database import DatabaseFactory, DatabaseInterface
from ..services.enrichment_service import EnrichmentService
from ..services.ingestion_service import IngestionService
from ..services.query_service import DocumentQueryService
from ..services.storage import FileStorageInterface, LocalFileStorage
from ..core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ServiceContainer:
    """Every long-lived service of the application, constructed once."""
    store: DatabaseInterface
    storage: FileStorageInterface
    enrichment: EnrichmentService
    ingestion: IngestionService
    query: DocumentQueryService

    @classmethod
    def build(
        cls,
        store: Optional[DatabaseInterface] = None,
        storage: Optional[FileStorageInterface] = None,
        enrichment: Optional[EnrichmentService] = None,
    ) -> "ServiceContainer":
        """
        Wire services together; anything not supplied comes from configuration.

        Args:
            store: Record store (default: DatabaseFactory with DATABASE_TYPE)
            storage: File storage (default: LocalFileStorage at UPLOAD_DIR)
            enrichment: Enrichment service (default: provider from AI_PROVIDER)
        """
        store = store or DatabaseFactory.create()
        storage = storage or LocalFileStorage()
        enrichment = enrichment or EnrichmentService()
        return cls(
            store=store,
            storage=storage,
            enrichment=enrichment,
            ingestion=IngestionService(store, storage, enrichment),
            query=DocumentQueryService(store, storage),
        )

    async def initialize(self):
        logger.info("Initializing services...")
        await self.store.initialize()
        logger.info("  ✅ Record store initialized")
        await self.storage.initialize()
        logger.info("  ✅ File storage initialized")
        logger.info(f"  ✅ Enrichment provider: {self.enrichment.provider.name}")

    async def close(self):
        await self.enrichment.close()
        await self.storage.close()
        await self.store.close()
        logger.info("Services shut down")


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_ingestion_service(request: Request) -> IngestionService:
    return get_container(request).ingestion


def get_query_service(request: Request) -> DocumentQueryService:
    return get_container(request).query
