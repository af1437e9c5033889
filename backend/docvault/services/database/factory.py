"""
Database Factory for creating database adapters.
The backend is chosen once, at start-up, from configuration.
"""
from typing import Optional

from .base import DatabaseInterface
from .memory_adapter import MemoryAdapter
from .sql_adapter import SQLAdapter
from ...core.config import DATABASE_TYPE, DATABASE_URL, DATABASE_ECHO
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class DatabaseFactory:
    """
    Factory for creating database adapters.
    Supports SQL (SQLAlchemy async) and Memory (in-memory) backends.
    """

    @staticmethod
    def create(database_type: Optional[str] = None, **kwargs) -> DatabaseInterface:
        """
        Create a database adapter instance.

        Args:
            database_type: 'sql' or 'memory' (defaults to DATABASE_TYPE)
            **kwargs: database_url / echo for the SQL adapter

        Returns:
            DatabaseInterface instance

        Examples:
            db = DatabaseFactory.create('sql', database_url='sqlite+aiosqlite:///./docvault.db')
            db = DatabaseFactory.create('memory')
        """
        database_type = (database_type or DATABASE_TYPE).lower()

        if database_type == "sql":
            database_url = kwargs.get("database_url") or DATABASE_URL
            logger.info(f"  → Database Type: SQL ({database_url.split('://')[0]})")
            return SQLAdapter(database_url, echo=kwargs.get("echo", DATABASE_ECHO))
        elif database_type == "memory":
            logger.info("  → Database Type: Memory (non-persistent)")
            return MemoryAdapter()
        else:
            raise ValueError(
                f"Unsupported database type: {database_type}. "
                f"Supported types: 'sql', 'memory'"
            )

    @staticmethod
    async def create_and_initialize(database_type: Optional[str] = None, **kwargs) -> DatabaseInterface:
        """Create database adapter and initialize it."""
        db = DatabaseFactory.create(database_type, **kwargs)
        await db.initialize()
        return db
