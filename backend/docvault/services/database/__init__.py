"""
Database abstraction layer.
Supports a SQLAlchemy-backed relational store and an in-memory store.
"""
from .base import DatabaseInterface
from .memory_adapter import MemoryAdapter
from .sql_adapter import SQLAdapter
from .factory import DatabaseFactory

__all__ = [
    "DatabaseInterface",
    "MemoryAdapter",
    "SQLAdapter",
    "DatabaseFactory",
]
