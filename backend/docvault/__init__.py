"""Metro DocVault - document ingestion and AI enrichment backend."""

__version__ = "1.0.0"
