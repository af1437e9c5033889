"""
AI Providers Module - plug-and-play enrichment backends.

To add a new provider:
1. Create a class inheriting from AIProvider
2. Implement classify() and summarize()
3. Register it in AIProviderFactory
"""
from .base import AIProvider, ClassificationResult, SummaryResult, TextExtractionResult
from .factory import AIProviderFactory
from .remote_provider import RemoteMLProvider
from .heuristic_provider import HeuristicProvider
from .demo_provider import DemoProvider

__all__ = [
    "AIProvider",
    "AIProviderFactory",
    "ClassificationResult",
    "SummaryResult",
    "TextExtractionResult",
    "RemoteMLProvider",
    "HeuristicProvider",
    "DemoProvider",
]
