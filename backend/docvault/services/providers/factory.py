"""
AI Provider Factory.

Selects the provider once from configuration.
"""
from typing import Optional

from ...core.config import AI_PROVIDER
from ...core.logging_config import get_logger
from .base import AIProvider
from .demo_provider import DemoProvider
from .heuristic_provider import HeuristicProvider
from .remote_provider import RemoteMLProvider

logger = get_logger(__name__)


class AIProviderFactory:
    """
    Factory for creating AI provider instances.

    remote    - external ML service over HTTP (heuristic fallback on failure)
    heuristic - local rules only, no network
    demo      - seeded fake results for demos
    """

    @staticmethod
    def get_provider(provider_type: Optional[str] = None) -> AIProvider:
        provider_type = (provider_type or AI_PROVIDER).lower()

        if provider_type == "remote":
            logger.info("Using remote ML provider")
            return RemoteMLProvider()
        elif provider_type == "heuristic":
            logger.info("Using heuristic provider (configured)")
            return HeuristicProvider()
        elif provider_type == "demo":
            logger.warning("⚠️  Using DemoProvider - AI results are fabricated")
            return DemoProvider()
        else:
            logger.warning(f"⚠️  Unknown provider '{provider_type}', using heuristic provider")
            return HeuristicProvider()
