"""
API Gateway Module

Single entry point for all API requests: middleware, error envelope,
rate limiting, routers and health probes.
"""
from .gateway import APIGateway

__all__ = ["APIGateway"]
