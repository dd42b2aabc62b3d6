"""WeCom Relay shared utilities package."""

from shared.config import BaseServiceSettings
from shared.health import create_health_router
from shared.logging import setup_logging
from shared.middleware import RequestContextMiddleware

__all__ = [
    "BaseServiceSettings",
    "RequestContextMiddleware",
    "create_health_router",
    "setup_logging",
]
