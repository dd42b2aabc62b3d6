"""WeCom Relay — FastAPI application factory.

Authenticates callers with a shared secret and relays their text messages
to a WeCom application.
"""

from __future__ import annotations

import httpx
import structlog
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from app.core.config import RelaySettings, load_settings
from app.core.errors import AuthorizationError, DeliveryError
from app.core.events import lifespan
from app.routers import health
from app.routers.relay import router as relay_router

from shared.logging import setup_logging
from shared.middleware import RequestContextMiddleware

logger = structlog.get_logger()


async def authorization_error_handler(
    request: Request, exc: AuthorizationError
) -> PlainTextResponse:
    return PlainTextResponse(str(exc), status_code=status.HTTP_401_UNAUTHORIZED)


async def delivery_error_handler(
    request: Request, exc: DeliveryError
) -> PlainTextResponse:
    logger.error("relay_failed", stage=exc.stage, error=str(exc))
    return PlainTextResponse(
        str(exc), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


def create_app(
    settings: RelaySettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the relay application.

    Args:
        settings: Process settings; loaded from the environment when omitted.
        transport: Optional transport for the upstream client (tests).

    Raises:
        ConfigurationError: a required setting is missing.
    """
    settings = settings or load_settings()

    setup_logging(
        log_level=settings.log_level,
        json_logs=settings.json_logs,
        service_name=settings.service_name,
    )

    application = FastAPI(
        title="WeCom Relay",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    application.state.settings = settings
    application.state.upstream_transport = transport

    application.add_middleware(RequestContextMiddleware)
    application.add_exception_handler(AuthorizationError, authorization_error_handler)
    application.add_exception_handler(DeliveryError, delivery_error_handler)

    application.include_router(health.router)
    application.include_router(relay_router)

    return application


app = create_app()


def serve() -> None:
    """Run the relay on all interfaces with uvicorn."""
    settings: RelaySettings = app.state.settings
    uvicorn.run(
        app,
        host=settings.service_host,
        port=settings.service_port,
        log_config=None,
    )
