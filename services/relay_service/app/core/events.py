"""WeCom Relay — application lifespan (startup / shutdown hooks)."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI

from app.core.config import RelaySettings

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Own the process-wide upstream HTTP client.

    One pooled ``httpx.AsyncClient`` serves every request handled by this
    worker's event loop and is closed on shutdown.
    """
    settings: RelaySettings = app.state.settings
    identity = settings.backend_identity
    log.info(
        "wecom_relay starting up",
        wecom_api_base_url=settings.wecom_api_base_url,
        agent_id=identity.agent_id,
        default_recipient=identity.default_recipient,
    )

    async with httpx.AsyncClient(
        timeout=settings.upstream_timeout,
        transport=app.state.upstream_transport,
    ) as http_client:
        app.state.http_client = http_client
        yield
        log.info("wecom_relay shutting down")
