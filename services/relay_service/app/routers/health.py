"""WeCom Relay — health-check endpoints."""

from __future__ import annotations

from fastapi import Request

from shared.health import create_health_router


async def upstream_client_open(request: Request) -> bool:
    """The lifespan-owned upstream client exists and has not been closed."""
    http_client = getattr(request.app.state, "http_client", None)
    return http_client is not None and not http_client.is_closed


# WeCom itself is not probed; reachability is checked per relayed request.
router = create_health_router({"upstream_client": upstream_client_open})
