"""Reusable health-check router.

``/health/live`` answers as long as the event loop does. ``/health/ready``
runs the named readiness checks and reports 503 if any of them fails.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from fastapi import APIRouter, Request, Response, status

HealthCheck = Callable[[Request], Awaitable[bool]]


def create_health_router(
    readiness_checks: Mapping[str, HealthCheck] | None = None,
) -> APIRouter:
    """Build a health router with optional readiness probes.

    Args:
        readiness_checks: Probe name to async callable. Each callable gets the
            current request (for access to ``app.state``) and returns True if
            healthy.

    Returns:
        A FastAPI ``APIRouter`` with ``/health/live`` and ``/health/ready``.
    """
    router = APIRouter(prefix="/health", tags=["health"])
    checks = dict(readiness_checks or {})

    @router.get("/live", summary="Liveness probe")
    async def liveness() -> dict[str, str]:
        return {"status": "alive"}

    @router.get("/ready", summary="Readiness probe")
    async def readiness(request: Request, response: Response) -> dict[str, Any]:
        results: dict[str, str] = {}
        all_ok = True

        for name, check in checks.items():
            try:
                ok = await check(request)
            except Exception as exc:
                results[name] = f"error: {exc}"
                all_ok = False
                continue
            results[name] = "ok" if ok else "failing"
            all_ok = all_ok and ok

        if not all_ok:
            response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

        return {"status": "ready" if all_ok else "unavailable", "checks": results}

    return router
