"""WeCom Relay — message relay routes.

``GET`` reads the request from the query string, ``POST`` from a JSON body.
Both hand the same ``RelayRequest`` to ``handle_relay``. ``/wecom`` is the
original path and stays routed for existing callers.
"""

from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from app.core.config import RelaySettings
from app.schemas.relay import RelayRequest
from app.services.relay import handle_relay

router = APIRouter(tags=["Relay"])


def get_settings(request: Request) -> RelaySettings:
    return request.app.state.settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def relay_request_from_query(request: Request) -> RelayRequest:
    """Build a ``RelayRequest`` from the query string (422 on bad input)."""
    try:
        return RelayRequest.model_validate(dict(request.query_params))
    except ValidationError as exc:
        raise RequestValidationError(
            exc.errors(include_url=False, include_input=False)
        ) from exc


@router.get("/relay", response_class=PlainTextResponse)
@router.get("/wecom", response_class=PlainTextResponse, include_in_schema=False)
async def relay_from_query(
    relay_request: RelayRequest = Depends(relay_request_from_query),
    settings: RelaySettings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> PlainTextResponse:
    """Relay a message given as ``?providedSecret=...&text=...``."""
    body = await handle_relay(relay_request, settings, http_client)
    return PlainTextResponse(body)


@router.post("/relay", response_class=PlainTextResponse)
@router.post("/wecom", response_class=PlainTextResponse, include_in_schema=False)
async def relay_from_body(
    relay_request: RelayRequest,
    settings: RelaySettings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> PlainTextResponse:
    """Relay a message given as ``{"providedSecret": ..., "text": ...}``."""
    body = await handle_relay(relay_request, settings, http_client)
    return PlainTextResponse(body)
