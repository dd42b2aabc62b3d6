"""WeCom Relay — request handling shared by every inbound route."""

from __future__ import annotations

import httpx
import structlog

from app.core.auth import authorize
from app.core.config import RelaySettings
from app.core.errors import AuthorizationError
from app.schemas.relay import RelayRequest
from app.services.wecom_client import deliver

logger = structlog.get_logger()


async def handle_relay(
    request: RelayRequest,
    settings: RelaySettings,
    http_client: httpx.AsyncClient,
) -> str:
    """Authorize ``request`` and relay its text to WeCom.

    No upstream call is made unless the shared secret matches.

    Raises:
        AuthorizationError: wrong shared secret.
        TokenFetchError: token endpoint unreachable.
        MessageSendError: send endpoint unreachable.
    """
    if not authorize(request.provided_secret, settings.auth_key.get_secret_value()):
        logger.warning("relay_rejected", reason="shared secret mismatch")
        raise AuthorizationError()

    return await deliver(
        http_client,
        request.text,
        settings.backend_identity,
        base_url=settings.wecom_api_base_url,
    )
