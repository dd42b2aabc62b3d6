"""WeCom Relay — WeCom application-message client.

Two sequential calls per delivery:
  1. ``GET /cgi-bin/gettoken`` exchanges the corp id/secret for an access token
  2. ``POST /cgi-bin/message/send`` submits the text with that token

Tokens are fetched fresh for every delivery and never reused. Nothing is
retried; a transport failure in step 1 means step 2 is never attempted.
"""

from __future__ import annotations

import httpx
import structlog

from app.core.config import DEFAULT_WECOM_API_BASE_URL, BackendIdentity
from app.core.errors import MessageSendError, TokenFetchError
from app.schemas.relay import MessageEnvelope, TextContent

logger = structlog.get_logger()

TOKEN_PATH = "/cgi-bin/gettoken"
SEND_PATH = "/cgi-bin/message/send"


async def fetch_access_token(
    http_client: httpx.AsyncClient,
    identity: BackendIdentity,
    *,
    base_url: str = DEFAULT_WECOM_API_BASE_URL,
) -> str:
    """Fetch a fresh access token for ``identity``.

    Returns an empty string when the response carries no usable token.

    Raises:
        TokenFetchError: the token endpoint could not be reached.
    """
    try:
        response = await http_client.get(
            f"{base_url}{TOKEN_PATH}",
            params={"corpid": identity.corp_id, "corpsecret": identity.corp_secret},
        )
    except httpx.HTTPError as exc:
        raise TokenFetchError(exc) from exc

    return extract_access_token(response)


def extract_access_token(response: httpx.Response) -> str:
    """Pull ``access_token`` out of a token-endpoint response, or ``""``.

    An empty token is passed on to the send step, where WeCom rejects it
    with its own error payload. That payload is what the caller sees.
    """
    # TODO: raise TokenFetchError for both lenient branches below once callers
    # stop relying on WeCom's own errcode payload for a bad corp secret. The
    # first relay release already failed fast on a body that is not JSON.
    try:
        data = response.json()
    except ValueError:
        logger.warning(
            "wecom_token_response_invalid",
            status_code=response.status_code,
            reason="body is not JSON",
        )
        return ""

    token = data.get("access_token") if isinstance(data, dict) else None
    if not isinstance(token, str):
        logger.warning(
            "wecom_token_response_invalid",
            status_code=response.status_code,
            reason="no access_token field",
            errcode=data.get("errcode") if isinstance(data, dict) else None,
            errmsg=data.get("errmsg") if isinstance(data, dict) else None,
        )
        return ""
    return token


def build_envelope(message: str, identity: BackendIdentity) -> MessageEnvelope:
    """Wrap ``message`` as a text app message from ``identity``."""
    return MessageEnvelope(
        touser=identity.default_recipient,
        agentid=identity.agent_id,
        text=TextContent(content=message),
    )


async def send_message(
    http_client: httpx.AsyncClient,
    token: str,
    envelope: MessageEnvelope,
    *,
    base_url: str = DEFAULT_WECOM_API_BASE_URL,
) -> str:
    """Submit ``envelope`` and return WeCom's raw response text.

    Raises:
        MessageSendError: the send endpoint could not be reached.
    """
    try:
        response = await http_client.post(
            f"{base_url}{SEND_PATH}",
            params={"access_token": token},
            json=envelope.model_dump(mode="json"),
        )
    except httpx.HTTPError as exc:
        raise MessageSendError(exc) from exc

    return response.text


async def deliver(
    http_client: httpx.AsyncClient,
    message: str,
    identity: BackendIdentity,
    *,
    base_url: str = DEFAULT_WECOM_API_BASE_URL,
) -> str:
    """Fetch a token, then send ``message``; return WeCom's raw response."""
    token = await fetch_access_token(http_client, identity, base_url=base_url)
    logger.info("relay_token_fetched", corp_id=identity.corp_id, empty=not token)

    envelope = build_envelope(message, identity)
    body = await send_message(http_client, token, envelope, base_url=base_url)
    logger.info(
        "relay_delivered",
        agent_id=identity.agent_id,
        touser=envelope.touser,
        response_bytes=len(body),
    )
    return body
