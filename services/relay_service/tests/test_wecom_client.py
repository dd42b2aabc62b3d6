"""Tests for the WeCom token/send client."""

from __future__ import annotations

import json

import httpx
import pytest

from app.core.config import BackendIdentity
from app.core.errors import MessageSendError, TokenFetchError
from app.schemas.relay import DUPLICATE_CHECK_INTERVAL
from app.services import wecom_client
from app.services.wecom_client import (
    build_envelope,
    deliver,
    extract_access_token,
    fetch_access_token,
    send_message,
)

from fakes import FakeWeCom, connection_refused

BASE_URL = "https://wecom.test"
IDENTITY = BackendIdentity(corp_id="C", corp_secret="K", agent_id="A")


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestExtractAccessToken:
    """Token extraction is lenient: anything unusable becomes ``""``."""

    def test_returns_token(self):
        response = httpx.Response(200, json={"access_token": "T", "expires_in": 7200})
        assert extract_access_token(response) == "T"

    def test_missing_field_is_empty(self):
        response = httpx.Response(200, json={"errcode": 40001, "errmsg": "invalid credential"})
        assert extract_access_token(response) == ""

    def test_invalid_json_is_empty(self):
        response = httpx.Response(502, text="<html>Bad Gateway</html>")
        assert extract_access_token(response) == ""

    def test_non_object_json_is_empty(self):
        response = httpx.Response(200, json=["T"])
        assert extract_access_token(response) == ""

    def test_non_string_token_is_empty(self):
        response = httpx.Response(200, json={"access_token": 12345})
        assert extract_access_token(response) == ""


class TestBuildEnvelope:
    @pytest.mark.parametrize("message", ["hello", "", "多行\n消息", '{"msgtype": "image"}'])
    def test_constants_do_not_depend_on_content(self, message):
        envelope = build_envelope(message, IDENTITY).model_dump(mode="json")

        assert envelope["msgtype"] == "text"
        assert envelope["duplicate_check_interval"] == DUPLICATE_CHECK_INTERVAL == 600
        assert envelope["text"] == {"content": message}

    def test_recipient_and_agent_come_from_identity(self):
        identity = BackendIdentity(
            corp_id="C", corp_secret="K", agent_id="1000002", default_recipient="alice"
        )
        envelope = build_envelope("hi", identity)
        assert envelope.touser == "alice"
        assert envelope.agentid == "1000002"


class TestFetchAccessToken:
    @pytest.mark.asyncio
    async def test_sends_corp_credentials_as_query(self):
        fake = FakeWeCom()
        async with _client(fake) as http_client:
            token = await fetch_access_token(http_client, IDENTITY, base_url=BASE_URL)

        assert token == "T"
        (request,) = fake.requests
        assert request.method == "GET"
        assert str(request.url) == f"{BASE_URL}/cgi-bin/gettoken?corpid=C&corpsecret=K"

    @pytest.mark.asyncio
    async def test_transport_failure_raises_token_fetch_error(self):
        async with _client(connection_refused) as http_client:
            with pytest.raises(TokenFetchError) as exc_info:
                await fetch_access_token(http_client, IDENTITY, base_url=BASE_URL)

        assert isinstance(exc_info.value.cause, httpx.ConnectError)
        assert str(exc_info.value) == "connection refused"


class TestSendMessage:
    @pytest.mark.asyncio
    async def test_returns_raw_body_verbatim(self):
        raw = '{"errcode":81013,"errmsg":"user & party & tag all invalid"}'
        fake = FakeWeCom()
        fake.send_reply = lambda request: httpx.Response(200, text=raw)

        async with _client(fake) as http_client:
            body = await send_message(
                http_client, "T", build_envelope("hi", IDENTITY), base_url=BASE_URL
            )

        assert body == raw
        (request,) = fake.requests
        assert request.method == "POST"
        assert request.url.params["access_token"] == "T"
        assert json.loads(request.content)["text"] == {"content": "hi"}

    @pytest.mark.asyncio
    async def test_non_2xx_is_not_an_error(self):
        fake = FakeWeCom()
        fake.send_reply = lambda request: httpx.Response(503, text="busy")

        async with _client(fake) as http_client:
            body = await send_message(
                http_client, "T", build_envelope("hi", IDENTITY), base_url=BASE_URL
            )

        assert body == "busy"

    @pytest.mark.asyncio
    async def test_transport_failure_raises_message_send_error(self):
        async with _client(connection_refused) as http_client:
            with pytest.raises(MessageSendError) as exc_info:
                await send_message(
                    http_client, "T", build_envelope("hi", IDENTITY), base_url=BASE_URL
                )

        assert exc_info.value.stage == "message_send"


class TestDeliver:
    @pytest.mark.asyncio
    async def test_token_then_send_in_order(self):
        fake = FakeWeCom()
        async with _client(fake) as http_client:
            await deliver(http_client, "hello", IDENTITY, base_url=BASE_URL)

        assert [(r.method, r.url.path) for r in fake.requests] == [
            ("GET", wecom_client.TOKEN_PATH),
            ("POST", wecom_client.SEND_PATH),
        ]

    @pytest.mark.asyncio
    async def test_token_failure_skips_send(self):
        fake = FakeWeCom()
        fake.token_reply = connection_refused

        async with _client(fake) as http_client:
            with pytest.raises(TokenFetchError):
                await deliver(http_client, "hello", IDENTITY, base_url=BASE_URL)

        assert len(fake.token_requests) == 1
        assert fake.send_requests == []

    @pytest.mark.asyncio
    async def test_fresh_token_for_every_delivery(self):
        fake = FakeWeCom()
        async with _client(fake) as http_client:
            await deliver(http_client, "one", IDENTITY, base_url=BASE_URL)
            await deliver(http_client, "two", IDENTITY, base_url=BASE_URL)

        assert len(fake.token_requests) == 2
        assert len(fake.send_requests) == 2
