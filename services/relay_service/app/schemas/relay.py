"""WeCom Relay — inbound request and outbound envelope schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

DUPLICATE_CHECK_INTERVAL = 600


# ── Inbound (caller → relay) ─────────────────


class RelayRequest(BaseModel):
    """A message-send request as presented by the caller.

    Accepts ``providedSecret``/``text`` and the older ``auth_key``/``msg``
    names, from either the query string or a JSON body.
    """

    model_config = ConfigDict(frozen=True)

    provided_secret: str = Field(
        validation_alias=AliasChoices("providedSecret", "auth_key"),
        repr=False,
    )
    text: str = Field(validation_alias=AliasChoices("text", "msg"))


# ── Outbound (relay → WeCom) ─────────────────


class TextContent(BaseModel):
    content: str


class MessageEnvelope(BaseModel):
    """Body of ``POST /cgi-bin/message/send`` for a plain-text app message."""

    model_config = ConfigDict(frozen=True)

    touser: str
    agentid: str
    msgtype: Literal["text"] = "text"
    duplicate_check_interval: Literal[600] = DUPLICATE_CHECK_INTERVAL
    text: TextContent
