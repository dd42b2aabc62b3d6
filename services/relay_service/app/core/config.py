"""WeCom Relay — environment-based configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property

from pydantic import SecretStr, ValidationError, field_validator

from shared.config import BaseServiceSettings

from app.core.errors import ConfigurationError

BROADCAST_RECIPIENT = "@all"
DEFAULT_WECOM_API_BASE_URL = "https://qyapi.weixin.qq.com"


@dataclass(frozen=True)
class BackendIdentity:
    """The relay's own credentials at the WeCom backend."""

    corp_id: str
    corp_secret: str = field(repr=False)
    agent_id: str
    default_recipient: str = BROADCAST_RECIPIENT


class RelaySettings(BaseServiceSettings):
    """Settings for the relay process.

    ``AUTH_KEY``, ``WECOM_CID``, ``WECOM_SECRET`` and ``WECOM_AID`` have no
    default and must be present in the environment (or ``.env``).
    """

    service_name: str = "wecom_relay"

    # Shared secret callers must present
    auth_key: SecretStr

    # Backend identity
    wecom_cid: str
    wecom_secret: SecretStr
    wecom_aid: str
    wecom_touid: str = BROADCAST_RECIPIENT

    # Upstream
    wecom_api_base_url: str = DEFAULT_WECOM_API_BASE_URL
    upstream_timeout: float = 30.0

    @field_validator("wecom_api_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @cached_property
    def backend_identity(self) -> BackendIdentity:
        """Built on first access, then shared by every request."""
        return BackendIdentity(
            corp_id=self.wecom_cid,
            corp_secret=self.wecom_secret.get_secret_value(),
            agent_id=self.wecom_aid,
            default_recipient=self.wecom_touid,
        )


def load_settings(**overrides: object) -> RelaySettings:
    """Build the process settings, failing with ``ConfigurationError``.

    Keyword overrides take precedence over the environment.
    """
    try:
        return RelaySettings(**overrides)
    except ValidationError as exc:
        missing = [
            str(error["loc"][0]).upper()
            for error in exc.errors(include_url=False)
            if error["type"] == "missing" and error["loc"]
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}"
            ) from exc
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
