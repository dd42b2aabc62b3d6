"""WeCom Relay — error taxonomy.

Every failure a request can hit is a ``RelayError``. The app factory maps
each concrete class to an HTTP response at the single request boundary.
"""

from __future__ import annotations

UNAUTHORIZED_MESSAGE = "Wrong auth_key"


class RelayError(Exception):
    """Base exception for the relay."""


class ConfigurationError(RelayError):
    """A required setting is missing or invalid; the process must not start."""


class AuthorizationError(RelayError):
    """The caller presented the wrong shared secret."""

    def __init__(self, message: str = UNAUTHORIZED_MESSAGE) -> None:
        super().__init__(message)


class DeliveryError(RelayError):
    """An upstream call to the messaging backend failed.

    ``str(error)`` is the description of the underlying cause, which is what
    the caller receives in the 500 response body.
    """

    stage = "deliver"

    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(str(cause) or type(cause).__name__)


class TokenFetchError(DeliveryError):
    """Transport failure while contacting the token endpoint."""

    stage = "token_fetch"


class MessageSendError(DeliveryError):
    """Transport failure while contacting the message-send endpoint."""

    stage = "message_send"
