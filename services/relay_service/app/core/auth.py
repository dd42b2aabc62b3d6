"""WeCom Relay — shared-secret gatekeeper."""

from __future__ import annotations

import hmac


def authorize(provided_secret: str, configured_secret: str) -> bool:
    """Return True iff the provided secret exactly equals the configured one.

    Case-sensitive, no normalization. The comparison runs over UTF-8 bytes in
    constant time so that non-ASCII secrets are accepted as well.
    """
    return hmac.compare_digest(
        provided_secret.encode("utf-8"),
        configured_secret.encode("utf-8"),
    )
