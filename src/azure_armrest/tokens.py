"""Process-wide bearer token cache keyed by credential identity."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import NamedTuple

from azure_armrest._transport import rest_post
from azure_armrest.exceptions import ApiError, ApiErrorKind, ValidationError
from azure_armrest.settings import settings

logger = logging.getLogger(__name__)


class CredentialIdentity(NamedTuple):
    """Key under which tokens and default subscriptions are cached."""

    grant_type: str
    tenant_id: str | None
    client_id: str
    client_secret: str


@dataclass(frozen=True)
class Token:
    """A bearer token and the wall-clock time (epoch seconds) it expires at."""

    value: str
    expires_at: float

    def is_valid(self, now: float | None = None) -> bool:
        return self.expires_at > (time.time() if now is None else now)


class TokenCache:
    """Issue cached bearer tokens, fetching new ones when missing or expired.

    Each entry is an immutable :class:`Token`, so a reader sees either the old
    pair or the new one, never a token without its expiration.  Two threads
    that detect expiry at the same time may both fetch; the last write wins.
    """

    def __init__(self) -> None:
        self._tokens: dict[CredentialIdentity, Token] = {}
        self._lock = threading.Lock()

    def get_token(self, identity: CredentialIdentity) -> str:
        """Return a ``Bearer ...`` string valid for *identity*."""
        with self._lock:
            token = self._tokens.get(identity)
        if token is not None and token.is_valid():
            return token.value

        token = self._fetch_token(identity)
        with self._lock:
            self._tokens[identity] = token
        return token.value

    def seed(self, identity: CredentialIdentity, value: str, expires_at: float) -> None:
        """Store a caller-supplied token for *identity*."""
        with self._lock:
            self._tokens[identity] = Token(value, expires_at)

    def clear(self) -> None:
        with self._lock:
            self._tokens.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

    def _fetch_token(self, identity: CredentialIdentity) -> Token:
        """Run the OAuth2 client-credentials exchange for *identity*."""
        if not identity.tenant_id:
            raise ValidationError("tenant_id must be specified to request a token")

        url = f"{settings.authority}{identity.tenant_id}/oauth2/token"
        logger.info(
            "Requesting token for client %s in tenant %s", identity.client_id, identity.tenant_id
        )
        response = rest_post(
            url,
            {
                "grant_type": identity.grant_type,
                "client_id": identity.client_id,
                "client_secret": identity.client_secret,
                "resource": settings.resource,
            },
        )
        try:
            payload = response.json()
            # Token endpoints may return expires_in as a string
            expires_at = time.time() + int(payload["expires_in"])
            access_token = payload["access_token"]
        except (KeyError, TypeError, ValueError) as exc:
            raise ApiError(ApiErrorKind.GENERIC, "Malformed token response", cause=exc) from exc
        return Token(f"Bearer {access_token}", expires_at)


token_cache = TokenCache()
