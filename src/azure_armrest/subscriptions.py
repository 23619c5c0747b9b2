"""Default subscription discovery, cached per credential identity."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from azure_armrest._transport import rest_get
from azure_armrest.exceptions import ApiError, ApiErrorKind, ValidationError
from azure_armrest.settings import settings
from azure_armrest.tokens import CredentialIdentity, TokenCache

if TYPE_CHECKING:
    from azure_armrest.configuration import ArmrestConfiguration

logger = logging.getLogger(__name__)


def _select_subscription(subscriptions: list[dict]) -> dict:
    """Return the first enabled subscription, else the first one listed."""
    for sub in subscriptions:
        if sub.get("state") == "Enabled":
            return sub
    return subscriptions[0]


class SubscriptionResolver:
    """Resolve and remember the default subscription id of each identity."""

    def __init__(self) -> None:
        self._subscriptions: dict[CredentialIdentity, str] = {}
        self._lock = threading.Lock()

    def resolve_subscription_id(
        self, config: ArmrestConfiguration, token_cache: TokenCache
    ) -> str:
        """Return the default subscription id for *config*'s credentials.

        Lists the subscriptions visible to the identity and picks the first
        enabled one.  When none is enabled the first subscription is used and
        a warning is logged.  Raises :class:`ValidationError` when the
        identity has no subscription at all.
        """
        identity = config.identity
        with self._lock:
            cached = self._subscriptions.get(identity)
        if cached is not None:
            return cached

        url = f"{settings.resource}subscriptions?api-version={config.api_version}"
        headers = {
            "Content-Type": config.content_type,
            "Authorization": token_cache.get_token(identity),
        }
        response = rest_get(url, headers)
        try:
            subscriptions = response.json().get("value")
        except (AttributeError, ValueError) as exc:
            raise ApiError(
                ApiErrorKind.GENERIC, "Malformed subscription listing", cause=exc
            ) from exc
        if not subscriptions:
            raise ValidationError("No associated subscription found")

        sub = _select_subscription(subscriptions)
        try:
            sub_id: str = sub["subscriptionId"]
        except (KeyError, TypeError) as exc:
            raise ApiError(
                ApiErrorKind.GENERIC, "Subscription entry without subscriptionId", cause=exc
            ) from exc
        if sub.get("state") != "Enabled":
            logger.warning("Subscription %s is not enabled", sub_id)

        with self._lock:
            self._subscriptions[identity] = sub_id
        return sub_id

    def clear(self) -> None:
        with self._lock:
            self._subscriptions.clear()


subscription_resolver = SubscriptionResolver()
