"""Validated, immutable connection settings shared by service wrappers."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

import pydantic
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from azure_armrest import subscriptions, tokens
from azure_armrest.exceptions import ValidationError
from azure_armrest.settings import EnvironmentCredentials, settings
from azure_armrest.subscriptions import SubscriptionResolver
from azure_armrest.tokens import CredentialIdentity, TokenCache

logger = logging.getLogger(__name__)


class ArmrestConfiguration(BaseModel):
    """Credentials and defaults used to build service objects.

    Instances are frozen once :func:`configure` returns.  The configuration
    never talks to the network itself; tokens are obtained from a
    :class:`~azure_armrest.tokens.TokenCache` using :attr:`identity`.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    client_id: str
    client_secret: str = Field(validation_alias=AliasChoices("client_secret", "client_key"))
    tenant_id: str | None = None
    subscription_id: str | None = None
    resource_group: str | None = None
    api_version: str = Field(default_factory=lambda: settings.api_version)
    grant_type: str = "client_credentials"
    content_type: str = "application/json"
    accept: str = "application/json"

    @property
    def identity(self) -> CredentialIdentity:
        return CredentialIdentity(
            self.grant_type, self.tenant_id, self.client_id, self.client_secret
        )


def _expiration_timestamp(value: Any) -> float:
    if isinstance(value, datetime):
        return value.timestamp()
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid token_expiration: {value!r}", cause=exc) from exc


def configure(
    options: Mapping[str, Any],
    *,
    token_cache: TokenCache | None = None,
    subscription_resolver: SubscriptionResolver | None = None,
) -> ArmrestConfiguration:
    """Create a configuration object from *options*.

    Recognised options are ``client_id``, ``client_key`` (or
    ``client_secret``), ``tenant_id``, ``subscription_id``,
    ``resource_group``, ``api_version``, ``grant_type``, ``content_type`` and
    ``accept``.  Other keys are ignored.  ``client_id`` and ``client_key`` are
    required; a ``tenant_id`` is needed as soon as a token must be fetched.

    If no ``subscription_id`` is given, the subscriptions associated with the
    credentials are listed and the first enabled one becomes the default.
    :class:`ValidationError` is raised if there are none.

    ``token`` and ``token_expiration`` (a ``datetime`` or epoch seconds) may
    be supplied as a pair to seed the token cache with an existing token.
    """
    if token_cache is None:
        token_cache = tokens.token_cache
    if subscription_resolver is None:
        subscription_resolver = subscriptions.subscription_resolver

    values = {key: value for key, value in options.items() if value is not None}
    # client_key is an alias; a blank client_secret must not shadow it
    client_secret = values.pop("client_secret", None) or values.pop("client_key", None)
    values.pop("client_key", None)
    if not values.get("client_id") or not client_secret:
        raise ValidationError("client_id and client_key must be specified")
    values["client_secret"] = client_secret

    try:
        configuration = ArmrestConfiguration.model_validate(values)
    except pydantic.ValidationError as exc:
        raise ValidationError(f"Invalid configuration: {exc}", cause=exc) from exc

    if ("token" in values) != ("token_expiration" in values):
        raise ValidationError("token and token_expiration must be specified together")
    if "token" in values:
        token_cache.seed(
            configuration.identity,
            values["token"],
            _expiration_timestamp(values["token_expiration"]),
        )

    if not configuration.subscription_id:
        sub_id = subscription_resolver.resolve_subscription_id(configuration, token_cache)
        configuration = configuration.model_copy(update={"subscription_id": sub_id})
        logger.debug("Using default subscription %s", sub_id)

    return configuration


def configure_from_env(
    *,
    token_cache: TokenCache | None = None,
    subscription_resolver: SubscriptionResolver | None = None,
    **overrides: Any,
) -> ArmrestConfiguration:
    """Build a configuration from ``AZURE_*`` variables, with *overrides* on top."""
    options: dict[str, Any] = {**EnvironmentCredentials().to_options(), **overrides}
    return configure(
        options, token_cache=token_cache, subscription_resolver=subscription_resolver
    )
