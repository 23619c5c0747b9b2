"""Base class for the ARM service wrappers."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import requests

from azure_armrest import _transport, tokens
from azure_armrest import providers as _providers
from azure_armrest._pagination import _paginate
from azure_armrest.configuration import ArmrestConfiguration
from azure_armrest.exceptions import ValidationError
from azure_armrest.providers import ProviderVersionTable
from azure_armrest.settings import settings
from azure_armrest.tokens import TokenCache

logger = logging.getLogger(__name__)


def url_with_api_version(api_version: str, *paths: str) -> str:
    """Join URL *paths* with ``/`` and append the ``api-version`` query parameter."""
    url = "/".join(p.strip("/") for p in paths if p)
    return f"{url}?api-version={api_version}"


class ArmrestService:
    """Abstract base class for the service wrappers.

    Subclasses pass their resource type (*service_name*) and provider
    namespace, e.g. ``"availabilitySets"`` and ``"Microsoft.Compute"``.  The
    API version used for service specific calls is resolved once at
    construction (see :meth:`resolve_api_version`) and stored in
    :attr:`api_version`.  Generic queries (providers, subscriptions, resource
    groups, ...) use the configuration's ``api_version`` instead.
    """

    def __init__(
        self,
        armrest_configuration: ArmrestConfiguration,
        service_name: str,
        default_provider: str,
        options: Mapping[str, Any] | None = None,
        *,
        token_cache: TokenCache | None = None,
        provider_table: ProviderVersionTable | None = None,
    ) -> None:
        options = options or {}
        self.armrest_configuration = armrest_configuration
        self.service_name = service_name
        self.provider: str = options.get("provider") or default_provider
        self.base_url = settings.resource
        self._token_cache = token_cache if token_cache is not None else tokens.token_cache
        self._provider_table = (
            provider_table if provider_table is not None else _providers.provider_table
        )
        self.api_version = self.resolve_api_version(options, self.provider, service_name)

    @property
    def token(self) -> str:
        """The current bearer token, refreshed through the token cache when expired."""
        return self._token_cache.get_token(self.armrest_configuration.identity)

    def resolve_api_version(
        self, options: Mapping[str, Any], provider: str, service_name: str
    ) -> str:
        """Pick the api-version for service specific calls.

        Precedence: a non-empty ``api_version`` in *options*, then the newest
        stable version published by *provider* for *service_name*, then the
        configuration's ``api_version``.
        """
        self._provider_table.ensure_built(self.providers)
        if options.get("api_version"):
            return str(options["api_version"])

        entry = self._provider_table.lookup(provider, service_name)
        if entry is not None:
            if entry.api_version is not None:
                return entry.api_version
            logger.warning(
                "No stable API version for %s/%s, using %s",
                provider,
                service_name,
                self.armrest_configuration.api_version,
            )
        return self.armrest_configuration.api_version

    # -- Generic ARM queries -------------------------------------------------

    def providers(self) -> list[dict]:
        """Return the available resource providers."""
        url = url_with_api_version(
            self.armrest_configuration.api_version, self.base_url, "providers"
        )
        return _paginate(url, self._headers())

    def provider_info(self, provider: str) -> dict:
        """Return information about the provider namespace *provider*."""
        url = url_with_api_version(
            self.armrest_configuration.api_version, self.base_url, "providers", provider
        )
        return self.rest_get(url).json()

    geo_locations = provider_info

    def locations(self, provider: str | None = None) -> list[str]:
        """Return the locations of every resource type of *provider* (or of all providers)."""
        self._provider_table.ensure_built(self.providers)
        return self._provider_table.locations(provider)

    def subscriptions(self) -> list[dict]:
        """Return the subscriptions visible to the configured credentials."""
        url = url_with_api_version(
            self.armrest_configuration.api_version, self.base_url, "subscriptions"
        )
        return _paginate(url, self._headers())

    def subscription_info(self, subscription_id: str | None = None) -> dict:
        """Return the given subscription, or the configured one."""
        url = url_with_api_version(
            self.armrest_configuration.api_version,
            self.base_url,
            "subscriptions",
            subscription_id or self._subscription_id(),
        )
        return self.rest_get(url).json()

    def resources(self, resource_group: str | None = None) -> list[dict]:
        """Return the resources of the subscription, or of one *resource_group*."""
        paths = [self.base_url, "subscriptions", self._subscription_id()]
        if resource_group:
            paths += ["resourcegroups", resource_group]
        paths.append("resources")
        url = url_with_api_version(self.armrest_configuration.api_version, *paths)
        return _paginate(url, self._headers())

    def resource_groups(self) -> list[dict]:
        url = url_with_api_version(
            self.armrest_configuration.api_version,
            self.base_url,
            "subscriptions",
            self._subscription_id(),
            "resourcegroups",
        )
        return _paginate(url, self._headers())

    def resource_group_info(self, resource_group: str | None = None) -> dict:
        url = url_with_api_version(
            self.armrest_configuration.api_version,
            self.base_url,
            "subscriptions",
            self._subscription_id(),
            "resourcegroups",
            self._resource_group(resource_group),
        )
        return self.rest_get(url).json()

    def tags(self) -> list[dict]:
        url = url_with_api_version(
            self.armrest_configuration.api_version,
            self.base_url,
            "subscriptions",
            self._subscription_id(),
            "tagNames",
        )
        return _paginate(url, self._headers())

    def tenants(self) -> list[dict]:
        url = url_with_api_version(
            self.armrest_configuration.api_version, self.base_url, "tenants"
        )
        return _paginate(url, self._headers())

    # -- REST verbs ----------------------------------------------------------

    def rest_get(self, url: str) -> requests.Response:
        return _transport.rest_get(url, self._headers())

    def rest_put(self, url: str, body: Any = "") -> requests.Response:
        return _transport.rest_put(url, _encode(body), self._headers())

    def rest_post(self, url: str, body: Any = "") -> requests.Response:
        return _transport.rest_post(url, _encode(body), self._headers())

    def rest_patch(self, url: str, body: Any = "") -> requests.Response:
        return _transport.rest_patch(url, _encode(body), self._headers())

    def rest_delete(self, url: str) -> requests.Response:
        return _transport.rest_delete(url, self._headers())

    def _headers(self) -> dict[str, str]:
        config = self.armrest_configuration
        return {
            "Accept": config.accept,
            "Content-Type": config.content_type,
            "Authorization": self.token,
        }

    def _subscription_id(self) -> str:
        # configure() always resolves one, but a hand-built configuration may not
        sub_id = self.armrest_configuration.subscription_id
        if not sub_id:
            raise ValidationError("subscription_id must be specified")
        return sub_id

    def _resource_group(self, resource_group: str | None) -> str:
        group = resource_group or self.armrest_configuration.resource_group
        if not group:
            raise ValidationError("resource_group must be specified")
        return group


def _encode(body: Any) -> Any:
    """Serialise mapping / list bodies as JSON; pass strings and bytes through."""
    if isinstance(body, dict | list):
        return json.dumps(body)
    return body
