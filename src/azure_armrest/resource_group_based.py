"""Base class for services whose resources live in resource groups."""

from __future__ import annotations

import logging
from typing import Any

from azure_armrest._pagination import _paginate
from azure_armrest.service import ArmrestService, url_with_api_version

logger = logging.getLogger(__name__)


class ResourceGroupBasedService(ArmrestService):
    """CRUD helpers for ``.../resourceGroups/{group}/providers/{provider}/{service}``.

    Methods taking a *resource_group* fall back to the configuration's
    ``resource_group`` when it is omitted.
    """

    def list(self, resource_group: str | None = None) -> list[dict]:
        """Return the resources of this type in *resource_group*."""
        url = url_with_api_version(self.api_version, self._group_url(resource_group))
        return _paginate(url, self._headers())

    def list_all(self) -> list[dict]:
        """Return the resources of this type across every group of the subscription."""
        url = url_with_api_version(
            self.api_version,
            self.base_url,
            "subscriptions",
            self._subscription_id(),
            "providers",
            self.provider,
            self.service_name,
        )
        return _paginate(url, self._headers())

    def get(self, name: str, resource_group: str | None = None) -> dict:
        url = url_with_api_version(self.api_version, self._group_url(resource_group), name)
        return self.rest_get(url).json()

    def create(self, name: str, body: Any, resource_group: str | None = None) -> dict:
        """Create or update *name* with the JSON *body* and return the stored resource."""
        url = url_with_api_version(self.api_version, self._group_url(resource_group), name)
        return self.rest_put(url, body).json()

    def delete(self, name: str, resource_group: str | None = None) -> None:
        url = url_with_api_version(self.api_version, self._group_url(resource_group), name)
        logger.info("Deleting %s/%s %s", self.provider, self.service_name, name)
        self.rest_delete(url)

    def _group_url(self, resource_group: str | None) -> str:
        return "/".join(
            [
                self.base_url.rstrip("/"),
                "subscriptions",
                self._subscription_id(),
                "resourceGroups",
                self._resource_group(resource_group),
                "providers",
                self.provider,
                self.service_name,
            ]
        )
