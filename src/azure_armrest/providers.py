"""One-time lookup table of API versions per provider and resource type."""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from azure_armrest.exceptions import ApiError, ApiErrorKind

logger = logging.getLogger(__name__)

_PREVIEW_RE = re.compile("preview", re.IGNORECASE)


@dataclass(frozen=True)
class ProviderVersionEntry:
    """Newest stable API version and locations of one resource type.

    ``api_version`` is ``None`` when every published version is a preview.
    """

    provider_namespace: str
    resource_type: str
    api_version: str | None
    locations: tuple[str, ...]


def _stable_api_version(versions: Iterable[str]) -> str | None:
    """Return the first version that is not a preview, if any."""
    return next((v for v in versions if not _PREVIEW_RE.search(v)), None)


def _unique_locations(locations: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(loc for loc in locations if loc))


def _index_providers(
    providers: Iterable[dict],
) -> dict[tuple[str, str], ProviderVersionEntry]:
    table: dict[tuple[str, str], ProviderVersionEntry] = {}
    for provider in providers:
        namespace = provider["namespace"]
        for resource in provider.get("resourceTypes") or []:
            resource_type = resource["resourceType"].lower()
            entry = ProviderVersionEntry(
                provider_namespace=namespace,
                resource_type=resource_type,
                api_version=_stable_api_version(resource.get("apiVersions") or []),
                locations=_unique_locations(resource.get("locations") or []),
            )
            if entry.api_version is None:
                logger.debug("No stable API version for %s/%s", namespace, resource_type)
            table[(namespace.lower(), resource_type)] = entry
    return table


class ProviderVersionTable:
    """Map ``(provider namespace, resource type)`` to a :class:`ProviderVersionEntry`.

    The table is built at most once per process from a single provider
    listing.  The lock is held across the whole check-then-build sequence so
    concurrent first callers wait for the one build instead of repeating it,
    and readers only ever see an empty or a complete table.  A failed build
    leaves the table empty so the next caller tries again.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], ProviderVersionEntry] = {}
        self._lock = threading.Lock()

    def ensure_built(self, fetch_providers: Callable[[], list[dict]]) -> None:
        """Build the table from ``fetch_providers()`` unless already built."""
        if self._entries:
            return
        with self._lock:
            if self._entries:
                return
            logger.info("Building provider API version table")
            providers = fetch_providers()
            try:
                entries = _index_providers(providers)
            except (AttributeError, KeyError, TypeError) as exc:
                raise ApiError(
                    ApiErrorKind.GENERIC, "Malformed provider listing", cause=exc
                ) from exc
            self._entries = entries
            logger.info(
                "Provider API version table built with %d resource types", len(entries)
            )

    def lookup(self, provider: str, resource_type: str) -> ProviderVersionEntry | None:
        return self._entries.get((provider.lower(), resource_type.lower()))

    def has_provider(self, provider: str) -> bool:
        namespace = provider.lower()
        return any(key[0] == namespace for key in self._entries)

    def locations(self, provider: str | None = None) -> list[str]:
        """Return the distinct locations of all resource types of *provider*.

        When *provider* is ``None`` the locations of every provider are
        returned.
        """
        entries: Iterable[ProviderVersionEntry] = self._entries.values()
        if provider is not None:
            namespace = provider.lower()
            entries = [e for e in entries if e.provider_namespace.lower() == namespace]
        return list(_unique_locations(loc for e in entries for loc in e.locations))

    def clear(self) -> None:
        with self._lock:
            self._entries = {}

    def __len__(self) -> int:
        return len(self._entries)


provider_table = ProviderVersionTable()
