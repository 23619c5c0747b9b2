"""ARM pagination helper."""

from __future__ import annotations

from azure_armrest._transport import rest_get
from azure_armrest.exceptions import ApiError, ApiErrorKind


def _paginate(url: str, headers: dict[str, str]) -> list[dict]:
    """Fetch all pages from an ARM list endpoint and return the merged values."""
    items: list[dict] = []
    while url:
        response = rest_get(url, headers)
        try:
            data = response.json()
        except ValueError as exc:
            raise ApiError(ApiErrorKind.GENERIC, f"Invalid JSON from {url}", cause=exc) from exc
        items.extend(data.get("value") or [])
        url = data.get("nextLink")
    return items
