"""REST verb helpers that normalise every transport failure into an ApiError."""

from __future__ import annotations

import json
import logging
from typing import Any

import requests

from azure_armrest.exceptions import ApiError, ApiErrorKind
from azure_armrest.settings import settings

logger = logging.getLogger(__name__)

_STATUS_KINDS: dict[int, ApiErrorKind] = {
    400: ApiErrorKind.BAD_REQUEST,
    401: ApiErrorKind.UNAUTHORIZED,
    404: ApiErrorKind.NOT_FOUND,
    502: ApiErrorKind.BAD_GATEWAY,
    504: ApiErrorKind.GATEWAY_TIMEOUT,
}


def _parse_error_body(body: str) -> tuple[str | None, str | None]:
    """Extract ``error.code`` / ``error.message`` from an ARM error document."""
    try:
        document = json.loads(body)
    except ValueError:
        return None, None
    error = document.get("error") if isinstance(document, dict) else None
    if not isinstance(error, dict):
        return None, None
    return error.get("code"), error.get("message")


def map_transport_error(exc: requests.RequestException) -> ApiError:
    """Translate a ``requests`` failure into a typed :class:`ApiError`.

    The message is the parsed ``error.message`` when the body is an ARM error
    document, otherwise the raw body.  Failures without a response (connection
    errors, timeouts) use the exception text; a timeout is reported as a
    gateway timeout.
    """
    response = exc.response
    if response is None:
        if isinstance(exc, requests.Timeout):
            return ApiError(ApiErrorKind.GATEWAY_TIMEOUT, str(exc), cause=exc)
        return ApiError(ApiErrorKind.GENERIC, str(exc), cause=exc)

    body = response.text
    code, message = _parse_error_body(body)
    return ApiError(
        _STATUS_KINDS.get(response.status_code, ApiErrorKind.GENERIC),
        message or body,
        code=code,
        cause=exc,
        status_code=response.status_code,
    )


def _request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    body: Any = None,
) -> requests.Response:
    logger.debug("%s %s", method, url)
    try:
        resp = requests.request(
            method, url, headers=headers, data=body, timeout=settings.request_timeout
        )
        resp.raise_for_status()
    except requests.RequestException as exc:
        error = map_transport_error(exc)
        logger.debug("%s %s failed: %r", method, url, error)
        raise error from exc
    return resp


def rest_get(url: str, headers: dict[str, str] | None = None) -> requests.Response:
    return _request("GET", url, headers)


def rest_post(
    url: str, body: Any = None, headers: dict[str, str] | None = None
) -> requests.Response:
    return _request("POST", url, headers, body)


def rest_put(
    url: str, body: Any = None, headers: dict[str, str] | None = None
) -> requests.Response:
    return _request("PUT", url, headers, body)


def rest_patch(
    url: str, body: Any = None, headers: dict[str, str] | None = None
) -> requests.Response:
    return _request("PATCH", url, headers, body)


def rest_delete(url: str, headers: dict[str, str] | None = None) -> requests.Response:
    return _request("DELETE", url, headers)
