"""Shared test fixtures for azure-armrest tests."""

from __future__ import annotations

import json
import time
from unittest.mock import patch

import pytest
import requests

from azure_armrest import provider_table, subscription_resolver, token_cache
from azure_armrest.configuration import ArmrestConfiguration


def make_response(
    status_code: int = 200,
    payload: object = None,
    text: str | None = None,
    url: str = "https://management.azure.com/",
) -> requests.Response:
    """Build a real ``requests.Response`` with a canned body."""
    resp = requests.Response()
    resp.status_code = status_code
    body = text if text is not None else json.dumps(payload if payload is not None else {})
    resp._content = body.encode("utf-8")
    resp.encoding = "utf-8"
    resp.url = url
    return resp


class FakeTransport:
    """Stand-in for ``requests.request`` that serves canned responses by URL fragment."""

    def __init__(self) -> None:
        self.routes: list[tuple[str, str, requests.Response]] = []
        self.calls: list[dict] = []

    def add(
        self,
        method: str,
        fragment: str,
        payload: object = None,
        status_code: int = 200,
        text: str | None = None,
    ) -> None:
        self.routes.append((method, fragment, make_response(status_code, payload, text)))

    def count(self, method: str, fragment: str) -> int:
        return sum(1 for c in self.calls if c["method"] == method and fragment in c["url"])

    def __call__(self, method, url, headers=None, data=None, timeout=None):
        self.calls.append(
            {"method": method, "url": url, "headers": headers, "data": data, "timeout": timeout}
        )
        for route_method, fragment, resp in self.routes:
            if route_method == method and fragment in url:
                return resp
        raise AssertionError(f"Unexpected request: {method} {url}")


@pytest.fixture(name="make_response")
def _make_response_fixture():
    return make_response


@pytest.fixture()
def transport():
    """Route every outbound call through a :class:`FakeTransport`."""
    fake = FakeTransport()
    with patch("azure_armrest._transport.requests.request", new=fake):
        yield fake


@pytest.fixture()
def config() -> ArmrestConfiguration:
    return ArmrestConfiguration(
        client_id="cid",
        client_secret="secret",
        tenant_id="tid",
        subscription_id="sub-1",
        resource_group="rg-1",
    )


@pytest.fixture()
def seeded_token(config):
    """Put a valid token for ``config`` in the shared token cache."""
    token_cache.seed(config.identity, "Bearer test-token", time.time() + 3600)
    return "Bearer test-token"


@pytest.fixture(autouse=True)
def _clear_shared_caches():
    """Clear the process-wide caches between tests."""
    token_cache.clear()
    subscription_resolver.clear()
    provider_table.clear()
    yield
    token_cache.clear()
    subscription_resolver.clear()
    provider_table.clear()
