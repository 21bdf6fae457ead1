# tests/conftest.py
"""Fake storefront served through httpx.MockTransport."""

import httpx
import pytest

from fetcher import FetchConfig, Fetcher

STORE_URL = "https://shop.test"


class FakeStore:
    """
    Route table keyed by URL path. Values may be a dict/list (served as
    JSON), a str (served as HTML), an httpx.Response, or a callable taking
    the request. Unknown paths answer 404.
    """

    def __init__(self, routes=None, unreachable=False):
        self.routes = dict(routes or {})
        self.unreachable = unreachable
        self.requests = []

    @property
    def paths(self):
        return [request.url.path for request in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.unreachable:
            raise httpx.ConnectError("Connection refused", request=request)

        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, text="Not Found")
        if callable(route):
            return route(request)
        if isinstance(route, httpx.Response):
            return route
        if isinstance(route, (dict, list)):
            return httpx.Response(200, json=route)
        return httpx.Response(200, text=route, headers={"content-type": "text/html"})

    def fetcher(self, **config) -> Fetcher:
        return Fetcher(FetchConfig(**config), transport=httpx.MockTransport(self.handler))


@pytest.fixture
def store_url():
    return STORE_URL


@pytest.fixture
def fake_store():
    def build(routes=None, unreachable=False):
        return FakeStore(routes, unreachable=unreachable)
    return build
