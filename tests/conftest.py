"""
Shared pytest fixtures for sonarrapi tests.
"""

import json

import httpx
import pytest
import structlog

from sonarrapi.config import Settings
from sonarrapi.utils.logging import clear_context

SONARR_URL = "http://sonarr.local:8989"
API_KEY = "0123456789abcdef"


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any structlog configuration and logging context a test (or the CLI) applied."""
    clear_context()
    yield
    structlog.reset_defaults()
    clear_context()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        sonarr_url=SONARR_URL,
        sonarr_api_key=API_KEY,
        app_env="production",
    )


class FakeSonarr:
    """Records requests and answers them from a route table."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], httpx.Response | Exception] = {}

    def add(self, method: str, path: str, status_code: int = 200, body=None, text=None):
        if text is not None:
            response = httpx.Response(status_code, text=text)
        elif body is not None:
            response = httpx.Response(status_code, json=body)
        else:
            response = httpx.Response(status_code)
        self.routes[(method, path)] = response

    def fail(self, method: str, path: str, exc: Exception):
        self.routes[(method, path)] = exc

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "NotFound"})
        if isinstance(route, Exception):
            raise route
        return route

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last_request.content)


@pytest.fixture
def fake_sonarr() -> FakeSonarr:
    return FakeSonarr()
