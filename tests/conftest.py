"""Pytest fixtures for the Smarther client tests."""

import json
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

import pytest

from smarther_client.auth import AUTH_ENDPOINT

TOKEN_URL = f"{AUTH_ENDPOINT}token"

WriteConfig = Callable[..., Path]

BASE_CONFIG = {
    "clientId": "client-123",
    "clientSecret": "secret-456",
    "subscriptionKey": "sub-789",
}


class FakeTransport:
    """In-memory stand-in for HttpTransport.

    Responses are registered per URL; each call is recorded as ``(url, data)``
    and its per-request headers in ``request_headers``.
    """

    def __init__(self) -> None:
        self.responses: dict[str, str] = {}
        self.calls: list[tuple[str, Optional[dict[str, Any]]]] = []
        self.headers: dict[str, str] = {}
        self.request_headers: list[Optional[dict[str, str]]] = []
        self.closed = False

    def respond(self, url: str, body: Any) -> None:
        self.responses[url] = body if isinstance(body, str) else json.dumps(body)

    def set_headers(self, headers: Mapping[str, str]) -> None:
        self.headers.update(headers)

    def request(self, url: str, data: Optional[Mapping[str, Any]] = None, headers: Optional[Mapping[str, str]] = None) -> str:
        self.calls.append((url, dict(data) if data else None))
        self.request_headers.append(dict(headers) if headers else None)
        if url not in self.responses:
            raise AssertionError(f"Unexpected request to {url}")
        return self.responses[url]

    def close(self) -> None:
        self.closed = True


class FakeCodeProvider:
    """Code provider returning a fixed code and recording the URLs it was shown."""

    def __init__(self, code: str = "auth-code") -> None:
        self.code = code
        self.urls: list[str] = []

    def __call__(self, authorization_url: str) -> str:
        self.urls.append(authorization_url)
        return self.code


@pytest.fixture  # type: ignore[untyped-decorator]
def transport() -> FakeTransport:
    """Provide a fake transport that already answers token requests."""
    fake = FakeTransport()
    fake.respond(TOKEN_URL, {"access_token": "access-1", "refresh_token": "refresh-2", "token_type": "Bearer"})
    return fake


@pytest.fixture  # type: ignore[untyped-decorator]
def code_provider() -> FakeCodeProvider:
    """Provide a code provider that answers with ``auth-code``."""
    return FakeCodeProvider()


@pytest.fixture  # type: ignore[untyped-decorator]
def write_config(tmp_path: Path) -> WriteConfig:
    """Provide a factory writing a config file with the base credentials plus ``overrides``."""

    def _write(**overrides: Any) -> Path:
        path = tmp_path / "smarther.json"
        path.write_text(json.dumps({**BASE_CONFIG, **overrides}), encoding="utf-8")
        return path

    return _write
