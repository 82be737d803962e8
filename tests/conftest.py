"""Shared fixtures for the proxy tests."""

from __future__ import annotations

from typing import Iterator, List
from unittest import mock

import pytest

from geminiproxy.app import create_app


class FakeUpstream:
    """Stand-in for a ``requests.Response`` returned by the upstream call."""

    def __init__(
        self,
        status_code: int = 200,
        content: bytes = b"",
        chunks: List[bytes] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.status_code = status_code
        self.content = content
        self.chunks = chunks if chunks is not None else [content]
        self.error = error
        self.close_calls = 0

    def iter_content(self, chunk_size=None) -> Iterator[bytes]:
        for chunk in self.chunks:
            yield chunk
        if self.error is not None:
            raise self.error

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def app():
    app = create_app()
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def dev_app():
    app = create_app(environment="development")
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def upstream_request():
    """Patch the outbound ``requests.request`` call and expose the mock."""
    with mock.patch("geminiproxy.upstream.requests.request") as patched:
        patched.return_value = FakeUpstream(200, b"{}")
        yield patched
