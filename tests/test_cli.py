"""Tests for the command line entry point."""

from __future__ import annotations

from unittest import mock

import pytest

from geminiproxy.cli import build_parser, main
from geminiproxy.config import GEMINI_OPENAI_BASE_URL, UPSTREAM_TIMEOUT

ENV_VARS = (
    "PORT",
    "GEMINI_PROXY_HOST",
    "GEMINI_PROXY_QUIET",
    "GEMINI_PROXY_ENV",
    "GEMINI_PROXY_UPSTREAM_BASE_URL",
    "GEMINI_PROXY_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestParser:
    def test_serve_defaults(self) -> None:
        args = build_parser().parse_args(["serve"])

        assert args.host == "127.0.0.1"
        assert args.port == 8080
        assert args.quiet is False
        assert args.environment == "production"
        assert args.upstream_base_url == GEMINI_OPENAI_BASE_URL
        assert args.timeout == float(UPSTREAM_TIMEOUT)

    def test_defaults_come_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORT", "9090")
        monkeypatch.setenv("GEMINI_PROXY_HOST", "0.0.0.0")
        monkeypatch.setenv("GEMINI_PROXY_QUIET", "yes")
        monkeypatch.setenv("GEMINI_PROXY_ENV", "development")
        monkeypatch.setenv("GEMINI_PROXY_TIMEOUT", "30")

        args = build_parser().parse_args(["serve"])

        assert (args.host, args.port, args.quiet) == ("0.0.0.0", 9090, True)
        assert args.environment == "development"
        assert args.timeout == 30.0

    def test_invalid_env_values_fall_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORT", "http")
        monkeypatch.setenv("GEMINI_PROXY_TIMEOUT", "soon")

        args = build_parser().parse_args(["serve"])

        assert args.port == 8080
        assert args.timeout == float(UPSTREAM_TIMEOUT)

    def test_command_is_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestMain:
    def test_serve_builds_app_and_runs_it(self) -> None:
        fake_app = mock.Mock()
        fake_app.config = {"UPSTREAM_BASE_URL": "http://localhost:9000"}

        with mock.patch("geminiproxy.cli.create_app", return_value=fake_app) as factory:
            with pytest.raises(SystemExit) as exc_info:
                main(
                    [
                        "serve",
                        "--port",
                        "8001",
                        "--env",
                        "development",
                        "--upstream-base-url",
                        "http://localhost:9000",
                    ]
                )

        assert exc_info.value.code == 0
        factory.assert_called_once_with(
            log_requests=True,
            environment="development",
            upstream_base_url="http://localhost:9000",
            upstream_timeout=float(UPSTREAM_TIMEOUT),
        )
        fake_app.run.assert_called_once_with(
            host="127.0.0.1", debug=False, use_reloader=False, port=8001, threaded=True
        )
