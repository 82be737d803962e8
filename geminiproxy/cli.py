from __future__ import annotations

import argparse
import os
import sys

from .app import create_app
from .config import GEMINI_OPENAI_BASE_URL, UPSTREAM_TIMEOUT
from .utils import eprint, is_truthy_env


def _default_port() -> int:
    raw = os.getenv("PORT", "").strip()
    if raw.isdigit():
        return int(raw)
    return 8080


def _default_timeout() -> float:
    raw = os.getenv("GEMINI_PROXY_TIMEOUT", "").strip()
    try:
        return float(raw) if raw else float(UPSTREAM_TIMEOUT)
    except ValueError:
        eprint(f"Ignoring invalid GEMINI_PROXY_TIMEOUT={raw!r}")
        return float(UPSTREAM_TIMEOUT)


def cmd_serve(
    host: str,
    port: int,
    quiet: bool,
    environment: str,
    upstream_base_url: str,
    timeout: float | None,
) -> int:
    app = create_app(
        log_requests=not quiet,
        environment=environment,
        upstream_base_url=upstream_base_url,
        upstream_timeout=timeout,
    )

    if not quiet:
        eprint(f"Proxying http://{host}:{port} -> {app.config['UPSTREAM_BASE_URL']}")
    app.run(host=host, debug=False, use_reloader=False, port=port, threaded=True)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Gemini OpenAI-compatible forwarding proxy")
    sub = parser.add_subparsers(dest="command", required=True)

    p_serve = sub.add_parser("serve", help="Run the forwarding proxy")
    p_serve.add_argument("--host", default=os.getenv("GEMINI_PROXY_HOST", "127.0.0.1"))
    p_serve.add_argument("--port", type=int, default=_default_port())
    p_serve.add_argument(
        "--quiet",
        action="store_true",
        default=is_truthy_env(os.getenv("GEMINI_PROXY_QUIET")),
        help="Do not log requests, forwarded URLs and upstream responses; failures are always logged",
    )
    p_serve.add_argument(
        "--env",
        dest="environment",
        default=os.getenv("GEMINI_PROXY_ENV", "production"),
        help="Runtime environment; 'development' adds tracebacks to 500 responses (default: production)",
    )
    p_serve.add_argument(
        "--upstream-base-url",
        dest="upstream_base_url",
        default=os.getenv("GEMINI_PROXY_UPSTREAM_BASE_URL", GEMINI_OPENAI_BASE_URL),
        help="Base URL requests are forwarded to",
    )
    p_serve.add_argument(
        "--timeout",
        type=float,
        default=_default_timeout(),
        help=f"Upstream timeout in seconds (default: {UPSTREAM_TIMEOUT})",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        sys.exit(
            cmd_serve(
                host=args.host,
                port=args.port,
                quiet=args.quiet,
                environment=args.environment,
                upstream_base_url=args.upstream_base_url,
                timeout=args.timeout,
            )
        )
    else:
        parser.error("Unknown command")


if __name__ == "__main__":
    main()
