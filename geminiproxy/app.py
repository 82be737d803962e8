from __future__ import annotations

from flask import Flask

from .config import GEMINI_OPENAI_BASE_URL, UPSTREAM_TIMEOUT
from .http import build_cors_headers
from .routes_proxy import proxy_bp


def create_app(
    log_requests: bool = True,
    environment: str = "production",
    upstream_base_url: str = GEMINI_OPENAI_BASE_URL,
    upstream_timeout: float | None = UPSTREAM_TIMEOUT,
) -> Flask:
    app = Flask(__name__)

    app.config.update(
        LOG_REQUESTS=bool(log_requests),
        ENVIRONMENT=environment,
        UPSTREAM_BASE_URL=(upstream_base_url or GEMINI_OPENAI_BASE_URL).rstrip("/"),
        UPSTREAM_TIMEOUT=upstream_timeout,
    )

    # Relay upstream JSON without escaping or reordering it.
    app.json.ensure_ascii = False
    app.json.sort_keys = False

    @app.after_request
    def _cors(resp):
        for k, v in build_cors_headers().items():
            resp.headers.setdefault(k, v)
        return resp

    app.register_blueprint(proxy_bp)

    return app
