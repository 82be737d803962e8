from __future__ import annotations

from typing import Any

from flask import Blueprint, Request, Response, current_app, jsonify, make_response, request, stream_with_context

from .config import (
    GEMINI_OPENAI_BASE_URL,
    INTERNAL_ERROR,
    INVALID_JSON_ERROR,
    INVALID_JSON_MESSAGE,
    PROXY_METHODS,
    STREAM_RESPONSE_HEADERS,
    UPSTREAM_TIMEOUT,
)
from .http import build_preflight_headers, raw_request_path
from .relay import parse_buffered_body, stream_upstream
from .upstream import (
    build_upstream_headers,
    build_upstream_url,
    is_streaming_request,
    serialize_body,
    start_upstream_request,
)
from .utils import format_trace, is_development, log_event

proxy_bp = Blueprint("proxy", __name__)


def _inbound_body(req: Request) -> Any:
    # Absent or unparseable bodies forward as an empty object.
    body = req.get_json(force=True, silent=True)
    return {} if body is None else body


def _forward(req: Request) -> Response:
    log_requests = bool(current_app.config.get("LOG_REQUESTS", True))
    base_url = current_app.config.get("UPSTREAM_BASE_URL") or GEMINI_OPENAI_BASE_URL
    timeout = current_app.config.get("UPSTREAM_TIMEOUT", UPSTREAM_TIMEOUT)

    body = _inbound_body(req)
    path = raw_request_path(req.environ, req.path)
    query_string = req.query_string.decode("utf-8", errors="replace")

    if log_requests:
        log_event(
            "Incoming request",
            method=req.method,
            path=path + (f"?{query_string}" if query_string else ""),
            headers=dict(req.headers),
            body=body,
        )

    url = build_upstream_url(path, query_string, base_url=base_url)
    if log_requests:
        log_event("Forwarding request to", url=url)

    headers = build_upstream_headers(req.headers)
    is_stream = is_streaming_request(body)

    upstream = start_upstream_request(
        req.method,
        url,
        headers,
        serialize_body(req.method, body),
        stream=is_stream,
        timeout=timeout,
    )
    if log_requests:
        log_event("Upstream response status", status=upstream.status_code)

    if is_stream:
        resp = Response(
            stream_with_context(stream_upstream(upstream)),
            status=200,
            headers=dict(STREAM_RESPONSE_HEADERS),
        )
        resp.headers.setdefault("X-Accel-Buffering", "no")
        return resp

    try:
        response_text = upstream.content.decode("utf-8", errors="replace")
    finally:
        upstream.close()
    if log_requests:
        log_event("Upstream response body", body=response_text)

    ok, data = parse_buffered_body(response_text)
    if not ok:
        return make_response(
            jsonify(
                {
                    "error": INVALID_JSON_ERROR,
                    "message": INVALID_JSON_MESSAGE,
                    "responseText": response_text,
                }
            ),
            500,
        )

    return make_response(jsonify(data), upstream.status_code)


def proxy_gemini(req: Request) -> Response:
    """Relay one request to the Gemini OpenAI-compatible endpoint.

    OPTIONS is answered locally as a CORS preflight. Everything else is
    forwarded with a rewritten URL and a minimal header set, and the upstream
    answer is either streamed through or buffered and replayed as JSON.
    CORS headers on forwarded responses are added by the app's
    ``after_request`` hook.
    """
    if req.method == "OPTIONS":
        return make_response("", 204, build_preflight_headers())

    try:
        return _forward(req)
    except Exception as exc:
        trace = format_trace(exc)
        log_event("Error details", message=str(exc), stack=trace)
        payload = {"error": INTERNAL_ERROR, "message": str(exc)}
        if is_development(current_app.config.get("ENVIRONMENT")):
            payload["stack"] = trace
        return make_response(jsonify(payload), 500)


@proxy_bp.route("/", defaults={"path": ""}, methods=PROXY_METHODS)
@proxy_bp.route("/<path:path>", methods=PROXY_METHODS)
def proxy(path: str) -> Response:
    return proxy_gemini(request)


@proxy_bp.app_errorhandler(405)
def proxy_other_methods(exc) -> Response:
    # Routing only knows PROXY_METHODS; anything else (PROPFIND, ...) is forwarded too.
    return proxy_gemini(request)
