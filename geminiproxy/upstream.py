from __future__ import annotations

import json
from typing import Any, Dict, Mapping

import requests

from .config import (
    DEFAULT_ACCEPT,
    GEMINI_OPENAI_BASE_URL,
    GEMINI_OPENAI_PREFIX,
    UPSTREAM_CONTENT_TYPE,
    UPSTREAM_TIMEOUT,
)


def rewrite_path(path: str) -> str:
    """Drop a leading ``/v1beta/openai`` so it is not duplicated on the base URL."""
    if path.startswith(GEMINI_OPENAI_PREFIX):
        return path[len(GEMINI_OPENAI_PREFIX):]
    return path


def build_upstream_url(path: str, query_string: str = "", base_url: str = GEMINI_OPENAI_BASE_URL) -> str:
    url = base_url + rewrite_path(path)
    if query_string:
        url += "?" + query_string
    return url


def build_upstream_headers(inbound: Mapping[str, str]) -> Dict[str, str]:
    """Build the only headers sent upstream.

    Authorization is copied as-is and left out when the caller sent none.
    Content-Type is always JSON and Accept falls back to JSON.
    """
    headers: Dict[str, str] = {}
    authorization = inbound.get("Authorization")
    if authorization is not None:
        headers["Authorization"] = authorization
    headers["Content-Type"] = UPSTREAM_CONTENT_TYPE
    headers["Accept"] = inbound.get("Accept") or DEFAULT_ACCEPT
    return headers


def serialize_body(method: str, body: Any) -> str | None:
    if method.upper() == "GET":
        return None
    return json.dumps(body, ensure_ascii=False, separators=(",", ":"))


def is_streaming_request(body: Any) -> bool:
    return isinstance(body, dict) and body.get("stream") is True


def start_upstream_request(
    method: str,
    url: str,
    headers: Dict[str, str],
    data: str | None,
    *,
    stream: bool = False,
    timeout: float | None = UPSTREAM_TIMEOUT,
) -> requests.Response:
    return requests.request(
        method,
        url,
        headers=headers,
        data=data.encode("utf-8") if data is not None else None,
        stream=stream,
        timeout=timeout,
    )
