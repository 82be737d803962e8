from __future__ import annotations

from typing import Any, Dict, Mapping
from urllib.parse import quote, urlsplit

from .config import PREFLIGHT_ALLOW_HEADERS, PREFLIGHT_ALLOW_METHODS

_PATH_SAFE = "/:@!$&'()*+,;=~"


def build_cors_headers() -> Dict[str, str]:
    return {"Access-Control-Allow-Origin": "*"}


def build_preflight_headers() -> Dict[str, str]:
    headers = build_cors_headers()
    headers["Access-Control-Allow-Methods"] = PREFLIGHT_ALLOW_METHODS
    headers["Access-Control-Allow-Headers"] = PREFLIGHT_ALLOW_HEADERS
    return headers


def raw_request_path(environ: Mapping[str, Any], decoded_path: str) -> str:
    """Return the request path as the client sent it, still percent-encoded.

    gunicorn sets ``RAW_URI`` and mod_wsgi/uWSGI set ``REQUEST_URI``; Werkzeug
    sets both. Without either, the decoded ``PATH_INFO`` is re-quoted.
    """
    raw = environ.get("RAW_URI") or environ.get("REQUEST_URI")
    if not raw:
        return quote(decoded_path, safe=_PATH_SAFE)
    path = raw.split("?", 1)[0]
    if not path.startswith("/"):
        # absolute-form target, e.g. "http://host/path"
        path = urlsplit(raw).path or "/"
    return path
