from __future__ import annotations

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai"
GEMINI_OPENAI_PREFIX = "/v1beta/openai"

DEFAULT_ACCEPT = "application/json"
UPSTREAM_CONTENT_TYPE = "application/json"
UPSTREAM_TIMEOUT = 600

PREFLIGHT_ALLOW_METHODS = "GET, POST, OPTIONS"
PREFLIGHT_ALLOW_HEADERS = "Content-Type, Authorization"

STREAM_RESPONSE_HEADERS = {
    "Content-Type": "text/event-stream",
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}

# Every method the catch-all route accepts; OPTIONS is answered locally.
PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

DEVELOPMENT_ENV = "development"

INVALID_JSON_ERROR = "Invalid JSON Response"
INVALID_JSON_MESSAGE = "Failed to parse Gemini API response"
INTERNAL_ERROR = "Internal Server Error"
