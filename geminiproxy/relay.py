from __future__ import annotations

import json
from typing import Any, Iterator, Tuple

import requests

from .utils import log_event


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def stream_upstream(upstream: requests.Response, chunk_size: int | None = None) -> Iterator[bytes]:
    """Yield upstream body chunks as they arrive.

    A failure mid-stream is logged and ends the generator quietly; the caller
    already has a 200 and the event-stream headers by then. The upstream
    connection is closed exactly once on every exit path.
    """
    try:
        for chunk in upstream.iter_content(chunk_size=chunk_size):
            if chunk:
                yield chunk
    except Exception as exc:
        log_event("Stream error", error=f"{type(exc).__name__}: {exc}")
    finally:
        upstream.close()


def parse_buffered_body(text: str) -> Tuple[bool, Any]:
    # NaN and Infinity are not JSON
    try:
        return True, json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        log_event("Failed to parse response as JSON", error=str(exc))
        return False, None
