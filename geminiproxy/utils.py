from __future__ import annotations

import json
import sys
import traceback
from typing import Any

from .config import DEVELOPMENT_ENV


def eprint(*args, **kwargs) -> None:
    print(*args, file=sys.stderr, **kwargs)


def is_truthy_env(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def is_development(environment: str | None) -> bool:
    return (environment or "").strip().lower() == DEVELOPMENT_ENV


def format_trace(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def log_event(label: str, **fields: Any) -> None:
    """Write one ``label: {json}`` line to stderr.

    Values that are not JSON serializable fall back to ``repr``. A failure to
    format or write the line is dropped so that logging never breaks a request.
    """
    try:
        if fields:
            payload = json.dumps(fields, ensure_ascii=False, default=lambda o: repr(o))
            eprint(f"{label}: {payload}")
        else:
            eprint(label)
    except Exception:
        pass
