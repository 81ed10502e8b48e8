"""
JSON-line logging for the callback bridge.

- one JSON object per line on stdout, with service/env/version/request_id
  and a stable `event_type` on every record
- `log_event` for semantic events (`callback.dropped`, `feed.served`, ...)
- request ids bound per callback request by the FastAPI middleware
  (X-Request-ID in, X-Request-ID out, one `http.request` line per request)
"""

from __future__ import annotations

import json
import logging
import sys
import time
import traceback
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Iterator, Optional

from widgetbridge.common.config import APP_NAME, APP_VERSION

_REQUEST_ID: ContextVar[Optional[str]] = ContextVar("widgetbridge_request_id", default=None)

# Attributes every LogRecord carries; anything else came in through `extra`.
_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}
_CORE_KEYS = frozenset({"service", "env", "version", "request_id", "event_type", "severity", "timestamp"})

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _one_line(v: Any, *, max_len: int = 2000) -> str:
    s = "" if v is None else str(v)
    s = " ".join(s.splitlines()).strip()
    return s if len(s) <= max_len else s[: max_len - 3] + "..."


def _severity(level: Any) -> str:
    s = str(level or "INFO").upper()
    if s == "WARN":
        return "WARNING"
    return s if s in _LEVELS else "INFO"


def get_request_id() -> Optional[str]:
    return _REQUEST_ID.get()


@contextmanager
def bind_request_id(*, request_id: str | None = None) -> Iterator[str]:
    """Bind a request id (generated when absent) for the enclosed block."""
    rid = _one_line(request_id, max_len=128) or uuid.uuid4().hex
    token = _REQUEST_ID.set(rid)
    try:
        yield rid
    finally:
        _REQUEST_ID.reset(token)


class JsonLogFormatter(logging.Formatter):
    def __init__(self, *, service: str | None = None, env: str | None = None, version: str | None = None) -> None:
        super().__init__()
        self._service = service or APP_NAME
        self._env = env or "dev"
        self._version = version or APP_VERSION

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "severity": _severity(record.levelname),
            "service": getattr(record, "service", None) or self._service,
            "env": self._env,
            "version": self._version,
            "request_id": getattr(record, "request_id", None) or get_request_id(),
            "event_type": getattr(record, "event_type", None) or "log",
            "message": _one_line(record.getMessage(), max_len=4000),
            "logger": record.name,
        }
        if record.exc_info:
            payload["exception"] = "".join(traceback.format_exception(*record.exc_info))[-8000:]

        for k, v in record.__dict__.items():
            if k in _RECORD_ATTRS or k in _CORE_KEYS or k.startswith("_"):
                continue
            payload[k] = v

        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str)


def init_structured_logging(
    *,
    service: str | None = None,
    env: str | None = None,
    version: str | None = None,
    level: str | int | None = None,
) -> None:
    """
    Route the root logger (and uvicorn's) to one JSON handler on stdout.

    Calling it again replaces the previous handler.
    """
    lvl = _severity(level) if not isinstance(level, int) else level
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonLogFormatter(service=service, env=env, version=version))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(lvl)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        lg = logging.getLogger(name)
        lg.handlers = []
        lg.propagate = True


def log_event(
    logger: logging.Logger,
    event_type: str,
    *,
    severity: str = "INFO",
    message: str | None = None,
    **fields: Any,
) -> None:
    """
    Log a semantic event; `fields` become top-level JSON keys.
    """
    lvl = getattr(logging, _severity(severity))
    logger.log(lvl, message or event_type, extra={"event_type": event_type, **fields})


def install_fastapi_request_id_middleware(app: Any, *, service: str | None = None) -> None:
    from starlette.requests import Request
    from starlette.responses import Response

    http_logger = logging.getLogger("widgetbridge.http")
    svc = service or APP_NAME

    @app.middleware("http")
    async def _request_id_mw(request: Request, call_next) -> Response:
        start = time.perf_counter()
        status_code = 500
        with bind_request_id(request_id=request.headers.get("x-request-id")) as rid:
            try:
                resp: Response = await call_next(request)
                status_code = resp.status_code
            finally:
                log_event(
                    http_logger,
                    "http.request",
                    service=svc,
                    method=request.method,
                    path=request.url.path,
                    status_code=status_code,
                    duration_ms=int((time.perf_counter() - start) * 1000),
                )
        resp.headers["X-Request-ID"] = rid
        return resp
