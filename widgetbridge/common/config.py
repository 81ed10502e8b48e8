"""
Configuration for the widget callback bridge.

All settings are loaded from environment variables at call time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

APP_NAME = "widgetbridge"
APP_VERSION = "0.3.0"

DEFAULT_CALLBACK_PATH = "/_callback"
DEFAULT_AJAX_GET = "jQuery.get"


def _parse_bool(raw: str | None, *, default: bool = False) -> bool:
    s = (raw or "").strip().lower()
    if not s:
        return default
    return s in {"1", "true", "t", "yes", "y", "on"}


def _parse_int(raw: str | None, *, default: int) -> int:
    s = (raw or "").strip()
    if not s:
        return default
    try:
        return int(s)
    except ValueError:
        return default


@dataclass(frozen=True)
class BridgeConfig:
    """
    Runtime settings for callback URLs, client triggers and logging.

    - callback_path: route path that serves every registered endpoint
    - ajax_get: client-side function issuing the asynchronous GET
    - default_throttle_ms: throttle applied to endpoints that do not set one
    - log_requests: install the request-id middleware (one http.request line per call)
    """

    callback_path: str = DEFAULT_CALLBACK_PATH
    ajax_get: str = DEFAULT_AJAX_GET
    default_throttle_ms: int = 0
    log_requests: bool = True
    service_name: str = APP_NAME
    env: str = "dev"
    log_level: str = "INFO"


def load_config() -> BridgeConfig:
    """
    Build a `BridgeConfig` from the environment (read-only).
    """
    path = (os.getenv("WIDGETBRIDGE_CALLBACK_PATH") or DEFAULT_CALLBACK_PATH).strip()
    return BridgeConfig(
        callback_path=path or DEFAULT_CALLBACK_PATH,
        ajax_get=(os.getenv("WIDGETBRIDGE_AJAX_GET") or DEFAULT_AJAX_GET).strip() or DEFAULT_AJAX_GET,
        default_throttle_ms=_parse_int(os.getenv("WIDGETBRIDGE_DEFAULT_THROTTLE_MS"), default=0),
        log_requests=_parse_bool(os.getenv("WIDGETBRIDGE_LOG_REQUESTS"), default=True),
        service_name=(os.getenv("SERVICE_NAME") or APP_NAME).strip() or APP_NAME,
        env=(os.getenv("ENV") or "dev").strip() or "dev",
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper() or "INFO",
    )


def validate_config(config: BridgeConfig) -> list[str]:
    """
    Validate critical configuration.
    Returns list of error messages (empty if valid).
    """
    errors = []

    if not config.callback_path.startswith("/"):
        errors.append(f"WIDGETBRIDGE_CALLBACK_PATH must start with '/', got {config.callback_path!r}")

    if "?" in config.callback_path or "&" in config.callback_path:
        errors.append("WIDGETBRIDGE_CALLBACK_PATH must not carry a query string")

    if config.default_throttle_ms < 0:
        errors.append("WIDGETBRIDGE_DEFAULT_THROTTLE_MS must be >= 0")

    if not config.ajax_get.replace(".", "").replace("_", "").replace("$", "").isalnum():
        errors.append(f"WIDGETBRIDGE_AJAX_GET is not a plain function reference: {config.ajax_get!r}")

    return errors
