"""
FastAPI application hosting the widget callback registry.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from widgetbridge.common.config import APP_NAME, APP_VERSION, BridgeConfig, load_config, validate_config
from widgetbridge.common.logging import init_structured_logging, install_fastapi_request_id_middleware
from widgetbridge.registry import CallbackRegistry

logger = logging.getLogger(__name__)


def create_app(
    registry: Optional[CallbackRegistry] = None,
    *,
    config: Optional[BridgeConfig] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """
    Build the application. Pass a shared `registry` so pages can register
    endpoints against the same router that serves them.
    """
    cfg = config or (registry.config if registry is not None else load_config())
    reg = registry or CallbackRegistry(cfg)

    if configure_logging:
        init_structured_logging(service=cfg.service_name, env=cfg.env, version=APP_VERSION, level=cfg.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {APP_NAME} v{APP_VERSION}")

        config_errors = validate_config(cfg)
        if config_errors:
            logger.error("Configuration errors detected:")
            for error in config_errors:
                logger.error(f"  - {error}")
        else:
            logger.info("Configuration validated successfully")

        yield

        logger.info(f"Shutting down {APP_NAME}")

    app = FastAPI(title=APP_NAME, version=APP_VERSION, lifespan=lifespan)
    app.state.registry = reg
    app.include_router(reg.router)

    if cfg.log_requests:
        install_fastapi_request_id_middleware(app, service=cfg.service_name)

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "widgetbridge.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=int(os.environ.get("PORT", 8080)),
    )
