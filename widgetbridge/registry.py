"""
Callback registry: makes endpoints reachable over HTTP.

GET {callback_path}?_cb=<endpoint_id>[&name=value]*

- callback endpoints answer with the refresh instructions collected by their
  listener: {"components": [...], "scripts": [...]}
- data-feed endpoints answer with their JSON array
- decode failures answer 400 with an opaque detail; no partial update is sent
- unknown endpoint ids answer 404
"""

from __future__ import annotations

import logging
import threading
from typing import Optional, Union

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import JSONResponse

from widgetbridge.codec import ParameterBag
from widgetbridge.common.config import BridgeConfig, load_config
from widgetbridge.common.logging import log_event
from widgetbridge.endpoint import ENDPOINT_KEY, CallbackEndpoint, Endpoint
from widgetbridge.errors import DecodeError
from widgetbridge.feed import DataFeedEndpoint

logger = logging.getLogger(__name__)

OPAQUE_FAILURE = "callback request failed"

AnyEndpoint = Union[CallbackEndpoint, DataFeedEndpoint]


class CallbackRegistry:
    def __init__(self, config: Optional[BridgeConfig] = None) -> None:
        self.config = config or load_config()
        self._endpoints: dict[str, Endpoint] = {}
        self._lock = threading.Lock()
        self.router = APIRouter()
        self.router.add_api_route(
            self.config.callback_path,
            self._route,
            methods=["GET"],
            name="widgetbridge_callback",
            include_in_schema=False,
        )

    def __len__(self) -> int:
        return len(self._endpoints)

    def __contains__(self, endpoint_id: object) -> bool:
        return endpoint_id in self._endpoints

    def register(self, endpoint: AnyEndpoint) -> str:
        """
        Make `endpoint` reachable and return its callback URL.
        """
        with self._lock:
            existing = self._endpoints.get(endpoint.endpoint_id)
            if existing is not None and existing is not endpoint:
                raise ValueError(f"endpoint id already registered: {endpoint.endpoint_id}")
            url = endpoint.attach(
                self.config.callback_path,
                ajax_get=self.config.ajax_get,
                default_throttle_ms=self.config.default_throttle_ms,
            )
            self._endpoints[endpoint.endpoint_id] = endpoint
        log_event(
            logger,
            "endpoint.registered",
            severity="DEBUG",
            endpoint_id=endpoint.endpoint_id,
            endpoint_type=type(endpoint).__name__,
        )
        return url

    def unregister(self, endpoint_id: str) -> bool:
        with self._lock:
            return self._endpoints.pop(endpoint_id, None) is not None

    def get(self, endpoint_id: str) -> Optional[Endpoint]:
        return self._endpoints.get(endpoint_id)

    def handle(self, query: ParameterBag) -> Union[dict, list]:
        """
        Serve one request given its full query mapping (routing key included).

        Raises HTTPException for unknown endpoints and failed decodes.
        """
        endpoint_id = str(query.get(ENDPOINT_KEY) or "")
        endpoint = self._endpoints.get(endpoint_id)
        if endpoint is None:
            log_event(logger, "callback.unknown_endpoint", severity="WARNING", endpoint_id=endpoint_id)
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="unknown callback endpoint")

        if isinstance(endpoint, DataFeedEndpoint):
            return endpoint.on_request()

        bag = {k: v for k, v in query.items() if k != ENDPOINT_KEY}
        try:
            target = endpoint.on_request(bag)
        except DecodeError as e:
            log_event(
                logger,
                "callback.decode_failed",
                severity="WARNING",
                endpoint_id=endpoint_id,
                error_type=type(e).__name__,
                parameter=e.name,
                error=str(e),
            )
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=OPAQUE_FAILURE) from e
        return target.to_dict()

    async def _route(self, request: Request) -> JSONResponse:
        payload = self.handle(dict(request.query_params))
        return JSONResponse(content=payload, media_type="application/json")
