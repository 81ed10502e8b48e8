"""
Callback endpoints: one server-reachable trigger bound to one widget.

An endpoint is built by composition rather than subclassing:
- `parameters` declares how the client reads values off the widget's native
  event arguments into query fields (`CallbackParameter`)
- `decode` turns the received parameter bag into one event variant
- `source` receives the decoded event (`on_ajax(target, event)`), usually a
  widget behavior that owns a `Dispatcher`

Lifecycle:
1. construct
2. `bind(widget)` exactly once
3. `CallbackRegistry.register(endpoint)` assigns the callback URL
4. `trigger_expression()` is rendered into the widget options
5. `on_request(bag)` runs for every client call
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, Sequence
from urllib.parse import quote

from widgetbridge.codec import ParameterBag
from widgetbridge.common.config import DEFAULT_AJAX_GET
from widgetbridge.errors import AlreadyBound
from widgetbridge.target import RefreshTarget
from widgetbridge.throttle import Throttle

logger = logging.getLogger(__name__)

# Query key the registry uses to route a request to its endpoint.
ENDPOINT_KEY = "_cb"


class Widget(Protocol):
    markup_id: str


class AjaxAware(Protocol):
    def on_ajax(self, target: RefreshTarget, event: Any) -> None: ...


@dataclass(frozen=True)
class CallbackParameter:
    """
    One entry of a trigger's parameter spec.

    - context(name): function argument only, not sent
    - explicit(name): function argument sent as-is under the same name
    - resolved(name, expression): query field computed from a client expression
    """

    name: str
    argument: bool
    expression: Optional[str] = None

    @staticmethod
    def context(name: str) -> "CallbackParameter":
        return CallbackParameter(name=name, argument=True, expression=None)

    @staticmethod
    def explicit(name: str) -> "CallbackParameter":
        return CallbackParameter(name=name, argument=True, expression=name)

    @staticmethod
    def resolved(name: str, expression: str) -> "CallbackParameter":
        return CallbackParameter(name=name, argument=False, expression=expression)

    @property
    def sent(self) -> bool:
        return self.expression is not None


class Endpoint:
    """
    Binding + URL bookkeeping shared by callback and data-feed endpoints.
    """

    def __init__(self, *, name: Optional[str] = None) -> None:
        self.endpoint_id = name or uuid.uuid4().hex[:16]
        self._widget: Optional[Widget] = None
        self._url: Optional[str] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.endpoint_id!r}, bound={self.is_bound})"

    # Binding

    @property
    def widget(self) -> Optional[Widget]:
        return self._widget

    @property
    def is_bound(self) -> bool:
        return self._widget is not None

    def bind(self, widget: Widget) -> None:
        """
        Bind this endpoint to its widget. The binding is permanent: every later
        call raises `AlreadyBound` and leaves the original widget in place.
        """
        if self._widget is not None:
            raise AlreadyBound(
                f"endpoint {self.endpoint_id} is already bound to widget "
                f"{getattr(self._widget, 'markup_id', '?')!r}"
            )
        self._widget = widget

    # URL

    def attach(self, base_path: str, *, ajax_get: str = DEFAULT_AJAX_GET, default_throttle_ms: int = 0) -> str:  # noqa: ARG002
        """
        Called by the registry: fixes the callback URL.
        """
        self._url = f"{base_path}?{ENDPOINT_KEY}={quote(self.endpoint_id, safe='')}"
        return self._url

    @property
    def is_registered(self) -> bool:
        return self._url is not None

    @property
    def callback_url(self) -> str:
        if self._url is None:
            raise RuntimeError(f"endpoint {self.endpoint_id} is not registered")
        return self._url


class CallbackEndpoint(Endpoint):
    def __init__(
        self,
        source: AjaxAware,
        decode: Callable[[ParameterBag], Any],
        *,
        parameters: Sequence[CallbackParameter] = (),
        throttle_ms: Optional[int] = None,
        suffix: str = "",
        name: Optional[str] = None,
    ) -> None:
        if throttle_ms is not None and throttle_ms < 0:
            raise ValueError("throttle_ms must be >= 0")
        super().__init__(name=name)
        self.source = source
        self.decode = decode
        self.parameters = tuple(parameters)
        self.throttle_ms = throttle_ms
        self.suffix = suffix
        self._ajax_get = DEFAULT_AJAX_GET

    def attach(self, base_path: str, *, ajax_get: str = DEFAULT_AJAX_GET, default_throttle_ms: int = 0) -> str:
        url = super().attach(base_path)
        self._ajax_get = ajax_get
        if self.throttle_ms is None:
            self.throttle_ms = max(0, int(default_throttle_ms))
        return url

    # Client trigger

    def callback_script(self, parameters: Optional[Sequence[CallbackParameter]] = None) -> str:
        """
        The statement issuing the asynchronous GET with the sent parameters appended.
        """
        params = self.parameters if parameters is None else tuple(parameters)
        parts = [json.dumps(self.callback_url)]
        for p in params:
            if not p.sent:
                continue
            parts.append(f"{json.dumps('&' + quote(p.name, safe='') + '=')} + encodeURIComponent({p.expression})")
        return f"{self._ajax_get}({' + '.join(parts)});"

    def trigger_expression(self, parameters: Optional[Sequence[CallbackParameter]] = None) -> str:
        """
        Client-side function literal to hand to the widget as its event callback.
        """
        params = self.parameters if parameters is None else tuple(parameters)
        args = ", ".join(p.name for p in params if p.argument)
        throttle = Throttle(throttle_id=self.endpoint_id, interval_ms=int(self.throttle_ms or 0))
        body = throttle.wrap(self.callback_script(params))
        # The suffix runs whether or not the throttle let the request through.
        if self.suffix:
            body = f"{body} {self.suffix}"
        return f"function({args}) {{ {body} }}"

    # Request handling

    def on_request(self, bag: ParameterBag) -> RefreshTarget:
        """
        Decode the bag into one event, then hand it to the source.

        Decode errors propagate to the caller before any listener runs.
        """
        event = self.decode(bag)
        target = RefreshTarget()
        self.source.on_ajax(target, event)
        return target
