from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence

from widgetbridge.codec import ParameterBag
from widgetbridge.dispatch import Dispatcher, DispatchOutcome
from widgetbridge.endpoint import CallbackEndpoint, CallbackParameter, Endpoint, Widget
from widgetbridge.feed import DataFeedEndpoint, RowRenderer, RowSource, RowTemplate, refresh_statement
from widgetbridge.target import RefreshTarget


class JsExpression(str):
    """A client-side expression emitted verbatim inside rendered options."""


@dataclass
class Component:
    markup_id: str

    @property
    def selector(self) -> str:
        return f"#{self.markup_id}"


def render_options(value: Any) -> str:
    """
    Render an options value as a JavaScript literal. `JsExpression` values
    (callback functions, element lookups) are emitted unquoted.
    """
    if isinstance(value, JsExpression):
        return str(value)
    if isinstance(value, Mapping):
        inner = ", ".join(f"{json.dumps(str(k))}: {render_options(v)}" for k, v in value.items())
        return "{ " + inner + " }" if inner else "{}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(render_options(v) for v in value) + "]"
    return json.dumps(value)


def widget_expr(markup_id: str, method: str) -> str:
    return f"jQuery('#{markup_id}').data('{method}')"


class WidgetBehavior:
    """
    Common plumbing for widget behaviors: owns the widget's endpoints and its
    dispatcher, and forwards decoded events to the listener.
    """

    method = ""

    def __init__(self, component: Widget, listener: Any, *, throttle_ms: Optional[int] = None) -> None:
        self.component = component
        self.listener = listener
        self.throttle_ms = throttle_ms
        self.dispatcher = Dispatcher(self.method or type(self).__name__)
        self._endpoints: list[Endpoint] = []

    @property
    def endpoints(self) -> list[Endpoint]:
        return list(self._endpoints)

    def _callback(
        self,
        decode: Callable[[ParameterBag], Any],
        parameters: Sequence[CallbackParameter],
        *,
        suffix: str = "",
    ) -> CallbackEndpoint:
        endpoint = CallbackEndpoint(
            self,
            decode,
            parameters=parameters,
            throttle_ms=self.throttle_ms,
            suffix=suffix,
        )
        endpoint.bind(self.component)
        self._endpoints.append(endpoint)
        return endpoint

    def _feed(
        self,
        source: RowSource,
        *,
        renderer: Optional[RowRenderer] = None,
        template: Optional[RowTemplate] = None,
    ) -> DataFeedEndpoint:
        feed = DataFeedEndpoint(source, renderer=renderer, template=template)
        feed.bind(self.component)
        self._endpoints.append(feed)
        return feed

    def register(self, registry: Any) -> None:
        for endpoint in self._endpoints:
            registry.register(endpoint)

    def on_ajax(self, target: RefreshTarget, event: Any) -> DispatchOutcome:
        return self.dispatcher.dispatch(self.listener, target, event)

    # Client statements

    def widget(self) -> str:
        return widget_expr(self.component.markup_id, self.method)

    def options(self) -> dict[str, Any]:
        return {}

    def statement(self) -> str:
        return f"jQuery('#{self.component.markup_id}').{self.method}({render_options(self.options())});"

    def reload(self, target: RefreshTarget) -> None:
        target.add(self.component.markup_id)

    def refresh(self, target: RefreshTarget) -> None:
        target.append_javascript(refresh_statement(self.widget()))
