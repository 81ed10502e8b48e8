"""
Chart widget: series rows come from a data feed, series clicks come back as events.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence

from pydantic import BaseModel

from widgetbridge.endpoint import CallbackEndpoint, CallbackParameter, Widget
from widgetbridge.events import decode_series_click
from widgetbridge.feed import ModelRenderer, RowSource
from widgetbridge.target import RefreshTarget
from widgetbridge.widgets.base import JsExpression, WidgetBehavior

SERIES_CLICK_PARAMETERS = (
    CallbackParameter.context("e"),
    CallbackParameter.resolved("seriesName", "e.series.name"),
    CallbackParameter.resolved("seriesField", "e.series.field"),
    CallbackParameter.resolved("category", "e.category"),
    CallbackParameter.resolved("value", "e.value"),
)


@dataclass(frozen=True)
class Series:
    field: str
    name: str
    type: str = "line"

    def to_options(self) -> dict[str, Any]:
        return {"field": self.field, "name": self.name, "type": self.type}


class ChartListener(Protocol):
    def on_series_click(
        self, target: RefreshTarget, series_name: str, series_field: str, category: str, value: int
    ) -> None: ...


class Chart(WidgetBehavior):
    method = "kendoChart"

    def __init__(
        self,
        component: Widget,
        rows: RowSource,
        series: Sequence[Series],
        *,
        model: type[BaseModel],
        listener: Optional[ChartListener] = None,
        category_field: Optional[str] = None,
        throttle_ms: Optional[int] = None,
    ) -> None:
        super().__init__(component, listener, throttle_ms=throttle_ms)
        self.series = list(series)
        self.category_field = category_field
        self.feed = self._feed(rows, renderer=ModelRenderer(model))
        self.series_click_endpoint: Optional[CallbackEndpoint] = None

        # Series clicks are only wired when someone listens.
        if listener is not None:
            self.series_click_endpoint = self._callback(decode_series_click, SERIES_CLICK_PARAMETERS)
            self.dispatcher.on(
                "series_click",
                lambda lsn, t, e: lsn.on_series_click(t, e.series_name, e.series_field, e.category, e.value),
            )

    def options(self) -> dict[str, Any]:
        selector = f"#{self.component.markup_id}"
        opts: dict[str, Any] = {
            "dataSource": {
                "transport": {"read": {"url": self.feed.callback_url, "dataType": "json"}},
                "requestStart": JsExpression(f"function() {{ kendo.ui.progress(jQuery('{selector}'), true); }}"),
                "requestEnd": JsExpression(f"function() {{ kendo.ui.progress(jQuery('{selector}'), false); }}"),
            },
            "series": [s.to_options() for s in self.series],
        }
        if self.category_field:
            opts["categoryAxis"] = {"field": self.category_field}
        if self.series_click_endpoint is not None:
            opts["seriesClick"] = JsExpression(self.series_click_endpoint.trigger_expression())
        return opts
