from __future__ import annotations

from typing import Any, Optional

from widgetbridge.endpoint import Widget
from widgetbridge.feed import RowRenderer, RowSource, RowTemplate
from widgetbridge.widgets.base import JsExpression, WidgetBehavior


class DataView(WidgetBehavior):
    """
    List view pulling its rows from a data feed.

    With a template, each row is served pre-rendered under the template token
    and the client template simply outputs it.
    """

    method = "kendoListView"

    def __init__(
        self,
        component: Widget,
        rows: RowSource,
        *,
        page_size: int = 0,
        renderer: Optional[RowRenderer] = None,
        template: Optional[RowTemplate] = None,
        auto_bind: bool = True,
    ) -> None:
        super().__init__(component, None)
        self.page_size = page_size
        self.template = template
        self.auto_bind = auto_bind
        self.feed = self._feed(rows, renderer=renderer, template=template)

    def options(self) -> dict[str, Any]:
        data_source: dict[str, Any] = {
            "transport": {"read": {"url": self.feed.callback_url, "dataType": "json"}},
        }
        if self.page_size > 0:
            data_source["pageSize"] = self.page_size
        opts: dict[str, Any] = {"autoBind": self.auto_bind, "dataSource": data_source}
        if self.template is not None:
            opts["template"] = JsExpression(f"function(row) {{ return row[{_js_str(self.template.token)}]; }}")
        return opts


def _js_str(s: str) -> str:
    return "'" + s.replace("\\", "\\\\").replace("'", "\\'") + "'"
