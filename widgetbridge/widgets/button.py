from __future__ import annotations

from typing import Any, Callable, Optional

from widgetbridge.endpoint import CallbackEndpoint, CallbackParameter, Widget
from widgetbridge.events import keyed
from widgetbridge.target import RefreshTarget
from widgetbridge.widgets.base import JsExpression, WidgetBehavior

EDIT = "edit"
DESTROY = "destroy"


class CommandButton(WidgetBehavior):
    """
    Row command button of a data table. A click sends the value of `property`
    of the clicked row's data item (`id` by default).

    Built-in commands (edit/destroy) are handled by the client grid and get no
    callback; disabled buttons get none either.
    """

    method = "kendoGrid"

    def __init__(
        self,
        component: Widget,
        name: str,
        text: str,
        on_click: Optional[Callable[[RefreshTarget, str], None]] = None,
        *,
        property: str = "id",
        enabled: bool = True,
        icon: Optional[str] = None,
        throttle_ms: Optional[int] = None,
    ) -> None:
        super().__init__(component, on_click, throttle_ms=throttle_ms)
        self.name = name
        self.text = text
        self.property = property
        self.enabled = enabled
        self.icon = icon
        self.click_endpoint: Optional[CallbackEndpoint] = None

        if enabled and not self.is_builtin and on_click is not None:
            self.click_endpoint = self._callback(
                keyed("command_click", name="value"),
                (
                    CallbackParameter.context("e"),
                    CallbackParameter.resolved(
                        "value", f"this.dataItem(jQuery(e.currentTarget).closest('tr'))['{property}']"
                    ),
                ),
            )
            self.dispatcher.on("command_click", lambda fn, t, e: fn(t, e.item_id))

    @property
    def is_builtin(self) -> bool:
        return self.name in (EDIT, DESTROY)

    @property
    def css_class(self) -> str:
        return "" if self.enabled else "k-state-disabled"

    def to_options(self) -> dict[str, Any]:
        # Disabled built-ins are renamed so the grid does not fire them.
        name = self.name if self.enabled else f"disabled_{self.name}"
        opts: dict[str, Any] = {"name": name, "text": self.text}
        if self.css_class:
            opts["className"] = self.css_class
        if self.icon:
            opts["imageClass"] = f"k-icon k-i-{self.icon}"
        if self.click_endpoint is not None:
            opts["click"] = JsExpression(self.click_endpoint.trigger_expression())
        return opts
