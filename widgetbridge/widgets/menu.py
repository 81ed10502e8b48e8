from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Protocol, Sequence, Union

from widgetbridge.endpoint import CallbackParameter, Widget
from widgetbridge.events import keyed, simple
from widgetbridge.target import RefreshTarget
from widgetbridge.widgets.base import JsExpression, WidgetBehavior

COMPONENT_CSS = "context-menu-invoker"


@dataclass(frozen=True)
class MenuItem:
    item_id: str
    title: str
    enabled: bool = True


class ContextMenuListener(Protocol):
    def on_context_menu(self, target: RefreshTarget, component: Widget) -> None: ...

    def on_click(self, target: RefreshTarget, item: MenuItem) -> None: ...


class ContextMenuBehavior(WidgetBehavior):
    """
    Opens a server-side context menu on right click and routes item clicks.

    The right-click trigger returns `false` so the browser menu is suppressed.
    Clicked item ids are resolved against the current item map; ids that no
    longer exist (or belong to disabled items) are dropped.
    """

    method = "kendoContextMenu"

    def __init__(
        self,
        component: Widget,
        items: Union[Sequence[MenuItem], Callable[[], Sequence[MenuItem]]],
        listener: ContextMenuListener,
        *,
        throttle_ms: Optional[int] = None,
    ) -> None:
        super().__init__(component, listener, throttle_ms=throttle_ms)
        self._items = items
        self.open_endpoint = self._callback(
            simple("context_menu"),
            (CallbackParameter.context("event"),),
            suffix="return false;",
        )
        self.click_endpoint = self._callback(
            keyed("menu_click", name="id"),
            (CallbackParameter.context("e"), CallbackParameter.resolved("id", "jQuery(e.item).attr('id')")),
        )
        self.dispatcher.on("context_menu", lambda lsn, t, e: lsn.on_context_menu(t, self.component))
        self.dispatcher.on("menu_click", lambda lsn, t, e, item: lsn.on_click(t, item), collection=self.item_map)

    def item_map(self) -> Mapping[str, MenuItem]:
        items = self._items() if callable(self._items) else self._items
        return {item.item_id: item for item in items if item.enabled}

    def options(self) -> dict[str, Any]:
        return {"select": JsExpression(self.click_endpoint.trigger_expression())}

    def bind_statement(self) -> str:
        selector = f"#{self.component.markup_id}"
        return (
            f"jQuery(function() {{ jQuery('{selector}').addClass('{COMPONENT_CSS}')"
            f".on('contextmenu', {self.open_endpoint.trigger_expression()}); }});"
        )
