"""
Accordion (panel bar) behavior with server-side tab selection state.

Selection state is `None` until `select(index, target)` is called, then
`Index(i)` for the lifetime of the behavior. Every `render_head()` re-emits
the selection statement while a selection exists; re-selecting the same index
is harmless on the client and is always re-executed.

Tab events carry the client-side index of the visible tab. That index is
checked against the visible tabs at dispatch time, not at decode time, since
tabs may have been hidden or added in between.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, Sequence, Union

from widgetbridge.endpoint import CallbackParameter, Widget
from widgetbridge.events import indexed
from widgetbridge.target import RefreshTarget
from widgetbridge.widgets.base import JsExpression, WidgetBehavior

ALL_CHILDREN = "li"
FIRST_CHILD = "li:first-child"

TAB_EVENT_PARAMETERS = (
    CallbackParameter.context("e"),
    CallbackParameter.resolved("index", "jQuery(e.item).index()"),
)


@dataclass
class Tab:
    title: str
    visible: bool = True
    loader: Optional[Callable[[RefreshTarget], None]] = None

    def load(self, target: RefreshTarget) -> None:
        """Lazy-loaded tabs fill their content before the listener runs."""
        if self.loader is not None:
            self.loader(target)


class AccordionListener(Protocol):
    def on_select(self, target: RefreshTarget, index: int, tab: Tab) -> None: ...

    def on_activate(self, target: RefreshTarget, index: int, tab: Tab) -> None: ...

    def on_expand(self, target: RefreshTarget, index: int, tab: Tab) -> None: ...

    def on_collapse(self, target: RefreshTarget, index: int, tab: Tab) -> None: ...


class AccordionBehavior(WidgetBehavior):
    method = "kendoPanelBar"

    def __init__(
        self,
        component: Widget,
        tabs: Union[Sequence[Tab], Callable[[], Sequence[Tab]]],
        listener: AccordionListener,
        *,
        select_event: bool = True,
        activate_event: bool = False,
        expand_event: bool = False,
        collapse_event: bool = False,
        throttle_ms: Optional[int] = None,
    ) -> None:
        super().__init__(component, listener, throttle_ms=throttle_ms)
        self._tabs = tabs
        self._tab_index: Optional[int] = None
        self._lock = threading.Lock()
        self._client_events: dict[str, Any] = {}

        enabled = (
            ("select", select_event, "on_select"),
            ("activate", activate_event, "on_activate"),
            ("expand", expand_event, "on_expand"),
            ("collapse", collapse_event, "on_collapse"),
        )
        for name, flag, method in enabled:
            if not flag:
                continue
            kind = f"tab_{name}"
            self._client_events[name] = self._callback(indexed(kind), TAB_EVENT_PARAMETERS)
            self.dispatcher.on(kind, self._deliver(method), collection=self.visible_tabs)

    @staticmethod
    def _deliver(method: str):
        def _handler(listener: Any, target: RefreshTarget, event: Any, tab: Tab) -> None:
            tab.load(target)
            getattr(listener, method)(target, event.index, tab)

        return _handler

    # Tabs

    def tabs(self) -> list[Tab]:
        return list(self._tabs() if callable(self._tabs) else self._tabs)

    def visible_tabs(self) -> list[Tab]:
        return [tab for tab in self.tabs() if tab.visible]

    # Selection state

    @property
    def selected_index(self) -> Optional[int]:
        return self._tab_index

    def selection_statement(self, index: int) -> str:
        item = f"jQuery('#{self.component.markup_id} > li:nth-child({index + 1})')"
        return f"var $widget = {self.widget()}, $item = {item}; $widget.select($item); $widget.expand($item);"

    def select(self, index: int, target: RefreshTarget) -> None:
        """
        Select (and expand) the visible tab at `index`, now and on every later render.
        """
        if index < 0:
            raise ValueError(f"tab index must be >= 0, got {index}")
        with self._lock:
            self._tab_index = index
            statement = self.selection_statement(index)
        target.append_javascript(statement)

    # Client statements

    def expand_statement(self, children: str = ALL_CHILDREN) -> str:
        """Expand the given children without animation."""
        return f"{self.widget()}.expand(jQuery('#{self.component.markup_id} > {children}'), false);"

    def options(self) -> dict[str, Any]:
        return {name: JsExpression(ep.trigger_expression()) for name, ep in self._client_events.items()}

    def render_head(self) -> list[str]:
        statements = [self.statement()]
        with self._lock:
            index = self._tab_index
        if index is not None:
            statements.append(f"jQuery(function() {{ {self.selection_statement(index)} }});")
        return statements
