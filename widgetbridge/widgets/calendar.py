"""
Calendar behavior: day click, range select, event click, drop and resize.

Which endpoints exist depends on the flags given at construction:
- editable: day click + event click
- selectable: range select
- event_drop_enabled / event_resize_enabled: drag & drop / resize
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol

from widgetbridge.endpoint import CallbackEndpoint, CallbackParameter, Widget
from widgetbridge.events import (
    decode_day_click,
    decode_drop,
    decode_event_click,
    decode_resize,
    decode_select,
)
from widgetbridge.target import RefreshTarget
from widgetbridge.views import CalendarView, enum_names
from widgetbridge.widgets.base import JsExpression, WidgetBehavior

P = CallbackParameter


class CalendarListener(Protocol):
    def on_day_click(self, target: RefreshTarget, view: CalendarView, date: datetime) -> None: ...

    def on_select(
        self, target: RefreshTarget, view: CalendarView, start: datetime, end: datetime, all_day: bool
    ) -> None: ...

    def on_event_click(self, target: RefreshTarget, view: CalendarView, event_id: int) -> None: ...

    def on_event_drop(self, target: RefreshTarget, event_id: int, delta: int, all_day: bool) -> None: ...

    def on_event_resize(self, target: RefreshTarget, event_id: int, delta: int) -> None: ...


DAY_CLICK_PARAMETERS = (
    P.context("date"),
    P.context("allDay"),
    P.context("jsEvent"),
    P.context("view"),
    P.resolved("date", "date.getTime()"),
    P.resolved("viewName", "view.name"),
)

SELECT_PARAMETERS = (
    P.context("start"),
    P.context("end"),
    P.context("allDay"),
    P.context("jsEvent"),
    P.context("view"),
    P.resolved("start", "start.getTime()"),
    P.resolved("end", "end.getTime()"),
    P.resolved("allDay", "allDay"),
    P.resolved("viewName", "view.name"),
)

EVENT_CLICK_PARAMETERS = (
    P.context("event"),
    P.context("jsEvent"),
    P.context("view"),
    P.resolved("eventId", "event.id"),
    P.resolved("viewName", "view.name"),
)

EVENT_DROP_PARAMETERS = (
    P.context("event"),
    P.explicit("dayDelta"),
    P.explicit("minuteDelta"),
    P.explicit("allDay"),
    P.context("revertFunc"),
    P.context("jsEvent"),
    P.context("ui"),
    P.context("view"),
    P.resolved("eventId", "event.id"),
)

EVENT_RESIZE_PARAMETERS = (
    P.context("event"),
    P.explicit("dayDelta"),
    P.explicit("minuteDelta"),
    P.context("revertFunc"),
    P.context("jsEvent"),
    P.context("ui"),
    P.context("view"),
    P.resolved("eventId", "event.id"),
)


class CalendarBehavior(WidgetBehavior):
    method = "fullCalendar"

    def __init__(
        self,
        component: Widget,
        listener: CalendarListener,
        *,
        editable: bool = True,
        selectable: bool = False,
        event_drop_enabled: bool = False,
        event_resize_enabled: bool = False,
        default_view: CalendarView = CalendarView.month,
        throttle_ms: Optional[int] = None,
    ) -> None:
        super().__init__(component, listener, throttle_ms=throttle_ms)
        self.editable = editable
        self.selectable = selectable
        self.event_drop_enabled = event_drop_enabled
        self.event_resize_enabled = event_resize_enabled
        self.default_view = default_view

        self.day_click_endpoint: Optional[CallbackEndpoint] = None
        self.event_click_endpoint: Optional[CallbackEndpoint] = None
        self.select_endpoint: Optional[CallbackEndpoint] = None
        self.event_drop_endpoint: Optional[CallbackEndpoint] = None
        self.event_resize_endpoint: Optional[CallbackEndpoint] = None

        if editable:
            self.day_click_endpoint = self._callback(decode_day_click, DAY_CLICK_PARAMETERS)
            self.event_click_endpoint = self._callback(decode_event_click, EVENT_CLICK_PARAMETERS)
            self.dispatcher.on("day_click", lambda lsn, t, e: lsn.on_day_click(t, e.view, e.date))
            self.dispatcher.on("event_click", lambda lsn, t, e: lsn.on_event_click(t, e.view, e.event_id))

        if selectable:
            self.select_endpoint = self._callback(decode_select, SELECT_PARAMETERS)
            self.dispatcher.on(
                "select", lambda lsn, t, e: lsn.on_select(t, e.view, e.start, e.end, e.all_day)
            )

        if event_drop_enabled:
            self.event_drop_endpoint = self._callback(decode_drop, EVENT_DROP_PARAMETERS)
            self.dispatcher.on(
                "event_drop", lambda lsn, t, e: lsn.on_event_drop(t, e.event_id, e.delta, e.all_day)
            )

        if event_resize_enabled:
            self.event_resize_endpoint = self._callback(decode_resize, EVENT_RESIZE_PARAMETERS)
            self.dispatcher.on("event_resize", lambda lsn, t, e: lsn.on_event_resize(t, e.event_id, e.delta))

    def options(self) -> dict[str, Any]:
        opts: dict[str, Any] = {
            "defaultView": self.default_view.value,
            "header": {"left": "prev,next today", "center": "title", "right": ",".join(enum_names(CalendarView))},
            "editable": self.editable,
            "selectable": self.selectable,
            "selectHelper": self.selectable,
            "disableDragging": not self.event_drop_enabled,
            "disableResizing": not self.event_resize_enabled,
        }
        callbacks = {
            "dayClick": self.day_click_endpoint,
            "eventClick": self.event_click_endpoint,
            "select": self.select_endpoint,
            "eventDrop": self.event_drop_endpoint,
            "eventResize": self.event_resize_endpoint,
        }
        for option, endpoint in callbacks.items():
            if endpoint is not None:
                opts[option] = JsExpression(endpoint.trigger_expression())
        return opts

    def refetch(self, target: RefreshTarget) -> None:
        """Ask the client calendar to reload its events."""
        target.append_javascript(f"jQuery('#{self.component.markup_id}').fullCalendar('refetchEvents');")
