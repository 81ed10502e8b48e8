from datetime import datetime, timezone

from widgetbridge.common.config import BridgeConfig
from widgetbridge.registry import CallbackRegistry
from widgetbridge.target import RefreshTarget
from widgetbridge.views import CalendarView
from widgetbridge.widgets.base import Component
from widgetbridge.widgets.calendar import CalendarBehavior


class _Listener:
    def __init__(self):
        self.calls = []

    def on_day_click(self, target, view, date):
        self.calls.append(("day_click", view, date))

    def on_select(self, target, view, start, end, all_day):
        self.calls.append(("select", view, start, end, all_day))

    def on_event_click(self, target, view, event_id):
        self.calls.append(("event_click", view, event_id))

    def on_event_drop(self, target, event_id, delta, all_day):
        self.calls.append(("event_drop", event_id, delta, all_day))
        target.add("calendar")

    def on_event_resize(self, target, event_id, delta):
        self.calls.append(("event_resize", event_id, delta))


def _calendar(**kw):
    listener = _Listener()
    return CalendarBehavior(Component("cal"), listener, **kw), listener


def test_flags_control_endpoints():
    cal, _ = _calendar()
    assert cal.day_click_endpoint is not None
    assert cal.event_click_endpoint is not None
    assert cal.select_endpoint is None
    assert cal.event_drop_endpoint is None
    assert cal.event_resize_endpoint is None
    assert sorted(cal.dispatcher.kinds()) == ["day_click", "event_click"]

    cal, _ = _calendar(editable=False, selectable=True, event_drop_enabled=True, event_resize_enabled=True)
    assert cal.day_click_endpoint is None
    assert sorted(cal.dispatcher.kinds()) == ["event_drop", "event_resize", "select"]


def test_drop_reaches_listener_with_delta():
    cal, listener = _calendar(event_drop_enabled=True)

    target = cal.event_drop_endpoint.on_request(
        {"eventId": "42", "dayDelta": "1", "minuteDelta": "30", "allDay": "false"}
    )

    assert listener.calls == [("event_drop", 42, 88_200_000, False)]
    assert target.components == ["calendar"]


def test_resize_reaches_listener():
    cal, listener = _calendar(event_resize_enabled=True)
    cal.event_resize_endpoint.on_request({"eventId": "3", "dayDelta": "0", "minuteDelta": "-30"})
    assert listener.calls == [("event_resize", 3, -1_800_000)]


def test_select_and_clicks_reach_listener():
    cal, listener = _calendar(selectable=True)

    cal.select_endpoint.on_request(
        {"start": "1704067200000", "end": "1704153600000", "allDay": "true", "viewName": "agendaWeek"}
    )
    cal.day_click_endpoint.on_request({"date": "1704067200000", "viewName": "month"})
    cal.event_click_endpoint.on_request({"eventId": "11", "viewName": "Month"})

    jan1 = datetime(2024, 1, 1, tzinfo=timezone.utc)
    jan2 = datetime(2024, 1, 2, tzinfo=timezone.utc)
    assert listener.calls == [
        ("select", CalendarView.agendaWeek, jan1, jan2, True),
        ("day_click", CalendarView.month, jan1),
        ("event_click", CalendarView.month, 11),
    ]


def test_options_render_callbacks_once_registered():
    cal, _ = _calendar(event_drop_enabled=True, default_view=CalendarView.agendaWeek)
    cal.register(CallbackRegistry(BridgeConfig()))

    opts = cal.options()

    assert opts["defaultView"] == "agendaWeek"
    assert opts["header"]["right"] == "month,agendaWeek,agendaDay,basicWeek,basicDay"
    assert opts["disableDragging"] is False
    assert opts["disableResizing"] is True
    assert set(opts) >= {"dayClick", "eventClick", "eventDrop"}
    assert "select" not in opts
    assert opts["eventDrop"].startswith(
        "function(event, dayDelta, minuteDelta, allDay, revertFunc, jsEvent, ui, view) {"
    )

    statement = cal.statement()
    assert statement.startswith("jQuery('#cal').fullCalendar({ ")
    assert '"dayClick": function(date, allDay, jsEvent, view) {' in statement


def test_refetch_statement():
    cal, _ = _calendar()
    target = RefreshTarget()
    cal.refetch(target)
    assert target.scripts == ["jQuery('#cal').fullCalendar('refetchEvents');"]
