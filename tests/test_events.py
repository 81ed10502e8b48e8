from dataclasses import FrozenInstanceError
from datetime import datetime, timezone

import pytest

from widgetbridge.codec import to_epoch_millis
from widgetbridge.errors import MissingParameter, TypeMismatch, UnknownEnumValue
from widgetbridge.events import (
    INDEX_NONE,
    DayClickEvent,
    DeltaEvent,
    IndexEvent,
    ItemEvent,
    RangeEvent,
    SimpleEvent,
    decode_day_click,
    decode_drop,
    decode_event_click,
    decode_resize,
    decode_select,
    decode_series_click,
    indexed,
    keyed,
    simple,
)
from widgetbridge.views import CalendarView


def test_drop_decodes_delta_and_all_day():
    bag = {"eventId": "42", "dayDelta": "1", "minuteDelta": "30", "allDay": "false"}
    assert decode_drop(bag) == DeltaEvent(kind="event_drop", event_id=42, delta=88_200_000, all_day=False)


def test_drop_with_negative_delta():
    bag = {"eventId": "7", "dayDelta": "-1", "minuteDelta": "15", "allDay": "true"}
    ev = decode_drop(bag)
    assert ev.delta == -85_500_000
    assert ev.all_day is True


def test_resize_has_no_all_day():
    ev = decode_resize({"eventId": "5", "dayDelta": "0", "minuteDelta": "90"})
    assert ev == DeltaEvent(kind="event_resize", event_id=5, delta=5_400_000)
    assert ev.all_day is None


def test_drop_missing_minute_delta_fails_whole_decode():
    with pytest.raises(MissingParameter) as exc:
        decode_drop({"eventId": "42", "dayDelta": "1", "allDay": "false"})
    assert exc.value.name == "minuteDelta"


def test_select_decodes_range():
    bag = {"start": "1704067200000", "end": "1704153600000", "allDay": "true", "viewName": "month"}
    ev = decode_select(bag)
    assert ev == RangeEvent(
        kind="select",
        start=datetime(2024, 1, 1, tzinfo=timezone.utc),
        end=datetime(2024, 1, 2, tzinfo=timezone.utc),
        all_day=True,
        view=CalendarView.month,
    )


def test_day_click_and_event_click():
    day = decode_day_click({"date": "1704067200000", "viewName": "agendaDay"})
    assert day == DayClickEvent(date=datetime(2024, 1, 1, tzinfo=timezone.utc), view=CalendarView.agendaDay)
    assert day.kind == "day_click"

    click = decode_event_click({"eventId": "9", "viewName": "basicWeek"})
    assert click.event_id == 9
    assert click.view is CalendarView.basicWeek
    assert click.kind == "event_click"


def test_unknown_view_name_fails():
    with pytest.raises(UnknownEnumValue):
        decode_day_click({"date": "0", "viewName": "timeline"})


def test_indexed_missing_index_yields_sentinel():
    decode = indexed("tab_select")
    assert decode({}) == IndexEvent(kind="tab_select", index=INDEX_NONE)
    assert decode({"index": "2"}).index == 2


def test_indexed_malformed_index_fails():
    with pytest.raises(TypeMismatch):
        indexed("tab_select")({"index": "second"})


def test_keyed_missing_id_is_hard_failure():
    decode = keyed("menu_click")
    assert decode({"id": "open"}) == ItemEvent(kind="menu_click", item_id="open")
    with pytest.raises(MissingParameter):
        decode({})


def test_simple_ignores_bag():
    assert simple("context_menu")({"anything": "x"}) == SimpleEvent(kind="context_menu")


def test_series_click():
    ev = decode_series_click({"seriesName": "Sales", "seriesField": "sales", "category": "Q1", "value": "120"})
    assert (ev.series_name, ev.series_field, ev.category, ev.value) == ("Sales", "sales", "Q1", 120)
    assert ev.kind == "series_click"


def test_events_are_immutable():
    ev = IndexEvent(kind="tab_select", index=1)
    with pytest.raises(FrozenInstanceError):
        ev.index = 2  # type: ignore[misc]


def test_day_click_keeps_exact_epoch_millis():
    ev = decode_day_click({"date": "1700000000000", "viewName": "month"})
    assert to_epoch_millis(ev.date) == 1_700_000_000_000
    assert ev.view is CalendarView.month
