"""
Event variants decoded from a callback parameter bag.

Each variant is an immutable value built in one step by a `decode_*` function;
nothing is constructed (and no widget state is touched) until every field has
been decoded. Variants carry a `kind` tag used by the dispatcher for routing.

Families:
- SimpleEvent: identity only (context menu, button click, slider change)
- IndexEvent / ItemEvent: one scalar key (tab index, menu item id)
- DeltaEvent: event id + duration derived from day/minute deltas
- RangeEvent: start/end instants + all-day flag + active view
- DayClickEvent / EventClickEvent / SeriesClickEvent: a field plus its context
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from widgetbridge.codec import (
    ParameterBag,
    compute_delta,
    decode_bool,
    decode_enum,
    decode_instant,
    decode_int,
    decode_long,
    decode_str,
)
from widgetbridge.views import CalendarView

# Keyed-index policy: a missing index decodes to this sentinel and is then
# dropped by the dispatcher (never a decode failure).
INDEX_NONE = -1


@dataclass(frozen=True)
class SimpleEvent:
    kind: str


@dataclass(frozen=True)
class IndexEvent:
    kind: str
    index: int


@dataclass(frozen=True)
class ItemEvent:
    kind: str
    item_id: str


@dataclass(frozen=True)
class DeltaEvent:
    """
    Event moved or resized by the user.

    `delta` is in milliseconds. `all_day` is only reported for drops (None on resize).
    """

    kind: str
    event_id: int
    delta: int
    all_day: Optional[bool] = None


@dataclass(frozen=True)
class RangeEvent:
    kind: str
    start: datetime
    end: datetime
    all_day: bool
    view: CalendarView


@dataclass(frozen=True)
class DayClickEvent:
    date: datetime
    view: CalendarView
    kind: str = "day_click"


@dataclass(frozen=True)
class EventClickEvent:
    event_id: int
    view: CalendarView
    kind: str = "event_click"


@dataclass(frozen=True)
class SeriesClickEvent:
    series_name: str
    series_field: str
    category: str
    value: int
    kind: str = "series_click"


EventVariant = Union[
    SimpleEvent,
    IndexEvent,
    ItemEvent,
    DeltaEvent,
    RangeEvent,
    DayClickEvent,
    EventClickEvent,
    SeriesClickEvent,
]


def simple(kind: str):
    """Decoder factory for events without payload."""

    def _decode(bag: ParameterBag) -> SimpleEvent:  # noqa: ARG001
        return SimpleEvent(kind=kind)

    return _decode


def indexed(kind: str, *, name: str = "index"):
    """Decoder factory for tab-like events; a missing index yields INDEX_NONE."""

    def _decode(bag: ParameterBag) -> IndexEvent:
        return IndexEvent(kind=kind, index=decode_int(bag, name, default=INDEX_NONE))

    return _decode


def keyed(kind: str, *, name: str = "id"):
    """Decoder factory for item events; a missing key is a hard failure."""

    def _decode(bag: ParameterBag) -> ItemEvent:
        return ItemEvent(kind=kind, item_id=decode_str(bag, name))

    return _decode


def decode_day_click(bag: ParameterBag) -> DayClickEvent:
    return DayClickEvent(
        date=decode_instant(bag, "date"),
        view=decode_enum(bag, "viewName", CalendarView),
    )


def decode_select(bag: ParameterBag) -> RangeEvent:
    return RangeEvent(
        kind="select",
        start=decode_instant(bag, "start"),
        end=decode_instant(bag, "end"),
        all_day=decode_bool(bag, "allDay"),
        view=decode_enum(bag, "viewName", CalendarView),
    )


def decode_event_click(bag: ParameterBag) -> EventClickEvent:
    return EventClickEvent(
        event_id=decode_int(bag, "eventId"),
        view=decode_enum(bag, "viewName", CalendarView),
    )


def _decode_delta(bag: ParameterBag) -> tuple[int, int]:
    event_id = decode_int(bag, "eventId")
    delta = compute_delta(decode_int(bag, "dayDelta"), decode_int(bag, "minuteDelta"))
    return event_id, delta


def decode_drop(bag: ParameterBag) -> DeltaEvent:
    event_id, delta = _decode_delta(bag)
    return DeltaEvent(kind="event_drop", event_id=event_id, delta=delta, all_day=decode_bool(bag, "allDay"))


def decode_resize(bag: ParameterBag) -> DeltaEvent:
    event_id, delta = _decode_delta(bag)
    return DeltaEvent(kind="event_resize", event_id=event_id, delta=delta)


def decode_series_click(bag: ParameterBag) -> SeriesClickEvent:
    return SeriesClickEvent(
        series_name=decode_str(bag, "seriesName"),
        series_field=decode_str(bag, "seriesField"),
        category=decode_str(bag, "category"),
        value=decode_long(bag, "value"),
    )
