from __future__ import annotations

from enum import Enum

from widgetbridge.codec import lookup_enum


class CalendarView(str, Enum):
    """
    Active view of the calendar widget, as reported by the client (`view.name`).
    """

    month = "month"
    agendaWeek = "agendaWeek"
    agendaDay = "agendaDay"
    basicWeek = "basicWeek"
    basicDay = "basicDay"

    @classmethod
    def lookup(cls, raw: str) -> "CalendarView":
        return lookup_enum(cls, raw, name="viewName")


def enum_names(enum_cls: type[Enum]) -> list[str]:
    """Member names, in declaration order (client option arrays)."""
    return [m.name for m in enum_cls]
