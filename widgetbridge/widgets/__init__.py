"""
Widget behaviors built on callback endpoints and data feeds.
"""

from widgetbridge.widgets.accordion import AccordionBehavior, Tab
from widgetbridge.widgets.base import Component, JsExpression, WidgetBehavior
from widgetbridge.widgets.button import CommandButton
from widgetbridge.widgets.calendar import CalendarBehavior
from widgetbridge.widgets.chart import Chart, Series
from widgetbridge.widgets.dataview import DataView
from widgetbridge.widgets.menu import ContextMenuBehavior, MenuItem

__all__ = [
    "AccordionBehavior",
    "CalendarBehavior",
    "Chart",
    "CommandButton",
    "Component",
    "ContextMenuBehavior",
    "DataView",
    "JsExpression",
    "MenuItem",
    "Series",
    "Tab",
    "WidgetBehavior",
]
