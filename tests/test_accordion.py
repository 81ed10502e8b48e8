import pytest

from widgetbridge.common.config import BridgeConfig
from widgetbridge.errors import DropReason
from widgetbridge.registry import CallbackRegistry
from widgetbridge.target import RefreshTarget
from widgetbridge.widgets.accordion import FIRST_CHILD, AccordionBehavior, Tab
from widgetbridge.widgets.base import Component


class _Listener:
    def __init__(self):
        self.calls = []

    def on_select(self, target, index, tab):
        self.calls.append(("select", index, tab.title))

    def on_activate(self, target, index, tab):
        self.calls.append(("activate", index, tab.title))

    def on_expand(self, target, index, tab):
        self.calls.append(("expand", index, tab.title))

    def on_collapse(self, target, index, tab):
        self.calls.append(("collapse", index, tab.title))


def _behavior(tabs=None, **kw):
    tabs = tabs if tabs is not None else [Tab(f"tab{i}") for i in range(5)]
    listener = _Listener()
    return AccordionBehavior(Component("acc"), tabs, listener, **kw), listener


def test_select_emits_statement_for_one_based_child():
    behavior, _ = _behavior()
    target = RefreshTarget()

    behavior.select(2, target)

    assert behavior.selected_index == 2
    assert target.scripts == [
        "var $widget = jQuery('#acc').data('kendoPanelBar'), $item = jQuery('#acc > li:nth-child(3)'); "
        "$widget.select($item); $widget.expand($item);"
    ]


def test_select_same_index_is_emitted_again():
    behavior, _ = _behavior()
    target = RefreshTarget()

    behavior.select(2, target)
    behavior.select(2, target)

    assert len(target.scripts) == 2
    assert target.scripts[0] == target.scripts[1]
    assert behavior.selected_index == 2


def test_select_rejects_negative_index():
    behavior, _ = _behavior()
    with pytest.raises(ValueError):
        behavior.select(-1, RefreshTarget())
    assert behavior.selected_index is None


def test_render_head_reemits_selection_on_every_render():
    behavior, _ = _behavior()
    behavior.register(CallbackRegistry(BridgeConfig()))
    assert len(behavior.render_head()) == 1

    behavior.select(2, RefreshTarget())
    for _ in range(2):
        head = behavior.render_head()
        assert len(head) == 2
        assert "li:nth-child(3)" in head[1]
        assert head[1].startswith("jQuery(function() {")


def test_only_enabled_client_events_get_endpoints():
    behavior, _ = _behavior(select_event=True, expand_event=True)
    assert sorted(behavior.dispatcher.kinds()) == ["tab_expand", "tab_select"]
    assert len(behavior.endpoints) == 2

    registry = CallbackRegistry(BridgeConfig())
    behavior.register(registry)
    opts = behavior.options()
    assert set(opts) == {"select", "expand"}
    assert opts["select"].startswith("function(e) {")


def test_tab_event_resolves_visible_tab_at_dispatch_time():
    tabs = [Tab("hidden", visible=False), Tab("a"), Tab("b")]
    behavior, listener = _behavior(tabs)
    endpoint = behavior.endpoints[0]

    endpoint.on_request({"index": "1"})

    assert listener.calls == [("select", 1, "b")]


def test_stale_or_missing_index_is_dropped():
    tabs = [Tab("a"), Tab("b")]
    behavior, listener = _behavior(tabs)
    endpoint = behavior.endpoints[0]

    endpoint.on_request({"index": "2"})
    endpoint.on_request({})
    tabs[1].visible = False
    endpoint.on_request({"index": "1"})

    assert listener.calls == []
    out = behavior.on_ajax(RefreshTarget(), endpoint.decode({"index": "5"}))
    assert out.reason is DropReason.STALE_INDEX_REFERENCE


def test_lazy_tab_loads_before_listener_runs():
    order = []
    tab = Tab("lazy", loader=lambda target: (order.append("load"), target.add("lazy-panel")))
    behavior, listener = _behavior([tab])

    target = behavior.endpoints[0].on_request({"index": "0"})

    assert order == ["load"]
    assert listener.calls == [("select", 0, "lazy")]
    assert target.components == ["lazy-panel"]


def test_expand_statement():
    behavior, _ = _behavior()
    assert behavior.expand_statement(FIRST_CHILD) == (
        "jQuery('#acc').data('kendoPanelBar').expand(jQuery('#acc > li:first-child'), false);"
    )
