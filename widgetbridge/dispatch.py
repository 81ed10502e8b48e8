"""
Route decoded events to listener methods.

A `Dispatcher` is a table of routes keyed by event `kind`. Routing is total:
- a matching plain route calls `handler(listener, target, event)`
- a matching indexed route re-reads its collection at dispatch time and calls
  `handler(listener, target, event, item)` only if `0 <= event.index < len(collection)`;
  a mapping collection is looked up by `event.item_id` instead
- anything else falls through to the default arm, which drops the event,
  logs it and reports the reason in the returned `DispatchOutcome`
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from widgetbridge.common.logging import log_event
from widgetbridge.errors import DropReason
from widgetbridge.target import RefreshTarget

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]
Collection = Callable[[], Union[Sequence[Any], Mapping[str, Any]]]


@dataclass(frozen=True)
class DispatchOutcome:
    kind: str
    dispatched: bool
    reason: Optional[DropReason] = None

    @staticmethod
    def delivered(kind: str) -> "DispatchOutcome":
        return DispatchOutcome(kind=kind, dispatched=True)

    @staticmethod
    def dropped(kind: str, reason: DropReason) -> "DispatchOutcome":
        return DispatchOutcome(kind=kind, dispatched=False, reason=reason)


@dataclass(frozen=True)
class _Route:
    handler: Handler
    collection: Optional[Collection] = None


class Dispatcher:
    def __init__(self, name: str = "widget") -> None:
        self.name = name
        self._routes: dict[str, _Route] = {}

    def on(
        self,
        kind: str,
        handler: Handler,
        *,
        collection: Optional[Collection] = None,
    ) -> "Dispatcher":
        if kind in self._routes:
            raise ValueError(f"route already declared for kind={kind!r} on {self.name}")
        self._routes[kind] = _Route(handler=handler, collection=collection)
        return self

    def kinds(self) -> list[str]:
        return list(self._routes)

    def dispatch(self, listener: Any, target: RefreshTarget, event: Any) -> DispatchOutcome:
        kind = str(getattr(event, "kind", "") or "")
        route = self._routes.get(kind)

        if route is None:
            return self._drop(kind, DropReason.UNRECOGNIZED_EVENT_VARIANT, variant=type(event).__name__)

        if route.collection is None:
            route.handler(listener, target, event)
            return self._delivered(kind)

        # The collection may have changed since the client issued the request.
        items = route.collection()
        if isinstance(items, Mapping):
            key = str(getattr(event, "item_id", ""))
            item = items.get(key)
            if item is None:
                return self._drop(kind, DropReason.STALE_INDEX_REFERENCE, item_id=key, size=len(items))
        else:
            index = int(getattr(event, "index", -1))
            if not (0 <= index < len(items)):
                return self._drop(kind, DropReason.STALE_INDEX_REFERENCE, index=index, size=len(items))
            item = items[index]

        route.handler(listener, target, event, item)
        return self._delivered(kind)

    def _delivered(self, kind: str) -> DispatchOutcome:
        log_event(logger, "callback.dispatched", severity="DEBUG", widget=self.name, kind=kind)
        return DispatchOutcome.delivered(kind)

    def _drop(self, kind: str, reason: DropReason, **fields: Any) -> DispatchOutcome:
        log_event(
            logger,
            "callback.dropped",
            severity="INFO",
            widget=self.name,
            kind=kind,
            reason=reason.value,
            **fields,
        )
        return DispatchOutcome.dropped(kind, reason)
