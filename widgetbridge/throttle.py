"""
Client-side throttle for callback trigger functions.

The gate lives in the browser: a statement wrapped by `Throttle.wrap` runs
at most once per `interval_ms` for a given throttle id. The server does
not enforce anything; handlers must stay correct without it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass

# Shared client-side registry of last-fire timestamps, keyed by throttle id.
_REGISTRY = "window.__widgetbridgeThrottle"


@dataclass(frozen=True)
class Throttle:
    throttle_id: str
    interval_ms: int

    def __post_init__(self) -> None:
        if self.interval_ms < 0:
            raise ValueError("interval_ms must be >= 0")

    @property
    def enabled(self) -> bool:
        return self.interval_ms > 0

    def wrap(self, body: str) -> str:
        """
        Guard a statement so it runs at most once per interval.

        The gate is an `if` block with no early return, so statements emitted
        after it (e.g. `return false;`) run on every call.
        """
        if not self.enabled:
            return body
        key = json.dumps(self.throttle_id)
        return (
            f"var $t = {_REGISTRY} || ({_REGISTRY} = {{}}), $now = Date.now(); "
            f"if ($t[{key}] === undefined || $now - $t[{key}] >= {int(self.interval_ms)}) {{ "
            f"$t[{key}] = $now; {body} }}"
        )
