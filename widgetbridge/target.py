from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class RefreshTarget:
    """
    Partial refresh instructions collected while one callback request is handled.

    Listeners add component ids to re-render and script statements to run; the
    hosting substrate ships `to_dict()` back to the client, which applies them.
    Nothing here renders markup.
    """

    components: list[str] = field(default_factory=list)
    scripts: list[str] = field(default_factory=list)

    def add(self, *component_ids: str) -> None:
        for cid in component_ids:
            if cid not in self.components:
                self.components.append(cid)

    def append_javascript(self, statement: str) -> None:
        s = (statement or "").strip()
        if s:
            self.scripts.append(s)

    def is_empty(self) -> bool:
        return not self.components and not self.scripts

    def to_dict(self) -> dict[str, Any]:
        return {"components": list(self.components), "scripts": list(self.scripts)}
