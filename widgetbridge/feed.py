"""
Data-feed bridge: a read-only pull channel for widgets with their own data source.

No event is decoded and no dispatcher runs on this path. Each request re-reads
the row source, renders every row and returns a JSON array, in source order:
- without a template: one rendered value per row (text or JSON object)
- with a `RowTemplate`: one `{token: fragment}` object per row, where the
  fragment is the template text with `#: property #` placeholders filled in
  (HTML-escaped) and `token` identifies the template on the client
"""

from __future__ import annotations

import html
import logging
import re
import uuid
from typing import Any, Callable, Iterable, Mapping, Optional, Protocol, Union

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from widgetbridge.common.logging import log_event
from widgetbridge.endpoint import Endpoint

logger = logging.getLogger(__name__)

RowSource = Union[Callable[[], Iterable[Any]], Iterable[Any]]

_PLACEHOLDER_RE = re.compile(r"#:\s*([A-Za-z_][A-Za-z0-9_.]*)\s*#")


def read_property(row: Any, path: str) -> Any:
    """
    Resolve a dotted property path against mappings and plain objects.
    """
    value = row
    for part in path.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


class RowRenderer(Protocol):
    def render(self, row: Any) -> Any: ...


class TextRenderer:
    """
    Renders a row as text: `str(row)`, or the text of one of its properties.
    """

    def __init__(self, text_property: Optional[str] = None) -> None:
        self.text_property = text_property

    def text(self, row: Any) -> str:
        if self.text_property is None:
            return str(row)
        value = read_property(row, self.text_property)
        return "" if value is None else str(value)

    def render(self, row: Any) -> str:
        return self.text(row)


class ModelRenderer:
    """
    Renders a row as a JSON object through a pydantic model.
    """

    def __init__(self, model: type[BaseModel]) -> None:
        self.model = model

    def render(self, row: Any) -> dict[str, Any]:
        if isinstance(row, self.model):
            item = row
        else:
            item = self.model.model_validate(row, from_attributes=True)
        return item.model_dump(mode="json")


class RowTemplate:
    def __init__(self, text: str, *, token: Optional[str] = None) -> None:
        self.text = text
        self.token = token or f"tpl-{uuid.uuid4().hex[:12]}"

    @property
    def properties(self) -> list[str]:
        seen: list[str] = []
        for name in _PLACEHOLDER_RE.findall(self.text):
            if name not in seen:
                seen.append(name)
        return seen

    def render(self, row: Any) -> str:
        def _sub(m: re.Match[str]) -> str:
            value = read_property(row, m.group(1))
            return html.escape("" if value is None else str(value))

        return _PLACEHOLDER_RE.sub(_sub, self.text)


def refresh_statement(widget_expr: str) -> str:
    """
    Client statement asking a widget to re-pull its data source.
    """
    return f"var $w = {widget_expr}; if ($w) {{ $w.dataSource.read(); }}"


class DataFeedEndpoint(Endpoint):
    def __init__(
        self,
        source: RowSource,
        *,
        renderer: Optional[RowRenderer] = None,
        template: Optional[RowTemplate] = None,
        name: Optional[str] = None,
    ) -> None:
        super().__init__(name=name)
        self.source = source
        self.renderer: RowRenderer = renderer or TextRenderer()
        self.template = template

    def rows(self) -> list[Any]:
        src = self.source() if callable(self.source) else self.source
        return list(src)

    def on_request(self) -> list[Any]:
        rows = self.rows()
        if self.template is not None:
            payload: list[Any] = [{self.template.token: self.template.render(row)} for row in rows]
        else:
            payload = [self.renderer.render(row) for row in rows]
        log_event(logger, "feed.served", severity="DEBUG", endpoint_id=self.endpoint_id, rows=len(payload))
        return payload

    def response(self) -> JSONResponse:
        return JSONResponse(content=self.on_request(), media_type="application/json")
