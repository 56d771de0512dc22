"""
Document Records
================
Read-only description of a document as produced by the ingestion tools
(scanned pages, PDFs, pasted text). The board never mutates a record's
identity; it only projects records onto tiles.

Classes:
    RecordKind: What the `pages` list contains.
    PageSource: One page to show in the viewer.
    DocumentRecord: The record itself.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional

from spatialdocs.config import DEFAULT_TILE_WIDTH, DEFAULT_TILE_HEIGHT

logger = logging.getLogger(__name__)


class RecordKind(str, Enum):
    IMAGE = "image"
    PASTED_TEXT = "pasted-text"


class PageKind(Enum):
    IMAGE = "image"
    TEXT = "text"


@dataclass(frozen=True)
class PageSource:
    kind: PageKind
    content: str  # image path for IMAGE, the text itself for TEXT


def _positive_float(value: Any, fallback: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    if number != number or number <= 0.0:  # NaN or non-positive
        return fallback
    return number


def _float(value: Any, fallback: float = 0.0) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    return fallback if number != number else number


@dataclass
class DocumentRecord:
    id: int
    name: str  # unique among records on the board
    label: str
    pages: list[str] = field(default_factory=list)
    width: float = DEFAULT_TILE_WIDTH
    height: float = DEFAULT_TILE_HEIGHT
    x: float = 0.0
    y: float = 0.0
    actions: list[str] = field(default_factory=list)
    kind: RecordKind = RecordKind.IMAGE
    text: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DocumentRecord:
        """
        Build a record from the JSON shape used by data.json and the cache.

        Missing or malformed geometry falls back to the default tile size
        instead of failing.
        """
        record_id = int(_float(data.get("id"), 0.0))
        name = str(data.get("name") or f"document-{record_id}")
        for key in ("width", "height"):
            raw = data.get(key)
            if raw is not None and _positive_float(raw, -1.0) < 0.0:
                logger.warning(f"Record '{name}' has invalid {key} {raw!r}, using default.")
        width = _positive_float(data.get("width"), DEFAULT_TILE_WIDTH)
        height = _positive_float(data.get("height"), DEFAULT_TILE_HEIGHT)

        pages = data.get("pages")
        actions = data.get("actions")
        try:
            kind = RecordKind(data.get("type") or data.get("kind") or RecordKind.IMAGE.value)
        except ValueError:
            kind = RecordKind.IMAGE

        return cls(
            id=record_id,
            name=name,
            label=str(data.get("label") or name),
            pages=[str(p) for p in pages] if isinstance(pages, list) else [],
            width=width,
            height=height,
            x=_float(data.get("x")),
            y=_float(data.get("y")),
            actions=[str(a) for a in actions] if isinstance(actions, list) else [],
            kind=kind,
            text=data.get("text") if isinstance(data.get("text"), str) else None,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "label": self.label,
            "type": self.kind.value,
            "pages": list(self.pages),
            "width": self.width,
            "height": self.height,
            "x": self.x,
            "y": self.y,
            "actions": list(self.actions),
        }
        if self.text is not None:
            data["text"] = self.text
        return data

    def page_sources(self) -> list[PageSource]:
        """
        The pages the viewer shows, in reading order.

        Pasted text records store text chunks in `pages`; a short pasted text
        has no pages and is shown as a single text page.
        """
        if self.kind is RecordKind.PASTED_TEXT:
            chunks = self.pages or ([self.text] if self.text else [])
            return [PageSource(PageKind.TEXT, chunk) for chunk in chunks]
        return [PageSource(PageKind.IMAGE, path) for path in self.pages]

    def scaled_to_max_height(self, max_height: float) -> DocumentRecord:
        """Return a copy shrunk proportionally so that height <= max_height."""
        if self.height <= max_height:
            return self
        factor = max_height / self.height
        return replace(
            self,
            width=round(self.width * factor),
            height=round(self.height * factor),
            x=round(self.x * factor),
            y=round(self.y * factor),
        )
