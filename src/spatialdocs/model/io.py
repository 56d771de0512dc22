"""
Input/Output Manager (JSON)
Loads the bundled document list and keeps a best-effort local cache of the
records and their resting positions.

Nothing here is allowed to take the board down: every failure is logged and
reported as None/False.
"""
import json
import logging
import os
from dataclasses import replace
from datetime import datetime, timezone
from importlib.metadata import version, PackageNotFoundError
from typing import Any, Iterable, Optional

from spatialdocs.config import MAX_TILE_HEIGHT
from spatialdocs.model.records import DocumentRecord, RecordKind

# Get module logger
logger = logging.getLogger(__name__)

try:
    APP_VERSION = version("spatialdocs")
except PackageNotFoundError:
    APP_VERSION = "0.0.0-dev"


def _records_from_payload(payload: Any) -> list[DocumentRecord]:
    if not isinstance(payload, dict):
        return []
    raw = payload.get("rectangles")
    if not isinstance(raw, list):
        return []
    records = []
    for item in raw:
        if not isinstance(item, dict):
            logger.warning(f"Skipping malformed record entry: {item!r}")
            continue
        records.append(DocumentRecord.from_dict(item))
    return records


def normalize_dimensions(
    records: Iterable[DocumentRecord],
    max_height: float = MAX_TILE_HEIGHT,
) -> list[DocumentRecord]:
    """Scale oversize records down so no tile is taller than `max_height`."""
    result = []
    for record in records:
        scaled = record.scaled_to_max_height(max_height)
        if scaled is not record:
            logger.debug(
                f"{record.name}: {record.width}x{record.height} -> {scaled.width}x{scaled.height}"
            )
        result.append(scaled)
    return result


def load_data_file(filepath: str) -> list[DocumentRecord]:
    """Read the document list shipped next to the app (data.json)."""
    logger.info(f"Loading documents from: {filepath}")
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except FileNotFoundError:
        logger.warning(f"Document list '{filepath}' not found.")
        return []
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load document list '{filepath}': {e}")
        return []
    records = [_resolve_pages(r, os.path.dirname(os.path.abspath(filepath))) for r in _records_from_payload(payload)]
    logger.info(f"Loaded {len(records)} document(s).")
    return records


def _resolve_pages(record: DocumentRecord, base_dir: str) -> DocumentRecord:
    """Image paths in a data file are relative to that file."""
    if record.kind is not RecordKind.IMAGE:
        return record
    pages = [p if os.path.isabs(p) else os.path.join(base_dir, p) for p in record.pages]
    return replace(record, pages=pages)


class DocumentCache:
    """Local JSON cache of document records (best effort)."""

    def __init__(self, filepath: str) -> None:
        self.filepath = filepath

    def load(self) -> Optional[list[DocumentRecord]]:
        """Cached records, or None when there is no usable cache."""
        if not os.path.exists(self.filepath):
            return None
        try:
            with open(self.filepath, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error loading documents from cache: {e}")
            return None
        return _records_from_payload(payload)

    def save(self, records: Iterable[DocumentRecord]) -> bool:
        data = {
            "version": APP_VERSION,
            "rectangles": [record.to_dict() for record in records],
            "lastUpdated": datetime.now(timezone.utc).isoformat(),
        }
        tmp_path = self.filepath + ".tmp"
        try:
            os.makedirs(os.path.dirname(self.filepath) or ".", exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.filepath)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Error saving documents to cache: {e}")
            return False
        logger.info(f"Saved {len(data['rectangles'])} document(s) to: {self.filepath}")
        return True

    def clear(self) -> bool:
        try:
            if os.path.exists(self.filepath):
                os.remove(self.filepath)
        except OSError as e:
            logger.error(f"Error clearing document cache: {e}")
            return False
        return True


def load_documents(data_path: str, cache: Optional[DocumentCache] = None) -> list[DocumentRecord]:
    """The cache wins over the bundled list when it holds anything."""
    records = cache.load() if cache is not None else None
    if not records:
        records = load_data_file(data_path)
    return normalize_dimensions(records)
