from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Protocol

from .entry import VideoEntry, sort_entries
from .errors import StoreError

logger = logging.getLogger(__name__)


class Store(Protocol):
    def load(self) -> list[VideoEntry]: ...

    def save(self, entries: Iterable[VideoEntry]) -> None: ...


class JsonStore:
    """Entry collection kept as one indented JSON array, rewritten on every save."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> list[VideoEntry]:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreError(f"Failed to create data directory: {self.path.parent} ({exc})") from exc
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("failed to read %s: %s", self.path, exc)
            raise StoreError(f"Failed to read data file: {self.path} ({exc})") from exc
        if not raw.strip():
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.error("invalid JSON in %s: %s", self.path, exc)
            raise StoreError(f"Data file is not valid JSON: {self.path}") from exc
        if data is None:
            return []
        if not isinstance(data, list):
            raise StoreError(f"Data file must be a JSON array: {self.path}")
        entries = [_parse_entry(item, index) for index, item in enumerate(data)]
        return sort_entries(entries)

    def save(self, entries: Iterable[VideoEntry]) -> None:
        payload = [_entry_to_dict(entry) for entry in sort_entries(list(entries))]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(payload, ensure_ascii=False, indent=2) + "\n",
                encoding="utf-8",
            )
        except OSError as exc:
            logger.error("failed to write %s: %s", self.path, exc)
            raise StoreError(f"Failed to write data file: {self.path} ({exc})") from exc
        logger.debug("saved %d entries to %s", len(payload), self.path)


def _parse_entry(item: Any, index: int) -> VideoEntry:
    if not isinstance(item, dict):
        raise StoreError(f"Entry {index} is not a JSON object")
    video_id = _as_str(item.get("id"))
    short_id = _as_str(item.get("short_id"))
    url = _as_str(item.get("url"))
    if video_id is None or short_id is None or url is None:
        raise StoreError(f"Entry {index} is missing id, short_id or url")
    timestamp = item.get("timestamp")
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        raise StoreError(f"Entry {index} has an invalid timestamp")
    return VideoEntry(
        video_id=video_id,
        short_id=short_id,
        url=url,
        title=_as_str(item.get("title")) or url,
        timestamp=int(timestamp),
    )


def _entry_to_dict(entry: VideoEntry) -> dict[str, Any]:
    return {
        "id": entry.video_id,
        "short_id": entry.short_id,
        "url": entry.url,
        "title": entry.title,
        "timestamp": entry.timestamp,
    }


def _as_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None
