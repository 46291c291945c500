from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


class Displayable(Protocol):
    """Anything the entry list can render as a title plus a description."""

    @property
    def title(self) -> str: ...

    @property
    def description(self) -> str: ...

    @property
    def filter_value(self) -> str: ...


@dataclass(frozen=True)
class Candidate:
    video_id: str
    url: str
    title: str


@dataclass(frozen=True)
class VideoEntry:
    video_id: str
    short_id: str
    url: str
    title: str
    timestamp: int

    @property
    def description(self) -> str:
        added = datetime.fromtimestamp(self.timestamp).strftime("%Y-%m-%d %H:%M")
        return f"Added: {added}"

    @property
    def filter_value(self) -> str:
        return self.title


def sort_entries(entries: list[VideoEntry]) -> list[VideoEntry]:
    """Newest first. ``sorted`` is stable, so equal timestamps keep their order."""
    return sorted(entries, key=lambda entry: entry.timestamp, reverse=True)
