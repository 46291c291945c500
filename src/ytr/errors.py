from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .entry import VideoEntry


class YtrError(Exception):
    """Base class for errors the queue, store and session report to the user."""


class InvalidReference(YtrError, ValueError):
    def __init__(self, url: str, reason: str = "invalid YouTube URL") -> None:
        super().__init__(reason)
        self.url = url


class DuplicateEntry(YtrError, ValueError):
    def __init__(self, title: str) -> None:
        super().__init__(f"duplicate entry: {title}")
        self.title = title


class EmptyQueue(YtrError, LookupError):
    def __init__(self) -> None:
        super().__init__("No videos available.")


class StoreError(YtrError, RuntimeError):
    """Reading or writing the store failed.

    ``entry`` is set when the failure happened while persisting a mutation
    that produced an entry (an add or a consume). The mutation itself has
    already been applied in memory.
    """

    def __init__(self, message: str, entry: VideoEntry | None = None) -> None:
        super().__init__(message)
        self.entry = entry


class MetadataError(YtrError, RuntimeError):
    pass


class OpenerError(YtrError, RuntimeError):
    pass
