from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Callable, Iterator

from .entry import Candidate, VideoEntry, sort_entries
from .errors import DuplicateEntry, EmptyQueue, StoreError
from .resolve import SHORT_ID_LENGTH, assign_short_id
from .rng import PythonRandom, RandomSource
from .store import Store

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class VideoQueue:
    """In-memory queue of entries, saved to its store after every mutation.

    Not thread-safe: one owner (the CLI or the session's event loop) makes
    every call. When a save fails the mutation is kept in memory and
    ``StoreError`` is raised; the next successful save writes the full list.
    """

    def __init__(
        self,
        store: Store,
        entries: list[VideoEntry] | None = None,
        *,
        rng: RandomSource | None = None,
        clock: Clock = time.time,
        short_id_length: int = SHORT_ID_LENGTH,
    ) -> None:
        self._store = store
        self._rng = rng or PythonRandom()
        self._clock = clock
        self._short_id_length = short_id_length
        self._entries: list[VideoEntry] = sort_entries(list(entries or []))

    @classmethod
    def load(
        cls,
        store: Store,
        *,
        rng: RandomSource | None = None,
        clock: Clock = time.time,
        short_id_length: int = SHORT_ID_LENGTH,
    ) -> VideoQueue:
        queue = cls(
            store,
            store.load(),
            rng=rng,
            clock=clock,
            short_id_length=short_id_length,
        )
        if queue._repair_short_ids():
            queue._persist()
        return queue

    @property
    def entries(self) -> tuple[VideoEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[VideoEntry]:
        return iter(tuple(self._entries))

    def get(self, short_id: str) -> VideoEntry | None:
        return next((entry for entry in self._entries if entry.short_id == short_id), None)

    def known_ids(self) -> dict[str, str]:
        """Video id to title for every queued entry."""
        return {entry.video_id: entry.title for entry in self._entries}

    def known_urls(self) -> dict[str, str]:
        return {entry.url: entry.title for entry in self._entries}

    def find_duplicate(self, video_id: str, url: str) -> VideoEntry | None:
        for entry in self._entries:
            if entry.video_id == video_id or entry.url == url:
                return entry
        return None

    def add(self, candidate: Candidate) -> VideoEntry:
        existing = self.find_duplicate(candidate.video_id, candidate.url)
        if existing is not None:
            raise DuplicateEntry(existing.title)
        entry = VideoEntry(
            video_id=candidate.video_id,
            short_id=assign_short_id(
                {item.short_id for item in self._entries},
                self._rng,
                self._short_id_length,
            ),
            url=candidate.url,
            title=candidate.title,
            timestamp=int(self._clock()),
        )
        # New entries go in front so they win ties on timestamp.
        self._entries = sort_entries([entry, *self._entries])
        logger.debug("added %s (%s)", entry.short_id, entry.video_id)
        self._persist(entry)
        return entry

    def remove(self, short_id: str) -> bool:
        entry = self.get(short_id)
        if entry is None:
            return False
        self._entries = sort_entries([item for item in self._entries if item is not entry])
        logger.debug("removed %s", short_id)
        self._persist(entry)
        return True

    def consume_random(self) -> VideoEntry:
        if not self._entries:
            raise EmptyQueue()
        index = self._rng.next_index(len(self._entries))
        entry = self._entries.pop(index)
        self._entries = sort_entries(self._entries)
        logger.debug("consumed %s", entry.short_id)
        self._persist(entry)
        return entry

    def _persist(self, entry: VideoEntry | None = None) -> None:
        try:
            self._store.save(self._entries)
        except StoreError as exc:
            if exc.entry is None and entry is not None:
                exc.entry = entry
            raise

    def _repair_short_ids(self) -> bool:
        seen: set[str] = set()
        repaired = False
        for index, entry in enumerate(self._entries):
            if entry.short_id in seen:
                taken = seen | {item.short_id for item in self._entries}
                short_id = assign_short_id(taken, self._rng, self._short_id_length)
                logger.warning(
                    "short id %s is used twice; reassigned %s to %s",
                    entry.short_id,
                    entry.video_id,
                    short_id,
                )
                entry = replace(entry, short_id=short_id)
                self._entries[index] = entry
                repaired = True
            seen.add(entry.short_id)
        return repaired
