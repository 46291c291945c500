from __future__ import annotations

from typing import Callable, Iterable

import pytest

from ytr.entry import Candidate, VideoEntry
from ytr.errors import StoreError
from ytr.rng import PythonRandom
from ytr.video_queue import VideoQueue


class MemoryStore:
    def __init__(self, entries: Iterable[VideoEntry] = ()) -> None:
        self.entries = list(entries)
        self.saves: list[list[VideoEntry]] = []
        self.fail = False

    def load(self) -> list[VideoEntry]:
        return list(self.entries)

    def save(self, entries: Iterable[VideoEntry]) -> None:
        if self.fail:
            raise StoreError("Failed to write data file: disk full")
        self.entries = list(entries)
        self.saves.append(list(self.entries))


class ScriptedRandom:
    """Hands out queued codes and indexes, then falls back to a seeded source."""

    def __init__(self, codes: Iterable[str] = (), indexes: Iterable[int] = ()) -> None:
        self.codes = list(codes)
        self.indexes = list(indexes)
        self.code_calls = 0
        self._fallback = PythonRandom(seed=7)

    def next_index(self, n: int) -> int:
        if self.indexes:
            return self.indexes.pop(0)
        return self._fallback.next_index(n)

    def next_code(self, alphabet: str, length: int) -> str:
        self.code_calls += 1
        if self.codes:
            return self.codes.pop(0)
        return self._fallback.next_code(alphabet, length)


class StepClock:
    def __init__(self, start: int = 1000, step: int = 1) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return float(value)


@pytest.fixture
def make_entry() -> Callable[..., VideoEntry]:
    def factory(
        video_id: str = "abc123",
        short_id: str | None = None,
        url: str | None = None,
        title: str | None = None,
        timestamp: int = 100,
    ) -> VideoEntry:
        return VideoEntry(
            video_id=video_id,
            short_id=short_id or video_id,
            url=url or f"https://youtu.be/{video_id}",
            title=title or f"Video {video_id}",
            timestamp=timestamp,
        )

    return factory


@pytest.fixture
def candidate() -> Callable[..., Candidate]:
    def factory(video_id: str, url: str | None = None, title: str | None = None) -> Candidate:
        return Candidate(
            video_id=video_id,
            url=url or f"https://youtu.be/{video_id}",
            title=title or f"Video {video_id}",
        )

    return factory


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def make_queue(store: MemoryStore) -> Callable[..., VideoQueue]:
    def factory(
        entries: Iterable[VideoEntry] = (),
        rng: ScriptedRandom | None = None,
        clock: StepClock | None = None,
    ) -> VideoQueue:
        store.entries = list(entries)
        return VideoQueue.load(
            store,
            rng=rng or ScriptedRandom(),
            clock=clock or StepClock(),
        )

    return factory


@pytest.fixture
def scripted_random() -> type[ScriptedRandom]:
    return ScriptedRandom


@pytest.fixture
def step_clock() -> type[StepClock]:
    return StepClock
