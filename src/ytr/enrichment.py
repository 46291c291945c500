from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Mapping

from .entry import Candidate
from .errors import DuplicateEntry, InvalidReference, YtrError
from .metadata import TitleFetcher, title_or_url
from .resolve import extract_video_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnrichmentResult:
    url: str
    candidate: Candidate | None = None
    error: YtrError | None = None

    @property
    def ok(self) -> bool:
        return self.candidate is not None


@dataclass(frozen=True)
class EnrichmentTask:
    """Turns a submitted URL into a titled ``Candidate``.

    ``known_ids`` and ``known_urls`` map video ids and URLs to entry titles,
    snapshotted when the task was created. The queue repeats the duplicate
    check when the candidate is added, since entries can change while the
    title is being fetched.
    """

    url: str
    known_ids: Mapping[str, str]
    known_urls: Mapping[str, str]
    fetch_title: TitleFetcher

    def run(self) -> EnrichmentResult:
        try:
            video_id = extract_video_id(self.url)
        except InvalidReference as exc:
            return EnrichmentResult(self.url, error=exc)
        existing = self.known_ids.get(video_id)
        if existing is None:
            existing = self.known_urls.get(self.url)
        if existing is not None:
            return EnrichmentResult(self.url, error=DuplicateEntry(existing))
        title = title_or_url(video_id, self.url, self.fetch_title)
        return EnrichmentResult(
            self.url,
            candidate=Candidate(video_id=video_id, url=self.url, title=title),
        )


Spawner = Callable[[EnrichmentTask, Callable[[EnrichmentResult], object]], threading.Thread]


def start_enrichment(
    task: EnrichmentTask,
    deliver: Callable[[EnrichmentResult], object],
) -> threading.Thread:
    """Run ``task`` on a daemon thread and hand its single result to ``deliver``."""

    def worker() -> None:
        try:
            result = task.run()
        except Exception as exc:
            logger.exception("enrichment for %s failed", task.url)
            result = EnrichmentResult(task.url, error=YtrError(f"Failed to add video: {exc}"))
        deliver(result)

    thread = threading.Thread(target=worker, daemon=True, name="ytr-enrichment")
    thread.start()
    return thread
