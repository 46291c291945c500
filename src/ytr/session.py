from __future__ import annotations

import logging
from enum import Enum

from .config import AppConfig
from .enrichment import EnrichmentResult, EnrichmentTask
from .entry import VideoEntry
from .errors import EmptyQueue, StoreError, YtrError
from .metadata import TitleFetcher
from .opener import Opener, open_and_log
from .video_queue import VideoQueue

logger = logging.getLogger(__name__)


class SessionMode(Enum):
    BROWSING = "browsing"
    CAPTURING_INPUT = "capturing"


class Session:
    """Interactive controller over a ``VideoQueue``.

    Every method is called from one event loop, one event at a time. Title
    lookups run elsewhere: ``submit`` hands back an ``EnrichmentTask`` for the
    caller to run, and the outcome comes back through ``apply_enrichment``.
    Errors never escape; they become ``notice``, which the next key press
    clears without being interpreted as a command.
    """

    def __init__(
        self,
        queue: VideoQueue,
        *,
        opener: Opener,
        fetch_title: TitleFetcher,
        config: AppConfig | None = None,
    ) -> None:
        self.queue = queue
        self.config = config or AppConfig()
        self.mode = SessionMode.BROWSING
        self.notice: str | None = None
        self.status: str | None = None
        self.running = True
        self.pending: EnrichmentTask | None = None
        self._opener = opener
        self._fetch_title = fetch_title

    @property
    def entries(self) -> tuple[VideoEntry, ...]:
        return self.queue.entries

    def intercept_key(self) -> bool:
        """Clear an active notice; True means the key press is consumed."""
        if self.notice is None:
            return False
        self.notice = None
        return True

    def show_notice(self, message: str) -> None:
        self.notice = message

    def quit(self) -> None:
        if self.mode is SessionMode.BROWSING:
            self.running = False

    def begin_input(self) -> None:
        if self.mode is SessionMode.BROWSING:
            self.mode = SessionMode.CAPTURING_INPUT

    def cancel_input(self) -> None:
        self.mode = SessionMode.BROWSING

    def delete(self, entry: VideoEntry | None) -> bool:
        if self.mode is not SessionMode.BROWSING or entry is None:
            return False
        try:
            return self.queue.remove(entry.short_id)
        except StoreError as exc:
            self.show_notice(str(exc))
            return True

    def consume_random(self) -> VideoEntry | None:
        if self.mode is not SessionMode.BROWSING:
            return None
        try:
            entry = self.queue.consume_random()
        except EmptyQueue as exc:
            self.show_notice(str(exc))
            return None
        except StoreError as exc:
            self.show_notice(str(exc))
            entry = exc.entry
            if entry is None:
                return None
        open_and_log(self._opener, entry.url)
        return entry

    def select(self, entry: VideoEntry | None) -> bool:
        if self.mode is not SessionMode.BROWSING or entry is None:
            return False
        open_and_log(self._opener, entry.url)
        try:
            return self.queue.remove(entry.short_id)
        except StoreError as exc:
            self.show_notice(str(exc))
            return True

    def submit(self, text: str) -> EnrichmentTask | None:
        if self.mode is not SessionMode.CAPTURING_INPUT:
            return None
        self.mode = SessionMode.BROWSING
        url = text.strip()
        if not url:
            return None
        if self.pending is not None:
            self.show_notice("Still fetching the previous video; try again shortly.")
            return None
        task = EnrichmentTask(
            url=url,
            known_ids=self.queue.known_ids(),
            known_urls=self.queue.known_urls(),
            fetch_title=self._fetch_title,
        )
        self.pending = task
        self.status = "Fetching title..."
        return task

    def apply_enrichment(self, result: EnrichmentResult) -> VideoEntry | None:
        if self.pending is not None and self.pending.url == result.url:
            self.pending = None
        self.status = None
        if result.candidate is None:
            self.show_notice(str(result.error or "Failed to add video."))
            return None
        try:
            entry = self.queue.add(result.candidate)
        except StoreError as exc:
            self.show_notice(str(exc))
            return exc.entry
        except YtrError as exc:
            self.show_notice(str(exc))
            return None
        self.status = f"Added video: {entry.title}"
        logger.info("added %s as %s", entry.url, entry.short_id)
        return entry
