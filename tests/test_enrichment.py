import threading

from ytr.enrichment import EnrichmentResult, EnrichmentTask, start_enrichment
from ytr.entry import Candidate
from ytr.errors import DuplicateEntry, InvalidReference, MetadataError, YtrError


def _task(url: str, fetch_title=lambda _: "Fetched", ids=None, urls=None) -> EnrichmentTask:
    return EnrichmentTask(
        url=url,
        known_ids=ids or {},
        known_urls=urls or {},
        fetch_title=fetch_title,
    )


def test_run_produces_candidate() -> None:
    result = _task("https://youtu.be/abc123").run()
    assert result.ok
    assert result.error is None
    assert result.candidate == Candidate("abc123", "https://youtu.be/abc123", "Fetched")


def test_run_rejects_malformed_url_without_fetching() -> None:
    calls: list[str] = []
    result = _task("https://example.com/x", fetch_title=calls.append).run()
    assert not result.ok
    assert isinstance(result.error, InvalidReference)
    assert calls == []


def test_run_rejects_duplicate_id_from_snapshot() -> None:
    result = _task("https://www.youtube.com/watch?v=abc123", ids={"abc123": "Match highlights"}).run()
    assert isinstance(result.error, DuplicateEntry)
    assert result.error.title == "Match highlights"
    assert str(result.error) == "duplicate entry: Match highlights"
    assert result.candidate is None


def test_run_rejects_duplicate_url_from_snapshot() -> None:
    url = "https://youtu.be/abc123"
    result = _task(url, urls={url: "Practice drills"}).run()
    assert isinstance(result.error, DuplicateEntry)
    assert result.error.title == "Practice drills"


def test_run_falls_back_to_url_title() -> None:
    def failing(video_id: str) -> str:
        raise MetadataError("offline")

    url = "https://youtu.be/abc123"
    result = _task(url, fetch_title=failing).run()
    assert result.candidate is not None
    assert result.candidate.title == url


def test_start_enrichment_delivers_exactly_once() -> None:
    delivered: list[EnrichmentResult] = []
    done = threading.Event()

    def deliver(result: EnrichmentResult) -> None:
        delivered.append(result)
        done.set()

    thread = start_enrichment(_task("https://youtu.be/abc123"), deliver)
    thread.join(timeout=5)
    assert done.is_set()
    assert thread.daemon
    assert len(delivered) == 1
    assert delivered[0].candidate is not None


def test_start_enrichment_reports_unexpected_errors() -> None:
    delivered: list[EnrichmentResult] = []

    def exploding(video_id: str) -> str:
        raise KeyError("surprise")

    thread = start_enrichment(_task("https://youtu.be/abc123", fetch_title=exploding), delivered.append)
    thread.join(timeout=5)
    assert len(delivered) == 1
    assert isinstance(delivered[0].error, YtrError)
    assert delivered[0].candidate is None
