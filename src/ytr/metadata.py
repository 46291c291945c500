from __future__ import annotations

import json
import logging
from typing import Any, Callable
from urllib.parse import urlencode

import httpx

from .config import DEFAULT_FETCH_TIMEOUT, DEFAULT_OEMBED_URL
from .errors import MetadataError

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], bytes]
TitleFetcher = Callable[[str], str]


def watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


def oembed_request_url(video_id: str, endpoint: str = DEFAULT_OEMBED_URL) -> str:
    query = urlencode({"url": watch_url(video_id), "format": "json"})
    return f"{endpoint}?{query}"


def fetch_title(
    video_id: str,
    fetcher: Fetcher | None = None,
    endpoint: str = DEFAULT_OEMBED_URL,
) -> str:
    """Look up a video title through YouTube's oEmbed endpoint.

    Any failure along the way (transport, HTTP status, JSON decoding, a missing
    or blank ``title``) is reported as ``MetadataError``.
    """
    fetcher = fetcher or _http_fetch
    try:
        body = fetcher(oembed_request_url(video_id, endpoint))
    except (httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
        raise MetadataError(f"Failed to fetch title for {video_id}: {exc}") from exc

    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MetadataError(f"Failed to parse oEmbed response for {video_id}") from exc

    title = _as_str(data.get("title")) if isinstance(data, dict) else None
    if title is None:
        raise MetadataError(f"oEmbed response for {video_id} has no title")
    return title


def title_or_url(video_id: str, url: str, fetch: TitleFetcher) -> str:
    try:
        return fetch(video_id)
    except MetadataError as exc:
        logger.info("using URL as title for %s: %s", video_id, exc)
        return url


def make_title_fetcher(
    timeout: float = DEFAULT_FETCH_TIMEOUT,
    endpoint: str = DEFAULT_OEMBED_URL,
) -> TitleFetcher:
    def fetch(video_id: str) -> str:
        return fetch_title(
            video_id,
            fetcher=lambda url: _http_fetch(url, timeout=timeout),
            endpoint=endpoint,
        )

    return fetch


def _http_fetch(url: str, timeout: float = DEFAULT_FETCH_TIMEOUT) -> bytes:
    with httpx.Client(follow_redirects=True, timeout=timeout) as client:
        response = client.get(url)
        response.raise_for_status()
        return response.content


def _as_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None
