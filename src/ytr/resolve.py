from __future__ import annotations

import re
from string import ascii_letters, digits
from urllib.parse import parse_qs, urlparse

from .errors import InvalidReference
from .rng import RandomSource

SHORT_ID_ALPHABET = ascii_letters + digits
SHORT_ID_LENGTH = 6
_URL_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_SHORT_HOSTS = {"youtu.be", "www.youtu.be"}
_PATH_ID_PREFIXES = {"embed", "shorts", "live"}


def looks_like_url(value: str) -> bool:
    return bool(_URL_SCHEME_RE.match(value.strip()))


def extract_video_id(url: str) -> str:
    try:
        parsed = urlparse(url.strip())
    except ValueError as exc:
        raise InvalidReference(url, f"invalid URL: {exc}") from exc

    host = (parsed.hostname or "").lower()
    path = parsed.path.strip("/")
    if host in _SHORT_HOSTS:
        video_id = path.split("/")[0]
        if video_id:
            return video_id
        raise InvalidReference(url)

    if "youtube.com" in host:
        if parsed.path.rstrip("/") == "/watch":
            values = parse_qs(parsed.query).get("v") or []
            if values and values[0]:
                return values[0]
            raise InvalidReference(url)
        parts = path.split("/")
        if len(parts) >= 2 and parts[0] in _PATH_ID_PREFIXES and parts[1]:
            return parts[1]

    raise InvalidReference(url)


def assign_short_id(
    existing: set[str],
    rng: RandomSource,
    length: int = SHORT_ID_LENGTH,
) -> str:
    """Draw codes until one is not in ``existing``.

    The result is unused at call time only; callers that assign concurrently
    must serialise through a single owner of the set.
    """
    while True:
        code = rng.next_code(SHORT_ID_ALPHABET, length)
        if code not in existing:
            return code
