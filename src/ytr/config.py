from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .paths import config_path, data_path

DEFAULT_LIST_TITLE = "YouTube Videos"
DEFAULT_SHORT_ID_LENGTH = 6
DEFAULT_FETCH_TIMEOUT = 10.0
DEFAULT_OEMBED_URL = "https://www.youtube.com/oembed"
MIN_SHORT_ID_LENGTH = 4
MAX_SHORT_ID_LENGTH = 32


@dataclass(frozen=True)
class AppConfig:
    data_file: str | None = None
    list_title: str = DEFAULT_LIST_TITLE
    short_id_length: int = DEFAULT_SHORT_ID_LENGTH
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    oembed_url: str = DEFAULT_OEMBED_URL
    debug: bool = False

    def store_path(self) -> Path:
        if self.data_file:
            return Path(self.data_file).expanduser()
        return data_path()


def load_config(path: Path | None = None) -> tuple[AppConfig, str | None]:
    path = path or config_path()
    if not path.exists():
        return AppConfig(), None
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        return AppConfig(), f"Failed to read config: {path} ({exc})"
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return AppConfig(), f"Config file is not valid JSON: {path}"
    if not isinstance(data, dict):
        return AppConfig(), f"Config file must be a JSON object: {path}"
    return _parse_config_data(data), None


def _parse_config_data(data: dict[str, Any]) -> AppConfig:
    defaults = AppConfig()
    short_id_length = _as_int(data.get("short_id_length"))
    if short_id_length is None or not (
        MIN_SHORT_ID_LENGTH <= short_id_length <= MAX_SHORT_ID_LENGTH
    ):
        short_id_length = defaults.short_id_length
    fetch_timeout = _as_positive_float(data.get("fetch_timeout"))
    debug = _as_bool(data.get("debug"))
    return AppConfig(
        data_file=_as_str(data.get("data_file")),
        list_title=_as_str(data.get("list_title")) or defaults.list_title,
        short_id_length=short_id_length,
        fetch_timeout=fetch_timeout or defaults.fetch_timeout,
        oembed_url=_as_str(data.get("oembed_url")) or defaults.oembed_url,
        debug=debug if debug is not None else defaults.debug,
    )


def _as_str(value: Any) -> str | None:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return None


def _as_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    return None


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _as_positive_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and value > 0:
        return float(value)
    return None
