from __future__ import annotations

from pathlib import Path

from platformdirs import user_config_path

APP_NAME = "ytr"
DATA_FILE_NAME = "data.json"


def config_root() -> Path:
    root = user_config_path(APP_NAME)
    root.mkdir(parents=True, exist_ok=True)
    return root


def config_path() -> Path:
    return config_root() / "config.json"


def data_path() -> Path:
    return config_root() / DATA_FILE_NAME


def log_path() -> Path:
    return config_root() / "debug.log"
