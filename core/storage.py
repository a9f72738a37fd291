"""
Durable key/value storage backed by a JSON file.

Used for the session record when there is no browser session (scripts,
the Flask CLI). Exposes the same small mapping surface the Flask session
offers: get(), item assignment and pop(). Every write is flushed to disk
immediately so the record survives a process restart.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from logging_config import get_logger


logger = get_logger(__name__)


class JsonFileStorage:
    """
    Mapping-like store persisted to a single JSON file.

    A missing or unreadable file is treated as empty storage, never as an
    error.
    """

    def __init__(self, path):
        self._path = Path(path)
        self._data: Dict[str, Any] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self._data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._flush()

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def pop(self, key: str, default: Optional[Any] = None) -> Any:
        value = self._data.pop(key, default)
        self._flush()
        return value

    def _load(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}

        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable storage file {self._path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring storage file {self._path}: not a JSON object")
            return {}
        return data

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)

        # Write-then-rename so a crash never leaves a half-written record
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self._path)
