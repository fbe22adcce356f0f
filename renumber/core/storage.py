from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    def load(self, key: str) -> Optional[str]: ...

    def save(self, key: str, value: str) -> None: ...


class JsonFileStorage:
    """Key-value blob storage kept in a single JSON file.

    File: ``<data_dir>/storage.json``, an object of key → string value.
    Read failures behave as an empty store, write failures are logged and
    dropped.
    """

    FILE_NAME = "storage.json"

    def __init__(self, data_dir: Path) -> None:
        self._file_path = Path(data_dir) / self.FILE_NAME
        self._lock = threading.Lock()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def load(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._read().get(key)
        return value if isinstance(value, str) else None

    def save(self, key: str, value: str) -> None:
        with self._lock:
            payload = self._read()
            payload[key] = value
            self._write(payload)

    def _read(self) -> Dict[str, object]:
        if not self._file_path.exists():
            return {}
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not read storage from %s: %s", self._file_path, e)
            return {}
        if not isinstance(payload, dict):
            logger.warning("Ignoring storage file %s: expected a JSON object", self._file_path)
            return {}
        return payload

    def _write(self, payload: Dict[str, object]) -> None:
        tmp_path = self._file_path.with_suffix(".json.tmp")
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(payload), encoding="utf-8")
            tmp_path.replace(self._file_path)
        except OSError as e:
            logger.warning("Could not save storage to %s: %s", self._file_path, e)
