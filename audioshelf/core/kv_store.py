"""Key-value persistence of string lists (JSON file or in-memory)."""
import json
import logging
import os
import threading
from pathlib import Path
from typing import Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Raised when the backing storage cannot be written."""


class KeyValueStore(Protocol):
    def get_string_list(self, key: str) -> Optional[List[str]]:
        ...

    def set_string_list(self, key: str, values: List[str]) -> None:
        ...


class MemoryKeyValueStore:
    """In-process store; used for tests and ephemeral sessions."""

    def __init__(self, initial: Optional[Dict[str, List[str]]] = None) -> None:
        self._data: Dict[str, List[str]] = {k: list(v) for k, v in (initial or {}).items()}
        self._lock = threading.Lock()

    def get_string_list(self, key: str) -> Optional[List[str]]:
        with self._lock:
            values = self._data.get(key)
            return list(values) if values is not None else None

    def set_string_list(self, key: str, values: List[str]) -> None:
        with self._lock:
            self._data[key] = list(values)


class JsonFileKeyValueStore:
    """All keys in one JSON object file. Read once on init, written atomically."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        self._data: Dict[str, List[str]] = self._read()

    def _read(self) -> Dict[str, List[str]]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Failed to read %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: expected a JSON object", self.path)
            return {}
        out: Dict[str, List[str]] = {}
        for key, values in data.items():
            if isinstance(values, list):
                out[str(key)] = [str(v) for v in values]
        return out

    def get_string_list(self, key: str) -> Optional[List[str]]:
        with self._lock:
            values = self._data.get(key)
            return list(values) if values is not None else None

    def set_string_list(self, key: str, values: List[str]) -> None:
        with self._lock:
            snapshot = dict(self._data)
            snapshot[key] = list(values)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path.write_text(json.dumps(snapshot, indent=2), encoding="utf-8")
                os.replace(tmp_path, self.path)
            except OSError as e:
                raise PersistenceError(f"could not write {self.path}: {e}") from e
            self._data = snapshot
