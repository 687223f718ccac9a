"""Key-value stores backed by a JSON file or by process memory."""
import copy
import json
import logging
import os
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)


class InMemoryKeyValueStore:
    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)


class JsonFileKeyValueStore:
    """
    Persists every slot in one JSON object file.

    When the file cannot be written, values are kept in memory for the rest of
    the process so callers keep working; they will not survive a restart.
    """

    def __init__(self, storage_path: str):
        """
        Initialize JsonFileKeyValueStore.

        Args:
            storage_path: Path to the JSON file. Created on first write.
        """
        self.storage_path = storage_path
        self._fallback = InMemoryKeyValueStore()
        self._unavailable = False

    def _read_all(self) -> Dict[str, Any]:
        """Load every slot from the storage file."""
        try:
            with open(self.storage_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Cannot read %s: %s", self.storage_path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: top-level value is not an object", self.storage_path)
            return {}
        return data

    def _write_all(self, data: Dict[str, Any]) -> None:
        storage_dir = os.path.dirname(self.storage_path)
        if storage_dir:
            os.makedirs(storage_dir, exist_ok=True)
        with open(self.storage_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def get(self, key: str, default: Any = None) -> Any:
        if self._unavailable:
            return self._fallback.get(key, default)
        return self._read_all().get(key, default)

    def set(self, key: str, value: Any) -> None:
        if not self._unavailable:
            data = self._read_all()
            data[key] = value
            try:
                self._write_all(data)
                return
            except OSError as e:
                logger.warning(
                    "Cannot write %s (%s); keeping values in memory only", self.storage_path, e
                )
                self._unavailable = True
                for k, v in data.items():
                    self._fallback.set(k, v)
        self._fallback.set(key, value)
