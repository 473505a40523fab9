"""
Local persistent key-value store.

Holds the current session's user id and the anonymous language/currency
preference. Values are plain strings, last write wins.
"""
import json
import threading
from pathlib import Path
from typing import Optional, Dict

from ..utils.logger import get_logger
from config.settings import storage_config


class LocalStore:
    """JSON-file-backed string store. A ``None`` path keeps values in memory only."""

    def __init__(self, path: Optional[str] = storage_config.local_store_path):
        self.logger = get_logger("local_store")
        self.path = Path(path) if path else None
        self.lock = threading.Lock()
        self.values: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if not self.path or not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            self.logger.warning("Ignoring unreadable local store", path=str(self.path), error=str(e))
            return {}
        return {str(k): str(v) for k, v in data.items()} if isinstance(data, dict) else {}

    def _save(self) -> None:
        if not self.path:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self.values, indent=2), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        with self.lock:
            return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        with self.lock:
            self.values[key] = value
            self._save()

    def remove(self, key: str) -> None:
        with self.lock:
            if self.values.pop(key, None) is not None:
                self._save()
