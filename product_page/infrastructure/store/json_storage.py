from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

from product_page.application.exceptions import SessionStorageError
from product_page.application.ports.session_storage import SessionStoragePort


class JsonFileSessionStorage(SessionStoragePort):
    """Key-value items for one session, kept in a single JSON file."""

    def __init__(self, file_path: str | Path) -> None:
        self._file_path = Path(file_path)
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    @classmethod
    def for_session(cls, data_dir: str | Path, session_id: str) -> "JsonFileSessionStorage":
        return cls(Path(data_dir) / f"{session_id}.json")

    def get_item(self, key: str) -> str | None:
        with self._lock:
            value = self._load_items().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            items = self._load_items()
            items[key] = value
            self._save_items(items)

    def remove_item(self, key: str) -> None:
        with self._lock:
            items = self._load_items()
            if key not in items:
                return
            del items[key]
            self._save_items(items)

    def _load_items(self) -> dict[str, str]:
        """Load items from the JSON file, return empty if missing or unreadable."""
        if not self._file_path.exists():
            return {}
        try:
            with open(self._file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            self._logger.warning(
                "Session storage file unreadable", extra={"reason": str(e), "path": str(self._file_path)}
            )
            return {}
        return data if isinstance(data, dict) else {}

    def _save_items(self, items: dict[str, str]) -> None:
        """Save items to the JSON file atomically."""
        temp_path = self._file_path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(items, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._file_path)
        except OSError as e:
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    pass
            raise SessionStorageError(f"could not write {self._file_path}: {e}") from e
