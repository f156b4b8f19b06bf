from __future__ import annotations

from product_page.application.ports.session_storage import SessionStoragePort


class MemorySessionStorage(SessionStoragePort):
    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)
