from __future__ import annotations

from authstarter.storage.base import SessionStorage


class MemorySessionStorage(SessionStorage):
    """Lives exactly as long as the owning client, like a browser tab."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)
