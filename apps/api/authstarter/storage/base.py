from __future__ import annotations

from abc import ABC, abstractmethod


class SessionStorage(ABC):
    """Key/value string store backing the client session cache."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored value or None when the key is absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete key if it exists."""
