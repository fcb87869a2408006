from __future__ import annotations

from authstarter.storage.base import SessionStorage
from authstarter.storage.factory import create_session_storage
from authstarter.storage.local import FileSessionStorage
from authstarter.storage.memory import MemorySessionStorage

__all__ = [
    "SessionStorage",
    "MemorySessionStorage",
    "FileSessionStorage",
    "create_session_storage",
]
