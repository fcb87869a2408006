from __future__ import annotations

from pathlib import Path

from authstarter.storage.base import SessionStorage
from authstarter.storage.local import FileSessionStorage
from authstarter.storage.memory import MemorySessionStorage


def create_session_storage(
    backend: str = "memory",
    root: str | Path | None = None,
) -> SessionStorage:
    selected_backend = backend.strip().lower()
    if selected_backend == "memory":
        return MemorySessionStorage()
    if selected_backend == "local":
        if root is None:
            raise ValueError("local session storage needs a root directory")
        return FileSessionStorage(Path(root))
    raise ValueError(f"unsupported session storage backend: {selected_backend}")
