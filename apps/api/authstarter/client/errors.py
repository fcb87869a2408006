from __future__ import annotations


class AuthClientError(Exception):
    """A failed auth call, tagged with the server's error code."""

    def __init__(self, code: str, message: str, status_code: int | None = None) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)
