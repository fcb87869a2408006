from __future__ import annotations

from abc import ABC, abstractmethod


class EmailSender(ABC):
    @abstractmethod
    def send(self, *, to: str, subject: str, html: str, from_email: str) -> str:
        """Hand one message to the provider and return its message id."""
