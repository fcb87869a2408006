from __future__ import annotations

import structlog

from authstarter.api.v1.schemas.auth import PublicProfile
from authstarter.client.api import AuthApiClient
from authstarter.storage.base import SessionStorage
from authstarter.storage.memory import MemorySessionStorage

logger = structlog.get_logger()

SESSION_KEY = "auth_user"


class AuthSession:
    """Client-side holder of the signed-in user's public profile.

    Construct one per application instance. The profile is mirrored into
    ``storage`` so a new holder over the same storage resumes the session; a
    corrupt or unreadable entry is dropped and the holder starts logged out.
    """

    def __init__(self, api: AuthApiClient, storage: SessionStorage | None = None) -> None:
        self._api = api
        self._storage = storage or MemorySessionStorage()
        self._user: PublicProfile | None = self._restore()

    @property
    def user(self) -> PublicProfile | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def login(self, email: str, password: str) -> PublicProfile:
        profile = self._api.login(email, password)
        self._remember(profile)
        return profile

    def login_with_google(self, credential: str) -> PublicProfile:
        profile, _is_new_user = self._api.google_auth(credential)
        self._remember(profile)
        return profile

    def logout(self) -> None:
        self._user = None
        self._forget()

    def _remember(self, profile: PublicProfile) -> None:
        self._user = profile
        try:
            self._storage.set_item(SESSION_KEY, profile.model_dump_json())
        except OSError:
            logger.warning("session_cache_write_failed")

    def _restore(self) -> PublicProfile | None:
        # Undecodable bytes surface as UnicodeDecodeError, a ValueError.
        try:
            raw = self._storage.get_item(SESSION_KEY)
            if raw is None:
                return None
            return PublicProfile.model_validate_json(raw)
        except (OSError, ValueError):
            logger.info("session_cache_discarded")
            self._forget()
            return None

    def _forget(self) -> None:
        try:
            self._storage.remove_item(SESSION_KEY)
        except OSError:
            logger.warning("session_cache_clear_failed")
