# storefront/client/session.py

from typing import Any, Callable, Dict, List, Optional
import logging

import httpx

from .api_client import ApiClient, ApiError
from .storage import TOKEN_KEY, USER_KEY, clear_auth

logger = logging.getLogger(__name__)

UserListener = Callable[[Optional[Dict[str, Any]]], None]


class AuthSession:
    """
    Client-side authentication state.

    Holds the signed-in user (or None) and a loading flag, keeps the token
    and user persisted in the client's storage, and notifies subscribers on
    every user change.
    """

    def __init__(self, api: ApiClient):
        self.api = api
        self.user: Optional[Dict[str, Any]] = None
        self.is_loading = True
        self._listeners: List[UserListener] = []
        api.on_unauthorized(self._on_unauthorized)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def subscribe(self, listener: UserListener) -> None:
        self._listeners.append(listener)

    def _set_user(self, user: Optional[Dict[str, Any]]) -> None:
        self.user = user
        for listener in list(self._listeners):
            listener(user)

    def _on_unauthorized(self) -> None:
        if self.user is not None:
            logger.info("Session rejected by the server; signed out")
            self._set_user(None)

    def _store(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.api.storage.set(TOKEN_KEY, payload["token"])
        self.api.storage.set(USER_KEY, payload["user"])
        self._set_user(payload["user"])
        return payload["user"]

    def initialize(self) -> None:
        """Rehydrate from storage, then confirm the session with the server."""
        self.is_loading = True
        try:
            token = self.api.storage.get(TOKEN_KEY)
            cached_user = self.api.storage.get(USER_KEY)
            if not (token and cached_user):
                return

            self._set_user(cached_user)
            try:
                user = self.api.get_current_user()
            except (ApiError, httpx.HTTPError) as e:
                logger.info(f"Stored session is no longer valid: {e}")
                clear_auth(self.api.storage)
                self._set_user(None)
                return
            self.api.storage.set(USER_KEY, user)
            self._set_user(user)
        finally:
            self.is_loading = False

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self._store(self.api.login(email, password))

    def signup(self, email: str, password: str, first_name: str, last_name: str) -> Dict[str, Any]:
        return self._store(self.api.signup(email, password, first_name, last_name))

    def logout(self) -> None:
        """Sign out locally, then ask the server to revoke the token."""
        token = self.api.storage.get(TOKEN_KEY)
        clear_auth(self.api.storage)
        self._set_user(None)
        if not token:
            return
        try:
            self.api.logout(token=token)
        except (ApiError, httpx.HTTPError) as e:
            logger.warning(f"Server-side logout failed: {e}")

    def refresh_user(self) -> Optional[Dict[str, Any]]:
        """Re-read the profile; any failure signs the session out."""
        try:
            user = self.api.get_current_user()
        except (ApiError, httpx.HTTPError) as e:
            logger.info(f"Profile refresh failed, logging out: {e}")
            self.logout()
            return None
        self.api.storage.set(USER_KEY, user)
        self._set_user(user)
        return user
