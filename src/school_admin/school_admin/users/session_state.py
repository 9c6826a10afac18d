"""Explicit per-request session state.

Built from the signed Flask session cookie, kept on `flask.g` for the
duration of one request and passed to the views that need it. Lifecycle:
init -> subscribed (cookie read) -> ready (profile fetched) -> closed.
"""

from __future__ import annotations

from enum import Enum
from typing import MutableMapping, Optional

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from ..profiles.repository import ProfileRepository
from .service import SessionUser


class SessionPhase(str, Enum):
    INIT = "init"
    SUBSCRIBED = "subscribed"
    READY = "ready"
    CLOSED = "closed"


class SessionState:
    USER_KEY = "user_id"

    def __init__(self, profiles: ProfileRepository, store: MutableMapping):
        self._profiles = profiles
        self._store = store
        self._identity_id: Optional[str] = None
        self._user: Optional[SessionUser] = None
        self.phase = SessionPhase.INIT

    def subscribe(self) -> "SessionState":
        self._identity_id = self._store.get(self.USER_KEY)
        self.phase = SessionPhase.SUBSCRIBED
        return self

    @property
    def user(self) -> Optional[SessionUser]:
        if self.phase == SessionPhase.CLOSED:
            raise RuntimeError("session state used after teardown")
        if self.phase == SessionPhase.INIT:
            self.subscribe()
        if self.phase == SessionPhase.SUBSCRIBED:
            # Profile is fetched lazily so public endpoints never touch the store.
            if self._identity_id:
                profile = self._profiles.get_by_id(str(self._identity_id))
                if profile is not None:
                    self._user = SessionUser.from_profile(profile)
                else:
                    self._store.clear()
            self.phase = SessionPhase.READY
        return self._user

    def sign_in(self, user: SessionUser) -> None:
        self._store.clear()
        self._store[self.USER_KEY] = user.user_id
        self._store["role"] = user.role.value
        self._identity_id = user.user_id
        self._user = user
        self.phase = SessionPhase.READY

    def sign_out(self) -> None:
        self._store.clear()
        self._identity_id = None
        self._user = None
        self.phase = SessionPhase.READY

    def require_user(self) -> SessionUser:
        user = self.user
        if user is None:
            raise AuthenticationError("Please log in first")
        return user

    def require_admin(self) -> SessionUser:
        user = self.require_user()
        if user.role != Role.ADMIN:
            raise AuthorizationError("Admin role required")
        return user

    def teardown(self) -> None:
        self._user = None
        self.phase = SessionPhase.CLOSED
