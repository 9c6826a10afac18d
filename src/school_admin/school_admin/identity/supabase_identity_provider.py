"""
Hosted identity provider: Supabase Auth through the `supabase` client.

Design:
- Two clients. The service-role client drives `auth.admin` (create, list,
  delete users); the anon client only verifies passwords, so a login never
  touches the admin client's auth state.
- Every AuthError raised by the SDK becomes IdentityProviderError.
- Server-side only. The service-role key bypasses row level security.

Security:
- Do not log keys, passwords or tokens.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from supabase import AuthApiError, AuthError, Client, ClientOptions, create_client

from ..core.constants import SUPABASE_USERS_PAGE_SIZE
from ..core.exceptions import IdentityProviderError
from .model import Identity
from .provider import IdentityProvider

logger = logging.getLogger(__name__)

# Answers of the password grant for a wrong email/password pair.
_BAD_CREDENTIALS_STATUS = (400, 401)


@dataclass(frozen=True)
class SupabaseConfig:
    url: str
    service_role_key: str
    anon_key: Optional[str] = None


def _server_client(url: str, key: str) -> Client:
    # No background refresh and no stored session: the process is a server.
    options = ClientOptions(auto_refresh_token=False, persist_session=False)
    return create_client(url, key, options=options)


def _reason(e: AuthError) -> str:
    return getattr(e, "message", None) or str(e)


class SupabaseIdentityProvider(IdentityProvider):
    def __init__(
        self,
        cfg: SupabaseConfig,
        *,
        admin_client: Optional[Client] = None,
        login_client: Optional[Client] = None,
    ):
        if not cfg.url or not cfg.service_role_key:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required")
        self.cfg = cfg
        self._admin_client = admin_client or _server_client(cfg.url, cfg.service_role_key)
        self._login_client = login_client or _server_client(cfg.url, cfg.anon_key or cfg.service_role_key)

    @property
    def _admin(self):
        return self._admin_client.auth.admin

    @staticmethod
    def _to_identity(user: Any) -> Identity:
        return Identity(
            identity_id=str(user.id),
            email=str(getattr(user, "email", None) or "").lower(),
            metadata=dict(getattr(user, "user_metadata", None) or {}),
            confirmed=bool(getattr(user, "email_confirmed_at", None)),
        )

    def find_by_email(self, email: str) -> Optional[Identity]:
        # list_users has no email filter, so walk the pages.
        wanted = email.strip().lower()
        page = 1
        while True:
            try:
                users = self._admin.list_users(page=page, per_page=SUPABASE_USERS_PAGE_SIZE) or []
            except AuthError as e:
                raise IdentityProviderError(f"Failed to list users: {_reason(e)}") from e
            for user in users:
                if str(getattr(user, "email", None) or "").lower() == wanted:
                    return self._to_identity(user)
            if len(users) < SUPABASE_USERS_PAGE_SIZE:
                return None
            page += 1

    def create_identity(self, *, email: str, secret: str, metadata: Mapping[str, Any]) -> Identity:
        attributes = {
            "email": email.strip().lower(),
            "password": secret,
            "email_confirm": True,
            "user_metadata": dict(metadata),
        }
        try:
            resp = self._admin.create_user(attributes)
        except AuthError as e:
            raise IdentityProviderError(f"Failed to create user: {_reason(e)}") from e

        user = getattr(resp, "user", None)
        if user is None or not getattr(user, "id", None):
            raise IdentityProviderError("Failed to create user: no user data returned")
        return self._to_identity(user)

    def delete_identity(self, identity_id: str) -> None:
        try:
            self._admin.delete_user(identity_id)
        except AuthApiError as e:
            if getattr(e, "status", None) == 404:
                logger.info("Identity %s already absent at provider", identity_id)
                return
            raise IdentityProviderError(f"Failed to delete user {identity_id}: {_reason(e)}") from e
        except AuthError as e:
            raise IdentityProviderError(f"Failed to delete user {identity_id}: {_reason(e)}") from e

    def verify_credentials(self, *, email: str, secret: str) -> Optional[Identity]:
        try:
            res = self._login_client.auth.sign_in_with_password(
                {"email": email.strip().lower(), "password": secret}
            )
        except AuthApiError as e:
            if getattr(e, "status", None) in _BAD_CREDENTIALS_STATUS:
                return None
            raise IdentityProviderError(f"Login failed: {_reason(e)}") from e
        except AuthError as e:
            raise IdentityProviderError(f"Login failed: {_reason(e)}") from e

        user = getattr(res, "user", None)
        return self._to_identity(user) if user else None
