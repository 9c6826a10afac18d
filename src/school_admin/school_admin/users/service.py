from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import DEFAULT_PROFILE_LIMIT, MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..identity.provider import IdentityProvider
from ..profiles.model import Profile
from ..profiles.repository import ProfileRepository
from ..registrations.applications import AdminApplication, parse_application
from ..registrations.provisioning import ProvisioningEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: str
    name: str
    email: str
    role: Role
    class_name: Optional[str] = None
    subject: Optional[str] = None

    @classmethod
    def from_profile(cls, profile: Profile) -> "SessionUser":
        return cls(
            user_id=profile.profile_id,
            name=profile.name,
            email=profile.email,
            role=profile.role,
            class_name=profile.class_name,
            subject=profile.subject,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "class": self.class_name,
            "subject": self.subject,
        }


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, identities: IdentityProvider, profiles: ProfileRepository):
        self._identities = identities
        self._profiles = profiles

    def authenticate(self, email: str, password: str) -> SessionUser:
        if not isinstance(email, str) or not isinstance(password, str):
            raise AuthenticationError("Invalid email or password")
        email = email.strip().lower()
        if not email or not password:
            raise AuthenticationError("Invalid email or password")

        identity = self._identities.verify_credentials(email=email, secret=password)
        if identity is None:
            raise AuthenticationError("Invalid email or password")

        profile = self._profiles.get_by_id(identity.identity_id)
        if profile is None:
            logger.warning("Identity %s logged in without a profile", identity.identity_id)
            raise AuthenticationError("Account is not provisioned")

        return SessionUser.from_profile(profile)


class AccountService:
    """Use case: manage accounts directly (admin) and seed the first admin."""

    def __init__(self, engine: ProvisioningEngine, profiles: ProfileRepository):
        self._engine = engine
        self._profiles = profiles

    def create_account(self, *, current_role: Role, payload: Mapping[str, Any]) -> Profile:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin role required")

        application = parse_application(payload)
        password = require_min_length(payload.get("password"), "Password", MIN_PASSWORD_LENGTH)

        provisioned = self._engine.provision(application, secret=password, allow_existing=False)
        logger.info("Account %s created directly (role=%s)", provisioned.identity_id, application.role.value)
        return self._profiles.get_by_id(provisioned.identity_id)

    def list_profiles(
        self,
        *,
        current_role: Role,
        role: Optional[Role] = None,
        limit: int = DEFAULT_PROFILE_LIMIT,
    ) -> Sequence[Profile]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin role required")
        return self._profiles.list_by_role(role=role, limit=limit)

    def ensure_admin(self, *, name: str, email: str, password: str) -> str:
        """Idempotently provision an admin identity + profile. Returns the identity id."""
        application = AdminApplication(
            name=require_non_empty(name, "Name"),
            email=require_email(email),
        )
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        provisioned = self._engine.provision(application, secret=password)

        profile = self._profiles.get_by_id(provisioned.identity_id)
        if profile is None or profile.role != Role.ADMIN:
            raise ValidationError(f"{application.email} already belongs to a non-admin account")
        return provisioned.identity_id
