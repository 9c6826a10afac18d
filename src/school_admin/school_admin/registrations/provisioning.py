"""Turns an approved registration into a login identity plus a profile.

The identity provider and the profile store are separate systems, so there is
no transaction spanning both. The sequence is:

1. look for an identity already bound to the email and reuse it,
2. otherwise create one with a freshly issued secret,
3. create the profile (or re-confirm one left by an earlier attempt).

If step 3 fails, an identity created in step 2 of the same call is deleted
again. A reused identity is never deleted. A failed delete leaves an orphaned
identity behind; it is logged at ERROR level for manual cleanup and reported
on the raised ProvisioningError.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..core.enums import ProvisioningStage
from ..core.exceptions import DuplicateIdentityError, ProvisioningError
from ..identity.provider import IdentityProvider
from ..profiles.repository import ProfileRepository
from .applications import metadata_for
from .credentials import SecretIssuer
from .model import ProvisionedIdentity

logger = logging.getLogger(__name__)


class ProvisioningEngine:
    def __init__(self, identities: IdentityProvider, profiles: ProfileRepository, secrets: SecretIssuer):
        self._identities = identities
        self._profiles = profiles
        self._secrets = secrets

    def provision(
        self,
        source: Any,
        *,
        secret: Optional[str] = None,
        allow_existing: bool = True,
    ) -> ProvisionedIdentity:
        """Provision `source` (a PendingRequest or an application).

        `secret` overrides the issued secret (admin-chosen password).
        With `allow_existing=False` an existing identity raises
        DuplicateIdentityError instead of being reused.
        """
        email = source.email.strip().lower()

        try:
            existing = self._identities.find_by_email(email)
        except Exception as e:
            raise ProvisioningError(
                f"Could not look up existing accounts for {email}",
                stage=ProvisioningStage.CREDENTIAL,
            ) from e

        shown: Optional[str] = None
        if existing is not None:
            if not allow_existing:
                raise DuplicateIdentityError(f"An account for {email} already exists")
            identity_id = existing.identity_id
            created = False
            logger.info("Reusing existing identity %s for %s", identity_id, email)
        else:
            if secret is None:
                issued = self._secrets.issue()
                secret, shown = issued.secret, issued.shown
            try:
                identity = self._identities.create_identity(email=email, secret=secret, metadata=metadata_for(source))
            except Exception as e:
                logger.warning("Identity creation failed for %s: %s", email, e)
                raise ProvisioningError(
                    f"Failed to create account for {email}",
                    stage=ProvisioningStage.CREDENTIAL,
                ) from e
            identity_id = identity.identity_id
            created = True

        try:
            self._ensure_profile(identity_id, email, source)
        except Exception as e:
            logger.warning("Profile creation failed for %s: %s", email, e)
            orphan = self._compensate(identity_id, email) if created else None
            raise ProvisioningError(
                f"Failed to create profile for {email}",
                stage=ProvisioningStage.PROFILE,
                orphaned_identity_id=orphan,
            ) from e

        return ProvisionedIdentity(identity_id=identity_id, email=email, created=created, generated_secret=shown)

    def _ensure_profile(self, identity_id: str, email: str, source: Any) -> None:
        if self._profiles.get_by_id(identity_id) is not None:
            logger.info("Profile %s already present, keeping it", identity_id)
            return
        self._profiles.create(
            profile_id=identity_id,
            name=source.name,
            email=email,
            role=source.role,
            class_name=source.class_name,
            subject=source.subject,
        )

    def _compensate(self, identity_id: str, email: str) -> Optional[str]:
        """Delete an identity this call created. Returns its id if it could not be removed."""
        try:
            self._identities.delete_identity(identity_id)
        except Exception:
            logger.error(
                "Orphaned identity %s (%s) has no profile and could not be deleted; remove it manually",
                identity_id,
                email,
                exc_info=True,
            )
            return identity_id
        logger.info("Rolled back identity %s for %s", identity_id, email)
        return None
