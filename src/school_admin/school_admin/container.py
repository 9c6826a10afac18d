from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.constants import DEFAULT_PENDING_LIMIT
from .core.enums import IdentityBackend, SecretPolicy
from .database.connection import DBConfig, DatabaseConnection
from .identity.mysql_identity_provider import MySQLIdentityProvider
from .identity.provider import IdentityProvider
from .identity.supabase_identity_provider import SupabaseConfig, SupabaseIdentityProvider
from .profiles.mysql_profile_repository import MySQLProfileRepository
from .registrations.credentials import SecretIssuer
from .registrations.mysql_registration_repository import MySQLRegistrationRepository
from .registrations.provisioning import ProvisioningEngine
from .registrations.service import RegistrationService
from .users.service import AccountService, AuthService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    identity_provider: IdentityProvider
    profiles_repo: MySQLProfileRepository
    registrations_repo: MySQLRegistrationRepository
    provisioning_engine: ProvisioningEngine
    registration_service: RegistrationService
    auth_service: AuthService
    account_service: AccountService


def build_identity_provider(
    backend: IdentityBackend,
    conn: DatabaseConnection,
    supabase_config: Optional[dict] = None,
) -> IdentityProvider:
    if backend == IdentityBackend.SUPABASE:
        cfg = supabase_config or {}
        return SupabaseIdentityProvider(
            SupabaseConfig(
                url=str(cfg.get("url") or ""),
                service_role_key=str(cfg.get("service_role_key") or ""),
                anon_key=cfg.get("anon_key") or None,
            )
        )
    return MySQLIdentityProvider(conn)


def build_container(
    *,
    db_config: dict,
    identity_backend: str = IdentityBackend.LOCAL.value,
    supabase_config: Optional[dict] = None,
    secret_policy: str = SecretPolicy.SHOW_ONCE.value,
    pending_limit: int = DEFAULT_PENDING_LIMIT,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    identity_provider = build_identity_provider(IdentityBackend(identity_backend), conn, supabase_config)
    profiles_repo = MySQLProfileRepository(conn)
    registrations_repo = MySQLRegistrationRepository(conn)

    provisioning_engine = ProvisioningEngine(
        identity_provider,
        profiles_repo,
        SecretIssuer(SecretPolicy(secret_policy)),
    )
    registration_service = RegistrationService(
        registrations_repo,
        provisioning_engine,
        identity_provider,
        pending_limit=int(pending_limit),
    )
    auth_service = AuthService(identity_provider, profiles_repo)
    account_service = AccountService(provisioning_engine, profiles_repo)

    return Container(
        conn=conn,
        identity_provider=identity_provider,
        profiles_repo=profiles_repo,
        registrations_repo=registrations_repo,
        provisioning_engine=provisioning_engine,
        registration_service=registration_service,
        auth_service=auth_service,
        account_service=account_service,
    )
